"""Shared test fixtures for the FIPS endpoint configuration test suite.

Every test that touches the environment goes through ``clean_env`` so the
developer's own AWS settings and ~/.aws/config never leak into results.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from fips_endpoint_config.cache import LruCache
from fips_endpoint_config.config import ENV_CONFIG_FILE, ENV_PROFILE, ENV_USE_FIPS_ENDPOINT

INI_FILE = """\
[custom]
use_fips_endpoint = true
[default]
use_fips_endpoint = false
"""

ALT_INI_FILE = """\
[custom]
use_fips_endpoint = false
[default]
use_fips_endpoint = true
"""


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Clear AWS variables, point HOME at a temp dir and return its .aws directory."""
    for var in (ENV_USE_FIPS_ENDPOINT, ENV_PROFILE, ENV_CONFIG_FILE, "HOMEDRIVE", "HOMEPATH"):
        monkeypatch.delenv(var, raising=False)
    home = tmp_path / "home"
    aws_dir = home / ".aws"
    aws_dir.mkdir(parents=True)
    monkeypatch.setenv("HOME", str(home))
    return aws_dir


@pytest.fixture
def config_file(clean_env: Path) -> Path:
    """Write INI_FILE to ~/.aws/config and return its path."""
    path = clean_env / "config"
    path.write_text(INI_FILE)
    return path


@pytest.fixture
def alt_config_file(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Write ALT_INI_FILE to a separate file and point AWS_CONFIG_FILE at it."""
    path = clean_env / "alt_config"
    path.write_text(ALT_INI_FILE)
    monkeypatch.setenv(ENV_CONFIG_FILE, str(path))
    return path


@pytest.fixture
def lru_cache() -> LruCache:
    """Return an empty LruCache."""
    return LruCache()
