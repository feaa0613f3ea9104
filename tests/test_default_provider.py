"""Tests for the assembled default provider chain."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from fips_endpoint_config.cache import LruCache
from fips_endpoint_config.config import CACHE_KEY, ENV_PROFILE, ENV_USE_FIPS_ENDPOINT
from fips_endpoint_config.models import DefaultProviderOptions, UseFipsEndpointConfiguration
from fips_endpoint_config.providers import default_provider, wait

ENABLED = UseFipsEndpointConfiguration(use_fips_endpoint=True)
DISABLED = UseFipsEndpointConfiguration(use_fips_endpoint=False)


class TestDefaultProvider:
    @pytest.mark.asyncio
    async def test_creates_from_environment_variables(
        self, clean_env: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(ENV_USE_FIPS_ENDPOINT, "true")
        result = await default_provider({"region": "us-east-1"})()
        assert result.to_dict() == ENABLED.to_dict()

    @pytest.mark.asyncio
    async def test_creates_from_fips_region(self, clean_env: Path) -> None:
        result = await default_provider({"region": "fips-us-east-1"})()
        assert result == ENABLED

    @pytest.mark.asyncio
    async def test_uses_class_default_options(self, clean_env: Path) -> None:
        result = await default_provider({"region": "us-east-1"})()
        assert result == DISABLED

    @pytest.mark.asyncio
    async def test_no_region_defaults_to_false(self, clean_env: Path) -> None:
        result = await default_provider()()
        assert result == DISABLED

    @pytest.mark.asyncio
    async def test_uses_ini_with_shared_config_files_enabled(self, alt_config_file: Path) -> None:
        provider = default_provider({"use_aws_shared_config_files": True, "region": "us-east-1"})
        assert await provider() == ENABLED

    @pytest.mark.asyncio
    async def test_ignores_ini_with_shared_config_files_disabled(self, alt_config_file: Path) -> None:
        provider = default_provider({"use_aws_shared_config_files": False, "region": "us-east-1"})
        assert await provider() == DISABLED

    @pytest.mark.asyncio
    async def test_selects_environment_over_ini(
        self, config_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(ENV_USE_FIPS_ENDPOINT, "false")
        monkeypatch.setenv(ENV_PROFILE, "custom")
        result = await default_provider({"region": "us-east-1"})()
        assert result == DISABLED

    @pytest.mark.asyncio
    async def test_selects_ini_over_region(self, config_file: Path) -> None:
        result = await default_provider({"region": "fips-us-east-1"})()
        assert result == DISABLED

    @pytest.mark.asyncio
    async def test_uses_profile_and_filename_from_options(self, clean_env: Path, tmp_path: Path) -> None:
        path = tmp_path / "team_config"
        path.write_text("[team]\nuse_fips_endpoint = true\n")
        provider = default_provider({"profile": "team", "filename": str(path), "region": "us-east-1"})
        assert await provider() == ENABLED

    @pytest.mark.asyncio
    async def test_invalid_environment_falls_through(
        self, clean_env: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(ENV_USE_FIPS_ENDPOINT, "sometimes")
        result = await default_provider({"region": "fips-us-east-1"})()
        assert result == ENABLED

    @pytest.mark.asyncio
    async def test_malformed_ini_falls_through_to_region(self, clean_env: Path) -> None:
        (clean_env / "config").write_text("wef \n=\nwef")
        result = await default_provider({"region": "fips-us-east-1"})()
        assert result == ENABLED

    @pytest.mark.asyncio
    async def test_creates_from_cache(self, clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_USE_FIPS_ENDPOINT, "false")
        mock_cache = MagicMock()
        mock_cache.get.return_value = ENABLED

        provider = default_provider({"use_fips_endpoint": mock_cache, "region": "us-east-1"})
        result = await provider()

        assert isinstance(result, UseFipsEndpointConfiguration)
        assert result.to_dict() == ENABLED.to_dict()
        mock_cache.get.assert_called_with(CACHE_KEY)

    @pytest.mark.asyncio
    async def test_cache_miss_writes_resolved_value(
        self, clean_env: Path, monkeypatch: pytest.MonkeyPatch, lru_cache: LruCache
    ) -> None:
        monkeypatch.setenv(ENV_USE_FIPS_ENDPOINT, "true")
        result = await default_provider({"use_fips_endpoint": lru_cache, "region": "us-east-1"})()
        assert result == ENABLED
        assert lru_cache.get(CACHE_KEY) is result
        assert len(lru_cache) == 1

    @pytest.mark.asyncio
    async def test_cache_shared_between_providers(
        self, clean_env: Path, monkeypatch: pytest.MonkeyPatch, lru_cache: LruCache
    ) -> None:
        monkeypatch.setenv(ENV_USE_FIPS_ENDPOINT, "true")
        first = await default_provider({"use_fips_endpoint": lru_cache})()
        monkeypatch.setenv(ENV_USE_FIPS_ENDPOINT, "false")
        second = await default_provider({"use_fips_endpoint": lru_cache})()
        assert second is first

    @pytest.mark.asyncio
    async def test_explicit_bool_overrides_environment(
        self, clean_env: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(ENV_USE_FIPS_ENDPOINT, "false")
        result = await default_provider({"use_fips_endpoint": True, "region": "us-east-1"})()
        assert result == ENABLED

    @pytest.mark.asyncio
    async def test_explicit_configuration_returned_as_is(self, clean_env: Path) -> None:
        result = await default_provider({"use_fips_endpoint": DISABLED, "region": "fips-us-east-1"})()
        assert result is DISABLED

    def test_invalid_override_raises_at_build(self) -> None:
        with pytest.raises(ValidationError):
            default_provider({"use_fips_endpoint": "maybe"})

    @pytest.mark.asyncio
    async def test_accepts_options_model(self, clean_env: Path) -> None:
        options = DefaultProviderOptions(region="fips-us-east-1", use_aws_shared_config_files=False)
        assert await default_provider(options)() == ENABLED

    @pytest.mark.asyncio
    async def test_memoizes_result(self, clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_USE_FIPS_ENDPOINT, "true")
        provider = default_provider({"region": "us-east-1"})
        first = await provider()
        monkeypatch.setenv(ENV_USE_FIPS_ENDPOINT, "false")
        second = await provider()
        assert second is first
        assert provider() is provider()

    def test_synchronous_wait(self, clean_env: Path) -> None:
        assert wait(default_provider({"region": "fips-us-east-1"})) == ENABLED
