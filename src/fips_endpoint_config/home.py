"""Home directory lookup across platform conventions.

POSIX systems expose HOME; Windows may instead split it across HOMEDRIVE
and HOMEPATH. Each convention is a strategy tried in order.
"""

from __future__ import annotations

import os
from collections.abc import Callable

from fips_endpoint_config.config import EnvironmentSettings, get_environment
from fips_endpoint_config.exceptions import HomeDirectoryUnresolvableError

HomeStrategy = Callable[[EnvironmentSettings], str | None]


def posix_home(env: EnvironmentSettings) -> str | None:
    return env.home or None


def windows_home(env: EnvironmentSettings) -> str | None:
    if env.home_drive and env.home_path:
        return env.home_drive + env.home_path
    return None


HOME_STRATEGIES: tuple[HomeStrategy, ...] = (posix_home, windows_home)


def resolve_home_directory(
    env: EnvironmentSettings | None = None,
    strategies: tuple[HomeStrategy, ...] = HOME_STRATEGIES,
) -> str:
    """Return the user's home directory.

    Raises:
        HomeDirectoryUnresolvableError: If no strategy yields a directory.
    """
    env = env or get_environment()
    for strategy in strategies:
        home = strategy(env)
        if home:
            return home
    raise HomeDirectoryUnresolvableError(
        "Could not determine the home directory: neither HOME nor HOMEDRIVE/HOMEPATH is set",
    )


def default_config_filename(env: EnvironmentSettings | None = None) -> str:
    """Return the shared config file path, <home>/.aws/config."""
    return os.path.join(resolve_home_directory(env), ".aws", "config")
