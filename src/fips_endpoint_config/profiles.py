"""Shared config file (ini) parsing.

Turns an AWS-style config file into a mapping of profile name to settings.
Non-default profiles may be written either as ``[name]`` or as
``[profile name]``; find_profile() accepts both.
"""

from __future__ import annotations

import configparser
import logging

from fips_endpoint_config.exceptions import ConfigFileMalformedError

logger = logging.getLogger(__name__)

PROFILE_PREFIX = "profile "


def load_profiles(path: str) -> dict[str, dict[str, str]]:
    """Parse the config file at path.

    Args:
        path: Location of an existing ini-style config file.

    Returns:
        Mapping of section name to its key/value pairs.

    Raises:
        ConfigFileMalformedError: If the file is not valid ini syntax.
    """
    parser = configparser.ConfigParser(interpolation=None, default_section="__no_default__")
    try:
        with open(path, encoding="utf-8") as handle:
            parser.read_file(handle)
    except (configparser.Error, UnicodeDecodeError) as exc:
        raise ConfigFileMalformedError(
            f"Invalid config file: {path}",
            path=path,
            details={"error": str(exc)},
        ) from exc

    profiles = {section: dict(parser.items(section)) for section in parser.sections()}
    logger.debug("Loaded %d profiles from %s", len(profiles), path)
    return profiles


def find_profile(profiles: dict[str, dict[str, str]], name: str) -> dict[str, str] | None:
    """Return the settings of profile name, or None if absent."""
    if name in profiles:
        return profiles[name]
    return profiles.get(PROFILE_PREFIX + name)
