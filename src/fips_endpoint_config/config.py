"""Environment access for the FIPS endpoint configuration providers.

Reads the process environment through pydantic-settings. Unlike a typical
application config this is deliberately not cached: providers must observe
the environment as it is when they are invoked.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_USE_FIPS_ENDPOINT = "AWS_USE_FIPS_ENDPOINT"
ENV_PROFILE = "AWS_PROFILE"
ENV_CONFIG_FILE = "AWS_CONFIG_FILE"

INI_USE_FIPS_ENDPOINT = "use_fips_endpoint"
DEFAULT_PROFILE = "default"
CACHE_KEY = "aws_cached_use_fips_endpoint_config"


class EnvironmentSettings(BaseSettings):
    """Snapshot of the environment variables consulted during resolution."""

    use_fips_endpoint: str | None = Field(None, alias=ENV_USE_FIPS_ENDPOINT)
    profile: str | None = Field(None, alias=ENV_PROFILE)
    config_file: str | None = Field(None, alias=ENV_CONFIG_FILE)
    home: str | None = Field(None, alias="HOME")
    home_drive: str | None = Field(None, alias="HOMEDRIVE")
    home_path: str | None = Field(None, alias="HOMEPATH")

    model_config = SettingsConfigDict(
        extra="ignore",
        populate_by_name=True,
    )


def get_environment() -> EnvironmentSettings:
    """Return a fresh EnvironmentSettings read from the current environment."""
    return EnvironmentSettings()
