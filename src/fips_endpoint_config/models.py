"""Pydantic v2 data models for the resolved configuration and the provider options bag."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fips_endpoint_config.cache import is_cache

_TRUE_VALUES = frozenset({"true", "1"})
_FALSE_VALUES = frozenset({"false", "0"})


def parse_boolean(value: object) -> bool:
    """Parse a boolean-like value strictly.

    Accepts booleans, the integers 1 and 0, and the strings "true", "1",
    "false" and "0" in any case.

    Raises:
        ValueError: If the value is anything else.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
    raise ValueError(f"'use_fips_endpoint' config option must be a boolean value, got {value!r}")


class UseFipsEndpointConfiguration(BaseModel):
    """Resolved value of the use_fips_endpoint setting."""

    model_config = ConfigDict(frozen=True)

    use_fips_endpoint: bool

    @field_validator("use_fips_endpoint", mode="before")
    @classmethod
    def _coerce_boolean(cls, value: object) -> bool:
        return parse_boolean(value)

    def to_dict(self) -> dict[str, bool]:
        return {"use_fips_endpoint": self.use_fips_endpoint}


class Override(BaseModel):
    """Explicit value supplied by the caller; beats every other source."""

    model_config = ConfigDict(frozen=True)

    configuration: UseFipsEndpointConfiguration


class CacheHandle(BaseModel):
    """External cache the resolved value should be read from and written to."""

    model_config = ConfigDict(frozen=True)

    # Any object with get/set/remove, see cache.CacheInterface
    cache: Any


class Unset(BaseModel):
    """Nothing supplied for use_fips_endpoint."""

    model_config = ConfigDict(frozen=True)


FipsEndpointSetting = Override | CacheHandle | Unset


class DefaultProviderOptions(BaseModel):
    """Configuration bag consumed by default_provider().

    Unknown keys are ignored so a full client configuration can be passed
    through unchanged.
    """

    model_config = ConfigDict(extra="ignore")

    region: str | None = None
    use_fips_endpoint: FipsEndpointSetting = Field(default_factory=Unset)
    profile: str | None = None
    filename: str | None = None
    use_aws_shared_config_files: bool = True

    @field_validator("use_fips_endpoint", mode="before")
    @classmethod
    def _classify_setting(cls, value: Any) -> FipsEndpointSetting:
        if isinstance(value, (Override, CacheHandle, Unset)):
            return value
        if value is None:
            return Unset()
        if isinstance(value, UseFipsEndpointConfiguration):
            return Override(configuration=value)
        if is_cache(value):
            return CacheHandle(cache=value)
        return Override(configuration=UseFipsEndpointConfiguration(use_fips_endpoint=value))
