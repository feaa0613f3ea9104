"""Custom exception hierarchy for FIPS endpoint configuration resolution.

Every source resolver raises a ConfigurationError subclass when it cannot
produce a value. Chains treat those as "try the next source"; anything else
is a bug and propagates.
"""

from __future__ import annotations


class ConfigurationError(Exception):
    """Base exception for all configuration resolution failures."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class EnvironmentNotFoundError(ConfigurationError):
    """Raised when the designated environment variable is unset or empty."""


class InvalidValueError(ConfigurationError):
    """Raised when a source holds a value that is not a recognised boolean."""


class EnvironmentInvalidError(InvalidValueError):
    """Raised when the environment variable is set to an unparseable value."""


class HomeDirectoryUnresolvableError(ConfigurationError):
    """Raised when no home directory can be determined from the environment."""


class ConfigFileNotFoundError(ConfigurationError):
    """Raised when the resolved shared config file does not exist."""


class ProfileNameEmptyError(ConfigurationError):
    """Raised when the profile name resolves to an empty string."""


class ProfileNotFoundError(ConfigurationError):
    """Raised when the named profile section is absent from the config file."""

    def __init__(self, message: str, profile: str, details: dict | None = None) -> None:
        super().__init__(message, details)
        self.profile = profile


class ConfigFileMalformedError(ConfigurationError):
    """Raised when the shared config file cannot be parsed."""

    def __init__(self, message: str, path: str, details: dict | None = None) -> None:
        super().__init__(message, details)
        self.path = path


class InvalidChainArgumentsError(ValueError):
    """Raised when a provider chain is built without any providers.

    This is a construction-time programming error, not a resolution failure,
    so it is intentionally outside the ConfigurationError hierarchy.
    """
