"""FIPS endpoint configuration - layered resolution of the use_fips_endpoint client setting."""

__version__ = "0.1.0"

from fips_endpoint_config.cache import CacheInterface, JsonFileCache, LruCache
from fips_endpoint_config.config import (
    CACHE_KEY,
    ENV_CONFIG_FILE,
    ENV_PROFILE,
    ENV_USE_FIPS_ENDPOINT,
    EnvironmentSettings,
    get_environment,
)
from fips_endpoint_config.exceptions import (
    ConfigFileMalformedError,
    ConfigFileNotFoundError,
    ConfigurationError,
    EnvironmentInvalidError,
    EnvironmentNotFoundError,
    HomeDirectoryUnresolvableError,
    InvalidChainArgumentsError,
    InvalidValueError,
    ProfileNameEmptyError,
    ProfileNotFoundError,
)
from fips_endpoint_config.models import (
    CacheHandle,
    DefaultProviderOptions,
    Override,
    Unset,
    UseFipsEndpointConfiguration,
)
from fips_endpoint_config.providers import (
    cache,
    chain,
    constant,
    default_provider,
    env,
    fallback,
    ini,
    memoize,
    unwrap,
    wait,
)

__all__ = [
    "__version__",
    "CACHE_KEY",
    "ENV_CONFIG_FILE",
    "ENV_PROFILE",
    "ENV_USE_FIPS_ENDPOINT",
    "EnvironmentSettings",
    "get_environment",
    "CacheInterface",
    "LruCache",
    "JsonFileCache",
    "ConfigurationError",
    "EnvironmentNotFoundError",
    "EnvironmentInvalidError",
    "InvalidValueError",
    "HomeDirectoryUnresolvableError",
    "ConfigFileNotFoundError",
    "ProfileNameEmptyError",
    "ProfileNotFoundError",
    "ConfigFileMalformedError",
    "InvalidChainArgumentsError",
    "UseFipsEndpointConfiguration",
    "DefaultProviderOptions",
    "Override",
    "CacheHandle",
    "Unset",
    "chain",
    "memoize",
    "cache",
    "env",
    "ini",
    "fallback",
    "constant",
    "default_provider",
    "unwrap",
    "wait",
]
