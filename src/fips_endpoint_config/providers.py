"""Composable providers that resolve the use_fips_endpoint setting.

A provider is a zero-argument callable returning an awaitable that resolves
to a UseFipsEndpointConfiguration or raises a ConfigurationError. Source
providers (env, ini, fallback, constant) do no work until awaited. The
combinators (chain, memoize, cache) only change when that work happens and
are generic enough to resolve other settings the same way.

Typical use::

    provider = default_provider({"region": "us-east-1"})
    configuration = await provider()
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import functools
import inspect
import logging
import os
import threading
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from fips_endpoint_config.cache import CacheInterface
from fips_endpoint_config.config import (
    CACHE_KEY,
    DEFAULT_PROFILE,
    ENV_USE_FIPS_ENDPOINT,
    INI_USE_FIPS_ENDPOINT,
    get_environment,
)
from fips_endpoint_config.exceptions import (
    ConfigFileNotFoundError,
    ConfigurationError,
    EnvironmentInvalidError,
    EnvironmentNotFoundError,
    InvalidChainArgumentsError,
    InvalidValueError,
    ProfileNameEmptyError,
    ProfileNotFoundError,
)
from fips_endpoint_config.home import default_config_filename
from fips_endpoint_config.models import (
    CacheHandle,
    DefaultProviderOptions,
    Override,
    UseFipsEndpointConfiguration,
    parse_boolean,
)
from fips_endpoint_config.profiles import find_profile, load_profiles
from fips_endpoint_config.regions import is_fips_pseudo_region

logger = logging.getLogger(__name__)

T = TypeVar("T")
Provider = Callable[[], Awaitable[T]]
FipsProvider = Callable[[], Awaitable[UseFipsEndpointConfiguration]]


def _describe(provider: Callable[..., Any]) -> str:
    return getattr(provider, "__qualname__", repr(provider))


async def _call(provider: Provider[T]) -> T:
    return await provider()


def chain(*providers: Provider[T]) -> Provider[T]:
    """Compose providers into one that returns the first successful result.

    Providers are awaited strictly in order. A ConfigurationError moves on to
    the next provider; any other exception propagates immediately. Once a
    provider succeeds, later providers are never called.

    Raises:
        InvalidChainArgumentsError: If no providers are given.
    """
    if not providers:
        raise InvalidChainArgumentsError("No providers in chain")

    async def chained() -> T:
        last_error: ConfigurationError | None = None
        for provider in providers:
            try:
                return await provider()
            except ConfigurationError as exc:
                logger.debug("Provider %s failed, trying next: %s", _describe(provider), exc)
                last_error = exc
        raise last_error  # type: ignore[misc]

    return chained


def _settle(shared: concurrent.futures.Future[T], task: asyncio.Future[T]) -> None:
    if task.cancelled():
        shared.cancel()
    elif task.exception() is not None:
        shared.set_exception(task.exception())
    else:
        shared.set_result(task.result())


def _waiter_for(shared: concurrent.futures.Future[T], loop: asyncio.AbstractEventLoop) -> asyncio.Future[T]:
    """Return a future on loop that mirrors shared without being able to cancel it."""
    waiter = loop.create_future()

    def copy_outcome(done: concurrent.futures.Future[T]) -> None:
        if waiter.done():
            return
        if done.cancelled():
            waiter.cancel()
        elif done.exception() is not None:
            waiter.set_exception(done.exception())
        else:
            waiter.set_result(done.result())

    def schedule(done: concurrent.futures.Future[T]) -> None:
        try:
            loop.call_soon_threadsafe(copy_outcome, done)
        except RuntimeError:
            logger.debug("Event loop closed before memoized result was delivered")

    shared.add_done_callback(schedule)
    return waiter


def memoize(provider: Provider[T]) -> Callable[[], asyncio.Future[T]]:
    """Wrap provider so it runs at most once for the lifetime of the wrapper.

    The first call runs the wrapped provider as a task on the caller's event
    loop and records its outcome in a thread-safe future. Every caller, from
    any thread or loop, observes that one outcome, success or failure. Calls
    made on the same loop return the same future object.

    The resolution lives on the first caller's loop, so that loop must keep
    running until the resolution completes.

    Raises:
        RuntimeError: If called outside a running event loop.
    """
    lock = threading.Lock()
    shared: concurrent.futures.Future[T] | None = None
    task: asyncio.Future[T] | None = None
    waiters: dict[asyncio.AbstractEventLoop, asyncio.Future[T]] = {}

    def memoized() -> asyncio.Future[T]:
        nonlocal shared, task
        loop = asyncio.get_running_loop()
        with lock:
            if shared is None:
                logger.debug("Resolving memoized provider %s", _describe(provider))
                shared = concurrent.futures.Future()
                task = loop.create_task(_call(provider))
                task.add_done_callback(functools.partial(_settle, shared))
            for closed in [other for other in waiters if other.is_closed()]:
                del waiters[closed]
            waiter = waiters.get(loop)
            if waiter is None:
                waiter = waiters[loop] = _waiter_for(shared, loop)
        return waiter

    return memoized


def cache(
    provider: Provider[T],
    cache_handle: CacheInterface,
    cache_key: str = CACHE_KEY,
    model: type[BaseModel] = UseFipsEndpointConfiguration,
    ttl: float = 0,
) -> Provider[T]:
    """Wrap provider with an external cache.

    A cached instance of model is returned as is; a cached mapping (the form
    persistent caches hand back) is validated into model first. On a miss
    the wrapped provider is awaited and its result stored under cache_key.
    Failures are propagated and never cached.

    Args:
        provider: Provider to call on a cache miss.
        cache_handle: Any object with get/set/remove.
        cache_key: Key of the single cache slot for this setting.
        model: Type of the cached value.
        ttl: Entry lifetime in seconds; 0 leaves expiry to the cache.
    """

    async def cached() -> T:
        found = cache_handle.get(cache_key)
        if isinstance(found, model):
            logger.debug("Cache hit for %s", cache_key)
            return found  # type: ignore[return-value]
        if isinstance(found, Mapping):
            try:
                value = model.model_validate(found)
            except ValidationError as exc:
                logger.warning("Ignoring invalid cache entry %s: %s", cache_key, exc)
            else:
                logger.debug("Cache hit for %s (serialized)", cache_key)
                return value  # type: ignore[return-value]

        logger.debug("Cache miss for %s", cache_key)
        value = await provider()
        if ttl:
            cache_handle.set(cache_key, value, ttl)
        else:
            cache_handle.set(cache_key, value)
        return value

    return cached


def env() -> FipsProvider:
    """Provider reading AWS_USE_FIPS_ENDPOINT from the environment."""

    async def from_environment() -> UseFipsEndpointConfiguration:
        value = get_environment().use_fips_endpoint
        if not value:
            raise EnvironmentNotFoundError(
                f"Could not find environment variable config in {ENV_USE_FIPS_ENDPOINT}",
                details={"variable": ENV_USE_FIPS_ENDPOINT},
            )
        try:
            enabled = parse_boolean(value)
        except ValueError as exc:
            raise EnvironmentInvalidError(
                f"Invalid value {value!r} for {ENV_USE_FIPS_ENDPOINT}: expected true, false, 1 or 0",
                details={"variable": ENV_USE_FIPS_ENDPOINT, "value": value},
            ) from exc
        logger.debug("Resolved use_fips_endpoint=%s from %s", enabled, ENV_USE_FIPS_ENDPOINT)
        return UseFipsEndpointConfiguration(use_fips_endpoint=enabled)

    return from_environment


def ini(profile: str | None = None, filename: str | None = None) -> FipsProvider:
    """Provider reading use_fips_endpoint from a shared config file profile.

    The file is filename, else AWS_CONFIG_FILE, else ~/.aws/config. The
    profile is profile, else AWS_PROFILE, else "default". Both are resolved
    when the provider is called.

    A profile that exists but has no use_fips_endpoint key, or an empty one,
    resolves to False instead of failing.
    """

    async def from_profile_file() -> UseFipsEndpointConfiguration:
        environment = get_environment()
        path = filename or environment.config_file or default_config_filename(environment)
        profile_name = (profile or environment.profile or DEFAULT_PROFILE).strip()

        if not os.path.isfile(path):
            raise ConfigFileNotFoundError(
                f"Cannot read configuration from {path}",
                details={"path": path},
            )
        if not profile_name:
            raise ProfileNameEmptyError(
                f"Profile name must not be empty when reading {path}",
                details={"path": path},
            )
        try:
            profiles = load_profiles(path)
        except OSError as exc:
            raise ConfigFileNotFoundError(
                f"Cannot read configuration from {path}",
                details={"path": path, "error": str(exc)},
            ) from exc

        settings = find_profile(profiles, profile_name)
        if settings is None:
            raise ProfileNotFoundError(
                f"'{profile_name}' not found in config file {path}",
                profile=profile_name,
                details={"path": path},
            )

        raw = settings.get(INI_USE_FIPS_ENDPOINT, "").strip()
        if not raw:
            logger.debug("Profile %s in %s has no %s, assuming false", profile_name, path, INI_USE_FIPS_ENDPOINT)
            return UseFipsEndpointConfiguration(use_fips_endpoint=False)
        try:
            enabled = parse_boolean(raw)
        except ValueError as exc:
            raise InvalidValueError(
                f"Invalid value {raw!r} for {INI_USE_FIPS_ENDPOINT} in profile '{profile_name}' ({path})",
                details={"path": path, "profile": profile_name, "value": raw},
            ) from exc
        logger.debug("Resolved use_fips_endpoint=%s from profile %s in %s", enabled, profile_name, path)
        return UseFipsEndpointConfiguration(use_fips_endpoint=enabled)

    return from_profile_file


def fallback(region: str | None = None, default: bool = False) -> FipsProvider:
    """Provider that never fails: True for FIPS pseudo regions, else default."""

    async def from_region() -> UseFipsEndpointConfiguration:
        enabled = True if is_fips_pseudo_region(region) else default
        logger.debug("Resolved use_fips_endpoint=%s from region %s", enabled, region)
        return UseFipsEndpointConfiguration(use_fips_endpoint=enabled)

    return from_region


def constant(value: UseFipsEndpointConfiguration | bool | str) -> FipsProvider:
    """Provider that immediately returns an explicit value."""
    if isinstance(value, UseFipsEndpointConfiguration):
        configuration = value
    else:
        configuration = UseFipsEndpointConfiguration(use_fips_endpoint=value)

    async def from_value() -> UseFipsEndpointConfiguration:
        return configuration

    return from_value


def default_provider(
    config: Mapping[str, Any] | DefaultProviderOptions | None = None,
) -> Callable[[], asyncio.Future[UseFipsEndpointConfiguration]]:
    """Build the memoized default provider chain.

    Precedence: explicit use_fips_endpoint value, then the cache (when
    use_fips_endpoint is a cache), then AWS_USE_FIPS_ENDPOINT, then the
    shared config file (unless use_aws_shared_config_files is false), then
    the region heuristic.

    Args:
        config: Mapping or DefaultProviderOptions with any of region,
            use_fips_endpoint, profile, filename, use_aws_shared_config_files.
    """
    if isinstance(config, DefaultProviderOptions):
        options = config
    else:
        options = DefaultProviderOptions.model_validate(dict(config or {}))

    providers: list[FipsProvider] = [env()]
    if options.use_aws_shared_config_files:
        providers.append(ini(options.profile, options.filename))
    providers.append(fallback(options.region))
    resolver: FipsProvider = chain(*providers)

    setting = options.use_fips_endpoint
    if isinstance(setting, CacheHandle):
        resolver = cache(resolver, setting.cache)
    elif isinstance(setting, Override):
        resolver = chain(constant(setting.configuration), resolver)

    logger.debug("Built default provider with %d sources for region %s", len(providers), options.region)
    return memoize(resolver)


async def unwrap(value: Any) -> UseFipsEndpointConfiguration:
    """Coerce a provider, awaitable, configuration, bool or mapping into a configuration.

    Raises:
        TypeError: If value cannot be interpreted as a use_fips_endpoint setting.
    """
    if callable(value):
        value = value()
    if inspect.isawaitable(value):
        value = await value
    if isinstance(value, UseFipsEndpointConfiguration):
        return value
    if isinstance(value, bool):
        return UseFipsEndpointConfiguration(use_fips_endpoint=value)
    if isinstance(value, Mapping) and INI_USE_FIPS_ENDPOINT in value:
        try:
            return UseFipsEndpointConfiguration(use_fips_endpoint=value[INI_USE_FIPS_ENDPOINT])
        except ValidationError as exc:
            raise TypeError(f"Not a valid use_fips_endpoint configuration argument: {exc}") from exc
    raise TypeError("Not a valid use_fips_endpoint configuration argument.")


def wait(provider: Provider[T]) -> T:
    """Resolve provider synchronously on a new event loop.

    Must not be called from inside a running event loop; await the provider
    there instead.
    """
    return asyncio.run(_call(provider))
