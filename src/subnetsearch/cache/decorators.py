"""Caching decorators for async methods.

Cache failures are logged and bypassed; they never fail the wrapped call.
"""

import logging
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from subnetsearch.core.exceptions import CacheError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def cached(
    key_builder: Callable[..., str],
    ttl: int | None = None,
    cache_none: bool = False,
):
    """
    Decorator for caching async method results.

    Args:
        key_builder: Function that takes the same args as decorated method
                    and returns a cache key string.
        ttl: Time to live in seconds; defaults to ``self._cache_ttl`` or 60.
        cache_none: Whether to cache None results (default False).

    Usage:
        @cached(lambda q, size=5, field=None: CacheKeys.autocomplete(q, size, field))
        async def autocomplete(self, q: str, size: int = 5, field: str | None = None):
            ...
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        async def wrapper(self, *args: P.args, **kwargs: P.kwargs) -> R:
            # Get cache from self._cache if available
            cache = getattr(self, "_cache", None)
            if cache is None:
                return await func(self, *args, **kwargs)

            key = key_builder(*args, **kwargs)

            try:
                cached_value = await cache.get(key)
            except CacheError as e:
                logger.warning(f"Bypassing cache: {e.message}")
                return await func(self, *args, **kwargs)
            if cached_value is not None:
                return cached_value

            result = await func(self, *args, **kwargs)

            if result is not None or cache_none:
                expiry = ttl if ttl is not None else getattr(self, "_cache_ttl", 60)
                try:
                    await cache.set(key, result, ttl=expiry)
                except CacheError as e:
                    logger.warning(f"Could not store cache entry: {e.message}")

            return result

        return wrapper

    return decorator


def cache_invalidate(
    prefix_builder: Callable[..., str],
):
    """
    Decorator that invalidates every key under a prefix after the method runs.

    Usage:
        @cache_invalidate(lambda: CacheKeys.autocomplete_prefix())
        async def reconcile(self) -> ReconcileResult:
            ...
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        async def wrapper(self, *args: P.args, **kwargs: P.kwargs) -> R:
            result = await func(self, *args, **kwargs)

            cache = getattr(self, "_cache", None)
            if cache is not None:
                prefix = prefix_builder(*args, **kwargs)
                try:
                    await cache.delete_prefix(prefix)
                except CacheError as e:
                    logger.warning(f"Cache invalidation skipped: {e.message}")

            return result

        return wrapper

    return decorator
