"""Caching layer with Redis."""

from .client import AsyncRedisClient
from .decorators import cache_invalidate, cached
from .keys import CacheKeys

__all__ = [
    "AsyncRedisClient",
    "CacheKeys",
    "cache_invalidate",
    "cached",
]
