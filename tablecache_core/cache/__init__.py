"""Cache module - Backend selection and host lifecycle.

This module provides the explicit registry hosts use to construct,
start and stop cache backends.
"""

from tablecache_core.cache.registry import (
    BACKENDS,
    CacheRegistry,
    create_cache,
)

__all__ = [
    "BACKENDS",
    "CacheRegistry",
    "create_cache",
]
