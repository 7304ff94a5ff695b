"""TableCache Errors - Exception Hierarchy.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations


class CacheError(Exception):
    """Base class for all cache errors."""


class CacheNotReadyError(CacheError):
    """Raised when a backend is used before start() or after stop()."""


class InvalidTableName(CacheError, ValueError):
    """Raised when a table name cannot be mapped to a storage namespace."""


class ConfigError(CacheError, ValueError):
    """Raised for invalid storage configuration."""


class UnknownBackendError(CacheError, KeyError):
    """Raised when a backend kind is not registered."""


__all__ = [
    "CacheError",
    "CacheNotReadyError",
    "InvalidTableName",
    "ConfigError",
    "UnknownBackendError",
]
