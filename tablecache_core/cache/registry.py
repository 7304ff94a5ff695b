"""TableCache Registry - Backend Selection and Lifecycle.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Type, Union

from tablecache_core.config import StorageConfig
from tablecache_core.errors import UnknownBackendError
from tablecache_core.store.backend import Cache
from tablecache_core.store.ini import IniFileCache
from tablecache_core.store.leveldb import LevelDBCache
from tablecache_core.store.record_log import RecordLogCache

logger = logging.getLogger(__name__)

BACKENDS: Dict[str, Type[Cache]] = {
    "inidb": IniFileCache,
    "txtdb": RecordLogCache,
    "leveldb": LevelDBCache,
}


def create_cache(
    kind: str,
    base_dir: Union[str, os.PathLike],
    config: Optional[Union[StorageConfig, Mapping[str, Any]]] = None,
    logger: Optional[logging.Logger] = None,
) -> Cache:
    """Construct a cache backend.

    Args:
        kind: Backend name (inidb, txtdb, leveldb)
        base_dir: Host base directory
        config: StorageConfig or a mapping of options
        logger: Logging sink supplied by the host

    Returns:
        Unstarted cache instance

    Raises:
        UnknownBackendError: If kind is not registered
        ConfigError: If the options are invalid
    """
    try:
        backend = BACKENDS[kind]
    except KeyError:
        raise UnknownBackendError(
            f"Unknown cache backend {kind!r}, expected one of {', '.join(BACKENDS)}"
        ) from None

    if not isinstance(config, StorageConfig):
        config = StorageConfig.from_dict(config)

    return backend(base_dir, config=config, logger=logger)


class CacheRegistry:
    """Named cache instances owned by a host.

    Consumers receive caches from the registry explicitly instead of
    looking them up on a shared context.

    Example:
        registry = CacheRegistry("/srv/app")
        registry.create("main", "leveldb")
        await registry.start_all()
        cache = registry["main"]
        ...
        await registry.stop_all()
    """

    DEFAULT_NAME = "cache"

    def __init__(
        self,
        base_dir: Union[str, os.PathLike],
        logger: Optional[logging.Logger] = None,
    ):
        self.base_dir = base_dir
        self.logger = logger
        self._caches: Dict[str, Cache] = {}

    def register(self, cache: Cache, name: str = DEFAULT_NAME) -> Cache:
        """Register an existing cache under a name.

        Raises:
            ValueError: If the name is already taken
        """
        if name in self._caches:
            raise ValueError(f"Cache {name!r} is already registered")
        self._caches[name] = cache
        return cache

    def create(
        self,
        name: str,
        kind: str,
        config: Optional[Union[StorageConfig, Mapping[str, Any]]] = None,
    ) -> Cache:
        """Construct and register a cache backend."""
        return self.register(create_cache(kind, self.base_dir, config, self.logger), name)

    def get(self, name: str = DEFAULT_NAME) -> Optional[Cache]:
        """Get cache by name."""
        return self._caches.get(name)

    def list(self) -> List[str]:
        """List registered cache names."""
        return list(self._caches.keys())

    async def start_all(self) -> None:
        """Start every registered cache in registration order.

        If a cache fails to start, the caches started before it are
        stopped again and the failure is raised.
        """
        started: List[Tuple[str, Cache]] = []
        for name, cache in self._caches.items():
            try:
                await cache.start()
            except Exception as e:
                logger.error(f"Failed to start cache {name!r}: {e}")
                for started_name, started_cache in reversed(started):
                    try:
                        await started_cache.stop()
                    except Exception as stop_error:
                        logger.error(f"Failed to stop cache {started_name!r}: {stop_error}")
                raise
            started.append((name, cache))
            logger.debug(f"Started cache {name!r}: {cache!r}")

    async def stop_all(self) -> None:
        """Stop every registered cache in reverse registration order.

        Every cache is stopped even if an earlier one fails; the first
        failure is raised afterwards.
        """
        first_error: Optional[BaseException] = None
        for name, cache in reversed(list(self._caches.items())):
            try:
                await cache.stop()
            except Exception as e:
                logger.error(f"Failed to stop cache {name!r}: {e}")
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    def __getitem__(self, name: str) -> Cache:
        return self._caches[name]

    def __contains__(self, name: str) -> bool:
        return name in self._caches

    def __len__(self) -> int:
        return len(self._caches)

    def __iter__(self) -> Iterator[Cache]:
        return iter(self._caches.values())


__all__ = ["BACKENDS", "create_cache", "CacheRegistry"]
