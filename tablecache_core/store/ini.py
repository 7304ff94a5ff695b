"""TableCache INI Store - INI File Storage Backend.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Union

from tablecache_core.config import StorageConfig
from tablecache_core.protocol.codec import IniCodec
from tablecache_core.store.debounce import DebouncedFileStore


class IniFileCache(DebouncedFileStore):
    """Cache persisted as one INI section per table.

    Example:
        cache = IniFileCache("/srv/app")  # data/cache/cache.ini
        await cache.start()
        await cache.set("default", "greeting", "hello")
        await cache.stop()
    """

    DEFAULT_PATH = "data/cache/cache.ini"

    def __init__(
        self,
        base_dir: Union[str, os.PathLike],
        config: Optional[StorageConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(base_dir, IniCodec(logger), config, logger)


__all__ = ["IniFileCache"]
