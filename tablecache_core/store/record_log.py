"""TableCache Record Log Store - Line-Oriented File Storage Backend.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Union

from tablecache_core.config import StorageConfig
from tablecache_core.protocol.codec import RecordLogCodec
from tablecache_core.store.debounce import DebouncedFileStore


class RecordLogCache(DebouncedFileStore):
    """Cache persisted as one ``[table, key, value]`` JSON record per line.

    The file is rewritten as a compacted snapshot on every flush,
    never appended to, so it holds exactly one line per live key.

    Example:
        cache = RecordLogCache("/srv/app")  # data/cache/cache.txt
        await cache.start()
        await cache.set("default", "k", 42)
        await cache.stop()
    """

    DEFAULT_PATH = "data/cache/cache.txt"

    def __init__(
        self,
        base_dir: Union[str, os.PathLike],
        config: Optional[StorageConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(base_dir, RecordLogCodec(logger), config, logger)


__all__ = ["RecordLogCache"]
