"""TableCache Config - Storage Configuration.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from tablecache_core.errors import ConfigError
from tablecache_core.protocol.serializer import get_serializer

DEFAULT_FLUSH_DELAY = 1.0


@dataclass
class StorageConfig:
    """Storage backend configuration.

    Attributes:
        path: Persistence location, relative to the host base directory.
            None selects the backend default under ``data/cache``.
        flush_delay: Debounce window in seconds for file-backed stores
        value_encoding: Value encoding for the embedded store
    """

    path: Optional[str] = None
    flush_delay: float = DEFAULT_FLUSH_DELAY
    value_encoding: str = "json"

    def __post_init__(self) -> None:
        if self.flush_delay < 0:
            raise ConfigError(f"flush_delay must be >= 0, got {self.flush_delay}")
        try:
            get_serializer(self.value_encoding)
        except KeyError:
            raise ConfigError(f"Unknown value_encoding {self.value_encoding!r}")

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "StorageConfig":
        """Build a config from a host-supplied mapping.

        Args:
            data: Mapping of option name to value

        Returns:
            StorageConfig instance

        Raises:
            ConfigError: On unknown options or invalid values
        """
        if not data:
            return cls()

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown storage options: {', '.join(unknown)}")

        options = dict(data)
        if "flush_delay" in options:
            try:
                options["flush_delay"] = float(options["flush_delay"])
            except (TypeError, ValueError):
                raise ConfigError(f"flush_delay must be a number, got {options['flush_delay']!r}")
        if options.get("path") is not None:
            options["path"] = os.fspath(options["path"])

        return cls(**options)


def resolve_path(
    base_dir: Union[str, os.PathLike],
    path: Optional[Union[str, os.PathLike]],
    default: str,
) -> Path:
    """Resolve a configured path against the host base directory.

    Absolute paths are returned unchanged.
    """
    target = Path(path if path is not None else default)
    if target.is_absolute():
        return target
    return (Path(base_dir) / target).resolve()


__all__ = ["StorageConfig", "DEFAULT_FLUSH_DELAY", "resolve_path"]
