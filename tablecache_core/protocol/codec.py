"""TableCache Codec - Snapshot Encodings for File-Backed Stores.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

A codec turns the whole in-memory store (table -> key -> value) into
the text of a snapshot file and back. Values are always carried as
JSON so numbers, booleans, null and nested structures round-trip.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, Optional, Tuple

from tablecache_core.protocol.serializer import dumps, loads

Table = Dict[str, Any]
Store = Dict[str, Table]

_LINE_SPLIT = re.compile(r"[\r\n]+")


def iter_lines(text: str) -> Iterator[str]:
    """Yield non-empty lines, accepting any newline convention."""
    for line in _LINE_SPLIT.split(text):
        if line:
            yield line


class Codec(ABC):
    """Abstract snapshot codec."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Get format name."""
        pass

    @abstractmethod
    def encode(self, store: Store) -> str:
        """Encode the full store.

        Args:
            store: Mapping of table name to table

        Returns:
            Snapshot text
        """
        pass

    @abstractmethod
    def decode(self, text: str) -> Store:
        """Decode snapshot text.

        Malformed content never aborts decoding; see each codec
        for how it degrades.

        Args:
            text: Snapshot text

        Returns:
            Mapping of table name to table
        """
        pass


class IniCodec(Codec):
    """Section-based INI codec.

    Format::

        [table]
        key = <json value>

    One block per table, each followed by a blank line. Parsing is
    tolerant: lines outside a section are ignored,
    repeated sections merge, the last occurrence of a key wins, and a
    value that is not valid JSON is kept as the raw string.
    """

    @property
    def format_name(self) -> str:
        return "ini"

    def encode(self, store: Store) -> str:
        parts = []
        for section, table in store.items():
            parts.append(f"[{section}]\n")
            for key, value in table.items():
                parts.append(f"{key} = {dumps(value)}\n")
            parts.append("\n")
        return "".join(parts)

    def decode(self, text: str) -> Store:
        result: Store = {}
        current = None

        for line in iter_lines(text):
            stripped = line.strip()
            if not stripped:
                continue

            if stripped.startswith("[") and stripped.endswith("]"):
                current = result.setdefault(stripped[1:-1], {})
                continue

            if current is None or "=" not in stripped:
                continue

            key, _, raw = stripped.partition("=")
            current[key.strip()] = self.decode_value(raw.strip())

        return result

    @staticmethod
    def decode_value(raw: str) -> Any:
        """Decode a value, keeping legacy plain strings as-is."""
        try:
            return loads(raw)
        except ValueError:
            return raw


class RecordLogCodec(Codec):
    """Line-oriented record codec.

    Each line is a compact JSON array ``[table, key, value]``. Lines are
    applied in order so a repeated key resolves to its last record. A
    line that does not decode to such a triple is skipped with a warning.
    Encoding emits one line per live key.
    """

    @property
    def format_name(self) -> str:
        return "txt"

    def encode(self, store: Store) -> str:
        return "".join(
            f"{dumps([table, key, value])}\n"
            for table, key, value in self.records(store)
        )

    def decode(self, text: str) -> Store:
        result: Store = {}
        for lineno, line in enumerate(text.splitlines(), 1):
            if not line.strip():
                continue
            try:
                table, key, value = self.decode_record(line)
            except ValueError as e:
                self.logger.warning(f"Skipping malformed cache record on line {lineno}: {e}")
                continue
            result.setdefault(table, {})[key] = value
        return result

    @staticmethod
    def records(store: Store) -> Iterator[Tuple[str, str, Any]]:
        """Flatten a store into (table, key, value) triples."""
        for table, entries in store.items():
            for key, value in entries.items():
                yield table, key, value

    @staticmethod
    def decode_record(line: str) -> Tuple[str, str, Any]:
        """Decode one record line.

        Raises:
            ValueError: If the line is not a [table, key, value] triple
        """
        record = loads(line)
        if not isinstance(record, list) or len(record) != 3:
            raise ValueError(f"expected a 3-element array, got {line[:80]!r}")
        table, key, value = record
        if not isinstance(table, str) or not isinstance(key, str):
            raise ValueError(f"table and key must be strings, got {line[:80]!r}")
        return table, key, value


__all__ = ["Codec", "IniCodec", "RecordLogCodec", "Store", "Table", "iter_lines"]
