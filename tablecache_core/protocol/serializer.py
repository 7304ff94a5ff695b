"""TableCache Serializer - Value Serialization.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

import msgpack


def dumps(value: Any) -> str:
    """Encode a value as compact single-line JSON text."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def loads(text: str) -> Any:
    """Decode JSON text."""
    return json.loads(text)


class Serializer(ABC):
    """Abstract serializer for stored values.

    Implementations handle different binary encodings of the
    values held by the embedded store.
    """

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Get format name."""
        pass

    @abstractmethod
    def serialize(self, value: Any) -> bytes:
        """Serialize value to bytes.

        Args:
            value: Value to serialize

        Returns:
            Serialized bytes
        """
        pass

    @abstractmethod
    def deserialize(self, data: bytes) -> Any:
        """Deserialize bytes to value.

        Args:
            data: Serialized bytes

        Returns:
            Deserialized value
        """
        pass


class JSONSerializer(Serializer):
    """JSON serializer.

    Human-readable and interoperable with other LevelDB tooling
    that stores JSON values.
    """

    @property
    def format_name(self) -> str:
        return "json"

    def serialize(self, value: Any) -> bytes:
        return dumps(value).encode("utf-8")

    def deserialize(self, data: bytes) -> Any:
        return loads(data.decode("utf-8"))


class MsgPackSerializer(Serializer):
    """MessagePack serializer.

    Compact binary format, faster than JSON.
    """

    @property
    def format_name(self) -> str:
        return "msgpack"

    def serialize(self, value: Any) -> bytes:
        return msgpack.packb(value, use_bin_type=True)

    def deserialize(self, data: bytes) -> Any:
        return msgpack.unpackb(data, raw=False)


class SerializerRegistry:
    """Registry of serializers."""

    def __init__(self):
        self._serializers: dict[str, Serializer] = {}

        self.register(JSONSerializer())
        self.register(MsgPackSerializer())

    def register(self, serializer: Serializer) -> None:
        """Register a serializer.

        Args:
            serializer: Serializer to register
        """
        self._serializers[serializer.format_name] = serializer

    def get(self, format_name: str) -> Serializer:
        """Get serializer by format.

        Args:
            format_name: Format name

        Returns:
            Serializer instance

        Raises:
            KeyError: If format not found
        """
        if format_name not in self._serializers:
            raise KeyError(f"Unknown serializer format: {format_name}")
        return self._serializers[format_name]


# Global registry
_registry = SerializerRegistry()


def get_serializer(format_name: str) -> Serializer:
    """Get serializer by format.

    Args:
        format_name: Format name

    Returns:
        Serializer instance

    Raises:
        KeyError: If format not found
    """
    return _registry.get(format_name)


__all__ = [
    "Serializer",
    "JSONSerializer",
    "MsgPackSerializer",
    "SerializerRegistry",
    "get_serializer",
    "dumps",
    "loads",
]
