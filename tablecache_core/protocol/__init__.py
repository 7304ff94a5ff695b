"""Protocol module - Snapshot codecs and value serialization."""

from tablecache_core.protocol.codec import (
    Codec,
    IniCodec,
    RecordLogCodec,
)
from tablecache_core.protocol.serializer import (
    Serializer,
    JSONSerializer,
    MsgPackSerializer,
    get_serializer,
)

__all__ = [
    "Codec",
    "IniCodec",
    "RecordLogCodec",
    "Serializer",
    "JSONSerializer",
    "MsgPackSerializer",
    "get_serializer",
]
