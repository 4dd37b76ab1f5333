"""Wire protocol between the profiler server and its clients.

Messages use a compact little-endian binary layout: enum variants as a
``u32`` index, fixed-width integers, ``f32`` floats and sequences prefixed
with a ``u64`` element count. :func:`encode` adds a ``u32`` length prefix.
"""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field
from typing import Union

from voxelicous.events import (
    CategoryKind,
    CategoryStats,
    EventCategory,
    MemoryStats,
    ProfilerSnapshot,
    QueueSizes,
)

PROTOCOL_VERSION = 1


class ProtocolError(ValueError):
    """A message could not be encoded or decoded."""


@dataclass(frozen=True)
class ServerHello:
    """Version handshake sent on connect."""

    version: int = PROTOCOL_VERSION


@dataclass(frozen=True)
class ServerSnapshot:
    """Profiling data snapshot."""

    snapshot: ProfilerSnapshot = field(default_factory=ProfilerSnapshot)


@dataclass(frozen=True)
class ServerGoodbye:
    """The server is shutting down."""


ServerMessage = Union[ServerHello, ServerSnapshot, ServerGoodbye]


class ClientMessage(enum.Enum):
    """Messages a client sends to the server."""

    HELLO = 0
    RESET = 1
    GOODBYE = 2


_U8 = struct.Struct("<B")
_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")
_STATS_BODY = struct.Struct("<IQQQQQ")
_SNAPSHOT_HEAD = struct.Struct("<Qff")
_QUEUES = struct.Struct("<6I")
_MEMORY = struct.Struct("<2Q")

_SERVER_HELLO, _SERVER_SNAPSHOT, _SERVER_GOODBYE = range(3)

# Variant indices follow declaration order, not the category discriminants.
_WIRE_KINDS = tuple(CategoryKind)
_KIND_INDEX = {kind: index for index, kind in enumerate(_WIRE_KINDS)}


def _pack_category(category: EventCategory) -> bytes:
    data = _U32.pack(_KIND_INDEX[category.kind])
    if category.kind is CategoryKind.CUSTOM:
        data += _U32.pack(category.custom_id)
    return data


def _pack_stats(stats: CategoryStats) -> bytes:
    return _pack_category(stats.category) + _STATS_BODY.pack(
        stats.count, stats.total_ns, stats.min_ns, stats.max_ns, stats.avg_ns, stats.p95_ns
    )


def _pack_snapshot(snapshot: ProfilerSnapshot) -> bytes:
    queues = snapshot.queues
    memory = snapshot.memory
    parts = [
        _SNAPSHOT_HEAD.pack(snapshot.frame_number, snapshot.fps, snapshot.frame_time_ms),
        _U64.pack(len(snapshot.categories)),
        *(_pack_stats(stats) for stats in snapshot.categories),
        _QUEUES.pack(
            queues.pending_uploads,
            queues.pending_unloads,
            queues.load_queue_length,
            queues.chunks_generating,
            queues.total_chunks,
            queues.gpu_chunks,
        ),
        _MEMORY.pack(memory.gpu_memory_bytes, memory.chunk_memory_bytes),
    ]
    return b"".join(parts)


def _serialize(message: ServerMessage | ClientMessage) -> bytes:
    if isinstance(message, ServerHello):
        return _U32.pack(_SERVER_HELLO) + _U8.pack(message.version)
    if isinstance(message, ServerSnapshot):
        return _U32.pack(_SERVER_SNAPSHOT) + _pack_snapshot(message.snapshot)
    if isinstance(message, ServerGoodbye):
        return _U32.pack(_SERVER_GOODBYE)
    if isinstance(message, ClientMessage):
        return _U32.pack(message.value)
    raise TypeError(f"not a protocol message: {message!r}")


def encode(message: ServerMessage | ClientMessage) -> bytes:
    """Serialize a message, prefixed with its little-endian ``u32`` length."""
    try:
        payload = _serialize(message)
    except (struct.error, OverflowError) as exc:
        raise ProtocolError(f"cannot encode {type(message).__name__}: {exc}") from exc
    return _U32.pack(len(payload)) + payload


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def unpack(self, layout: struct.Struct) -> tuple:
        end = self._pos + layout.size
        if end > len(self._data):
            raise ProtocolError("unexpected end of message")
        values = layout.unpack_from(self._data, self._pos)
        self._pos = end
        return values

    def u8(self) -> int:
        return self.unpack(_U8)[0]

    def u32(self) -> int:
        return self.unpack(_U32)[0]

    def u64(self) -> int:
        return self.unpack(_U64)[0]

    def category(self) -> EventCategory:
        index = self.u32()
        if index >= len(_WIRE_KINDS):
            raise ProtocolError(f"invalid category variant {index}")
        kind = _WIRE_KINDS[index]
        if kind is CategoryKind.CUSTOM:
            return EventCategory.custom(self.u32())
        return EventCategory(kind)

    def stats(self) -> CategoryStats:
        category = self.category()
        count, total, low, high, avg, p95 = self.unpack(_STATS_BODY)
        return CategoryStats(category, count, total, low, high, avg, p95)

    def snapshot(self) -> ProfilerSnapshot:
        frame_number, fps, frame_time_ms = self.unpack(_SNAPSHOT_HEAD)
        count = self.u64()
        categories = [self.stats() for _ in range(count)]
        queues = QueueSizes(*self.unpack(_QUEUES))
        memory = MemoryStats(*self.unpack(_MEMORY))
        return ProfilerSnapshot(frame_number, fps, frame_time_ms, categories, queues, memory)


def decode_server(data: bytes) -> ServerMessage:
    """Decode a server message (without its length prefix)."""
    reader = _Reader(data)
    variant = reader.u32()
    if variant == _SERVER_HELLO:
        return ServerHello(reader.u8())
    if variant == _SERVER_SNAPSHOT:
        return ServerSnapshot(reader.snapshot())
    if variant == _SERVER_GOODBYE:
        return ServerGoodbye()
    raise ProtocolError(f"invalid server message variant {variant}")


def decode_client(data: bytes) -> ClientMessage:
    """Decode a client message (without its length prefix)."""
    variant = _Reader(data).u32()
    try:
        return ClientMessage(variant)
    except ValueError:
        raise ProtocolError(f"invalid client message variant {variant}") from None