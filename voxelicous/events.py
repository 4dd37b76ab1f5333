"""Profiler event types and aggregated statistics."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import ClassVar

U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1


class CategoryKind(enum.IntEnum):
    """Kinds of profiled work, in declaration order."""

    FRAME = 0
    FRAME_UPDATE = 1
    FRAME_RENDER = 2
    FRAME_PRESENT = 3
    GPU_SYNC = 4
    GPU_SUBMIT = 5
    CHUNK_GENERATION = 10
    CHUNK_COMPRESSION = 11
    GPU_UPLOAD = 12
    GPU_UNLOAD = 13
    WORLD_UPDATE = 14
    CUSTOM = 255


_DISPLAY_NAMES = {
    CategoryKind.FRAME: "Frame",
    CategoryKind.FRAME_UPDATE: "Update",
    CategoryKind.FRAME_RENDER: "Render",
    CategoryKind.FRAME_PRESENT: "Present",
    CategoryKind.GPU_SYNC: "GPU Sync",
    CategoryKind.GPU_SUBMIT: "GPU Submit",
    CategoryKind.CHUNK_GENERATION: "Generation",
    CategoryKind.CHUNK_COMPRESSION: "Compression",
    CategoryKind.GPU_UPLOAD: "GPU Upload",
    CategoryKind.GPU_UNLOAD: "GPU Unload",
    CategoryKind.WORLD_UPDATE: "World Update",
    CategoryKind.CUSTOM: "Custom",
}

# Display order: frame phases in execution order, then streaming work.
_SORT_ORDER = {
    CategoryKind.FRAME: 0,
    CategoryKind.FRAME_UPDATE: 1,
    CategoryKind.GPU_SYNC: 2,
    CategoryKind.FRAME_RENDER: 3,
    CategoryKind.GPU_SUBMIT: 4,
    CategoryKind.FRAME_PRESENT: 5,
    CategoryKind.CHUNK_GENERATION: 10,
    CategoryKind.CHUNK_COMPRESSION: 11,
    CategoryKind.GPU_UPLOAD: 12,
    CategoryKind.GPU_UNLOAD: 13,
    CategoryKind.WORLD_UPDATE: 14,
}


@dataclass(frozen=True)
class EventCategory:
    """A profiling category; custom categories carry a 32-bit id."""

    kind: CategoryKind = CategoryKind.FRAME
    custom_id: int = 0

    FRAME: ClassVar[EventCategory]
    FRAME_UPDATE: ClassVar[EventCategory]
    FRAME_RENDER: ClassVar[EventCategory]
    FRAME_PRESENT: ClassVar[EventCategory]
    GPU_SYNC: ClassVar[EventCategory]
    GPU_SUBMIT: ClassVar[EventCategory]
    CHUNK_GENERATION: ClassVar[EventCategory]
    CHUNK_COMPRESSION: ClassVar[EventCategory]
    GPU_UPLOAD: ClassVar[EventCategory]
    GPU_UNLOAD: ClassVar[EventCategory]
    WORLD_UPDATE: ClassVar[EventCategory]

    def __post_init__(self) -> None:
        kind = CategoryKind(self.kind)
        object.__setattr__(self, "kind", kind)
        if kind is CategoryKind.CUSTOM:
            if not 0 <= self.custom_id <= U32_MAX:
                raise ValueError(f"custom category id out of range: {self.custom_id}")
        elif self.custom_id != 0:
            raise ValueError(f"{kind.name} category takes no custom id")

    @classmethod
    def custom(cls, custom_id: int) -> EventCategory:
        """Create a custom category with the given id."""
        return cls(CategoryKind.CUSTOM, custom_id)

    def display_name(self) -> str:
        """Name used when displaying this category."""
        return _DISPLAY_NAMES[self.kind]

    def sort_key(self) -> int:
        """Key that orders categories for consistent display."""
        if self.kind is CategoryKind.CUSTOM:
            signed = self.custom_id - 2**32 if self.custom_id >= 2**31 else self.custom_id
            return 100 + signed
        return _SORT_ORDER[self.kind]

    def __str__(self) -> str:
        return self.display_name()


for _kind in CategoryKind:
    if _kind is not CategoryKind.CUSTOM:
        setattr(EventCategory, _kind.name, EventCategory(_kind))
del _kind


@dataclass(frozen=True)
class TimingEvent:
    """A single timing measurement, with optional context such as chunk coordinates."""

    category: EventCategory
    duration_ns: int
    context: tuple[int, int, int] = (0, 0, 0)

    def __post_init__(self) -> None:
        context = tuple(self.context)
        if len(context) != 3:
            raise ValueError("context must hold exactly three integers")
        object.__setattr__(self, "context", context)

    @classmethod
    def with_context(
        cls, category: EventCategory, duration_ns: int, context: tuple[int, int, int]
    ) -> TimingEvent:
        """Create a timing event carrying context."""
        return cls(category, duration_ns, tuple(context))


@dataclass
class CategoryStats:
    """Aggregated statistics for one category."""

    category: EventCategory = field(default_factory=EventCategory)
    count: int = 0
    total_ns: int = 0
    min_ns: int = U64_MAX
    max_ns: int = 0
    avg_ns: int = 0
    p95_ns: int = 0

    def reset(self) -> None:
        """Clear all statistics."""
        self.count = 0
        self.total_ns = 0
        self.min_ns = U64_MAX
        self.max_ns = 0
        self.avg_ns = 0
        self.p95_ns = 0

    def record(self, duration_ns: int) -> None:
        """Add one timing."""
        self.count += 1
        self.total_ns += duration_ns
        self.min_ns = min(self.min_ns, duration_ns)
        self.max_ns = max(self.max_ns, duration_ns)
        self.avg_ns = self.total_ns // self.count

    def min_ms(self) -> float:
        return self.min_ns / 1_000_000.0

    def max_ms(self) -> float:
        return self.max_ns / 1_000_000.0

    def avg_ms(self) -> float:
        return self.avg_ns / 1_000_000.0

    def total_ms(self) -> float:
        return self.total_ns / 1_000_000.0


@dataclass(frozen=True)
class QueueSizes:
    """Sizes of the streaming queues."""

    pending_uploads: int = 0
    pending_unloads: int = 0
    load_queue_length: int = 0
    chunks_generating: int = 0
    total_chunks: int = 0
    gpu_chunks: int = 0


@dataclass(frozen=True)
class MemoryStats:
    """Memory usage in bytes."""

    gpu_memory_bytes: int = 0
    chunk_memory_bytes: int = 0


@dataclass
class ProfilerSnapshot:
    """Complete profiling state sent to monitoring clients."""

    frame_number: int = 0
    fps: float = 0.0
    frame_time_ms: float = 0.0
    categories: list[CategoryStats] = field(default_factory=list)
    queues: QueueSizes = field(default_factory=QueueSizes)
    memory: MemoryStats = field(default_factory=MemoryStats)