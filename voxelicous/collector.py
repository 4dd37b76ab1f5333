"""Event collection and aggregation."""

from __future__ import annotations

import dataclasses
from collections import deque

from voxelicous.events import (
    CategoryStats,
    EventCategory,
    MemoryStats,
    ProfilerSnapshot,
    QueueSizes,
    TimingEvent,
)
from voxelicous.ring_buffer import RingBuffer

SAMPLE_HISTORY_SIZE = 100
"""Recent samples kept per category for the percentile estimate."""

_MIN_SAMPLES_FOR_P95 = 10


class Collector:
    """Buffers timing events and aggregates them into per-category statistics."""

    def __init__(self) -> None:
        self._buffer = RingBuffer()
        self._stats: dict[EventCategory, CategoryStats] = {}
        self._samples: dict[EventCategory, deque[int]] = {}
        self._queues = QueueSizes()
        self._memory = MemoryStats()
        self._frame_number = 0
        self._fps = 0.0
        self._frame_time_ms = 0.0

    def record(self, event: TimingEvent) -> None:
        """Queue an event; it is dropped if the buffer is full."""
        self._buffer.push(event)

    def record_duration(self, category: EventCategory, duration_ns: int) -> None:
        self.record(TimingEvent(category, duration_ns))

    def set_queue_sizes(self, queues: QueueSizes) -> None:
        self._queues = queues

    def set_memory_stats(self, memory: MemoryStats) -> None:
        self._memory = memory

    def set_frame_info(self, frame_number: int, fps: float, frame_time_ms: float) -> None:
        self._frame_number = frame_number
        self._fps = fps
        self._frame_time_ms = frame_time_ms

    def flush(self) -> None:
        """Process all pending events into the statistics."""
        for event in self._buffer.drain():
            stats = self._stats.setdefault(event.category, CategoryStats(event.category))
            stats.record(event.duration_ns)

            samples = self._samples.setdefault(
                event.category, deque(maxlen=SAMPLE_HISTORY_SIZE)
            )
            samples.append(event.duration_ns)

            if len(samples) >= _MIN_SAMPLES_FOR_P95:
                ordered = sorted(samples)
                stats.p95_ns = ordered[len(ordered) * 95 // 100]

    def reset(self) -> None:
        """Forget all statistics and samples."""
        self._stats.clear()
        self._samples.clear()

    def snapshot(self) -> ProfilerSnapshot:
        """Copy of the current profiling state, categories in display order."""
        categories = sorted(
            (dataclasses.replace(stats) for stats in self._stats.values()),
            key=lambda stats: stats.category.sort_key(),
        )
        return ProfilerSnapshot(
            frame_number=self._frame_number,
            fps=self._fps,
            frame_time_ms=self._frame_time_ms,
            categories=categories,
            queues=self._queues,
            memory=self._memory,
        )

    def get_stats(self, category: EventCategory) -> CategoryStats | None:
        return self._stats.get(category)