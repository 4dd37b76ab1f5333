"""Bounded, thread-safe FIFO of timing events."""

from __future__ import annotations

import threading
from collections import deque

from voxelicous.events import TimingEvent

BUFFER_SIZE = 4096


class RingBuffer:
    """Queue of timing events that holds at most ``BUFFER_SIZE - 1`` entries.

    Pushing to a full buffer drops the event, as profiling tolerates loss.
    """

    capacity = BUFFER_SIZE - 1

    def __init__(self) -> None:
        self._events: deque[TimingEvent] = deque()
        self._lock = threading.Lock()

    def push(self, event: TimingEvent) -> bool:
        """Append an event; return False if the buffer is full."""
        with self._lock:
            if len(self._events) >= self.capacity:
                return False
            self._events.append(event)
            return True

    def pop(self) -> TimingEvent | None:
        """Remove and return the oldest event, or None when empty."""
        with self._lock:
            return self._events.popleft() if self._events else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def is_empty(self) -> bool:
        return len(self) == 0

    def drain(self) -> list[TimingEvent]:
        """Remove and return all events, oldest first."""
        with self._lock:
            events = list(self._events)
            self._events.clear()
            return events