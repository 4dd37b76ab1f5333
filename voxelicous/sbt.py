"""Shader binding table layout for the hardware ray tracing pipeline.

The table holds one ray generation shader, one miss shader and one
procedural hit group. Each region starts on the base alignment, and
handles within a region are spaced by the handle alignment.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

RAYGEN_COUNT = 1
MISS_COUNT = 1
HIT_COUNT = 1
GROUP_COUNT = RAYGEN_COUNT + MISS_COUNT + HIT_COUNT
"""Shader groups in the pipeline: ray generation, miss, hit group."""


def align_up(value: int, alignment: int) -> int:
    """Round ``value`` up to a multiple of ``alignment``, a power of two."""
    if alignment <= 0 or alignment & (alignment - 1):
        raise ValueError(f"alignment must be a positive power of two: {alignment}")
    if value < 0:
        raise ValueError(f"value must not be negative: {value}")
    return (value + alignment - 1) & ~(alignment - 1)


@dataclass(frozen=True)
class StridedRegion:
    """A strided region of device memory, as passed to a trace-rays call."""

    device_address: int = 0
    stride: int = 0
    size: int = 0

    EMPTY: ClassVar[StridedRegion]


StridedRegion.EMPTY = StridedRegion()


@dataclass(frozen=True)
class ShaderBindingLayout:
    """Offsets, sizes and regions of a shader binding table buffer."""

    handle_size: int
    aligned_handle_size: int
    raygen_size: int
    miss_size: int
    hit_size: int
    raygen_region: StridedRegion
    miss_region: StridedRegion
    hit_region: StridedRegion
    callable_region: StridedRegion = StridedRegion.EMPTY

    @classmethod
    def compute(
        cls,
        handle_size: int,
        handle_alignment: int,
        base_alignment: int,
        buffer_address: int,
    ) -> ShaderBindingLayout:
        """Lay out the table for the device's handle properties.

        ``buffer_address`` is the device address of the table's buffer.
        """
        if handle_size <= 0:
            raise ValueError(f"handle size must be positive: {handle_size}")
        if buffer_address < 0:
            raise ValueError(f"buffer address must not be negative: {buffer_address}")

        aligned = align_up(handle_size, handle_alignment)
        raygen_size = align_up(aligned * RAYGEN_COUNT, base_alignment)
        miss_size = align_up(aligned * MISS_COUNT, base_alignment)
        hit_size = align_up(aligned * HIT_COUNT, base_alignment)

        # The ray generation region's size must equal its stride; the buffer
        # still reserves the full aligned region for it.
        return cls(
            handle_size=handle_size,
            aligned_handle_size=aligned,
            raygen_size=raygen_size,
            miss_size=miss_size,
            hit_size=hit_size,
            raygen_region=StridedRegion(buffer_address, aligned, aligned),
            miss_region=StridedRegion(buffer_address + raygen_size, aligned, miss_size),
            hit_region=StridedRegion(
                buffer_address + raygen_size + miss_size, aligned, hit_size
            ),
        )

    @property
    def total_size(self) -> int:
        """Size in bytes of the whole table buffer."""
        return self.raygen_size + self.miss_size + self.hit_size

    @property
    def group_offsets(self) -> tuple[int, int, int]:
        """Byte offsets of the ray generation, miss and hit group handles."""
        return (0, self.raygen_size, self.raygen_size + self.miss_size)

    def pack_handles(self, handles: bytes) -> bytes:
        """Place the pipeline's group handles into the table's buffer contents.

        ``handles`` holds the three group handles back to back, as returned
        by the driver; the result is ``total_size`` bytes, zero elsewhere.
        """
        handles = bytes(handles)
        expected = self.handle_size * GROUP_COUNT
        if len(handles) != expected:
            raise ValueError(f"expected {expected} bytes of handles, got {len(handles)}")

        table = bytearray(self.total_size)
        for group, offset in enumerate(self.group_offsets):
            start = group * self.handle_size
            table[offset : offset + self.handle_size] = handles[start : start + self.handle_size]
        return bytes(table)