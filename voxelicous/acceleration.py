"""Bounds of the procedural geometry used by hardware ray tracing.

The whole octree is represented by a single axis-aligned box; voxel hits
inside it are resolved by a custom intersection shader.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar

_AABB_LAYOUT = struct.Struct("<6f")


@dataclass(frozen=True)
class AabbPositions:
    """Axis-aligned box as six little-endian 32-bit floats (24 bytes).

    Layout: min x/y/z, then max x/y/z.
    """

    min_x: float
    min_y: float
    min_z: float
    max_x: float
    max_y: float
    max_z: float

    SIZE: ClassVar[int] = _AABB_LAYOUT.size

    @classmethod
    def from_octree_size(cls, size: float) -> AabbPositions:
        """Box from the origin to ``size`` on every axis."""
        extent = float(size)
        return cls(0.0, 0.0, 0.0, extent, extent, extent)

    @classmethod
    def from_octree_depth(cls, depth: int) -> AabbPositions:
        """Box enclosing an octree of the given depth (``2**depth`` per axis)."""
        if not 0 <= depth < 32:
            raise ValueError(f"octree depth out of range: {depth}")
        return cls.from_octree_size(float(1 << depth))

    def to_bytes(self) -> bytes:
        try:
            return _AABB_LAYOUT.pack(
                self.min_x, self.min_y, self.min_z, self.max_x, self.max_y, self.max_z
            )
        except (struct.error, OverflowError) as exc:
            raise ValueError(f"bounds out of range: {exc}") from exc

    @classmethod
    def from_bytes(cls, data: bytes) -> AabbPositions:
        if len(data) != cls.SIZE:
            raise ValueError(f"expected {cls.SIZE} bytes, got {len(data)}")
        return cls(*_AABB_LAYOUT.unpack(data))