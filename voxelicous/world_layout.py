"""GPU-side layouts for multi-chunk world rendering.

Both structures are packed little-endian and must match the shader
declarations byte for byte.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar

_CHUNK_INFO_LAYOUT = struct.Struct("<QIIffff")
_WORLD_PUSH_LAYOUT = struct.Struct("<2IIIQ")


@dataclass(frozen=True)
class GpuChunkInfo:
    """Per-chunk record read by the world shader (32 bytes).

    Layout: node buffer address (u64), root index (u32), octree depth (u32),
    world offset x/y/z (3 x f32), padding (f32).
    """

    node_buffer_address: int
    root_index: int
    octree_depth: int
    world_offset_x: float
    world_offset_y: float
    world_offset_z: float
    padding: float = 0.0

    SIZE: ClassVar[int] = _CHUNK_INFO_LAYOUT.size

    @classmethod
    def for_chunk(
        cls,
        node_buffer_address: int,
        root_index: int,
        octree_depth: int,
        chunk_pos: tuple[int, int, int],
        chunk_size: int,
    ) -> GpuChunkInfo:
        """Describe an uploaded chunk at ``chunk_pos`` (in chunk units)."""
        x, y, z = chunk_pos
        size = float(chunk_size)
        return cls(
            node_buffer_address=node_buffer_address,
            root_index=root_index,
            octree_depth=octree_depth,
            world_offset_x=float(x) * size,
            world_offset_y=float(y) * size,
            world_offset_z=float(z) * size,
        )

    def to_bytes(self) -> bytes:
        try:
            return _CHUNK_INFO_LAYOUT.pack(
                self.node_buffer_address,
                self.root_index,
                self.octree_depth,
                self.world_offset_x,
                self.world_offset_y,
                self.world_offset_z,
                self.padding,
            )
        except (struct.error, OverflowError) as exc:
            raise ValueError(f"chunk info field out of range: {exc}") from exc

    @classmethod
    def from_bytes(cls, data: bytes) -> GpuChunkInfo:
        if len(data) != cls.SIZE:
            raise ValueError(f"expected {cls.SIZE} bytes, got {len(data)}")
        return cls(*_CHUNK_INFO_LAYOUT.unpack(data))


@dataclass(frozen=True)
class WorldRenderPushConstants:
    """Push constants of the world ray march shader (24 bytes).

    Layout: screen size (2 x u32), max steps (u32), chunk count (u32),
    chunk info buffer address (u64).
    """

    screen_size: tuple[int, int]
    max_steps: int
    chunk_count: int
    chunk_info_address: int

    SIZE: ClassVar[int] = _WORLD_PUSH_LAYOUT.size

    def to_bytes(self) -> bytes:
        width, height = self.screen_size
        try:
            return _WORLD_PUSH_LAYOUT.pack(
                width, height, self.max_steps, self.chunk_count, self.chunk_info_address
            )
        except (struct.error, OverflowError) as exc:
            raise ValueError(f"push constant out of range: {exc}") from exc

    @classmethod
    def from_bytes(cls, data: bytes) -> WorldRenderPushConstants:
        if len(data) != cls.SIZE:
            raise ValueError(f"expected {cls.SIZE} bytes, got {len(data)}")
        width, height, max_steps, count, address = _WORLD_PUSH_LAYOUT.unpack(data)
        return cls((width, height), max_steps, count, address)