"""Ray marching types for the compute-shader render path."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import ClassVar

Vec3 = tuple[float, float, float]

_PUSH_LAYOUT = struct.Struct("<2IIIQII")


@dataclass(frozen=True)
class Ray:
    """Ray for marching through voxel data; the direction is normalized."""

    origin: Vec3
    direction: Vec3

    def __post_init__(self) -> None:
        origin = tuple(float(component) for component in self.origin)
        direction = tuple(float(component) for component in self.direction)
        if len(origin) != 3 or len(direction) != 3:
            raise ValueError("origin and direction must have three components")
        length = math.hypot(*direction)
        if length == 0.0 or not math.isfinite(length):
            raise ValueError(f"cannot normalize direction {direction}")
        object.__setattr__(self, "origin", origin)
        object.__setattr__(self, "direction", tuple(c / length for c in direction))

    def at(self, t: float) -> Vec3:
        """Point at distance ``t`` along the ray."""
        ox, oy, oz = self.origin
        dx, dy, dz = self.direction
        return (ox + dx * t, oy + dy * t, oz + dz * t)


@dataclass(frozen=True)
class RayHit:
    """Hit found by ray marching."""

    t: float
    position: Vec3
    normal: Vec3
    block_id: int


@dataclass
class RayMarchConfig:
    """Limits for the ray marcher."""

    max_steps: int = 256
    max_distance: float = 1000.0
    epsilon: float = 0.001


@dataclass(frozen=True)
class RayMarchPushConstants:
    """Push constants of the SVO ray march shader (32 bytes, little-endian).

    Layout: screen size (2 x u32), max steps (u32), padding (u32),
    node buffer address (u64), root index (u32), octree depth (u32).
    """

    screen_size: tuple[int, int]
    max_steps: int
    node_buffer_address: int
    root_index: int
    octree_depth: int
    padding: int = 0

    SIZE: ClassVar[int] = _PUSH_LAYOUT.size

    def to_bytes(self) -> bytes:
        width, height = self.screen_size
        try:
            return _PUSH_LAYOUT.pack(
                width,
                height,
                self.max_steps,
                self.padding,
                self.node_buffer_address,
                self.root_index,
                self.octree_depth,
            )
        except struct.error as exc:
            raise ValueError(f"push constant out of range: {exc}") from exc

    @classmethod
    def from_bytes(cls, data: bytes) -> RayMarchPushConstants:
        if len(data) != cls.SIZE:
            raise ValueError(f"expected {cls.SIZE} bytes, got {len(data)}")
        width, height, max_steps, padding, address, root, depth = _PUSH_LAYOUT.unpack(data)
        return cls((width, height), max_steps, address, root, depth, padding)