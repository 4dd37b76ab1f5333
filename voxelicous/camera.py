"""Camera and view matrices.

Matrices are 4x4 numpy arrays that transform column vectors (``m @ v``).
The projection is right-handed with depth mapped to ``[0, 1]``.
"""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import ClassVar

import numpy as np

Vec3 = tuple[float, float, float]
Columns = tuple[tuple[float, float, float, float], ...]

_UNIFORMS_LAYOUT = struct.Struct("<72f")


def _vec3(value) -> Vec3:
    x, y, z = (float(component) for component in value)
    return (x, y, z)


def _normalize(value) -> np.ndarray:
    vector = np.asarray(value, dtype=float)
    length = float(np.linalg.norm(vector))
    if length == 0.0 or not math.isfinite(length):
        raise ValueError(f"cannot normalize vector {tuple(vector)}")
    return vector / length


@dataclass
class Camera:
    """Perspective camera looking along ``direction``."""

    position: Vec3 = (0.0, 0.0, 5.0)
    direction: Vec3 = (0.0, 0.0, -1.0)
    up: Vec3 = (0.0, 1.0, 0.0)
    fov: float = math.pi / 4
    aspect: float = 16.0 / 9.0
    near: float = 0.1
    far: float = 1000.0

    def __post_init__(self) -> None:
        self.position = _vec3(self.position)
        self.direction = _vec3(self.direction)
        self.up = _vec3(self.up)

    @classmethod
    def from_target(
        cls,
        position: Vec3,
        target: Vec3,
        up: Vec3,
        fov: float,
        aspect: float,
        near: float,
        far: float,
    ) -> Camera:
        """Create a camera at ``position`` looking towards ``target``."""
        direction = _normalize(np.subtract(target, position))
        return cls(position, _vec3(direction), up, fov, aspect, near, far)

    def set_position(self, position: Vec3) -> None:
        self.position = _vec3(position)

    def look_at(self, target: Vec3) -> None:
        """Point the camera at ``target``."""
        self.direction = _vec3(_normalize(np.subtract(target, self.position)))

    def set_aspect(self, aspect: float) -> None:
        self.aspect = float(aspect)

    def uniforms(self) -> CameraUniforms:
        return CameraUniforms.from_camera(self)

    def view_matrix(self) -> np.ndarray:
        eye = np.asarray(self.position, dtype=float)
        forward = _normalize(self.direction)
        side = _normalize(np.cross(forward, np.asarray(self.up, dtype=float)))
        upward = np.cross(side, forward)
        matrix = np.identity(4)
        matrix[0, :3] = side
        matrix[1, :3] = upward
        matrix[2, :3] = -forward
        matrix[0, 3] = -side @ eye
        matrix[1, 3] = -upward @ eye
        matrix[2, 3] = forward @ eye
        return matrix

    def projection_matrix(self) -> np.ndarray:
        half = 0.5 * self.fov
        height_scale = math.cos(half) / math.sin(half)
        width_scale = height_scale / self.aspect
        depth_scale = self.far / (self.near - self.far)
        matrix = np.zeros((4, 4))
        matrix[0, 0] = width_scale
        matrix[1, 1] = height_scale
        matrix[2, 2] = depth_scale
        matrix[3, 2] = -1.0
        matrix[2, 3] = depth_scale * self.near
        return matrix

    def inverse_view_matrix(self) -> np.ndarray:
        return np.linalg.inv(self.view_matrix())

    def inverse_projection_matrix(self) -> np.ndarray:
        return np.linalg.inv(self.projection_matrix())

    def view_projection_matrix(self) -> np.ndarray:
        return self.projection_matrix() @ self.view_matrix()


def _columns(matrix: np.ndarray) -> Columns:
    return tuple(tuple(column) for column in np.asarray(matrix, dtype=float).T.tolist())


@dataclass(frozen=True)
class CameraUniforms:
    """Camera data in the GPU uniform layout: column-major matrices, then vectors."""

    view: Columns
    projection: Columns
    inverse_view: Columns
    inverse_projection: Columns
    position: tuple[float, float, float, float]
    direction: tuple[float, float, float, float]

    SIZE: ClassVar[int] = _UNIFORMS_LAYOUT.size

    @classmethod
    def from_camera(cls, camera: Camera) -> CameraUniforms:
        return cls(
            view=_columns(camera.view_matrix()),
            projection=_columns(camera.projection_matrix()),
            inverse_view=_columns(camera.inverse_view_matrix()),
            inverse_projection=_columns(camera.inverse_projection_matrix()),
            position=(*camera.position, 1.0),
            direction=(*camera.direction, 0.0),
        )

    def to_bytes(self) -> bytes:
        """Pack as little-endian 32-bit floats."""
        values = [
            component
            for matrix in (self.view, self.projection, self.inverse_view, self.inverse_projection)
            for column in matrix
            for component in column
        ]
        values.extend(self.position)
        values.extend(self.direction)
        return _UNIFORMS_LAYOUT.pack(*values)