import struct

import pytest

from voxelicous.acceleration import AabbPositions


def test_aabb_size():
    assert AabbPositions.SIZE == 24
    assert len(AabbPositions.from_octree_size(1.0).to_bytes()) == 24


def test_aabb_from_octree():
    aabb = AabbPositions.from_octree_size(32.0)
    assert aabb.min_x == 0.0
    assert aabb.min_y == 0.0
    assert aabb.min_z == 0.0
    assert aabb.max_x == 32.0
    assert aabb.max_y == 32.0
    assert aabb.max_z == 32.0


def test_from_octree_depth():
    assert AabbPositions.from_octree_depth(5) == AabbPositions.from_octree_size(32.0)
    assert AabbPositions.from_octree_depth(0).max_x == 1.0


@pytest.mark.parametrize("depth", [-1, 32])
def test_from_octree_depth_rejects_out_of_range(depth):
    with pytest.raises(ValueError):
        AabbPositions.from_octree_depth(depth)


def test_byte_layout():
    data = AabbPositions(1.0, 2.0, 3.0, 4.0, 5.0, 6.0).to_bytes()
    assert data[0:4] == struct.pack("<f", 1.0)
    assert data[12:16] == struct.pack("<f", 4.0)
    assert data[20:24] == struct.pack("<f", 6.0)


def test_round_trip():
    aabb = AabbPositions(-1.5, 0.25, 2.0, 8.0, 16.0, 32.0)
    assert AabbPositions.from_bytes(aabb.to_bytes()) == aabb


def test_from_bytes_wrong_length():
    with pytest.raises(ValueError):
        AabbPositions.from_bytes(b"\x00" * 23)


def test_to_bytes_overflow():
    with pytest.raises(ValueError):
        AabbPositions(0.0, 0.0, 0.0, 1e300, 1.0, 1.0).to_bytes()