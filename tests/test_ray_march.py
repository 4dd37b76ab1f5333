import math
import struct

import pytest

from voxelicous.ray_march import Ray, RayMarchPushConstants


def sample():
    return RayMarchPushConstants(
        screen_size=(1920, 1080),
        max_steps=256,
        node_buffer_address=0x1234_5678_9ABC_DEF0,
        root_index=1,
        octree_depth=5,
    )


def test_push_constants_size():
    assert RayMarchPushConstants.SIZE == 32
    assert len(sample().to_bytes()) == 32


def test_push_constants_layout():
    data = sample().to_bytes()
    assert data[0:4] == struct.pack("<I", 1920)
    assert data[4:8] == struct.pack("<I", 1080)
    assert data[8:12] == struct.pack("<I", 256)
    assert data[12:16] == bytes(4)
    assert data[16:24] == struct.pack("<Q", 0x1234_5678_9ABC_DEF0)
    assert data[24:28] == struct.pack("<I", 1)
    assert data[28:32] == struct.pack("<I", 5)


def test_push_constants_round_trip():
    constants = sample()
    assert RayMarchPushConstants.from_bytes(constants.to_bytes()) == constants


def test_push_constants_wrong_length():
    with pytest.raises(ValueError):
        RayMarchPushConstants.from_bytes(bytes(31))


def test_push_constants_out_of_range():
    bad = RayMarchPushConstants((1, 1), -1, 0, 0, 0)
    with pytest.raises(ValueError):
        bad.to_bytes()


def test_ray_direction_normalized():
    ray = Ray((0.0, 0.0, 0.0), (3.0, 0.0, 4.0))
    assert math.hypot(*ray.direction) == pytest.approx(1.0)
    assert ray.direction == pytest.approx((0.6, 0.0, 0.8))


def test_ray_at():
    ray = Ray((1.0, 2.0, 3.0), (0.0, 0.0, 2.0))
    assert ray.at(0.0) == (1.0, 2.0, 3.0)
    assert ray.at(4.0) == pytest.approx((1.0, 2.0, 7.0))


def test_ray_zero_direction_rejected():
    with pytest.raises(ValueError):
        Ray((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))