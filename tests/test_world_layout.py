import struct

import pytest

from voxelicous.world_layout import GpuChunkInfo, WorldRenderPushConstants


def _f32(value):
    return struct.pack("<f", value)


def _u32(value):
    return value.to_bytes(4, "little")


def _u64(value):
    return value.to_bytes(8, "little")


def test_gpu_chunk_info_size():
    assert GpuChunkInfo.SIZE == 32
    info = GpuChunkInfo(1, 2, 3, 4.0, 5.0, 6.0)
    assert len(info.to_bytes()) == 32


def test_gpu_chunk_info_layout():
    info = GpuChunkInfo(0x1122_3344_5566_7788, 7, 5, 32.0, -64.0, 96.0, 0.0)
    data = info.to_bytes()
    assert data[0:8] == _u64(0x1122_3344_5566_7788)
    assert data[8:12] == _u32(7)
    assert data[12:16] == _u32(5)
    assert data[16:20] == _f32(32.0)
    assert data[20:24] == _f32(-64.0)
    assert data[24:28] == _f32(96.0)
    assert data[28:32] == _f32(0.0)


def test_gpu_chunk_info_round_trip():
    info = GpuChunkInfo(0xDEAD_BEEF, 1, 5, 1.5, 2.5, -3.5, 0.0)
    assert GpuChunkInfo.from_bytes(info.to_bytes()) == info


def test_for_chunk_computes_world_offsets():
    info = GpuChunkInfo.for_chunk(0x1000, 3, 5, (2, -1, 4), 32)
    assert info.node_buffer_address == 0x1000
    assert info.root_index == 3
    assert info.octree_depth == 5
    assert (info.world_offset_x, info.world_offset_y, info.world_offset_z) == (
        64.0,
        -32.0,
        128.0,
    )
    assert info.padding == 0.0


def test_for_chunk_origin():
    info = GpuChunkInfo.for_chunk(0, 0, 0, (0, 0, 0), 16)
    assert (info.world_offset_x, info.world_offset_y, info.world_offset_z) == (0.0, 0.0, 0.0)


def test_gpu_chunk_info_rejects_wrong_length():
    with pytest.raises(ValueError):
        GpuChunkInfo.from_bytes(b"\x00" * 31)


def test_gpu_chunk_info_rejects_out_of_range():
    with pytest.raises(ValueError):
        GpuChunkInfo(0, 2**32, 0, 0.0, 0.0, 0.0).to_bytes()


def test_push_constants_size():
    assert WorldRenderPushConstants.SIZE == 24
    pc = WorldRenderPushConstants((1, 1), 1, 1, 1)
    assert len(pc.to_bytes()) == 24


def test_push_constants_layout():
    pc = WorldRenderPushConstants((1920, 1080), 256, 12, 0x1234_5678_9ABC_DEF0)
    data = pc.to_bytes()
    assert data[0:4] == _u32(1920)
    assert data[4:8] == _u32(1080)
    assert data[8:12] == _u32(256)
    assert data[12:16] == _u32(12)
    assert data[16:24] == _u64(0x1234_5678_9ABC_DEF0)


def test_push_constants_round_trip():
    pc = WorldRenderPushConstants((800, 600), 128, 3, 0xABCD)
    assert WorldRenderPushConstants.from_bytes(pc.to_bytes()) == pc


def test_push_constants_rejects_wrong_length():
    with pytest.raises(ValueError):
        WorldRenderPushConstants.from_bytes(b"\x00" * 25)


def test_push_constants_rejects_negative():
    with pytest.raises(ValueError):
        WorldRenderPushConstants((-1, 10), 1, 0, 0).to_bytes()