from voxelicous.collector import Collector
from voxelicous.events import EventCategory, MemoryStats, QueueSizes
from voxelicous.ring_buffer import BUFFER_SIZE


def test_record_and_flush():
    collector = Collector()
    collector.record_duration(EventCategory.FRAME, 16_000_000)
    collector.record_duration(EventCategory.FRAME, 17_000_000)
    collector.record_duration(EventCategory.CHUNK_GENERATION, 5_000_000)
    collector.flush()

    frame_stats = collector.get_stats(EventCategory.FRAME)
    assert frame_stats.count == 2
    assert frame_stats.min_ns == 16_000_000
    assert frame_stats.max_ns == 17_000_000

    gen_stats = collector.get_stats(EventCategory.CHUNK_GENERATION)
    assert gen_stats.count == 1


def test_snapshot_contains_all_categories():
    collector = Collector()
    collector.record_duration(EventCategory.FRAME, 16_000_000)
    collector.record_duration(EventCategory.FRAME_UPDATE, 4_000_000)
    collector.record_duration(EventCategory.FRAME_RENDER, 10_000_000)
    collector.flush()

    assert len(collector.snapshot().categories) == 3


def test_reset_clears_stats():
    collector = Collector()
    collector.record_duration(EventCategory.FRAME, 16_000_000)
    collector.flush()
    assert collector.get_stats(EventCategory.FRAME) is not None
    assert collector.get_stats(EventCategory.FRAME).count == 1

    collector.reset()
    assert collector.get_stats(EventCategory.FRAME) is None


def test_events_unseen_before_flush():
    collector = Collector()
    collector.record_duration(EventCategory.FRAME, 1)
    assert collector.get_stats(EventCategory.FRAME) is None
    assert collector.snapshot().categories == []


def test_snapshot_order():
    collector = Collector()
    for category in (
        EventCategory.custom(3),
        EventCategory.FRAME_RENDER,
        EventCategory.GPU_SYNC,
        EventCategory.FRAME,
    ):
        collector.record_duration(category, 1000)
    collector.flush()

    order = [stats.category for stats in collector.snapshot().categories]
    assert order == [
        EventCategory.FRAME,
        EventCategory.GPU_SYNC,
        EventCategory.FRAME_RENDER,
        EventCategory.custom(3),
    ]


def test_p95_needs_ten_samples():
    collector = Collector()
    for value in range(1, 10):
        collector.record_duration(EventCategory.FRAME, value)
    collector.flush()
    assert collector.get_stats(EventCategory.FRAME).p95_ns == 0

    collector.record_duration(EventCategory.FRAME, 10)
    collector.flush()
    assert collector.get_stats(EventCategory.FRAME).p95_ns == 10


def test_p95_uses_recent_history():
    collector = Collector()
    for value in range(1, 151):
        collector.record_duration(EventCategory.FRAME, value)
    collector.flush()
    stats = collector.get_stats(EventCategory.FRAME)
    assert stats.count == 150
    assert stats.p95_ns == 146


def test_snapshot_carries_frame_queue_and_memory_info():
    collector = Collector()
    queues = QueueSizes(pending_uploads=3, total_chunks=20)
    memory = MemoryStats(gpu_memory_bytes=4096)
    collector.set_queue_sizes(queues)
    collector.set_memory_stats(memory)
    collector.set_frame_info(42, 60.0, 16.5)

    snapshot = collector.snapshot()
    assert snapshot.frame_number == 42
    assert snapshot.fps == 60.0
    assert snapshot.frame_time_ms == 16.5
    assert snapshot.queues == queues
    assert snapshot.memory == memory


def test_snapshot_is_a_copy():
    collector = Collector()
    collector.record_duration(EventCategory.FRAME, 100)
    collector.flush()
    snapshot = collector.snapshot()
    snapshot.categories[0].count = 999
    assert collector.get_stats(EventCategory.FRAME).count == 1


def test_events_beyond_buffer_are_dropped():
    collector = Collector()
    for value in range(BUFFER_SIZE + 100):
        collector.record_duration(EventCategory.FRAME, value)
    collector.flush()
    assert collector.get_stats(EventCategory.FRAME).count == BUFFER_SIZE - 1