# voxelicous

Support code for a voxel ray-tracing engine: per-category frame profiling
statistics and the binary message format used to send them to monitoring
clients, screenshot capture helpers, camera maths, and the byte layouts of
the data structures the GPU shaders read.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Profiling statistics

`voxelicous.events` defines the data: `EventCategory` (built-in categories
such as `EventCategory.FRAME`, `EventCategory.GPU_UPLOAD`, plus
`EventCategory.custom(id)`), `TimingEvent`, `CategoryStats`, `QueueSizes`,
`MemoryStats` and `ProfilerSnapshot`.

`voxelicous.collector.Collector` buffers events in a
`voxelicous.ring_buffer.RingBuffer` (at most 4095 pending events; further
events are dropped) and folds them into statistics when `flush()` is called:
count, total, min, max, integer average and, once ten samples exist, an
approximate 95th percentile over the last 100 samples.

```python
from voxelicous.collector import Collector
from voxelicous.events import EventCategory, QueueSizes

collector = Collector()
collector.record_duration(EventCategory.FRAME, 16_000_000)
collector.record_duration(EventCategory.FRAME, 17_000_000)
collector.set_queue_sizes(QueueSizes(pending_uploads=3))
collector.set_frame_info(frame_number=1, fps=60.0, frame_time_ms=16.6)
collector.flush()

stats = collector.get_stats(EventCategory.FRAME)
print(stats.count, stats.min_ms(), stats.max_ms())   # 2 16.0 17.0

snap = collector.snapshot()          # categories in display order
collector.reset()                    # forget all statistics
```

### Wire format

`voxelicous.protocol` serializes messages in a compact little-endian binary
layout. Server messages are `ServerHello(version)`, `ServerSnapshot(snapshot)`
and `ServerGoodbye()`; client messages are the `ClientMessage` enum
(`HELLO`, `RESET`, `GOODBYE`). `PROTOCOL_VERSION` is 1.

```python
from voxelicous.protocol import ServerHello, encode, decode_server

data = encode(ServerHello())         # u32 length prefix + payload
message = decode_server(data[4:])    # decoders take the payload only
```

`decode_client` decodes client messages. Malformed or truncated data raises
`ProtocolError` (a `ValueError`).

## Screenshots

```python
from voxelicous.screenshot import ScreenshotConfig, parse_frame_indices, save_screenshot

config = ScreenshotConfig.parse_args(["viewer", "-S", "-f", "0,5-7", "-o", "shot_{}.png"])
if config.should_capture(5):
    save_screenshot(rgba_bytes, width, height, config.output_path(5))

parse_frame_indices("0,5-7,10")     # {0, 5, 6, 7, 10}
```

`parse_args` recognises `-S/--screenshot`, `-o/--output PATTERN`,
`-f/--frames FRAMES` and `--exit-after`; with capture enabled and no pattern
or frames given, it uses `screenshot_{}.png` and frame 0. `from_args` reads
`sys.argv`. `ScreenshotConfig` is immutable; `with_output`, `with_frame`,
`with_frames` and `with_exit_after` return updated copies, and
`all_captured(frame)` tells when the last requested frame has passed.

`save_screenshot` writes RGBA data with Pillow, the format following the file
extension. `capture_screenshot(read_output, dimensions, path)` calls the two
callables and saves the result. Errors are `ReadbackFailedError`,
`InvalidImageDataError` and `SaveFailedError`, all subclasses of
`ScreenshotError`.

## Camera

`voxelicous.camera.Camera` gives right-handed view and projection matrices
(depth mapped to `[0, 1]`) as 4x4 numpy arrays acting on column vectors
(`m @ v`). `Camera.from_target(...)` builds a camera looking at a point;
`look_at`, `set_position` and `set_aspect` update it.
`CameraUniforms.from_camera(camera).to_bytes()` produces the 288-byte
uniform buffer: four column-major matrices, then position and direction.

## GPU data layouts

Each record packs to, and parses from, the exact little-endian bytes the
shaders expect; out-of-range fields raise `ValueError`.

- `voxelicous.ray_march.RayMarchPushConstants` (32 bytes), along with the
  `Ray`, `RayHit` and `RayMarchConfig` types.
- `voxelicous.world_layout.GpuChunkInfo` (32 bytes, `for_chunk` computes the
  world offset from a chunk position) and `WorldRenderPushConstants` (24 bytes).
- `voxelicous.acceleration.AabbPositions` (24 bytes), the procedural bounds
  of an octree, from a size or a depth.
- `voxelicous.sbt.ShaderBindingLayout.compute(...)` works out shader binding
  table regions for one ray generation shader, one miss shader and one hit
  group; `pack_handles` lays the driver's handles into the table contents.
  `align_up` rounds up to a power-of-two boundary.

## What this package does not do

It does not talk to a GPU or create any Vulkan objects: it computes layouts
and bytes only. It has no network server, no process-wide profiler instance
and no scope timer; applications drive a `Collector` themselves and send
encoded messages over whatever transport they choose. It has no windowing
or physics code.