"""Profiling statistics, a profiler wire format, screenshot capture, camera maths and GPU data layouts for a voxel engine."""

__version__ = "0.1.0"