[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "voxelicous"
version = "0.1.0"
description = "Frame profiling statistics, a profiler wire format, screenshot capture, camera maths and GPU data layouts for a voxel ray-tracing engine"
requires-python = ">=3.10"
keywords = ["voxel", "profiler", "ray marching", "camera", "screenshot", "gpu", "shader binding table"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["voxelicous"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
