"""Capturing rendered frames to image files."""

from __future__ import annotations

import dataclasses
import logging
import re
import sys
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence, Union

from PIL import Image

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_PATTERN = "screenshot_{}.png"
"""Output pattern used when capture is enabled without one."""

_U64_MAX = 2**64 - 1
_UNSIGNED = re.compile(r"\+?[0-9]+")
_BYTES_PER_PIXEL = 4

PathType = Union[str, "PathLike[str]"]


class ScreenshotError(Exception):
    """A screenshot could not be captured or saved."""


class ReadbackFailedError(ScreenshotError):
    """Pixel data could not be read back from the GPU."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Failed to read screenshot data: {detail}")
        self.detail = detail


class InvalidImageDataError(ScreenshotError):
    """The pixel data does not fit the image dimensions."""

    def __init__(self) -> None:
        super().__init__("Invalid image data")


class SaveFailedError(ScreenshotError):
    """The image could not be written to disk."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Failed to save screenshot: {detail}")
        self.detail = detail


@dataclass(frozen=True)
class ScreenshotConfig:
    """Which frames to capture and where to save them.

    ``output_pattern`` uses ``{}`` as the frame number placeholder.
    The ``with_*`` methods return updated copies.
    """

    enabled: bool = False
    output_pattern: str = ""
    frames: frozenset[int] = frozenset()
    exit_after_capture: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "frames", frozenset(self.frames))

    def with_output(self, pattern: str) -> ScreenshotConfig:
        """Enable capture, saving to ``pattern``."""
        return dataclasses.replace(self, enabled=True, output_pattern=str(pattern))

    def with_frame(self, frame: int) -> ScreenshotConfig:
        """Enable capture and add one frame."""
        return dataclasses.replace(self, enabled=True, frames=self.frames | {frame})

    def with_frames(self, frames: Iterable[int]) -> ScreenshotConfig:
        """Enable capture and add several frames."""
        return dataclasses.replace(
            self, enabled=True, frames=self.frames | frozenset(frames)
        )

    def with_exit_after(self, exit_after: bool) -> ScreenshotConfig:
        """Set whether to exit once every frame has been captured."""
        return dataclasses.replace(self, exit_after_capture=exit_after)

    def output_path(self, frame: int) -> Path:
        """Path the given frame is saved to."""
        return Path(self.output_pattern.replace("{}", str(frame)))

    def should_capture(self, frame: int) -> bool:
        return self.enabled and frame in self.frames

    def all_captured(self, current_frame: int) -> bool:
        """True once ``current_frame`` is past the last frame to capture."""
        if not self.enabled or not self.frames:
            return False
        return current_frame > max(self.frames)

    @classmethod
    def from_args(cls) -> ScreenshotConfig:
        """Build a configuration from the process command line."""
        return cls.parse_args(sys.argv)

    @classmethod
    def parse_args(cls, args: Sequence[str]) -> ScreenshotConfig:
        """Build a configuration from arguments, the first being the program name.

        Recognised: ``-S/--screenshot``, ``-o/--output PATTERN``,
        ``-f/--frames FRAMES`` and ``--exit-after``. Other arguments are ignored.
        """
        enabled = False
        pattern = ""
        frames: set[int] = set()
        exit_after = False

        remaining = iter(args[1:])
        for arg in remaining:
            if arg in ("-S", "--screenshot"):
                enabled = True
            elif arg in ("-o", "--output"):
                value = next(remaining, None)
                if value is not None:
                    pattern = value
            elif arg in ("-f", "--frames"):
                value = next(remaining, None)
                if value is not None:
                    frames = parse_frame_indices(value)
            elif arg == "--exit-after":
                exit_after = True

        if enabled:
            pattern = pattern or DEFAULT_OUTPUT_PATTERN
            frames = frames or {0}

        return cls(enabled, pattern, frozenset(frames), exit_after)


def _parse_u64(text: str) -> Optional[int]:
    if not _UNSIGNED.fullmatch(text):
        return None
    value = int(text)
    return value if value <= _U64_MAX else None


def parse_frame_indices(text: str) -> set[int]:
    """Parse frames such as ``"0,5,10-15"``; ranges are inclusive.

    Parts that are not valid frame numbers or ranges are skipped.
    """
    frames: set[int] = set()
    for part in (piece.strip() for piece in text.split(",")):
        if "-" in part:
            start_text, _, end_text = part.partition("-")
            start = _parse_u64(start_text)
            end = _parse_u64(end_text)
            if start is not None and end is not None:
                frames.update(range(start, end + 1))
        else:
            frame = _parse_u64(part)
            if frame is not None:
                frames.add(frame)
    return frames


def save_screenshot(data: bytes, width: int, height: int, path: PathType) -> None:
    """Save RGBA pixel data (4 bytes per pixel) to ``path``.

    The image format follows the file extension.
    """
    path = Path(path)
    if width < 0 or height < 0:
        raise InvalidImageDataError()
    needed = width * height * _BYTES_PER_PIXEL
    pixels = bytes(data)
    if len(pixels) < needed:
        raise InvalidImageDataError()

    try:
        image = Image.frombytes("RGBA", (width, height), pixels[:needed])
        image.save(path)
    except (OSError, ValueError, KeyError) as exc:
        raise SaveFailedError(str(exc)) from exc

    logger.info("Screenshot saved: %s", path)


def capture_screenshot(
    read_output: Callable[[], bytes],
    dimensions: Callable[[], tuple[int, int]],
    path: PathType,
) -> None:
    """Read pixels with ``read_output`` and save them at the size ``dimensions`` gives."""
    width, height = dimensions()
    try:
        data = read_output()
    except Exception as exc:
        raise ReadbackFailedError(str(exc)) from exc
    save_screenshot(data, width, height, path)