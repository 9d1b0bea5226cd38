"""Image export for rendered framebuffers.

The renderer hands back a uint8 array; writing it anywhere goes through a
small sink interface so that the core does not depend on a particular output
target. PPMWriter implements the sink for the plain-text PPM format:

    P3
    <width> <height>
    255
    R G B          (one line per pixel, row-major, top row first)

Supported formats:
    - PPM (plain text, P3) via PPMWriter / save_ppm
    - PNG (8-bit) via Pillow / save_png

Example:
    >>> import sys
    >>> import numpy as np
    >>> from spheretracer.preview.export import PPMWriter, write_image
    >>> write_image(np.zeros((1, 2, 3), dtype=np.uint8), PPMWriter(sys.stdout))
    P3
    2 1
    255
    0 0 0
    0 0 0
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, TextIO

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

# Largest channel value written to image headers
MAX_CHANNEL_VALUE = 255


class ImageSink(Protocol):
    """Destination for a streamed image: a header, then pixels in order."""

    def write_header(self, width: int, height: int, maxval: int) -> None: ...

    def write_pixel(self, r: int, g: int, b: int) -> None: ...

    def flush(self) -> None: ...


class PPMWriter:
    """Sink writing plain-text PPM (P3) to a text stream.

    The writer does not own the stream; buffering is left to it and
    flush() is forwarded.
    """

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def write_header(self, width: int, height: int, maxval: int) -> None:
        self._stream.write(f"P3\n{width} {height}\n{maxval}\n")

    def write_pixel(self, r: int, g: int, b: int) -> None:
        self._stream.write(f"{r} {g} {b}\n")

    def flush(self) -> None:
        self._stream.flush()


def _check_framebuffer(framebuffer: npt.NDArray[np.uint8]) -> None:
    if framebuffer.ndim != 3 or framebuffer.shape[2] != 3:
        raise ValueError(f"Expected a (H, W, 3) framebuffer, got shape {framebuffer.shape}")


def write_image(framebuffer: npt.NDArray[np.uint8], sink: ImageSink) -> None:
    """Stream a framebuffer into a sink.

    Args:
        framebuffer: uint8 array of shape (H, W, 3).
        sink: Destination; receives the header, then every pixel in
            row-major order, then a flush.

    Raises:
        ValueError: If the framebuffer does not have shape (H, W, 3).
    """
    _check_framebuffer(framebuffer)
    height, width = framebuffer.shape[:2]

    sink.write_header(width, height, MAX_CHANNEL_VALUE)
    for r, g, b in framebuffer.reshape(-1, 3).tolist():
        sink.write_pixel(r, g, b)
    sink.flush()


def save_ppm(framebuffer: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save a framebuffer as a plain-text PPM file."""
    with open(filepath, "w", encoding="ascii") as f:
        write_image(framebuffer, PPMWriter(f))


def save_png(framebuffer: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save a framebuffer as an 8-bit PNG file using Pillow."""
    _check_framebuffer(framebuffer)
    pil_image = PILImage.fromarray(np.ascontiguousarray(framebuffer, dtype=np.uint8))
    pil_image.save(filepath)


def save_image(framebuffer: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save a framebuffer, choosing the format from the file extension.

    ".ppm" writes plain-text PPM; any other extension is handed to Pillow.
    """
    if Path(filepath).suffix.lower() == ".ppm":
        save_ppm(framebuffer, filepath)
    else:
        save_png(framebuffer, filepath)
