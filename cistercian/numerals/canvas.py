"""Scoped RGBA drawing canvas.

A canvas lives exactly as long as one render call:

    with open_canvas(100, 200, line_thickness=5) as canvas:
        canvas.draw_line(((50, 0), (50, 200)))
        fs.atomic_save_image(canvas.image, path)

The image buffer is closed on every exit path, including errors raised
while drawing or encoding.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from PIL import Image, ImageDraw

from cistercian.numerals.segments import Line

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)
BLACK = (0, 0, 0, 255)


class CanvasAllocationError(RuntimeError):
    """Raised when the raster canvas or its drawing context cannot be created."""


class Canvas:
    """Transparent RGBA buffer with a fixed stroke width."""

    def __init__(self, image: Image.Image, line_thickness: int, color=BLACK):
        self.image = image
        self.line_thickness = line_thickness
        self.color = color
        self._draw = ImageDraw.Draw(image)

    def draw_line(self, line: Line) -> None:
        start, end = line
        self._draw.line([start, end], fill=self.color, width=self.line_thickness)

    def draw_lines(self, lines) -> None:
        for line in lines:
            self.draw_line(line)


@contextmanager
def open_canvas(width: int, height: int, line_thickness: int) -> Iterator[Canvas]:
    """Allocate a transparent canvas and release it when the block exits.

    Raises
    ------
    CanvasAllocationError
        If PIL cannot allocate a ``width`` x ``height`` RGBA image.
    """
    try:
        image = Image.new("RGBA", (width, height), TRANSPARENT)
        canvas = Canvas(image, line_thickness)
    except (ValueError, MemoryError, OSError) as e:
        raise CanvasAllocationError(
            f"Failed to create {width}x{height} canvas: {e}"
        ) from e

    try:
        yield canvas
    finally:
        image.close()
