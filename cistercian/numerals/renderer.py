"""Numeral renderer: integer → PNG of its Cistercian numeral.

Pipeline for one number:
    1. Ensure the numerals directory exists
    2. Cache lookup by key ``str(number)``; a hit returns immediately
    3. Transparent (2L x 4L) canvas, stem at x = L over the full height
    4. Decompose into (units, tens, hundreds, thousands)
    5. Trace each digit's segments in its quadrant
    6. Encode PNG with alpha, release the canvas

Only the last four digits are drawn: 15038 renders the same image as 5038.

Usage:
    from cistercian.numerals import NumeralRenderer
    from cistercian.utils import validators

    renderer = NumeralRenderer(validators.load_generator_config())
    path = renderer.render(5038)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import PurePath
from typing import Iterator, Optional

from PIL import Image

from cistercian.numerals.cache import ArtifactCache, FileArtifactCache
from cistercian.numerals.canvas import Canvas, open_canvas
from cistercian.numerals.quadrant import quadrants_for
from cistercian.numerals.segments import digit_lines
from cistercian.utils.validators import GeneratorConfigV1

logger = logging.getLogger(__name__)

DIGIT_COUNT = 4


def decompose(number: int) -> tuple[int, int, int, int]:
    """Split ``number`` into (units, tens, hundreds, thousands).

    Digits past the thousands are discarded.

    Raises
    ------
    ValueError
        If ``number`` is negative.
    """
    if number < 0:
        raise ValueError(f"number must be >= 0, got {number}")
    return (
        number % 10,
        number // 10 % 10,
        number // 100 % 10,
        number // 1000 % 10,
    )


class NumeralRenderer:
    """Renders single numerals into a cache.

    Parameters
    ----------
    config : GeneratorConfigV1
        Segment length, line thickness and output directory
    cache : ArtifactCache, optional
        Defaults to PNG files under ``config.numerals_directory``
    """

    def __init__(self, config: GeneratorConfigV1, cache: Optional[ArtifactCache] = None):
        self.config = config
        self.cache = cache if cache is not None else FileArtifactCache(config.numerals_directory)
        self.width, self.height = config.numeral_size
        self.quadrants = quadrants_for(config.segment_length, config.offset)

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    def render(self, number: int) -> PurePath:
        """Render ``number`` (or reuse the cached file) and return its path."""
        digits = decompose(number)
        return self.cache.get_or_render(str(number), lambda: self._draw_numeral(digits))

    def open(self, number: int) -> Image.Image:
        """Rendered numeral as a decoded RGBA image (renders on a miss)."""
        self.render(number)
        return self.cache.open(str(number))

    @contextmanager
    def _blank_canvas(self) -> Iterator[Canvas]:
        with open_canvas(self.width, self.height, self.config.line_thickness) as canvas:
            yield canvas

    @contextmanager
    def _draw_numeral(self, digits: tuple[int, ...]) -> Iterator[Canvas]:
        with self._blank_canvas() as canvas:
            stem_x = self.width // 2
            canvas.draw_line(((stem_x, 0), (stem_x, self.height)))
            for digit, quadrant in zip(digits, self.quadrants):
                canvas.draw_lines(digit_lines(digit, quadrant))
            yield canvas
