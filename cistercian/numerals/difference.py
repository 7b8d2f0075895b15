"""Difference renderer: segments not shared across a list of numbers.

For each digit position the segments of every number are folded with a
pairwise cancel:

    - first sighting of a segment turns it on
    - second sighting turns it off again
    - any later sighting is ignored (it stays off)

So ``[5038, 4245]`` keeps only the strokes that differ between the two
numerals, and ``[a, a]`` is blank. With three or more numbers this is not
parity: a segment present in three inputs is off, not on.

The result is drawn without the stem. The cache key keeps input order
(``difference-5038-4245`` and ``difference-4245-5038`` are two files even
though their pixels match).
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import PurePath
from typing import Iterator, Sequence

from cistercian.numerals.canvas import Canvas
from cistercian.numerals.renderer import DIGIT_COUNT, NumeralRenderer, decompose
from cistercian.numerals.segments import Segment, segment_line, segment_set

logger = logging.getLogger(__name__)


def difference_segments(numbers: Sequence[int]) -> tuple[list[Segment], ...]:
    """Surviving segments per digit position (units first), in first-seen order."""
    to_trace: tuple[list[Segment], ...] = tuple([] for _ in range(DIGIT_COUNT))
    ever_seen: tuple[set[Segment], ...] = tuple(set() for _ in range(DIGIT_COUNT))

    for number in numbers:
        for position, digit in enumerate(decompose(number)):
            for segment in segment_set(digit):
                if segment in ever_seen[position]:
                    if segment in to_trace[position]:
                        to_trace[position].remove(segment)
                else:
                    to_trace[position].append(segment)
                    ever_seen[position].add(segment)

    return to_trace


def difference_key(numbers: Sequence[int]) -> str:
    return "difference-" + "-".join(str(n) for n in numbers)


class DifferenceRenderer(NumeralRenderer):
    """NumeralRenderer that can also render difference images."""

    def render_difference(self, numbers: Sequence[int]) -> PurePath:
        """Render the difference image of ``numbers`` and return its path.

        Raises
        ------
        ValueError
            If ``numbers`` is empty or holds a negative number.
        """
        numbers = list(numbers)
        if not numbers:
            raise ValueError("render_difference needs at least one number")

        surviving = difference_segments(numbers)
        key = difference_key(numbers)
        logger.debug("Difference %s keeps %s", key, [len(s) for s in surviving])
        return self.cache.get_or_render(key, lambda: self._draw_difference(surviving))

    def open_difference(self, numbers: Sequence[int]):
        """Difference image as a decoded RGBA image (renders on a miss)."""
        numbers = list(numbers)
        self.render_difference(numbers)
        return self.cache.open(difference_key(numbers))

    @contextmanager
    def _draw_difference(self, surviving: tuple[list[Segment], ...]) -> Iterator[Canvas]:
        with self._blank_canvas() as canvas:
            for segments, quadrant in zip(surviving, self.quadrants):
                for segment in segments:
                    line = segment_line(segment, quadrant)
                    if line is not None:
                        canvas.draw_line(line)
            yield canvas
