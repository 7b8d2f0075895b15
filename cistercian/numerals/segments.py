"""Segment vocabulary, digit → segment table, and segment tracing.

Every digit 1-9 is drawn from at most three of five stroke primitives.
The table is written for the top-right (units) quadrant; the quadrant
geometry mirrors it into the other three positions.

    1 ─      2 _      3 ╲      4 ╱      5 ─╱
    6 |      7 ─|     8 _|     9 ─_|
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType

from cistercian.numerals.quadrant import Quadrant

Point = tuple[int, int]
Line = tuple[Point, Point]


class Segment(str, Enum):
    """Stroke primitive drawable within a quadrant."""

    TOP = "top"
    BOTTOM = "bottom"
    DIAG_ONE = "diagOne"
    DIAG_TWO = "diagTwo"
    RIGHT = "right"


SEGMENTS: MappingProxyType[int, tuple[Segment, ...]] = MappingProxyType({
    0: (),
    1: (Segment.TOP,),
    2: (Segment.BOTTOM,),
    3: (Segment.DIAG_ONE,),
    4: (Segment.DIAG_TWO,),
    5: (Segment.TOP, Segment.DIAG_TWO),
    6: (Segment.RIGHT,),
    7: (Segment.TOP, Segment.RIGHT),
    8: (Segment.BOTTOM, Segment.RIGHT),
    9: (Segment.BOTTOM, Segment.RIGHT, Segment.TOP),
})


def segment_set(digit: int) -> tuple[Segment, ...]:
    """Ordered segments that draw ``digit``.

    Raises
    ------
    ValueError
        If ``digit`` is not in [0, 9].
    """
    try:
        return SEGMENTS[digit]
    except KeyError:
        raise ValueError(f"digit must be in [0, 9], got {digit!r}") from None


def segment_line(segment: Segment, quadrant: Quadrant) -> Line | None:
    """Endpoints of ``segment`` inside ``quadrant``.

    DIAG_TWO starts at the y-offset bottom edge but ends at the x-offset
    top corner, so it is both shortened and shifted relative to DIAG_ONE.
    Anything that is not a Segment yields None (nothing to draw).
    """
    q = quadrant
    if segment is Segment.TOP:
        return (q.x1, q.y1 + q.y_offset), (q.x2, q.y1 + q.y_offset)
    if segment is Segment.BOTTOM:
        return (q.x1, q.y2 + q.y_offset), (q.x2, q.y2 + q.y_offset)
    if segment is Segment.DIAG_ONE:
        return (q.x1, q.y1), (q.x2, q.y2)
    if segment is Segment.DIAG_TWO:
        return (q.x1, q.y2 + q.y_offset), (q.x2 + q.x_offset, q.y1)
    if segment is Segment.RIGHT:
        return (q.x2 - q.x_offset, q.y1), (q.x2 - q.x_offset, q.y2)
    return None


def digit_lines(digit: int, quadrant: Quadrant) -> list[Line]:
    """Lines drawing ``digit`` in ``quadrant``, in table order."""
    lines = (segment_line(segment, quadrant) for segment in segment_set(digit))
    return [line for line in lines if line is not None]
