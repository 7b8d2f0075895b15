"""Quadrant geometry of a Cistercian numeral.

A numeral is drawn on a canvas ``2L`` wide and ``4L`` tall around a stem at
``x = L``. Each decimal position owns one corner region:

    tens (top-left)        | units (top-right)
                           |
                           |
    thousands (bottom-left)| hundreds (bottom-right)

``(x1, y1)`` is always the stem end of the region and ``(x2, y2)`` the far
corner, so the same segment recipe mirrors itself into every quadrant.
The offsets (``±line_thickness // 2``) pull horizontal and vertical strokes
inside the canvas edge; their sign follows the mirroring.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Quadrant:
    """Corner coordinates and stroke offsets of one digit region (pixels)."""

    x1: int
    y1: int
    x2: int
    y2: int
    x_offset: int
    y_offset: int

    @classmethod
    def top_right(cls, segment_length: int, offset: int) -> Quadrant:
        return cls(
            x1=segment_length,
            y1=0,
            x2=segment_length * 2,
            y2=segment_length,
            x_offset=offset,
            y_offset=offset,
        )

    @classmethod
    def top_left(cls, segment_length: int, offset: int) -> Quadrant:
        return cls(
            x1=segment_length,
            y1=0,
            x2=0,
            y2=segment_length,
            x_offset=-offset,
            y_offset=offset,
        )

    @classmethod
    def bottom_right(cls, segment_length: int, offset: int) -> Quadrant:
        return cls(
            x1=segment_length,
            y1=segment_length * 4,
            x2=segment_length * 2,
            y2=segment_length * 3,
            x_offset=offset,
            y_offset=-offset,
        )

    @classmethod
    def bottom_left(cls, segment_length: int, offset: int) -> Quadrant:
        return cls(
            x1=segment_length,
            y1=segment_length * 4,
            x2=0,
            y2=segment_length * 3,
            x_offset=-offset,
            y_offset=-offset,
        )


def quadrants_for(segment_length: int, offset: int) -> tuple[Quadrant, Quadrant, Quadrant, Quadrant]:
    """Quadrants in digit-position order: units, tens, hundreds, thousands."""
    return (
        Quadrant.top_right(segment_length, offset),
        Quadrant.top_left(segment_length, offset),
        Quadrant.bottom_right(segment_length, offset),
        Quadrant.bottom_left(segment_length, offset),
    )
