"""Cistercian: raster renderer for Cistercian numerals.

A Cistercian numeral encodes an integer from 1 to 9999 as line segments
drawn in the four quadrants around a single vertical stem:
units top-right, tens top-left, hundreds bottom-right, thousands bottom-left.

Architecture layers (strict one-way dependency):
    cli/ → composition/ → numerals/ → utils/

Key invariants:
    - One numeral is (2 * segment_length) x (4 * segment_length) pixels
    - Rendered PNGs are RGBA, transparent background, opaque black strokes
    - The on-disk PNG is the cache: an existing file is never re-rendered
    - Values above 9999 alias onto their last four digits
"""

__version__ = "1.0.0"
