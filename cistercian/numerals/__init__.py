"""Cistercian numeral rendering.

Modules:
    quadrant:   corner geometry of the four digit regions
    segments:   Segment enum, digit → segment table, segment tracing
    canvas:     scoped RGBA canvas
    cache:      ArtifactCache (PNG files or in-memory)
    renderer:   NumeralRenderer, decompose()
    difference: DifferenceRenderer, difference_segments()
"""

from .cache import ArtifactCache, FileArtifactCache, MemoryArtifactCache
from .canvas import CanvasAllocationError
from .difference import DifferenceRenderer, difference_segments
from .quadrant import Quadrant, quadrants_for
from .renderer import NumeralRenderer, decompose
from .segments import SEGMENTS, Segment, segment_line, segment_set

__all__ = [
    'ArtifactCache',
    'FileArtifactCache',
    'MemoryArtifactCache',
    'CanvasAllocationError',
    'DifferenceRenderer',
    'difference_segments',
    'Quadrant',
    'quadrants_for',
    'NumeralRenderer',
    'decompose',
    'SEGMENTS',
    'Segment',
    'segment_line',
    'segment_set',
]
