"""Composition layer: comparison sheets built from rendered numerals.

Consumes numeral PNGs as opaque fixed-size bitmaps; all layout math lives
in sheets.SheetComposer.
"""

from .sheets import DEMO_NUMBER_GROUPS, SHIFTED_LINES, SheetComposer

__all__ = ['DEMO_NUMBER_GROUPS', 'SHIFTED_LINES', 'SheetComposer']
