"""Comparison sheets built from rendered numerals.

Each sheet pastes fixed-size numeral bitmaps (2L x 4L, RGBA) onto a white
RGB canvas. Neighbouring numerals overlap by one line thickness so their
stems and edge strokes touch instead of leaving a double-width gap.

Sheets, in file-name order:
    0-output-difference                               difference image per group, one row
    1-output-side-to-side-unmerged                    every numeral, one row
    2-output-side-to-side-merged                      each group stacked on one spot, one row
    3-output-multiple-lines-merged                    each group stacked, one group per row
    4-output-multiple-lines-unmerged                  one group per row, side by side
    5-output-multiple-lines-shifted-unmerged-full-space
    6-output-multiple-lines-shifted-unmerged-half-space
    7-output-multiple-lines-shifted-merged-full-space
    8-output-multiple-lines-shifted-merged-half-space
Shifted sheets push the first numeral of rows 3, 4, 6, 8, 9 and 11 to the
right by a full or half numeral width.

After the sheets, the first three files get a ``-truncated`` copy with the
middle 2L rows cut out so the top and bottom quadrants touch.

Usage:
    composer = SheetComposer(config, DifferenceRenderer(config))
    paths = composer.compose_all()
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional, Sequence

from PIL import Image

from cistercian.numerals.canvas import CanvasAllocationError
from cistercian.numerals.difference import DifferenceRenderer
from cistercian.utils import fs
from cistercian.utils.logging_config import pop_context, push_context
from cistercian.utils.validators import GeneratorConfigV1

logger = logging.getLogger(__name__)

WHITE = (255, 255, 255)

NumberGroups = Sequence[Sequence[int]]

DEMO_NUMBER_GROUPS: tuple[tuple[int, ...], ...] = (
    (5038, 4245),
    (5816, 5725),
    (5626, 7119),
    (3220, 5123),
    (7457, 2254),
    (7542, 7258),
    (8149, 6445),
    (112, 6754, 6050),
    (6118, 1719),
    (5032, 5213),
    (8030, 59),
)

SHIFTED_LINES = frozenset({3, 4, 6, 8, 9, 11})
"""1-based row numbers whose first numeral is shifted right."""

TALL_SHEET_COLUMNS = 6
UNMERGED_SHEET_COLUMNS = 3
TRUNCATED_SHEET_COUNT = 3
MANIFEST_NAME = "sheets.yaml"


def white_canvas(width: int, height: int) -> Image.Image:
    """Opaque white RGB sheet."""
    try:
        return Image.new("RGB", (width, height), WHITE)
    except (ValueError, MemoryError) as e:
        raise CanvasAllocationError(f"Failed to create {width}x{height} sheet: {e}") from e


def paste(sheet: Image.Image, numeral: Image.Image, x: int, y: int) -> None:
    """Alpha-composite ``numeral`` onto ``sheet`` with its top-left at (x, y)."""
    sheet.paste(numeral, (x, y), numeral)


def crop_clipped(image: Image.Image, x: int, y: int, width: int, height: int) -> Image.Image:
    """Crop a rectangle, shrinking it to the part inside the image."""
    left = max(0, x)
    top = max(0, y)
    right = min(image.width, x + width)
    bottom = min(image.height, y + height)
    if right <= left or bottom <= top:
        raise CanvasAllocationError(
            f"Crop ({x}, {y}, {width}x{height}) is outside {image.width}x{image.height}"
        )
    return image.crop((left, top, right, bottom))


class SheetComposer:
    """Lays out rendered numerals into comparison sheets.

    Parameters
    ----------
    config : GeneratorConfigV1
        Segment length, line thickness and merge padding
    renderer : DifferenceRenderer
        Source of numeral and difference bitmaps
    output_dir : Path, optional
        Sheet directory; defaults to ``config.merge_directory/<unix time>``
    """

    def __init__(
        self,
        config: GeneratorConfigV1,
        renderer: DifferenceRenderer,
        output_dir: Optional[Path] = None,
    ):
        self.config = config
        self.renderer = renderer
        if output_dir is None:
            output_dir = config.merge_directory / str(int(time.time()))
        self.output_dir = Path(output_dir)

        self.numeral_width, self.numeral_height = config.numeral_size
        self.thickness = config.line_thickness
        self.padding = config.merge_padding
        self.half_padding = config.merge_padding // 2

    # ------------------------------------------------------------------
    # Orchestration
    # ------------------------------------------------------------------

    def compose_all(self, groups: NumberGroups = DEMO_NUMBER_GROUPS) -> dict[str, Path]:
        """Write every sheet, the truncated copies and a YAML manifest.

        Returns
        -------
        dict[str, Path]
            Sheet file stem → path, in the order written
        """
        fs.ensure_dir(self.output_dir)
        logger.info("Composing %d groups into %s", len(groups), self.output_dir)

        builders = (
            self.one_line_difference,
            self.side_to_side_unmerged,
            self.side_to_side_merged,
            self.multiple_lines_merged,
            self.multiple_lines_unmerged,
            self.multiple_lines_unmerged_shifted_full_space,
            self.multiple_lines_unmerged_shifted_half_space,
            self.multiple_lines_merged_shifted_full_space,
            self.multiple_lines_merged_shifted_half_space,
        )
        written: dict[str, Path] = {}
        for build in builders:
            push_context(sheet=build.__name__)
            try:
                path = build(groups)
            finally:
                pop_context(keys=["sheet"])
            written[path.stem] = path

        for path in self.truncate_sheets():
            written[path.stem] = path

        fs.atomic_yaml_dump(
            {
                'segment_length': self.config.segment_length,
                'line_thickness': self.config.line_thickness,
                'merge_padding': self.config.merge_padding,
                'groups': [list(group) for group in groups],
                'sheets': [path.name for path in written.values()],
            },
            self.output_dir / MANIFEST_NAME,
        )
        return written

    def _save(self, sheet: Image.Image, name: str) -> Path:
        path = self.output_dir / f"{name}.png"
        fs.ensure_dir(self.output_dir)
        fs.atomic_save_image(sheet, path)
        sheet.close()
        logger.info("Wrote %s", path.name)
        return path

    # ------------------------------------------------------------------
    # Canvas sizes
    # ------------------------------------------------------------------

    def wide_size(self, count: int) -> tuple[int, int]:
        """One row of ``count`` overlapping numerals."""
        width = self.numeral_width * count - count * self.thickness + self.padding
        return (width, self.numeral_height + self.padding)

    def tall_size(self, rows: int, columns: int = TALL_SHEET_COLUMNS) -> tuple[int, int]:
        """``rows`` rows of up to ``columns`` numerals."""
        return (
            self.numeral_width * columns + self.padding,
            rows * self.numeral_height + self.padding,
        )

    # ------------------------------------------------------------------
    # Single-row sheets
    # ------------------------------------------------------------------

    def one_line_difference(self, groups: NumberGroups) -> Path:
        sheet = white_canvas(*self.wide_size(len(groups)))
        x = 0
        for group in groups:
            paste(sheet, self.renderer.open_difference(group), x + self.half_padding, self.half_padding)
            x += self.numeral_width - self.thickness
        return self._save(sheet, "0-output-difference")

    def side_to_side_unmerged(self, groups: NumberGroups) -> Path:
        numbers = [number for group in groups for number in group]
        sheet = white_canvas(*self.wide_size(len(numbers)))
        x = 0
        for number in numbers:
            paste(sheet, self.renderer.open(number), x + self.half_padding, self.half_padding)
            x += self.numeral_width - self.thickness
        return self._save(sheet, "1-output-side-to-side-unmerged")

    def side_to_side_merged(self, groups: NumberGroups) -> Path:
        sheet = white_canvas(*self.wide_size(len(groups)))
        x = 0
        for group in groups:
            for number in group:
                paste(sheet, self.renderer.open(number), x + self.half_padding, self.half_padding)
            x += self.numeral_width - self.thickness
        return self._save(sheet, "2-output-side-to-side-merged")

    # ------------------------------------------------------------------
    # Multi-row sheets
    # ------------------------------------------------------------------

    def multiple_lines_merged(self, groups: NumberGroups) -> Path:
        sheet = white_canvas(*self.tall_size(len(groups), columns=1))
        y = 0
        for group in groups:
            if not group:
                continue
            for number in group:
                paste(sheet, self.renderer.open(number), self.half_padding, y + self.half_padding)
            y += self.numeral_height - self.thickness
        return self._save(sheet, "3-output-multiple-lines-merged")

    def multiple_lines_unmerged(self, groups: NumberGroups) -> Path:
        sheet = white_canvas(*self.tall_size(len(groups), columns=UNMERGED_SHEET_COLUMNS))
        y = 0
        for group in groups:
            if not group:
                continue
            x = 0
            for number in group:
                paste(sheet, self.renderer.open(number), x + self.half_padding, y + self.half_padding)
                x += self.numeral_width - self.thickness
            y += self.numeral_height - self.thickness
        return self._save(sheet, "4-output-multiple-lines-unmerged")

    def _unmerged_shifted(self, groups: NumberGroups, shift: int, name: str) -> Path:
        sheet = white_canvas(*self.tall_size(len(groups)))
        y = 0
        line = 1
        for group in groups:
            if not group:
                continue
            x = 0
            for index, number in enumerate(group):
                x += self.half_padding
                if index == 0 and line in SHIFTED_LINES:
                    x += shift
                paste(sheet, self.renderer.open(number), x, y + self.half_padding)
                x += self.numeral_width - self.thickness - self.half_padding
            y += self.numeral_height - self.thickness
            line += 1
        return self._save(sheet, name)

    def multiple_lines_unmerged_shifted_full_space(self, groups: NumberGroups) -> Path:
        return self._unmerged_shifted(
            groups,
            self.numeral_width - self.thickness,
            "5-output-multiple-lines-shifted-unmerged-full-space",
        )

    def multiple_lines_unmerged_shifted_half_space(self, groups: NumberGroups) -> Path:
        return self._unmerged_shifted(
            groups,
            self.numeral_width // 2 - self.thickness // 2,
            "6-output-multiple-lines-shifted-unmerged-half-space",
        )

    def multiple_lines_merged_shifted_full_space(self, groups: NumberGroups) -> Path:
        # The shift carries over to the rest of the row: every numeral of a
        # shifted row lands one width to the right.
        sheet = white_canvas(*self.tall_size(len(groups)))
        y = 0
        line = 1
        for group in groups:
            if not group:
                continue
            x = 0
            for index, number in enumerate(group):
                x += self.half_padding - self.thickness
                if index == 0 and line in SHIFTED_LINES:
                    x += self.numeral_width
                paste(sheet, self.renderer.open(number), x, y + self.half_padding)
                x += self.thickness - self.half_padding
            y += self.numeral_height - self.thickness
            line += 1
        return self._save(sheet, "7-output-multiple-lines-shifted-merged-full-space")

    def multiple_lines_merged_shifted_half_space(self, groups: NumberGroups) -> Path:
        # Only the first numeral of a shifted row moves.
        sheet = white_canvas(*self.tall_size(len(groups)))
        y = 0
        line = 1
        for group in groups:
            if not group:
                continue
            for index, number in enumerate(group):
                x = self.half_padding
                if index == 0 and line in SHIFTED_LINES:
                    x += self.numeral_width // 2
                paste(sheet, self.renderer.open(number), x, y + self.half_padding)
            y += self.numeral_height - self.thickness
            line += 1
        return self._save(sheet, "8-output-multiple-lines-shifted-merged-half-space")

    # ------------------------------------------------------------------
    # Truncation
    # ------------------------------------------------------------------

    def truncate_sheets(self, count: int = TRUNCATED_SHEET_COUNT) -> list[Path]:
        """Write ``-truncated`` copies of the first ``count`` sheets by file name."""
        sheets = sorted(
            p for p in self.output_dir.glob("*.png") if not p.stem.endswith("-truncated")
        )
        return [self.truncate(path) for path in sheets[:count]]

    def truncate(self, path: Path) -> Path:
        """Drop the middle 2L rows of a single-row sheet.

        Keeps ``L + thickness`` rows below the top padding and the same amount
        starting at the bottom quadrants, then stacks them.
        """
        length = self.config.segment_length
        band = length + self.thickness
        cut = self.half_padding

        with Image.open(path) as source:
            source.load()
            width = source.width
            height = source.height - length * 2
            top = crop_clipped(source, 0, cut, width, band)
            bottom = crop_clipped(source, 0, cut + length * 3 + self.thickness, width, band)

        sheet = white_canvas(width, height)
        sheet.paste(top, (0, cut))
        sheet.paste(bottom, (0, cut + band))
        return self._save(sheet, f"{path.stem}-truncated")
