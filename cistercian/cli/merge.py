#!/usr/bin/env python3
"""Compose comparison sheets from the demonstration numeral groups.

Renders (or reuses) every numeral and difference image the sheets need,
then writes the sheets, their truncated copies and a ``sheets.yaml``
manifest to ``<output_directory>/merge/<unix timestamp>/``.

Usage:
    cistercian-merge
    cistercian-merge --output-dir /tmp/cistercian --sheet-dir /tmp/sheets
    CISTERCIAN_NUMBER_GENERATOR_MERGE_PADDING=40 cistercian-merge

Exit codes:
    0  all sheets written
    1  configuration error or a sheet failed
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from cistercian.composition.sheets import DEMO_NUMBER_GROUPS, SheetComposer
from cistercian.numerals.canvas import CanvasAllocationError
from cistercian.numerals.difference import DifferenceRenderer
from cistercian.utils.fs import DirectoryCreationError, EncodeError
from cistercian.utils.logging_config import install_excepthook, setup_logging
from cistercian.utils.validators import ConfigError, load_generator_config

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cistercian-merge",
        description="Merge multiple png files into one png file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Groups: " + " ".join("/".join(map(str, g)) for g in DEMO_NUMBER_GROUPS),
    )
    parser.add_argument("--config", "-c", type=Path, default=None,
                        help="Generator config YAML (default: shipped generator.v1.yaml)")
    parser.add_argument("--output-dir", "-o", type=Path, default=None,
                        help="Override output_directory (numeral cache + sheets)")
    parser.add_argument("--sheet-dir", type=Path, default=None,
                        help="Write sheets here instead of <output_directory>/merge/<timestamp>")
    parser.add_argument("--log-file", type=str, default=None,
                        help="Also write logs to this file")
    parser.add_argument("--json-logs", action="store_true",
                        help="Write the log file as JSON lines")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint for sheet composition."""
    args = build_parser().parse_args(argv)

    setup_logging(
        log_level="DEBUG" if args.verbose else "INFO",
        log_file=args.log_file,
        json=args.json_logs,
        quiet_libs=["PIL"],
        context={"app": "merge"},
    )
    install_excepthook()

    try:
        config = load_generator_config(args.config, output_directory=args.output_dir)
    except (FileNotFoundError, ConfigError) as e:
        logger.error("Failed to load configuration: %s", e)
        return 1

    composer = SheetComposer(config, DifferenceRenderer(config), output_dir=args.sheet_dir)

    try:
        written = composer.compose_all(DEMO_NUMBER_GROUPS)
    except (DirectoryCreationError, CanvasAllocationError, EncodeError) as e:
        logger.error("Sheet composition failed: %s", e)
        return 1

    logger.info("Wrote %d sheets to %s", len(written), composer.output_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
