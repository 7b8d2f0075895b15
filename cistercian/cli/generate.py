#!/usr/bin/env python3
"""Render Cistercian numerals into the on-disk cache.

Renders every number of a range (1..9999 by default) to
``<output_directory>/CistercianNumbers/<n>.png``. Numbers whose PNG already
exists are skipped, so an interrupted run can simply be restarted.

Usage:
    cistercian-generate
    cistercian-generate --start 1 --end 99 --output-dir /tmp/numerals
    CISTERCIAN_NUMBER_GENERATOR_SEGMENT_LENGTH=80 cistercian-generate -v

Exit codes:
    0  every numeral rendered (or already cached)
    1  configuration error or a numeral failed to render (run stops there)
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from cistercian.numerals.canvas import CanvasAllocationError
from cistercian.numerals.renderer import NumeralRenderer
from cistercian.utils.fs import DirectoryCreationError, EncodeError
from cistercian.utils.logging_config import install_excepthook, setup_logging
from cistercian.utils.validators import ConfigError, load_generator_config

logger = logging.getLogger(__name__)

FIRST_NUMBER = 1
LAST_NUMBER = 9999
DEFAULT_PROGRESS_EVERY = 500


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cistercian-generate",
        description=f"Generate cistercian numbers from {FIRST_NUMBER} to {LAST_NUMBER}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Configuration precedence (last wins):
  generator.v1.yaml -> CISTERCIAN_NUMBER_GENERATOR_* env vars -> CLI flags
""",
    )
    parser.add_argument("--config", "-c", type=Path, default=None,
                        help="Generator config YAML (default: shipped generator.v1.yaml)")
    parser.add_argument("--output-dir", "-o", type=Path, default=None,
                        help="Override output_directory")
    parser.add_argument("--start", type=int, default=FIRST_NUMBER,
                        help=f"First number to render (default: {FIRST_NUMBER})")
    parser.add_argument("--end", type=int, default=LAST_NUMBER,
                        help=f"Last number to render, inclusive (default: {LAST_NUMBER})")
    parser.add_argument("--progress-every", type=int, default=DEFAULT_PROGRESS_EVERY,
                        help=f"Log progress every N numerals (default: {DEFAULT_PROGRESS_EVERY})")
    parser.add_argument("--log-file", type=str, default=None,
                        help="Also write logs to this file")
    parser.add_argument("--json-logs", action="store_true",
                        help="Write the log file as JSON lines")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable debug logging")
    return parser


def generate(renderer: NumeralRenderer, start: int, end: int,
             progress_every: int = DEFAULT_PROGRESS_EVERY) -> int:
    """Render ``start..end`` inclusive; returns the number of numerals handled.

    Stops at the first failure: the exception propagates to the caller.
    """
    total = end - start + 1
    done = 0
    for number in range(start, end + 1):
        renderer.render(number)
        done += 1
        if progress_every > 0 and done % progress_every == 0:
            logger.info("Rendered %d/%d numerals", done, total)
    return done


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint for numeral generation."""
    args = build_parser().parse_args(argv)

    setup_logging(
        log_level="DEBUG" if args.verbose else "INFO",
        log_file=args.log_file,
        json=args.json_logs,
        quiet_libs=["PIL"],
        context={"app": "generate"},
    )
    install_excepthook()

    if args.start < 0 or args.end < args.start:
        logger.error("Invalid range: --start %d --end %d", args.start, args.end)
        return 1

    try:
        config = load_generator_config(args.config, output_directory=args.output_dir)
    except (FileNotFoundError, ConfigError) as e:
        logger.error("Failed to load configuration: %s", e)
        return 1

    renderer = NumeralRenderer(config)
    logger.info(
        "Generating numerals %d..%d into %s (segment_length=%d, line_thickness=%d)",
        args.start, args.end, config.numerals_directory,
        config.segment_length, config.line_thickness,
    )

    try:
        count = generate(renderer, args.start, args.end, args.progress_every)
    except (DirectoryCreationError, CanvasAllocationError, EncodeError) as e:
        logger.error("Numeral generation failed: %s", e)
        return 1

    logger.info("Done: %d numerals in %s", count, config.numerals_directory)
    return 0


if __name__ == "__main__":
    sys.exit(main())
