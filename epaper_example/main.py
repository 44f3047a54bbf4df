#!/usr/bin/env python3
"""ePaper Example - Main Entry Point.

Initializes a Waveshare ePaper display, loads a bitmap, clears the panel
and shows the bitmap with a full refresh, timing each stage.
"""

import argparse
import logging
import os
import sys
from contextlib import closing
from pathlib import Path
from typing import Callable, Optional, TextIO

from .config import Config, load_config
from .display_driver import EPaperDisplay, create_display
from .image_loader import load_bitmap, resolve_bitmap_path
from .timer import Timer

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# The default bitmap is bundled next to this module
PROGRAM_DIR = Path(__file__).resolve().parent

EXIT_OK = 0
EXIT_ERROR = 1
# argparse uses 2 for usage errors
EXIT_NO_DISPLAY = 3
EXIT_NO_BITMAP = 4

DisplayFactory = Callable[..., Optional[EPaperDisplay]]


def run(
    image_path: Optional[str],
    config: Config,
    display_factory: DisplayFactory = create_display,
    out: Optional[TextIO] = None,
) -> int:
    """Show a bitmap on the ePaper display.

    Args:
        image_path: Bitmap given on the command line, or None for the default
            ``<basename>_<width>x<height>-mono.bmp`` next to the program.
        config: Loaded configuration.
        display_factory: Creates the display; returns None if unavailable.
        out: Stream for progress output (default: stdout).

    Returns:
        Exit code.

    Raises:
        BitmapDecodeError: If the bitmap file exists but can't be decoded.
    """
    out = out if out is not None else sys.stdout

    init_timer = Timer("Initializing E-Paper Display...", out).start()
    display = display_factory(config.display.model, rotation=config.display.rotation)
    if display is None:
        print(file=out)
        return EXIT_NO_DISPLAY
    init_timer.stop()

    with display:
        bitmap_path = resolve_bitmap_path(
            image_path,
            display.width,
            display.height,
            directory=config.bitmap.directory or PROGRAM_DIR,
            basename=config.bitmap.basename,
        )
        if not os.path.isfile(bitmap_path):
            print(f"Can not find bitmap file: '{bitmap_path}'!", file=out)
            return EXIT_NO_BITMAP

        print(f"Loading bitmap from '{bitmap_path}'...", file=out)
        with closing(load_bitmap(bitmap_path)) as bitmap:
            print(f"Bitmap loaded: {bitmap.width}x{bitmap.height}", file=out)

            with Timer("Waiting for E-Paper Display...", out):
                display.clear()
                display.wait_until_ready()

            with Timer("Sending Image to E-Paper Display...", out):
                display.display_image(bitmap, full_refresh=True)

    print("Done", file=out)
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success).
    """
    parser = argparse.ArgumentParser(
        description="Show a bitmap on a Waveshare ePaper display",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
  0  image displayed
  1  error (bad config, undecodable bitmap, display failure)
  2  invalid command line
  3  display not available
  4  bitmap file not found

Examples:
  # Show the bundled bitmap for the panel resolution
  epaper-example

  # Show a specific bitmap
  epaper-example ~/pictures/cat_800x480.bmp
        """,
    )

    parser.add_argument(
        "image",
        nargs="?",
        help="Bitmap file to display (default: <basename>_<W>x<H>-mono.bmp next to the program)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        help="Path to config file (default: config.yaml if present)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = load_config(args.config)
        return run(args.image, config)
    except FileNotFoundError as e:
        logger.error(str(e))
        return EXIT_ERROR
    except Exception as e:
        logger.exception(f"Error: {e}")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
