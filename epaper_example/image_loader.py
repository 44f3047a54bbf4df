"""Bitmap lookup and decoding."""

import logging
from pathlib import Path
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


class BitmapDecodeError(Exception):
    """Raised when a bitmap file exists but cannot be decoded."""


def default_bitmap_name(basename: str, width: int, height: int) -> str:
    """Name of the default mono bitmap for a panel resolution."""
    return f"{basename}_{width}x{height}-mono.bmp"


def resolve_bitmap_path(
    image_path: Optional[str],
    width: int,
    height: int,
    directory: Path,
    basename: str = "sample",
) -> str:
    """Pick the bitmap to show.

    Args:
        image_path: Path given on the command line, used as is (even when
            empty) unless None.
        width: Display width in pixels.
        height: Display height in pixels.
        directory: Where to look for the default bitmap.
        basename: Prefix of the default bitmap file name.

    Returns:
        Path to the bitmap. It is not checked for existence.
    """
    if image_path is not None:
        return image_path
    return str(Path(directory) / default_bitmap_name(basename, width, height))


def load_bitmap(path: Union[str, Path]) -> Image.Image:
    """Decode a bitmap file into memory.

    The file is fully read and closed before returning.

    Raises:
        BitmapDecodeError: If Pillow can't decode the file.
    """
    try:
        with open(path, "rb") as f:
            image = Image.open(f)
            image.load()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise BitmapDecodeError(f"Can not load bitmap from '{path}'!") from e

    logger.debug(f"Decoded {path}: {image.size}, mode={image.mode}")
    return image
