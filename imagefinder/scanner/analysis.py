"""
Image analysis module for the scanner package.

Builds an ImageRecord for a single file: byte size, dHash and pixel
dimensions.
"""

from __future__ import annotations

import os
from pathlib import Path

from ..models import ImageRecord
from .dependencies import _logger
from .hashing import open_image, dhash_image


def analyze_image(filepath: str | Path) -> ImageRecord:
    """
    Analyze an image file and build its index record.

    Args:
        filepath: Path to the image file

    Returns:
        ImageRecord with hash, dimensions and file size. A uniform image
        yields the absent hash and is still returned.

    Raises:
        OSError: If the file cannot be stat'ed or read
        DecodeError: If the file is not a decodable image
    """
    filepath = str(filepath)

    file_size = os.stat(filepath).st_size
    with open(filepath, 'rb') as f:
        data = f.read()

    with open_image(data) as img:
        width, height = img.size
        dhash = dhash_image(img)

    if not dhash:
        _logger.debug(f"Uniform image has no usable hash: {filepath}")

    return ImageRecord(
        path=filepath,
        dhash=dhash,
        width=width,
        height=height,
        file_size=file_size,
    )


__all__ = ['analyze_image']
