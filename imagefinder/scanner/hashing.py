"""
Hashing module for the scanner package.

Implements the 64-bit difference hash (dHash) used as the similarity signal,
and the Hamming distance between two hashes.

Bit layout: the image is reduced to a 9x8 grayscale raster with
nearest-neighbour sampling. In each of the 8 rows, pixel x is compared with
pixel x+1 (8 comparisons per row); the bit is 1 when the left pixel is
brighter. Bit 0 of the hash is the first comparison of the first row and
bit 63 the last comparison of the last row.
"""

from __future__ import annotations

import io
from pathlib import Path

from ..config import HASH_WIDTH, HASH_HEIGHT, ABSENT_HASH
from ..errors import DecodeError
from .dependencies import Image, np


def open_image(data: bytes) -> 'Image.Image':
    """
    Decode image bytes, forcing a full load so truncated files fail here.

    Raises:
        DecodeError: If the bytes are not a decodable image
    """
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
        return img
    except Exception as e:
        raise DecodeError(f"Cannot decode image: {e}") from e


def dhash_image(img: 'Image.Image') -> int:
    """
    Compute the 64-bit dHash of an already decoded image.

    Args:
        img: PIL image in any mode

    Returns:
        Hash as an unsigned integer in [0, 2**64)
    """
    try:
        small = img.convert('L').resize((HASH_WIDTH, HASH_HEIGHT), Image.Resampling.NEAREST)
    except Exception as e:
        raise DecodeError(f"Cannot convert image for hashing: {e}") from e

    pixels = np.asarray(small, dtype=np.uint8)
    bits = (pixels[:, :-1] > pixels[:, 1:]).flatten()
    # Little bit order puts the first comparison in bit 0 of the first byte
    packed = np.packbits(bits, bitorder='little')
    return int.from_bytes(packed.tobytes(), 'little')


def compute_dhash(data: bytes) -> int:
    """
    Compute the dHash of encoded image bytes.

    Raises:
        DecodeError: If the bytes cannot be decoded as an image
    """
    with open_image(data) as img:
        return dhash_image(img)


def dhash_file(filepath: str | Path) -> int:
    """Compute the dHash of an image file (OSError if it cannot be read)."""
    return compute_dhash(Path(filepath).read_bytes())


def hamming_distance(a: int, b: int) -> int:
    """Number of differing bits between two hashes (0-64)."""
    return bin(a ^ b).count('1')


def hamming_distances(query: int, hashes: 'np.ndarray') -> 'np.ndarray':
    """
    Vectorised Hamming distance from one hash to many.

    Args:
        query: Query hash
        hashes: 1-D uint64 array of hashes

    Returns:
        1-D int array of distances, aligned with hashes
    """
    if hashes.size == 0:
        return np.zeros(0, dtype=np.int64)
    xor = np.bitwise_xor(hashes.astype(np.uint64), np.uint64(query))
    as_bytes = xor.view(np.uint8).reshape(-1, 8)
    return np.unpackbits(as_bytes, axis=1).sum(axis=1, dtype=np.int64)


def is_valid_hash(value: int) -> bool:
    """The zero hash is reserved as the 'absent' sentinel."""
    return value != ABSENT_HASH


__all__ = [
    'open_image',
    'dhash_image',
    'compute_dhash',
    'dhash_file',
    'hamming_distance',
    'hamming_distances',
    'is_valid_hash',
]
