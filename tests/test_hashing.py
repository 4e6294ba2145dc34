"""
Unit tests for dHash computation and Hamming distance.
"""

import io

import numpy as np
import pytest
from PIL import Image

from imagefinder.errors import DecodeError
from imagefinder.scanner.hashing import (
    compute_dhash,
    dhash_file,
    dhash_image,
    hamming_distance,
    hamming_distances,
    is_valid_hash,
)
from conftest import make_noise_image, make_solid_image


def _gray(pixels):
    return Image.fromarray(np.asarray(pixels, dtype=np.uint8))


def _png_bytes(img):
    buf = io.BytesIO()
    img.save(buf, 'PNG')
    return buf.getvalue()


class TestDhashBitOrder:
    """The first comparison of the first row is bit 0."""

    def test_first_comparison_is_bit_zero(self):
        pixels = np.full((8, 9), 100)
        pixels[0, 0] = 200
        assert dhash_image(_gray(pixels)) == 1

    def test_last_comparison_is_bit_63(self):
        pixels = np.full((8, 9), 100)
        pixels[7, 7] = 200
        # x=6 vs x=7 is darker-left, x=7 vs x=8 is brighter-left
        assert dhash_image(_gray(pixels)) == 1 << 63

    def test_second_row_starts_at_bit_eight(self):
        pixels = np.full((8, 9), 100)
        pixels[1, 0] = 200
        assert dhash_image(_gray(pixels)) == 1 << 8

    def test_brighter_left_sets_bit(self):
        """A gradient falling left to right sets every bit."""
        row = np.arange(9 * 20, 0, -20)
        pixels = np.tile(row, (8, 1))
        assert dhash_image(_gray(pixels)) == (1 << 64) - 1

    def test_brighter_right_clears_bit(self):
        row = np.arange(0, 9 * 20, 20)
        pixels = np.tile(row, (8, 1))
        assert dhash_image(_gray(pixels)) == 0

    def test_equal_neighbours_clear_bit(self):
        assert dhash_image(_gray(np.full((8, 9), 77))) == 0


class TestComputeDhash:
    """Test hashing of encoded images."""

    def test_deterministic(self, temp_dir):
        path = make_noise_image(temp_dir / 'a.png', seed=7)
        data = path.read_bytes()
        assert compute_dhash(data) == compute_dhash(data)
        assert dhash_file(path) == compute_dhash(data)

    def test_hash_fits_64_bits(self, temp_dir):
        path = make_noise_image(temp_dir / 'a.png', seed=8)
        value = dhash_file(path)
        assert 0 <= value < 1 << 64

    def test_different_images_differ(self, temp_dir):
        a = make_noise_image(temp_dir / 'a.png', seed=1)
        b = make_noise_image(temp_dir / 'b.png', seed=2)
        assert dhash_file(a) != dhash_file(b)

    def test_same_content_different_size_is_close(self, temp_dir):
        """Resizing the source barely moves the hash."""
        rng = np.random.default_rng(5)
        small = Image.fromarray(rng.integers(0, 256, (8, 9), dtype=np.uint8))
        large = small.resize((90, 80), Image.Resampling.NEAREST)
        assert hamming_distance(compute_dhash(_png_bytes(small)), compute_dhash(_png_bytes(large))) <= 2

    def test_uniform_image_hashes_to_zero(self, temp_dir):
        path = make_solid_image(temp_dir / 'solid.png')
        assert dhash_file(path) == 0
        assert not is_valid_hash(dhash_file(path))

    def test_grayscale_and_rgb_agree(self, temp_dir):
        rng = np.random.default_rng(11)
        gray = Image.fromarray(rng.integers(0, 256, (16, 18), dtype=np.uint8))
        rgb = gray.convert('RGB')
        assert compute_dhash(_png_bytes(gray)) == compute_dhash(_png_bytes(rgb))

    def test_garbage_raises_decode_error(self):
        with pytest.raises(DecodeError):
            compute_dhash(b'not an image at all')

    def test_truncated_png_raises_decode_error(self, temp_dir):
        data = make_noise_image(temp_dir / 'a.png', seed=3).read_bytes()
        with pytest.raises(DecodeError):
            compute_dhash(data[:len(data) // 2])

    def test_missing_file_raises_oserror(self, temp_dir):
        with pytest.raises(OSError):
            dhash_file(temp_dir / 'missing.png')


class TestHammingDistance:
    """Test scalar and vectorised Hamming distance."""

    def test_identical_is_zero(self):
        assert hamming_distance(0xDEADBEEF, 0xDEADBEEF) == 0

    def test_complement_is_64(self):
        full = (1 << 64) - 1
        assert hamming_distance(0, full) == 64
        assert hamming_distance(0x0F0F0F0F0F0F0F0F, 0xF0F0F0F0F0F0F0F0) == 64

    def test_symmetric(self):
        a, b = 0x123456789ABCDEF0, 0x0FEDCBA987654321
        assert hamming_distance(a, b) == hamming_distance(b, a)

    def test_counts_bits(self):
        assert hamming_distance(0b1011, 0b0001) == 2

    def test_vectorised_matches_scalar(self):
        query = 0x8000000000000001
        values = [0, 1, (1 << 64) - 1, 0x8000000000000000, 0x00FF00FF00FF00FF, query]
        hashes = np.array(values, dtype=np.uint64)
        distances = hamming_distances(query, hashes)
        assert distances.tolist() == [hamming_distance(query, v) for v in values]

    def test_vectorised_empty(self):
        assert hamming_distances(1, np.array([], dtype=np.uint64)).size == 0
