"""
Pytest configuration and shared fixtures for test suite.
"""

import pytest
import tempfile
import shutil
import os
from pathlib import Path

import numpy as np
from PIL import Image

from imagefinder.database import ImageStore
from imagefinder.user_config import get_user_config


def make_noise_image(path, seed: int, size=(64, 48), fmt='PNG'):
    """Save a deterministic RGB noise image (never hashes to zero)."""
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, size=(size[1], size[0], 3), dtype=np.uint8)
    Image.fromarray(pixels).save(path, fmt)
    return Path(path)


def make_solid_image(path, color='red', size=(32, 32)):
    """Save a uniform image (hashes to the absent value)."""
    Image.new('RGB', size, color=color).save(path, 'PNG')
    return Path(path)


@pytest.fixture(autouse=True)
def isolated_user_config(monkeypatch, tmp_path_factory):
    """Point user configuration at an empty directory for every test."""
    config_dir = tmp_path_factory.mktemp('imagefinder-config')
    monkeypatch.setenv('IMAGEFINDER_CONFIG_DIR', str(config_dir))
    for var in (
        'IMAGEFINDER_WORKERS',
        'IMAGEFINDER_BATCH_SIZE',
        'IMAGEFINDER_RESULT_LIMIT',
        'IMAGEFINDER_FORCED_DISTANCE',
        'IMAGEFINDER_MAX_PIXELS',
        'IMAGEFINDER_DB',
    ):
        monkeypatch.delenv(var, raising=False)
    get_user_config().reload()
    yield config_dir
    get_user_config().reload()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests (symlinks resolved)."""
    tmpdir = tempfile.mkdtemp()
    yield Path(os.path.realpath(tmpdir))
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def image_dir(temp_dir):
    """
    Create a folder of images for indexing tests.

    Returns:
        Path to a folder containing:
        - noise_0.png, noise_1.png, sub/noise_2.png (valid images)
        - broken.jpg (allow-listed but not an image)
        - notes.txt (not allow-listed)
        - .hidden.png and .cache/noise_3.png (hidden)
    """
    root = temp_dir / 'photos'
    (root / 'sub').mkdir(parents=True)
    (root / '.cache').mkdir()

    make_noise_image(root / 'noise_0.png', seed=0)
    make_noise_image(root / 'noise_1.png', seed=1)
    make_noise_image(root / 'sub' / 'noise_2.png', seed=2)
    (root / 'broken.jpg').write_bytes(b'definitely not a jpeg')
    (root / 'notes.txt').write_text('not an image')
    make_noise_image(root / '.hidden.png', seed=3)
    make_noise_image(root / '.cache' / 'noise_3.png', seed=4)

    return root


@pytest.fixture
def many_images(temp_dir):
    """Create a flat folder with ten valid noise images."""
    root = temp_dir / 'many'
    root.mkdir()
    for i in range(10):
        make_noise_image(root / f'img_{i:02d}.png', seed=100 + i)
    return root


@pytest.fixture
def memory_store():
    """Create a private in-memory store."""
    store = ImageStore(':memory:')
    yield store
    store.close()


@pytest.fixture
def temp_db(temp_dir):
    """Path for a temporary on-disk index database."""
    return str(temp_dir / 'index.db')


@pytest.fixture
def file_store(temp_db):
    """Create a store backed by a temporary file."""
    store = ImageStore(temp_db)
    yield store
    store.close()
