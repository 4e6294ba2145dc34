"""
Scanner package for Image Finder.

Provides image discovery, perceptual hashing and the batched indexing
pipeline.

Public API:
- find_image_files: Discover indexable image files under a folder
- compute_dhash / dhash_file / dhash_image: 64-bit difference hash
- hamming_distance / hamming_distances: Hash similarity metric
- analyze_image: Build the index record for one file
- Indexer: Batched, parallel, cancellable folder indexing
- ProgressReporter / ConsoleProgress: Progress snapshots and a terminal observer
- has_heif_support: Check if HEIC support is available
"""

from __future__ import annotations

from .file_discovery import find_image_files, supported_extensions
from .hashing import (
    compute_dhash,
    dhash_file,
    dhash_image,
    hamming_distance,
    hamming_distances,
    is_valid_hash,
)
from .analysis import analyze_image
from .progress import ProgressReporter, ConsoleProgress, estimate_eta
from .indexer import Indexer

from .dependencies import HAS_HEIF_SUPPORT


def has_heif_support() -> bool:
    """Check if HEIC/HEIF support is available."""
    return HAS_HEIF_SUPPORT


__all__ = [
    # File discovery
    'find_image_files',
    'supported_extensions',
    # Hashing
    'compute_dhash',
    'dhash_file',
    'dhash_image',
    'hamming_distance',
    'hamming_distances',
    'is_valid_hash',
    # Analysis and indexing
    'analyze_image',
    'Indexer',
    'ProgressReporter',
    'ConsoleProgress',
    'estimate_eta',
    # Feature detection
    'has_heif_support',
]
