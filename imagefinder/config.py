"""
Configuration constants for Image Finder.

This module contains all configurable settings including:
- Supported image extensions
- Indexing batch and progress granularity
- Search result composition policy
"""

import os

# Image extensions eligible for indexing (compared case-insensitively)
IMAGE_EXTENSIONS = {
    '.jpg', '.jpeg', '.png', '.heic', '.tiff', '.bmp',
}

# Extensions that need pillow-heif to decode
HEIF_EXTENSIONS = {'.heic'}

# dHash raster: one extra column so each row yields 8 comparisons
HASH_WIDTH = 9
HASH_HEIGHT = 8
HASH_BITS = (HASH_WIDTH - 1) * HASH_HEIGHT

# Sentinel for "no hash" (hashing failed or the image is uniform)
ABSENT_HASH = 0

# Records buffered per transaction while indexing
BATCH_SIZE = 50

# Progress is reported every 1/PROGRESS_STEPS of the candidate count
PROGRESS_STEPS = 100

# Default number of parallel workers for hashing
DEFAULT_WORKERS = 4

# Matches at or below this distance are always returned
FORCED_MATCH_DISTANCE = 2.0

# Number of results returned when there are few forced matches
RESULT_LIMIT = 10

# Decompression bomb limit for Pillow (500 megapixels)
MAX_IMAGE_PIXELS = 500_000_000

# SQLite index database location
INDEX_DB_FILE = os.path.join(os.path.expanduser('~'), '.imagefinder_index.db')

# Key of the root folder list inside the meta table
ROOTS_KEY = 'indexed_roots.v1'
