"""
Image Finder
============
Index folders of images and find visually similar ones by example.

Features:
- 64-bit difference hash (dHash) per image
- SQLite index with incremental, resumable folder indexing
- Ranked similarity search with near-exact matches always included
- CLI for automation
- Local JSON API
"""

__version__ = "1.0.0"

from .models import ImageRecord, Match, IndexProgress, IndexResult
from .config import IMAGE_EXTENSIONS, FORCED_MATCH_DISTANCE, RESULT_LIMIT
from .errors import (
    ImageFinderError,
    DecodeError,
    EnumerationError,
    StorageError,
    HashUnavailable,
    BusyError,
)
from .scanner import (
    compute_dhash,
    hamming_distance,
    find_image_files,
    Indexer,
)
from .database import ImageStore, RootRegistry
from .search import SearchEngine
from .finder import ImageFinder

__all__ = [
    "ImageRecord",
    "Match",
    "IndexProgress",
    "IndexResult",
    "IMAGE_EXTENSIONS",
    "FORCED_MATCH_DISTANCE",
    "RESULT_LIMIT",
    "ImageFinderError",
    "DecodeError",
    "EnumerationError",
    "StorageError",
    "HashUnavailable",
    "BusyError",
    "compute_dhash",
    "hamming_distance",
    "find_image_files",
    "Indexer",
    "ImageStore",
    "RootRegistry",
    "SearchEngine",
    "ImageFinder",
]
