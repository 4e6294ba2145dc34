"""
SQLite persistence for Image Finder.

Stores one row per indexed image (path, dHash, dimensions, size) plus the
list of registered root folders, enabling:
- Incremental indexing (already-indexed paths are skipped)
- Linear-scan similarity search over committed records
- Folder-scoped counts and deletion by path prefix

Public API:
- ImageStore: Main store class (explicitly constructed and passed around)
- RootRegistry: Registered root folders
- normalize_root(): Canonical form of a root folder path
"""

from __future__ import annotations

from .core import ImageStore
from .registry import RootRegistry
from .utils import normalize_root, as_prefix


__all__ = [
    'ImageStore',
    'RootRegistry',
    'normalize_root',
    'as_prefix',
]
