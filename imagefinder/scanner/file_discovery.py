"""
File discovery module for the scanner package.

Provides functionality to enumerate indexable image files under a root
folder, skipping hidden entries and filtering by extension.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional

from ..config import IMAGE_EXTENSIONS, HEIF_EXTENSIONS
from ..database.utils import normalize_root
from ..errors import EnumerationError
from .dependencies import HAS_HEIF_SUPPORT, _logger


def is_hidden(name: str) -> bool:
    """Dot-prefixed names are hidden."""
    return name.startswith('.')


def supported_extensions() -> set[str]:
    """Allow-listed extensions this installation can decode."""
    if HAS_HEIF_SUPPORT:
        return set(IMAGE_EXTENSIONS)
    return {ext for ext in IMAGE_EXTENSIONS if ext not in HEIF_EXTENSIONS}


def find_image_files(
    root_path: str | Path,
    recursive: bool = True,
    extensions: Optional[Iterable[str]] = None,
) -> list[str]:
    """
    Find all indexable image files under the given directory.

    Args:
        root_path: Directory path to search for images
        recursive: If True, search subdirectories recursively
        extensions: Override the allow-list (lower-case, with leading dot)

    Returns:
        Sorted list of absolute file paths under the normalized root

    Raises:
        EnumerationError: If the root itself cannot be opened or listed

    Notes:
        - Hidden files and hidden directories are skipped at every level
        - Subdirectories that cannot be read are logged and skipped
        - Symlinked directories are not followed
    """
    root = normalize_root(root_path)
    allowed = {ext.lower() for ext in extensions} if extensions is not None else supported_extensions()

    if not os.path.isdir(root):
        raise EnumerationError(f"Not a directory: {root}")
    try:
        with os.scandir(root):
            pass
    except OSError as e:
        raise EnumerationError(f"Cannot read directory {root}: {e}") from e

    def _on_walk_error(err: OSError):
        _logger.warning(f"Skipping unreadable directory {err.filename}: {err.strerror}")

    images = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_walk_error):
        # Prune in place so os.walk does not descend into hidden folders
        dirnames[:] = [] if not recursive else [d for d in dirnames if not is_hidden(d)]

        for name in filenames:
            if is_hidden(name):
                continue
            if os.path.splitext(name)[1].lower() not in allowed:
                continue
            filepath = os.path.join(dirpath, name)
            if os.path.isfile(filepath):
                images.append(filepath)

    images.sort()
    return images


__all__ = ['find_image_files', 'supported_extensions', 'is_hidden']
