"""
Shared utilities for database operations.

Provides row conversion and path-prefix helpers used by the record store
and the root registry.
"""

from __future__ import annotations

import os
import sqlite3

from ..models import ImageRecord, hash_to_hex, hex_to_hash


# SQLite variable limit constant - used for batch operations
# SQLite has a limit of 999 variables, we use 500 for safety
CHUNK_SIZE = 500


def normalize_root(path: str) -> str:
    """
    Normalize a folder path for use as a registry key.

    Expands '~', makes the path absolute, resolves symlinks and strips any
    trailing separator (except for the filesystem root itself).

    Examples:
        >>> normalize_root('/data/photos/')
        '/data/photos'
    """
    resolved = os.path.realpath(os.path.abspath(os.path.expanduser(str(path))))
    stripped = resolved.rstrip(os.sep)
    return stripped or os.sep


def as_prefix(path: str) -> str:
    """
    Return path with exactly one trailing separator.

    Prefix matching against this value never matches sibling folders that
    merely share leading characters ('/a/b/' does not match '/a/bc/x.jpg').
    """
    path = str(path)
    return path if path.endswith(os.sep) else path + os.sep


def record_to_row(record: ImageRecord) -> tuple:
    """Convert an ImageRecord into an images-table parameter tuple."""
    return (
        record.id,
        record.path,
        hash_to_hex(record.dhash),
        max(0, int(record.width or 0)),
        max(0, int(record.height or 0)),
        max(0, int(record.file_size or 0)),
    )


def row_to_record(row: sqlite3.Row) -> ImageRecord:
    """
    Convert database row to ImageRecord object.

    Args:
        row: sqlite3.Row from database query

    Returns:
        ImageRecord object
    """
    return ImageRecord(
        id=row['id'],
        path=row['path'],
        dhash=hex_to_hash(row['dhash']),
        width=row['width'] or 0,
        height=row['height'] or 0,
        file_size=row['file_size'] or 0,
    )


__all__ = [
    'CHUNK_SIZE',
    'normalize_root',
    'as_prefix',
    'record_to_row',
    'row_to_record',
]
