"""
Exception types raised by Image Finder.

Per-file problems (DecodeError, OSError) are recovered by the indexer.
Run-level problems surface to the caller as one of the types below.
"""

from __future__ import annotations


class ImageFinderError(Exception):
    """Base class for all Image Finder errors."""


class DecodeError(ImageFinderError):
    """A file's bytes cannot be decoded as an image."""


class EnumerationError(ImageFinderError):
    """The root folder of an indexing run cannot be opened or listed."""


class StorageError(ImageFinderError):
    """
    The database rejected a write or delete.

    Attributes:
        committed: Records committed by the aborted run before the failure
    """

    def __init__(self, message: str, committed: int = 0):
        super().__init__(message)
        self.committed = committed


class HashUnavailable(ImageFinderError):
    """The query image of a search could not be hashed."""


class BusyError(ImageFinderError):
    """An indexing or deletion run is already in progress."""


__all__ = [
    'ImageFinderError',
    'DecodeError',
    'EnumerationError',
    'StorageError',
    'HashUnavailable',
    'BusyError',
]
