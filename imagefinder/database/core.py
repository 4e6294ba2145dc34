"""
ImageStore facade class for coordinating database operations.

Provides a unified interface to all index operations using the facade pattern.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Iterable, Optional

from ..config import INDEX_DB_FILE
from ..errors import StorageError
from ..models import ImageRecord
from .connection import ConnectionManager
from .schema import initialize_schema, SCHEMA_VERSION
from .operations import RecordOperations, delete_under_prefix
from .registry import RootRegistry, read_roots, write_roots
from .maintenance import MaintenanceOperations
from .utils import normalize_root


logger = logging.getLogger(__name__)


class ImageStore:
    """
    SQLite-backed store of indexed images and their root folders.

    Thread-safe for concurrent readers and a single writer.
    Uses facade pattern to delegate to specialized components.

    Usage:
        store = ImageStore(':memory:')
        store.upsert_batch([ImageRecord(path='/data/a.jpg', dhash=0x1f)])
        store.contains('/data/a.jpg')      # True
        store.registry.add('/data')
    """

    SCHEMA_VERSION = SCHEMA_VERSION

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize the image store.

        Args:
            db_path: Path to SQLite database file, ':memory:' for a private
                in-memory store, or None for the default location.
        """
        self.db_path = db_path or INDEX_DB_FILE

        self._conn_mgr = ConnectionManager(self.db_path)
        self._records = RecordOperations(self._conn_mgr)
        self._maintenance = MaintenanceOperations(self._conn_mgr)
        self.registry = RootRegistry(self._conn_mgr, self._records)

        try:
            with self._conn_mgr.connection(exclusive=True) as conn:
                initialize_schema(conn)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open index database {self.db_path}: {e}") from e

    # Delegate to RecordOperations
    def contains(self, path: str) -> bool:
        """Check whether a path is already indexed."""
        return self._records.contains(path)

    def get(self, path: str) -> Optional[ImageRecord]:
        """Return the record for path, or None."""
        return self._records.get(path)

    def existing_paths(self) -> set[str]:
        """Return every indexed path."""
        return self._records.existing_paths()

    def upsert_batch(self, records: Iterable[ImageRecord]) -> int:
        """Insert new records atomically; existing paths are skipped."""
        return self._records.upsert_batch(records)

    def delete_by_path_prefix(self, prefix: str) -> int:
        """Remove every record under prefix."""
        return self._records.delete_by_path_prefix(prefix)

    def all_records(self) -> list[ImageRecord]:
        """Full scan of the store in insertion order."""
        return self._records.all_records()

    def count(self) -> int:
        """Number of indexed records."""
        return self._records.count()

    def count_under(self, root: str) -> int:
        """Number of records under root."""
        return self.registry.count_under(root)

    def delete_root(self, root: str) -> int:
        """
        Delete every record under root and unregister the root.

        Both changes commit in one transaction, so a failure leaves neither
        orphaned records nor a dangling root.

        Returns:
            Number of records deleted
        """
        root = normalize_root(root)
        try:
            with self._conn_mgr.connection(exclusive=True) as conn:
                deleted = delete_under_prefix(conn, root)
                roots = read_roots(conn)
                if root in roots:
                    write_roots(conn, [r for r in roots if r != root])
        except sqlite3.Error as e:
            raise StorageError(f"Failed to delete root {root}: {e}") from e

        logger.info(f"Deleted root {root} ({deleted:,} records)")
        return deleted

    # Delegate to MaintenanceOperations
    def size_on_disk(self) -> int:
        """Approximate database footprint in bytes."""
        return self._maintenance.size_on_disk()

    def cleanup_missing(self) -> int:
        """Remove records for files that no longer exist."""
        return self._maintenance.cleanup_missing()

    def get_stats(self) -> dict:
        """Get index statistics."""
        return self._maintenance.get_stats()

    def clear(self):
        """Clear all records and roots."""
        self._maintenance.clear()

    def vacuum(self):
        """Compact the database file."""
        self._maintenance.vacuum()

    def close(self):
        """Release resources held by an in-memory store."""
        self._conn_mgr.close()

    def _conn(self, exclusive: bool = False):
        """Access to connection manager (tests and maintenance scripts)."""
        return self._conn_mgr.connection(exclusive=exclusive)


__all__ = ['ImageStore']
