"""
Core record operations for the image index.

Provides RecordOperations for lookups, batch inserts, prefix-scoped deletes
and full scans of the images table.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Iterable, Optional

from ..errors import StorageError
from ..models import ImageRecord
from .connection import ConnectionManager
from .utils import as_prefix, record_to_row, row_to_record, CHUNK_SIZE


logger = logging.getLogger(__name__)

_INSERT_SQL = """
    INSERT OR IGNORE INTO images (
        id, path, dhash, width, height, file_size
    ) VALUES (?, ?, ?, ?, ?, ?)
"""


def delete_under_prefix(conn: sqlite3.Connection, prefix: str) -> int:
    """
    Delete every row whose path starts with prefix, inside conn's transaction.

    Uses substr() rather than LIKE so '%' and '_' in paths are literal and
    matching stays case-sensitive.
    """
    prefix = as_prefix(prefix)
    result = conn.execute(
        "DELETE FROM images WHERE substr(path, 1, ?) = ?",
        (len(prefix), prefix)
    )
    return result.rowcount


class RecordOperations:
    """
    Handles CRUD operations for indexed image records.

    Reads reflect committed state only. Every write runs in a single
    transaction and raises StorageError if SQLite rejects it.
    """

    def __init__(self, connection_manager: ConnectionManager):
        """
        Initialize record operations.

        Args:
            connection_manager: ConnectionManager instance for database access
        """
        self.conn_mgr = connection_manager

    def contains(self, path: str) -> bool:
        """Check whether a path is already indexed."""
        with self.conn_mgr.reading("look up indexed path") as conn:
            row = conn.execute(
                "SELECT 1 FROM images WHERE path = ? LIMIT 1", (str(path),)
            ).fetchone()
            return row is not None

    def get(self, path: str) -> Optional[ImageRecord]:
        """Return the record stored for path, or None."""
        with self.conn_mgr.reading("read record") as conn:
            row = conn.execute(
                "SELECT * FROM images WHERE path = ?", (str(path),)
            ).fetchone()
            return row_to_record(row) if row else None

    def existing_paths(self) -> set[str]:
        """Return the set of every indexed path."""
        with self.conn_mgr.reading("list indexed paths") as conn:
            rows = conn.execute("SELECT path FROM images").fetchall()
            return {row['path'] for row in rows}

    def upsert_batch(self, records: Iterable[ImageRecord]) -> int:
        """
        Insert records whose path is not yet indexed.

        The whole batch is one transaction: either every new record becomes
        visible or, if SQLite fails, none does.

        Args:
            records: ImageRecord objects to insert

        Returns:
            Number of records actually inserted (existing paths are skipped)

        Raises:
            StorageError: If the batch could not be committed
        """
        rows = [record_to_row(record) for record in records]
        if not rows:
            return 0

        try:
            with self.conn_mgr.connection(exclusive=True) as conn:
                before = conn.total_changes
                for i in range(0, len(rows), CHUNK_SIZE):
                    conn.executemany(_INSERT_SQL, rows[i:i + CHUNK_SIZE])
                inserted = conn.total_changes - before
        except sqlite3.Error as e:
            raise StorageError(f"Failed to write batch of {len(rows)} records: {e}") from e

        logger.debug(f"Committed {inserted} of {len(rows)} records")
        return inserted

    def delete_by_path_prefix(self, prefix: str) -> int:
        """
        Remove every record whose path lies under prefix.

        Args:
            prefix: Folder path; a trailing separator is added if missing

        Returns:
            Number of records deleted

        Raises:
            StorageError: If the delete could not be committed
        """
        try:
            with self.conn_mgr.connection(exclusive=True) as conn:
                deleted = delete_under_prefix(conn, prefix)
        except sqlite3.Error as e:
            raise StorageError(f"Failed to delete records under {prefix}: {e}") from e

        logger.info(f"Deleted {deleted:,} records under {prefix}")
        return deleted

    def all_records(self) -> list[ImageRecord]:
        """
        Return every record in insertion order.

        The scan runs inside one read transaction, so it sees a single
        committed snapshot with no duplicates and no omissions.
        """
        with self.conn_mgr.reading("scan records") as conn:
            rows = conn.execute("SELECT * FROM images ORDER BY seq").fetchall()
            return [row_to_record(row) for row in rows]

    def count(self) -> int:
        """Return the number of indexed records."""
        with self.conn_mgr.reading("count records") as conn:
            return conn.execute("SELECT COUNT(*) AS cnt FROM images").fetchone()['cnt']

    def count_under(self, root: str) -> int:
        """Count records equal to root or lying under root."""
        root = str(root).rstrip('/\\') or str(root)
        prefix = as_prefix(root)
        with self.conn_mgr.reading(f"count records under {root}") as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS cnt FROM images WHERE path = ? OR substr(path, 1, ?) = ?",
                (root, len(prefix), prefix)
            ).fetchone()
            return row['cnt']


__all__ = ['RecordOperations', 'delete_under_prefix']
