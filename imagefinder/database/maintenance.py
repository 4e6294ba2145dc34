"""
Maintenance operations for the image index.

Provides cleanup, statistics, and vacuum operations.
"""

from __future__ import annotations

import os
import sqlite3
import logging

from ..errors import StorageError
from .connection import ConnectionManager
from .registry import read_roots
from .utils import CHUNK_SIZE


logger = logging.getLogger(__name__)


class MaintenanceOperations:
    """
    Handles maintenance operations for the image index.

    Provides cleanup, statistics reporting, and database compaction.
    """

    def __init__(self, connection_manager: ConnectionManager):
        """
        Initialize maintenance operations.

        Args:
            connection_manager: ConnectionManager instance for database access
        """
        self.conn_mgr = connection_manager

    def size_on_disk(self) -> int:
        """
        Approximate storage footprint in bytes (advisory only).

        Includes the WAL and shared-memory side files. In-memory databases
        report page_count * page_size.
        """
        if self.conn_mgr.in_memory:
            with self.conn_mgr.reading("measure database size") as conn:
                pages = conn.execute("PRAGMA page_count").fetchone()[0]
                page_size = conn.execute("PRAGMA page_size").fetchone()[0]
                return pages * page_size

        total = 0
        for suffix in ('', '-wal', '-shm'):
            path = self.conn_mgr.db_path + suffix
            if os.path.exists(path):
                total += os.path.getsize(path)
        return total

    def cleanup_missing(self) -> int:
        """
        Remove records for files that no longer exist.

        Returns:
            Number of records removed
        """
        try:
            with self.conn_mgr.connection(exclusive=True) as conn:
                rows = conn.execute("SELECT path FROM images").fetchall()
                missing = [row['path'] for row in rows if not os.path.exists(row['path'])]

                # Delete in chunks to avoid SQLite variable limit
                for i in range(0, len(missing), CHUNK_SIZE):
                    chunk = missing[i:i + CHUNK_SIZE]
                    placeholders = ','.join('?' * len(chunk))
                    conn.execute(
                        f"DELETE FROM images WHERE path IN ({placeholders})",
                        chunk
                    )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to remove missing records: {e}") from e

        if missing:
            logger.info(f"Removed {len(missing):,} records for missing files")
        return len(missing)

    def get_stats(self) -> dict:
        """
        Get index statistics.

        Returns:
            Dictionary with index statistics:
                - total_records: Number of indexed images
                - hashed_records: Records usable for search
                - root_count: Number of registered roots
                - db_size_bytes: Database size in bytes
                - db_size_mb: Database size in MB
                - db_path: Path to database file
        """
        with self.conn_mgr.reading("collect index statistics") as conn:
            total = conn.execute("SELECT COUNT(*) AS cnt FROM images").fetchone()['cnt']
            hashed = conn.execute(
                "SELECT COUNT(*) AS cnt FROM images WHERE dhash IS NOT NULL"
            ).fetchone()['cnt']
            root_count = len(read_roots(conn))

        db_size = self.size_on_disk()
        return {
            'total_records': total,
            'hashed_records': hashed,
            'root_count': root_count,
            'db_size_bytes': db_size,
            'db_size_mb': round(db_size / (1024 * 1024), 2),
            'db_path': self.conn_mgr.db_path,
        }

    def clear(self):
        """Remove every record and registered root."""
        try:
            with self.conn_mgr.connection(exclusive=True) as conn:
                conn.execute("DELETE FROM images")
                conn.execute("DELETE FROM meta WHERE key != 'schema_version'")
        except sqlite3.Error as e:
            raise StorageError(f"Failed to clear index: {e}") from e
        self.vacuum()

    def vacuum(self):
        """Compact the database file."""
        if self.conn_mgr.in_memory:
            return
        try:
            # VACUUM must run outside a transaction
            conn = sqlite3.connect(self.conn_mgr.db_path, timeout=30.0)
            try:
                conn.execute("VACUUM")
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.debug(f"Failed to vacuum database: {e}")


__all__ = ['MaintenanceOperations']
