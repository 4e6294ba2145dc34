"""
Registry of indexed root folders.

Roots live in a single JSON key/value slot of the meta table, independent of
the image records. Which records belong to which root is always recomputed
by path-prefix matching.
"""

from __future__ import annotations

import json
import logging
import sqlite3

from ..config import ROOTS_KEY
from ..errors import StorageError
from .connection import ConnectionManager
from .operations import RecordOperations
from .utils import normalize_root


logger = logging.getLogger(__name__)


def _sort_roots(roots) -> list[str]:
    return sorted(set(roots), key=lambda p: (p.casefold(), p))


def read_roots(conn: sqlite3.Connection) -> list[str]:
    """Read the stored root list inside conn's transaction."""
    row = conn.execute("SELECT value FROM meta WHERE key = ?", (ROOTS_KEY,)).fetchone()
    if not row or not row['value']:
        return []
    try:
        data = json.loads(row['value'])
    except json.JSONDecodeError:
        logger.warning(f"Ignoring unreadable root list stored under {ROOTS_KEY}")
        return []
    return [str(p) for p in data if isinstance(p, str)]


def write_roots(conn: sqlite3.Connection, roots) -> None:
    """Replace the stored root list inside conn's transaction."""
    conn.execute(
        "INSERT OR REPLACE INTO meta (key, value) VALUES (?, ?)",
        (ROOTS_KEY, json.dumps(_sort_roots(roots)))
    )


class RootRegistry:
    """
    The set of user-chosen folders that have been indexed.

    Usage:
        registry.add('/data/photos/')
        registry.list()             # ['/data/photos']
        registry.count_under('/data/photos')
    """

    def __init__(self, connection_manager: ConnectionManager, records: RecordOperations):
        """
        Initialize the registry.

        Args:
            connection_manager: ConnectionManager instance for database access
            records: Record operations used to derive per-root counts
        """
        self.conn_mgr = connection_manager
        self.records = records

    def list(self) -> list[str]:
        """Return registered roots sorted case-insensitively."""
        with self.conn_mgr.reading("read registered roots") as conn:
            return _sort_roots(read_roots(conn))

    def __contains__(self, path) -> bool:
        return normalize_root(path) in self.list()

    def add(self, path) -> str:
        """
        Register a root folder. Idempotent.

        Returns:
            The normalized root path
        """
        root = normalize_root(path)
        try:
            with self.conn_mgr.connection(exclusive=True) as conn:
                roots = read_roots(conn)
                if root not in roots:
                    write_roots(conn, roots + [root])
                    logger.info(f"Registered root folder: {root}")
        except sqlite3.Error as e:
            raise StorageError(f"Failed to register root {root}: {e}") from e
        return root

    def remove(self, path) -> bool:
        """
        Unregister a root folder. Idempotent.

        Records under the root are left untouched; delete them separately
        with the record store's delete_by_path_prefix().

        Returns:
            True if the root was registered
        """
        root = normalize_root(path)
        try:
            with self.conn_mgr.connection(exclusive=True) as conn:
                roots = read_roots(conn)
                if root not in roots:
                    return False
                write_roots(conn, [r for r in roots if r != root])
        except sqlite3.Error as e:
            raise StorageError(f"Failed to remove root {root}: {e}") from e
        logger.info(f"Removed root folder: {root}")
        return True

    def count_under(self, root) -> int:
        """Count indexed records under root (recomputed on every call)."""
        return self.records.count_under(normalize_root(root))

    def folder_counts(self) -> dict[str, int]:
        """Return {root: record count} for every registered root."""
        return {root: self.records.count_under(root) for root in self.list()}


__all__ = ['RootRegistry', 'read_roots', 'write_roots']
