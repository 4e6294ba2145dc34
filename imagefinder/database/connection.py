"""
Database connection management with thread safety.

Provides ConnectionManager for thread-safe SQLite operations with WAL mode.
"""

from __future__ import annotations

import sqlite3
import threading
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from ..errors import StorageError


MEMORY_PATH = ':memory:'


class ConnectionManager:
    """
    Manages SQLite connections with thread-safety.

    Provides context manager for database connections with:
    - Thread-safe write operations via lock
    - WAL mode for better read/write concurrency
    - Transaction management (BEGIN/COMMIT/ROLLBACK)

    A db_path of ':memory:' opens a private shared-cache in-memory database
    that lives as long as this manager. Shared-cache readers fail at once
    with "table is locked" rather than waiting on the busy timeout, so
    in-memory reads also take the write lock and only ever see committed
    state.
    """

    def __init__(self, db_path: str):
        """
        Initialize connection manager.

        Args:
            db_path: Path to SQLite database file, or ':memory:'
        """
        self.db_path = db_path
        self._write_lock = threading.Lock()
        self._anchor: Optional[sqlite3.Connection] = None

        if self.in_memory:
            self._uri = f"file:imagefinder-{uuid.uuid4().hex}?mode=memory&cache=shared"
            # Shared in-memory databases vanish when their last connection closes
            self._anchor = sqlite3.connect(self._uri, uri=True, check_same_thread=False)
        else:
            self._uri = None
            self._ensure_directory()

    @property
    def in_memory(self) -> bool:
        return self.db_path == MEMORY_PATH

    def _ensure_directory(self):
        """Ensure the directory for the database file exists."""
        db_path = Path(self.db_path).resolve()
        db_dir = db_path.parent

        if db_dir and db_dir != db_path:
            db_dir.mkdir(parents=True, exist_ok=True)

    def _connect(self) -> sqlite3.Connection:
        if self._uri:
            return sqlite3.connect(self._uri, uri=True, timeout=30.0, isolation_level=None)
        return sqlite3.connect(self.db_path, timeout=30.0, isolation_level=None)

    @contextmanager
    def connection(self, exclusive: bool = False) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager for database connections.

        Args:
            exclusive: If True, acquire write lock for thread safety

        Yields:
            sqlite3.Connection with row factory and WAL mode enabled

        Example:
            with conn_mgr.connection(exclusive=True) as conn:
                conn.execute("INSERT INTO ...")
        """
        locked = exclusive or self.in_memory
        if locked:
            self._write_lock.acquire()

        try:
            conn = self._connect()
            conn.row_factory = sqlite3.Row

            try:
                if not self.in_memory:
                    conn.execute("PRAGMA journal_mode=WAL")

                conn.execute("BEGIN")

                try:
                    yield conn
                    conn.execute("COMMIT")
                except BaseException:
                    conn.execute("ROLLBACK")
                    raise
            finally:
                conn.close()
        finally:
            if locked:
                self._write_lock.release()

    @contextmanager
    def reading(self, action: str) -> Generator[sqlite3.Connection, None, None]:
        """
        Read-only connection whose SQLite errors surface as StorageError.

        Args:
            action: What the read does, used in the error message
        """
        try:
            with self.connection(exclusive=False) as conn:
                yield conn
        except sqlite3.Error as e:
            raise StorageError(f"Failed to {action}: {e}") from e

    def close(self):
        """Release the in-memory anchor connection, if any."""
        if self._anchor is not None:
            self._anchor.close()
            self._anchor = None


__all__ = ['ConnectionManager', 'MEMORY_PATH']
