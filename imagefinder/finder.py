"""
ImageFinder: the invocation surface over store, indexer and search engine.

Every front-end (CLI, local API, tests) constructs one of these and passes
it around; there is no global instance.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from .database import ImageStore
from .errors import BusyError
from .models import IndexResult, Match
from .scanner import Indexer
from .scanner.progress import ProgressCallback
from .search import SearchEngine
from .user_config import get_user_config


logger = logging.getLogger(__name__)


class ImageFinder:
    """
    Index folders of images and search them by visual similarity.

    Indexing and root deletion are serialized: starting one while another
    runs raises BusyError. Searches and counts may run at any time and see
    whatever has been committed.

    Usage:
        finder = ImageFinder(db_path='index.db')
        finder.index_folder('/data/photos').as_tuple()   # (indexed, total)
        finder.search(open('query.jpg', 'rb').read())
        finder.delete_root('/data/photos')
    """

    def __init__(
        self,
        db_path: Optional[str] = None,
        store: Optional[ImageStore] = None,
        workers: Optional[int] = None,
        batch_size: Optional[int] = None,
        result_limit: Optional[int] = None,
        forced_distance: Optional[float] = None,
    ):
        """
        Initialize the finder.

        Args:
            db_path: Index database path (user config default if None)
            store: Pre-built store; takes precedence over db_path
            workers: Hashing threads (user config default if None)
            batch_size: Records per transaction (user config default if None)
            result_limit: Search result target size (user config default if None)
            forced_distance: Always-included distance (user config default if None)
        """
        config = get_user_config()

        self.store = store or ImageStore(db_path or config.index_db_file)
        self.indexer = Indexer(
            self.store,
            workers=workers if workers is not None else config.default_workers,
            batch_size=batch_size if batch_size is not None else config.batch_size,
        )
        self.engine = SearchEngine(
            self.store,
            forced_distance=forced_distance if forced_distance is not None else config.forced_match_distance,
            limit=result_limit if result_limit is not None else config.result_limit,
        )
        self._run_lock = threading.Lock()

    @property
    def registry(self):
        return self.store.registry

    @property
    def busy(self) -> bool:
        """True while an indexing or deletion run holds the store."""
        return self._run_lock.locked()

    @contextmanager
    def _exclusive_run(self, what: str):
        if not self._run_lock.acquire(blocking=False):
            raise BusyError(f"Cannot {what}: another indexing or deletion run is in progress")
        try:
            yield
        finally:
            self._run_lock.release()

    def index_folder(
        self,
        path: str | Path,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
        workers: Optional[int] = None,
    ) -> IndexResult:
        """Register and index a folder; see Indexer.index_folder()."""
        with self._exclusive_run('index'):
            return self.indexer.index_folder(
                path,
                progress_callback=progress_callback,
                cancel_event=cancel_event,
                workers=workers,
            )

    def search(self, query_bytes: bytes) -> list[Match]:
        """Rank stored images against the query image bytes."""
        return self.engine.search(query_bytes)

    def search_file(self, path: str | Path) -> list[Match]:
        """Rank stored images against an image file."""
        return self.engine.search_file(path)

    def delete_root(self, path: str | Path) -> int:
        """
        Delete every record under a root and unregister it, atomically.

        Returns:
            Number of records deleted
        """
        with self._exclusive_run('delete root'):
            return self.store.delete_root(str(path))

    def roots(self) -> list[str]:
        """Registered roots, sorted case-insensitively."""
        return self.registry.list()

    def folder_counts(self) -> dict[str, int]:
        """Record count for every registered root."""
        return self.registry.folder_counts()

    def stats(self) -> dict:
        """Index statistics (records, roots, database size)."""
        return self.store.get_stats()

    def prune(self) -> int:
        """Drop records whose files no longer exist, then compact."""
        with self._exclusive_run('prune'):
            removed = self.store.cleanup_missing()
            self.store.vacuum()
        return removed

    def close(self):
        self.store.close()


__all__ = ['ImageFinder']
