"""
Indexing pipeline for the scanner package.

Grows the image store from a folder's image files: enumerate, skip what is
already indexed, hash the rest on a thread pool, and commit the results in
fixed-size batches while reporting progress.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Optional

from ..config import BATCH_SIZE, DEFAULT_WORKERS, PROGRESS_STEPS
from ..database import ImageStore, normalize_root
from ..errors import DecodeError, StorageError
from ..models import ImageRecord, IndexResult
from .analysis import analyze_image
from .file_discovery import find_image_files
from .progress import ProgressReporter, ProgressCallback


logger = logging.getLogger(__name__)


class Indexer:
    """
    Indexes folders into an ImageStore.

    Only one run may write to a given store at a time; callers serialize
    runs (ImageFinder does this with a lock).

    Usage:
        indexer = Indexer(store, workers=4)
        result = indexer.index_folder('/data/photos', progress_callback=print)
        result.as_tuple()   # (indexed, total)
    """

    def __init__(
        self,
        store: ImageStore,
        workers: int = DEFAULT_WORKERS,
        batch_size: int = BATCH_SIZE,
        progress_steps: int = PROGRESS_STEPS,
    ):
        """
        Initialize the indexer.

        Args:
            store: Destination store
            workers: Number of hashing threads
            batch_size: Records committed per transaction
            progress_steps: Progress is reported every total/progress_steps items
        """
        self.store = store
        self.workers = max(1, int(workers))
        self.batch_size = max(1, int(batch_size))
        self.progress_steps = max(1, int(progress_steps))

    def index_folder(
        self,
        folder: str | Path,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
        workers: Optional[int] = None,
    ) -> IndexResult:
        """
        Index every new image file under folder.

        Args:
            folder: Root folder to index
            progress_callback: Observer receiving IndexProgress snapshots
            cancel_event: Set to stop after the current candidate
            workers: Hashing threads for this run (default: self.workers)

        Returns:
            IndexResult with indexed/total counts

        Raises:
            EnumerationError: If the folder cannot be listed (nothing written)
            StorageError: If a batch fails twice; .committed holds the
                number of records committed before the abort
        """
        start = time.monotonic()
        root = normalize_root(folder)

        existing = self.store.existing_paths()
        files = find_image_files(root)
        self.store.registry.add(root)

        candidates = [f for f in files if f not in existing]
        result = IndexResult(total=len(candidates), root=root)
        logger.info(
            f"Found {len(files):,} image files in {root} "
            f"({len(files) - len(candidates):,} already indexed)"
        )

        if not candidates:
            result.elapsed_seconds = time.monotonic() - start
            return result

        reporter = ProgressReporter(len(candidates), progress_callback, self.progress_steps)
        buffer: list[ImageRecord] = []

        workers = max(1, workers or self.workers)
        # At most this many files are in flight, so memory stays bounded
        window = workers * self.batch_size

        executor = ThreadPoolExecutor(max_workers=workers)
        try:
            for offset in range(0, len(candidates), window):
                futures = {
                    executor.submit(analyze_image, path): path
                    for path in candidates[offset:offset + window]
                }

                for future in as_completed(futures):
                    path = futures.pop(future)
                    try:
                        buffer.append(future.result())
                    except (DecodeError, OSError) as e:
                        result.failed += 1
                        logger.debug(f"Skipping {path}: {e}")
                    except Exception as e:
                        result.failed += 1
                        logger.warning(f"Unexpected error analyzing {path}: {e}")

                    reporter.advance(os.path.basename(path))

                    if len(buffer) >= self.batch_size:
                        result.indexed += self._flush(buffer, result.indexed)
                        buffer = []

                    if cancel_event is not None and cancel_event.is_set():
                        result.cancelled = True
                        logger.info(f"Indexing cancelled after {reporter.processed:,} files")
                        break

                if result.cancelled:
                    break

            if buffer:
                result.indexed += self._flush(buffer, result.indexed)
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

        reporter.finish()
        result.elapsed_seconds = time.monotonic() - start

        logger.info(
            f"Indexed {result.indexed:,} of {result.total:,} images in {root}"
            + (f" ({result.failed:,} failed)" if result.failed else "")
        )
        return result

    def _flush(self, batch: list[ImageRecord], committed: int) -> int:
        """Commit one batch, retrying once before aborting the run."""
        try:
            return self.store.upsert_batch(batch)
        except StorageError as e:
            logger.warning(f"Batch write failed, retrying once: {e}")

        try:
            return self.store.upsert_batch(batch)
        except StorageError as e:
            raise StorageError(
                f"Indexing aborted after committing {committed:,} records: {e}",
                committed=committed,
            ) from e


__all__ = ['Indexer']
