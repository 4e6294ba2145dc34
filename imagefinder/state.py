"""
State of the background indexing job served by the local API.

One IndexState lives on the Flask app next to the ImageFinder. The job
thread writes to it through apply_progress()/complete()/fail(); request
handlers read it through to_dict().
"""

import threading
import time
from typing import Optional

from .models import IndexProgress, IndexResult


RUNNING_STATUSES = ('indexing',)


class IndexState:
    """
    Tracks the current (or last) indexing job.

    Status values: idle, indexing, complete, cancelled, error.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.cancel_event = threading.Event()
        self.reset()

    def reset(self):
        """Reset state to initial values."""
        self.cancel_event.clear()

        self.status = 'idle'
        self.directory = ''
        self.processed = 0
        self.total = 0
        self.current_file = ''
        self.eta_seconds: Optional[float] = None
        self.message = ''
        self.result: Optional[dict] = None
        self.error: Optional[str] = None
        self.started_at: Optional[float] = None

    @property
    def running(self) -> bool:
        return self.status in RUNNING_STATUSES

    def begin(self, directory: str) -> bool:
        """
        Claim the state for a new job.

        Returns:
            False if a job is already running, True otherwise
        """
        with self._lock:
            if self.running:
                return False
            self.reset()
            self.status = 'indexing'
            self.directory = directory
            self.message = 'Looking for images...'
            self.started_at = time.time()
            return True

    @property
    def cancel_requested(self) -> bool:
        return self.cancel_event.is_set()

    def request_cancel(self) -> bool:
        """Ask the running job to stop. Returns False if nothing is running."""
        with self._lock:
            if not self.running:
                return False
            self.cancel_event.set()
            return True

    def apply_progress(self, progress: IndexProgress, message: str = ''):
        with self._lock:
            self.processed = progress.processed
            self.total = progress.total
            self.current_file = progress.current_file
            self.eta_seconds = progress.eta_seconds
            if message:
                self.message = message

    def complete(self, result: IndexResult, message: str):
        with self._lock:
            self.status = 'cancelled' if result.cancelled else 'complete'
            self.processed = result.indexed + result.failed
            self.total = result.total
            self.eta_seconds = None
            self.result = result.to_dict()
            self.message = message

    def fail(self, error: str):
        with self._lock:
            self.status = 'error'
            self.error = error
            self.eta_seconds = None
            self.message = f'Error: {error}'

    def to_dict(self) -> dict:
        """Return current status for API response."""
        with self._lock:
            progress = self.processed / self.total if self.total else (1.0 if self.result else 0.0)
            return {
                'status': self.status,
                'directory': self.directory,
                'processed': self.processed,
                'total': self.total,
                'progress': round(progress, 4),
                'current_file': self.current_file,
                'eta_seconds': self.eta_seconds,
                'message': self.message,
                'result': self.result,
                'error': self.error,
                'cancel_requested': self.cancel_event.is_set(),
                'elapsed_seconds': round(time.time() - self.started_at, 2) if self.started_at else 0,
            }
