"""
Background indexing job for the local API.

Provides the IndexJob class that runs ImageFinder.index_folder() on a
worker thread and mirrors its progress and outcome into an IndexState.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import BusyError, EnumerationError, StorageError
from ..finder import ImageFinder
from ..models import IndexProgress, IndexResult
from ..state import IndexState
from ..utils import formatters

# Module logger
_logger = logging.getLogger(__name__)


class IndexJob:
    """
    One indexing run started from the API.

    The caller must have claimed the state with IndexState.begin() before
    starting the thread.
    """

    def __init__(
        self,
        finder: ImageFinder,
        state: IndexState,
        directory: str,
        workers: Optional[int] = None,
    ):
        self.finder = finder
        self.state = state
        self.directory = directory
        self.workers = workers

    def on_progress(self, progress: IndexProgress) -> None:
        """Progress observer: copy the snapshot into the shared state."""
        self.state.apply_progress(progress, self.progress_message(progress))

    @staticmethod
    def progress_message(progress: IndexProgress) -> str:
        return (
            f'Indexing images: {formatters.format_number(progress.processed)}/'
            f'{formatters.format_number(progress.total)} ({formatters.format_eta(progress.eta_seconds)})'
        )

    @staticmethod
    def result_message(result: IndexResult) -> str:
        if result.total == 0:
            return 'No new images to index'
        message = (
            f'Indexed {formatters.format_number(result.indexed)} of '
            f'{formatters.format_number(result.total)} images'
        )
        if result.failed:
            message += f' ({formatters.format_number(result.failed)} could not be read)'
        if result.cancelled:
            message += ' - cancelled'
        return message

    def run(self) -> None:
        """
        Execute the indexing run.

        Never raises; every outcome ends up in the state.
        """
        try:
            result = self.finder.index_folder(
                self.directory,
                progress_callback=self.on_progress,
                cancel_event=self.state.cancel_event,
                workers=self.workers,
            )
        except StorageError as e:
            _logger.error(f"Indexing {self.directory} aborted: {e}")
            self.state.fail(f'{e} ({formatters.format_number(e.committed)} images were saved)')
        except (EnumerationError, BusyError) as e:
            _logger.warning(f"Indexing {self.directory} failed: {e}")
            self.state.fail(str(e))
        except Exception as e:
            _logger.exception(f"Indexing error: {e}")
            self.state.fail(str(e))
        else:
            self.state.complete(result, self.result_message(result))


__all__ = ['IndexJob']
