"""
Progress reporting for indexing runs.

ProgressReporter turns per-file completions into coarse IndexProgress
snapshots; ConsoleProgress is an observer that renders them with tqdm.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Any

from ..config import PROGRESS_STEPS
from ..models import IndexProgress
from ..utils.formatters import format_number, format_time_estimate
from .dependencies import HAS_TQDM, _tqdm_class


ProgressCallback = Callable[[IndexProgress], None]


def estimate_eta(elapsed: float, processed: int, total: int) -> Optional[float]:
    """
    Extrapolate the remaining time from the average time per item.

    Returns:
        Seconds remaining, or None until at least one item is processed

    Examples:
        >>> estimate_eta(10.0, 5, 20)
        30.0
        >>> estimate_eta(3.0, 0, 20) is None
        True
    """
    if processed <= 0 or total <= 0:
        return None
    per_item = elapsed / processed
    return per_item * max(total - processed, 0)


class ProgressReporter:
    """
    Counts processed candidates and pushes a snapshot every stride items.

    The stride is 1/steps of the total (at least 1). Only the thread that
    consumes worker results calls advance(), so counts never go backwards
    and are never double-counted.
    """

    def __init__(
        self,
        total: int,
        callback: Optional[ProgressCallback] = None,
        steps: int = PROGRESS_STEPS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.total = total
        self.callback = callback
        self.stride = max(1, total // max(1, steps))
        self.clock = clock
        self.start_time = clock()
        self.processed = 0
        self.current_file = ""
        self._last_reported = 0

    def snapshot(self) -> IndexProgress:
        elapsed = self.clock() - self.start_time
        return IndexProgress(
            processed=self.processed,
            total=self.total,
            current_file=self.current_file,
            eta_seconds=estimate_eta(elapsed, self.processed, self.total),
        )

    def advance(self, filename: str) -> None:
        """Record one processed candidate."""
        self.processed += 1
        self.current_file = filename
        if self.processed - self._last_reported >= self.stride:
            self._emit()

    def finish(self) -> None:
        """Push a final snapshot unless the last one is already current."""
        if self.processed != self._last_reported:
            self._emit()

    def _emit(self) -> None:
        self._last_reported = self.processed
        if self.callback is not None:
            self.callback(self.snapshot())


class ConsoleProgress:
    """
    Progress observer for terminals.

    Renders a tqdm bar when tqdm is installed and enabled; otherwise logs a
    line per snapshot.
    """

    def __init__(self, enabled: bool = True, logger: Optional[logging.Logger] = None):
        self.enabled = enabled
        self.logger = logger or logging.getLogger(__name__)
        self._bar: Optional[Any] = None

    def __call__(self, progress: IndexProgress) -> None:
        if not self.enabled:
            return

        if HAS_TQDM and _tqdm_class is not None:
            if self._bar is None:
                self._bar = _tqdm_class(
                    total=progress.total,
                    desc="Indexing images",
                    unit="img",
                    ncols=80,
                )
            self._bar.n = progress.processed
            self._bar.set_postfix_str(progress.current_file, refresh=False)
            self._bar.refresh()
            return

        eta = progress.eta_seconds
        eta_str = f", ~{format_time_estimate(eta)} remaining" if eta is not None else ""
        self.logger.info(
            f"Indexed {format_number(progress.processed)}/{format_number(progress.total)} "
            f"({progress.percent}%{eta_str}) {progress.current_file}"
        )

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None


__all__ = ['ProgressReporter', 'ConsoleProgress', 'ProgressCallback', 'estimate_eta']
