"""
CLI workflow orchestration for Image Finder.

Provides the CLIOrchestrator class that parses arguments, builds an
ImageFinder and dispatches to one handler per subcommand.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import ImageFinderError
from ..finder import ImageFinder
from ..database import normalize_root
from ..scanner import ConsoleProgress
from ..utils.validators import validate_file_accessible, validate_workers
from .arg_parser import parse_arguments
from .interactive import confirm_action
from .reporting import print_matches, print_index_result, print_roots, print_stats


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the CLI.

    Args:
        verbose: Enable verbose (DEBUG level) logging

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    return logging.getLogger(__name__)


class CLIOrchestrator:
    """
    Orchestrates one CLI invocation.

    Errors raised by the finder are logged and turned into exit code 1.
    """

    def __init__(self, argv=None):
        """
        Initialize the orchestrator.

        Args:
            argv: Argument list (default: sys.argv[1:])
        """
        self.argv = argv
        self.logger = None
        self.args = None
        self.finder: Optional[ImageFinder] = None

    def run(self) -> int:
        """
        Execute the command given on the command line.

        Returns:
            Exit code (0 for success, 1 for error, 130 when interrupted)
        """
        self.args = parse_arguments(self.argv)
        self.logger = setup_logging(self.args.verbose)

        handlers = {
            'index': self._index,
            'search': self._search,
            'delete-root': self._delete_root,
            'roots': self._roots,
            'stats': self._stats,
            'prune': self._prune,
        }
        handler = handlers[self.args.command]

        try:
            self.finder = self._build_finder()
            return handler()
        except ImageFinderError as e:
            self.logger.error(str(e))
            return 1
        except KeyboardInterrupt:
            print("\nInterrupted.")
            return 130
        finally:
            if self.finder is not None:
                self.finder.close()

    def _build_finder(self) -> ImageFinder:
        kwargs = {'db_path': self.args.db}
        if self.args.command == 'index' and self.args.workers is not None:
            kwargs['workers'] = self.args.workers
        if self.args.command == 'search' and self.args.limit is not None:
            kwargs['result_limit'] = self.args.limit
        return ImageFinder(**kwargs)

    def _index(self) -> int:
        if self.args.workers is not None:
            is_valid, error = validate_workers(self.args.workers)
            if not is_valid:
                self.logger.error(error)
                return 1

        directory = self.args.directory.expanduser()
        self.logger.info(f"Indexing {directory}")

        progress = ConsoleProgress(enabled=not self.args.no_progress, logger=self.logger)
        try:
            result = self.finder.index_folder(
                directory,
                progress_callback=progress,
            )
        finally:
            progress.close()

        print_index_result(result)
        return 0

    def _search(self) -> int:
        if self.args.limit is not None and self.args.limit < 0:
            self.logger.error("Limit must be zero or greater")
            return 1

        query = self.args.image.expanduser()
        is_valid, error = validate_file_accessible(str(query))
        if not is_valid:
            self.logger.error(f"{error}: {query}")
            return 1

        matches = self.finder.search_file(query)
        print_matches(matches, as_json=self.args.json)
        return 0

    def _delete_root(self) -> int:
        root = normalize_root(str(self.args.directory))
        if root not in self.finder.registry:
            self.logger.warning(f"{root} is not a registered root; removing any records under it")

        if not self.args.yes:
            count = self.finder.store.count_under(root)
            if not confirm_action(f"remove {root}", count):
                print("Cancelled.")
                return 0

        deleted = self.finder.delete_root(root)
        print(f"Deleted {deleted:,} records under {root}")
        return 0

    def _roots(self) -> int:
        print_roots(self.finder.folder_counts())
        return 0

    def _stats(self) -> int:
        print_stats(self.finder.stats())
        return 0

    def _prune(self) -> int:
        removed = self.finder.prune()
        print(f"Removed {removed:,} records for missing files")
        return 0


__all__ = ['CLIOrchestrator', 'setup_logging']
