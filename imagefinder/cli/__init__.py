"""
CLI package for Image Finder.

Provides the command-line interface for indexing folders, searching by
example image and managing indexed roots.

Public API:
- main: Entry point for CLI execution
- CLIOrchestrator: CLI workflow orchestration class
"""

from __future__ import annotations

from .orchestrator import CLIOrchestrator, setup_logging
from .arg_parser import create_parser, parse_arguments
from .reporting import print_matches, print_index_result, print_roots, print_stats
from .interactive import confirm_action


def main(argv=None) -> int:
    """
    Main entry point for the CLI.

    Delegates to CLIOrchestrator to execute one command.

    Returns:
        Exit code (0 for success, 1 for error)

    Examples:
        >>> exit_code = main(['roots'])
    """
    orchestrator = CLIOrchestrator(argv)
    return orchestrator.run()


__all__ = [
    # Main entry point
    'main',
    # Core classes
    'CLIOrchestrator',
    # Utilities
    'setup_logging',
    'create_parser',
    'parse_arguments',
    'print_matches',
    'print_index_result',
    'print_roots',
    'print_stats',
    'confirm_action',
]
