"""
Argument parsing for the CLI interface.

Provides functions to create and configure the argument parser for the
image finder command-line interface.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from ..config import DEFAULT_WORKERS, RESULT_LIMIT


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance with one subparser per command
    """
    parser = argparse.ArgumentParser(
        prog='imagefinder',
        description='Index folders of images and find visually similar ones',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s index ~/Pictures
      Index every new image under ~/Pictures

  %(prog)s search query.jpg
      List the closest indexed images to query.jpg

  %(prog)s search query.jpg --json
      Same, as JSON for scripting

  %(prog)s delete-root ~/Pictures --yes
      Forget ~/Pictures and every image indexed under it

  %(prog)s roots
      Show indexed folders with their image counts
        """
    )

    parser.add_argument(
        '--db',
        type=str,
        default=None,
        help='Index database file (default: ~/.imagefinder_index.db or IMAGEFINDER_DB)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )

    subparsers = parser.add_subparsers(dest='command', metavar='command')
    subparsers.required = True

    # index
    index_parser = subparsers.add_parser('index', help='Index a folder of images')
    index_parser.add_argument('directory', type=Path, help='Folder to index')
    index_parser.add_argument(
        '-w', '--workers',
        type=int,
        default=None,
        help=f'Number of parallel hashing workers. Default: {DEFAULT_WORKERS}'
    )
    index_parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bar (useful for piping output)'
    )

    # search
    search_parser = subparsers.add_parser('search', help='Find images similar to a query image')
    search_parser.add_argument('image', type=Path, help='Query image file')
    search_parser.add_argument(
        '-n', '--limit',
        type=int,
        default=None,
        help=f'Result count when there are few near-exact matches. Default: {RESULT_LIMIT}'
    )
    search_parser.add_argument(
        '--json',
        action='store_true',
        help='Print results as JSON'
    )

    # delete-root
    delete_parser = subparsers.add_parser(
        'delete-root',
        help='Remove an indexed folder and all its records'
    )
    delete_parser.add_argument('directory', type=Path, help='Indexed folder to remove')
    delete_parser.add_argument(
        '-y', '--yes',
        action='store_true',
        help='Do not ask for confirmation'
    )

    # roots
    subparsers.add_parser('roots', help='List indexed folders with record counts')

    # stats
    subparsers.add_parser('stats', help='Show index statistics')

    # prune
    subparsers.add_parser('prune', help='Remove records for files that no longer exist')

    return parser


def parse_arguments(argv=None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: List of argument strings (default: sys.argv)

    Returns:
        Parsed arguments as Namespace object

    Examples:
        >>> args = parse_arguments(['search', 'query.jpg', '--limit', '5'])
        >>> args.command, args.limit
        ('search', 5)
    """
    parser = create_parser()
    return parser.parse_args(argv)


__all__ = [
    'create_parser',
    'parse_arguments',
]
