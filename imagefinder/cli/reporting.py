"""
Report formatting and display for the CLI interface.

Provides functions to print search results, root listings and statistics.
"""

from __future__ import annotations

import json

from ..models import Match, IndexResult, format_size
from ..utils.formatters import format_distance, format_number, format_time_estimate


def _print_section_header(title: str) -> None:
    """Print a section header with divider lines."""
    print("\n" + "-" * 70)
    print(title)
    print("-" * 70)


def print_matches(matches: list[Match], as_json: bool = False) -> None:
    """
    Print ranked search results.

    Args:
        matches: Ranked Match objects
        as_json: Print a JSON array instead of a table
    """
    if as_json:
        print(json.dumps([m.to_dict() for m in matches], indent=2))
        return

    if not matches:
        print("No matches found.")
        return

    _print_section_header(f"{len(matches)} MATCHES")
    for rank, match in enumerate(matches, start=1):
        print(f"{rank:>3}. {match.path}")
        print(f"     distance {match.distance:.0f} ({format_distance(match.distance)}) | "
              f"{match.resolution} | {format_size(match.file_size)}")


def print_index_result(result: IndexResult) -> None:
    """Print the summary line of an indexing run."""
    if result.total == 0:
        print("No new images to index.")
        return

    summary = (
        f"Indexed {format_number(result.indexed)} of {format_number(result.total)} images "
        f"in {format_time_estimate(result.elapsed_seconds)}"
    )
    if result.failed:
        summary += f" ({format_number(result.failed)} could not be read)"
    if result.cancelled:
        summary += " [cancelled]"
    print(summary)


def print_roots(counts: dict[str, int]) -> None:
    """Print registered roots with their record counts."""
    if not counts:
        print("No indexed folders.")
        return

    _print_section_header("INDEXED FOLDERS")
    width = max(len(format_number(c)) for c in counts.values())
    for root, count in counts.items():
        print(f"  {format_number(count):>{width}}  {root}")


def print_stats(stats: dict) -> None:
    """Print index statistics."""
    _print_section_header("INDEX")
    print(f"  Database:      {stats['db_path']}")
    print(f"  Size on disk:  {format_size(stats['db_size_bytes'])}")
    print(f"  Images:        {format_number(stats['total_records'])}")
    print(f"  Searchable:    {format_number(stats['hashed_records'])}")
    print(f"  Folders:       {format_number(stats['root_count'])}")


__all__ = [
    'print_matches',
    'print_index_result',
    'print_roots',
    'print_stats',
]
