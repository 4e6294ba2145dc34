"""
Formatting utilities for Image Finder.

Provides human-readable formatting for numbers, time estimates, and file sizes.
"""

from __future__ import annotations

from typing import Optional

# Re-export format_size from models for convenience
from ..models import format_size


def format_number(n: int) -> str:
    """
    Format large numbers with commas for readability.

    Examples:
        >>> format_number(1000)
        '1,000'
        >>> format_number(1234567)
        '1,234,567'
    """
    return f"{n:,}"


def format_time_estimate(seconds: float) -> str:
    """
    Format seconds into human-readable time estimate.

    Examples:
        >>> format_time_estimate(45)
        '45s'
        >>> format_time_estimate(150)
        '2m 30s'
        >>> format_time_estimate(3665)
        '1h 1m'
    """
    if seconds < 60:
        return f"{int(seconds)}s"
    elif seconds < 3600:
        return f"{int(seconds / 60)}m {int(seconds % 60)}s"
    else:
        hours = int(seconds / 3600)
        minutes = int((seconds % 3600) / 60)
        return f"{hours}h {minutes}m"


def format_eta(seconds: Optional[float]) -> str:
    """
    Format an indexing ETA, padded like a clock.

    Examples:
        >>> format_eta(None)
        'ETA —'
        >>> format_eta(65)
        'ETA 1m 05s'
        >>> format_eta(3725)
        'ETA 1h 02m 05s'
    """
    if seconds is None:
        return "ETA —"
    total = int(round(max(seconds, 0)))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"ETA {hours}h {minutes:02d}m {secs:02d}s"
    return f"ETA {minutes}m {secs:02d}s"


def format_distance(distance: float) -> str:
    """
    Format a Hamming distance as a similarity percentage.

    Examples:
        >>> format_distance(0)
        '100.0%'
        >>> format_distance(16)
        '75.0%'
    """
    return f"{(1 - distance / 64) * 100:.1f}%"


__all__ = ['format_number', 'format_time_estimate', 'format_eta', 'format_distance', 'format_size']
