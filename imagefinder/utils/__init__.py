"""
Utilities package for Image Finder.

Provides:
- formatters: Human-readable formatting for numbers, times, sizes and distances
- validators: Input validation and security checks
"""

from __future__ import annotations

from . import formatters
from . import validators

from .formatters import (
    format_number,
    format_time_estimate,
    format_eta,
    format_distance,
    format_size,
)
from .validators import (
    validate_file_accessible,
    validate_directory,
    validate_workers,
    validate_index_params,
)

__all__ = [
    # Submodules
    'formatters',
    'validators',
    # Formatters
    'format_number',
    'format_time_estimate',
    'format_eta',
    'format_distance',
    'format_size',
    # Validators
    'validate_file_accessible',
    'validate_directory',
    'validate_workers',
    'validate_index_params',
]
