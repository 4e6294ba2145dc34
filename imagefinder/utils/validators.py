"""
Input validation for Image Finder.

Provides validators for file accessibility, directories
and indexing parameters.
"""

from __future__ import annotations

import os
from typing import Optional


def validate_file_accessible(filepath: str) -> tuple[bool, str]:
    """
    Validate that a file exists and is readable.

    Returns:
        Tuple of (is_valid, error_message)

    Examples:
        >>> validate_file_accessible('/nonexistent/file.jpg')
        (False, 'File does not exist')
    """
    if not os.path.exists(filepath):
        return False, "File does not exist"

    if not os.path.isfile(filepath):
        return False, "Path is not a file"

    if not os.access(filepath, os.R_OK):
        return False, "File is not readable (permission denied)"

    return True, ""


def validate_directory(directory: str) -> tuple[bool, str]:
    """
    Validate that a directory exists and is accessible.

    Returns:
        Tuple of (is_valid, error_message)

    Examples:
        >>> validate_directory('/nonexistent/directory')
        (False, 'Directory not found: /nonexistent/directory')
    """
    if not directory:
        return False, "Directory path is required"

    if not os.path.isabs(directory):
        return False, "Directory must be an absolute path"

    if not os.path.exists(directory):
        return False, f"Directory not found: {directory}"

    if not os.path.isdir(directory):
        return False, f"Path is not a directory: {directory}"

    if not os.access(directory, os.R_OK):
        return False, f"Cannot read directory (permission denied): {directory}"

    return True, ""


def validate_workers(workers) -> tuple[bool, str]:
    """
    Validate a worker-thread count.

    Examples:
        >>> validate_workers(4)
        (True, '')
        >>> validate_workers(0)
        (False, 'Workers must be between 1 and 32')
    """
    try:
        workers = int(workers)
    except (ValueError, TypeError):
        return False, "Workers must be an integer"
    if not 1 <= workers <= 32:
        return False, "Workers must be between 1 and 32"
    return True, ""


def validate_index_params(directory: str, workers: Optional[int] = None) -> tuple[bool, str]:
    """
    Validate all parameters of an indexing request.

    Examples:
        >>> validate_index_params('/nonexistent', workers=4)
        (False, 'Directory not found: /nonexistent')
    """
    is_valid, error = validate_directory(directory)
    if not is_valid:
        return False, error

    if workers is not None:
        is_valid, error = validate_workers(workers)
        if not is_valid:
            return False, error

    return True, ""


__all__ = [
    'validate_file_accessible',
    'validate_directory',
    'validate_workers',
    'validate_index_params',
]
