"""
Interactive prompts for the CLI interface.
"""

from __future__ import annotations


def confirm_action(action: str, count: int) -> bool:
    """
    Prompt user to confirm a destructive action.

    Args:
        action: Description of what will happen (e.g., 'remove /data/photos')
        count: Number of records that will be affected

    Returns:
        True if user confirms (types 'y'), False otherwise

    Examples:
        >>> confirm_action('remove /data/photos', 42)
        This will remove /data/photos and 42 indexed images. Continue? [y/N]: y
        True
    """
    try:
        confirm = input(f"\nThis will {action} and {count:,} indexed images. Continue? [y/N]: ")
    except EOFError:
        return False
    return confirm.strip().lower() == 'y'


__all__ = ['confirm_action']
