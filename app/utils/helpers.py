"""
Helper utilities for tidyroot.

Common functions used across domains.
"""

from pathlib import Path


def normalise_path(path: Path) -> Path:
    """Return a resolved version of ``path`` without forcing existence."""

    try:
        return path.expanduser().resolve()
    except FileNotFoundError:
        return path.expanduser().absolute()


def get_file_extension(name: str) -> str:
    """
    Get lowercased file extension including the leading dot.

    Dotfiles such as ``.env`` and names without a suffix yield an empty
    string.

    Args:
        name: Entry name (not a full path)

    Returns:
        Extension like ``.jpg`` or ``""``
    """
    return Path(name).suffix.lower()


def to_millis(seconds: float) -> int:
    """Convert a delay in seconds to whole milliseconds."""
    return int(round(seconds * 1000))
