"""
File utilities for codex.

Provides the exclusion matcher consulted by the directory walk.
"""

from typing import Iterable


def should_exclude(path: str, excludes: Iterable[str]) -> bool:
    """
    Check whether a file or folder should be excluded.

    Matching is literal substring containment: an entry of ``dist`` also
    matches ``distiller.py`` and an entry of ``*.log`` only matches names that
    contain the characters ``*.log``. No glob expansion, no path-segment
    matching.

    Args:
        path: Full path (for folders) or base name (for files) to test
        excludes: Exclusion substrings, in config order

    Returns:
        True if any entry is a substring of path
    """
    return any(exclude in path for exclude in excludes)
