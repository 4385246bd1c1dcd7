"""
Sort-and-deduplicate helper for string lists.

Stateless and independent of the database; exposed on the service surface only.
"""

from __future__ import annotations

from typing import Iterable, List


def sort_unique(items: Iterable[str], remove_duplicates: bool = False) -> List[str]:
    """
    Return `items` in ascending code point order, optionally without repeats.

    Parameters
    ----------
    items : iterable[str]
        Strings to sort. The caller's sequence is left untouched.
    remove_duplicates : bool
        Collapse equal neighbours after sorting, which removes every duplicate.

    Examples
    --------
    >>> sort_unique(["b", "a", "b"])
    ['a', 'b', 'b']
    >>> sort_unique(["b", "a", "b"], remove_duplicates=True)
    ['a', 'b']
    """
    ordered = sorted(items)
    if not remove_duplicates or not ordered:
        return ordered

    unique = [ordered[0]]
    for item in ordered[1:]:
        if item != unique[-1]:
            unique.append(item)
    return unique


__all__ = ["sort_unique"]
