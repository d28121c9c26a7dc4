"""
Locale-aware ordering of names, following the Unicode Collation Algorithm
root order (the one a browser's `localeCompare` uses).
"""

from functools import lru_cache

from pyuca import Collator


@lru_cache
def collator() -> Collator:
    return Collator()


def collation_key(text: str) -> tuple[tuple[int, ...], str]:
    """
    Sort key by collation order, tie-broken by the raw string so names that
    collate equal still order deterministically.
    """
    return (collator().sort_key(text), text)
