"""Split and join helpers for ``stem/complement`` verb entries.

A splittable verb such as ``骑/马`` (ride/horse) can surface three ways:

* plain:        ``骑马``
* progressive:  ``骑着马``  (stem + 着 + complement)
* resultative:  ``马骑得``  (complement + stem + 得)
"""

from __future__ import annotations

from typing import Optional, Tuple

SEPARATOR = "/"
PROGRESSIVE_SUFFIX = "着"
RESULTATIVE_SUFFIX = "得"


def is_splittable(word: str) -> bool:
    return SEPARATOR in word


def split_compound(word: str) -> Tuple[str, Optional[str]]:
    """Return ``(stem, complement)``; ``complement`` is ``None`` when unsplittable."""

    stem, separator, complement = word.partition(SEPARATOR)
    if not separator:
        return word, None
    return stem, complement


def plain_form(word: str) -> str:
    stem, complement = split_compound(word)
    if complement is None:
        return stem
    return stem + complement


def progressive_form(word: str) -> str:
    stem, complement = split_compound(word)
    if complement is None:
        return stem + PROGRESSIVE_SUFFIX
    return stem + PROGRESSIVE_SUFFIX + complement


def resultative_form(word: str) -> str:
    stem, complement = split_compound(word)
    if complement is None:
        return stem + RESULTATIVE_SUFFIX
    return complement.strip() + stem + RESULTATIVE_SUFFIX


__all__ = [
    "SEPARATOR",
    "PROGRESSIVE_SUFFIX",
    "RESULTATIVE_SUFFIX",
    "is_splittable",
    "split_compound",
    "plain_form",
    "progressive_form",
    "resultative_form",
]
