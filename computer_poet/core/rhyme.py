"""Rhyme classes, scheme normalization and the rhyming-position rule."""

from __future__ import annotations

from typing import Dict, FrozenSet, Optional

# Finals-based rhyme classes. ``v`` stands for ü, ``r`` for the retroflex
# final of 知/吃/诗/日 (``z``, the final of 资/雌/思, folds into it).
RHYME_SCHEMES: tuple[str, ...] = (
    "a",
    "ai",
    "an",
    "ang",
    "ao",
    "e",
    "ei",
    "en",
    "eng",
    "er",
    "i",
    "ie",
    "ong",
    "ou",
    "r",
    "u",
    "v",
)

UNRESTRICTED_RHYME = ""

# ``limited_rhyme`` value of templates carrying an expandable compound verb.
# Such templates are accepted for any requested rhyme.
COMPOUND_RHYME_SENTINEL = "E"

_RHYME_SET: FrozenSet[str] = frozenset(RHYME_SCHEMES)

_SPELLING_VARIANTS: Dict[str, str] = {
    "o": "e",
    "uo": "e",
    "ui": "ei",
    "in": "en",
    "un": "en",
    "vn": "en",
    "ing": "eng",
    "ve": "ie",
    "iu": "ou",
    "z": "r",
}

RHYME_PROMPT_HINT = (
    "a, ai, an, ang, ao, e(o,uo), ei(ui), en(in,un,vn), eng(ing), er, i, "
    "ie(ve), ong, ou(iu), r(z), u, v"
)


def normalize_rhyme_scheme(value: Optional[str]) -> str:
    """Fold a user-supplied final onto its rhyme class.

    Case and surrounding whitespace are ignored. Spellings that are not
    variants of a class are returned lower-cased and stripped, so the function
    is idempotent.
    """

    if value is None:
        return UNRESTRICTED_RHYME
    normalized = str(value).strip().lower()
    return _SPELLING_VARIANTS.get(normalized, normalized)


def is_rhyme_scheme(value: Optional[str]) -> bool:
    return value in _RHYME_SET


def line_needs_rhyme(position: int, total: int) -> bool:
    """Return whether the 1-based ``position`` out of ``total`` carries rhyme.

    With an even total the first line and every even line rhyme; with an odd
    total every odd line rhymes.
    """

    if total % 2 == 0:
        return position == 1 or position % 2 == 0
    return (position + 1) % 2 == 0


__all__ = [
    "RHYME_SCHEMES",
    "UNRESTRICTED_RHYME",
    "COMPOUND_RHYME_SENTINEL",
    "RHYME_PROMPT_HINT",
    "normalize_rhyme_scheme",
    "is_rhyme_scheme",
    "line_needs_rhyme",
]
