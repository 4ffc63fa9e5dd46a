"""The closed part-of-speech tag set and its single normalization function.

Structure tables inherited from the legacy poet spell tags in several ways:
canonical upper case (``MM``), mixed case (``Mm``, ``Dd``), lower case
(``xa``) and a couple of old aliases (``XX`` for adjectives, ``DB`` for plain
verbs). Every caller goes through :func:`normalize_part_of_speech` instead of
case-folding on its own.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

from ..utils.observability import get_logger
from .errors import UnsupportedPartOfSpeechError


class PartOfSpeech(str, Enum):
    NOUN = "MM"
    LOCATION_NOUN = "MC"
    PERSON_NOUN = "MR"
    INTRANSITIVE_VERB = "DD"
    SIMPLE_VERB = "DI"
    PROGRESSIVE_VERB = "DV"
    RESULTATIVE_VERB = "DO"
    TRANSITIVE_VERB = "DJ"
    ADJECTIVE = "XA"
    INTERJECTION = "TT"
    SPECIAL_WORD = "SS"

    def __str__(self) -> str:
        return self.value


_CANONICAL: Dict[str, PartOfSpeech] = {tag.value: tag for tag in PartOfSpeech}

LEGACY_ALIASES: Dict[str, PartOfSpeech] = {
    "XX": PartOfSpeech.ADJECTIVE,
    "DB": PartOfSpeech.INTRANSITIVE_VERB,
    "Mm": PartOfSpeech.NOUN,
    "Mr": PartOfSpeech.PERSON_NOUN,
    "Mc": PartOfSpeech.LOCATION_NOUN,
    "Dd": PartOfSpeech.INTRANSITIVE_VERB,
    "Dv": PartOfSpeech.PROGRESSIVE_VERB,
    "Do": PartOfSpeech.RESULTATIVE_VERB,
}

# Spelling of the plain verb slot that marks an expandable compound verb.
COMPOUND_VERB_SLOT = "Dd"

_logger = get_logger(__name__).bind(component="tags")


def _lookup(code: str) -> Optional[PartOfSpeech]:
    if code in LEGACY_ALIASES:
        return LEGACY_ALIASES[code]
    return _CANONICAL.get(code.upper())


def is_part_of_speech(code: object) -> bool:
    """Return whether ``code`` is a tag in any accepted spelling."""

    if isinstance(code, PartOfSpeech):
        return True
    if not isinstance(code, str) or not code:
        return False
    return _lookup(code) is not None


def normalize_part_of_speech(code: object) -> PartOfSpeech:
    """Map ``code`` onto the canonical tag.

    Codes that are not recognised fall back to :attr:`PartOfSpeech.NOUN` with a
    warning; a bad slot in a structure table degrades one word instead of the
    whole poem.
    """

    if isinstance(code, PartOfSpeech):
        return code
    if isinstance(code, str) and code:
        tag = _lookup(code)
        if tag is not None:
            return tag
    _logger.warning(
        "Unknown part-of-speech code, using noun",
        context={"code": code, "fallback": PartOfSpeech.NOUN.value},
    )
    return PartOfSpeech.NOUN


def coerce_part_of_speech(code: object) -> PartOfSpeech:
    """Strict variant used at the selector boundary: unknown tags raise."""

    if isinstance(code, PartOfSpeech):
        return code
    if isinstance(code, str) and code in _CANONICAL:
        return _CANONICAL[code]
    raise UnsupportedPartOfSpeechError(code)


__all__ = [
    "PartOfSpeech",
    "LEGACY_ALIASES",
    "COMPOUND_VERB_SLOT",
    "is_part_of_speech",
    "normalize_part_of_speech",
    "coerce_part_of_speech",
]
