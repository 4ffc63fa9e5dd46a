"""Records shared by the structure generator, word selector and engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from .errors import InvalidOptionsError
from .rhyme import RHYME_SCHEMES, UNRESTRICTED_RHYME, normalize_rhyme_scheme
from .tags import PartOfSpeech, is_part_of_speech

TEMPLATE_CAPACITY = 27
WORKING_CAPACITY = 30
QUIET_MARKER_INDEX = 9


class PoeticStyle(str, Enum):
    """``quiet`` draws only short templates, ``bold`` draws from all of them."""

    QUIET = "quiet"
    BOLD = "bold"

    @classmethod
    def parse(cls, value: "PoeticStyle | str") -> "PoeticStyle":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidOptionsError(
                f"Unknown style {value!r}; expected 'quiet' or 'bold'"
            ) from None

    def __str__(self) -> str:
        return self.value


def _slot_text(value: Any) -> str:
    if value is None:
        return ""
    text = str(value)
    stripped = text.strip()
    return stripped if is_part_of_speech(stripped) else text


def pad_elements(elements: Iterable[Any], capacity: int) -> Tuple[str, ...]:
    """Return ``elements`` as a left-packed tuple of exactly ``capacity`` slots.

    ``None`` and ``""`` are empty slots. Tag codes are trimmed; literal
    fragments, whitespace included, are kept as written. Raises ``ValueError``
    when real content exceeds the capacity or follows an empty slot.
    """

    slots = [_slot_text(value) for value in elements]
    while slots and not slots[-1]:
        slots.pop()
    if "" in slots:
        raise ValueError(f"Slot {slots.index('') + 1} is empty before the end of the structure")
    if len(slots) > capacity:
        raise ValueError(f"{len(slots)} slots exceed the capacity of {capacity}")
    return tuple(slots) + ("",) * (capacity - len(slots))


def content_length(elements: Tuple[str, ...]) -> int:
    """Number of slots before the first empty one."""

    for index, value in enumerate(elements):
        if not value:
            return index
    return len(elements)


@dataclass(frozen=True)
class WordRecord:
    """One lexicon entry. ``word`` may hold a single ``/`` (``stem/complement``)."""

    word: str
    vowel: str = ""
    property: str = ""
    word_class: str = ""
    liberty: str = ""
    frequency: Optional[int] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "WordRecord":
        word = str(data.get("word") or "").strip()
        if not word:
            raise ValueError("Word record without text")
        if word.count("/") > 1:
            raise ValueError(f"Word {word!r} holds more than one separator")
        frequency = data.get("frequency")
        return cls(
            word=word,
            vowel=str(data.get("vowel") or "").strip(),
            property=str(data.get("property") or "").strip(),
            word_class=str(data.get("class") or data.get("word_class") or "").strip(),
            liberty=str(data.get("liberty") or "").strip(),
            frequency=int(frequency) if frequency not in (None, "") else None,
        )


@dataclass(frozen=True)
class SpecialWord:
    content: str
    type: int = 0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SpecialWord":
        return cls(content=str(data.get("content") or "").strip(), type=int(data.get("type") or 0))

    def as_word_record(self) -> WordRecord:
        return WordRecord(word=self.content)


@dataclass(frozen=True)
class SentenceStructureTemplate:
    """One line shape: up to 27 slot codes plus rhyme and punctuation data."""

    elements: Tuple[str, ...]
    limited_rhyme: str = UNRESTRICTED_RHYME
    compound_structure_count: int = 0
    punctuation: str = ""
    internal_need: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "elements", pad_elements(self.elements, TEMPLATE_CAPACITY))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SentenceStructureTemplate":
        return cls(
            elements=tuple(data.get("elements") or ()),
            limited_rhyme=str(data.get("limitedRhyme") or "").strip(),
            compound_structure_count=int(data.get("compoundStructureCount") or 0),
            punctuation=str(data.get("punctuation") or "").strip(),
            internal_need=int(data.get("internalNeed") or 0),
        )

    @property
    def is_atomic(self) -> bool:
        return self.compound_structure_count == 0

    @property
    def is_quiet(self) -> bool:
        # Low-complexity templates leave their tenth slot empty.
        return not self.elements[QUIET_MARKER_INDEX]

    @property
    def slot_count(self) -> int:
        return content_length(self.elements)


@dataclass(frozen=True)
class WorkingStructure:
    """A template expanded for one stanza line, ready for rendering.

    ``stanza_needs_rhyme`` records the stanza-level rhyme decision taken
    during expansion. Rendering does not consult it.
    """

    elements: Tuple[str, ...]
    compound_structure_count: int = 0
    punctuation: str = ""
    stanza_needs_rhyme: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "elements", pad_elements(self.elements, WORKING_CAPACITY))

    @property
    def slot_count(self) -> int:
        return content_length(self.elements)


@dataclass(frozen=True)
class WordSelectionContext:
    part_of_speech: PartOfSpeech
    needs_rhyme: bool = False
    rhyme_scheme: Optional[str] = None

    @property
    def rhyme_filter(self) -> Optional[str]:
        """The vowel to filter on, or ``None`` when no rhyme applies."""

        if self.needs_rhyme and self.rhyme_scheme:
            return self.rhyme_scheme
        return None


@dataclass(frozen=True)
class GenerationOptions:
    """Validated request for one poem."""

    style: PoeticStyle = PoeticStyle.BOLD
    stanza_count: int = 1
    lines_per_stanza: int = 4
    use_rhyme: bool = False
    rhyme_scheme: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "style", PoeticStyle.parse(self.style))
        for name in ("stanza_count", "lines_per_stanza"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidOptionsError(f"{name} must be a positive integer, got {value!r}")
        object.__setattr__(self, "use_rhyme", bool(self.use_rhyme))

        scheme = normalize_rhyme_scheme(self.rhyme_scheme) if self.rhyme_scheme else None
        if scheme and scheme not in RHYME_SCHEMES:
            raise InvalidOptionsError(
                f"Unknown rhyme scheme {self.rhyme_scheme!r}; expected one of {', '.join(RHYME_SCHEMES)}"
            )
        object.__setattr__(self, "rhyme_scheme", scheme or None)

    @property
    def line_count(self) -> int:
        return self.stanza_count * self.lines_per_stanza

    def as_dict(self) -> Dict[str, Any]:
        return {
            "style": self.style.value,
            "stanza_count": self.stanza_count,
            "lines_per_stanza": self.lines_per_stanza,
            "use_rhyme": self.use_rhyme,
            "rhyme_scheme": self.rhyme_scheme,
        }


@dataclass
class GeneratedPoem:
    lines: list[str]
    options: GenerationOptions
    created_at: datetime = field(default_factory=datetime.now)
    title: Optional[str] = None

    def stanzas(self) -> list[list[str]]:
        size = self.options.lines_per_stanza
        return [self.lines[start : start + size] for start in range(0, len(self.lines), size)]


__all__ = [
    "TEMPLATE_CAPACITY",
    "WORKING_CAPACITY",
    "QUIET_MARKER_INDEX",
    "PoeticStyle",
    "pad_elements",
    "content_length",
    "WordRecord",
    "SpecialWord",
    "SentenceStructureTemplate",
    "WorkingStructure",
    "WordSelectionContext",
    "GenerationOptions",
    "GeneratedPoem",
]
