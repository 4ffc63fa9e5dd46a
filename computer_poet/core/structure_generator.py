"""Choose and expand the sentence structure of every line of a poem."""

from __future__ import annotations

import random
from typing import List, Optional, Sequence

from ..utils.observability import create_counter, get_logger
from .compound_verbs import PROGRESSIVE_SUFFIX
from .errors import VocabularyLoadError
from .rhyme import COMPOUND_RHYME_SENTINEL, line_needs_rhyme
from .tags import COMPOUND_VERB_SLOT, PartOfSpeech, is_part_of_speech, normalize_part_of_speech
from .types import (
    PoeticStyle,
    SentenceStructureTemplate,
    WORKING_CAPACITY,
    WorkingStructure,
)
from .vocabulary_store import VocabularyStore

# Draws allowed per line before settling for the first template of the table.
MAX_SELECTION_ATTEMPTS = 100

_FALLBACK_COUNTER = create_counter(
    "poet_template_fallbacks_total",
    "Line positions that fell back to the first template after exhausting retries.",
    label_names=("style",),
)


class StructureGenerator:
    """Builds the working structures of a poem before any word is chosen."""

    def __init__(self, store: VocabularyStore, rng: Optional[random.Random] = None) -> None:
        self.store = store
        self.rng = rng or random.Random()
        self.fallback_count = 0
        self._logger = get_logger(__name__).bind(component="structure_generator")

    def _templates(self) -> Sequence[SentenceStructureTemplate]:
        templates = self.store.get_sentence_structure_templates()
        if not templates:
            raise VocabularyLoadError("The sentence structure table is empty")
        return templates

    @staticmethod
    def accepts(
        template: SentenceStructureTemplate,
        style: PoeticStyle,
        needs_rhyme: bool,
        rhyme_scheme: Optional[str],
    ) -> bool:
        """Return whether ``template`` may be drawn for a line."""

        if style is PoeticStyle.QUIET and not template.is_quiet:
            return False
        if needs_rhyme and rhyme_scheme and template.is_atomic:
            return template.limited_rhyme in (rhyme_scheme, COMPOUND_RHYME_SENTINEL)
        return True

    def select_template(
        self,
        style: PoeticStyle | str,
        needs_rhyme: bool,
        rhyme_scheme: Optional[str] = None,
    ) -> SentenceStructureTemplate:
        """Rejection-sample one template.

        After :data:`MAX_SELECTION_ATTEMPTS` rejected draws the first template
        of the table is returned. That fallback keeps generation bounded under
        an unsatisfiable rhyme or style constraint.
        """

        style = PoeticStyle.parse(style)
        templates = self._templates()
        for _ in range(MAX_SELECTION_ATTEMPTS):
            candidate = templates[self.rng.randrange(len(templates))]
            if self.accepts(candidate, style, needs_rhyme, rhyme_scheme):
                return candidate

        self.fallback_count += 1
        _FALLBACK_COUNTER.labels(style=style.value).inc()
        self._logger.debug(
            "Template retries exhausted, using first template",
            context={"style": style.value, "needs_rhyme": needs_rhyme, "rhyme": rhyme_scheme},
        )
        return templates[0]

    def select_line_templates(
        self,
        line_count: int,
        style: PoeticStyle | str,
        rhyme_scheme: Optional[str] = None,
    ) -> List[SentenceStructureTemplate]:
        return [
            self.select_template(style, line_needs_rhyme(position, line_count), rhyme_scheme)
            for position in range(1, line_count + 1)
        ]

    def expand(
        self,
        template: SentenceStructureTemplate,
        stanza_needs_rhyme: bool = False,
        rhyme_scheme: Optional[str] = None,
    ) -> WorkingStructure:
        """Flatten ``template`` into a 30-slot working structure.

        A ``Dd`` slot in a template marked with the compound sentinel becomes
        ``DV``, ``着``, ``DO``; other tag spellings are canonicalised and
        literal fragments are copied. Slots past the working capacity are
        dropped.
        """

        is_compound = template.limited_rhyme == COMPOUND_RHYME_SENTINEL
        slots: List[str] = []
        for element in template.elements:
            if not element:
                break
            if is_compound and element == COMPOUND_VERB_SLOT:
                slots.extend(
                    (
                        PartOfSpeech.PROGRESSIVE_VERB.value,
                        PROGRESSIVE_SUFFIX,
                        PartOfSpeech.RESULTATIVE_VERB.value,
                    )
                )
            elif is_part_of_speech(element):
                slots.append(normalize_part_of_speech(element).value)
            else:
                slots.append(element)

        if len(slots) > WORKING_CAPACITY:
            # Rendering reads fewer slots than the working capacity, so the tail is never used.
            self._logger.debug(
                "Expanded template truncated",
                context={"slots": len(slots), "capacity": WORKING_CAPACITY},
            )
            slots = slots[:WORKING_CAPACITY]
        return WorkingStructure(
            elements=tuple(slots),
            compound_structure_count=template.compound_structure_count,
            punctuation=template.punctuation,
            stanza_needs_rhyme=stanza_needs_rhyme,
        )

    def create_structure(
        self,
        stanza_count: int,
        lines_per_stanza: int,
        style: PoeticStyle | str,
        rhyme_scheme: Optional[str] = None,
    ) -> List[WorkingStructure]:
        """Return the working structures of the whole poem, stanza by stanza.

        Base templates are chosen once per line position and reused in every
        stanza. The rhyme flag passed to :meth:`expand` is keyed by the stanza
        index against the stanza count.
        """

        base_templates = self.select_line_templates(lines_per_stanza, style, rhyme_scheme)
        structures: List[WorkingStructure] = []
        for stanza in range(1, stanza_count + 1):
            stanza_needs_rhyme = line_needs_rhyme(stanza, stanza_count)
            for template in base_templates:
                structures.append(self.expand(template, stanza_needs_rhyme, rhyme_scheme))
        return structures


__all__ = ["StructureGenerator", "MAX_SELECTION_ATTEMPTS"]
