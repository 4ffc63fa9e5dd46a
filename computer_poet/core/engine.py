"""The poetry engine: render working structures into lines of verse."""

from __future__ import annotations

import random
from typing import List, Optional

from ..utils.observability import get_logger
from .structure_generator import StructureGenerator
from .tags import PartOfSpeech, is_part_of_speech, normalize_part_of_speech
from .types import (
    TEMPLATE_CAPACITY,
    GeneratedPoem,
    GenerationOptions,
    PoeticStyle,
    WordSelectionContext,
    WorkingStructure,
)
from .vocabulary_store import VocabularyStore
from .word_selector import WordSelector

# Tags whose word already covers the two slots that follow them.
_COMPOUND_TAGS = frozenset({PartOfSpeech.PROGRESSIVE_VERB, PartOfSpeech.RESULTATIVE_VERB})


class PoetryEngine:
    """Generate poems from a vocabulary store.

    The word selector and structure generator share one random source so a
    seeded ``rng`` reproduces a poem exactly.
    """

    def __init__(
        self,
        store: VocabularyStore,
        *,
        rng: Optional[random.Random] = None,
        word_selector: Optional[WordSelector] = None,
        structure_generator: Optional[StructureGenerator] = None,
    ) -> None:
        self.store = store
        self.rng = rng or random.Random()
        self.word_selector = word_selector or WordSelector(store, self.rng)
        self.structure_generator = structure_generator or StructureGenerator(store, self.rng)
        self._logger = get_logger(__name__).bind(component="poetry_engine")

    def render_line(self, structure: WorkingStructure, options: GenerationOptions) -> str:
        parts: List[str] = []
        index = 0
        while index < TEMPLATE_CAPACITY:
            element = structure.elements[index]
            if not element:
                break

            if is_part_of_speech(element):
                tag = normalize_part_of_speech(element)
                context = WordSelectionContext(
                    part_of_speech=tag,
                    needs_rhyme=options.use_rhyme,
                    rhyme_scheme=options.rhyme_scheme,
                )
                parts.append(self.word_selector.select_word(context))
                if tag in _COMPOUND_TAGS:
                    index += 2
            else:
                parts.append(element)
            index += 1

        parts.append(structure.punctuation)
        return "".join(parts).strip()

    def generate(self, options: GenerationOptions) -> GeneratedPoem:
        """Write a poem of ``options.stanza_count`` x ``options.lines_per_stanza`` lines."""

        self._logger.info("Generating poem", context=options.as_dict())
        structures = self.structure_generator.create_structure(
            options.stanza_count,
            options.lines_per_stanza,
            options.style,
            options.rhyme_scheme,
        )
        lines = [self.render_line(structure, options) for structure in structures]
        self._logger.debug("Poem generated", context={"lines": len(lines)})
        return GeneratedPoem(lines=lines, options=options)

    def generate_lines(
        self,
        style: PoeticStyle | str = PoeticStyle.BOLD,
        stanza_count: int = 1,
        lines_per_stanza: int = 4,
        use_rhyme: bool = False,
        rhyme_scheme: Optional[str] = None,
    ) -> List[str]:
        options = GenerationOptions(
            style=style,
            stanza_count=stanza_count,
            lines_per_stanza=lines_per_stanza,
            use_rhyme=use_rhyme,
            rhyme_scheme=rhyme_scheme,
        )
        return self.generate(options).lines


__all__ = ["PoetryEngine"]
