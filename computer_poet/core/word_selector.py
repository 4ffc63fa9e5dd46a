"""Resolve one part-of-speech slot into concrete text."""

from __future__ import annotations

import random
from dataclasses import replace
from typing import Callable, Dict, FrozenSet, Optional, Sequence

from ..utils.observability import get_logger
from .compound_verbs import is_splittable, plain_form, progressive_form, resultative_form
from .errors import EmptyCandidatePoolError
from .rhyme import normalize_rhyme_scheme
from .tags import PartOfSpeech, coerce_part_of_speech
from .types import WordRecord, WordSelectionContext
from .vocabulary_store import VocabularyStore

LOCATION_PROPERTIES: FrozenSet[str] = frozenset({"时间", "地点", "地名"})
PERSON_PROPERTIES: FrozenSet[str] = frozenset({"人物", "人名"})


class WordSelector:
    """Picks words uniformly at random, applying the rule of each tag.

    Pools come from the store unfiltered; this class narrows them by property,
    separator or rhyme and applies the verb morphology.
    """

    def __init__(self, store: VocabularyStore, rng: Optional[random.Random] = None) -> None:
        self.store = store
        self.rng = rng or random.Random()
        self._logger = get_logger(__name__).bind(component="word_selector")
        self._rules: Dict[PartOfSpeech, Callable[[WordSelectionContext], str]] = {
            PartOfSpeech.NOUN: self._select_basic,
            PartOfSpeech.INTERJECTION: self._select_basic,
            PartOfSpeech.TRANSITIVE_VERB: self._select_basic,
            PartOfSpeech.ADJECTIVE: self._select_basic,
            PartOfSpeech.LOCATION_NOUN: self._select_location_noun,
            PartOfSpeech.PERSON_NOUN: self._select_person_noun,
            PartOfSpeech.INTRANSITIVE_VERB: self._select_intransitive_verb,
            PartOfSpeech.SIMPLE_VERB: self._select_simple_verb,
            PartOfSpeech.PROGRESSIVE_VERB: self._select_progressive_verb,
            PartOfSpeech.RESULTATIVE_VERB: self._select_resultative_verb,
            PartOfSpeech.SPECIAL_WORD: self._select_special_word,
        }

    def select_word(self, context: WordSelectionContext) -> str:
        """Return the text for ``context.part_of_speech``.

        Raises :class:`UnsupportedPartOfSpeechError` for tags outside the
        closed set and :class:`EmptyCandidatePoolError` when a rule without a
        fallback finds no candidates.
        """

        tag = coerce_part_of_speech(context.part_of_speech)
        if tag is not context.part_of_speech:
            context = replace(context, part_of_speech=tag)
        return self._rules[tag](context)

    # Helpers ---------------------------------------------------------------
    def _pick(self, pool: Sequence[WordRecord], tag: PartOfSpeech, reason: str) -> WordRecord:
        if not pool:
            raise EmptyCandidatePoolError(tag, reason)
        return pool[self.rng.randrange(len(pool))]

    def _pool(self, tag: PartOfSpeech) -> Sequence[WordRecord]:
        return self.store.get_words_by_tag(tag)

    @staticmethod
    def _rhyming(pool: Sequence[WordRecord], scheme: str) -> list[WordRecord]:
        return [record for record in pool if record.vowel == scheme]

    def _prefer_rhyming(
        self,
        pool: Sequence[WordRecord],
        context: WordSelectionContext,
    ) -> Sequence[WordRecord]:
        """Narrow ``pool`` to the requested rhyme, keeping it when nothing rhymes."""

        scheme = context.rhyme_filter
        if scheme is None:
            return pool
        rhyming = self._rhyming(pool, scheme)
        if rhyming:
            return rhyming
        self._logger.debug(
            "No rhyming candidates, using unfiltered pool",
            context={"tag": context.part_of_speech.value, "rhyme": scheme, "pool": len(pool)},
        )
        return pool

    # Rules -----------------------------------------------------------------
    def _select_basic(self, context: WordSelectionContext) -> str:
        tag = context.part_of_speech
        pool = self._prefer_rhyming(self._pool(tag), context)
        return self._pick(pool, tag, "vocabulary table is empty").word

    def _select_by_property(
        self,
        context: WordSelectionContext,
        properties: FrozenSet[str],
    ) -> str:
        tag = context.part_of_speech
        candidates = [record for record in self._pool(tag) if record.property in properties]
        if not candidates:
            raise EmptyCandidatePoolError(
                tag, f"no noun with property in {sorted(properties)}", context.rhyme_filter
            )
        return self._pick(self._prefer_rhyming(candidates, context), tag, "no candidates").word

    def _select_location_noun(self, context: WordSelectionContext) -> str:
        return self._select_by_property(context, LOCATION_PROPERTIES)

    def _select_person_noun(self, context: WordSelectionContext) -> str:
        return self._select_by_property(context, PERSON_PROPERTIES)

    def _select_intransitive_verb(self, context: WordSelectionContext) -> str:
        tag = context.part_of_speech
        pool = self._pool(tag)
        scheme = context.rhyme_filter
        if scheme is not None:
            # Plain verbs have no fallback: a rhyme request must be met.
            record = self._pick(self._rhyming(pool, scheme), tag, f"no verb rhyming with {scheme!r}")
        else:
            record = self._pick(pool, tag, "vocabulary table is empty")
        return plain_form(record.word)

    def _select_simple_verb(self, context: WordSelectionContext) -> str:
        tag = context.part_of_speech
        candidates = [record for record in self._pool(tag) if not is_splittable(record.word)]
        return self._pick(candidates, tag, "no verb without a separator").word

    def _select_progressive_verb(self, context: WordSelectionContext) -> str:
        tag = context.part_of_speech
        candidates = [record for record in self._pool(tag) if is_splittable(record.word)]
        if not candidates:
            raise EmptyCandidatePoolError(tag, "no splittable verb", context.rhyme_filter)
        record = self._pick(self._prefer_rhyming(candidates, context), tag, "no candidates")
        return progressive_form(record.word)

    def _select_resultative_verb(self, context: WordSelectionContext) -> str:
        tag = context.part_of_speech
        candidates = [record for record in self._pool(tag) if is_splittable(record.word)]
        return resultative_form(self._pick(candidates, tag, "no splittable verb").word)

    def _select_special_word(self, context: WordSelectionContext) -> str:
        specials = self.store.get_special_words()
        if not specials:
            return ""
        return specials[self.rng.randrange(len(specials))].content

    # Rhyme helpers ---------------------------------------------------------
    normalize_rhyme_scheme = staticmethod(normalize_rhyme_scheme)


__all__ = ["WordSelector", "LOCATION_PROPERTIES", "PERSON_PROPERTIES"]
