"""Read-only access to the lexicon and sentence-structure tables.

Stores are constructed explicitly and handed to the structure generator and
word selector. :class:`JsonVocabularyStore` reads the JSON tables once, on
first access, and afterwards serves the same immutable snapshot.
"""

from __future__ import annotations

import json
import os
import threading
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Callable, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple, TypeVar

from ..utils.observability import get_logger
from .errors import UnsupportedPartOfSpeechError, VocabularyLoadError
from .tags import PartOfSpeech, coerce_part_of_speech
from .types import SentenceStructureTemplate, SpecialWord, WordRecord

DATA_DIR_ENV = "COMPUTER_POET_DATA_DIR"

TABLE_FILES = {
    "nouns": "nouns.json",
    "adjectives": "adjectives.json",
    "intransitive_verbs": "intransitive_verbs.json",
    "transitive_verbs": "transitive_verbs.json",
    "interjections": "interjections.json",
    "sentence_structures": "sentence_structures.json",
    "special_words": "special_words.json",
}

_T = TypeVar("_T")


class VocabularyStore(Protocol):
    """Queries the poetry core needs from its tables."""

    def get_words_by_tag(self, tag: PartOfSpeech | str) -> Sequence[WordRecord]:
        ...

    def get_sentence_structure_templates(self) -> Sequence[SentenceStructureTemplate]:
        ...

    def get_special_words(self) -> Sequence[SpecialWord]:
        ...


@dataclass(frozen=True)
class VocabularySnapshot:
    nouns: Tuple[WordRecord, ...] = ()
    adjectives: Tuple[WordRecord, ...] = ()
    intransitive_verbs: Tuple[WordRecord, ...] = ()
    transitive_verbs: Tuple[WordRecord, ...] = ()
    interjections: Tuple[WordRecord, ...] = ()
    sentence_structures: Tuple[SentenceStructureTemplate, ...] = ()
    special_words: Tuple[SpecialWord, ...] = ()

    def words_for(self, tag: PartOfSpeech | str) -> Tuple[WordRecord, ...]:
        part_of_speech = coerce_part_of_speech(tag)
        if part_of_speech in (
            PartOfSpeech.NOUN,
            PartOfSpeech.LOCATION_NOUN,
            PartOfSpeech.PERSON_NOUN,
        ):
            return self.nouns
        if part_of_speech in (
            PartOfSpeech.INTRANSITIVE_VERB,
            PartOfSpeech.SIMPLE_VERB,
            PartOfSpeech.PROGRESSIVE_VERB,
            PartOfSpeech.RESULTATIVE_VERB,
        ):
            return self.intransitive_verbs
        if part_of_speech is PartOfSpeech.TRANSITIVE_VERB:
            return self.transitive_verbs
        if part_of_speech is PartOfSpeech.ADJECTIVE:
            return self.adjectives
        if part_of_speech is PartOfSpeech.INTERJECTION:
            return self.interjections
        if part_of_speech is PartOfSpeech.SPECIAL_WORD:
            return tuple(special.as_word_record() for special in self.special_words)
        raise UnsupportedPartOfSpeechError(tag)

    def table_sizes(self) -> dict[str, int]:
        return {name: len(getattr(self, name)) for name in TABLE_FILES}


class _SnapshotStore:
    """Serves the store protocol from whatever ``_snapshot()`` returns."""

    def _snapshot(self) -> VocabularySnapshot:
        raise NotImplementedError

    def get_words_by_tag(self, tag: PartOfSpeech | str) -> Sequence[WordRecord]:
        return self._snapshot().words_for(tag)

    def get_sentence_structure_templates(self) -> Sequence[SentenceStructureTemplate]:
        return self._snapshot().sentence_structures

    def get_special_words(self) -> Sequence[SpecialWord]:
        return self._snapshot().special_words


class InMemoryVocabularyStore(_SnapshotStore):
    """Store built from Python objects, used by tests and embedders."""

    def __init__(
        self,
        *,
        nouns: Iterable[WordRecord] = (),
        adjectives: Iterable[WordRecord] = (),
        intransitive_verbs: Iterable[WordRecord] = (),
        transitive_verbs: Iterable[WordRecord] = (),
        interjections: Iterable[WordRecord] = (),
        sentence_structures: Iterable[SentenceStructureTemplate] = (),
        special_words: Iterable[SpecialWord] = (),
    ) -> None:
        self.snapshot = VocabularySnapshot(
            nouns=tuple(nouns),
            adjectives=tuple(adjectives),
            intransitive_verbs=tuple(intransitive_verbs),
            transitive_verbs=tuple(transitive_verbs),
            interjections=tuple(interjections),
            sentence_structures=tuple(sentence_structures),
            special_words=tuple(special_words),
        )

    def _snapshot(self) -> VocabularySnapshot:
        return self.snapshot


class JsonVocabularyStore(_SnapshotStore):
    """Lazy loader for the JSON tables shipped in ``computer_poet/data``.

    ``data_dir`` (or ``COMPUTER_POET_DATA_DIR``) points at another directory
    holding the same file names. A missing or malformed table raises
    :class:`VocabularyLoadError` and leaves the store unloaded so a later call
    can retry.
    """

    def __init__(self, data_dir: Optional[Path | str] = None) -> None:
        if data_dir is None:
            data_dir = os.environ.get(DATA_DIR_ENV) or None
        self.data_dir: Optional[Path] = Path(data_dir) if data_dir else None
        self._lock = threading.Lock()
        self._loaded: Optional[VocabularySnapshot] = None
        self._logger = get_logger(__name__).bind(
            component="vocabulary_store",
            data_dir=str(self.data_dir) if self.data_dir else "<package>",
        )

    @property
    def is_loaded(self) -> bool:
        return self._loaded is not None

    def clear_cache(self) -> None:
        """Drop the loaded snapshot so the next access re-reads the files."""

        with self._lock:
            self._loaded = None

    def _snapshot(self) -> VocabularySnapshot:
        loaded = self._loaded
        if loaded is not None:
            return loaded
        with self._lock:
            if self._loaded is None:
                self._loaded = self._load()
            return self._loaded

    def _read_table(self, filename: str) -> List[Mapping[str, Any]]:
        try:
            if self.data_dir is not None:
                with (self.data_dir / filename).open("r", encoding="utf-8") as handle:
                    raw = json.load(handle)
            else:
                table = resources.files("computer_poet").joinpath("data", filename)
                with table.open("r", encoding="utf-8") as handle:
                    raw = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise VocabularyLoadError(f"Cannot load table {filename}: {exc}") from exc

        if not isinstance(raw, list) or not all(isinstance(row, Mapping) for row in raw):
            raise VocabularyLoadError(f"Table {filename} must be a JSON list of objects")
        return raw

    def _parse(
        self,
        filename: str,
        parser: Callable[[Mapping[str, Any]], _T],
    ) -> Tuple[_T, ...]:
        parsed: List[_T] = []
        for index, row in enumerate(self._read_table(filename), start=1):
            try:
                parsed.append(parser(row))
            except (TypeError, ValueError) as exc:
                raise VocabularyLoadError(f"{filename} row {index}: {exc}") from exc
        return tuple(parsed)

    def _load(self) -> VocabularySnapshot:
        snapshot = VocabularySnapshot(
            nouns=self._parse(TABLE_FILES["nouns"], WordRecord.from_mapping),
            adjectives=self._parse(TABLE_FILES["adjectives"], WordRecord.from_mapping),
            intransitive_verbs=self._parse(TABLE_FILES["intransitive_verbs"], WordRecord.from_mapping),
            transitive_verbs=self._parse(TABLE_FILES["transitive_verbs"], WordRecord.from_mapping),
            interjections=self._parse(TABLE_FILES["interjections"], WordRecord.from_mapping),
            sentence_structures=self._parse(
                TABLE_FILES["sentence_structures"], SentenceStructureTemplate.from_mapping
            ),
            special_words=self._parse(TABLE_FILES["special_words"], SpecialWord.from_mapping),
        )
        self._logger.info("Vocabulary tables loaded", context=snapshot.table_sizes())
        return snapshot


__all__ = [
    "DATA_DIR_ENV",
    "TABLE_FILES",
    "VocabularyStore",
    "VocabularySnapshot",
    "InMemoryVocabularyStore",
    "JsonVocabularyStore",
]
