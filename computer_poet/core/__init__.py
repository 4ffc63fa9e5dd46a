"""Generative grammar core of the computer poet."""

from .engine import PoetryEngine
from .errors import (
    EmptyCandidatePoolError,
    InvalidOptionsError,
    PoetryError,
    UnsupportedPartOfSpeechError,
    VocabularyLoadError,
)
from .rhyme import RHYME_SCHEMES, line_needs_rhyme, normalize_rhyme_scheme
from .structure_generator import MAX_SELECTION_ATTEMPTS, StructureGenerator
from .tags import PartOfSpeech, normalize_part_of_speech
from .types import (
    GeneratedPoem,
    GenerationOptions,
    PoeticStyle,
    SentenceStructureTemplate,
    SpecialWord,
    WordRecord,
    WordSelectionContext,
    WorkingStructure,
)
from .vocabulary_store import InMemoryVocabularyStore, JsonVocabularyStore, VocabularyStore
from .word_selector import WordSelector

__all__ = [
    "PoetryEngine",
    "StructureGenerator",
    "WordSelector",
    "VocabularyStore",
    "JsonVocabularyStore",
    "InMemoryVocabularyStore",
    "PartOfSpeech",
    "PoeticStyle",
    "WordRecord",
    "SpecialWord",
    "SentenceStructureTemplate",
    "WorkingStructure",
    "WordSelectionContext",
    "GenerationOptions",
    "GeneratedPoem",
    "RHYME_SCHEMES",
    "MAX_SELECTION_ATTEMPTS",
    "normalize_rhyme_scheme",
    "normalize_part_of_speech",
    "line_needs_rhyme",
    "PoetryError",
    "UnsupportedPartOfSpeechError",
    "EmptyCandidatePoolError",
    "VocabularyLoadError",
    "InvalidOptionsError",
]
