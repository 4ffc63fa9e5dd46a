import random
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from computer_poet.core import (
    InMemoryVocabularyStore,
    SentenceStructureTemplate,
    SpecialWord,
    WordRecord,
)


NOUNS = [
    WordRecord("月亮", "ang"),
    WordRecord("星星", "eng"),
    WordRecord("白云", "en"),
    WordRecord("故乡", "ang", property="地点"),
    WordRecord("黄昏", "en", property="时间"),
    WordRecord("长江", "ang", property="地名"),
    WordRecord("诗人", "en", property="人物"),
    WordRecord("李白", "ai", property="人名"),
]
ADJECTIVES = [WordRecord("美丽", "i"), WordRecord("忧伤", "ang")]
INTRANSITIVE_VERBS = [
    WordRecord("骑/马", "a"),
    WordRecord("飞翔", "ang"),
    WordRecord("叹息", "i"),
]
TRANSITIVE_VERBS = [WordRecord("拥抱", "ao"), WordRecord("遗忘", "ang")]
INTERJECTIONS = [WordRecord("啊", "a")]
SPECIAL_WORDS = [SpecialWord("然而", 1)]

QUIET_TEMPLATE = SentenceStructureTemplate(elements=("XA", "的", "MM"), punctuation="，")
PLACE_TEMPLATE = SentenceStructureTemplate(elements=("MR", "在", "MC", "DD"), punctuation="。")
COMPOUND_TEMPLATE = SentenceStructureTemplate(
    elements=("MM", "Dd"), limited_rhyme="E", punctuation="。"
)
BOLD_TEMPLATE = SentenceStructureTemplate(
    elements=("MR", "在", "XA", "的", "MC", "里", "DJ", "着", "XA", "的", "MM"),
    punctuation="。",
)


def build_store(**overrides):
    tables = {
        "nouns": NOUNS,
        "adjectives": ADJECTIVES,
        "intransitive_verbs": INTRANSITIVE_VERBS,
        "transitive_verbs": TRANSITIVE_VERBS,
        "interjections": INTERJECTIONS,
        "sentence_structures": [QUIET_TEMPLATE, PLACE_TEMPLATE, COMPOUND_TEMPLATE, BOLD_TEMPLATE],
        "special_words": SPECIAL_WORDS,
    }
    tables.update(overrides)
    return InMemoryVocabularyStore(**tables)


@pytest.fixture
def rng():
    return random.Random(20020404)


@pytest.fixture
def store():
    return build_store()
