import random

import pytest

from computer_poet.core import (
    EmptyCandidatePoolError,
    PartOfSpeech,
    UnsupportedPartOfSpeechError,
    WordRecord,
    WordSelectionContext,
    WordSelector,
)

from conftest import build_store


def select(selector, tag, needs_rhyme=False, rhyme_scheme=None):
    return selector.select_word(
        WordSelectionContext(part_of_speech=tag, needs_rhyme=needs_rhyme, rhyme_scheme=rhyme_scheme)
    )


def test_basic_tags_draw_from_their_table(store, rng):
    selector = WordSelector(store, rng)
    assert select(selector, PartOfSpeech.ADJECTIVE) in {"美丽", "忧伤"}
    assert select(selector, PartOfSpeech.TRANSITIVE_VERB) in {"拥抱", "遗忘"}
    assert select(selector, PartOfSpeech.INTERJECTION) == "啊"
    assert select(selector, "MM") in {record.word for record in store.get_words_by_tag("MM")}


def test_basic_tags_prefer_rhyming_words(store, rng):
    selector = WordSelector(store, rng)
    for _ in range(20):
        assert select(selector, PartOfSpeech.TRANSITIVE_VERB, True, "ao") == "拥抱"


def test_basic_tags_fall_back_when_nothing_rhymes(store, rng):
    selector = WordSelector(store, rng)
    assert select(selector, PartOfSpeech.ADJECTIVE, True, "v") in {"美丽", "忧伤"}


def test_rhyme_is_ignored_when_not_needed(store, rng):
    selector = WordSelector(store, rng)
    drawn = {select(selector, PartOfSpeech.ADJECTIVE, False, "ang") for _ in range(40)}
    assert drawn == {"美丽", "忧伤"}


def test_location_nouns_respect_properties(store, rng):
    selector = WordSelector(store, rng)
    drawn = {select(selector, PartOfSpeech.LOCATION_NOUN) for _ in range(40)}
    assert drawn <= {"故乡", "黄昏", "长江"}
    assert {select(selector, PartOfSpeech.LOCATION_NOUN, True, "ang") for _ in range(20)} <= {
        "故乡",
        "长江",
    }


def test_location_nouns_keep_property_filter_without_rhyme_match(store, rng):
    selector = WordSelector(store, rng)
    assert select(selector, PartOfSpeech.LOCATION_NOUN, True, "v") in {"故乡", "黄昏", "长江"}


def test_person_nouns_respect_properties(store, rng):
    selector = WordSelector(store, rng)
    drawn = {select(selector, PartOfSpeech.PERSON_NOUN) for _ in range(40)}
    assert drawn <= {"诗人", "李白"}


def test_property_filter_without_candidates_raises(rng):
    store = build_store(nouns=[WordRecord("月亮", "ang")])
    selector = WordSelector(store, rng)
    with pytest.raises(EmptyCandidatePoolError):
        select(selector, PartOfSpeech.PERSON_NOUN)


def test_plain_verb_joins_compound_entries(store, rng):
    selector = WordSelector(store, rng)
    drawn = {select(selector, PartOfSpeech.INTRANSITIVE_VERB) for _ in range(60)}
    assert drawn <= {"骑马", "飞翔", "叹息"}
    assert "骑马" in drawn


def test_plain_verb_rhyme_is_mandatory(store, rng):
    selector = WordSelector(store, rng)
    assert select(selector, PartOfSpeech.INTRANSITIVE_VERB, True, "i") == "叹息"
    assert select(selector, PartOfSpeech.INTRANSITIVE_VERB, True, "a") == "骑马"

    with pytest.raises(EmptyCandidatePoolError):
        select(selector, PartOfSpeech.INTRANSITIVE_VERB, True, "ou")


def test_simple_verb_skips_splittable_entries(store, rng):
    selector = WordSelector(store, rng)
    drawn = {select(selector, PartOfSpeech.SIMPLE_VERB) for _ in range(40)}
    assert drawn == {"飞翔", "叹息"}


def test_simple_verb_without_plain_entries_raises(rng):
    store = build_store(intransitive_verbs=[WordRecord("骑/马", "a")])
    with pytest.raises(EmptyCandidatePoolError):
        select(WordSelector(store, rng), PartOfSpeech.SIMPLE_VERB)


def test_progressive_and_resultative_forms(store, rng):
    selector = WordSelector(store, rng)
    assert select(selector, PartOfSpeech.PROGRESSIVE_VERB) == "骑着马"
    assert select(selector, PartOfSpeech.PROGRESSIVE_VERB, True, "ou") == "骑着马"
    assert select(selector, PartOfSpeech.RESULTATIVE_VERB) == "马骑得"


def test_compound_forms_need_a_splittable_verb(rng):
    store = build_store(intransitive_verbs=[WordRecord("飞翔", "ang")])
    selector = WordSelector(store, rng)
    with pytest.raises(EmptyCandidatePoolError):
        select(selector, PartOfSpeech.PROGRESSIVE_VERB)
    with pytest.raises(EmptyCandidatePoolError):
        select(selector, PartOfSpeech.RESULTATIVE_VERB)


def test_special_words(store, rng):
    assert select(WordSelector(store, rng), PartOfSpeech.SPECIAL_WORD) == "然而"
    assert select(WordSelector(build_store(special_words=[]), rng), PartOfSpeech.SPECIAL_WORD) == ""


def test_empty_table_raises(rng):
    selector = WordSelector(build_store(adjectives=[]), rng)
    with pytest.raises(EmptyCandidatePoolError):
        select(selector, PartOfSpeech.ADJECTIVE)


@pytest.mark.parametrize("tag", ["QQ", "Mm", "", None])
def test_unsupported_tags_raise(store, rng, tag):
    with pytest.raises(UnsupportedPartOfSpeechError):
        select(WordSelector(store, rng), tag)


def test_same_seed_gives_same_words(store):
    first = WordSelector(store, random.Random(11))
    second = WordSelector(store, random.Random(11))
    tags = [PartOfSpeech.NOUN, PartOfSpeech.ADJECTIVE, PartOfSpeech.INTRANSITIVE_VERB] * 5
    assert [select(first, tag) for tag in tags] == [select(second, tag) for tag in tags]


def test_normalize_rhyme_scheme_is_exposed():
    assert WordSelector.normalize_rhyme_scheme("iu") == "ou"
