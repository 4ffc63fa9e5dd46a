from datetime import datetime

import pytest

from computer_poet.core import (
    GeneratedPoem,
    GenerationOptions,
    InvalidOptionsError,
    PoeticStyle,
    SentenceStructureTemplate,
    WordRecord,
    WorkingStructure,
)
from computer_poet.core.types import TEMPLATE_CAPACITY, WORKING_CAPACITY, pad_elements


def test_pad_elements_left_packs_and_trims_tags():
    padded = pad_elements([" MM ", "的", None, ""], 5)
    assert padded == ("MM", "的", "", "", "")


def test_pad_elements_keeps_whitespace_literals():
    padded = pad_elements(["MM", " ", "XA", "的 "], 5)
    assert padded == ("MM", " ", "XA", "的 ", "")


def test_template_keeps_a_whitespace_fragment_between_tags():
    template = SentenceStructureTemplate(elements=("XA", "　", "MM"), punctuation="，")
    assert template.slot_count == 3
    assert template.elements[1] == "　"


def test_pad_elements_rejects_gaps_and_overflow():
    with pytest.raises(ValueError):
        pad_elements(["MM", "", "XA"], 5)
    with pytest.raises(ValueError):
        pad_elements(["MM"] * 6, 5)


def test_template_from_mapping_reads_table_keys():
    template = SentenceStructureTemplate.from_mapping(
        {
            "elements": ["XA", "的", "MM"],
            "limitedRhyme": "a",
            "compoundStructureCount": 0,
            "punctuation": "，",
            "internalNeed": 1,
        }
    )

    assert len(template.elements) == TEMPLATE_CAPACITY
    assert template.elements[:4] == ("XA", "的", "MM", "")
    assert template.limited_rhyme == "a"
    assert template.internal_need == 1
    assert template.is_atomic
    assert template.is_quiet
    assert template.slot_count == 3


def test_template_with_ten_slots_is_not_quiet():
    template = SentenceStructureTemplate(elements=tuple("MM" for _ in range(10)))
    assert not template.is_quiet
    assert SentenceStructureTemplate(elements=("MM",), compound_structure_count=2).is_atomic is False


def test_working_structure_is_padded_to_thirty():
    structure = WorkingStructure(elements=("MM", "DV", "着", "DO"), punctuation="。")
    assert len(structure.elements) == WORKING_CAPACITY
    assert structure.slot_count == 4
    assert structure.stanza_needs_rhyme is False


def test_word_record_from_mapping():
    record = WordRecord.from_mapping(
        {"word": "骑/马", "vowel": "a", "class": "不及物动词", "frequency": "3"}
    )
    assert record.word == "骑/马"
    assert record.word_class == "不及物动词"
    assert record.frequency == 3

    with pytest.raises(ValueError):
        WordRecord.from_mapping({"word": "a/b/c"})
    with pytest.raises(ValueError):
        WordRecord.from_mapping({"word": "  "})


def test_poetic_style_parse():
    assert PoeticStyle.parse(" Quiet ") is PoeticStyle.QUIET
    assert PoeticStyle.parse(PoeticStyle.BOLD) is PoeticStyle.BOLD
    with pytest.raises(InvalidOptionsError):
        PoeticStyle.parse("loud")


def test_generation_options_defaults():
    options = GenerationOptions()
    assert options.style is PoeticStyle.BOLD
    assert (options.stanza_count, options.lines_per_stanza) == (1, 4)
    assert options.use_rhyme is False
    assert options.rhyme_scheme is None
    assert options.line_count == 4


def test_generation_options_normalizes_rhyme_scheme():
    assert GenerationOptions(use_rhyme=True, rhyme_scheme="UO").rhyme_scheme == "e"
    assert GenerationOptions(use_rhyme=True, rhyme_scheme="").rhyme_scheme is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"stanza_count": 0},
        {"lines_per_stanza": -1},
        {"stanza_count": True},
        {"lines_per_stanza": 2.5},
        {"rhyme_scheme": "xyz"},
        {"style": "loud"},
    ],
)
def test_generation_options_rejects_invalid_values(kwargs):
    with pytest.raises(InvalidOptionsError):
        GenerationOptions(**kwargs)


def test_generated_poem_stanzas():
    poem = GeneratedPoem(
        lines=["一，", "二。", "三，", "四。"],
        options=GenerationOptions(stanza_count=2, lines_per_stanza=2),
    )
    assert poem.stanzas() == [["一，", "二。"], ["三，", "四。"]]
    assert isinstance(poem.created_at, datetime)
