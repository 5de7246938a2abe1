"""Tests for allow-list filtering."""

import copy

from lovvelger.filtering import filter_law
from lovvelger.parser import parse_law
from lovvelger.types import LawFilter

from conftest import HUSLEIELOVEN_PAYLOAD


def _paragraph_ids(law):
    return [p.chapter_index for c in law.chapters for p in c.paragraphs]


def test_no_filter_returns_law(husleieloven):
    assert filter_law(husleieloven, None) is husleieloven


def test_empty_allow_lists_allow_everything(husleieloven):
    assert filter_law(husleieloven, LawFilter(law_base="LOV-1999-03-26-17")) == husleieloven


def test_allowed_chapters_by_index(husleieloven):
    result = filter_law(husleieloven, LawFilter(allowed_chapters=("kapittel-3",)))
    assert [c.chapter_index for c in result.chapters] == ["kapittel-3"]
    assert len(result.chapters[0].paragraphs) == 2


def test_allowed_chapters_by_substring(husleieloven):
    result = filter_law(husleieloven, LawFilter(allowed_chapters=("9",)))
    assert [c.chapter_index for c in result.chapters] == ["kapittel-9"]


def test_allowed_chapter_by_label(example_law):
    result = filter_law(example_law, LawFilter(allowed_chapters=("Kapittel 2",)))
    assert len(result.chapters) == 1
    assert result.chapters[0].number == "Kapittel 2"


def test_allowed_paragraphs(husleieloven):
    result = filter_law(husleieloven, LawFilter(allowed_paragraphs=("kapittel-3-paragraf-5",)))
    assert _paragraph_ids(result) == ["kapittel-3-paragraf-5"]


def test_allowed_paragraph_by_label(husleieloven):
    result = filter_law(husleieloven, LawFilter(allowed_paragraphs=("§ 9-7",)))
    assert _paragraph_ids(result) == ["kapittel-9-paragraf-7"]


def test_emptied_chapters_are_kept(husleieloven):
    result = filter_law(husleieloven, LawFilter(allowed_paragraphs=("kapittel-3-paragraf-5",)))
    assert [c.chapter_index for c in result.chapters] == ["kapittel-3", "kapittel-9"]
    assert result.chapters[1].paragraphs == ()


def test_chapter_and_paragraph_filters_combine(husleieloven):
    result = filter_law(
        husleieloven,
        LawFilter(allowed_chapters=("kapittel-9",), allowed_paragraphs=("paragraf-6",)),
    )
    assert _paragraph_ids(result) == ["kapittel-9-paragraf-6"]


def test_filter_is_idempotent(husleieloven):
    law_filter = LawFilter(allowed_chapters=("kapittel-3", "kapittel-9"), allowed_paragraphs=("paragraf-6",))
    once = filter_law(husleieloven, law_filter)
    assert filter_law(once, law_filter) == once


def test_filter_result_is_ordered_subset(husleieloven):
    result = filter_law(husleieloven, LawFilter(allowed_paragraphs=("paragraf-5", "paragraf-7")))
    before = _paragraph_ids(husleieloven)
    after = _paragraph_ids(result)
    assert set(after) <= set(before)
    assert after == [pid for pid in before if pid in after]


def test_input_untouched(husleieloven):
    snapshot = husleieloven.to_dict()
    filter_law(husleieloven, LawFilter(allowed_chapters=("kapittel-3",), allowed_paragraphs=("x",)))
    assert husleieloven.to_dict() == snapshot


def test_paragraph_filter_reaches_sub_chapters():
    law = parse_law({
        "base": "LOV-1",
        "chapters": [
            {
                "id": "kapittel-1",
                "subChapters": [
                    {"id": "del-1", "paragraphs": [{"id": "p-1"}, {"id": "p-2"}]},
                ],
            }
        ],
    })
    result = filter_law(law, LawFilter(allowed_paragraphs=("p-2",)))
    assert [p.id for p in result.chapters[0].sub_chapters[0].paragraphs] == ["p-2"]


def test_law_filter_from_dict_ignores_unknown_and_bad_values():
    law_filter = LawFilter.from_dict({
        "lawBase": "LOV-1999-03-26-17",
        "allowedChapters": ["kapittel-3", 5],
        "allowedParagraphs": "kapittel-3-paragraf-5",
        "preselectedReference": "LOV-1999-03-26-17_kapittel-3-paragraf-5",
        "extra": True,
    })
    assert law_filter.law_base == "LOV-1999-03-26-17"
    assert law_filter.allowed_chapters == ("kapittel-3",)
    assert law_filter.allowed_paragraphs == ()
    assert law_filter.preselected_reference == "LOV-1999-03-26-17_kapittel-3-paragraf-5"
    assert LawFilter.from_dict(None) == LawFilter()


def test_filter_from_raw_payload_copy():
    law = parse_law(copy.deepcopy(HUSLEIELOVEN_PAYLOAD))
    result = filter_law(law, LawFilter.from_dict({"allowedChapters": ["kapittel-9"]}))
    assert [c.number for c in result.chapters] == ["Kapittel 9"]
