"""Tests for live hierarchy search."""

from lovvelger.parser import parse_law
from lovvelger.search import search_laws

FORBRUKERKJOP_PAYLOAD = {
    "base": "LOV-2002-06-21-34",
    "title": "Lov om forbrukerkjøp (forbrukerkjøpsloven)",
    "shortTitle": "Forbrukerkjøpsloven",
    "chapters": [
        {
            "id": "kapittel-6",
            "title": "Kapittel 6. Mangel",
            "paragraphs": [{"id": "kapittel-6-paragraf-15", "content": "§ 15. Mangel. Tingen har en mangel."}],
        }
    ],
}


def _numbers(chapter):
    return [p.number for p in chapter.paragraphs]


def test_empty_query_returns_input(husleieloven):
    laws = [husleieloven]
    result = search_laws(laws, "")
    assert result == laws
    assert result[0] is husleieloven
    assert search_laws(laws, None) == laws


def test_paragraph_title_match(example_law):
    result = search_laws([example_law], "virkeomr")
    assert len(result) == 1
    chapter = result[0].chapters[0]
    assert chapter.number == "Kapittel 2"
    assert _numbers(chapter) == ["§ 3"]


def test_case_insensitive(husleieloven):
    result = search_laws([husleieloven], "DEPOSITUM")
    assert [c.chapter_index for c in result[0].chapters] == ["kapittel-3"]
    assert _numbers(result[0].chapters[0]) == ["§ 3-5"]


def test_paragraph_number_match(husleieloven):
    result = search_laws([husleieloven], "§ 9-7")
    assert [c.chapter_index for c in result[0].chapters] == ["kapittel-9"]
    assert _numbers(result[0].chapters[0]) == ["§ 9-7"]


def test_chapter_and_paragraph_match_keeps_matching_paragraphs(husleieloven):
    result = search_laws([husleieloven], "garanti")
    chapter = result[0].chapters[0]
    assert chapter.chapter_index == "kapittel-3"
    assert _numbers(chapter) == ["§ 3-6"]


def test_chapter_title_match_falls_back_to_all_paragraphs(husleieloven):
    result = search_laws([husleieloven], "opphør")
    assert len(result[0].chapters) == 1
    chapter = result[0].chapters[0]
    assert chapter.chapter_index == "kapittel-9"
    assert _numbers(chapter) == ["§ 9-6", "§ 9-7"]


def test_chapter_number_match(husleieloven):
    result = search_laws([husleieloven], "kapittel 3")
    assert [c.chapter_index for c in result[0].chapters] == ["kapittel-3"]
    assert len(result[0].chapters[0].paragraphs) == 2


def test_law_name_match_keeps_all_chapters(husleieloven):
    result = search_laws([husleieloven], "husleie")
    assert len(result) == 1
    assert result[0].chapters == husleieloven.chapters


def test_non_matching_laws_dropped(husleieloven):
    forbrukerkjop = parse_law(FORBRUKERKJOP_PAYLOAD)
    result = search_laws([husleieloven, forbrukerkjop], "depositum")
    assert [law.base for law in result] == ["LOV-1999-03-26-17"]

    result = search_laws([husleieloven, forbrukerkjop], "mangel")
    assert [law.base for law in result] == ["LOV-2002-06-21-34"]


def test_no_results(husleieloven):
    assert search_laws([husleieloven], "arbeidsmiljø") == []


def test_search_does_not_mutate_input(husleieloven):
    snapshot = husleieloven.to_dict()
    search_laws([husleieloven], "garanti")
    assert husleieloven.to_dict() == snapshot


def test_sub_chapter_match_retains_parent():
    law = parse_law({
        "base": "LOV-1",
        "title": "Testlov",
        "chapters": [
            {
                "id": "kapittel-1",
                "title": "Kapittel 1. Alminnelige regler",
                "paragraphs": [{"content": "§ 1. Formål. Tekst."}],
                "subChapters": [
                    {"id": "avsnitt-a", "title": "Saksbehandling", "paragraphs": [{"content": "§ 2. Frister."}]},
                    {"id": "avsnitt-b", "title": "Klage", "paragraphs": [{"content": "§ 3. Klagerett."}]},
                ],
            },
            {"id": "kapittel-2", "title": "Kapittel 2. Sluttregler"},
        ],
    })
    result = search_laws([law], "klage")
    assert len(result[0].chapters) == 1
    parent = result[0].chapters[0]
    assert [c.chapter_index for c in parent.sub_chapters] == ["kapittel-1-avsnitt-b"]
    # the parent itself did not match any paragraph, so it falls back to all of them
    assert _numbers(parent) == ["§ 1"]


def test_chapter_match_keeps_sub_chapters():
    law = parse_law({
        "base": "LOV-1",
        "title": "Testlov",
        "chapters": [
            {
                "id": "kapittel-1",
                "title": "Kapittel 1. Saksbehandling",
                "subChapters": [{"id": "avsnitt-a", "title": "Frister"}],
            },
        ],
    })
    result = search_laws([law], "saksbehandling")
    assert len(result[0].chapters[0].sub_chapters) == 1
