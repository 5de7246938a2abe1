"""Live substring search over parsed laws, preserving the tree shape."""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from .types import Chapter, Law


def _contains(query: str, *values: str) -> bool:
    return any(query in (value or "").lower() for value in values)


def _search_chapter(chapter: Chapter, query: str) -> Chapter | None:
    """
    Narrow a chapter to the paragraphs matching the query.

    A chapter that matches only by its own title or number keeps all of its
    paragraphs rather than none. Returns None when neither the chapter, its
    paragraphs, nor any sub-chapter match.
    """
    chapter_matches = _contains(query, chapter.title, chapter.number)
    matching_paragraphs = tuple(
        p for p in chapter.paragraphs if _contains(query, p.number, p.title)
    )
    matching_sub_chapters = _search_chapters(chapter.sub_chapters, query)

    if not (chapter_matches or matching_paragraphs or matching_sub_chapters):
        return None

    if matching_sub_chapters:
        sub_chapters = matching_sub_chapters
    elif chapter_matches:
        sub_chapters = chapter.sub_chapters
    else:
        sub_chapters = ()

    return replace(
        chapter,
        paragraphs=matching_paragraphs or chapter.paragraphs,
        sub_chapters=sub_chapters,
    )


def _search_chapters(chapters: Sequence[Chapter], query: str) -> tuple[Chapter, ...]:
    results = (_search_chapter(chapter, query) for chapter in chapters)
    return tuple(chapter for chapter in results if chapter is not None)


def search_laws(laws: Sequence[Law], query: str | None) -> list[Law]:
    """
    Case-insensitive substring search across laws, chapters and paragraphs.

    Args:
        laws: Parsed laws to search
        query: Search text; an empty query returns the laws unchanged

    Returns:
        Laws that match by name or contain a matching chapter, each narrowed
        to its matching chapters. A law matching by name alone keeps all of
        its chapters.
    """
    if not query:
        return list(laws)

    needle = query.lower()
    results: list[Law] = []
    for law in laws:
        law_matches = _contains(needle, law.short_name, law.full_name)
        matching_chapters = _search_chapters(law.chapters, needle)
        if not (law_matches or matching_chapters):
            continue
        results.append(replace(law, chapters=matching_chapters or law.chapters))
    return results
