"""Allow-list filtering of a parsed Law."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from .types import Chapter, Law, LawFilter, Paragraph


def _is_allowed(allowed: tuple[str, ...], index: str, label: str) -> bool:
    """
    Check a node against an allow-list.

    An empty allow-list allows everything. Otherwise an entry must be a
    substring of the node's index or equal its display label, so both
    "kapittel-2" and "Kapittel 2" select the same chapter.
    """
    if not allowed:
        return True
    return any(entry in index or entry == label for entry in allowed)


def _filter_paragraphs(paragraphs: Iterable[Paragraph], allowed: tuple[str, ...]) -> tuple[Paragraph, ...]:
    return tuple(p for p in paragraphs if _is_allowed(allowed, p.chapter_index, p.number))


def _filter_chapter_contents(chapter: Chapter, allowed_paragraphs: tuple[str, ...]) -> Chapter:
    """Apply the paragraph allow-list to a chapter and its sub-chapters."""
    if not allowed_paragraphs:
        return chapter
    return replace(
        chapter,
        paragraphs=_filter_paragraphs(chapter.paragraphs, allowed_paragraphs),
        sub_chapters=tuple(
            _filter_chapter_contents(sub, allowed_paragraphs) for sub in chapter.sub_chapters
        ),
    )


def filter_law(law: Law, law_filter: LawFilter | None) -> Law:
    """
    Restrict a law to the chapters and paragraphs named by a filter.

    Top-level chapters are matched against ``allowed_chapters``. Paragraphs
    at every depth are matched against ``allowed_paragraphs``. A chapter
    whose paragraphs are all filtered away is still kept. Returns a new Law
    and leaves the input untouched.
    """
    if law_filter is None:
        return law

    allowed_chapters = tuple(law_filter.allowed_chapters or ())
    allowed_paragraphs = tuple(law_filter.allowed_paragraphs or ())

    chapters = tuple(
        _filter_chapter_contents(chapter, allowed_paragraphs)
        for chapter in law.chapters
        if _is_allowed(allowed_chapters, chapter.chapter_index, chapter.number)
    )
    return replace(law, chapters=chapters)
