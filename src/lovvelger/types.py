"""Immutable value records for the law hierarchy.

No imports from other lovvelger modules, so any module can import this one
without risking circular dependencies.

Records never point back at their parent. When a caller needs parent
context (e.g. the law base for a paragraph reference) it passes it along
explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True, slots=True)
class LetteredItem:
    """A lettered sub-unit ("bokstav") of a clause."""

    id: str
    letter: str
    content: str
    juridical_reference: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "letter": self.letter,
            "content": self.content,
            "juridicalReference": self.juridical_reference,
        }


@dataclass(frozen=True, slots=True)
class Clause:
    """A numbered sub-unit ("ledd") of a paragraph."""

    id: str
    number: int
    content: str
    juridical_reference: str
    bokstaver: tuple[LetteredItem, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "number": self.number,
            "content": self.content,
            "juridicalReference": self.juridical_reference,
            "bokstaver": [item.to_dict() for item in self.bokstaver],
        }


@dataclass(frozen=True, slots=True)
class Paragraph:
    """A numbered section ("paragraf") within a chapter."""

    id: str
    number: str
    title: str
    chapter_index: str
    juridical_reference: str
    content: str = ""
    ledd: tuple[Clause, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "number": self.number,
            "title": self.title,
            "content": self.content,
            "chapterIndex": self.chapter_index,
            "juridicalReference": self.juridical_reference,
            "ledd": [clause.to_dict() for clause in self.ledd],
        }


@dataclass(frozen=True, slots=True)
class Chapter:
    """A named grouping of paragraphs, possibly with nested sub-chapters."""

    id: str
    number: str
    title: str
    chapter_index: str
    paragraphs: tuple[Paragraph, ...] = ()
    sub_chapters: tuple[Chapter, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "number": self.number,
            "title": self.title,
            "chapterIndex": self.chapter_index,
            "paragraphs": [paragraph.to_dict() for paragraph in self.paragraphs],
            "subChapters": [chapter.to_dict() for chapter in self.sub_chapters],
        }


@dataclass(frozen=True, slots=True)
class Law:
    """A statute or regulation with its (possibly not yet loaded) chapters."""

    id: str
    base: str
    short_name: str
    full_name: str
    chapters: tuple[Chapter, ...] = ()
    loaded: bool = True
    """False while the chapters have not been fetched yet.

    An empty ``chapters`` tuple alone is ambiguous: it can mean either
    "no chapters" or "not fetched". Only ``loaded`` tells the two apart.
    """

    @classmethod
    def stub(cls, base: str, short_name: str | None = None, full_name: str | None = None) -> Law:
        """Build an unloaded Law known only by its base and display names."""
        return cls(
            id=base,
            base=base,
            short_name=short_name or full_name or base,
            full_name=full_name or short_name or base,
            chapters=(),
            loaded=False,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "base": self.base,
            "shortName": self.short_name,
            "fullName": self.full_name,
            "chapters": [chapter.to_dict() for chapter in self.chapters],
            "loaded": self.loaded,
        }


@dataclass(frozen=True, slots=True)
class LovdataReference:
    """A reference string split back into its parts."""

    base: str
    chapter_index: Optional[str] = None
    full_reference: str = ""


@dataclass(frozen=True, slots=True)
class LawFilter:
    """Allow-lists restricting which chapters and paragraphs of a law are shown.

    ``law_base`` and ``preselected_reference`` are carried along for the
    caller and are not used when filtering.
    """

    law_base: str = ""
    allowed_chapters: tuple[str, ...] = ()
    allowed_paragraphs: tuple[str, ...] = ()
    preselected_reference: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> LawFilter:
        """Build a filter from the exchange format, ignoring unknown keys."""
        data = data if isinstance(data, dict) else {}

        def _strings(value: Any) -> tuple[str, ...]:
            if not isinstance(value, (list, tuple)):
                return ()
            return tuple(item for item in value if isinstance(item, str))

        preselected = data.get("preselectedReference")
        return cls(
            law_base=data.get("lawBase") if isinstance(data.get("lawBase"), str) else "",
            allowed_chapters=_strings(data.get("allowedChapters")),
            allowed_paragraphs=_strings(data.get("allowedParagraphs")),
            preselected_reference=preselected if isinstance(preselected, str) else None,
        )


@dataclass(frozen=True, slots=True)
class SearchResult:
    """One hit from a fetcher's law search."""

    title: str
    id: str
    link: str = ""
    department: str = ""

    @property
    def base(self) -> str:
        return self.id

