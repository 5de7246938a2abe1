"""Selection values exchanged with the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass, field

from .reference import build_reference
from .types import Chapter, Law, Paragraph


@dataclass(frozen=True, slots=True)
class Selection:
    """A selected law/chapter/paragraph.

    Cleared fields are empty strings rather than None, which is what the
    presentation layer expects.
    """

    law: str = ""
    chapter: str = ""
    paragraph: str = ""
    full_reference: str = ""
    juridical_reference: str = ""

    @classmethod
    def cleared(cls) -> Selection:
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.law

    def to_dict(self) -> dict[str, str]:
        return {
            "law": self.law,
            "chapter": self.chapter,
            "paragraph": self.paragraph,
            "fullReference": self.full_reference,
            "juridicalReference": self.juridical_reference,
        }


def selection_for(law: Law, chapter: Chapter, paragraph: Paragraph) -> Selection:
    """Build the selection value for a paragraph within its chapter and law."""
    return Selection(
        law=law.short_name,
        chapter=chapter.number,
        paragraph=f"{paragraph.number} {paragraph.title}".strip(),
        full_reference=build_reference(law.base, paragraph.chapter_index),
        juridical_reference=paragraph.juridical_reference,
    )


@dataclass
class SelectionState:
    """Single- or multi-select state keyed on reference strings."""

    multi_select: bool = False
    value: Selection = field(default_factory=Selection.cleared)
    selected: tuple[Selection, ...] = ()

    def select(self, selection: Selection) -> None:
        """Set the selection, or toggle it in multi-select mode."""
        if not self.multi_select:
            self.value = selection
            return
        if self.is_selected(selection.full_reference):
            self.selected = tuple(
                s for s in self.selected if s.full_reference != selection.full_reference
            )
        else:
            self.selected = self.selected + (selection,)

    def clear(self) -> None:
        if self.multi_select:
            self.selected = ()
        else:
            self.value = Selection.cleared()

    def is_selected(self, full_reference: str) -> bool:
        if self.multi_select:
            return any(s.full_reference == full_reference for s in self.selected)
        return bool(full_reference) and self.value.full_reference == full_reference

    def display_value(self, placeholder: str = "Velg lov...") -> str:
        """Text shown on the closed selector."""
        if self.multi_select:
            count = len(self.selected)
            if count == 0:
                return placeholder
            return f"{count} paragraf{'er' if count > 1 else ''} valgt"

        if self.value.is_empty:
            return placeholder
        parts = [self.value.law]
        if self.value.chapter:
            parts.append(self.value.chapter)
        if self.value.paragraph:
            parts.append(self.value.paragraph)
        return " - ".join(parts)
