"""Reference codec for law and section selection keys.

A reference is ``<base>`` for a whole law or ``<base>_<chapterIndex>`` for a
section within it. String equality on references is what decides whether a
section is selected.
"""

from .types import LovdataReference

REFERENCE_SEPARATOR = "_"


def build_reference(base: str, chapter_index: str | None = None) -> str:
    """
    Build the canonical reference string for a law or one of its sections.

    Examples:
        ("LOV-2005-1", None) -> "LOV-2005-1"
        ("LOV-2005-1", "kapittel-2-paragraf-3") -> "LOV-2005-1_kapittel-2-paragraf-3"
    """
    if not chapter_index:
        return base
    return f"{base}{REFERENCE_SEPARATOR}{chapter_index}"


def parse_reference(reference: str | None) -> LovdataReference:
    """
    Split a reference string back into base and chapter index.

    Splits on the first separator only, so a chapter index containing ``_``
    survives intact. A base containing ``_`` does not round-trip.
    """
    reference = reference or ""
    base, separator, chapter_index = reference.partition(REFERENCE_SEPARATOR)
    return LovdataReference(
        base=base,
        chapter_index=chapter_index if separator and chapter_index else None,
        full_reference=reference,
    )
