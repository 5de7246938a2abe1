"""Structure parser turning raw Lovdata document payloads into a Law tree.

The raw payload is whatever the document fetcher managed to scrape:

    {
        "base": "LOV-1999-03-26-17",
        "title": "Lov om husleieavtaler (husleieloven)",
        "shortTitle": "Husleieloven",
        "chapters": [
            {
                "id": "kapittel-3",
                "title": "Kapittel 3. Depositum",
                "paragraphs": [{"id": "...", "number": "§ 3-5", "content": "..."}],
                "subChapters": [...],
            }
        ],
    }

Every field is optional and unknown fields are ignored. Parsing never
raises. Each extraction step falls back to a deterministic value
(positional index, empty string, or a placeholder label), so the result is
always a structurally valid Law, even when its labels are poor.
"""

import logging
import re
from dataclasses import replace
from typing import Any

from .types import Chapter, Clause, Law, LetteredItem, Paragraph

logger = logging.getLogger(__name__)

# Title Lovdata scraping yields when the real document title was not found
PLACEHOLDER_TITLE = "Hovedmeny"

_CHAPTER_NUMBER_RE = re.compile(r"Kapittel\s+(\d+[A-Z]?)", flags=re.IGNORECASE)
# "§ 3", "§ 3a", "§ 3-5", "§ 9-3 a"
_PARAGRAPH_NUMBER_RE = re.compile(
    r"^\s*§\s*(\d+[a-z]?\b(?:\s*-\s*\d+(?:\s?[a-z])?\b)?)",
    flags=re.IGNORECASE,
)
_LETTERS = "abcdefghijklmnopqrstuvwxyz"

CLAUSE_TAG = "ledd"
LETTERED_ITEM_TAG = "bokstav"


def _text(value: Any) -> str:
    """Return value if it is a string, otherwise an empty string."""
    return value if isinstance(value, str) else ""


def _items(value: Any) -> list[dict]:
    """Return the dict entries of a raw list, dropping anything else."""
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, dict)]


def _as_mapping(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def extract_chapter_number(title: str | None) -> str | None:
    """
    Extract the chapter number from a chapter heading.

    Examples:
        "Kapittel 2. Virkeområde" -> "2"
        "kapittel 12A Overgangsregler" -> "12A"
        "Innledende bestemmelser" -> None
    """
    match = _CHAPTER_NUMBER_RE.search(title or "")
    return match.group(1) if match else None


def extract_paragraph_number(content: str | None) -> str | None:
    """
    Extract a leading paragraph label ("§ N") from paragraph text.

    Only a § label at the very start of the text counts. References to other
    paragraphs further into the body are ignored.

    Examples:
        "§ 3. Virkeområde. ..." -> "§ 3"
        "§ 9-3 a. Fremleie" -> "§ 9-3 a"
        "Loven gjelder ... jf. § 5" -> None
    """
    match = _PARAGRAPH_NUMBER_RE.match(content or "")
    if not match:
        return None
    number = re.sub(r"\s*-\s*", "-", match.group(1))
    number = re.sub(r"\s+", " ", number)
    return f"§ {number}"


def extract_paragraph_title(content: str | None) -> str:
    """
    Return everything after the first "." of the paragraph text, trimmed.

    This is a heuristic. Text with an abbreviation before the first period
    ("jf. ...", "nr. ...") gets a truncated title.
    """
    _, separator, rest = (content or "").partition(".")
    return rest.strip() if separator else ""


def build_juridical_reference(number: str, title: str) -> str:
    """Human-readable citation: "§ 3" or "§ 3. Virkeområde"."""
    return f"{number}. {title}" if title else number


def lettered_item_label(index: int) -> str:
    """Letter for the 0-based item index: a-z, then the 1-based index as a string."""
    if 0 <= index < len(_LETTERS):
        return _LETTERS[index]
    return str(index + 1)


def _is_tagged(raw: dict, tag: str) -> bool:
    """Recognize a raw child by explicit type tag or by a class name hint."""
    if raw.get("type") == tag:
        return True
    class_name = raw.get("className")
    if isinstance(class_name, (list, tuple)):
        class_name = " ".join(name for name in class_name if isinstance(name, str))
    return tag in _text(class_name)


def _child_content(raw: dict) -> str:
    return _text(raw.get("content")) or _text(raw.get("text"))


def _parse_lettered_items(
    children: list[dict],
    clause_id: str,
    paragraph_number: str,
    clause_number: int,
) -> tuple[LetteredItem, ...]:
    items: list[LetteredItem] = []
    for child in children:
        if not _is_tagged(child, LETTERED_ITEM_TAG):
            continue
        letter = lettered_item_label(len(items))
        items.append(
            LetteredItem(
                id=f"{clause_id}-bokstav-{letter}",
                letter=letter,
                content=_child_content(child),
                juridical_reference=f"{paragraph_number}, ledd {clause_number}, bokstav {letter}",
            )
        )
    return tuple(items)


def _parse_clauses(children: list[dict], paragraph_index: str, paragraph_number: str) -> tuple[Clause, ...]:
    """Number clauses 1..N in document order, ignoring source numbering."""
    clauses: list[Clause] = []
    for child in children:
        if not _is_tagged(child, CLAUSE_TAG):
            continue
        number = len(clauses) + 1
        clause_id = f"{paragraph_index}-ledd-{number}"
        clauses.append(
            Clause(
                id=clause_id,
                number=number,
                content=_child_content(child),
                juridical_reference=f"{paragraph_number}, ledd {number}",
                bokstaver=_parse_lettered_items(
                    _items(child.get("children")), clause_id, paragraph_number, number
                ),
            )
        )
    return tuple(clauses)


def _parse_paragraph(raw: dict, position: int, chapter_id: str, chapter_index: str) -> Paragraph:
    raw_id = _text(raw.get("id"))
    content = _text(raw.get("content"))

    number = _text(raw.get("number")).strip() or extract_paragraph_number(content)
    if not number:
        number = f"§ {position + 1}"
        logger.debug(f"No paragraph number in {chapter_index}[{position}], using {number!r}")

    title = extract_paragraph_title(content)
    paragraph_index = raw_id or f"{chapter_index}-paragraf-{position}"

    return Paragraph(
        id=raw_id or f"{chapter_id}-para-{position}",
        number=number,
        title=title,
        content=content,
        chapter_index=paragraph_index,
        juridical_reference=build_juridical_reference(number, title),
        ledd=_parse_clauses(_items(raw.get("children")), paragraph_index, number),
    )


def _parse_chapter(raw: dict, position: int, parent_index: str | None = None) -> Chapter:
    """Parse one raw chapter; sub-chapters get "<parent>-<child>" indexes."""
    raw_title = _text(raw.get("title")).strip()
    local_index = _text(raw.get("id")) or f"chapter-{position}"
    chapter_index = f"{parent_index}-{local_index}" if parent_index else local_index

    chapter_number = extract_chapter_number(raw_title) or f"{position + 1}"

    paragraphs = tuple(
        _parse_paragraph(raw_paragraph, p_idx, chapter_index, chapter_index)
        for p_idx, raw_paragraph in enumerate(_items(raw.get("paragraphs")))
    )
    raw_sub_chapters = _items(raw.get("subChapters")) or _items(raw.get("chapters"))
    sub_chapters = tuple(
        _parse_chapter(raw_sub, s_idx, chapter_index)
        for s_idx, raw_sub in enumerate(raw_sub_chapters)
    )

    return Chapter(
        id=chapter_index,
        number=f"Kapittel {chapter_number}",
        title=raw_title or f"Kapittel {position + 1}",
        chapter_index=chapter_index,
        paragraphs=paragraphs,
        sub_chapters=sub_chapters,
    )


def count_paragraphs(chapters: tuple[Chapter, ...]) -> int:
    """Count paragraphs across chapters and all nested sub-chapters."""
    return sum(len(c.paragraphs) + count_paragraphs(c.sub_chapters) for c in chapters)


def parse_law(payload: Any, base: str | None = None) -> Law:
    """
    Parse a raw document payload into a Law.

    Args:
        payload: Raw document dict from a document fetcher (anything else is
            treated as an empty payload)
        base: Statute identifier the payload was requested for; the payload's
            own ``base`` field takes precedence

    Returns:
        A loaded Law whose chapters keep source order
    """
    data = _as_mapping(payload)
    law_base = _text(data.get("base")).strip() or (base or "").strip()
    if not law_base:
        logger.warning("Parsing law payload without a base identifier")

    title = _text(data.get("title")).strip()
    short_title = _text(data.get("shortTitle")).strip()

    chapters = tuple(
        _parse_chapter(raw_chapter, idx)
        for idx, raw_chapter in enumerate(_items(data.get("chapters")))
    )

    law = Law(
        id=law_base,
        base=law_base,
        short_name=short_title or title or law_base,
        full_name=title or law_base,
        chapters=chapters,
        loaded=True,
    )
    logger.info(
        f"Parsed {law.short_name} ({law.base}): "
        f"{len(chapters)} chapters, {count_paragraphs(chapters)} paragraphs"
    )
    return law


def has_placeholder_name(law: Law, placeholder: str = PLACEHOLDER_TITLE) -> bool:
    return law.short_name == placeholder or law.full_name == placeholder


def replace_placeholder_names(
    law: Law,
    short_name: str | None,
    full_name: str | None = None,
    placeholder: str = PLACEHOLDER_TITLE,
) -> Law:
    """
    Substitute known display names for a scraped placeholder title.

    Returns a new Law when either name equals the placeholder and a known
    name is available; otherwise returns the law unchanged. The input is
    never mutated, so a cached parse of the same payload stays intact.
    """
    if not has_placeholder_name(law, placeholder):
        return law
    known_short = short_name or full_name
    known_full = full_name or short_name
    if not known_short:
        return law
    logger.debug(f"Replacing placeholder title for {law.base} with {known_short!r}")
    return replace(law, short_name=known_short, full_name=known_full)
