"""Lovvelger - structured browsing and selection of Norwegian laws."""

__version__ = "0.1.0"

# Data model
from .types import (
    Chapter,
    Clause,
    Law,
    LawFilter,
    LetteredItem,
    LovdataReference,
    Paragraph,
    SearchResult,
)

# Reference codec
from .reference import build_reference, parse_reference

# Structure parser
from .parser import (
    PLACEHOLDER_TITLE,
    build_juridical_reference,
    extract_chapter_number,
    extract_paragraph_number,
    extract_paragraph_title,
    lettered_item_label,
    parse_law,
    replace_placeholder_names,
)

# Filter / search
from .filtering import filter_law
from .search import search_laws

# Selection
from .selection import Selection, SelectionState, selection_for

__all__ = [
    # types
    "Chapter",
    "Clause",
    "Law",
    "LawFilter",
    "LetteredItem",
    "LovdataReference",
    "Paragraph",
    "SearchResult",
    # reference
    "build_reference",
    "parse_reference",
    # parser
    "PLACEHOLDER_TITLE",
    "build_juridical_reference",
    "extract_chapter_number",
    "extract_paragraph_number",
    "extract_paragraph_title",
    "lettered_item_label",
    "parse_law",
    "replace_placeholder_names",
    # filter / search
    "filter_law",
    "search_laws",
    # selection
    "Selection",
    "SelectionState",
    "selection_for",
]
