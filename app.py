"""Streamlit application entry point for the Lovvelger law picker."""

import asyncio
import logging
import sys

import streamlit as st

from lovvelger.config import get_settings
from lovvelger.fetcher import LovdataDirectoryFetcher
from lovvelger.reference import build_reference
from lovvelger.selector import LawSelector
from lovvelger.types import Chapter, Law

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)

logger = logging.getLogger(__name__)

PLACEHOLDER = "Velg lov, kapittel eller paragraf..."

# Page configuration
st.set_page_config(
    page_title="Lovvelger - Norsk lovvelger",
    page_icon="⚖️",
    layout="wide",
)


@st.cache_resource
def initialize_fetcher():
    """
    Initialize and cache the document fetcher.

    Uses Streamlit's cache_resource to avoid rescanning the data directory
    on every rerun.
    """
    try:
        settings = get_settings()
        logger.info(f"Initializing fetcher for {settings.lovdata_data_dir}...")
        return LovdataDirectoryFetcher(settings=settings)
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        raise ValueError(
            f"Configuration error: {e}\n\n"
            "Please check your .env file and LOVDATA_DATA_DIR."
        ) from e


try:
    fetcher = initialize_fetcher()
except Exception as e:
    st.error(str(e))
    st.stop()

if "selector" not in st.session_state:
    st.session_state.selector = LawSelector(fetcher, settings=fetcher.settings)
selector: LawSelector = st.session_state.selector

# Header
st.title("⚖️ Norsk Lovvelger")
st.markdown("Søk og velg fra norske lover, kapitler og paragrafer")

query = st.text_input("Søk etter lov", placeholder="F.eks. husleie")
if query != st.session_state.get("last_query"):
    st.session_state.last_query = query
    with st.spinner("Søker..."):
        asyncio.run(selector.search_remote(query, load_structure=False))

# Selected value
col_value, col_clear = st.columns([5, 1])
col_value.markdown(f"**Valgt:** {selector.selection.display_value(PLACEHOLDER)}")
if not selector.selection.value.is_empty and col_clear.button("Fjern"):
    selector.clear_selection()
    st.rerun()

filter_text = st.text_input("Filtrer kapitler og paragrafer", key="filter_text")


def render_chapter(law: Law, chapter: Chapter, depth: int = 0) -> None:
    """Render a chapter's paragraphs as select buttons, then its sub-chapters."""
    heading = "#" * min(depth + 4, 6)
    st.markdown(f"{heading} {chapter.number} {chapter.title}")
    for paragraph in chapter.paragraphs:
        reference = build_reference(law.base, paragraph.chapter_index)
        label = f"{paragraph.number} {paragraph.title[:80]}"
        if selector.selection.is_selected(reference):
            label = f"✓ {label}"
        if st.button(label, key=f"select_{reference}", use_container_width=True):
            selector.select(law, chapter, paragraph)
            st.rerun()
    for sub in chapter.sub_chapters:
        render_chapter(law, sub, depth + 1)


for law in selector.visible_laws(filter_text):
    with st.expander(f"{law.short_name} ({law.base})"):
        if not law.loaded:
            if st.button("Last inn struktur", key=f"load_{law.id}"):
                asyncio.run(selector.expand_law(law.id))
                st.rerun()
            continue
        if not law.chapters:
            st.caption("Ingen kapitler funnet.")
        for chapter in law.chapters:
            render_chapter(law, chapter)

if not selector.selection.value.is_empty:
    st.divider()
    st.json(selector.selection.value.to_dict())
