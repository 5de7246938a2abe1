"""Law selector session: fetch, parse, filter and search laws for a picker UI."""

import asyncio
import logging
from typing import Iterable, Iterator, Sequence

from .config import Settings, get_settings
from .fetcher import DocumentFetcher
from .filtering import filter_law
from .parser import parse_law, replace_placeholder_names
from .reference import parse_reference
from .search import search_laws
from .selection import Selection, SelectionState, selection_for
from .types import Chapter, Law, LawFilter, Paragraph, SearchResult

logger = logging.getLogger(__name__)


def _walk_chapters(chapters: Iterable[Chapter]) -> Iterator[Chapter]:
    for chapter in chapters:
        yield chapter
        yield from _walk_chapters(chapter.sub_chapters)


class LawSelector:
    """
    Presentation-agnostic state behind a law/paragraph picker.

    Holds the currently shown laws and the selection. Law lists are always
    replaced, never mutated, so a law handed to a caller stays valid after
    later searches or expansions.
    """

    def __init__(
        self,
        fetcher: DocumentFetcher,
        law_filter: LawFilter | None = None,
        settings: Settings | None = None,
        multi_select: bool = False,
    ):
        self.fetcher = fetcher
        self.law_filter = law_filter
        self.settings = settings or get_settings()
        self.laws: list[Law] = []
        self.has_preloaded = False
        self._search_generation = 0
        self.selection = SelectionState(multi_select=multi_select)

    def _apply_filter(self, law: Law) -> Law:
        return filter_law(law, self.law_filter) if self.law_filter else law

    async def _fetch_law(self, base: str, semaphore: asyncio.Semaphore) -> Law | None:
        """
        Fetch and parse one law with concurrency control.

        Fetch failures and timeouts are logged and reported as None.
        """
        timeout = self.settings.fetch_timeout_seconds
        async with semaphore:
            try:
                payload = await asyncio.wait_for(
                    asyncio.to_thread(self.fetcher.fetch_document, base),
                    timeout=timeout,
                )
            except asyncio.TimeoutError:
                logger.warning(f"Timeout after {timeout}s fetching {base}")
                return None
            except Exception as e:
                logger.warning(f"Failed to fetch {base}: {e}")
                return None

        if payload is None:
            return None
        return parse_law(payload, base)

    async def _fetch_hit(self, hit: SearchResult, semaphore: asyncio.Semaphore) -> Law | None:
        if not hit.base:
            logger.error(f"No base found for search result: {hit.title!r}")
            return None
        law = await self._fetch_law(hit.base, semaphore)
        if law is None:
            return None
        return replace_placeholder_names(
            law, hit.title, hit.title, placeholder=self.settings.placeholder_title
        )

    async def load_preloaded(self, bases: Sequence[str]) -> list[Law]:
        """
        Fetch a fixed set of laws concurrently and show them.

        Laws that fail to load are left out. When the filter carries a
        preselected reference, the matching paragraph becomes the selection.
        """
        if not bases:
            return self.laws

        semaphore = asyncio.Semaphore(self.settings.fetch_concurrency)
        loaded = await asyncio.gather(*(self._fetch_law(base, semaphore) for base in bases))
        laws = [self._apply_filter(law) for law in loaded if law is not None]

        failed = len(bases) - len(laws)
        if failed:
            logger.warning(f"Preloaded {len(laws)}/{len(bases)} laws ({failed} failed)")
        else:
            logger.info(f"Preloaded {len(laws)} laws")

        self.laws = laws
        self.has_preloaded = True

        preselected = self.law_filter.preselected_reference if self.law_filter else None
        if preselected:
            self.select_reference(preselected)
        return self.laws

    async def search_remote(self, query: str, load_structure: bool = True) -> list[Law]:
        """
        Look up laws matching the query through the fetcher.

        Queries shorter than ``search_min_query_length`` do not hit the
        fetcher; they clear the results unless laws were preloaded. With
        ``load_structure=False`` hits are shown as unloaded stubs, which
        ``expand_law`` fills in on demand.

        Only the latest search updates the shown laws. Results of a search
        overtaken by a newer one are discarded.
        """
        self._search_generation += 1
        generation = self._search_generation

        if not query or len(query) < self.settings.search_min_query_length:
            if not self.has_preloaded:
                self.laws = []
            return self.laws

        try:
            hits = await asyncio.to_thread(self.fetcher.search, query)
        except Exception as e:
            logger.error(f"Search failed for {query!r}: {e}")
            return self.laws
        hits = hits[: self.settings.search_max_results]

        if load_structure:
            semaphore = asyncio.Semaphore(self.settings.fetch_concurrency)
            loaded = await asyncio.gather(*(self._fetch_hit(hit, semaphore) for hit in hits))
            laws = [self._apply_filter(law) for law in loaded if law is not None]
        else:
            laws = [Law.stub(hit.base, hit.title, hit.title) for hit in hits if hit.base]

        if generation != self._search_generation:
            logger.debug(f"Discarding results of superseded search {query!r}")
            return self.laws

        logger.info(f"Search {query!r}: {len(laws)}/{len(hits)} laws loaded")
        self.laws = laws
        return self.laws

    async def expand_law(self, law_id: str) -> Law | None:
        """
        Make sure a law's chapters are loaded, fetching them on first expand.

        The fetched law replaces the stub as a whole. The stub's display names
        are carried over only when the scraped title is the placeholder.
        """
        law = next((item for item in self.laws if item.id == law_id), None)
        if law is None:
            logger.warning(f"Cannot expand unknown law {law_id}")
            return None
        if law.loaded:
            return law

        semaphore = asyncio.Semaphore(1)
        details = await self._fetch_law(law.base, semaphore)
        if details is None:
            return law
        expanded = self._apply_filter(
            replace_placeholder_names(
                details, law.short_name, law.full_name, placeholder=self.settings.placeholder_title
            )
        )
        self.laws = [expanded if item.id == law_id else item for item in self.laws]
        return expanded

    def visible_laws(self, query: str | None) -> list[Law]:
        """Laws narrowed by the live search text."""
        return search_laws(self.laws, query)

    def find_paragraph(self, reference: str) -> tuple[Law, Chapter, Paragraph] | None:
        """Resolve a reference string to the shown paragraph it points at."""
        parsed = parse_reference(reference)
        if not parsed.chapter_index:
            return None
        for law in self.laws:
            if law.base != parsed.base:
                continue
            for chapter in _walk_chapters(law.chapters):
                for paragraph in chapter.paragraphs:
                    if paragraph.chapter_index == parsed.chapter_index:
                        return law, chapter, paragraph
        return None

    def select(self, law: Law, chapter: Chapter, paragraph: Paragraph) -> Selection:
        selection = selection_for(law, chapter, paragraph)
        self.selection.select(selection)
        return selection

    def select_reference(self, reference: str) -> Selection | None:
        found = self.find_paragraph(reference)
        if found is None:
            logger.info(f"Reference {reference} not among loaded laws")
            return None
        return self.select(*found)

    def clear_selection(self) -> None:
        self.selection.clear()
