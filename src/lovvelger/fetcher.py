"""Document fetcher reading Lovdata HTML/XML files from a local directory.

The structure parser does not care where raw payloads come from. Anything
implementing ``DocumentFetcher`` can feed it. ``LovdataDirectoryFetcher``
scrapes Lovdata's published HTML format:

- Title in <dd class="title">, short name in <dd class="titleShort">
- Document reference in <dd class="dokid"> (e.g. "NL/lov/1999-03-26-17")
- Chapters in <section id="kapittel-X"> with <h2> headings
- Paragraphs in <article id="kapittel-X-paragraf-Y"> with <h3> headings
- Clauses in <article class="legalP" id="...-ledd-N">, lettered items as <li>
"""

import logging
import re
from pathlib import Path
from typing import Protocol

from bs4 import BeautifulSoup, SoupStrainer, Tag

from .config import Settings, get_settings
from .parser import extract_paragraph_number
from .types import SearchResult

logger = logging.getLogger(__name__)

_CANONICAL_LAW_REF_RE = re.compile(
    r"(lov|forskrift)/(\d{4}-\d{2}-\d{2})-(\d+)",
    flags=re.IGNORECASE,
)
_CHAPTER_SECTION_ID_RE = re.compile(r"^kapittel-\d+[a-zA-Z]?$")
_FILE_SUFFIXES = (".xml", ".html", ".htm")

# Lovdata document type prefix -> base prefix
_BASE_PREFIXES = {"lov": "LOV", "forskrift": "FOR"}
# Filename prefix -> Lovdata document type
_FILENAME_PREFIXES = {"nl": "lov", "sf": "forskrift"}


class DocumentFetcher(Protocol):
    """Source of raw law document payloads."""

    def fetch_document(self, base: str) -> dict | None:
        """Return the raw payload for a statute, or None if unknown."""
        ...

    def search(self, query: str) -> list[SearchResult]:
        """Return laws whose title matches the query."""
        ...


def _base_from_law_ref(value: str | None) -> str | None:
    """
    Convert a Lovdata reference to a statute base identifier.

    Examples:
        lov/1999-03-26-017 -> LOV-1999-03-26-17
        NL/forskrift/1997-06-06-32 -> FOR-1997-06-06-32
    """
    if not value:
        return None
    match = _CANONICAL_LAW_REF_RE.search(value.strip())
    if not match:
        return None
    prefix, date_part, num_part = match.group(1).lower(), match.group(2), match.group(3)
    # Normalize leading zeros in law number (017 -> 17).
    return f"{_BASE_PREFIXES[prefix]}-{date_part}-{int(num_part)}"


def base_from_filename(stem: str) -> str | None:
    """
    Derive a statute base from a Lovdata filename.

    Examples:
        nl-19990326-017 -> LOV-1999-03-26-17
        sf-19970606-032 -> FOR-1997-06-06-32
    """
    # Format: nl-YYYYMMDD-NNN or sf-YYYYMMDD-NNN
    parts = stem.split("-")
    if len(parts) < 3:
        return None
    prefix, date_part, num_part = parts[0].lower(), parts[1], parts[2]
    if len(date_part) != 8 or not date_part.isdigit() or not num_part.isdigit():
        return None
    doc_type = _FILENAME_PREFIXES.get(prefix, "lov")
    return _base_from_law_ref(f"{doc_type}/{date_part[:4]}-{date_part[4:6]}-{date_part[6:]}-{num_part}")


def lovdata_path_for_base(base: str) -> str:
    """
    Map a statute base to its Lovdata document path.

    Examples:
        LOV-1981-04-08-7 -> lov/1981-04-08-7
        FOR-2009-06-12-641 -> forskrift/2009-06-12-641
    """
    parts = base.split("-")
    if len(parts) < 4:
        return f"lov/{base}"
    doc_type = "forskrift" if parts[0].lower() == "for" else "lov"
    return f"{doc_type}/{'-'.join(parts[1:])}"


def _extract_title(soup: BeautifulSoup) -> str:
    """Document title, falling back to <title> and then the first <h1>."""
    for elem in (soup.find("dd", class_="title"), soup.find("title"), soup.find("h1")):
        if elem:
            text = elem.get_text(strip=True)
            if text:
                return text
    return ""


def _extract_short_name(soup: BeautifulSoup) -> str | None:
    """
    Extract law short name from header metadata.

    <dd class="titleShort">Husleieloven – husll</dd>
    -> "Husleieloven"
    """
    short_elem = soup.find("dd", class_="titleShort")
    if short_elem:
        text = short_elem.get_text(strip=True)
        # Split on common separators: " – ", " - ", " — "
        for sep in (" – ", " — ", " - "):
            if sep in text:
                return text.split(sep)[0].strip()
        return text.strip() or None

    title_elem = soup.find("dd", class_="title") or soup.find("title")
    if not title_elem:
        return None
    # "Lov om ... (husleieloven)" -> "husleieloven"
    paren_match = re.search(r"\(([^)]+)\)", title_elem.get_text(strip=True))
    if paren_match:
        return paren_match.group(1).strip() or None
    return None


def _text_of(elem: Tag, max_chars: int | None = None) -> str:
    text = elem.get_text(separator=" ", strip=True)
    text = re.sub(r"\s+", " ", text)
    # Undo the separator inserted between a heading's "§ N" and its trailing period.
    text = re.sub(r" \.", ".", text)
    if max_chars and max_chars > 0:
        text = text[:max_chars]
    return text


def _is_nested_article_id(article_id: str) -> bool:
    """Return True for fine-grained nested article IDs."""
    return "-ledd-" in article_id or "-punkt-" in article_id


def _is_clause_tag(tag: Tag) -> bool:
    if tag.name not in ("article", "div", "p", "section"):
        return False
    classes = tag.get("class") or []
    return "legalP" in classes or "ledd" in classes or "-ledd-" in (tag.get("id") or "")


def _has_ancestor_within(tag: Tag, stop: Tag, predicate) -> bool:
    """True if an ancestor of tag below stop satisfies predicate."""
    for parent in tag.parents:
        if parent is stop:
            return False
        if predicate(parent):
            return True
    return False


def _is_list_or_clause(tag: Tag) -> bool:
    return tag.name in ("ol", "ul", "li") or _is_clause_tag(tag)


def _lettered_items(clause: Tag) -> list[Tag]:
    """<li> items of the clause's outermost lists; sub-lists stay inside their item."""
    items = []
    for list_tag in clause.find_all(["ol", "ul"]):
        if _has_ancestor_within(list_tag, clause, _is_list_or_clause):
            continue
        items.extend(list_tag.find_all("li", recursive=False))
    return items


def _clause_payloads(article: Tag, max_chars: int) -> list[dict]:
    """Outermost clause nodes of an article; clauses nested in a clause are part of its text."""
    clauses = []
    for clause in article.find_all(_is_clause_tag):
        if _has_ancestor_within(clause, article, _is_clause_tag):
            continue
        clauses.append({
            "type": "ledd",
            "className": " ".join(clause.get("class") or []),
            "content": _text_of(clause, max_chars),
            "children": [
                {"type": "bokstav", "content": _text_of(li, max_chars)}
                for li in _lettered_items(clause)
            ],
        })
    return clauses


def _paragraph_payload(article: Tag, max_chars: int) -> dict:
    h3 = article.find("h3")
    heading = _text_of(h3) if h3 else ""
    payload = {
        "content": _text_of(article, max_chars),
        "children": _clause_payloads(article, max_chars),
    }
    if article.get("id"):
        payload["id"] = article.get("id")
    number = extract_paragraph_number(heading)
    if number:
        payload["number"] = number
    return payload


def _owned_articles(container: Tag) -> list[Tag]:
    """Paragraph-level articles whose nearest section is the container."""
    owned = []
    for article in container.find_all("article"):
        if article.find_parent("article") is not None:
            continue
        if _is_nested_article_id(article.get("id") or ""):
            continue
        if container.name == "section" and article.find_parent("section") is not container:
            continue
        owned.append(article)
    return owned


def _chapter_payload(section: Tag, max_chars: int) -> dict:
    h2 = section.find("h2")
    return {
        "id": section.get("id") or None,
        "title": _text_of(h2) if h2 else None,
        "paragraphs": [_paragraph_payload(a, max_chars) for a in _owned_articles(section)],
        "subChapters": [
            _chapter_payload(sub, max_chars) for sub in section.find_all("section", recursive=False)
        ],
    }


def document_to_payload(soup: BeautifulSoup, base: str, max_chars: int = 500) -> dict:
    """
    Scrape a Lovdata document into a raw payload for the structure parser.

    Documents without chapter sections are returned as a single untitled
    chapter holding all paragraph-level articles.
    """
    title = _extract_title(soup)
    sections = soup.find_all("section", id=_CHAPTER_SECTION_ID_RE)
    section_ids = {id(s) for s in sections}
    top_level = [s for s in sections if not any(id(p) in section_ids for p in s.find_parents("section"))]

    if top_level:
        chapters = [_chapter_payload(section, max_chars) for section in top_level]
    else:
        articles = _owned_articles(soup)
        chapters = [{"paragraphs": [_paragraph_payload(a, max_chars) for a in articles]}] if articles else []

    return {
        "base": base,
        "title": title,
        "shortTitle": _extract_short_name(soup) or title,
        "chapters": chapters,
    }


def _read_text(path: Path) -> str:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except UnicodeDecodeError as e:
        logger.error(f"Failed to decode {path}: {e}")
        raise ValueError(f"Cannot decode file as UTF-8: {path}") from e
    except IOError as e:
        logger.error(f"Failed to read {path}: {e}")
        raise IOError(f"Cannot read file: {path}") from e


class LovdataDirectoryFetcher:
    """Serve raw law payloads from a directory of Lovdata files."""

    def __init__(self, data_dir: Path | str | None = None, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.data_dir = Path(data_dir or self.settings.lovdata_data_dir)
        self._headers: dict[str, dict] | None = None

    def _scan_headers(self) -> dict[str, dict]:
        """Map statute base -> header metadata for every law file (cached)."""
        if self._headers is not None:
            return self._headers

        if not self.data_dir.is_dir():
            raise ValueError(f"Not a directory: {self.data_dir}")

        headers: dict[str, dict] = {}
        paths = sorted(p for p in self.data_dir.iterdir() if p.suffix.lower() in _FILE_SUFFIXES)
        logger.info(f"Scanning {len(paths)} law files in {self.data_dir}")
        for path in paths:
            try:
                content = _read_text(path)
            except (ValueError, IOError) as e:
                logger.warning(f"Skipping {path.name}: {e}")
                continue
            # Use SoupStrainer to parse only the header for speed
            soup = BeautifulSoup(content, "html.parser", parse_only=SoupStrainer("header"))
            dokid = soup.find("dd", class_="dokid")
            base = (
                _base_from_law_ref(dokid.get_text(strip=True) if dokid else None)
                or base_from_filename(path.stem)
                or path.stem
            )
            if base in headers:
                logger.warning(f"Duplicate base {base} in {path.name}, keeping {headers[base]['path'].name}")
                continue
            title = _extract_title(soup)
            if not title:
                title_match = re.search(r"<title>(.*?)</title>", content, flags=re.IGNORECASE | re.DOTALL)
                title = title_match.group(1).strip() if title_match else ""
            legal_area = soup.find("dd", class_="legalArea")
            headers[base] = {
                "path": path,
                "title": title,
                "short_title": _extract_short_name(soup),
                "department": legal_area.get_text(strip=True) if legal_area else "",
            }

        self._headers = headers
        return headers

    def fetch_document(self, base: str) -> dict | None:
        """
        Load and scrape the document for a statute base.

        Returns:
            Raw document payload, or None when no file is known for the base

        Raises:
            ValueError: If the file cannot be decoded
        """
        header = self._scan_headers().get(base)
        if header is None:
            logger.warning(f"No Lovdata file found for {base} in {self.data_dir}")
            return None

        path = header["path"]
        content = _read_text(path)
        if not content.strip():
            logger.warning(f"Empty file: {path}")
            return {"base": base, "chapters": []}

        soup = BeautifulSoup(content, "html.parser")
        payload = document_to_payload(soup, base, self.settings.paragraph_content_max_chars)
        logger.info(f"Scraped {path.name} ({len(payload['chapters'])} chapters)")
        return payload

    def search(self, query: str) -> list[SearchResult]:
        """Find laws whose title, short name or base contains the query."""
        needle = (query or "").strip().lower()
        if not needle:
            return []

        results: list[SearchResult] = []
        for base, header in self._scan_headers().items():
            haystacks = (header["title"], header["short_title"] or "", base)
            if not any(needle in value.lower() for value in haystacks):
                continue
            results.append(
                SearchResult(
                    title=header["title"] or header["short_title"] or base,
                    id=base,
                    link=f"{self.settings.lovdata_base_url}/dokument/NL/{lovdata_path_for_base(base)}",
                    department=header["department"],
                )
            )
            if len(results) >= self.settings.search_max_results:
                break

        logger.info(f"Search: found {len(results)} results for {query!r}")
        return results
