#!/usr/bin/env python3
"""
Print the parsed structure of Lovdata laws from a local directory.

Usage:
    # Show the full tree of one law
    python scripts/browse_law.py LOV-1999-03-26-17 --data-dir data/nl/

    # Restrict to chapters and narrow by a search query
    python scripts/browse_law.py LOV-1999-03-26-17 --chapters kapittel-3 --query depositum

    # Search the directory by title instead of naming laws
    python scripts/browse_law.py --search husleie

    # Dump the parsed tree as JSON
    python scripts/browse_law.py LOV-1999-03-26-17 --json
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Add project root to path
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir / "src"))

from dotenv import load_dotenv
load_dotenv(root_dir / ".env")

from lovvelger.fetcher import LovdataDirectoryFetcher  # noqa: E402
from lovvelger.reference import build_reference  # noqa: E402
from lovvelger.selector import LawSelector  # noqa: E402
from lovvelger.types import Chapter, LawFilter  # noqa: E402

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def print_chapter(base: str, chapter: Chapter, depth: int = 0) -> None:
    indent = "  " * depth
    print(f"{indent}{chapter.number}: {chapter.title}")
    for paragraph in chapter.paragraphs:
        print(f"{indent}  {paragraph.juridical_reference[:90]}  [{build_reference(base, paragraph.chapter_index)}]")
        for clause in paragraph.ledd:
            print(f"{indent}    ledd {clause.number}: {clause.content[:70]}")
            for item in clause.bokstaver:
                print(f"{indent}      {item.letter}) {item.content[:60]}")
    for sub in chapter.sub_chapters:
        print_chapter(base, sub, depth + 1)


def main():
    parser = argparse.ArgumentParser(
        description="Parse, filter and search Lovdata laws from local files."
    )
    parser.add_argument(
        "bases",
        nargs="*",
        help="Statute identifiers to load (e.g. LOV-1999-03-26-17)",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory of Lovdata files (default: from settings)",
    )
    parser.add_argument(
        "--search",
        type=str,
        default=None,
        help="Find laws by title instead of naming bases",
    )
    parser.add_argument(
        "--chapters",
        nargs="*",
        default=[],
        help="Allowed chapter indexes or labels",
    )
    parser.add_argument(
        "--paragraphs",
        nargs="*",
        default=[],
        help="Allowed paragraph indexes or labels",
    )
    parser.add_argument(
        "--query",
        type=str,
        default=None,
        help="Narrow the shown tree with a live-search query",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the resulting laws as JSON",
    )
    args = parser.parse_args()

    if not args.bases and not args.search:
        parser.error("Give at least one base or --search")

    law_filter = None
    if args.chapters or args.paragraphs:
        law_filter = LawFilter(
            allowed_chapters=tuple(args.chapters),
            allowed_paragraphs=tuple(args.paragraphs),
        )

    try:
        fetcher = LovdataDirectoryFetcher(args.data_dir)
    except Exception as e:
        logger.error(f"Failed to initialize fetcher: {e}")
        sys.exit(1)

    selector = LawSelector(fetcher, law_filter=law_filter, settings=fetcher.settings)
    if args.search:
        asyncio.run(selector.search_remote(args.search))
    else:
        asyncio.run(selector.load_preloaded(args.bases))

    laws = selector.visible_laws(args.query)
    if not laws:
        logger.warning("No laws matched.")
        sys.exit(1)

    if args.json:
        print(json.dumps([law.to_dict() for law in laws], ensure_ascii=False, indent=2))
        return

    for law in laws:
        print(f"{law.short_name} ({law.base}) - {law.full_name}")
        for chapter in law.chapters:
            print_chapter(law.base, chapter, depth=1)


if __name__ == "__main__":
    main()
