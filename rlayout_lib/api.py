# --- rlayout_lib/api.py ---
import logging
from typing import Sequence, Set

from .analyzer import LayoutAnalyzer
from .config import AnalyzerSettings
from .pdf_source import read_pdf_pages
from .schema import LayoutDocument, StyleSuggestions
from .suggestions import suggest_styles

log = logging.getLogger("rlayout.api")


def parse_page_selection(pages_str: str) -> Set[int] | None:
    """
    Parses a page selection string (e.g., '1,3,5-7') into a set of integers.

    Returns None for 'all' and for a selection that cannot be parsed,
    including a reversed range such as '7-5'.
    """
    if not pages_str or pages_str.lower() == "all":
        return None
    pages = set()
    try:
        for p in pages_str.split(","):
            part = p.strip()
            if "-" in part:
                s, e = map(int, part.split("-"))
                if s > e:
                    raise ValueError(f"reversed range {part}")
                pages.update(range(s, e + 1))
            else:
                pages.add(int(part))
        return pages
    except ValueError:
        log.error("Invalid page selection format: %s.", pages_str)
        return None


def analyze_layout(pages: Sequence, settings: AnalyzerSettings = None) -> LayoutDocument:
    """
    Reconstructs the layout of already-decoded pages.

    Args:
        pages: PageInput objects or mappings with width, height, textTokens
            and operators.
        settings: Engine thresholds; defaults when omitted.

    Returns:
        A new LayoutDocument owned by the caller.
    """
    return LayoutAnalyzer(settings).analyze(pages)


def build_suggestions(document: LayoutDocument) -> StyleSuggestions:
    """Derives the quick style preview from an analyzed document."""
    return suggest_styles(document)


def analyze_pdf(
    pdf_path: str, pages: Set[int] = None, settings: AnalyzerSettings = None
) -> LayoutDocument:
    """Decodes a PDF file with pdfminer and analyzes it."""
    log.info("Reading %s", pdf_path)
    return analyze_layout(read_pdf_pages(pdf_path, pages), settings)
