# --- rlayout_lib/analyzer.py ---
"""
rlayout_lib/analyzer.py: Contains the LayoutAnalyzer, which runs the page
pipeline (tokens -> lines -> regions, graphics, fonts, colors) and the
document-level section analysis.
"""
import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from numbers import Real
from typing import Any, List

from .colors import ColorTally
from .config import AnalyzerSettings
from .constants import FONT_FAMILY_TABLE, SECTION_KEYWORDS
from .exceptions import LayoutInputError
from .fonts import FontRegistry
from .graphics import extract_graphics
from .lines import group_lines
from .mapper import map_regions_to_sections
from .models import PageInput
from .regions import assign_reading_order, build_regions
from .schema import LayoutDocument, PageLayout
from .sections import detect_entry_formats, detect_section_structure
from .tokens import normalize_operators, normalize_tokens

log = logging.getLogger("rlayout")
log_layout = logging.getLogger("rlayout.regions")


@dataclass
class _PageResult:
    layout: PageLayout
    fonts: FontRegistry
    colors: ColorTally


def _page_value(raw: Any, *names: str, default=None):
    for name in names:
        if isinstance(raw, Mapping):
            if name in raw:
                return raw[name]
        elif hasattr(raw, name):
            return getattr(raw, name)
    return default


def _dimension(value: Any, name: str, page_number: int) -> float:
    if value is None:
        log.warning("Page %d has no %s; assuming 0.", page_number, name)
        return 0.0
    if isinstance(value, bool) or not isinstance(value, Real):
        raise LayoutInputError(f"Page {page_number}: {name} must be a number, got {value!r}")
    if value < 0:
        raise LayoutInputError(f"Page {page_number}: {name} must not be negative ({value})")
    return float(value)


def coerce_page(raw: Any, position: int) -> PageInput:
    """Accepts a PageInput, a mapping or a matching object as page input."""
    page_number = _page_value(raw, "pageNumber", "page_number", default=None)
    if page_number is None:
        page_number = position + 1
    return PageInput(
        page_number=page_number,
        width=_dimension(_page_value(raw, "width"), "width", page_number),
        height=_dimension(_page_value(raw, "height"), "height", page_number),
        text_tokens=_page_value(raw, "textTokens", "text_tokens", default=[]) or [],
        operators=_page_value(raw, "operatorStream", "operators", default=[]) or [],
    )


class LayoutAnalyzer:
    """
    Reconstructs a LayoutDocument from decoded PDF pages.

    Pages are independent until their results are merged, so they may run on
    a thread pool. Font and color results are merged in page order and the
    section analysis only starts once every page is done, which keeps the
    output identical for any worker count.
    """

    def __init__(
        self,
        settings: AnalyzerSettings = None,
        keywords=SECTION_KEYWORDS,
        family_table=FONT_FAMILY_TABLE,
    ):
        self.settings = settings or AnalyzerSettings()
        if not isinstance(self.settings.max_workers, int) or self.settings.max_workers < 1:
            raise LayoutInputError(
                f"max_workers must be a positive integer, got {self.settings.max_workers!r}"
            )
        self.keywords = keywords
        self.family_table = family_table

    def analyze(self, pages: Sequence) -> LayoutDocument:
        """Analyzes all pages and returns the document model."""
        if isinstance(pages, (str, bytes, Mapping)) or not isinstance(pages, Sequence):
            raise LayoutInputError(f"pages must be a sequence, got {type(pages).__name__}")
        page_inputs = [coerce_page(raw, i) for i, raw in enumerate(pages)]
        log.info("Analyzing %d page(s)...", len(page_inputs))

        results = self._run_pages(page_inputs)

        fonts = FontRegistry(self.settings.font_bold_size, self.family_table)
        colors = ColorTally()
        for result in results:
            fonts.merge(result.fonts)
            colors.merge(result.colors)

        regions = assign_reading_order(
            [region for result in results for region in result.layout.textRegions]
        )
        log_layout.debug("Document has %d regions in reading order.", len(regions))

        max_length = self.settings.header_max_length
        structure = detect_section_structure(regions, self.keywords, max_length)
        entry_formats = detect_entry_formats(
            regions, self.keywords, max_length, self.settings.scan_lines
        )
        section_map = map_regions_to_sections(
            regions,
            self.keywords,
            max_length,
            self.settings.contact_region_limit,
            self.settings.contact_font_size,
        )
        return LayoutDocument(
            pages=[result.layout for result in results],
            fonts=fonts.fonts,
            sectionStructure=structure,
            entryFormats=entry_formats,
            colorPalette=colors.palette(),
            sectionMap=section_map,
        )

    def _run_pages(self, page_inputs: List[PageInput]) -> List[_PageResult]:
        workers = min(self.settings.max_workers, len(page_inputs))
        if workers <= 1:
            return [self.analyze_page(page) for page in page_inputs]
        log.debug("Processing pages on %d worker threads.", workers)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # map() yields in submission order, i.e. page order.
            return list(executor.map(self.analyze_page, page_inputs))

    def analyze_page(self, page: PageInput) -> _PageResult:
        """Runs the per-page pipeline. Region indices are assigned later."""
        s = self.settings
        tokens = normalize_tokens(page.text_tokens, page.page_number)
        operators = normalize_operators(page.operators, page.page_number)
        lines = group_lines(tokens, s.line_tolerance)
        regions = build_regions(
            lines,
            page.width,
            page.height,
            page.page_number,
            s.region_gap,
            s.space_gap,
            s.bold_size,
        )
        layout = PageLayout(
            pageNumber=page.page_number,
            width=float(page.width),
            height=float(page.height),
            textRegions=regions,
            graphics=extract_graphics(operators, page.page_number),
        )
        return _PageResult(
            layout=layout,
            fonts=FontRegistry(s.font_bold_size, self.family_table).observe_tokens(tokens),
            colors=ColorTally().observe_operators(operators),
        )
