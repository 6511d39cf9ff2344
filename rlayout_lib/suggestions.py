# --- rlayout_lib/suggestions.py ---
"""
rlayout_lib/suggestions.py: Derives a lightweight style preview from a
LayoutDocument: font families and sizes, a filled-in palette, the resume type
and a handful of layout hints.
"""
import logging
import math
from collections import Counter
from typing import Dict, List, Optional

from .constants import (
    CONTACT_REGION_LIMIT,
    DEFAULT_FONT_SIZES,
    DEFAULT_LAYOUT_HINTS,
    DEFAULT_PALETTE,
    UNKNOWN_FONT_FAMILY,
)
from .fonts import assign_font_roles
from .schema import (
    ColorPalette,
    FontSuggestions,
    LayoutDocument,
    LayoutHints,
    PageLayout,
    PathElement,
    RectangleElement,
    Region,
    SectionStructure,
    StyleSuggestions,
)
from .sections import section_of_header

log_api = logging.getLogger("rlayout.api")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _px(size: float) -> str:
    return f"{_round_half_up(size)}px"


def resume_type(structure: SectionStructure) -> str:
    """
    Functional when skills lead experience, hybrid when skills directly follow
    it, chronological otherwise. Only a detected order counts.
    """
    if structure.detectionMethod not in ("headers", "fullText"):
        return "chronological"
    order = structure.sectionsOrder
    if "skills" not in order or "experience" not in order:
        return "chronological"
    skills_pos, experience_pos = order.index("skills"), order.index("experience")
    if skills_pos < experience_pos:
        return "functional"
    if skills_pos == experience_pos + 1:
        return "hybrid"
    return "chronological"


def fill_palette(palette: ColorPalette) -> ColorPalette:
    return ColorPalette(
        primary=palette.primary or DEFAULT_PALETTE["primary"],
        text=palette.text or DEFAULT_PALETTE["text"],
        muted=palette.muted or DEFAULT_PALETTE["muted"],
    )


def measure_font_sizes(regions: List[Region]) -> Dict[str, str]:
    """Measures name, header and body sizes; unmeasured sizes keep defaults."""
    sizes = dict(DEFAULT_FONT_SIZES)
    if not regions:
        return sizes

    sizes["name"] = _px(max(r.font.size for r in regions[:CONTACT_REGION_LIMIT]))
    body = Counter(r.font.size for r in regions).most_common(1)[0][0]
    sizes["body"] = _px(body)
    sizes["small"] = _px(max(body - 2, 1))

    header = next((r for r in regions if section_of_header(r.text) is not None), None)
    if header is not None:
        sizes["sectionHeader"] = _px(header.font.size)
        sizes["jobTitle"] = _px((header.font.size + body) / 2)
    else:
        sizes["jobTitle"] = _px(body + 2)
    return sizes


def _header_alignment(page: PageLayout) -> Optional[str]:
    """Places the first line (usually the name) by the mean left edge of its regions."""
    if not page.textRegions:
        return None
    first_y = page.textRegions[0].bbox.y
    line = [r for r in page.textRegions if abs(r.bbox.y - first_y) < 5]
    mean_left = sum(r.bbox.left for r in line) / len(line)
    center = page.width / 2
    if abs(mean_left - center) < 50:
        return "center"
    if mean_left < center - 100:
        return "left"
    return "right"


def _section_spacing(page: PageLayout) -> Optional[int]:
    gaps = [
        abs(b.bbox.y - a.bbox.y)
        for a, b in zip(page.textRegions, page.textRegions[1:])
        if 10 < abs(b.bbox.y - a.bbox.y) < 100
    ]
    if not gaps:
        return None
    return _round_half_up(sum(gaps) / len(gaps) / 2)


def _text_alignment(page: PageLayout) -> Optional[str]:
    body = page.textRegions[3:10]
    if not body:
        return None
    mean_left = sum(r.bbox.left for r in body) / len(body)
    center = page.width / 2
    if abs(mean_left - center) < 100:
        return "justify"
    return "left" if mean_left < center else "right"


def _has_border(page: PageLayout) -> bool:
    half_width = page.width / 2
    for element in page.graphics:
        if isinstance(element, RectangleElement) and abs(element.width) > half_width:
            return True
        if isinstance(element, PathElement) and len(element.points) > 1:
            xs = [p.x for p in element.points]
            if max(xs) - min(xs) > half_width:
                return True
    return False


def layout_hints(document: LayoutDocument) -> LayoutHints:
    hints = LayoutHints(**DEFAULT_LAYOUT_HINTS)
    if not document.pages:
        return hints
    first_page = document.pages[0]
    header_alignment = _header_alignment(first_page)
    if header_alignment is not None:
        hints.headerAlignment = header_alignment
    spacing = _section_spacing(first_page)
    if spacing is not None:
        hints.sectionSpacing = spacing
    alignment = _text_alignment(first_page)
    if alignment is not None:
        hints.textAlignment = alignment
    hints.hasBorder = any(_has_border(page) for page in document.pages)
    return hints


def suggest_styles(document: LayoutDocument) -> StyleSuggestions:
    heading, body = assign_font_roles(document.fonts)
    suggestions = StyleSuggestions(
        colors=fill_palette(document.colorPalette),
        fonts=FontSuggestions(
            heading=heading.mappedFamily if heading else UNKNOWN_FONT_FAMILY,
            body=body.mappedFamily if body else UNKNOWN_FONT_FAMILY,
            sizes=measure_font_sizes(document.regions),
        ),
        type=resume_type(document.sectionStructure),
        structure=SectionStructure(
            sectionsOrder=list(document.sectionStructure.sectionsOrder),
            sectionNames=dict(document.sectionStructure.sectionNames),
            detectionMethod=document.sectionStructure.detectionMethod,
        ),
        layout=layout_hints(document),
    )
    log_api.debug("Suggestions: type=%s, fonts=%s", suggestions.type, suggestions.fonts)
    return suggestions
