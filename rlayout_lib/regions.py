# --- rlayout_lib/regions.py ---
"""
rlayout_lib/regions.py: Builds bounding-boxed text regions from lines.

A line is split into regions wherever the horizontal gap between two tokens
reaches the region threshold. Region indices and vertical spacing are only
assigned once every page has been built, so they follow document order.
"""
import logging
from typing import List, Sequence

from .colors import to_hex
from .constants import (
    BOLD_MARKERS,
    BULLET_PATTERN,
    CENTER_TOLERANCE,
    DEFAULT_TEXT_COLOR,
    ITALIC_MARKERS,
    LEFT_MARGIN_RATIO,
    REGION_BOLD_SIZE,
    REGION_GAP_THRESHOLD,
    RIGHT_MARGIN_RATIO,
    WORD_SPACE_GAP,
)
from .models import Line, Token
from .schema import BoundingBox, Region, RegionFont

log_regions = logging.getLogger("rlayout.regions")


def classify_alignment(
    left: float,
    page_width: float,
    left_ratio: float = LEFT_MARGIN_RATIO,
    right_ratio: float = RIGHT_MARGIN_RATIO,
    center_tolerance: float = CENTER_TOLERANCE,
) -> str:
    """Classifies a region's horizontal placement from its left edge."""
    if left < page_width * left_ratio:
        return "left"
    if abs(left - page_width / 2) < center_tolerance:
        return "center"
    if left > page_width * right_ratio:
        return "right"
    return "left"


def has_marker(font_name: str, markers: Sequence[str]) -> bool:
    lowered = (font_name or "").lower()
    return any(marker in lowered for marker in markers)


def split_line(line: Line, gap_threshold: float = REGION_GAP_THRESHOLD) -> List[List[Token]]:
    """Splits a line's tokens into groups on horizontal gaps."""
    groups: List[List[Token]] = []
    for token in line.tokens:
        if groups and token.origin_x - groups[-1][-1].right < gap_threshold:
            groups[-1].append(token)
        else:
            groups.append([token])
    return groups


def join_text(tokens: Sequence[Token], space_gap: float = WORD_SPACE_GAP) -> str:
    """Concatenates token text, inserting one space across visible gaps."""
    parts = []
    for i, token in enumerate(tokens):
        if i > 0 and token.origin_x > tokens[i - 1].right + space_gap:
            parts.append(" ")
        parts.append(token.text)
    return "".join(parts)


def make_region(
    tokens: Sequence[Token],
    page_width: float,
    page_height: float,
    page_number: int = 1,
    space_gap: float = WORD_SPACE_GAP,
    bold_size: float = REGION_BOLD_SIZE,
) -> Region:
    """
    Creates a Region from a non-empty group of tokens.

    The first token supplies position, font and color; the bbox extends to
    the rightmost token edge.
    """
    first = tokens[0]
    left = first.origin_x
    right = max(left, max(t.right for t in tokens))
    size = first.height
    text = join_text(tokens, space_gap)

    bbox = BoundingBox(
        x=left,
        y=first.origin_y,
        width=right - left,
        height=size,
        left=left,
        right=right,
        top=first.origin_y + size,
        bottom=first.origin_y,
        screenTop=page_height - first.origin_y - size,
        screenBottom=page_height - first.origin_y,
    )

    bullet = BULLET_PATTERN.match(text.strip())
    is_bold = has_marker(first.font_ref, BOLD_MARKERS) or size > bold_size
    is_italic = has_marker(first.font_ref, ITALIC_MARKERS)

    return Region(
        index=0,
        text=text,
        bbox=bbox,
        font=RegionFont(
            name=first.font_ref,
            size=size,
            weight="bold" if is_bold else "normal",
            style="italic" if is_italic else "normal",
        ),
        color=to_hex(first.color_rgb) if first.color_rgb else DEFAULT_TEXT_COLOR,
        isBullet=bullet is not None,
        bulletChar=bullet.group(1) if bullet else None,
        isBold=is_bold,
        isItalic=is_italic,
        alignment=classify_alignment(left, page_width),
        pageNumber=page_number,
    )


def build_regions(
    lines: Sequence[Line],
    page_width: float,
    page_height: float,
    page_number: int = 1,
    gap_threshold: float = REGION_GAP_THRESHOLD,
    space_gap: float = WORD_SPACE_GAP,
    bold_size: float = REGION_BOLD_SIZE,
) -> List[Region]:
    """Builds one page's regions in reading order (indices not yet assigned)."""
    regions = [
        make_region(group, page_width, page_height, page_number, space_gap, bold_size)
        for line in lines
        for group in split_line(line, gap_threshold)
    ]
    log_regions.debug(
        "Page %d: %d lines -> %d regions.", page_number, len(lines), len(regions)
    )
    return regions


def assign_reading_order(regions: List[Region]) -> List[Region]:
    """Numbers regions 0..n-1 and sets the vertical delta to the previous one."""
    previous = None
    for index, region in enumerate(regions):
        region.index = index
        region.spacingFromPrevious = (
            abs(region.bbox.y - previous.bbox.y) if previous is not None else None
        )
        previous = region
    return regions
