# --- rlayout_lib/sections.py ---
"""
rlayout_lib/sections.py: Section-header detection and entry-format inference.

Section order is found by a cascade of strategies (structural header scan,
then a full-text keyword search, then a fixed default). Entry formats for
education, experience and projects are inferred from the first few regions
of each section.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .constants import (
    COMPANY_PATTERN,
    DATE_ONLY_PATTERN,
    DATE_PATTERN,
    DEFAULT_BULLET_CHAR,
    DEFAULT_ENTRY_ORDERS,
    DEFAULT_SECTIONS_ORDER,
    DEGREE_PATTERN,
    ENTRY_SCAN_LINES,
    ENTRY_SECTIONS,
    GPA_PATTERN,
    HEADER_MAX_LENGTH,
    INSTITUTION_PATTERN,
    JOB_TITLE_PATTERN,
    LINE_TOLERANCE,
    LOCATION_PATTERN,
    SECTION_KEYWORDS,
    TECH_LIST_PATTERN,
    TITLE_CASE_HEADER,
    TITLE_SECONDARY_SEPARATOR,
)
from .schema import EntryFormat, Region, SectionStructure

log_sections = logging.getLogger("rlayout.sections")


@dataclass(frozen=True)
class HeaderMatch:
    """A region recognized as the heading of a canonical section."""

    position: int
    section: str
    text: str


# --- Header detection ---


def header_text(text: str) -> str:
    """Trims a candidate heading and drops a trailing colon."""
    stripped = (text or "").strip()
    if stripped.endswith(":"):
        stripped = stripped[:-1].rstrip()
    return stripped


def looks_like_header(text: str, max_length: int = HEADER_MAX_LENGTH) -> bool:
    """Short, and either fully uppercase or a run of capitalized words."""
    candidate = header_text(text)
    if not candidate or len(candidate) >= max_length:
        return False
    if candidate == candidate.upper() and any(c.isalpha() for c in candidate):
        return True
    return TITLE_CASE_HEADER.match(candidate) is not None


def match_section(text: str, keywords=SECTION_KEYWORDS) -> Optional[str]:
    """
    Returns the canonical section named by `text`.

    Among all synonyms contained in the text the longest one decides, so
    "Project Experience" maps to projects rather than experience. Table
    order breaks ties.
    """
    lowered = header_text(text).lower()
    best_section, best_length = None, 0
    for section, synonyms in keywords.items():
        for synonym in synonyms:
            if synonym in lowered and len(synonym) > best_length:
                best_section, best_length = section, len(synonym)
    return best_section


def section_of_header(
    text: str, keywords=SECTION_KEYWORDS, max_length: int = HEADER_MAX_LENGTH
) -> Optional[str]:
    """The section a region heads, or None when it is not a heading."""
    if not looks_like_header(text, max_length):
        return None
    return match_section(text, keywords)


def _last_on_page(regions: Sequence[Region]) -> List[bool]:
    return [
        i == len(regions) - 1 or regions[i + 1].pageNumber != region.pageNumber
        for i, region in enumerate(regions)
    ]


def find_headers(
    regions: Sequence[Region],
    keywords=SECTION_KEYWORDS,
    max_length: int = HEADER_MAX_LENGTH,
) -> List[HeaderMatch]:
    """
    Scans regions for section headings, keeping every occurrence.

    A heading is never the last region of its page.
    """
    matches = []
    for position, (region, is_last) in enumerate(zip(regions, _last_on_page(regions))):
        if is_last:
            continue
        section = section_of_header(region.text, keywords, max_length)
        if section is not None:
            matches.append(HeaderMatch(position, section, header_text(region.text)))
    log_sections.debug(
        "Header scan found: %s", [(m.position, m.section) for m in matches]
    )
    return matches


# --- Section order strategies ---


def structure_from_headers(
    regions: Sequence[Region],
    keywords=SECTION_KEYWORDS,
    max_length: int = HEADER_MAX_LENGTH,
) -> Optional[SectionStructure]:
    order, names = [], {}
    for match in find_headers(regions, keywords, max_length):
        if match.section not in names:
            order.append(match.section)
            names[match.section] = match.text
    if not order:
        return None
    return SectionStructure(sectionsOrder=order, sectionNames=names, detectionMethod="headers")


def structure_from_full_text(
    regions: Sequence[Region],
    keywords=SECTION_KEYWORDS,
    max_length: int = HEADER_MAX_LENGTH,
) -> Optional[SectionStructure]:
    full_text = "\n".join(r.text for r in regions).lower()
    found: List[Tuple[int, str]] = []
    for section, synonyms in keywords.items():
        for synonym in synonyms:
            index = full_text.find(synonym)
            if index != -1:
                found.append((index, section))
                break
    if not found:
        return None
    found.sort(key=lambda item: item[0])
    return SectionStructure(
        sectionsOrder=[section for _, section in found],
        sectionNames={},
        detectionMethod="fullText",
    )


def default_structure(regions, keywords=SECTION_KEYWORDS, max_length=HEADER_MAX_LENGTH):
    return SectionStructure(
        sectionsOrder=list(DEFAULT_SECTIONS_ORDER), sectionNames={}, detectionMethod="default"
    )


SECTION_STRATEGIES: Tuple[Callable[..., Optional[SectionStructure]], ...] = (
    structure_from_headers,
    structure_from_full_text,
    default_structure,
)


def detect_section_structure(
    regions: Sequence[Region],
    keywords=SECTION_KEYWORDS,
    max_length: int = HEADER_MAX_LENGTH,
    strategies=SECTION_STRATEGIES,
) -> SectionStructure:
    """Runs the strategies in order and returns the first result."""
    for strategy in strategies:
        structure = strategy(regions, keywords, max_length)
        if structure is not None:
            log_sections.info(
                "Section order (%s): %s",
                structure.detectionMethod,
                ", ".join(structure.sectionsOrder),
            )
            return structure
    return default_structure(regions)


# --- Entry formats ---


def section_body(
    regions: Sequence[Region],
    section: str,
    headers: Sequence[HeaderMatch],
    keywords=SECTION_KEYWORDS,
    max_length: int = HEADER_MAX_LENGTH,
) -> List[Region]:
    """
    Returns the regions between a section's heading and the next heading.

    Without a structural heading, the first region mentioning one of the
    section's synonyms is used as the start.
    """
    start = next((h.position for h in headers if h.section == section), None)
    if start is None:
        synonyms = keywords.get(section, ())
        start = next(
            (
                i
                for i, region in enumerate(regions)
                if any(s in region.text.lower() for s in synonyms)
            ),
            None,
        )
    if start is None:
        return []
    body = []
    for region in regions[start + 1 :]:
        if section_of_header(region.text, keywords, max_length) is not None:
            break
        body.append(region)
    return body


def _same_line(a: Region, b: Region, tolerance: float = LINE_TOLERANCE) -> bool:
    return a.pageNumber == b.pageNumber and abs(a.bbox.y - b.bbox.y) <= tolerance


def _dates_on_right(entries: Sequence[Region]) -> bool:
    for i, region in enumerate(entries):
        if not DATE_ONLY_PATTERN.match(region.text.strip()):
            continue
        if region.alignment == "right":
            return True
        previous = entries[i - 1] if i > 0 else None
        if previous and _same_line(previous, region) and previous.bbox.left < region.bbox.left:
            return True
    return False


def _bullet_details(entries: Sequence[Region]) -> Tuple[bool, str, float]:
    bullets = [r for r in entries if r.isBullet]
    if not bullets:
        return False, DEFAULT_BULLET_CHAR, 0.0
    first = bullets[0]
    text_lefts = [r.bbox.left for r in entries if not r.isBullet]
    indentation = first.bbox.left - min(text_lefts) if text_lefts else 0.0
    return True, first.bulletChar or DEFAULT_BULLET_CHAR, round(max(0.0, indentation), 2)


def _with_secondary(entries: Sequence[Region]) -> bool:
    return any(
        not r.isBullet and TITLE_SECONDARY_SEPARATOR.search(r.text.strip()) for r in entries
    )


def infer_education_format(entries: Sequence[Region]) -> Optional[EntryFormat]:
    degree_first = institution_first = False
    location_after_institution = gpa_separate_line = False
    for i, region in enumerate(entries):
        text = region.text.strip()
        has_degree = DEGREE_PATTERN.search(text) is not None
        if has_degree and (i == 0 or (i < 2 and not institution_first)):
            degree_first = True
        if INSTITUTION_PATTERN.search(text) and not has_degree:
            if i == 0:
                institution_first = True
            if i + 1 < len(entries) and LOCATION_PATTERN.match(entries[i + 1].text.strip()):
                location_after_institution = True
        if GPA_PATTERN.search(text):
            gpa_separate_line = True
    has_dates = any(DATE_PATTERN.search(r.text) for r in entries)

    if not (degree_first or institution_first or has_dates or gpa_separate_line):
        return None
    if institution_first and not degree_first:
        order = ["institution", "degree"]
    else:
        order = ["degree", "institution"]
    if location_after_institution:
        order.append("location")
    order.append("dates")
    if gpa_separate_line:
        order.append("gpa")
    has_bullets, bullet_char, indentation = _bullet_details(entries)
    return EntryFormat(
        fieldOrder=order,
        datesOnRight=_dates_on_right(entries),
        hasBullets=has_bullets,
        bulletChar=bullet_char,
        titleWithSecondaryOnSameLine=_with_secondary(entries),
        locationAfterInstitution=location_after_institution,
        gpaSeparateLine=gpa_separate_line,
        bulletIndentation=indentation,
    )


def infer_experience_format(entries: Sequence[Region]) -> Optional[EntryFormat]:
    title_pos = company_pos = None
    for i, region in enumerate(entries):
        if region.isBullet:
            continue
        text = region.text
        title = JOB_TITLE_PATTERN.search(text)
        company = COMPANY_PATTERN.search(text)
        # Position within the entry: region index, then offset in its text.
        if title and title_pos is None:
            title_pos = (i, title.start())
        if company and company_pos is None:
            company_pos = (i, company.start())
    has_location = any(LOCATION_PATTERN.match(r.text.strip()) for r in entries)
    has_dates = any(DATE_PATTERN.search(r.text) for r in entries)
    has_bullets, bullet_char, indentation = _bullet_details(entries)

    if title_pos is None and company_pos is None and not has_dates and not has_bullets:
        return None
    company_first = company_pos is not None and (title_pos is None or company_pos < title_pos)
    order = ["company", "title"] if company_first else ["title", "company"]
    if has_location:
        order.append("location")
    if has_dates:
        order.append("dates")
    if has_bullets:
        order.append("bullets")
    return EntryFormat(
        fieldOrder=order,
        datesOnRight=_dates_on_right(entries),
        hasBullets=has_bullets,
        bulletChar=bullet_char,
        titleWithSecondaryOnSameLine=_with_secondary(entries),
        bulletIndentation=indentation,
    )


def _has_technologies(entries: Sequence[Region]) -> bool:
    for region in entries:
        if region.isBullet:
            continue
        text = region.text.strip()
        parts = TITLE_SECONDARY_SEPARATOR.split(text, 1)
        if len(parts) == 2 and "," in parts[1]:
            return True
        if TECH_LIST_PATTERN.match(text) and not DATE_PATTERN.search(text):
            return True
    return False


def infer_projects_format(entries: Sequence[Region]) -> Optional[EntryFormat]:
    has_technologies = _has_technologies(entries)
    has_dates = any(DATE_PATTERN.search(r.text) for r in entries)
    has_bullets, bullet_char, indentation = _bullet_details(entries)
    same_line = _with_secondary(entries)

    if not (has_technologies or has_dates or has_bullets or same_line):
        return None
    order = ["title"]
    if has_technologies:
        order.append("technologies")
    if has_dates:
        order.append("dates")
    if has_bullets:
        order.append("bullets")
    return EntryFormat(
        fieldOrder=order,
        datesOnRight=_dates_on_right(entries),
        hasBullets=has_bullets,
        bulletChar=bullet_char,
        titleWithSecondaryOnSameLine=same_line,
        bulletIndentation=indentation,
    )


ENTRY_FORMAT_INFERERS = {
    "education": infer_education_format,
    "experience": infer_experience_format,
    "projects": infer_projects_format,
}


def default_entry_format(section: str) -> EntryFormat:
    return EntryFormat(fieldOrder=list(DEFAULT_ENTRY_ORDERS[section]))


def detect_entry_formats(
    regions: Sequence[Region],
    keywords=SECTION_KEYWORDS,
    max_length: int = HEADER_MAX_LENGTH,
    scan_lines=ENTRY_SCAN_LINES,
) -> Dict[str, EntryFormat]:
    """Infers the entry format of each entry-bearing section."""
    headers = find_headers(regions, keywords, max_length)
    formats = {}
    for section in ENTRY_SECTIONS:
        body = section_body(regions, section, headers, keywords, max_length)
        entries = [r for r in body if r.text.strip()][: scan_lines[section]]
        entry_format = ENTRY_FORMAT_INFERERS[section](entries) if entries else None
        if entry_format is None:
            log_sections.debug("No %s entry pattern found, using default order.", section)
            entry_format = default_entry_format(section)
        else:
            log_sections.debug("%s entry format: %s", section, entry_format.fieldOrder)
        formats[section] = entry_format
    return formats
