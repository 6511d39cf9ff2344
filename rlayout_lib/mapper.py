# --- rlayout_lib/mapper.py ---
import logging
from typing import Dict, List, Sequence

from .constants import (
    CONTACT_FONT_SIZE,
    CONTACT_REGION_LIMIT,
    HEADER_MAX_LENGTH,
    MAPPER_BUCKETS,
    SECTION_KEYWORDS,
)
from .schema import MappedRegion, Region
from .sections import section_of_header

log_mapper = logging.getLogger("rlayout.mapper")


def map_regions_to_sections(
    regions: Sequence[Region],
    keywords=SECTION_KEYWORDS,
    max_length: int = HEADER_MAX_LENGTH,
    contact_limit: int = CONTACT_REGION_LIMIT,
    contact_size: float = CONTACT_FONT_SIZE,
) -> Dict[str, List[MappedRegion]]:
    """
    Assigns every region to the most recently opened section.

    A heading switches the current section and lands in that section's
    bucket flagged as a header. Regions seen before any heading go to
    `contactInfo` when they are large and near the top, `other` otherwise.
    """
    buckets: Dict[str, List[MappedRegion]] = {name: [] for name in MAPPER_BUCKETS}
    current = None
    for position, region in enumerate(regions):
        section = section_of_header(region.text, keywords, max_length)
        if section is not None:
            current = section
            buckets.setdefault(section, []).append(MappedRegion(region, isHeader=True, sectionType=section))
            continue
        if current is not None:
            bucket = current
        elif position < contact_limit and region.font.size > contact_size:
            bucket = "contactInfo"
        else:
            bucket = "other"
        buckets[bucket].append(MappedRegion(region, isHeader=False, sectionType=bucket))

    log_mapper.debug(
        "Section map: %s",
        ", ".join(f"{name}={len(items)}" for name, items in buckets.items() if items),
    )
    return buckets
