# --- rlayout_lib/fonts.py ---
"""
rlayout_lib/fonts.py: Font-name cleaning, family mapping and role ranking.

PDF font references are noisy: subset tags ("ABCDEF+Calibri"), decoder
placeholders ("g_d0_f1") and style suffixes. This module reduces each one to
a single FontDescriptor with a CSS-style family stack.
"""
import logging
import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .constants import (
    BOLD_MARKERS,
    DESCRIPTOR_BOLD_SIZE,
    FALLBACK_FONT_FAMILY,
    FONT_FAMILY_TABLE,
    GENERIC_NAME,
    GENERIC_PREFIX,
    ITALIC_MARKERS,
    SUBSET_PREFIX,
    UNKNOWN_FONT_FAMILY,
)
from .models import Token
from .schema import FontDescriptor

log_fonts = logging.getLogger("rlayout.fonts")

_COMPACT_RE = re.compile(r"[\s\-_]+")
_FAMILY_PART_RE = re.compile(r"[-,]")
_LETTERS_ONLY_RE = re.compile(r"[A-Za-z ]+")
_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z])(?=[A-Z])")


def clean_font_name(raw_name: str) -> str:
    """Strips subset and generic prefixes until nothing more can be removed."""
    name = raw_name or ""
    while True:
        stripped = GENERIC_PREFIX.sub("", SUBSET_PREFIX.sub("", name.strip())).strip()
        if stripped == name:
            return name
        name = stripped


def is_unknown_font(cleaned_name: str) -> bool:
    return len(cleaned_name) < 3 or GENERIC_NAME.match(cleaned_name) is not None


def _custom_family(cleaned_name: str) -> Optional[str]:
    family_part = _FAMILY_PART_RE.split(cleaned_name, 1)[0].strip()
    if not family_part or not _LETTERS_ONLY_RE.fullmatch(family_part):
        return None
    words = _CAMEL_BOUNDARY_RE.sub(" ", family_part).split()
    return "'{}', sans-serif".format(" ".join(w[:1].upper() + w[1:].lower() for w in words))


def map_font_family(cleaned_name: str, family_table=FONT_FAMILY_TABLE) -> str:
    """Maps a cleaned font name to a web-safe font-family stack."""
    if is_unknown_font(cleaned_name):
        return UNKNOWN_FONT_FAMILY
    compact = _COMPACT_RE.sub("", cleaned_name).lower()
    for keyword, family in family_table:
        if keyword in compact:
            return family
    return _custom_family(cleaned_name) or FALLBACK_FONT_FAMILY


def _has_marker(name: str, markers: Sequence[str]) -> bool:
    lowered = name.lower()
    return any(m in lowered for m in markers)


def describe_font(
    raw_id: str,
    size: float,
    bold_size: float = DESCRIPTOR_BOLD_SIZE,
    family_table=FONT_FAMILY_TABLE,
) -> FontDescriptor:
    cleaned = clean_font_name(raw_id)
    is_bold = _has_marker(cleaned, BOLD_MARKERS) or size > bold_size
    return FontDescriptor(
        rawId=raw_id,
        cleanedName=cleaned,
        size=size,
        weight="bold" if is_bold else "normal",
        style="italic" if _has_marker(cleaned, ITALIC_MARKERS) else "normal",
        mappedFamily=map_font_family(cleaned, family_table),
    )


class FontRegistry:
    """
    Deduplicates fonts by raw identifier; the first size seen for an id wins.

    Each page fills its own registry so pages can be processed in parallel;
    the analyzer merges them in page order afterwards.
    """

    def __init__(self, bold_size: float = DESCRIPTOR_BOLD_SIZE, family_table=FONT_FAMILY_TABLE):
        self.bold_size = bold_size
        self.family_table = family_table
        self._fonts: Dict[str, FontDescriptor] = {}

    def observe(self, token: Token):
        if token.font_ref not in self._fonts:
            descriptor = describe_font(
                token.font_ref, token.height, self.bold_size, self.family_table
            )
            log_fonts.debug(
                "Font '%s' -> '%s' (%s, size %.1f)",
                descriptor.rawId,
                descriptor.cleanedName,
                descriptor.mappedFamily,
                descriptor.size,
            )
            self._fonts[token.font_ref] = descriptor

    def observe_tokens(self, tokens: Iterable[Token]) -> "FontRegistry":
        for token in tokens:
            self.observe(token)
        return self

    def merge(self, other: "FontRegistry"):
        for raw_id, descriptor in other._fonts.items():
            self._fonts.setdefault(raw_id, descriptor)

    @property
    def fonts(self) -> List[FontDescriptor]:
        return list(self._fonts.values())


def assign_font_roles(
    fonts: Sequence[FontDescriptor],
) -> Tuple[Optional[FontDescriptor], Optional[FontDescriptor]]:
    """
    Picks the heading and body fonts.

    Heading is the largest font and body the smallest. A font whose name marks
    it bold takes the heading role instead (the largest such font). With a
    single font both roles are the same descriptor.
    """
    if not fonts:
        return None, None
    heading = max(fonts, key=lambda f: f.size)
    body = min(fonts, key=lambda f: f.size)
    bold_named = [f for f in fonts if _has_marker(f.cleanedName, BOLD_MARKERS)]
    if bold_named:
        heading = max(bold_named, key=lambda f: f.size)
    return heading, body
