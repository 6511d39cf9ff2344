"""
rlayout_lib/constants.py: Static classification tables and default values.

Everything here is immutable (tuples, frozen mappings). Classifier functions
take these tables as default arguments so tests can inject their own.
"""
import re
from types import MappingProxyType

# --- GEOMETRY ---
LINE_TOLERANCE = 2.0
REGION_GAP_THRESHOLD = 50.0
WORD_SPACE_GAP = 2.0
CENTER_TOLERANCE = 20.0
LEFT_MARGIN_RATIO = 0.1
RIGHT_MARGIN_RATIO = 0.9

# --- TEXT DEFAULTS ---
DEFAULT_FONT_NAME = "Helvetica"
DEFAULT_FONT_SIZE = 12.0
DEFAULT_TEXT_COLOR = "#000000"
REGION_BOLD_SIZE = 14.0
DESCRIPTOR_BOLD_SIZE = 18.0

BULLET_PATTERN = re.compile(r"^([●•\-*])\s")
BOLD_MARKERS = ("bold", "black", "heavy")
ITALIC_MARKERS = ("italic", "oblique", "slanted")

# --- FONT FAMILIES ---
SUBSET_PREFIX = re.compile(r"^[A-Za-z]{1,6}\+")
GENERIC_PREFIX = re.compile(r"^[A-Za-z]_d\d+_f\d+_")
GENERIC_NAME = re.compile(r"^[A-Za-z]_d\d+_f\d+$")

UNKNOWN_FONT_FAMILY = "Inter, sans-serif"
FALLBACK_FONT_FAMILY = "Arial, Helvetica, sans-serif"

# Order matters: more specific keywords come before the ones they contain.
FONT_FAMILY_TABLE = (
    ("helveticaneue", "'Helvetica Neue', Helvetica, Arial, sans-serif"),
    ("helvetica", "Helvetica, Arial, sans-serif"),
    ("arial", "Arial, Helvetica, sans-serif"),
    ("timesnewroman", "'Times New Roman', Times, serif"),
    ("times", "'Times New Roman', Times, serif"),
    ("courier", "'Courier New', Courier, monospace"),
    ("georgia", "Georgia, serif"),
    ("garamond", "Garamond, 'EB Garamond', serif"),
    ("cambria", "Cambria, Georgia, serif"),
    ("calibri", "Calibri, Carlito, sans-serif"),
    ("verdana", "Verdana, Geneva, sans-serif"),
    ("tahoma", "Tahoma, Geneva, sans-serif"),
    ("trebuchet", "'Trebuchet MS', Helvetica, sans-serif"),
    ("palatino", "'Palatino Linotype', Palatino, serif"),
    ("bookantiqua", "'Book Antiqua', Palatino, serif"),
    ("opensans", "'Open Sans', Arial, sans-serif"),
    ("sourcesans", "'Source Sans Pro', Arial, sans-serif"),
    ("roboto", "Roboto, Arial, sans-serif"),
    ("lato", "Lato, Arial, sans-serif"),
    ("montserrat", "Montserrat, Arial, sans-serif"),
    ("raleway", "Raleway, Arial, sans-serif"),
    ("segoe", "'Segoe UI', Tahoma, sans-serif"),
    ("lmroman", "'Latin Modern Roman', 'Computer Modern', serif"),
    ("inter", "Inter, sans-serif"),
)

# --- COLORS ---
DEFAULT_STROKE_COLOR = "#000000"
DEFAULT_FILL_COLOR = "#000000"
DEFAULT_LINE_WIDTH = 1.0

DEFAULT_PALETTE = MappingProxyType(
    {"primary": "#4F5348", "text": "#222222", "muted": "#666666"}
)

# --- SECTIONS ---
SECTION_KEYWORDS = MappingProxyType(
    {
        "summary": (
            "summary",
            "professional summary",
            "profile",
            "objective",
            "executive summary",
        ),
        "experience": (
            "experience",
            "work experience",
            "professional experience",
            "employment",
            "employment history",
            "work history",
        ),
        "skills": (
            "skills",
            "technical skills",
            "core competencies",
            "competencies",
            "key skills",
            "proficiencies",
        ),
        "education": (
            "education",
            "academic background",
            "academic history",
            "educational background",
        ),
        "projects": (
            "projects",
            "personal projects",
            "project experience",
            "selected projects",
        ),
        "awards": ("awards", "honors", "achievements", "recognition"),
        "certifications": (
            "certifications",
            "certificates",
            "licenses",
            "professional certifications",
        ),
    }
)

DEFAULT_SECTIONS_ORDER = ("summary", "experience", "skills", "education", "projects")
HEADER_MAX_LENGTH = 50
TITLE_CASE_HEADER = re.compile(r"^[A-Z][a-z]+(?:\s+(?:[A-Z][a-z]+|&|and|of))*$")

MAPPER_BUCKETS = (
    "contactInfo",
    "summary",
    "experience",
    "skills",
    "education",
    "projects",
    "awards",
    "certifications",
    "other",
)
CONTACT_REGION_LIMIT = 5
CONTACT_FONT_SIZE = 16.0

# --- ENTRY FORMATS ---
ENTRY_SECTIONS = ("education", "experience", "projects")
ENTRY_SCAN_LINES = MappingProxyType({"education": 10, "experience": 20, "projects": 20})
DEFAULT_ENTRY_ORDERS = MappingProxyType(
    {
        "education": ("degree", "institution", "location", "dates", "gpa"),
        "experience": ("title", "company", "location", "dates", "bullets"),
        "projects": ("title", "technologies", "dates", "bullets"),
    }
)
DEFAULT_BULLET_CHAR = "•"

_MONTH = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*\.?"
_DATE = rf"(?:{_MONTH}\s*,?\s*\d{{4}}|\d{{1,2}}/\d{{4}}|(?:19|20)\d{{2}})"
DATE_PATTERN = re.compile(rf"\b{_DATE}\b", re.I)
DATE_ONLY_PATTERN = re.compile(
    rf"^{_DATE}(?:\s*(?:-|–|—|to)\s*(?:{_DATE}|present|current|now))?$", re.I
)
LOCATION_PATTERN = re.compile(
    r"^[A-Z][a-z]+(?:\s[A-Z][a-z]+)*,\s*(?:[A-Z]{2}|[A-Z][a-z]+(?:\s[A-Z][a-z]+)*)$"
)
DEGREE_PATTERN = re.compile(
    r"bachelor|master|ph\.?d|doctorate|associate|\bb\.?s\.?c?\b|\bm\.?s\.?c?\b"
    r"|\bb\.a\.|\bm\.a\.|\bmba\b|diploma",
    re.I,
)
INSTITUTION_PATTERN = re.compile(r"university|college|institute|school|academy", re.I)
GPA_PATTERN = re.compile(r"gpa|grade point average", re.I)
JOB_TITLE_PATTERN = re.compile(
    r"engineer|developer|manager|analyst|intern|director|lead|designer|consultant"
    r"|specialist|scientist|architect|coordinator|administrator|assistant",
    re.I,
)
COMPANY_PATTERN = re.compile(
    r"\b(?:inc|llc|ltd|corp|corporation|company|co\.|technologies|labs|group|solutions"
    r"|systems|partners)\b",
    re.I,
)
TITLE_SECONDARY_SEPARATOR = re.compile(r"\s+(?:\||｜|at|@|—|–)\s+")
TECH_LIST_PATTERN = re.compile(
    r"^(?:(?:technologies|tech stack|tools|stack)\s*:\s*)?[\w+#./ -]+(?:,\s*[\w+#./ -]+){1,}$",
    re.I,
)

# --- SUGGESTION DEFAULTS ---
DEFAULT_FONT_SIZES = MappingProxyType(
    {
        "name": "36px",
        "sectionHeader": "18px",
        "jobTitle": "16px",
        "body": "14px",
        "small": "12px",
    }
)
DEFAULT_LAYOUT_HINTS = MappingProxyType(
    {
        "headerAlignment": "center",
        "sectionSpacing": 24,
        "textAlignment": "left",
        "hasBorder": False,
        "headerStyle": "underline",
        "lineHeight": 1.5,
        "paragraphSpacing": 8,
    }
)
