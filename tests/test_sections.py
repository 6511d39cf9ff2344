import pytest

from rlayout_lib.constants import DEFAULT_SECTIONS_ORDER
from rlayout_lib.sections import (
    detect_entry_formats,
    detect_section_structure,
    find_headers,
    looks_like_header,
    match_section,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("EXPERIENCE", True),
        ("Work Experience", True),
        ("Experience:", True),
        ("Skills & Tools", True),
        ("Licenses and Certifications", True),
        ("experience", False),
        ("I built things at ACME Corp", False),
        ("2020", False),
        ("", False),
        ("A" * 50, False),
    ],
)
def test_looks_like_header(text, expected):
    assert looks_like_header(text) is expected


@pytest.mark.parametrize(
    "text, section",
    [
        ("PROFESSIONAL SUMMARY", "summary"),
        ("Project Experience", "projects"),
        ("Work History", "experience"),
        ("Technical Skills:", "skills"),
        ("Honors", "awards"),
        ("Hobbies", None),
    ],
)
def test_match_section(text, section):
    assert match_section(text) == section


@pytest.fixture
def resume(make_region):
    texts = [
        "Jane Doe",
        "SUMMARY",
        "Engineer who ships reliable software.",
        "EXPERIENCE",
        "Software Engineer | Acme Inc",
        "SKILLS",
        "Python, Go, SQL",
        "EXPERIENCE",
        "Old job",
    ]
    return [make_region(t, y=700 - 14 * i) for i, t in enumerate(texts)]


def test_structure_from_headers(resume):
    structure = detect_section_structure(resume)

    assert structure.detectionMethod == "headers"
    assert structure.sectionsOrder == ["summary", "experience", "skills"]
    assert structure.sectionNames == {
        "summary": "SUMMARY",
        "experience": "EXPERIENCE",
        "skills": "SKILLS",
    }


def test_last_region_on_a_page_is_not_a_header(make_region):
    regions = [
        make_region("Intro text", y=700, page=1),
        make_region("EDUCATION", y=60, page=1),
        make_region("More text", y=700, page=2),
    ]
    assert find_headers(regions) == []

    structure = detect_section_structure(regions)
    assert structure.detectionMethod == "fullText"
    assert structure.sectionsOrder == ["education"]
    assert structure.sectionNames == {}


def test_full_text_fallback_orders_by_first_mention(make_region):
    regions = [
        make_region("my objective is to grow", y=700),
        make_region("ten years of experience building skills", y=686),
        make_region("end", y=672),
    ]
    structure = detect_section_structure(regions)
    assert structure.sectionsOrder == ["summary", "experience", "skills"]


def test_default_order_when_nothing_matches(make_region):
    regions = [make_region("Jane Doe", y=700), make_region("hello world", y=680)]
    structure = detect_section_structure(regions)

    assert structure.detectionMethod == "default"
    assert structure.sectionsOrder == list(DEFAULT_SECTIONS_ORDER)


def test_default_order_for_empty_document():
    assert detect_section_structure([]).sectionsOrder == list(DEFAULT_SECTIONS_ORDER)


def test_education_degree_first(make_region):
    regions = [
        make_region("EDUCATION", y=720),
        make_region("Bachelor of Science in Computer Science", y=700),
        make_region("May 2020", y=700, x=450, width=60),
        make_region("Stanford University", y=686),
        make_region("Stanford, CA", y=672),
        make_region("GPA: 3.9", y=658),
        make_region("SKILLS", y=630),
        make_region("Python", y=616),
    ]
    education = detect_entry_formats(regions)["education"]

    assert education.fieldOrder == ["degree", "institution", "location", "dates", "gpa"]
    assert education.datesOnRight is True
    assert education.locationAfterInstitution is True
    assert education.gpaSeparateLine is True
    assert education.hasBullets is False


def test_education_institution_first(make_region):
    regions = [
        make_region("Education", y=720),
        make_region("Stanford University", y=700),
        make_region("Master of Science", y=686),
        make_region("2018 - 2020", y=672),
        make_region("EXPERIENCE", y=640),
        make_region("Analyst", y=626),
    ]
    education = detect_entry_formats(regions)["education"]

    assert education.fieldOrder == ["institution", "degree", "dates"]
    assert education.datesOnRight is False


def test_experience_format(make_region):
    regions = [
        make_region("EXPERIENCE", y=720),
        make_region("Software Engineer | Acme Inc", y=700),
        make_region("Jan 2020 - Present", y=700, x=450, width=100),
        make_region("• Built a pipeline", y=686, x=60),
        make_region("• Led a team", y=672, x=60),
        make_region("EDUCATION", y=640),
        make_region("BS, State University", y=626),
    ]
    experience = detect_entry_formats(regions)["experience"]

    assert experience.fieldOrder == ["title", "company", "dates", "bullets"]
    assert experience.datesOnRight is True
    assert experience.hasBullets is True
    assert experience.bulletChar == "•"
    assert experience.bulletIndentation == 10.0
    assert experience.titleWithSecondaryOnSameLine is True


def test_experience_company_first(make_region):
    regions = [
        make_region("Work Experience", y=720),
        make_region("Globex Corporation", y=700),
        make_region("Data Analyst", y=686),
        make_region("Springfield, IL", y=672),
        make_region("SKILLS", y=640),
        make_region("SQL", y=626),
    ]
    experience = detect_entry_formats(regions)["experience"]
    assert experience.fieldOrder == ["company", "title", "location"]


def test_projects_format(make_region):
    regions = [
        make_region("PROJECTS", y=720),
        make_region("Resume Parser | Python, pdfminer", y=700),
        make_region("- Parsed thousands of resumes", y=686, x=70),
        make_region("end", y=672),
    ]
    projects = detect_entry_formats(regions)["projects"]

    assert projects.fieldOrder == ["title", "technologies", "bullets"]
    assert projects.titleWithSecondaryOnSameLine is True
    assert projects.bulletChar == "-"
    assert projects.bulletIndentation == 20.0


def test_missing_sections_get_default_formats(make_region):
    formats = detect_entry_formats([make_region("Jane Doe", y=700)])

    assert formats["education"].fieldOrder == ["degree", "institution", "location", "dates", "gpa"]
    assert formats["experience"].fieldOrder == ["title", "company", "location", "dates", "bullets"]
    assert formats["projects"].fieldOrder == ["title", "technologies", "dates", "bullets"]
    assert formats["projects"].bulletChar == "•"


def test_scan_window_limits_entry_lines(make_region):
    regions = [make_region("EDUCATION", y=720)]
    regions += [make_region(f"Line {i}", y=700 - i) for i in range(12)]
    regions += [make_region("GPA: 4.0", y=600), make_region("end", y=580)]

    assert detect_entry_formats(regions)["education"].gpaSeparateLine is False
    widened = detect_entry_formats(
        regions, scan_lines={"education": 20, "experience": 20, "projects": 20}
    )
    assert widened["education"].gpaSeparateLine is True
