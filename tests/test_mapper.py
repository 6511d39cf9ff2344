from rlayout_lib.constants import MAPPER_BUCKETS
from rlayout_lib.mapper import map_regions_to_sections


def _summary(section_map):
    return {
        bucket: [(m.region.text, m.isHeader) for m in items]
        for bucket, items in section_map.items()
        if items
    }


def test_regions_follow_most_recent_header(make_region):
    regions = [
        make_region("Jane Doe", y=750, size=24),
        make_region("jane@example.com", y=730, size=10),
        make_region("EXPERIENCE", y=700, size=14),
        make_region("Engineer at Acme", y=686),
        make_region("Skills:", y=660, size=14),
        make_region("Python", y=646),
    ]
    section_map = map_regions_to_sections(regions)

    assert list(section_map) == list(MAPPER_BUCKETS)
    assert _summary(section_map) == {
        "contactInfo": [("Jane Doe", False)],
        "other": [("jane@example.com", False)],
        "experience": [("EXPERIENCE", True), ("Engineer at Acme", False)],
        "skills": [("Skills:", True), ("Python", False)],
    }
    assert section_map["experience"][1].sectionType == "experience"
    assert section_map["contactInfo"][0].sectionType == "contactInfo"


def test_contact_info_only_within_first_five_regions(make_region):
    regions = [make_region(f"Line {i}", y=700 - 20 * i, size=8) for i in range(5)]
    regions.append(make_region("Big but late", y=500, size=20))
    section_map = map_regions_to_sections(regions)

    assert section_map["contactInfo"] == []
    assert [m.region.text for m in section_map["other"]][-1] == "Big but late"


def test_a_lone_last_region_header_is_still_mapped_as_header(make_region):
    section_map = map_regions_to_sections([make_region("EXPERIENCE", y=750, size=14)])
    assert _summary(section_map) == {"experience": [("EXPERIENCE", True)]}


def test_empty_input_gives_empty_buckets():
    section_map = map_regions_to_sections([])
    assert all(items == [] for items in section_map.values())
