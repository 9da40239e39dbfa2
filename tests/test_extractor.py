import json

import pytest
from conftest import frag, header_fragments, sample_page

from ttparse_lib.constants import (
    REASON_EMPTY,
    REASON_JSON,
    REASON_NO_ENTRIES,
    REASON_NO_HEADER,
    TIME_SLOTS,
)
from ttparse_lib.extractor import TimetableExtractor, decode_page, encode_page
from ttparse_lib.models import TextFragment

EXPECTED_GEOMETRY = [
    ("Monday", TIME_SLOTS[0], "2702", "DSP LAB"),
    ("Monday", TIME_SLOTS[1], "2702", "DSP LAB"),
    ("Monday", TIME_SLOTS[2], "2702", "CN"),
    ("Monday", TIME_SLOTS[3], "803", "OS"),
    ("Monday", TIME_SLOTS[4], "2702", "AI (MOOC)"),
    ("Monday", TIME_SLOTS[5], "605", "ML"),
    ("Tuesday", TIME_SLOTS[0], "2702", "QAVA"),
    ("Tuesday", TIME_SLOTS[1], "2702", "QAVA"),
    ("Tuesday", TIME_SLOTS[2], "2702", "CP"),
    ("Tuesday", TIME_SLOTS[3], "2702", "DBMS"),
]


@pytest.fixture
def extractor():
    return TimetableExtractor()


def _rows(section):
    return [(e.day, e.time_slot, e.room_number, e.subject) for e in section.entries]


def test_decode_page_formats():
    array = '[{"x": 10.4, "y": 20.6, "w": 5, "t": " DSP "}]'
    assert decode_page(array) == [TextFragment(10, 21, 5, "DSP")]
    lines = '{"x": 1, "y": 2, "width": 3, "text": "CN"}\n\n{"x": 4, "y": 5, "text": ""}'
    assert decode_page(lines) == [TextFragment(1, 2, 3, "CN")]
    assert decode_page("  ") == []


def test_decode_page_rejects_bad_json():
    with pytest.raises(ValueError):
        decode_page("{not json")
    with pytest.raises(ValueError):
        decode_page('[{"y": 1, "text": "no x"}]')


def test_encode_page_is_line_delimited():
    dump = encode_page([frag(1, 2, "A", 3), frag(4, 5, "B", 6)])
    assert [json.loads(line)["text"] for line in dump.splitlines()] == ["A", "B"]


def test_geometry_page(extractor, page_dump):
    result = extractor.parse_pages([page_dump])
    assert result.skipped == []
    assert len(result.sections) == 1
    section = result.sections[0]
    assert section.key == ("COMPUTER SCIENCE", "IV Semester", "A1")
    assert section.default_room == "2702"
    assert section.room_set == ["2702", "605", "803"]
    assert _rows(section) == EXPECTED_GEOMETRY
    assert (section.page_start, section.page_end) == (1, 1)


def test_entries_only_use_canonical_slots(extractor, page_dump):
    result = extractor.parse_pages([page_dump])
    assert {e.time_slot for e in result.sections[0].entries} <= set(TIME_SLOTS)


def test_parsing_is_idempotent(extractor, page_dump):
    first = extractor.parse_pages([page_dump]).to_dict()
    second = TimetableExtractor().parse_pages([page_dump]).to_dict()
    assert first == second


def test_bad_pages_are_reported_and_parsing_continues(extractor, page_dump):
    no_header = encode_page([frag(120, 600, "DSP"), frag(50, 600, "MON")])
    header_only = encode_page(header_fragments())
    result = extractor.parse_pages(["{broken", "", no_header, header_only, page_dump])
    assert [(s.page, s.reason) for s in result.skipped] == [
        (1, REASON_JSON),
        (2, REASON_EMPTY),
        (3, REASON_NO_HEADER),
        (4, REASON_NO_ENTRIES),
    ]
    assert result.skipped[2].sample == "DSP | MON"
    assert result.skipped[3].section == "A1"
    assert len(result.sections) == 1
    assert result.sections[0].page_start == 5


def test_continuation_page_is_merged(extractor, page_dump):
    result = extractor.parse_pages([page_dump, page_dump])
    assert len(result.sections) == 1
    section = result.sections[0]
    assert len(section.entries) == 2 * len(EXPECTED_GEOMETRY)
    assert (section.page_start, section.page_end) == (1, 2)


def test_saturday_row_can_be_excluded():
    page = sample_page() + [frag(50, 520, "SAT"), frag(115, 520, "DBMS", 20)]
    dump = encode_page(page)
    with_sat = TimetableExtractor().parse_pages([dump]).sections[0]
    without_sat = TimetableExtractor(include_saturday=False).parse_pages([dump]).sections[0]
    assert ("Saturday", TIME_SLOTS[0], "2702", "DBMS") in _rows(with_sat)
    assert all(e.day != "Saturday" for e in without_sat.entries)


def test_text_mode(extractor, sample_text):
    result = extractor.parse_text(sample_text)
    assert len(result.sections) == 1
    section = result.sections[0]
    assert section.key == ("ELECTRONICS", "VI Semester", "2")
    assert section.default_room == "322"
    assert section.room_set == ["322", "605", "4201"]
    assert _rows(section) == [
        ("Monday", TIME_SLOTS[0], "322", "DSP"),
        ("Monday", TIME_SLOTS[1], "322", "CN"),
        ("Monday", TIME_SLOTS[2], "605", "OS"),
        ("Monday", TIME_SLOTS[3], "322", "ML LAB"),
        ("Tuesday", TIME_SLOTS[0], "4201", "VLSI"),
        ("Tuesday", TIME_SLOTS[1], "322", "EMI"),
        ("Tuesday", TIME_SLOTS[2], "322", "CS"),
    ]


def test_text_mode_whole_text_header(extractor):
    text = (
        "DEPARTMENT OF CIVIL ENGINEERING\n"
        "IV SEMESTER\n"
        "[SECTION-B2]\n"
        "Room No: 128\n"
        "WED SURVEY  MECHANICS\n"
    )
    result = extractor.parse_text(text)
    assert result.skipped == []
    section = result.sections[0]
    assert section.key == ("CIVIL ENGINEERING", "IV Semester", "B2")
    assert _rows(section) == [
        ("Wednesday", TIME_SLOTS[0], "128", "SURVEY"),
        ("Wednesday", TIME_SLOTS[1], "128", "MECHANICS"),
    ]


def test_text_mode_without_any_header(extractor):
    result = extractor.parse_text("MON DSP  CN\n")
    assert result.sections == []
    assert [s.reason for s in result.skipped] == [REASON_NO_HEADER]


def test_text_mode_pages_and_sections(extractor):
    text = (
        "IV SEMESTER [SECTION-A1]\nRoom No: 2702\nMON DSP  CN\n"
        "\f"
        "IV SEMESTER [SECTION-A2]\nRoom No: 2703\nFRIDAY OS\n"
    )
    result = extractor.parse_text(text)
    assert [(s.section, s.default_room, s.page_start) for s in result.sections] == [
        ("A1", "2702", 1),
        ("A2", "2703", 2),
    ]
    assert result.sections[1].entries[0].day == "Friday"


def test_text_mode_keeps_subjects_containing_keywords(extractor):
    text = (
        "DEPARTMENT OF MATHEMATICS\n"
        "IV SEMESTER [SECTION-A1]\n"
        "Room No: 322\n"
        "MON DSP  CN\n"
        "NUMERICAL METHODS  OS\n"
        "HOD\n"
    )
    section = extractor.parse_text(text).sections[0]
    assert [e.subject for e in section.entries] == ["DSP", "CN", "NUMERICAL METHODS", "OS"]


def test_text_mode_saturday_row_can_be_excluded():
    text = "IV SEMESTER [SECTION-A1]\nRoom No: 322\nMON DSP  CN\nSAT OS  ML\nELECTIVE\n"
    with_sat = TimetableExtractor().parse_text(text).sections[0]
    without_sat = TimetableExtractor(include_saturday=False).parse_text(text).sections[0]
    assert {e.day for e in with_sat.entries} == {"Monday", "Saturday"}
    assert [e.subject for e in with_sat.entries if e.day == "Saturday"] == ["OS", "ML", "ELECTIVE"]
    assert [(e.day, e.subject) for e in without_sat.entries] == [
        ("Monday", "DSP"),
        ("Monday", "CN"),
    ]
