from ttparse_lib.assembler import SectionAssembler
from ttparse_lib.constants import REASON_NO_ENTRIES, REASON_NO_HEADER, TIME_SLOTS
from ttparse_lib.models import ScheduleEntry


def _entry(subject, room="101", slot=0):
    return ScheduleEntry("Monday", TIME_SLOTS[slot], room, subject)


def test_section_without_entries_is_skipped():
    asm = SectionAssembler()
    asm.begin_section("IV Semester", "A1", page=3)
    result = asm.finish()
    assert result.sections == []
    assert len(result.skipped) == 1
    skipped = result.skipped[0]
    assert (skipped.page, skipped.reason, skipped.section) == (3, REASON_NO_ENTRIES, "A1")


def test_entries_without_header_are_skipped():
    asm = SectionAssembler()
    asm.add_entries([_entry("DSP")], page=2)
    result = asm.finish()
    assert result.sections == []
    assert [(s.page, s.reason) for s in result.skipped] == [(2, REASON_NO_HEADER)]


def test_new_header_flushes_previous_section():
    asm = SectionAssembler()
    asm.set_department("COMPUTER SCIENCE", 1)
    asm.begin_section("IV Semester", "A1", 1)
    asm.add_entries([_entry("DSP")], 1)
    asm.begin_section("IV Semester", "A2", 2)
    asm.add_entries([_entry("CN", "102")], 2)
    result = asm.finish()
    assert [s.section for s in result.sections] == ["A1", "A2"]
    assert all(s.department == "COMPUTER SCIENCE" for s in result.sections)


def test_default_room_set_after_header_applies_to_open_section():
    asm = SectionAssembler()
    asm.begin_section("II Semester", "B", 1)
    asm.set_default_room("322")
    asm.add_entries([_entry("EMI", "322")], 1)
    section = asm.finish().sections[0]
    assert section.default_room == "322"
    assert section.room_set == ["322"]


def test_continuation_page_extends_section():
    asm = SectionAssembler()
    asm.set_department("CIVIL", 1)
    asm.begin_section("IV Semester", "1", 1)
    asm.add_entries([_entry("SURVEY", "128")], 1)
    asm.begin_section("IV Semester", "1", 2)
    asm.add_rooms(["4201"], 2)
    asm.add_entries([_entry("MECHANICS", "4201", 1)], 2)
    result = asm.finish()
    assert len(result.sections) == 1
    section = result.sections[0]
    assert [e.subject for e in section.entries] == ["SURVEY", "MECHANICS"]
    assert (section.page_start, section.page_end) == (1, 2)
    assert section.room_set == ["128", "4201"]


def test_department_change_separates_same_section_names():
    asm = SectionAssembler()
    for dept in ("CIVIL", "MECHANICAL"):
        asm.set_department(dept, 1)
        asm.begin_section("IV Semester", "1", 1)
        asm.add_entries([_entry("MATHS")], 1)
    assert len(asm.finish().sections) == 2


def test_room_line_replaces_carried_room():
    asm = SectionAssembler()
    asm.set_default_room("2702")
    asm.begin_section("IV Semester", "A1", 1)
    asm.add_entries([_entry("DSP", "2702")], 1)
    asm.begin_section("IV Semester", "A2", 2)
    asm.set_default_room("2703")
    asm.add_entries([_entry("OS", "2703")], 2)
    first, second = asm.finish().sections
    assert (first.default_room, first.room_set) == ("2702", ["2702"])
    assert (second.default_room, second.room_set) == ("2703", ["2703"])
