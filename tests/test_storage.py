import sqlite3

import pytest

from ttparse_lib.constants import KNOWN_ROOMS, TIME_SLOTS
from ttparse_lib.models import ScheduleEntry, Section
from ttstore_lib.services.storage_service import StorageService


def _section(name, entries, default_room="101"):
    section = Section("COMPUTER SCIENCE", "IV Semester", name, default_room)
    section.add_room(default_room)
    for day, slot, room, subject in entries:
        section.add_entry(ScheduleEntry(day, TIME_SLOTS[slot], room, subject))
    return section


@pytest.fixture
def storage(tmp_path):
    service = StorageService(str(tmp_path / "timetables.db"))
    service.init_db(seed_rooms=False)
    return service


@pytest.fixture
def sections():
    return [
        _section(
            "A1",
            [
                ("Monday", 2, "101", "CN"),
                ("Monday", 3, "101", "OS"),
                ("Monday", 0, "102", "DSP LAB"),
            ],
        ),
        _section("A2", [("Tuesday", 2, "Chemistry Lab", "CHEM LAB")], "102"),
    ]


def test_empty_path_is_rejected():
    with pytest.raises(ValueError):
        StorageService("")


def test_init_db_is_idempotent_and_seeds_rooms(tmp_path):
    service = StorageService(str(tmp_path / "seeded.db"))
    service.init_db()
    service.init_db()
    assert len(service.get_rooms()) == len(set(KNOWN_ROOMS))


def test_save_sections(storage, sections):
    totals = storage.save_sections("cse.pdf", sections)
    assert totals == {"sections": 2, "entries": 4, "new_rooms": 3}

    timetables = storage.get_timetables()
    assert [t["section"] for t in timetables] == ["A1", "A2"]
    assert {t["filename"] for t in timetables} == {"cse.pdf"}
    schedule = storage.get_schedule(timetables[0]["id"])
    assert [(r["day"], r["subject"]) for r in schedule] == [
        ("Monday", "CN"),
        ("Monday", "OS"),
        ("Monday", "DSP LAB"),
    ]
    types = {r["room_number"]: r["room_type"] for r in storage.get_rooms()}
    assert types == {"101": "classroom", "102": "classroom", "Chemistry Lab": "lab"}


def test_saving_again_adds_no_new_rooms(storage, sections):
    storage.save_sections("cse.pdf", sections)
    totals = storage.save_sections("cse-v2.pdf", sections)
    assert totals["new_rooms"] == 0
    assert len(storage.get_timetables()) == 4


def test_failed_save_commits_nothing(storage, sections):
    broken = Section("COMPUTER SCIENCE", "IV Semester", "A3")
    broken.entries.append(ScheduleEntry("Friday", TIME_SLOTS[0], None, "ML"))
    with pytest.raises(sqlite3.IntegrityError):
        storage.save_sections("cse.pdf", sections + [broken])
    assert storage.get_timetables() == []
    assert storage.get_rooms() == []


def test_uploads_can_be_listed_and_deleted(storage, sections):
    storage.save_sections("cse.pdf", sections)
    storage.save_sections("ece.pdf", sections[:1])
    uploads = {u["filename"]: u["sections"] for u in storage.list_uploads()}
    assert uploads == {"cse.pdf": 2, "ece.pdf": 1}

    first_id = storage.get_timetables()[0]["id"]
    assert storage.delete_upload("cse.pdf") == 2
    assert storage.get_schedule(first_id) == []
    assert [t["filename"] for t in storage.get_timetables()] == ["ece.pdf"]


def test_delete_timetable(storage, sections):
    storage.save_sections("cse.pdf", sections)
    timetable_id = storage.get_timetables()[1]["id"]
    assert storage.delete_timetable(timetable_id) is True
    assert storage.delete_timetable(timetable_id) is False


def test_get_slots(storage, sections):
    storage.save_sections("cse.pdf", sections)
    slots = storage.get_slots()
    assert slots["days"] == ["Monday", "Tuesday"]
    assert slots["time_slots"] == [TIME_SLOTS[0], TIME_SLOTS[2], TIME_SLOTS[3]]


def test_find_free_rooms(storage, sections):
    storage.save_sections("cse.pdf", sections)
    report = storage.find_free_rooms("Monday", "11:10", "01:00")
    assert report["overlapping_slots"] == [TIME_SLOTS[2], TIME_SLOTS[3]]
    assert report["occupied_rooms"] == ["101"]
    assert [r["room_number"] for r in report["free_rooms"]] == ["102", "Chemistry Lab"]


def test_find_free_rooms_rejects_bad_times(storage):
    with pytest.raises(ValueError):
        storage.find_free_rooms("Monday", "later", "01:00")
