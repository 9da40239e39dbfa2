"""
ttstore_lib/availability.py: Wall-clock arithmetic for free-room queries.

Slot labels use a 12-hour clock without AM/PM, so any hour from 1 to 4 is
read as afternoon.
"""
import re

from ttparse_lib.constants import TIME_SLOTS

_TIME_RE = re.compile(r"^\s*(\d{1,2})\s*[:.]\s*(\d{2})\s*$")


def time_to_minutes(value: str) -> int:
    """Converts 'HH:MM' (12h or 24h) to minutes since midnight."""
    m = _TIME_RE.match(value or "")
    if not m:
        raise ValueError(f"Invalid time: {value!r}")
    hour, minute = int(m.group(1)), int(m.group(2))
    if 1 <= hour <= 4:
        hour += 12
    return hour * 60 + minute


def slot_bounds(slot: str) -> tuple[int, int]:
    start, end = slot.split("-")
    return time_to_minutes(start), time_to_minutes(end)


def overlapping_slots(time_from: str, time_to: str, slots=TIME_SLOTS) -> list[str]:
    """Canonical slots that intersect the [from, to) range."""
    start, end = time_to_minutes(time_from), time_to_minutes(time_to)
    overlapping = []
    for slot in slots:
        slot_start, slot_end = slot_bounds(slot)
        if slot_start < end and slot_end > start:
            overlapping.append(slot)
    return overlapping


def free_rooms(all_rooms, schedules, day, time_from, time_to):
    """
    Splits rooms into free and occupied for a day and time range. `schedules`
    is any iterable of mappings with day, time_slot and room_number. A room is
    free only if it is unused in every overlapping slot.
    """
    slots = set(overlapping_slots(time_from, time_to))
    occupied = []
    for row in schedules:
        if row["day"].lower() != day.lower() or row["time_slot"] not in slots:
            continue
        if row["room_number"] not in occupied:
            occupied.append(row["room_number"])
    free = [room for room in all_rooms if room not in occupied]
    return free, occupied
