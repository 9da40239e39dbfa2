"""
ttparse_lib/mapper.py: Maps the content of a day row onto (day, time-slot) cells.

Geometry mode routes each fragment of a day band into one of six columns and
separates room references from subject words. Text mode classifies the lines
that follow a day label and zips the resulting (subject, room) pairs onto the
canonical slots by position.
"""
import logging

from .columns import slot_index
from .constants import (
    BASELINE_TOLERANCE,
    DAY_NAMES,
    NUM_SLOTS,
    SKIP_WORDS,
    TIME_SLOTS,
    TWO_HOUR_SUBJECTS,
)
from .merger import merge_adjacent
from .models import ScheduleEntry, SlotCell
from .patterns import (
    BARE_ROOM_RE,
    BREAK_LETTER_RE,
    CELL_SPLIT_RE,
    CLOSING_PAREN_RE,
    DAY_CODE_RE,
    INLINE_ROOM_RE,
    LAB_LINE_RE,
    LAB_WORD_RE,
    MOOC_RE,
    RNO_PREFIX_RE,
    RNO_VALUE_RE,
    ROOM_NO_PREFIX_RE,
    ROOM_NO_VALUE_RE,
    ROOM_ONLY_LINE_RE,
)

log_rows = logging.getLogger("ttparse.rows")


def day_name(code: str) -> str | None:
    return DAY_NAMES.get(code[:3].upper())


def is_two_hour(subject: str) -> bool:
    """Labs and a few named activities occupy two consecutive slots."""
    return bool(LAB_WORD_RE.search(subject)) or subject.upper() in TWO_HOUR_SUBJECTS


# --- GEOMETRY MODE ---
def room_reference(text):
    """
    Returns (is_reference, room) for a fragment. Split "(R.No.80" + "3" + ")"
    runs are already merged; a dangling ")" tail is a reference with no room.
    """
    if ROOM_NO_PREFIX_RE.match(text):
        m = ROOM_NO_VALUE_RE.search(text)
        return True, m.group(1) if m else None
    if RNO_PREFIX_RE.match(text):
        m = RNO_VALUE_RE.search(text)
        return True, m.group(1) if m else None
    if CLOSING_PAREN_RE.match(text):
        return True, None
    return False, None


def fill_cells(band, day_y, boundaries, rooms=None):
    """
    Assigns a day band's fragments to six SlotCells. Bare 3-4 digit numbers
    printed off the day's baseline are read as room overrides, so a subject
    literally named with such a number would be misread as a room.
    """
    cells = [None] * NUM_SLOTS
    for frag in merge_adjacent(band):
        text = frag.text
        if text.upper() in SKIP_WORDS or DAY_CODE_RE.match(text):
            continue
        idx = slot_index(frag.x, boundaries)
        if idx == -1:
            log_rows.debug("Dropping '%s' at x=%d (outside grid columns)", text, frag.x)
            continue
        cell = cells[idx] = cells[idx] or SlotCell()

        is_ref, room = room_reference(text)
        if is_ref:
            if room:
                cell.room_override = room
                if rooms is not None:
                    rooms.append(room)
            continue
        if MOOC_RE.match(text):
            cell.mooc = True
            continue
        if BARE_ROOM_RE.match(text) and abs(frag.y - day_y) > BASELINE_TOLERANCE:
            cell.room_override = text
            if rooms is not None:
                rooms.append(text)
            continue
        if BREAK_LETTER_RE.match(text):
            continue
        cell.subjects.append(text)
    return cells


def build_entries(day, cells, default_room=""):
    """
    Turns six SlotCells into ScheduleEntries. A two-hour subject whose next
    column is empty is copied into that column, taking the next column's own
    room override if it has one.
    """
    cells = list(cells) + [None] * (NUM_SLOTS - len(cells))
    entries = []
    for s in range(NUM_SLOTS):
        cell = cells[s]
        if not cell or not cell.subjects or cell.filled:
            continue
        subject = cell.subject
        room = cell.room_override or default_room or ""
        entries.append(ScheduleEntry(day, TIME_SLOTS[s], room, subject))

        nxt = cells[s + 1] if s + 1 < NUM_SLOTS else None
        if is_two_hour(subject) and s + 1 < NUM_SLOTS and (not nxt or nxt.is_empty):
            next_room = (nxt.room_override if nxt else None) or room
            entries.append(ScheduleEntry(day, TIME_SLOTS[s + 1], next_room, subject))
            cells[s + 1] = SlotCell(filled=True)
            log_rows.debug("%s: '%s' spans %s", day, subject, TIME_SLOTS[s + 1])
    return entries


def map_geometry_row(day_fragment, band, boundaries, default_room="", rooms=None):
    """Entries for one day label and the fragments of its band."""
    day = day_name(day_fragment.text)
    if not day:
        return []
    cells = fill_cells(band, day_fragment.y, boundaries, rooms)
    return build_entries(day, cells, default_room)


# --- TEXT MODE ---
def split_cells(line):
    """Splits a line into cell tokens on whitespace runs (single spaces if none)."""
    parts = CELL_SPLIT_RE.split(line) if CELL_SPLIT_RE.search(line) else line.split()
    return [p.strip() for p in parts if p.strip() and p.strip().upper() not in SKIP_WORDS]


def _classify_cell(text, pairs, default_room):
    """Adds one cell to `pairs`; returns the room number it referenced, if any."""
    room_only = ROOM_ONLY_LINE_RE.match(text)
    if room_only:
        room = room_only.group(1) or room_only.group(2)
        if pairs:
            pairs[-1] = (pairs[-1][0], room)
        return room
    inline = INLINE_ROOM_RE.match(text)
    if inline:
        pairs.append((inline.group(1).strip(), inline.group(2)))
        return inline.group(2)
    pairs.append((" ".join(text.split()), default_room))
    return None


def classify_text_line(line, pairs, default_room=""):
    """
    Appends the (subject, room) pairs a continuation line contributes and
    returns the room numbers it referenced. Cells separated by whitespace runs
    are classified one by one, so an inline "(R.No.N)" suffix only rooms its
    own cell. A room-only cell re-rooms the preceding pair and never adds one.
    """
    whole = LAB_LINE_RE.match(line) or (
        not CELL_SPLIT_RE.search(line)
        and (ROOM_ONLY_LINE_RE.match(line) or INLINE_ROOM_RE.match(line))
    )
    cells = [line] if whole else split_cells(line)
    rooms = []
    for cell in cells:
        room = _classify_cell(cell, pairs, default_room)
        if room:
            rooms.append(room)
    return rooms


def map_text_row(day_code, first_line, continuation, default_room="", rooms=None):
    """Entries for a day label line and the continuation lines that follow it."""
    day = day_name(day_code)
    if not day:
        return []
    pairs = []
    for line in ([first_line] if first_line else []) + list(continuation):
        found = classify_text_line(line, pairs, default_room)
        if rooms is not None:
            rooms.extend(found)
    if len(pairs) > NUM_SLOTS:
        log_rows.warning(
            "%s: %d cells found, only %d slots; extra cells dropped.",
            day,
            len(pairs),
            NUM_SLOTS,
        )
    return [
        ScheduleEntry(day, slot, room or "", subject)
        for slot, (subject, room) in zip(TIME_SLOTS, pairs)
    ]
