"""
ttparse_lib/models.py: Data models for fragments, grid geometry and parsed sections.
"""
import logging
import re
from dataclasses import dataclass, field

log_assemble = logging.getLogger("ttparse.assemble")

LAB_ROOM_RE = re.compile(r"lab", re.I)


def classify_room(room_number: str) -> str:
    """Returns the room type stored alongside a room identifier."""
    return "lab" if LAB_ROOM_RE.search(room_number or "") else "classroom"


# --- PHYSICAL LAYOUT ---
@dataclass(frozen=True)
class TextFragment:
    """One atomic piece of extracted text with its position on the page."""

    x: int
    y: int
    width: int
    text: str

    @property
    def right(self):
        return self.x + self.width

    @classmethod
    def from_record(cls, record: dict):
        """Builds a fragment from a decoded JSON record (long or short keys)."""
        text = record.get("text", record.get("t", ""))
        width = record.get("width", record.get("w", 0))
        return cls(
            x=int(round(record["x"])),
            y=int(round(record["y"])),
            width=int(round(width or 0)),
            text=str(text).strip(),
        )

    def to_record(self) -> dict:
        return {"x": self.x, "y": self.y, "width": self.width, "text": self.text}


@dataclass(frozen=True)
class ColumnBoundary:
    """Inclusive x-range claimed by one time-slot column."""

    left: int
    right: int

    def contains(self, x) -> bool:
        return self.left <= x <= self.right


@dataclass
class SlotCell:
    """Everything collected for one (day, column) cell of the grid."""

    subjects: list[str] = field(default_factory=list)
    room_override: str | None = None
    mooc: bool = False
    filled: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.subjects and not self.filled

    @property
    def subject(self) -> str:
        name = " ".join(self.subjects)
        return f"{name} (MOOC)" if self.mooc else name


# --- LOGICAL OUTPUT ---
@dataclass
class ScheduleEntry:
    """A subject taught in a room at one canonical slot of one day."""

    day: str
    time_slot: str
    room_number: str
    subject: str

    def to_dict(self) -> dict:
        return {
            "day": self.day,
            "time_slot": self.time_slot,
            "room_number": self.room_number,
            "subject": self.subject,
        }


@dataclass
class Section:
    """One department/semester/section timetable block."""

    department: str = ""
    year_sem: str = ""
    section: str = ""
    default_room: str | None = None
    rooms: dict = field(default_factory=dict)
    entries: list[ScheduleEntry] = field(default_factory=list)
    page_start: int | None = None
    page_end: int | None = None

    @property
    def key(self):
        return (self.department, self.year_sem, self.section)

    @property
    def room_set(self) -> list[str]:
        """Rooms in first-seen order."""
        return list(self.rooms)

    def add_room(self, room_number):
        if room_number:
            self.rooms.setdefault(room_number, classify_room(room_number))

    def add_entry(self, entry: ScheduleEntry):
        self.entries.append(entry)
        self.add_room(entry.room_number)

    def absorb(self, other: "Section"):
        """Extends this section with a continuation page of the same block."""
        log_assemble.debug(
            "Extending section %s with %d entries from page %s",
            self.section,
            len(other.entries),
            other.page_start,
        )
        for room in other.rooms:
            self.add_room(room)
        self.entries.extend(other.entries)
        if other.page_end is not None:
            self.page_end = max(self.page_end or other.page_end, other.page_end)
        if not self.default_room:
            self.default_room = other.default_room

    def to_dict(self) -> dict:
        return {
            "department": self.department,
            "year_sem": self.year_sem,
            "section": self.section,
            "default_room": self.default_room,
            "rooms": self.room_set,
            "entries": [e.to_dict() for e in self.entries],
        }


@dataclass
class SkippedPage:
    """Diagnostic record for a page that produced no section."""

    page: int
    reason: str
    sample: str | None = None
    section: str | None = None

    def to_dict(self) -> dict:
        record = {"page": self.page, "reason": self.reason}
        if self.sample is not None:
            record["sample"] = self.sample
        if self.section is not None:
            record["section"] = self.section
        return record


@dataclass
class ParseResult:
    """Sections recovered from one document plus the pages that were skipped."""

    sections: list[Section] = field(default_factory=list)
    skipped: list[SkippedPage] = field(default_factory=list)

    @property
    def total_entries(self) -> int:
        return sum(len(s.entries) for s in self.sections)

    def to_dict(self) -> dict:
        return {
            "sections": [s.to_dict() for s in self.sections],
            "skipped": [p.to_dict() for p in self.skipped],
        }
