"""
ttparse_lib/headers.py: Recognizes department, semester, section and default room.

Departments print their timetable banners in different conventions, so the
semester/section line is matched against an ordered list of format families.
The first family that matches wins; families are never combined. When no single
row carries a recognizable header, the whole page text is tried again, which
recovers phrases the row grouper split across two rows.
"""
import logging
from dataclasses import dataclass

from .constants import HEADER_ROW_TOLERANCE, HEADER_ZONE_MIN_Y
from .grouper import group_by_y
from .merger import merge_adjacent
from .patterns import (
    BRACKET_ONLY_RE,
    BRACKETED_RE,
    DASH_RE,
    DEPARTMENT_PAGE_RE,
    DEPARTMENT_RE,
    DEPARTMENT_TRAILER_RE,
    GENERIC_NUMBER_RE,
    GENERIC_SEM_RE,
    MECHANICAL_RE,
    PAREN_SECTION_RE,
    PAREN_TAG_RE,
    PROSE_RE,
    ROMAN_REPAIRS,
    ROOM_HEADER_RE,
    ROOM_NAME_RE,
    SECTION_TOKEN_RE,
    SPLIT_SECTION_RE,
)

log_header = logging.getLogger("ttparse.header")


def normalize_header_text(text: str) -> str:
    """Collapses space-split roman numerals ("I V" -> "IV") and "Sec tion"."""
    for pattern, numeral in ROMAN_REPAIRS:
        text = pattern.sub(numeral, text)
    return SPLIT_SECTION_RE.sub("Section", text)


def semester_label(token: str) -> str:
    return f"{token} Semester"


def department_abbreviation(department: str) -> str:
    if MECHANICAL_RE.search(department or ""):
        return "ME"
    return (department or "")[:3].upper()


@dataclass
class SemesterMatch:
    """A matched semester/section header and the family that produced it."""

    family: str
    year_sem: str
    section: str


@dataclass
class PageHeader:
    """Header metadata recovered from one page."""

    department: str = ""
    year_sem: str = ""
    section: str = ""
    default_room: str = ""
    family: str = ""


@dataclass
class HeaderHit:
    """Result of classifying a single line: kind is department, semester or room."""

    kind: str
    value: object


# --- SEMESTER/SECTION FAMILIES ---
def _match_bracketed(text, page_text, department):
    m = BRACKETED_RE.search(text)
    return (m.group(1), m.group(2)) if m else None


def _match_paren_section(text, page_text, department):
    m = PAREN_SECTION_RE.search(text)
    return (m.group(1), m.group(2)) if m else None


def _match_paren_tag(text, page_text, department):
    m = PAREN_TAG_RE.search(text)
    return (m.group(1), m.group(2).strip()) if m else None


def _match_dash(text, page_text, department):
    m = DASH_RE.search(text)
    return (m.group(1), m.group(2)) if m else None


def _match_prose(text, page_text, department):
    m = PROSE_RE.search(text)
    if not m:
        return None
    section = SECTION_TOKEN_RE.search(text) or SECTION_TOKEN_RE.search(page_text or "")
    return m.group(1), section.group(1) if section else "A"


def _match_bracket_only(text, page_text, department):
    m = BRACKET_ONLY_RE.search(text)
    if not m:
        return None
    return m.group(1), f"{department_abbreviation(department)}-1"


def _match_generic(text, page_text, department):
    sem = GENERIC_SEM_RE.search(text)
    if not sem:
        return None
    section = SECTION_TOKEN_RE.search(text)
    if section:
        return sem.group(1), section.group(1)
    number = GENERIC_NUMBER_RE.search(text)
    return (sem.group(1), number.group(1)) if number else None


class HeaderMatcher:
    """One tagged format family; `page_only` families skip the per-row pass."""

    def __init__(self, family, func, page_only=False):
        self.family, self.func, self.page_only = family, func, page_only

    def match(self, text, page_text="", department=""):
        found = self.func(text, page_text, department)
        if not found:
            return None
        sem_token, section = found
        return SemesterMatch(self.family, semester_label(sem_token), section)


SEMESTER_MATCHERS = [
    HeaderMatcher("bracketed", _match_bracketed),
    HeaderMatcher("parenthesized-section", _match_paren_section),
    HeaderMatcher("parenthesized", _match_paren_tag),
    HeaderMatcher("dash", _match_dash),
    HeaderMatcher("prose", _match_prose),
    HeaderMatcher("bracket-only", _match_bracket_only),
    HeaderMatcher("generic", _match_generic, page_only=True),
]


class HeaderRecognizer:
    """Applies the prioritized matcher list to rows, lines or whole pages."""

    def __init__(self, matchers=None, row_tolerance=HEADER_ROW_TOLERANCE):
        self.matchers = matchers if matchers is not None else SEMESTER_MATCHERS
        self.row_tolerance = row_tolerance

    def match_semester(self, text, page_text="", department="", whole_page=False):
        """Returns the first matching family for already normalized text."""
        for matcher in self.matchers:
            if matcher.page_only and not whole_page:
                continue
            result = matcher.match(text, page_text, department)
            if result:
                log_header.debug(
                    "Header family '%s' -> %s / %s",
                    result.family,
                    result.year_sem,
                    result.section,
                )
                return result
        return None

    def match_department(self, line):
        m = DEPARTMENT_RE.search(line)
        if not m:
            return None
        return DEPARTMENT_TRAILER_RE.sub("", m.group(1)).strip() or None

    def match_room(self, line):
        m = ROOM_HEADER_RE.search(line)
        return "".join(m.group(1).split()) if m else None

    def classify_line(self, line, department="", page_text="", allow_room=True):
        """
        Classifies one row of header text. Department lines take precedence,
        then semester/section families, then default room lines.
        """
        dept = self.match_department(line)
        if dept:
            return HeaderHit("department", dept)
        norm = normalize_header_text(line)
        sem = self.match_semester(norm, page_text=page_text, department=department)
        if sem:
            return HeaderHit("semester", sem)
        if allow_room:
            room = self.match_room(norm)
            if room:
                return HeaderHit("room", room)
        return None

    def recognize_text(self, page_text, department=""):
        """
        Whole-page pass: every family (including the generic fallback)
        against the concatenated, normalized page text.
        """
        norm = normalize_header_text(page_text)
        header = PageHeader(department=department)
        dept = DEPARTMENT_PAGE_RE.search(norm)
        if dept:
            header.department = dept.group(1).strip()
        sem = self.match_semester(
            norm, page_text=norm, department=header.department, whole_page=True
        )
        if sem:
            header.year_sem, header.section, header.family = sem.year_sem, sem.section, sem.family
        room = self.match_room(norm)
        if not room:
            named = ROOM_NAME_RE.search(norm)
            room = named.group(1).strip() if named else None
        header.default_room = room or ""
        return header

    def recognize_fragments(self, fragments, department=""):
        """
        Extracts the page header from positioned fragments. Returns None if no
        semester/section header is found by either pass. `department` is the
        value carried from earlier pages and is used only when the page has none.
        """
        page_text = " ".join(f.text for f in fragments)
        norm_page = normalize_header_text(page_text)
        header = PageHeader()

        for group in group_by_y(fragments, self.row_tolerance):
            merged = merge_adjacent(sorted(group, key=lambda f: f.x))
            line = " ".join(f.text for f in merged)
            hit = self.classify_line(
                line,
                department=header.department or department,
                page_text=norm_page,
                allow_room=group[0].y > HEADER_ZONE_MIN_Y,
            )
            if not hit:
                continue
            if hit.kind == "department" and not header.department:
                header.department = hit.value
            elif hit.kind == "semester" and not header.section:
                header.year_sem, header.section = hit.value.year_sem, hit.value.section
                header.family = hit.value.family
            elif hit.kind == "room" and not header.default_room:
                header.default_room = hit.value

        if not header.section:
            log_header.debug("No per-row header match; trying whole-page text.")
            fallback = self.recognize_text(page_text, header.department or department)
            header.department = header.department or fallback.department
            header.year_sem, header.section = fallback.year_sem, fallback.section
            header.family = fallback.family
            header.default_room = header.default_room or fallback.default_room

        if not header.section:
            return None
        log_header.info(
            "Header: %s | %s | %s (room %s, via %s)",
            header.department or department or "?",
            header.year_sem,
            header.section,
            header.default_room or "-",
            header.family,
        )
        return header
