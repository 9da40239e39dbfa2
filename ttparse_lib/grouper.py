"""
ttparse_lib/grouper.py: Clusters fragments into rows and finds day-row extents in text.
"""
import logging

from .constants import DAY_BAND_TOLERANCE, GRID_MIN_X, HEADER_ROW_TOLERANCE
from .patterns import (
    BRACKET_ONLY_RE,
    BRACKETED_RE,
    DASH_RE,
    DAY_LINE_RE,
    DEPARTMENT_RE,
    NON_CONTENT_RE,
    PAREN_SECTION_RE,
    PAREN_TAG_RE,
    PROSE_RE,
    ROOM_HEADER_RE,
    TIMESTAMP_RE,
)

log_rows = logging.getLogger("ttparse.rows")

_HEADER_PATTERNS = (
    DEPARTMENT_RE,
    BRACKETED_RE,
    PAREN_SECTION_RE,
    PAREN_TAG_RE,
    DASH_RE,
    PROSE_RE,
    BRACKET_ONLY_RE,
)


# --- GEOMETRY MODE ---
def reading_order(fragments):
    """Top of the page first, then left to right."""
    return sorted(fragments, key=lambda f: (-f.y, f.x))


def group_by_y(fragments, tolerance=HEADER_ROW_TOLERANCE):
    """
    Sweeps fragments in reading order and starts a new row whenever a
    fragment drifts more than `tolerance` from the row's anchor y.
    """
    groups, current, anchor_y = [], [], None
    for frag in reading_order(fragments):
        if anchor_y is None or abs(frag.y - anchor_y) <= tolerance:
            current.append(frag)
            if anchor_y is None:
                anchor_y = frag.y
        else:
            groups.append(current)
            current, anchor_y = [frag], frag.y
    if current:
        groups.append(current)
    log_rows.debug("Grouped %d fragments into %d rows", len(fragments), len(groups))
    return groups


def day_band(fragments, day_fragment, tolerance=DAY_BAND_TOLERANCE, min_x=GRID_MIN_X):
    """
    Collects the grid fragments that belong to a day label's row, including
    room references printed slightly above or below the subject line.
    """
    band = [
        f
        for f in fragments
        if abs(f.y - day_fragment.y) <= tolerance and f.x > min_x
    ]
    return sorted(band, key=lambda f: (f.y, f.x))


# --- TEXT MODE ---
def content_lines(text):
    """Non-blank, stripped lines of a text dump."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def is_header_line(line) -> bool:
    return any(p.search(line) for p in _HEADER_PATTERNS)


def is_terminator(line) -> bool:
    """True if `line` ends a day's continuation scan."""
    if DAY_LINE_RE.match(line) or is_header_line(line) or ROOM_HEADER_RE.search(line):
        return True
    # Keywords are whole words: "HOD" must not end a "NUMERICAL METHODS" row.
    return bool(TIMESTAMP_RE.search(line) or NON_CONTENT_RE.search(line))


def scan_day_rows(lines, start):
    """
    Returns the continuation lines that follow the day label at `start` and
    the index of the first line that was not consumed.
    """
    end = start + 1
    while end < len(lines) and not is_terminator(lines[end]):
        end += 1
    log_rows.debug("Day row at line %d spans %d continuation lines", start, end - start - 1)
    return lines[start + 1 : end], end
