"""
ttparse_lib/assembler.py: Packages header state and entries into output Sections.

`SectionAssembler` is the explicit accumulator threaded through a parse. It
holds the department and default room (both persist until overwritten) and the
in-progress section, and decides which sections are emitted and which are
reported as skipped.
"""
import logging

from .constants import REASON_NO_ENTRIES, REASON_NO_HEADER
from .models import ParseResult, Section, SkippedPage

log_assemble = logging.getLogger("ttparse.assemble")


class SectionAssembler:
    """Accumulates sections for one document."""

    def __init__(self):
        self.department = ""
        self.default_room = ""
        self.current: Section | None = None
        self.result = ParseResult()
        self._by_key = {}

    # --- HEADER EVENTS ---
    def set_department(self, department, page=None):
        """A department banner starts a new block."""
        self.flush(page)
        self.department = department
        log_assemble.debug("Department: %s", department)

    def set_default_room(self, room):
        """A room line under a header replaces the room carried from earlier blocks."""
        self.default_room = room
        section = self.current
        if section is None:
            return
        if not section.entries:
            if section.default_room and section.default_room != room:
                section.rooms.pop(section.default_room, None)
            section.default_room = room
        section.add_room(room)

    def begin_section(self, year_sem, section, page=None):
        """A semester/section header flushes the previous block and opens a new one."""
        self.flush(page)
        self.current = Section(
            department=self.department,
            year_sem=year_sem,
            section=section,
            default_room=self.default_room or None,
            page_start=page,
            page_end=page,
        )
        self.current.add_room(self.default_room)
        return self.current

    # --- CONTENT EVENTS ---
    def ensure_section(self, page=None):
        """Entries seen before any header go to an anonymous section."""
        if self.current is None:
            self.current = Section(
                department=self.department,
                default_room=self.default_room or None,
                page_start=page,
                page_end=page,
            )
            self.current.add_room(self.default_room)
        return self.current

    def add_entries(self, entries, page=None):
        section = self.ensure_section(page)
        for entry in entries:
            section.add_entry(entry)
        if page is not None:
            section.page_end = max(section.page_end or page, page)

    def add_rooms(self, rooms, page=None):
        section = self.ensure_section(page)
        for room in rooms:
            section.add_room(room)

    # --- OUTPUT ---
    def flush(self, page=None):
        """Emits the in-progress section, or records why it was dropped."""
        section, self.current = self.current, None
        if section is None:
            return None
        where = section.page_start if section.page_start is not None else page or 0
        if not section.section:
            if section.entries:
                self.skip(where, REASON_NO_HEADER)
            return None
        if not section.entries:
            self.skip(where, REASON_NO_ENTRIES, section=section.section)
            return None

        existing = self._by_key.get(section.key)
        if existing:
            existing.absorb(section)
            return existing
        self._by_key[section.key] = section
        self.result.sections.append(section)
        log_assemble.info(
            "Section %s %s (%s): %d entries, %d rooms",
            section.section,
            section.year_sem,
            section.department or "?",
            len(section.entries),
            len(section.rooms),
        )
        return section

    def skip(self, page, reason, sample=None, section=None):
        self.result.skipped.append(SkippedPage(page, reason, sample, section))
        log_assemble.debug("Page %s skipped: %s", page, reason)

    def finish(self):
        self.flush()
        return self.result
