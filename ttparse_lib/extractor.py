"""
ttparse_lib/extractor.py: The timetable extraction engine.

`TimetableExtractor` unifies the two extraction strategies:

- geometry mode (`parse_pages`): each page is a dump of positioned text
  fragments. Pages are parsed one at a time; a page that cannot be decoded or
  has no recognizable header is reported and the next page is parsed.
- text mode (`parse_text`): plain reading-order text, recovered line by line
  with the same header families and a positional cell zip.

Both modes feed a `SectionAssembler` and return a `ParseResult`. Parsing is a
pure function of its input.
"""
import json
import logging

from .assembler import SectionAssembler
from .columns import ColumnResolver
from .constants import (
    DAY_BAND_TOLERANCE,
    HEADER_ROW_TOLERANCE,
    REASON_EMPTY,
    REASON_JSON,
    REASON_NO_HEADER,
    SAMPLE_CHARS,
    SAMPLE_ITEMS,
)
from .grouper import content_lines, day_band, reading_order, scan_day_rows
from .headers import HeaderRecognizer, PageHeader
from .mapper import map_geometry_row, map_text_row
from .models import TextFragment
from .patterns import DAY_CODE_RE, DAY_LINE_RE

log_layout = logging.getLogger("ttparse.layout")


def decode_page(raw: str) -> list[TextFragment]:
    """
    Decodes one page dump: a JSON array or one JSON object per line. Raises
    ValueError if the dump is not valid fragment JSON.
    """
    raw = (raw or "").strip()
    if not raw:
        return []
    try:
        if raw.startswith("["):
            records = json.loads(raw)
        else:
            records = [json.loads(line) for line in raw.splitlines() if line.strip()]
        fragments = [TextFragment.from_record(r) for r in records]
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Malformed fragment record: {e}") from e
    return [f for f in fragments if f.text]


def encode_page(fragments) -> str:
    """Line-delimited JSON dump of a page's fragments."""
    return "\n".join(json.dumps(f.to_record()) for f in fragments)


def page_sample(fragments) -> str:
    return " | ".join(f.text for f in fragments[:SAMPLE_ITEMS])[:SAMPLE_CHARS]


class TimetableExtractor:
    """Reconstructs timetable sections from fragment dumps or plain text."""

    def __init__(
        self,
        header_tolerance=HEADER_ROW_TOLERANCE,
        band_tolerance=DAY_BAND_TOLERANCE,
        include_saturday=True,
        column_resolver=None,
    ):
        self.header_recognizer = HeaderRecognizer(row_tolerance=header_tolerance)
        self.band_tolerance = band_tolerance
        self.include_saturday = include_saturday
        self.column_resolver = column_resolver or ColumnResolver()

    # --- GEOMETRY MODE ---
    def parse_pages(self, pages):
        """Parses a list of per-page fragment dumps."""
        assembler = SectionAssembler()
        for page_num, raw in enumerate(pages, start=1):
            try:
                fragments = decode_page(raw)
            except ValueError as e:
                log_layout.debug("Page %d: %s", page_num, e)
                assembler.skip(page_num, REASON_JSON)
                continue
            self.parse_fragments(fragments, page_num, assembler)
        return assembler.finish()

    def parse_fragments(self, fragments, page_num, assembler):
        """Parses one page of already decoded fragments into the assembler."""
        if not fragments:
            assembler.skip(page_num, REASON_EMPTY)
            return
        log_layout.info("Parsing page %d (%d fragments)...", page_num, len(fragments))

        header = self.header_recognizer.recognize_fragments(fragments, assembler.department)
        if header is None:
            assembler.skip(page_num, REASON_NO_HEADER, sample=page_sample(fragments))
            return

        if header.department and header.department != assembler.department:
            assembler.set_department(header.department, page_num)
        if header.default_room:
            assembler.set_default_room(header.default_room)
        assembler.begin_section(header.year_sem, header.section, page_num)

        boundaries = self.column_resolver.resolve(fragments)
        for day_frag in self._day_labels(fragments):
            band = day_band(fragments, day_frag, self.band_tolerance)
            rooms = []
            entries = map_geometry_row(
                day_frag, band, boundaries, assembler.default_room, rooms
            )
            assembler.add_rooms(rooms, page_num)
            assembler.add_entries(entries, page_num)
        assembler.flush(page_num)

    def _day_labels(self, fragments):
        labels = []
        for frag in reading_order(fragments):
            m = DAY_CODE_RE.match(frag.text)
            if m and self._wants_day(m.group(1)):
                labels.append(frag)
        return labels

    def _wants_day(self, label):
        """Saturday rows are parsed only when `include_saturday` is set."""
        return self.include_saturday or label[:3].upper() != "SAT"

    # --- TEXT MODE ---
    def parse_text(self, text):
        """
        Parses plain extracted text. Form feeds mark page breaks and are only
        used for diagnostics. If no line carries a semester/section header,
        the whole text is matched once and used as the header for all rows.
        """
        result, matched = self._parse_lines(text)
        if matched:
            return result
        header = self.header_recognizer.recognize_text(text)
        if not header.section:
            log_layout.warning("No section header found anywhere in the text.")
            return result
        log_layout.info("Using whole-text header %s / %s.", header.year_sem, header.section)
        result, _ = self._parse_lines(text, seed=header)
        return result

    def _parse_lines(self, text, seed: PageHeader | None = None):
        assembler = SectionAssembler()
        matched = False
        if seed:
            assembler.department = seed.department
            assembler.default_room = seed.default_room

        for page_num, page_text in enumerate(text.split("\f"), start=1):
            lines = content_lines(page_text)
            i = 0
            while i < len(lines):
                day = DAY_LINE_RE.match(lines[i])
                if day:
                    continuation, end = scan_day_rows(lines, i)
                    if not self._wants_day(day.group(1)):
                        i = end
                        continue
                    if seed and assembler.current is None:
                        assembler.begin_section(seed.year_sem, seed.section, page_num)
                    i = end
                    rooms = []
                    entries = map_text_row(
                        day.group(1),
                        day.group(2).strip(),
                        continuation,
                        assembler.default_room,
                        rooms,
                    )
                    assembler.add_rooms(rooms, page_num)
                    assembler.add_entries(entries, page_num)
                    continue
                if self._apply_header_line(lines[i], page_text, page_num, assembler):
                    matched = True
                i += 1
        return assembler.finish(), matched

    def _apply_header_line(self, line, page_text, page_num, assembler):
        """Feeds one non-day line to the assembler; True if it was a section header."""
        hit = self.header_recognizer.classify_line(
            line, department=assembler.department, page_text=page_text
        )
        if not hit:
            return False
        if hit.kind == "department":
            assembler.set_department(hit.value, page_num)
        elif hit.kind == "semester":
            assembler.begin_section(hit.value.year_sem, hit.value.section, page_num)
            return True
        elif hit.kind == "room":
            assembler.set_default_room(hit.value)
        return False
