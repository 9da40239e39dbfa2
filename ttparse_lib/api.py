# --- ttparse_lib/api.py ---
import json
import logging
import os

from .constants import DAY_BAND_TOLERANCE, HEADER_ROW_TOLERANCE
from .errors import UnparseableSourceError
from .extractor import TimetableExtractor
from .models import ParseResult
from .scanner import scan_pdf, scan_pdf_text

log = logging.getLogger("ttparse.api")

MODES = ("auto", "geometry", "text")


def _parse_page_selection(pages_str: str) -> set | None:
    """Parses a page selection string (e.g., '1,3,5-7') into a set of integers."""
    if not pages_str or pages_str.lower() == "all":
        return None
    pages = set()
    try:
        for p in pages_str.split(","):
            part = p.strip()
            if "-" in part:
                s, e = map(int, part.split("-"))
                pages.update(range(s, e + 1))
            else:
                pages.add(int(part))
        return pages
    except ValueError:
        log.error("Invalid page selection format: %s. Defaulting to 'all'.", pages_str)
        return None


def _make_extractor(options: dict | None) -> TimetableExtractor:
    options = options or {}
    return TimetableExtractor(
        header_tolerance=options.get("header_tolerance", HEADER_ROW_TOLERANCE),
        band_tolerance=options.get("band_tolerance", DAY_BAND_TOLERANCE),
        include_saturday=options.get("include_saturday", True),
    )


def log_skipped_pages(result: ParseResult):
    """Summarizes skipped pages for diagnostics."""
    if not result.skipped:
        return
    report = [f"=== SKIPPED PAGES ({len(result.skipped)}) ==="]
    for sp in result.skipped:
        line = f"  Page {sp.page}: {sp.reason}"
        if sp.section:
            line += f" (section {sp.section})"
        if sp.sample:
            line += f"\n    Sample: {sp.sample}"
        report.append(line)
    log.warning("\n".join(report))


def parse_pages(pages: list[str], options: dict | None = None) -> ParseResult:
    """Geometry mode over per-page fragment dumps."""
    result = _make_extractor(options).parse_pages(pages)
    log.info(
        "Parsed %d section(s) from %d page(s): %d schedule entries, %d page(s) skipped.",
        len(result.sections),
        len(pages),
        result.total_entries,
        len(result.skipped),
    )
    log_skipped_pages(result)
    return result


def parse_text(text: str, options: dict | None = None) -> ParseResult:
    """Text mode over one string of extracted text."""
    result = _make_extractor(options).parse_text(text)
    log.info(
        "Parsed %d section(s) from text: %d schedule entries.",
        len(result.sections),
        result.total_entries,
    )
    log_skipped_pages(result)
    return result


def process_pdf(
    pdf_path: str, mode: str = "auto", pages_str: str = "all", options: dict | None = None
) -> ParseResult:
    """
    Parses a timetable PDF. In 'auto' mode the geometry strategy runs first and
    the text strategy is only tried if it yields no sections.
    """
    if not os.path.exists(pdf_path):
        raise FileNotFoundError(f"PDF file not found: {pdf_path}")
    if mode not in MODES:
        raise ValueError(f"Unknown parse mode: {mode}")
    pages_to_process = _parse_page_selection(pages_str)

    result = ParseResult()
    if mode in ("auto", "geometry"):
        result = parse_pages(scan_pdf(pdf_path, pages_to_process), options)
    if mode == "text" or (mode == "auto" and not result.sections):
        if mode == "auto":
            log.info("Geometry mode found no sections; retrying in text mode.")
        result = parse_text(scan_pdf_text(pdf_path, pages_to_process), options)
    return result


def process_dump(path: str, mode: str = "auto", options: dict | None = None) -> ParseResult:
    """
    Parses a saved dump: a JSON list of per-page fragment dumps, or plain
    text (form feeds between pages).
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Input file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()

    if mode != "text" and path.lower().endswith(".json"):
        try:
            pages = json.loads(content)
        except ValueError as e:
            raise UnparseableSourceError(path, f"not a JSON page list ({e})") from e
        if not isinstance(pages, list):
            raise UnparseableSourceError(path, "expected a JSON list of pages")
        pages = [p if isinstance(p, str) else json.dumps(p) for p in pages]
        return parse_pages(pages, options)
    if mode == "geometry":
        return parse_pages(content.split("\f"), options)
    return parse_text(content, options)
