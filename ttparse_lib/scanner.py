"""
ttparse_lib/scanner.py: Renders PDF pages into positioned text fragments.

Each `LTTextLine` is split into word fragments at whitespace and at horizontal
gaps, with the fragment's left edge, baseline and width rounded to whole
points. Page dumps are line-delimited JSON, the format `decode_page` reads.
"""
import logging

from pdfminer.high_level import extract_pages
from pdfminer.layout import LTChar, LTTextLine
from pdfminer.pdfparser import PDFSyntaxError
from pdfminer.psparser import PSException

from .errors import UnparseableSourceError
from .extractor import encode_page
from .models import TextFragment

log_scan = logging.getLogger("ttparse.scan")

WORD_GAP = 1.0


def _find_elements_by_type(obj, t):
    """Recursively finds all layout elements of a specific type."""
    e = []
    if isinstance(obj, t):
        e.append(obj)
    if hasattr(obj, "_objs"):
        for child in obj:
            e.extend(_find_elements_by_type(child, t))
    return e


def fragments_from_line(line):
    """Splits one text line into word fragments."""
    frags, word_chars, start_x, last_x, base_y = [], [], -1, -1, 0
    for char in line:
        is_text = isinstance(char, LTChar) and char.get_text().strip()
        if is_text and word_chars and char.x0 - last_x <= WORD_GAP:
            word_chars.append(char.get_text())
            last_x = char.x1
            continue
        if word_chars:
            frags.append(_make_fragment(word_chars, start_x, last_x, base_y))
            word_chars = []
        if is_text:
            word_chars, start_x, last_x, base_y = [char.get_text()], char.x0, char.x1, char.y0
    if word_chars:
        frags.append(_make_fragment(word_chars, start_x, last_x, base_y))
    return frags


def _make_fragment(chars, x0, x1, y0):
    return TextFragment(
        x=int(round(x0)), y=int(round(y0)), width=int(round(x1 - x0)), text="".join(chars)
    )


def page_fragments(page_layout):
    frags = []
    for line in _find_elements_by_type(page_layout, LTTextLine):
        frags.extend(fragments_from_line(line))
    return frags


def page_text(page_layout):
    """Reading-order text of a page, one text line per output line."""
    lines = sorted(
        _find_elements_by_type(page_layout, LTTextLine), key=lambda ln: (-ln.y1, ln.x0)
    )
    return "\n".join(ln.get_text().rstrip("\n") for ln in lines)


def _load_layouts(pdf_path, pages_to_process=None):
    try:
        layouts = list(extract_pages(pdf_path))
    except (PDFSyntaxError, PSException) as e:
        raise UnparseableSourceError(pdf_path, str(e) or e.__class__.__name__) from e
    selected = [
        p for p in layouts if not pages_to_process or p.pageid in pages_to_process
    ]
    log_scan.info("Rendering %d of %d pages from %s", len(selected), len(layouts), pdf_path)
    return selected


def scan_pdf(pdf_path, pages_to_process=None) -> list[str]:
    """One line-delimited JSON fragment dump per selected page."""
    dumps = []
    for layout in _load_layouts(pdf_path, pages_to_process):
        frags = page_fragments(layout)
        log_scan.debug("Page %d: %d fragments", layout.pageid, len(frags))
        dumps.append(encode_page(frags))
    return dumps


def scan_pdf_text(pdf_path, pages_to_process=None) -> str:
    """Reading-order text of the selected pages, separated by form feeds."""
    return "\f".join(page_text(p) for p in _load_layouts(pdf_path, pages_to_process))
