"""
ttparse_lib/patterns.py: Compiled regular expressions shared by the parser stages.
"""
import re

from .constants import NON_CONTENT_KEYWORDS

# --- ROMAN NUMERAL REPAIR (longest sequences first; "I V" before "I I") ---
ROMAN_REPAIRS = [
    (re.compile(r"\bV\s+I\s+I\s+I\b"), "VIII"),
    (re.compile(r"\bV\s+I\s+I\b"), "VII"),
    (re.compile(r"\bI\s+V\b"), "IV"),
    (re.compile(r"\bV\s+I\b"), "VI"),
    (re.compile(r"\bI\s+I\s+I\b"), "III"),
    (re.compile(r"\bI\s+I\b"), "II"),
]
SPLIT_SECTION_RE = re.compile(r"Sec\s*tion", re.I)

# --- HEADER FAMILIES ---
BRACKETED_RE = re.compile(r"(\w+)\s+SEMESTER\s*\[SECTION[-\s]*(\w+)\]", re.I)
PAREN_SECTION_RE = re.compile(r"(\w+)\s+SEMESTER\s*\(SECTION[-\s]*(\w+)\)", re.I)
PAREN_TAG_RE = re.compile(r"(\w+)\s+Semester\s*\(\s*([^)]+)\)", re.I)
DASH_RE = re.compile(r"(\w+)\s+Sem\w*\s*[–\-]\s*Section\s*[–\-]\s*(\w+)", re.I)
PROSE_RE = re.compile(r"B\.?\s*Tech\s+(\w+)\s+Semester", re.I)
SECTION_TOKEN_RE = re.compile(r"Section[-–\s]*(\w+)", re.I)
BRACKET_ONLY_RE = re.compile(r"\[\s*(\w+)\s+SEMESTER\s*\]", re.I)
GENERIC_SEM_RE = re.compile(r"(\w+)\s+Sem(?:ester)?", re.I)
GENERIC_NUMBER_RE = re.compile(r"Sem\w*\s*[–\-]?\s*(\d+)", re.I)

DEPARTMENT_RE = re.compile(r"DEPARTMENT\s+OF\s+(.+)", re.I)
DEPARTMENT_TRAILER_RE = re.compile(r"\s+(?:ACADEMIC|CLASS|TIME)\b.*$", re.I)
DEPARTMENT_PAGE_RE = re.compile(
    r"DEPARTMENT\s+OF\s+([\w\s&]+?)(?:\s+ACADEMIC|\s+CLASS|\s+TIME)", re.I
)
MECHANICAL_RE = re.compile(r"MECH", re.I)

ROOM_HEADER_RE = re.compile(r"Room\s*No[.:]*\s*([\d\s]+\d)", re.I)
ROOM_NAME_RE = re.compile(r"Room\s*(?:No)?[.:]*\s*([A-Za-z]+\s*Lab)", re.I)

# --- GRID CONTENT ---
DAY_CODE_RE = re.compile(r"^(MON|TUE|WED|THU|FRI|SAT)$", re.I)
DAY_LINE_RE = re.compile(
    r"^(MON(?:DAY)?|TUE(?:SDAY)?|WED(?:NESDAY)?|THU(?:RSDAY)?|FRI(?:DAY)?|SAT(?:URDAY)?)"
    r"\b\.?\s*(.*)$",
    re.I,
)
TIME_HEADER_RE = re.compile(r"^(09|10|11|12|01|02|03|04)[.:]\d{2}")
TIMESTAMP_RE = re.compile(r"\b\d{1,2}[.:]\d{2}\s*(?:AM|PM)\b", re.I)
NON_CONTENT_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(k) for k in NON_CONTENT_KEYWORDS) + r")\b", re.I
)

ROOM_NO_PREFIX_RE = re.compile(r"^Room\s*No[.:]", re.I)
ROOM_NO_VALUE_RE = re.compile(r"Room\s*No[.:]+\s*(\d+)", re.I)
RNO_PREFIX_RE = re.compile(r"^\(R\.No[.:]", re.I)
RNO_VALUE_RE = re.compile(r"\(R\.No[.:]\s*(\d+)", re.I)
CLOSING_PAREN_RE = re.compile(r"^\d*\)$")
MOOC_RE = re.compile(r"^\(MOOC\)$", re.I)
BARE_ROOM_RE = re.compile(r"^\d{3,4}$")
BREAK_LETTER_RE = re.compile(r"^[BREAKLUNCH]$", re.I)
LAB_WORD_RE = re.compile(r"\bLAB\b", re.I)

# --- TEXT MODE CELLS ---
ROOM_ONLY_LINE_RE = re.compile(
    r"^\(?\s*(?:R\.?\s*No|Room\s*No)[.:]*\s*(\d+)\s*\)?$|^(\d{3,4})$", re.I
)
INLINE_ROOM_RE = re.compile(r"^(.+?)\s*\(\s*R\.?\s*No[.:]*\s*(\d+)\s*\)$", re.I)
LAB_LINE_RE = re.compile(r"^(\S+)\s+LAB$", re.I)
CELL_SPLIT_RE = re.compile(r"\s{2,}|\t")
