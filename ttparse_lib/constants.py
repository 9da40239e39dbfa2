"""
ttparse_lib/constants.py: Fixed vocabularies and layout constants for timetable pages.
"""

# --- CANONICAL GRID ---

TIME_SLOTS = [
    "09:00-09:55",
    "09:55-10:50",
    "11:10-12:05",
    "12:05-01:00",
    "02:15-03:10",
    "03:10-04:05",
]
NUM_SLOTS = len(TIME_SLOTS)

DAY_NAMES = {
    "MON": "Monday",
    "TUE": "Tuesday",
    "WED": "Wednesday",
    "THU": "Thursday",
    "FRI": "Friday",
    "SAT": "Saturday",
}

# Letters and words printed vertically in the BREAK/LUNCH gap columns.
SKIP_WORDS = {
    "B", "R", "E", "A", "K", "L", "U", "N", "C", "H",
    "BREAK", "LUNCH", "DAY", "/HR", "HOUR", "TO", "AM", "PM",
}
BREAK_LETTERS = {"B", "E", "K"}
LUNCH_LETTERS = {"L", "U", "H"}

# Lines that end a day's continuation scan in text mode.
NON_CONTENT_KEYWORDS = (
    "HOUR",
    "HOURS",
    "FACULTY",
    "ACADEMIC",
    "COORDINATOR",
    "SIGNATURE",
    "PRINCIPAL",
    "DEAN",
    "HOD",
    "TIME TABLE",
    "TIMETABLE",
    "CLASS TEACHER",
    "W.E.F",
)

# Subjects that always occupy two consecutive slots besides "... LAB".
TWO_HOUR_SUBJECTS = {"QAVA", "CP"}

# --- GEOMETRY (PDF points, y grows upwards) ---

HEADER_ROW_TOLERANCE = 5
DAY_BAND_TOLERANCE = 14
BASELINE_TOLERANCE = 5
MERGE_Y_TOLERANCE = 2
MERGE_GAP = 3
MERGE_FRAGMENT_LEN = 3

# Grid content starts to the right of the day label column.
GRID_MIN_X = 90
# Default room headers are only trusted in the page banner.
HEADER_ZONE_MIN_Y = 590
# Time-slot captions sit above the first day row.
TIME_HEADER_MIN_Y = 640
TIME_HEADER_CLUSTER_PX = 40

FIRST_COLUMN_MARGIN = 25
COLUMN_MARGIN = 10
COLUMN_GAP = 11
LAST_COLUMN_EXTENT = 50

GAP_LETTER_SEPARATION = 50
GRID_LEFT_EDGE = 95
DEFAULT_BREAK_TO_LUNCH = 150
POST_LUNCH_SLOT_WIDTH = 65

FALLBACK_COLUMNS = [
    (95, 170),
    (170, 237),
    (255, 325),
    (325, 395),
    (410, 475),
    (475, 550),
]

SAMPLE_ITEMS = 40
SAMPLE_CHARS = 400

# --- SKIP REASONS ---

REASON_JSON = "JSON parse failed"
REASON_EMPTY = "Empty page"
REASON_NO_HEADER = "No section header found"
REASON_NO_ENTRIES = "0 entries extracted"

# --- ROOMS ---

KNOWN_ROOMS = [
    "101", "106", "120", "125", "126", "128", "129", "131", "132", "133", "134",
    "201", "207", "208", "222", "224", "229", "233",
    "301", "302", "311", "321", "322", "323", "324", "327", "328", "330", "331", "332",
    "503", "504", "519",
    "603", "605", "606", "609", "610", "611", "612", "618",
    "703", "704", "705", "706", "709", "710", "711", "712", "715", "718",
    "802", "803", "817", "818", "824", "825",
    "1805",
    "2003", "2010", "2011", "2052",
    "2303", "2406", "2407", "2452", "2453", "2456",
    "2603", "2702", "2703", "2706", "2802", "2852", "2853",
    "4001", "4002", "4003", "4004", "4101", "4102", "4103",
    "4200", "4201", "4202", "4203", "4204", "4215", "4216", "4217", "4218", "4219",
    "4221",
    "4300", "4301", "4302", "4303", "4304", "4315", "4316", "4317", "4318", "4319",
    "4320", "4321", "4324",
    "4416", "4417", "4418", "4419",
]
