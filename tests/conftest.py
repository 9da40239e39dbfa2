import pytest

from ttparse_lib.extractor import encode_page
from ttparse_lib.models import TextFragment


def frag(x, y, text, width=None):
    """Builds a fragment; width defaults to 5 points per character."""
    return TextFragment(x=x, y=y, width=width if width is not None else 5 * len(text), text=text)


def header_fragments(semester_row=None):
    """Banner of a CSE page: department, split roman numeral, split room digits."""
    semester_row = semester_row or [
        frag(200, 760, "I", 4),
        frag(208, 760, "V", 5),
        frag(218, 760, "SEMESTER", 50),
        frag(272, 760, "[SECTION-A1]", 70),
    ]
    return [
        frag(200, 780, "DEPARTMENT", 60),
        frag(265, 780, "OF", 12),
        frag(282, 780, "COMPUTER", 50),
        frag(337, 780, "SCIENCE", 45),
        *semester_row,
        frag(200, 740, "Room", 25),
        frag(230, 740, "No:", 15),
        frag(250, 740, "2", 5),
        frag(260, 740, "702", 15),
    ]


def time_header_fragments():
    return [
        frag(110, 700, "09:00"),
        frag(180, 700, "09:55"),
        frag(265, 700, "11:10"),
        frag(335, 700, "12:05"),
        frag(420, 700, "02:15"),
        frag(490, 700, "03:10"),
    ]


def grid_fragments():
    return [
        # Monday: a lab, an inline split room reference, a MOOC and a bare room.
        frag(50, 600, "MON"),
        frag(115, 600, "DSP", 20),
        frag(140, 600, "LAB", 20),
        frag(250, 600, "B", 4),
        frag(270, 600, "CN", 10),
        frag(340, 600, "OS", 10),
        frag(340, 590, "(R.No.80", 40),
        frag(380, 590, "3", 5),
        frag(385, 590, ")", 3),
        frag(425, 600, "AI", 10),
        frag(425, 592, "(MOOC)", 30),
        frag(495, 600, "ML", 10),
        frag(495, 588, "605", 15),
        # Tuesday: a two-hour activity and a two-hour subject with no free slot.
        frag(50, 560, "TUE"),
        frag(115, 560, "QAVA", 20),
        frag(270, 560, "CP", 10),
        frag(340, 560, "DBMS", 20),
    ]


def sample_page():
    return header_fragments() + time_header_fragments() + grid_fragments()


@pytest.fixture
def page_fragments():
    return sample_page()


@pytest.fixture
def page_dump():
    return encode_page(sample_page())


SAMPLE_TEXT = """\
DEPARTMENT OF ELECTRONICS
B.Tech VI Semester Section-2
Room No: 322
MON DSP  CN  OS
(R.No.605)
ML LAB
TUE VLSI (R.No.4201)
EMI  CS
03.10 PM
Faculty: Dr. Rao
"""


@pytest.fixture
def sample_text():
    return SAMPLE_TEXT
