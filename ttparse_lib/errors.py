"""
ttparse_lib/errors.py: Exceptions raised by the timetable parser.
"""


class TimetableParseError(Exception):
    """Base class for all timetable parsing failures."""


class UnparseableSourceError(TimetableParseError):
    """The document could not be decoded into text or fragments at all."""

    def __init__(self, source, reason):
        self.source, self.reason = source, reason
        super().__init__(f"Could not read {source}: {reason}")
