"""
ttparse_lib/columns.py: Resolves the six time-slot column spans of a page grid.

Resolution is a chain of strategies behind `ColumnResolver.resolve`. Each strategy
returns six `ColumnBoundary` spans or None; the first non-None result is used.
The spans are only valid for the page they were computed from.
"""
import logging
import math

from .constants import (
    BREAK_LETTERS,
    COLUMN_GAP,
    COLUMN_MARGIN,
    DEFAULT_BREAK_TO_LUNCH,
    FALLBACK_COLUMNS,
    FIRST_COLUMN_MARGIN,
    GAP_LETTER_SEPARATION,
    GRID_LEFT_EDGE,
    LAST_COLUMN_EXTENT,
    LUNCH_LETTERS,
    NUM_SLOTS,
    POST_LUNCH_SLOT_WIDTH,
    TIME_HEADER_CLUSTER_PX,
    TIME_HEADER_MIN_Y,
)
from .models import ColumnBoundary
from .patterns import TIME_HEADER_RE

log_columns = logging.getLogger("ttparse.columns")


def slot_index(x, boundaries) -> int:
    """
    Returns the column whose span contains `x`, or -1 for text that falls in
    the BREAK/LUNCH gaps or outside the grid. Coordinates are whole pixels, so
    fractional positions are truncated before the inclusive span test.
    """
    px = math.floor(x)
    for i, bound in enumerate(boundaries):
        if bound.contains(px):
            return i
    return -1


def cluster_positions(xs, distance=TIME_HEADER_CLUSTER_PX):
    """Keeps the first x of every group of positions closer than `distance`."""
    edges = []
    for x in sorted(xs):
        if not any(abs(edge - x) < distance for edge in edges):
            edges.append(x)
    return sorted(edges)


class TimeHeaderStrategy:
    """Derives columns from the x-positions of the printed slot start times."""

    name = "time-headers"

    def __init__(self, min_y=TIME_HEADER_MIN_Y):
        self.min_y = min_y

    def resolve(self, fragments):
        headers = [
            f for f in fragments if TIME_HEADER_RE.match(f.text) and f.y > self.min_y
        ]
        edges = cluster_positions(f.x for f in headers)
        log_columns.debug("Time headers: %d fragments, %d column edges", len(headers), len(edges))
        if len(edges) < NUM_SLOTS:
            return None
        return self.spans_from_edges(edges[:NUM_SLOTS])

    @staticmethod
    def spans_from_edges(edges):
        spans = []
        for i, edge in enumerate(edges):
            left = edge - (FIRST_COLUMN_MARGIN if i == 0 else COLUMN_MARGIN)
            right = edges[i + 1] - COLUMN_GAP if i < len(edges) - 1 else edge + LAST_COLUMN_EXTENT
            spans.append(ColumnBoundary(left, right))
        return spans


class BreakLunchStrategy:
    """
    Derives columns from the vertical BREAK and LUNCH captions. Two slots lie
    left of BREAK, two between BREAK and LUNCH, two right of LUNCH.
    """

    name = "break-lunch"

    def resolve(self, fragments):
        break_letters = [f for f in fragments if f.text in BREAK_LETTERS]
        lunch_letters = [f for f in fragments if f.text in LUNCH_LETTERS]
        if len(break_letters) < 2:
            return None

        lunch_x = None
        if len(lunch_letters) >= 2:
            lunch_x = round(sum(f.x for f in lunch_letters) / len(lunch_letters))

        morning = break_letters
        if lunch_x is not None:
            morning = [f for f in break_letters if abs(f.x - lunch_x) > GAP_LETTER_SEPARATION]
        if len(morning) < 2:
            morning = break_letters
        break_x = round(sum(f.x for f in morning) / len(morning))

        if lunch_x is None or abs(lunch_x - break_x) < GAP_LETTER_SEPARATION:
            lunch_x = break_x + DEFAULT_BREAK_TO_LUNCH
        log_columns.debug("BREAK at x=%d, LUNCH at x=%d", break_x, lunch_x)
        return self.spans_from_gaps(break_x, lunch_x)

    @staticmethod
    def spans_from_gaps(break_x, lunch_x):
        pre_width = (break_x - (GRID_LEFT_EDGE + 5)) / 2
        mid_width = (lunch_x - break_x - 20) / 2
        post_width = POST_LUNCH_SLOT_WIDTH
        after_break, after_lunch = break_x + 10, lunch_x + 10
        raw = [
            (GRID_LEFT_EDGE, GRID_LEFT_EDGE + pre_width),
            (GRID_LEFT_EDGE + pre_width, break_x - 5),
            (after_break, after_break + mid_width),
            (after_break + mid_width, lunch_x - 5),
            (after_lunch, after_lunch + post_width),
            (after_lunch + post_width, after_lunch + 2 * post_width + 10),
        ]
        return [ColumnBoundary(int(left), int(right)) for left, right in raw]


class FixedLayoutStrategy:
    """Spans tuned on typical layouts; used when nothing on the page helps."""

    name = "fixed"

    def __init__(self, spans=None):
        self.spans = spans or FALLBACK_COLUMNS

    def resolve(self, fragments):
        return [ColumnBoundary(left, right) for left, right in self.spans]


class ColumnResolver:
    """Tries each strategy in order and returns the first set of six spans."""

    def __init__(self, strategies=None):
        self.strategies = strategies or [
            TimeHeaderStrategy(),
            BreakLunchStrategy(),
            FixedLayoutStrategy(),
        ]

    def resolve(self, fragments):
        for strategy in self.strategies:
            spans = strategy.resolve(fragments)
            if spans:
                log_columns.info(
                    "Columns via %s: %s",
                    strategy.name,
                    ", ".join(f"{b.left}-{b.right}" for b in spans),
                )
                return spans
        return None


def resolve_columns(fragments, resolver=None):
    """Six column spans for a page of fragments."""
    return (resolver or ColumnResolver()).resolve(fragments)
