"""
ttparse_lib/merger.py: Repairs tokens the renderer split across adjacent fragments.

Room codes and roman numerals are frequently emitted as several runs
("285" + "2", "(R.No.80" + "3" + ")"). They must be rejoined before any
pattern matching looks at them.
"""
import logging

from .constants import MERGE_FRAGMENT_LEN, MERGE_GAP, MERGE_Y_TOLERANCE
from .models import TextFragment

log_layout = logging.getLogger("ttparse.layout")


def should_merge(left: TextFragment, right: TextFragment) -> bool:
    """True if `right` continues the token that `left` ends."""
    gap = right.x - left.right
    is_fragment = len(left.text) <= MERGE_FRAGMENT_LEN or len(right.text) <= MERGE_FRAGMENT_LEN
    return (
        abs(right.y - left.y) <= MERGE_Y_TOLERANCE
        and -MERGE_GAP <= gap < MERGE_GAP
        and is_fragment
    )


def merge_pair(left: TextFragment, right: TextFragment) -> TextFragment:
    return TextFragment(
        x=left.x,
        y=left.y,
        width=right.right - left.x,
        text=left.text + right.text,
    )


def merge_adjacent(fragments):
    """
    Greedily merges neighbouring fragments, left to right.
    The input order is kept; callers sort by x (or by y, x) beforehand.
    """
    if len(fragments) <= 1:
        return list(fragments)
    merged = [fragments[0]]
    for frag in fragments[1:]:
        prev = merged[-1]
        if should_merge(prev, frag):
            merged[-1] = merge_pair(prev, frag)
            log_layout.debug("Merged '%s' + '%s'", prev.text, frag.text)
        else:
            merged.append(frag)
    return merged
