"""Surround engine: delimiter pairs, search and key decoding."""

from .keys import PendingSurroundOp, decode_surround
from .pairs import DEFAULT_PAIRS, MOVE_AROUND_OPENERS, SurroundPairs
from .search import SurroundSpan, move_around_target, search_surround, substr_pos

__all__ = [
    "DEFAULT_PAIRS",
    "MOVE_AROUND_OPENERS",
    "PendingSurroundOp",
    "SurroundPairs",
    "SurroundSpan",
    "decode_surround",
    "move_around_target",
    "search_surround",
    "substr_pos",
]
