"""Decoding surround commands out of resolved key sequences."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from vimline.keymaps import KeySequence

SurroundAction = Literal["select", "add", "change", "delete", "yank"]
SurroundScope = Literal["inner", "outer"]

_S_PREFIX_ACTIONS: dict[str, SurroundAction] = {
    "a": "add",
    "d": "delete",
    "r": "change",
}
_CLASSIC_ACTIONS: dict[str, SurroundAction] = {
    "c": "change",
    "d": "delete",
}
_TEXT_OBJECT_ACTIONS: dict[str, SurroundAction] = {
    "c": "change",
    "d": "delete",
    "y": "yank",
}
_SCOPES: dict[str, SurroundScope] = {"i": "inner", "a": "outer"}


@dataclass(frozen=True, slots=True)
class PendingSurroundOp:
    """Surround command decoded from one key sequence.

    ``text_object`` marks the operator forms (``ci(``, ``da"``, ``yi[``),
    which act on the scoped span instead of the delimiters.
    """

    action: SurroundAction
    delimiter: str
    scope: Optional[SurroundScope] = None
    text_object: bool = False


def decode_surround(keys: KeySequence) -> Optional[PendingSurroundOp]:
    """Decode ``keys`` or return ``None`` when they are not a surround command.

    Recognised forms: ``S<d>``/``ys<d>``/``sa<d>`` add, ``cs<d>``/``sr<d>``
    change, ``ds<d>``/``sd<d>`` delete, ``i<d>``/``a<d>`` select and
    ``{c,d,y}{i,a}<d>`` text objects.
    """

    if not all(stroke.is_printable for stroke in keys):
        return None
    chars = "".join(stroke.value for stroke in keys)
    if len(chars) < 2:
        return None
    head, delimiter = chars[:-1], chars[-1]

    if head in ("S", "ys"):
        return PendingSurroundOp(action="add", delimiter=delimiter)
    if len(head) == 1 and head in _SCOPES:
        return PendingSurroundOp(
            action="select", delimiter=delimiter, scope=_SCOPES[head]
        )
    if len(head) != 2:
        return None
    if head[0] == "s" and head[1] in _S_PREFIX_ACTIONS:
        return PendingSurroundOp(action=_S_PREFIX_ACTIONS[head[1]], delimiter=delimiter)
    if head[1] == "s" and head[0] in _CLASSIC_ACTIONS:
        return PendingSurroundOp(action=_CLASSIC_ACTIONS[head[0]], delimiter=delimiter)
    if head[0] in _TEXT_OBJECT_ACTIONS and head[1] in _SCOPES:
        return PendingSurroundOp(
            action=_TEXT_OBJECT_ACTIONS[head[0]],
            delimiter=delimiter,
            scope=_SCOPES[head[1]],
            text_object=True,
        )
    return None


__all__ = ["PendingSurroundOp", "SurroundAction", "SurroundScope", "decode_surround"]
