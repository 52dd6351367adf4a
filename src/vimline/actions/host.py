"""Actions that forward to host line-editor primitives."""

from __future__ import annotations

from functools import partial
from typing import Optional

from vimline.keymaps import KeyStroke, ResolutionMatch
from vimline.modes.base_mode import ModeContext, ModeResult


def run_primitive(
    context: ModeContext, match: ResolutionMatch, *, primitive: str
) -> ModeResult:
    del match
    context.host.invoke(primitive)
    return ModeResult(consumed=True, message=primitive)


def find_char(
    context: ModeContext, match: ResolutionMatch, *, primitive: str
) -> ModeResult:
    """Read the target character, then run the find primitive."""

    del match
    return context.ask(primitive, partial(_finish_find, primitive=primitive))


def _finish_find(
    context: ModeContext, key: Optional[KeyStroke], *, primitive: str
) -> ModeResult:
    if key is None or not key.is_printable:
        return ModeResult(consumed=True, status="cancelled", message=primitive)
    moved = context.host.invoke(primitive, key.value)
    if moved is None:
        return ModeResult(consumed=True, status="noop", message="char_not_found")
    return ModeResult(consumed=True, message=primitive)


__all__ = ["find_char", "run_primitive"]
