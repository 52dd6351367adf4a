"""Mode transitions and small editing actions shared across modes."""

from __future__ import annotations

from vimline.keymaps import ResolutionMatch
from vimline.modes.base_mode import ModeContext, ModeResult


def enter_insert_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(
        consumed=True, switch_to="insert", variant="insert", message="enter_insert"
    )


def enter_append_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(
        consumed=True, switch_to="insert", variant="append", message="enter_append"
    )


def exit_to_normal_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, switch_to="normal", message="exit_to_normal")


def enter_visual_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, switch_to="visual", message="enter_visual")


def open_line_below(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.host.invoke("vi-open-line-below")
    return ModeResult(consumed=True, switch_to="insert", variant="insert")


def open_line_above(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.host.invoke("vi-open-line-above")
    return ModeResult(consumed=True, switch_to="insert", variant="insert")


def substitute(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """``s``: drop the character under the cursor and start inserting."""

    del match
    context.host.invoke("vi-delete-char")
    return ModeResult(consumed=True, switch_to="insert", variant="insert")


def operator_pending(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """A lone operator key timed out: hold it until the motion arrives."""

    context.pending_keys = match.keys.strokes
    return ModeResult(consumed=True, status="pending", message="operator")


def noop_action(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, status="noop")


__all__ = [
    "enter_append_mode",
    "enter_insert_mode",
    "enter_visual_mode",
    "exit_to_normal_mode",
    "noop_action",
    "open_line_above",
    "open_line_below",
    "operator_pending",
    "substitute",
]
