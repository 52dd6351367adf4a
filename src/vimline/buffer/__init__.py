"""Line buffer, cursor/mark state and the cut/yank register."""

from .buffer import BufferDelta, BufferView, LineBuffer, Transaction
from .lines import (
    line_bounds,
    line_change_bounds,
    line_content_bounds,
    normal_cursor,
    whole_line_delete_bounds,
)
from .registers import Register, RegisterValue
from .state import BufferState
from .sync import BufferMirror, BufferSync, BufferValidationError

__all__ = [
    "LineBuffer",
    "BufferState",
    "Register",
    "RegisterValue",
    "BufferDelta",
    "BufferView",
    "Transaction",
    "BufferMirror",
    "BufferSync",
    "BufferValidationError",
    "clamp_offset",
    "ensure_offset",
    "ensure_range",
    "line_bounds",
    "line_change_bounds",
    "line_content_bounds",
    "normal_cursor",
    "whole_line_delete_bounds",
]
