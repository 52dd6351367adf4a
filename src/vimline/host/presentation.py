"""Cursor style requests for each mode."""

from __future__ import annotations

from vimline.runtime import OverlayOptions


def cursor_style_for(mode: str, options: OverlayOptions) -> str:
    """Escape sequence the host should emit when ``mode`` becomes active."""

    if mode == "insert":
        return options.insert_mode_cursor
    return options.normal_mode_cursor


__all__ = ["cursor_style_for"]
