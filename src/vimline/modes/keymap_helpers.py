"""Helper utilities for keymap-driven modes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from vimline.keymaps import KeymapResolver

if TYPE_CHECKING:  # pragma: no cover
    from .base_mode import ModeContext


def require_keymap_resolver(context: "ModeContext") -> KeymapResolver:
    resolver = context.extras.get("keymap_resolver")
    if not isinstance(resolver, KeymapResolver):
        raise RuntimeError("ModeContext.extras missing 'keymap_resolver'")
    return resolver


__all__ = [
    "require_keymap_resolver",
]
