"""Visual mode: the selection runs from the mark to the cursor."""

from __future__ import annotations

from typing import Optional

from vimline.keymaps import KeySequence

from .base_mode import KeymapMode, ModeResult


class VisualMode(KeymapMode):
    name = "visual"

    def on_enter(self, previous: Optional[str]) -> None:
        del previous
        self._pending.clear()
        buffer = self.context.buffer
        buffer.set_mark(buffer.cursor)
        self.context.bus.emit(
            "visual.selection", {"mark": buffer.mark, "cursor": buffer.cursor}
        )

    def on_exit(self, next_mode: Optional[str]) -> None:
        super().on_exit(next_mode)
        self.context.select_origin = None
        self.context.bus.emit("visual.clear", {"mark": self.context.buffer.mark})

    def default_handler(self, keys: KeySequence) -> ModeResult:
        del keys
        return ModeResult(consumed=True, status="noop", message="unbound_key")


__all__ = ["VisualMode"]
