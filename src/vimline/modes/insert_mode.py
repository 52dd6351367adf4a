"""Insert mode: bound editing keys, self-insert for everything printable."""

from __future__ import annotations

from typing import Optional

from vimline.buffer.lines import line_content_bounds, normal_cursor
from vimline.keymaps import KeySequence
from vimline.runtime import telemetry

from .base_mode import KeymapMode, ModeResult


class InsertMode(KeymapMode):
    """Insert with two entry variants.

    ``insert`` keeps the cursor where it is; ``append`` moves it one
    character right first (never past the end of the line).
    """

    name = "insert"

    def on_enter(self, previous: Optional[str]) -> None:
        del previous
        self._pending.clear()
        if self.context.insert_variant != "append":
            return
        buffer = self.context.buffer
        _, line_end = line_content_bounds(buffer.text, buffer.cursor)
        if buffer.cursor < line_end:
            buffer.set_cursor(buffer.cursor + 1)

    def on_exit(self, next_mode: Optional[str]) -> None:
        super().on_exit(next_mode)
        buffer = self.context.buffer
        buffer.set_cursor(normal_cursor(buffer.text, buffer.cursor))

    def default_handler(self, keys: KeySequence) -> ModeResult:
        if not all(stroke.is_printable for stroke in keys):
            telemetry.record_event(
                "insert.unbound_key", level="debug", data={"keys": keys.chars}
            )
            return ModeResult(consumed=False, status="miss", message="unbound_key")
        text = "".join(stroke.value for stroke in keys)
        self.context.host.invoke("self-insert", text)
        return ModeResult(consumed=True, message="self_insert")


__all__ = ["InsertMode"]
