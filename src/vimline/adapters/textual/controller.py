"""Textual adapter that feeds key events to a ModeManager and surfaces bus events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from vimline.buffer import BufferDelta, BufferMirror, RegisterValue
from vimline.keymaps import ESCAPE, KeyStroke
from vimline.modes import ModeResult
from vimline.modes.mode_manager import ModeManager


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


# Textual key names that map onto control strokes.
_NAMED_CONTROLS: Dict[str, KeyStroke] = {
    "escape": ESCAPE,
    "enter": KeyStroke.control("M"),
    "return": KeyStroke.control("M"),
    "tab": KeyStroke.control("I"),
    "backspace": KeyStroke.control("?"),
    "ctrl+h": KeyStroke.control("?"),
    "ctrl+underscore": KeyStroke.control("_"),
    "ctrl+left_square_bracket": ESCAPE,
}


def textual_key_to_stroke(key: str, character: Optional[str] = None) -> Optional[KeyStroke]:
    """Translate a Textual ``events.Key`` (``key``, ``character``) to a stroke."""

    if key in _NAMED_CONTROLS:
        return _NAMED_CONTROLS[key]
    if key.startswith("ctrl+") and len(key) == 6:
        return KeyStroke.control(key[-1])
    if key == "space":
        return KeyStroke.char(" ")
    if character and len(character) == 1:
        return KeyStroke.from_raw(character)
    if not key:
        return None
    return KeyStroke.named(key)


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    update_mode: Callable[[str, str], None] = _noop
    accept_line: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    record_change: Callable[[BufferDelta], None] = _noop
    update_register: Callable[[RegisterValue], None] = _noop
    log: Callable[[str], None] = _noop


class TextualVimAdapter:
    """Bridges ModeManager + bus events to a Textual-friendly surface.

    Implements ``BufferSync`` so widgets can pull snapshots and push pastes.
    Every buffer change reaches ``hooks.record_change`` as a ``BufferDelta``
    (the host keeps undo history from these) and every register write
    reaches ``hooks.update_register``.
    """

    FORWARDED_EVENTS = (
        "visual.selection",
        "visual.clear",
        "surround.highlight",
        "surround.unhighlight",
        "host.undo",
        "host.history-incremental-search-backward",
        "host.history-incremental-search-forward",
        "host.up-history",
        "host.down-history",
    )

    def __init__(self, manager: ModeManager, hooks: TextualUIHooks) -> None:
        self.manager = manager
        self.hooks = hooks
        self.highlights: tuple[int, ...] = ()
        self._subscribe_events()
        self._refresh_buffer()
        self._refresh_mode()

    def handle_textual_key(self, key: str, *, character: Optional[str] = None) -> Optional[ModeResult]:
        """Translate a Textual key event into a KeyStroke and dispatch it."""

        stroke = textual_key_to_stroke(key, character)
        if stroke is None:
            return None
        self._log_state("key ->", key=stroke.token)
        result = self.manager.handle_key(stroke)
        self._after_mode_result(result)
        self._log_state(
            "result <-",
            consumed=result.consumed,
            status=result.status,
            message=result.message,
            switch_to=result.switch_to,
            timeout_ms=result.timeout_ms,
        )
        return result

    def pull_buffer(self) -> BufferMirror:
        return self.manager.context.buffer.mirror(attributes=self._attributes())

    def push_host_edit(self, mirror: BufferMirror) -> None:
        """Replace the line with text edited outside the overlay (a paste)."""

        buffer = self.manager.context.buffer
        buffer.replace_range(0, buffer.length, mirror.text, label="host_edit", cursor=mirror.cursor)
        buffer.set_mark(mirror.mark)
        self.manager.request_redraw()

    def process_timeouts(self) -> Dict[str, ModeResult]:
        """Forward expired timers and surface results to the UI."""

        results = self.manager.process_timeouts()
        for mode_name, outcome in results.items():
            self.hooks.update_status(f"{mode_name}:{outcome.status}")
            self._log_state("timeout ->", source_mode=mode_name, status=outcome.status)
        return results

    def _after_mode_result(self, result: ModeResult) -> None:
        status = result.message or result.status
        if status:
            self.hooks.update_status(status)

    def _subscribe_events(self) -> None:
        bus = self.manager.context.bus
        bus.subscribe("redraw", lambda _payload: self._refresh_buffer())
        bus.subscribe("mode.changed", lambda _payload: self._refresh_mode())
        bus.subscribe("host.accept-line", self._on_accept_line)
        buffer = self.manager.context.buffer
        buffer.on_change(self._on_buffer_change)
        buffer.register.subscribe(self.hooks.update_register)
        for event in self.FORWARDED_EVENTS:
            bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)
        if name == "surround.highlight" and isinstance(payload, dict):
            self.highlights = tuple(payload.get("offsets", ()))
        elif name == "surround.unhighlight":
            self.highlights = ()
        self.hooks.handle_event(name, payload)

    def _on_buffer_change(self, delta: BufferDelta) -> None:
        self._log_state("change ->", label=delta.label, begin=delta.begin, end=delta.end)
        self.hooks.record_change(delta)

    def _on_accept_line(self, payload: object | None) -> None:
        del payload
        line = self.manager.context.buffer.text
        self._log_state("accept ->", line=line)
        self.hooks.accept_line(line)
        self.manager.begin_edit()

    def _attributes(self) -> Dict[str, str]:
        attributes = {"mode": self.manager.mode_state.name}
        if self.highlights:
            attributes["highlight"] = ",".join(str(offset) for offset in self.highlights)
        return attributes

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(self.pull_buffer())

    def _refresh_mode(self) -> None:
        state = self.manager.mode_state
        label = state.name if not state.variant else f"{state.name}:{state.variant}"
        self.hooks.update_mode(label, self.manager.cursor_style)

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        buffer = self.manager.context.buffer
        return {
            "mode": self.manager.mode_state.name,
            "cursor": buffer.cursor,
            "mark": buffer.mark,
            "pending_timeout": self.manager.pending_timeout_seconds() is not None,
            "buffer": buffer.name,
            "buffer_version": buffer.version,
        }


__all__ = ["TextualUIHooks", "TextualVimAdapter", "textual_key_to_stroke"]
