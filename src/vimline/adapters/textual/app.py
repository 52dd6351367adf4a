"""Executable Textual app that hosts the modal line editor."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Sequence

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.widgets import Footer, Header, Static

from vimline.buffer import BufferDelta, BufferMirror, RegisterValue
from vimline.modes.mode_manager import ModeManager, create_default_manager
from vimline.runtime import OverlayOptions, SurroundScheme
from vimline.runtime import telemetry

from .controller import TextualUIHooks, TextualVimAdapter


@dataclass
class UIState:
    buffer_text: str = ""
    status_text: str = ""
    mode_text: str = ""
    register_text: str = ""
    history: List[str] = field(default_factory=list)
    undo: List[BufferDelta] = field(default_factory=list)


def render_buffer(mirror: BufferMirror, *, highlight_color: str) -> Text:
    """Buffer text with the cursor cell reversed and surround highlights applied."""

    rendered = Text(mirror.text + " ")
    rendered.stylize("reverse", mirror.cursor, mirror.cursor + 1)
    if mirror.attributes.get("mode") == "visual":
        begin, end = sorted((mirror.mark, mirror.cursor))
        rendered.stylize("underline", begin, end)
    for offset in filter(None, mirror.attributes.get("highlight", "").split(",")):
        position = int(offset)
        rendered.stylize(f"on {highlight_color}", position, position + 1)
    return rendered


class VimlineApp(App[None]):
    """Minimal Textual UI embedding the modal line editor."""

    CSS = """
    Screen {
        layout: vertical;
    }

    #history-view {
        height: 1fr;
        border: round $accent;
        padding: 0 1;
        overflow: auto;
    }

    #buffer-view {
        height: auto;
        min-height: 3;
        border: round $accent;
        padding: 0 1;
    }

    #status-line {
        height: 1;
        background: $surface-darken-1;
        padding: 0 1;
    }
    """

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, options: OverlayOptions, text: str = "") -> None:
        super().__init__()
        self.options = options
        self._initial_text = text
        self._state = UIState()
        self.manager: ModeManager | None = None
        self.adapter: TextualVimAdapter | None = None
        self._history_widget: Static | None = None
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None
        self._undoing = False

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="editor-area"):
            self._history_widget = Static("", id="history-view")
            yield self._history_widget
            self._buffer_widget = Static("", id="buffer-view")
            yield self._buffer_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        self.manager = create_default_manager(self._initial_text, options=self.options)
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            update_mode=self._update_mode,
            accept_line=self._accept_line,
            handle_event=self._handle_event,
            record_change=self._record_change,
            update_register=self._update_register,
            log=telemetry.get_logger("vimline.adapters.textual").debug,
        )
        self.adapter = TextualVimAdapter(self.manager, hooks)
        self.set_interval(0.05, self._process_timeouts)

    def _process_timeouts(self) -> None:
        if self.adapter:
            self.adapter.process_timeouts()

    def on_key(self, event: events.Key) -> None:
        if not self.adapter or event.key == "ctrl+q":
            return
        self.adapter.handle_textual_key(event.key, character=event.character)
        event.stop()

    def _update_buffer(self, mirror: BufferMirror) -> None:
        self._state.buffer_text = mirror.text
        if self._buffer_widget:
            self._buffer_widget.update(
                render_buffer(mirror, highlight_color=self.options.region_highlight)
            )

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        self._render_status()

    def _update_mode(self, mode: str, cursor_style: str) -> None:
        del cursor_style
        self._state.mode_text = mode.upper()
        self._render_status()

    def _render_status(self) -> None:
        if self._status_widget:
            line = f"-- {self._state.mode_text} --  {self._state.status_text}"
            if self._state.register_text:
                line += f"  \"{self._state.register_text}"
            self._status_widget.update(line)

    def _record_change(self, delta: BufferDelta) -> None:
        if not self._undoing:
            self._state.undo.append(delta)

    def _update_register(self, value: RegisterValue) -> None:
        self._state.register_text = value.text.replace("\n", "↵")[:20]
        self._render_status()

    def _undo(self) -> None:
        if not self._state.undo or not self.adapter:
            return
        delta = self._state.undo.pop()
        self._undoing = True
        try:
            self.adapter.push_host_edit(
                BufferMirror(
                    text=delta.before_text,
                    cursor=delta.cursor_before,
                    mark=delta.cursor_before,
                )
            )
        finally:
            self._undoing = False

    def _accept_line(self, line: str) -> None:
        self._state.undo.clear()
        self._state.history.append(line)
        if self._history_widget:
            self._history_widget.update("\n".join(self._state.history))

    def _handle_event(self, name: str, payload: Any | None) -> None:
        if name == "host.undo":
            self._undo()
        elif name.startswith("host."):
            self._update_status(name)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the vimline Textual demo.")
    parser.add_argument(
        "--text",
        default="",
        help="Initial contents of the edit line",
    )
    parser.add_argument(
        "--surround-bindkey",
        choices=[scheme.value for scheme in SurroundScheme],
        default=None,
        help="Surround key scheme (default: VIMLINE_SURROUND_BINDKEY or classic)",
    )
    parser.add_argument(
        "--keytimeout",
        type=float,
        default=None,
        help="Seconds to wait for the next key of an ambiguous sequence",
    )
    parser.add_argument(
        "--log-preset",
        choices=("development", "quiet", "production"),
        default=None,
        help="Telemetry preset (default: environment configuration)",
    )
    return parser.parse_args(argv)


def build_options(args: argparse.Namespace) -> OverlayOptions:
    options = OverlayOptions.from_env()
    changes: dict[str, object] = {}
    if args.surround_bindkey is not None:
        changes["surround_bindkey"] = SurroundScheme(args.surround_bindkey)
    if args.keytimeout is not None:
        changes["keytimeout"] = args.keytimeout
    return replace(options, **changes) if changes else options


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    app = VimlineApp(options=build_options(args), text=args.text)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
