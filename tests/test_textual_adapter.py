from __future__ import annotations

import time
from typing import Any, List, Optional

from vimline.adapters.textual import TextualUIHooks, TextualVimAdapter, textual_key_to_stroke
from vimline.buffer import BufferDelta, BufferMirror, LineBuffer, RegisterValue
from vimline.host import BuiltinPrimitives
from vimline.keymaps import ESCAPE, KeymapRegistry, KeymapResolver, KeyStroke
from vimline.keymaps.defaults import load_default_keymaps
from vimline.modes import InsertMode, ModeBus, ModeContext, NormalMode, VisualMode
from vimline.modes.mode_manager import ModeManager
from vimline.runtime import OverlayOptions


def make_manager(options: Optional[OverlayOptions] = None) -> ModeManager:
    options = options or OverlayOptions()
    registry = KeymapRegistry()
    load_default_keymaps(registry, options=options)
    resolver = KeymapResolver(registry, timeout_ms=options.keytimeout_ms)
    buffer = LineBuffer()
    bus = ModeBus()
    context = ModeContext(
        buffer=buffer,
        bus=bus,
        host=BuiltinPrimitives(buffer, emit=bus.emit),
        options=options,
    )
    manager = ModeManager(
        context, keymap_registry=registry, keymap_resolver=resolver, load_defaults=False
    )
    manager.register_mode(InsertMode)
    manager.register_mode(NormalMode)
    manager.register_mode(VisualMode)
    return manager


def type_keys(adapter: TextualVimAdapter, text: str) -> None:
    for char in text:
        adapter.handle_textual_key(char, character=char)


def test_key_translation() -> None:
    assert textual_key_to_stroke("escape") == ESCAPE
    assert textual_key_to_stroke("enter") == KeyStroke.control("M")
    assert textual_key_to_stroke("backspace") == KeyStroke.control("?")
    assert textual_key_to_stroke("ctrl+k") == KeyStroke.control("K")
    assert textual_key_to_stroke("space", " ") == KeyStroke.char(" ")
    assert textual_key_to_stroke("left_parenthesis", "(") == KeyStroke.char("(")
    assert textual_key_to_stroke("f1") == KeyStroke.named("f1")
    assert textual_key_to_stroke("") is None


def test_adapter_updates_buffer_and_status() -> None:
    manager = make_manager()
    updates: List[str] = []
    statuses: List[str] = []
    modes: List[str] = []
    hooks = TextualUIHooks(
        update_buffer=lambda mirror: updates.append(mirror.text),
        update_status=statuses.append,
        update_mode=lambda mode, cursor: modes.append(mode),
    )
    adapter = TextualVimAdapter(manager, hooks)

    type_keys(adapter, "hi")
    adapter.handle_textual_key("escape")
    adapter.handle_textual_key("a", character="a")

    assert updates[-1] == "hi"
    assert "self_insert" in statuses
    assert "enter_append" in statuses
    assert modes == ["insert:insert", "normal", "insert:append"]


def test_adapter_accept_line_starts_new_session() -> None:
    manager = make_manager()
    accepted: List[str] = []
    hooks = TextualUIHooks(update_buffer=lambda mirror: None, accept_line=accepted.append)
    adapter = TextualVimAdapter(manager, hooks)

    type_keys(adapter, "ls")
    adapter.handle_textual_key("enter")

    assert accepted == ["ls"]
    assert manager.context.buffer.text == ""
    assert manager.mode_state.name == "insert"


def test_adapter_tracks_surround_highlight() -> None:
    manager = make_manager()
    mirrors: List[BufferMirror] = []
    events: List[tuple[str, Any]] = []
    hooks = TextualUIHooks(
        update_buffer=mirrors.append,
        handle_event=lambda name, payload: events.append((name, payload)),
    )
    adapter = TextualVimAdapter(manager, hooks)
    manager.begin_edit('say "hi" now', cursor=5)
    adapter.handle_textual_key("escape")

    for key, char in (("c", "c"), ("s", "s"), ("quotation_mark", '"')):
        adapter.handle_textual_key(key, character=char)
    assert adapter.highlights == (4, 7)
    assert mirrors[-1].attributes["highlight"] == "4,7"
    adapter.handle_textual_key("left_parenthesis", character="(")

    assert adapter.highlights == ()
    assert mirrors[-1].text == "say (hi) now"
    assert "highlight" not in mirrors[-1].attributes
    assert [name for name, _ in events] == ["surround.highlight", "surround.unhighlight"]


def test_adapter_forwards_visual_events() -> None:
    manager = make_manager()
    events: List[str] = []
    hooks = TextualUIHooks(
        update_buffer=lambda mirror: None,
        handle_event=lambda name, payload: events.append(name),
    )
    adapter = TextualVimAdapter(manager, hooks)
    manager.begin_edit("abc", cursor=0)

    adapter.handle_textual_key("escape")
    adapter.handle_textual_key("v", character="v")
    adapter.handle_textual_key("escape")

    assert events == ["visual.selection", "visual.clear"]


def test_adapter_push_host_edit() -> None:
    manager = make_manager()
    updates: List[str] = []
    adapter = TextualVimAdapter(
        manager, TextualUIHooks(update_buffer=lambda mirror: updates.append(mirror.text))
    )

    adapter.push_host_edit(BufferMirror(text="pasted", cursor=3, mark=0))

    assert updates[-1] == "pasted"
    assert adapter.pull_buffer().cursor == 3
    assert adapter.pull_buffer().attributes["mode"] == "insert"


def test_adapter_process_timeouts() -> None:
    manager = make_manager(OverlayOptions(keytimeout=0.001))
    statuses: List[str] = []
    adapter = TextualVimAdapter(
        manager,
        TextualUIHooks(update_buffer=lambda mirror: None, update_status=statuses.append),
    )
    manager.begin_edit("hello world", cursor=0)
    adapter.handle_textual_key("escape")

    adapter.handle_textual_key("d", character="d")
    time.sleep(0.01)
    results = adapter.process_timeouts()
    adapter.handle_textual_key("w", character="w")

    assert results["normal"].status == "pending"
    assert "normal:pending" in statuses
    assert manager.context.buffer.text == "world"


def test_adapter_logs_state() -> None:
    manager = make_manager()
    lines: List[str] = []
    adapter = TextualVimAdapter(
        manager, TextualUIHooks(update_buffer=lambda mirror: None, log=lines.append)
    )

    adapter.handle_textual_key("x", character="x")

    assert lines[0].startswith("key -> mode='insert'")
    assert any(line.startswith("result <-") for line in lines)


def test_adapter_reports_changes_and_register() -> None:
    manager = make_manager()
    deltas: List[BufferDelta] = []
    registers: List[RegisterValue] = []
    adapter = TextualVimAdapter(
        manager,
        TextualUIHooks(
            update_buffer=lambda mirror: None,
            record_change=deltas.append,
            update_register=registers.append,
        ),
    )

    type_keys(adapter, "ab")
    adapter.handle_textual_key("escape")
    adapter.handle_textual_key("x", character="x")

    assert [delta.label for delta in deltas] == ["insert_text", "insert_text", "delete_char"]
    assert [delta.inserted for delta in deltas[:2]] == ["a", "b"]
    assert deltas[-1].removed == "b"
    assert registers == [RegisterValue(text="b")]
