"""Mode manager coordinating Normal/Insert/Visual dispatch and transitions."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
import time
from typing import Dict, Iterator, Optional, Type

from vimline.actions.operator import apply_operator
from vimline.buffer import LineBuffer
from vimline.buffer.lines import normal_cursor
from vimline.host.presentation import cursor_style_for
from vimline.host.primitives import BuiltinPrimitives
from vimline.keymaps import KeymapRegistry, KeymapResolver, KeyStroke
from vimline.keymaps.defaults import load_default_keymaps
from vimline.runtime import OverlayOptions
from vimline.runtime import telemetry

from .base_mode import Mode, ModeBus, ModeContext, ModeResult, PendingPrompt
from .insert_mode import InsertMode
from .normal_mode import NormalMode
from .visual_mode import VisualMode


@dataclass
class PendingTimeout:
    deadline: float
    timeout_ms: int
    generation: int


@dataclass(frozen=True, slots=True)
class ModeState:
    name: str
    variant: Optional[str] = None


class ModeManager:
    """Owns the active mode, handles transitions, and dispatches key events.

    Every transition publishes ``mode.changed`` and ``cursor.style`` on the
    bus. Redraw requests raised while a key is being dispatched are folded
    into a single ``redraw`` event once the dispatch finishes.
    """

    def __init__(
        self,
        context: ModeContext,
        *,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
    ) -> None:
        self.context = context
        self._modes: Dict[str, Mode] = {}
        self._active: Optional[str] = None
        self.logger = telemetry.get_logger("vimline.modes")
        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="vimline.keymaps"
        )
        if load_defaults and keymap_registry is None:
            load_default_keymaps(self.keymap_registry, options=context.options)
        self.keymap_resolver = keymap_resolver or KeymapResolver(
            self.keymap_registry,
            timeout_ms=context.options.keytimeout_ms,
            logger_name="vimline.keymaps",
        )
        self.context.extras.setdefault("keymap_registry", self.keymap_registry)
        self.context.extras.setdefault("keymap_resolver", self.keymap_resolver)
        self.context.extras.setdefault("mode_manager", self)
        self.context.extras.setdefault("operator_handler", apply_operator)
        self._pending_timeouts: Dict[str, PendingTimeout] = {}
        self._timer_counter = 0
        self._redraw_depth = 0
        self._redraw_requested = False

    @property
    def active_mode(self) -> Optional[Mode]:
        if self._active is None:
            return None
        return self._modes.get(self._active)

    @property
    def mode_state(self) -> ModeState:
        name = self._active or ""
        variant = self.context.insert_variant if name == "insert" else None
        return ModeState(name=name, variant=variant)

    @property
    def cursor_style(self) -> str:
        return cursor_style_for(self._active or "insert", self.context.options)

    def register_mode(
        self,
        mode_cls: Type[Mode],
        /,
        *mode_args: object,
        **mode_kwargs: object,
    ) -> Mode:
        mode = mode_cls(self.context, *mode_args, **mode_kwargs)
        if mode.name in self._modes:
            raise ValueError(f"Mode '{mode.name}' already registered")
        self._modes[mode.name] = mode
        if self._active is None:
            self._active = mode.name
            mode.on_enter(None)
        return mode

    def switch_mode(
        self,
        name: str,
        *,
        variant: Optional[str] = None,
        redraw: bool = True,
        force: bool = False,
    ) -> None:
        if name not in self._modes:
            raise KeyError(f"Unknown mode '{name}'")
        previous = self.active_mode
        if previous and previous.name == name and not force:
            return
        with self._redraw_guard():
            if previous:
                self.cancel_timeout(previous.name)
                previous.on_exit(name)
            if name == "insert":
                self.context.insert_variant = variant or "insert"
            self._active = name
            self._modes[name].on_enter(previous.name if previous else None)
            self.cancel_timeout(name)
            state = self.mode_state
            telemetry.record_event(
                "mode.switch", data={"mode": name, "variant": state.variant}
            )
            self.context.bus.emit(
                "mode.changed", {"mode": name, "variant": state.variant}
            )
            self.context.bus.emit("cursor.style", self.cursor_style)
            if redraw:
                self.request_redraw()

    def begin_edit(self, text: str = "", *, cursor: Optional[int] = None) -> None:
        """Start a new edit session: fresh buffer, Insert mode."""

        with telemetry.span(
            "mode::begin_edit", component="modes", metadata={"length": len(text)}
        ):
            self.cancel_prompt()
            self._pending_timeouts.clear()
            self.context.pending_keys = ()
            self.switch_mode("insert", variant="insert", force=True)
            self.context.buffer.reset(text, cursor=cursor)
            self.context.register.clear()
            self.context.bus.emit("edit.begin", {"text": text})

    def handle_key(self, key: KeyStroke) -> ModeResult:
        mode = self.active_mode
        if mode is None:
            raise RuntimeError("No active mode registered")
        with self._redraw_guard():
            prompt = self.context.prompt
            if prompt is not None:
                result = self._deliver_prompt(prompt, key)
            else:
                with telemetry.span(
                    name=f"mode::{mode.name}",
                    component=True,
                    metadata={"key": key.token, "mode": mode.name},
                ):
                    result = mode.handle_key(key)
            return self._after_mode_result(mode, result)

    def cancel_prompt(self) -> Optional[ModeResult]:
        """Cancel an action waiting for one more key."""

        prompt = self.context.prompt
        if prompt is None:
            return None
        mode = self.active_mode
        with self._redraw_guard():
            self.context.prompt = None
            outcome = prompt.callback(self.context, None)
            result = outcome or ModeResult(consumed=True, status="cancelled")
            if mode is None:
                return result
            return self._after_mode_result(mode, result)

    def request_redraw(self) -> None:
        if self._redraw_depth:
            self._redraw_requested = True
            return
        self.context.bus.emit("redraw", self.context.buffer.snapshot())

    def _deliver_prompt(self, prompt: PendingPrompt, key: KeyStroke) -> ModeResult:
        self.context.prompt = None
        with telemetry.span(
            "mode::prompt",
            component="modes",
            metadata={"prompt": prompt.name, "key": key.token},
        ):
            outcome = prompt.callback(self.context, None if key.is_escape else key)
        return outcome or ModeResult(consumed=True)

    def _after_mode_result(self, mode: Mode, result: ModeResult) -> ModeResult:
        if result.timeout_ms:
            self.arm_timeout(mode.name, result.timeout_ms)
        else:
            self.cancel_timeout(mode.name)
        if result.switch_to:
            self.switch_mode(result.switch_to, variant=result.variant)
        if self._active == "normal" and self.context.prompt is None:
            buffer = self.context.buffer
            buffer.set_cursor(normal_cursor(buffer.text, buffer.cursor))
        if result.consumed and result.status != "pending":
            self.request_redraw()
        return result

    @contextmanager
    def _redraw_guard(self) -> Iterator[None]:
        self._redraw_depth += 1
        try:
            yield
        finally:
            self._redraw_depth -= 1
            if not self._redraw_depth and self._redraw_requested:
                self._redraw_requested = False
                self.context.bus.emit("redraw", self.context.buffer.snapshot())

    def arm_timeout(self, mode_name: str, timeout_ms: int) -> None:
        self._timer_counter += 1
        deadline = time.monotonic() + (timeout_ms / 1000.0)
        self._pending_timeouts[mode_name] = PendingTimeout(
            deadline=deadline,
            timeout_ms=timeout_ms,
            generation=self._timer_counter,
        )

    def cancel_timeout(self, mode_name: str) -> None:
        self._pending_timeouts.pop(mode_name, None)

    def pending_timeout_seconds(self) -> Optional[float]:
        """Time left before the active mode's pending sequence expires."""

        if self._active is None:
            return None
        timer = self._pending_timeouts.get(self._active)
        if timer is None:
            return None
        return max(0.0, timer.deadline - time.monotonic())

    def process_timeouts(self) -> Dict[str, ModeResult]:
        now = time.monotonic()
        expired = {
            mode_name: timer
            for mode_name, timer in self._pending_timeouts.items()
            if timer.deadline <= now
        }
        results: Dict[str, ModeResult] = {}
        for mode_name, timer in expired.items():
            results[mode_name] = self._trigger_timeout(mode_name, timer.generation)
        return results

    def force_timeout(self, mode_name: Optional[str] = None) -> Dict[str, ModeResult]:
        if mode_name is not None:
            timer = self._pending_timeouts.get(mode_name)
            if not timer:
                return {}
            return {mode_name: self._trigger_timeout(mode_name, timer.generation)}

        current = list(self._pending_timeouts.items())
        results: Dict[str, ModeResult] = {}
        for name, timer in current:
            results[name] = self._trigger_timeout(name, timer.generation)
        return results

    def _trigger_timeout(self, mode_name: str, generation: int) -> ModeResult:
        timer = self._pending_timeouts.get(mode_name)
        if not timer or timer.generation != generation:
            return ModeResult(consumed=False, status="timeout")
        self._pending_timeouts.pop(mode_name, None)
        mode = self._modes.get(mode_name)
        if mode is None:
            return ModeResult(consumed=False, status="timeout")
        with self._redraw_guard():
            with telemetry.span(
                name=f"mode_timeout::{mode_name}",
                component=True,
                metadata={"mode": mode_name},
            ):
                result = mode.handle_timeout()
            return self._after_mode_result(mode, result)


def create_default_manager(
    text: str = "",
    *,
    options: OverlayOptions | None = None,
    cursor: Optional[int] = None,
) -> ModeManager:
    """Build a ModeManager with the standard modes, default keymaps and the
    built-in host primitives, already inside a fresh edit session."""

    options = options or OverlayOptions()
    buffer = LineBuffer()
    bus = ModeBus()
    host = BuiltinPrimitives(buffer, emit=bus.emit)
    context = ModeContext(buffer=buffer, bus=bus, host=host, options=options)
    manager = ModeManager(context)
    manager.register_mode(InsertMode)
    manager.register_mode(NormalMode)
    manager.register_mode(VisualMode)
    manager.begin_edit(text, cursor=cursor)
    return manager


__all__ = ["ModeManager", "ModeState", "PendingTimeout", "create_default_manager"]
