"""Base classes and the shared session context for editor modes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from vimline.buffer import LineBuffer, Register
from vimline.host.primitives import HostPrimitives
from vimline.keymaps import KeySequence, KeyStroke, ResolutionMatch
from vimline.runtime import OverlayOptions
from vimline.runtime import telemetry

from .keymap_helpers import require_keymap_resolver


@dataclass(slots=True)
class ModeResult:
    """Result returned from ``Mode.handle_key`` and action handlers."""

    consumed: bool
    switch_to: Optional[str] = None
    variant: Optional[str] = None
    status: str = "ok"
    message: Optional[str] = None
    timeout_ms: Optional[int] = None


PromptCallback = Callable[["ModeContext", Optional[KeyStroke]], Optional[ModeResult]]


@dataclass(frozen=True, slots=True)
class SelectOrigin:
    """Cursor and mark from before a text-object selection, plus what it selected."""

    cursor: int
    mark: int
    selection: tuple[int, int]
    version: int


@dataclass(slots=True)
class PendingPrompt:
    """One-key prompt installed by an action that needs more input.

    The callback receives the next key, or ``None`` when the prompt is
    cancelled.
    """

    name: str
    callback: PromptCallback


@dataclass(slots=True)
class ModeContext:
    """Per-session state every mode and action receives.

    Holds the buffer (with cursor, mark and register), the host collaborators
    and the transient dispatch state: a pending prompt, keys held over from a
    timed-out operator, the current Insert variant and where a text-object
    selection started.
    """

    buffer: LineBuffer
    bus: "ModeBus"
    host: HostPrimitives
    options: OverlayOptions = field(default_factory=OverlayOptions)
    extras: Dict[str, object] = field(default_factory=dict)
    prompt: Optional[PendingPrompt] = None
    pending_keys: tuple[KeyStroke, ...] = ()
    insert_variant: str = "insert"
    select_origin: Optional[SelectOrigin] = None

    @property
    def register(self) -> Register:
        return self.buffer.register

    def ask(self, name: str, callback: PromptCallback) -> ModeResult:
        self.prompt = PendingPrompt(name=name, callback=callback)
        return ModeResult(consumed=True, status="prompt", message=name)


class ModeBus:
    """Minimal event bus carrying presentation and host signals."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)


class Mode:
    """Base class all concrete editor modes inherit from."""

    name: str = "mode"

    def __init__(self, context: ModeContext) -> None:
        self.context = context

    def on_enter(self, previous: Optional[str]) -> None:  # pragma: no cover - default no-op
        del previous

    def on_exit(self, next_mode: Optional[str]) -> None:  # pragma: no cover - default no-op
        del next_mode

    def handle_key(self, key: KeyStroke) -> ModeResult:  # pragma: no cover - abstract
        raise NotImplementedError

    def handle_timeout(self) -> ModeResult:
        """Invoked by the manager when a pending key sequence expires."""

        return ModeResult(consumed=False, status="timeout")


class KeymapMode(Mode):
    """Mode whose keys are resolved against its slice of the binding table."""

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger(f"vimline.modes.{self.name}")
        self._resolver = require_keymap_resolver(context)
        self._pending: List[KeyStroke] = []

    @property
    def pending_keys(self) -> tuple[KeyStroke, ...]:
        return tuple(self._pending)

    def on_exit(self, next_mode: Optional[str]) -> None:
        del next_mode
        self._pending.clear()

    def handle_key(self, key: KeyStroke) -> ModeResult:
        if not self._pending and self.context.pending_keys:
            held = self.context.pending_keys
            self.context.pending_keys = ()
            if key.is_escape:
                return ModeResult(consumed=True, status="cancelled", message="operator")
            self._pending.extend(held)

        self._pending.append(key)
        result = self._resolver.resolve(self.name, self._pending)

        if result.status == "match" and result.match:
            self._pending.clear()
            return self._execute_match(result.match)

        if result.status == "pending":
            return ModeResult(
                consumed=True,
                status="pending",
                message="awaiting_sequence",
                timeout_ms=result.timeout_ms,
            )

        keys = KeySequence(tuple(self._pending))
        self._pending.clear()
        return self.default_handler(keys)

    def handle_timeout(self) -> ModeResult:
        if not self._pending:
            return ModeResult(consumed=False, status="timeout")

        strokes = tuple(self._pending)
        self._pending.clear()
        result = self._resolver.expire(self.name, strokes)
        if result.status == "match" and result.match:
            return self._execute_match(result.match)
        return self.default_handler(KeySequence(strokes))

    def default_handler(self, keys: KeySequence) -> ModeResult:
        """Runs when no binding claims ``keys``."""

        del keys
        return ModeResult(consumed=False, status="miss", message="unhandled")

    def _execute_match(self, match: ResolutionMatch) -> ModeResult:
        if match.action is None:
            return self.default_handler(match.keys)
        with telemetry.span(
            "keymaps::execute",
            component="keymaps",
            metadata={"binding_id": match.binding.id, "action": match.action.id},
        ):
            outcome = match.action(self.context, match)

        if isinstance(outcome, ModeResult):
            return outcome
        return ModeResult(consumed=True)


__all__ = [
    "KeymapMode",
    "Mode",
    "ModeBus",
    "ModeContext",
    "ModeResult",
    "PendingPrompt",
    "PromptCallback",
    "SelectOrigin",
]
