"""Normal mode: motions, operators and the overlay's command keys."""

from __future__ import annotations

from typing import Callable, Optional

from vimline.keymaps import KeySequence

from .base_mode import KeymapMode, ModeContext, ModeResult

OperatorHandler = Callable[[ModeContext, KeySequence], ModeResult]

OPERATOR_PREFIXES = frozenset({"c", "d", "y"})


class NormalMode(KeymapMode):
    """Unbound sequences that start with ``c``/``d``/``y`` go to the operator
    engine's range handler; anything else is ignored.
    """

    name = "normal"

    def on_enter(self, previous: Optional[str]) -> None:
        del previous
        self._pending.clear()

    def default_handler(self, keys: KeySequence) -> ModeResult:
        head = keys[0]
        handler = self.context.extras.get("operator_handler")
        if head.is_printable and head.value in OPERATOR_PREFIXES and callable(handler):
            if len(keys) == 1:
                self.context.pending_keys = keys.strokes
                return ModeResult(consumed=True, status="pending", message="operator")
            return handler(self.context, keys)
        return ModeResult(consumed=True, status="noop", message="unbound_key")


__all__ = ["NormalMode", "OPERATOR_PREFIXES", "OperatorHandler"]
