"""Incremental key-sequence resolution against the binding table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Sequence

from vimline.runtime.config import DEFAULT_KEYTIMEOUT
from vimline.runtime.telemetry import span

from .models import ActionRef, Binding, KeySequence, KeyStroke, SequenceAction
from .registry import KeymapRegistry


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    """Resolved binding, the action it runs and the keys that selected it.

    ``action`` is ``None`` when the binding is a wrapper without a fallback;
    the mode's default handler runs in that case.
    """

    binding: Binding
    action: Optional[ActionRef]
    keys: KeySequence

    @property
    def passthrough(self) -> bool:
        """True when a wrapper stopped on its leading key and runs the original action."""

        return self.binding.is_wrapper


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Outcome of feeding the accumulated keys to the resolver.

    ``match``: exactly one candidate remains and it matches exactly.
    ``pending``: longer bindings share the prefix; wait ``timeout_ms`` for
    another key, ``fallback`` is what a timeout would run.
    ``miss``: nothing is bound under these keys.
    """

    status: Literal["match", "pending", "miss"]
    keys: Optional[KeySequence] = None
    match: Optional[ResolutionMatch] = None
    fallback: Optional[ResolutionMatch] = None
    consumed: int = 0
    timeout_ms: Optional[int] = None


class KeymapResolver:
    """Narrows candidate bindings one key at a time."""

    def __init__(
        self,
        registry: KeymapRegistry,
        *,
        timeout_ms: int | None = None,
        logger_name: str | None = None,
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name
        self.timeout_ms = timeout_ms or int(DEFAULT_KEYTIMEOUT * 1000)

    @property
    def registry(self) -> KeymapRegistry:
        return self._registry

    def resolve(self, mode: str, strokes: Sequence[KeyStroke]) -> ResolutionResult:
        keys = KeySequence(tuple(strokes))
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"mode": mode, "keys": keys.chars},
        ) as handle:
            candidates = self._registry.candidates(mode, keys.strokes)
            if not candidates:
                handle.add_metadata("status", "miss")
                return ResolutionResult(status="miss", keys=keys, consumed=len(keys))

            exact = self._registry.lookup(mode, keys.strokes)
            if exact is not None and len(candidates) == 1:
                handle.add_metadata("status", "match")
                handle.add_metadata("binding_id", exact.id)
                return ResolutionResult(
                    status="match",
                    keys=keys,
                    match=self._build_match(exact, keys),
                    consumed=len(keys),
                )

            handle.add_metadata("status", "pending")
            handle.add_metadata("candidates", len(candidates))
            return ResolutionResult(
                status="pending",
                keys=keys,
                fallback=self._build_match(exact, keys) if exact else None,
                consumed=len(keys),
                timeout_ms=self.timeout_ms,
            )

    def expire(self, mode: str, strokes: Sequence[KeyStroke]) -> ResolutionResult:
        """Settle a pending sequence after the wait for another key elapsed."""

        keys = KeySequence(tuple(strokes))
        with span(
            "keymaps::expire",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"mode": mode, "keys": keys.chars},
        ) as handle:
            exact = self._registry.lookup(mode, keys.strokes)
            if exact is None:
                handle.add_metadata("status", "miss")
                return ResolutionResult(status="miss", keys=keys, consumed=len(keys))
            handle.add_metadata("status", "match")
            handle.add_metadata("binding_id", exact.id)
            return ResolutionResult(
                status="match",
                keys=keys,
                match=self._build_match(exact, keys),
                consumed=len(keys),
            )

    def _build_match(self, binding: Binding, keys: KeySequence) -> ResolutionMatch:
        target = binding.target
        if isinstance(target, SequenceAction):
            action_id = target.fallback_id if len(keys) == 1 else None
        else:
            action_id = target.action_id
        action = self._registry.get_action(action_id) if action_id else None
        return ResolutionMatch(binding=binding, action=action, keys=keys)


__all__ = [
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
]
