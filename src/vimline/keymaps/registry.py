"""Binding table: per-mode key sequences mapped to bound actions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Union

from vimline.runtime.telemetry import span

from .models import (
    ActionRef,
    Binding,
    DirectAction,
    KeySequence,
    KeyStroke,
    SequenceAction,
)
from .trie import KeymapTrie

KeysLike = Union[str, KeySequence]


@dataclass(slots=True)
class RegistryStats:
    """Lightweight snapshot describing registry state."""

    action_count: int
    binding_count: int
    wrapper_count: int
    modes: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """Raised when a new binding claims a sequence that is already bound."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        conflicts_tuple = tuple(conflicts)
        message = (
            f"Binding '{binding.id}' conflicts with {[b.id for b in conflicts_tuple]}"
        )
        super().__init__(message)
        self.binding = binding
        self.conflicts = conflicts_tuple


def binding_id_for(mode: str, sequence: KeySequence) -> str:
    return f"{mode}:{''.join(sequence.tokens)}"


class KeymapRegistry:
    """Owns action references and the per-mode binding table."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        self._mode_index: Dict[str, Dict[tuple[KeyStroke, ...], str]] = {}
        self._tries: Dict[str, tuple[int, KeymapTrie]] = {}
        self._logger_name = logger_name
        self._revision = 0

    def has_action(self, action_id: str) -> bool:
        return action_id in self._actions

    def get_action(self, action_id: str) -> ActionRef:
        try:
            return self._actions[action_id]
        except KeyError as exc:
            raise KeyError(f"Action '{action_id}' is not registered") from exc

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        with span(
            "keymaps::register_action",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"action_id": action.id},
        ):
            if not replace and action.id in self._actions:
                raise ValueError(f"Action '{action.id}' already registered")
            self._actions[action.id] = action
            return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "mode": binding.mode},
        ) as handle:
            action_id = binding.action_id
            if action_id is not None and action_id not in self._actions:
                handle.add_metadata("missing_action", action_id)
                raise KeyError(
                    f"Binding '{binding.id}' references unknown action '{action_id}'"
                )

            conflict = self.lookup(binding.mode, binding.sequence)
            if conflict is not None and not replace:
                handle.add_metadata("conflicts", conflict.id)
                raise KeymapConflictError(binding, (conflict,))
            if conflict is not None:
                self._remove_binding(conflict)
            existing = self._bindings.get(binding.id)
            if existing is not None:
                if not replace:
                    raise ValueError(f"Binding id '{binding.id}' already registered")
                self._remove_binding(existing)

            self._bindings[binding.id] = binding
            self._mode_index.setdefault(binding.mode, {})[
                binding.sequence.strokes
            ] = binding.id
            self._touch_bindings()
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        with span(
            "keymaps::unregister_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding_id},
        ):
            binding = self._bindings.get(binding_id)
            if binding is None:
                return None
            self._remove_binding(binding)
            self._touch_bindings()
            return binding

    def bind(
        self,
        mode: str,
        keys: KeysLike,
        action_id: Optional[str] = None,
        *,
        description: str = "",
        source: str | None = None,
    ) -> Optional[Binding]:
        """Install ``keys`` in ``mode``, wrapping the leading key if needed.

        When the leading key already runs an action and either a longer
        sequence is being bound or no action is given, the leading key entry
        becomes a ``SequenceAction`` that falls back to that action. Leading
        keys that are already wrappers are left alone.
        """

        sequence = keys if isinstance(keys, KeySequence) else KeySequence.parse(keys)
        if action_id is not None and action_id not in self._actions:
            raise KeyError(f"Action '{action_id}' is not registered")

        with span(
            "keymaps::bind",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"mode": mode, "keys": sequence.chars},
        ) as handle:
            head = sequence.head
            existing = self.lookup(mode, head)
            wants_wrapper = len(sequence) > 1 or action_id is None
            if (
                existing is not None
                and isinstance(existing.target, DirectAction)
                and wants_wrapper
            ):
                handle.add_metadata("wrapped", existing.target.action_id)
                self.register_binding(
                    Binding(
                        id=binding_id_for(mode, head),
                        mode=mode,
                        sequence=head,
                        target=SequenceAction(fallback_id=existing.target.action_id),
                        description=existing.description,
                        source="wrapper",
                    ),
                    replace=True,
                )

            if action_id is None:
                return self.lookup(mode, head)
            return self.register_binding(
                Binding(
                    id=binding_id_for(mode, sequence),
                    mode=mode,
                    sequence=sequence,
                    target=DirectAction(action_id),
                    description=description,
                    source=source,
                ),
                replace=True,
            )

    def lookup(self, mode: str, keys: KeysLike | Iterable[KeyStroke]) -> Optional[Binding]:
        """Exact-match lookup."""

        strokes = _as_strokes(keys)
        binding_id = self._mode_index.get(mode, {}).get(strokes)
        if binding_id is None:
            return None
        return self._bindings[binding_id]

    def candidates(
        self, mode: str, prefix: KeysLike | Iterable[KeyStroke]
    ) -> list[Binding]:
        """Every binding in ``mode`` whose sequence starts with ``prefix``."""

        node = self._ensure_trie(mode).find(_as_strokes(prefix))
        if node is None:
            return []
        return [self._bindings[binding_id] for binding_id in node.walk()]

    def iter_bindings(self, mode: Optional[str] = None) -> Iterator[Binding]:
        if mode is None:
            yield from self._bindings.values()
            return
        for binding_id in self._mode_index.get(mode, {}).values():
            yield self._bindings[binding_id]

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._bindings),
            wrapper_count=sum(1 for b in self._bindings.values() if b.is_wrapper),
            modes=tuple(sorted(self._mode_index)),
        )

    def _ensure_trie(self, mode: str) -> KeymapTrie:
        cached = self._tries.get(mode)
        if cached and cached[0] == self._revision:
            return cached[1]
        trie = KeymapTrie(mode=mode)
        for binding in self.iter_bindings(mode):
            trie.add_binding(binding)
        self._tries[mode] = (self._revision, trie)
        return trie

    def _remove_binding(self, binding: Binding) -> None:
        self._bindings.pop(binding.id, None)
        mode_bucket = self._mode_index.get(binding.mode)
        if not mode_bucket:
            return
        if mode_bucket.get(binding.sequence.strokes) == binding.id:
            mode_bucket.pop(binding.sequence.strokes, None)
        if not mode_bucket:
            self._mode_index.pop(binding.mode, None)

    def _touch_bindings(self) -> None:
        self._revision += 1


def _as_strokes(keys: KeysLike | Iterable[KeyStroke]) -> tuple[KeyStroke, ...]:
    if isinstance(keys, KeySequence):
        return keys.strokes
    if isinstance(keys, str):
        return KeySequence.parse(keys).strokes
    return tuple(keys)


__all__ = [
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "binding_id_for",
]
