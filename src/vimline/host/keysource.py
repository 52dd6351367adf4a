"""Key event sources feeding the dispatch loop."""

from __future__ import annotations

from collections import deque
from typing import Iterable, Optional, Protocol, Union

from vimline.keymaps import KeySequence, KeyStroke

ScriptEntry = Union[KeyStroke, str, None]


class KeySource(Protocol):
    def read_key(self, timeout: Optional[float] = None) -> Optional[KeyStroke]:
        """Block for the next key; ``None`` when ``timeout`` elapsed first."""

    @property
    def exhausted(self) -> bool:
        """True once no further keys will ever arrive."""


class ScriptedKeySource:
    """Replays a fixed script of keys.

    A ``None`` entry stands for a read that timed out before a key arrived.
    String entries are parsed with ``KeySequence.parse`` and expanded.
    """

    def __init__(self, script: Iterable[ScriptEntry] = ()) -> None:
        self._script: deque[Optional[KeyStroke]] = deque()
        for entry in script:
            self.push(entry)

    @classmethod
    def from_notation(cls, notation: str) -> "ScriptedKeySource":
        return cls([notation])

    def push(self, entry: ScriptEntry) -> None:
        if entry is None or isinstance(entry, KeyStroke):
            self._script.append(entry)
            return
        self._script.extend(KeySequence.parse(entry).strokes)

    @property
    def exhausted(self) -> bool:
        return not self._script

    def read_key(self, timeout: Optional[float] = None) -> Optional[KeyStroke]:
        if not self._script:
            raise EOFError("key script exhausted")
        return self._script.popleft()


__all__ = ["KeySource", "ScriptEntry", "ScriptedKeySource"]
