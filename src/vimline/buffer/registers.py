"""Single-slot cut/yank register."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Literal

RegisterType = Literal["character", "line"]


@dataclass(frozen=True, slots=True)
class RegisterValue:
    text: str
    type: RegisterType = "character"


class Register:
    """Holds the most recent yank/delete/change; every write overwrites it."""

    def __init__(self) -> None:
        self._value = RegisterValue(text="")
        self._listeners: List[Callable[[RegisterValue], None]] = []

    @property
    def value(self) -> RegisterValue:
        return self._value

    @property
    def text(self) -> str:
        return self._value.text

    def yank(self, text: str, *, register_type: RegisterType = "character") -> None:
        self._value = RegisterValue(text=text, type=register_type)
        for listener in list(self._listeners):
            listener(self._value)

    def clear(self) -> None:
        self._value = RegisterValue(text="")

    def subscribe(self, listener: Callable[[RegisterValue], None]) -> None:
        """Hosts mirror the register to a clipboard through this hook."""

        self._listeners.append(listener)
