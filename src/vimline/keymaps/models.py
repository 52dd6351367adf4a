"""Dataclasses describing key tokens, bindings and the actions they run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Optional, Union

KeyKind = Literal["char", "control", "named"]

# Characters that may follow ``^`` in caret notation.
_CARET_CHARS = frozenset("@ABCDEFGHIJKLMNOPQRSTUVWXYZ[\\]^_?")


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """Single key event.

    ``char`` strokes carry one printable character (space and quotes
    included), ``control`` strokes carry the caret letter (``"["`` for
    escape, ``"?"`` for DEL) and ``named`` strokes carry a host key name.
    """

    kind: KeyKind
    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("key value cannot be empty")
        if self.kind in ("char", "control") and len(self.value) != 1:
            raise ValueError(f"{self.kind} key must be a single character")

    @classmethod
    def char(cls, value: str) -> "KeyStroke":
        return cls("char", value)

    @classmethod
    def control(cls, letter: str) -> "KeyStroke":
        return cls("control", letter.upper())

    @classmethod
    def named(cls, name: str) -> "KeyStroke":
        return cls("named", name.lower())

    @classmethod
    def from_raw(cls, raw: str) -> "KeyStroke":
        """Classify one raw character as read from a terminal."""

        if len(raw) != 1:
            raise ValueError("raw key must be a single character")
        if raw == "\x7f":
            return cls("control", "?")
        if raw < " ":
            return cls("control", chr(ord(raw) + 64))
        return cls("char", raw)

    @property
    def is_printable(self) -> bool:
        return self.kind == "char"

    @property
    def is_escape(self) -> bool:
        return (self.kind == "control" and self.value == "[") or (
            self.kind == "named" and self.value in {"escape", "esc"}
        )

    @property
    def text(self) -> Optional[str]:
        """Character inserted when the stroke is typed as text."""

        return self.value if self.kind == "char" else None

    @property
    def token(self) -> str:
        if self.kind == "control":
            return f"^{self.value}"
        if self.kind == "named":
            return f"<{self.value}>"
        return self.value

    def __str__(self) -> str:
        return self.token


ESCAPE = KeyStroke.control("[")


@dataclass(frozen=True, slots=True)
class KeySequence:
    """Immutable, non-empty run of keystrokes."""

    strokes: tuple[KeyStroke, ...]

    def __post_init__(self) -> None:
        if not self.strokes:
            raise ValueError("KeySequence requires at least one stroke")

    def __len__(self) -> int:
        return len(self.strokes)

    def __iter__(self):
        return iter(self.strokes)

    def __getitem__(self, index: int) -> KeyStroke:
        return self.strokes[index]

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(stroke.token for stroke in self.strokes)

    @property
    def head(self) -> "KeySequence":
        return KeySequence(self.strokes[:1])

    @property
    def chars(self) -> str:
        """Printable rendering used by surround/operator decoding."""

        return "".join(stroke.token for stroke in self.strokes)

    @classmethod
    def parse(cls, notation: str) -> "KeySequence":
        """Parse caret/angle notation: ``"ci("``, ``"^["``, ``"d^"``, ``"<f1>"``."""

        strokes: list[KeyStroke] = []
        index = 0
        while index < len(notation):
            ch = notation[index]
            following = notation[index + 1 : index + 2]
            if ch == "^" and following and following in _CARET_CHARS:
                strokes.append(KeyStroke.control(following))
                index += 2
                continue
            if ch == "<" and len(notation) > index + 2:
                close = notation.find(">", index + 2)
                if close != -1 and notation[index + 1 : close].isalnum():
                    strokes.append(KeyStroke.named(notation[index + 1 : close]))
                    index = close + 1
                    continue
            strokes.append(KeyStroke.char(ch))
            index += 1
        return cls(tuple(strokes))


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Named handler that a binding runs."""

    id: str
    handler: Callable[..., object]
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class DirectAction:
    """Binding target that runs one action."""

    action_id: str

    def __post_init__(self) -> None:
        if not self.action_id:
            raise ValueError("DirectAction requires an action id")


@dataclass(frozen=True, slots=True)
class SequenceAction:
    """Binding target installed on a leading key that longer bindings share.

    The resolver consumes the rest of the sequence; if it stops on the
    leading key alone, ``fallback_id`` (the action the key had before it was
    wrapped) runs instead.
    """

    fallback_id: Optional[str] = None


BoundAction = Union[DirectAction, SequenceAction]


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates a key sequence in one mode with a bound target."""

    id: str
    mode: str
    sequence: KeySequence
    target: BoundAction
    description: str = ""
    source: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.mode:
            raise ValueError("binding mode cannot be empty")
        if not isinstance(self.target, (DirectAction, SequenceAction)):
            raise TypeError("binding target must be DirectAction or SequenceAction")

    @property
    def action_id(self) -> Optional[str]:
        if isinstance(self.target, DirectAction):
            return self.target.action_id
        return self.target.fallback_id

    @property
    def is_wrapper(self) -> bool:
        return isinstance(self.target, SequenceAction)

    @property
    def key_signature(self) -> str:
        return " ".join(self.sequence.tokens)


__all__ = [
    "ESCAPE",
    "KeyKind",
    "KeyStroke",
    "KeySequence",
    "ActionRef",
    "DirectAction",
    "SequenceAction",
    "BoundAction",
    "Binding",
]
