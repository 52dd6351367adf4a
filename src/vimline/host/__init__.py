"""Host collaborators: primitive invoker, key sources and presentation."""

from .keysource import KeySource, ScriptedKeySource
from .presentation import cursor_style_for
from .primitives import (
    BuiltinPrimitives,
    HostEmitter,
    HostPrimitives,
    UnknownPrimitiveError,
)

__all__ = [
    "BuiltinPrimitives",
    "HostEmitter",
    "HostPrimitives",
    "KeySource",
    "ScriptedKeySource",
    "UnknownPrimitiveError",
    "cursor_style_for",
]
