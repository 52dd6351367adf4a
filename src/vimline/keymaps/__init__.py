"""Key tokens, the binding table and the key-sequence resolver.

Default bindings live in ``vimline.keymaps.defaults``; they import the
action handlers, so they are loaded by the mode manager rather than here.
"""

from .models import (
    ESCAPE,
    ActionRef,
    Binding,
    BoundAction,
    DirectAction,
    KeySequence,
    KeyStroke,
    SequenceAction,
)
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats, binding_id_for
from .resolver import KeymapResolver, ResolutionMatch, ResolutionResult

__all__ = [
    "ESCAPE",
    "ActionRef",
    "Binding",
    "BoundAction",
    "DirectAction",
    "KeySequence",
    "KeyStroke",
    "SequenceAction",
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "binding_id_for",
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
]
