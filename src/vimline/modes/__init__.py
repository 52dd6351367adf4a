"""Mode classes, the shared session context and the dispatch bus.

``ModeManager`` lives in ``vimline.modes.mode_manager``; it loads the default
keymaps, which import the action handlers that depend on this package.
"""

from .base_mode import (
    KeymapMode,
    Mode,
    ModeBus,
    ModeContext,
    ModeResult,
    PendingPrompt,
    SelectOrigin,
)
from .insert_mode import InsertMode
from .normal_mode import NormalMode
from .visual_mode import VisualMode

__all__ = [
    "KeymapMode",
    "Mode",
    "ModeBus",
    "ModeContext",
    "ModeResult",
    "PendingPrompt",
    "SelectOrigin",
    "NormalMode",
    "InsertMode",
    "VisualMode",
]
