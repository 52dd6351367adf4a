"""Overlay options and cursor style constants."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import Mapping, Optional

ENV_PREFIX = "VIMLINE_"

DEFAULT_KEYTIMEOUT = 0.3
DEFAULT_REGION_HIGHLIGHT = "#cc0000"


class CursorStyle(str, Enum):
    """Terminal cursor shape escape sequences."""

    BLOCK = "\x1b[2 q"
    BEAM = "\x1b[6 q"
    BLINKING_BLOCK = "\x1b[1 q"
    BLINKING_BEAM = "\x1b[5 q"
    XTERM_BLOCK = "\x1b[\x32 q"
    XTERM_BEAM = "\x1b[\x36 q"


class SurroundScheme(str, Enum):
    """Key layout used for add/change/delete surround bindings."""

    CLASSIC = "classic"
    S_PREFIX = "s-prefix"


def _is_xterm(term: Optional[str]) -> bool:
    return (term or "")[:5] == "xterm"


@dataclass(frozen=True, slots=True)
class OverlayOptions:
    """Options recognised by the overlay.

    ``keytimeout`` is in seconds and bounds the wait for the next key of an
    ambiguous sequence.
    """

    keytimeout: float = DEFAULT_KEYTIMEOUT
    surround_bindkey: SurroundScheme = SurroundScheme.CLASSIC
    region_highlight: str = DEFAULT_REGION_HIGHLIGHT
    insert_mode_legacy_undo: bool = False
    normal_mode_cursor: str = CursorStyle.BLOCK.value
    insert_mode_cursor: str = CursorStyle.BEAM.value

    def __post_init__(self) -> None:
        if self.keytimeout <= 0:
            raise ValueError("keytimeout must be positive")
        object.__setattr__(
            self, "surround_bindkey", SurroundScheme(self.surround_bindkey)
        )
        if not self.region_highlight:
            raise ValueError("region_highlight cannot be empty")

    @property
    def keytimeout_ms(self) -> int:
        return max(1, int(round(self.keytimeout * 1000)))

    @classmethod
    def for_terminal(cls, term: Optional[str] = None) -> "OverlayOptions":
        if _is_xterm(term):
            return cls(
                normal_mode_cursor=CursorStyle.XTERM_BLOCK.value,
                insert_mode_cursor=CursorStyle.XTERM_BEAM.value,
            )
        return cls()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "OverlayOptions":
        env = os.environ if environ is None else environ
        options = cls.for_terminal(env.get("TERM"))

        def get(name: str) -> Optional[str]:
            return env.get(f"{ENV_PREFIX}{name}")

        changes: dict[str, object] = {}
        raw_timeout = get("KEYTIMEOUT")
        if raw_timeout is not None:
            try:
                changes["keytimeout"] = float(raw_timeout)
            except ValueError as exc:
                raise ValueError(f"Invalid keytimeout '{raw_timeout}'") from exc
        if get("SURROUND_BINDKEY") is not None:
            changes["surround_bindkey"] = SurroundScheme(get("SURROUND_BINDKEY"))
        if get("REGION_HIGHLIGHT") is not None:
            changes["region_highlight"] = get("REGION_HIGHLIGHT")
        if get("INSERT_MODE_LEGACY_UNDO") is not None:
            changes["insert_mode_legacy_undo"] = str(
                get("INSERT_MODE_LEGACY_UNDO")
            ).lower() in {"1", "true", "yes", "on"}
        if get("NORMAL_MODE_CURSOR") is not None:
            changes["normal_mode_cursor"] = get("NORMAL_MODE_CURSOR")
        if get("INSERT_MODE_CURSOR") is not None:
            changes["insert_mode_cursor"] = get("INSERT_MODE_CURSOR")
        return replace(options, **changes) if changes else options


__all__ = ["CursorStyle", "OverlayOptions", "SurroundScheme"]
