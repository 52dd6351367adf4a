"""Runtime services: telemetry and configuration."""

from .config import CursorStyle, OverlayOptions, SurroundScheme

__all__ = ["CursorStyle", "OverlayOptions", "SurroundScheme"]
