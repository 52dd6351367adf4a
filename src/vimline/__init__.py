"""Modal (vi-style) editing overlay for a single-line editor."""

__all__ = [
    "adapters",
    "actions",
    "buffer",
    "host",
    "keymaps",
    "modes",
    "runtime",
    "surround",
]

__version__ = "0.1.0"
