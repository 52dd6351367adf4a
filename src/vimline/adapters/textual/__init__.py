"""Textual host adapter. The runnable demo lives in ``vimline.adapters.textual.app``."""

from .controller import TextualUIHooks, TextualVimAdapter, textual_key_to_stroke

__all__ = ["TextualUIHooks", "TextualVimAdapter", "textual_key_to_stroke"]
