"""Action handlers bound to keys by ``vimline.keymaps.defaults``."""

from . import core, host, insert, operator, surround, visual

__all__ = ["core", "host", "insert", "operator", "surround", "visual"]
