"""keycast - show the keys you press, for screencasts and presentations.

Raw key input in key notation (``a``, ``<CR>``, ``<C-a>``) is split into
tokens, translated into display symbols and kept in a width-bounded line that
collapses repeated keys (``j..x5``). The line is drawn in a small always-on-top
overlay.
"""

__version__ = "0.1.0"

from .config import Config, ConfigError
from .session import KeycastSession, OverlayError
from .translate import EventKind

__all__ = ["Config", "ConfigError", "EventKind", "KeycastSession", "OverlayError", "__version__"]
