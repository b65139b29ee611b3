"""Translation of key-notation tokens into display symbols."""

import enum
import re
from collections.abc import Iterable

from .symbols import SymbolTable

# Pointer buttons and wheel events as they appear in key notation
# (<LeftMouse>, <RightDrag>, <MiddleRelease>, <ScrollWheelUp>, ...).
POINTER_MARKERS = ("Left", "Right", "Middle", "Scroll")

_CTRL_COMBO = re.compile(r"^<[Cc]-(?P<shift>[Ss]-)?(?P<key>.)>$")


class EventKind(enum.Enum):
    """Origin of a raw input chunk, as reported by the host."""

    KEYBOARD = "keyboard"
    POINTER = "pointer"


def is_pointer_token(token: str) -> bool:
    """Return True for tokens naming a mouse button or scroll event.

    Matching is by substring, so the <Left> and <Right> arrow keys are caught
    too.
    """
    return any(marker in token for marker in POINTER_MARKERS)


class Translator:
    """Maps key tokens to the symbols shown in the overlay."""

    def __init__(self, symbols: SymbolTable | None = None, legacy_mouse_filter: bool = True):
        self.symbols = symbols if symbols is not None else SymbolTable()
        self.legacy_mouse_filter = legacy_mouse_filter

    def translate_token(self, token: str) -> str | None:
        """Return the display symbol for one token, or None to drop it."""
        if self.legacy_mouse_filter and is_pointer_token(token):
            return None
        if len(token) == 1:
            return token

        glyph = self.symbols.lookup(token)
        if glyph is not None:
            return glyph

        match = _CTRL_COMBO.match(token)
        if match is None:
            return None
        key = match.group("key")
        # Ctrl+Shift+letter shows the capital; plain Ctrl combos show lower case.
        key = key.upper() if match.group("shift") else key.lower()
        return f"{self.symbols.ctrl}+{key}"

    def translate(self, tokens: Iterable[str]) -> list[str]:
        """Translate tokens in order, skipping the ones that produce nothing."""
        symbols = []
        for token in tokens:
            symbol = self.translate_token(token)
            if symbol is not None:
                symbols.append(symbol)
        return symbols
