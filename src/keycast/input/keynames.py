"""Conversion of host key presses into key notation.

Listeners report a key either as the character it produced or as a lowercase
key name ("enter", "page_up", "Prior", ...) plus the modifiers held at the
time. This module turns that into the notation the rest of keycast reads:
``a``, ``<CR>``, ``<C-a>``, ``<C-S-A>``, ``<S-Tab>``.
"""

from dataclasses import dataclass

# Host key names (pynput Key names and X11 keysym names, lowercased).
SPECIAL_KEYS = {
    "return": "CR",
    "enter": "CR",
    "kp_enter": "CR",
    "escape": "Esc",
    "esc": "Esc",
    "tab": "Tab",
    "iso_left_tab": "Tab",
    "backspace": "BS",
    "delete": "Del",
    "space": "Space",
    "left": "Left",
    "right": "Right",
    "up": "Up",
    "down": "Down",
    "home": "Home",
    "end": "End",
    "prior": "PageUp",
    "page_up": "PageUp",
    "next": "PageDown",
    "page_down": "PageDown",
    "insert": "Insert",
    **{f"f{n}": f"F{n}" for n in range(1, 13)},
}

CTRL_KEYS = {"ctrl", "ctrl_l", "ctrl_r", "control_l", "control_r"}
SHIFT_KEYS = {"shift", "shift_l", "shift_r"}
ALT_KEYS = {"alt", "alt_l", "alt_r", "alt_gr", "meta_l", "meta_r"}

# X11 keysym names whose character is not the name itself.
CHAR_NAMES = {
    "minus": "-",
    "equal": "=",
    "plus": "+",
    "grave": "`",
    "quoteleft": "`",
}

# Characters that cannot appear bare in key notation.
ESCAPED_CHARS = {
    "<": "lt",
    "\\": "Bslash",
    "|": "Bar",
}


@dataclass
class Modifiers:
    """Modifier keys currently held down."""

    ctrl: bool = False
    shift: bool = False
    alt: bool = False

    def update(self, name: str, pressed: bool) -> bool:
        """Track a modifier press/release. Returns False if name is not a modifier."""
        name = name.lower()
        if name in CTRL_KEYS:
            self.ctrl = pressed
        elif name in SHIFT_KEYS:
            self.shift = pressed
        elif name in ALT_KEYS:
            self.alt = pressed
        else:
            return False
        return True


def _prefix(ctrl: bool, shift: bool, alt: bool) -> str:
    return ("C-" if ctrl else "") + ("S-" if shift else "") + ("M-" if alt else "")


def key_notation(key: str, ctrl: bool = False, shift: bool = False, alt: bool = False) -> str | None:
    """Key notation for one key press.

    Args:
        key: The produced character, or the host's name for a special key.
        ctrl: Control was held.
        shift: Shift was held.
        alt: Alt/Meta was held.

    Returns:
        The notation string, or None for modifier keys and unknown names.
    """
    key = {" ": "space", "\x7f": "delete"}.get(key, key)
    if len(key) == 1:
        char = key
        if ord(char) < 0x20:
            # With Ctrl held some platforms report the ASCII control code.
            char = chr(ord(char) + 0x60)
            ctrl = True
            if shift:
                char = char.upper()
        if not (ctrl or alt):
            escaped = ESCAPED_CHARS.get(char)
            return f"<{escaped}>" if escaped else char
        # Shift is part of the character itself except in Ctrl+Shift+letter.
        shift = ctrl and shift and char.isalpha()
        if shift:
            char = char.upper()
        return f"<{_prefix(ctrl, shift, alt)}{ESCAPED_CHARS.get(char, char)}>"

    name = SPECIAL_KEYS.get(key.lower())
    if name is None:
        char = CHAR_NAMES.get(key.lower())
        if char is None:
            return None
        return key_notation(char, ctrl=ctrl, shift=shift, alt=alt)
    return f"<{_prefix(ctrl, shift, alt)}{name}>"
