"""Symbol table mapping canonical key names to display glyphs."""

from collections.abc import Iterator, Mapping

# Keyed by canonical name: bracket-stripped and uppercased ("<Tab>" -> "TAB").
DEFAULT_SYMBOLS: dict[str, str] = {
    "TAB": "⇥",
    "CR": "⏎",
    "ENTER": "⏎",
    "RETURN": "⏎",
    "ESC": "Esc",
    "SPACE": "␣",
    "BS": "⌫",
    "DEL": "Del",
    "LEFT": "←",
    "RIGHT": "→",
    "UP": "↑",
    "DOWN": "↓",
    "HOME": "Home",
    "END": "End",
    "PAGEUP": "PgUp",
    "PAGEDOWN": "PgDn",
    "INSERT": "Ins",
    **{f"F{n}": f"F{n}" for n in range(1, 13)},
    "LT": "<",
    "BSLASH": "\\",
    "BAR": "|",
    "CTRL": "Ctrl",
    "ALT": "Alt",
    "SHIFT": "Shift",
}


def canonical_name(key: str) -> str:
    """Return the lookup form of a key name: '<Tab>' and 'tab' both give 'TAB'."""
    if len(key) > 2 and key.startswith("<") and key.endswith(">"):
        key = key[1:-1]
    return key.upper()


class SymbolTable(Mapping[str, str]):
    """Read-only glyph lookup with caller overrides merged over the defaults."""

    def __init__(self, overrides: Mapping[str, str] | None = None):
        self._symbols = dict(DEFAULT_SYMBOLS)
        for key, glyph in (overrides or {}).items():
            self._symbols[canonical_name(key)] = glyph

    def lookup(self, name: str) -> str | None:
        """Glyph for a key name, or None when the table has no entry."""
        return self._symbols.get(canonical_name(name))

    @property
    def ctrl(self) -> str:
        return self._symbols.get("CTRL", "Ctrl")

    def __getitem__(self, key: str) -> str:
        return self._symbols[canonical_name(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def __repr__(self) -> str:
        return f"SymbolTable({len(self)} entries)"
