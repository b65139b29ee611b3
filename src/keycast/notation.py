"""Splitting of raw key input into key-notation tokens.

Hosts sometimes coalesce fast input into one chunk, e.g. ``jk`` typed quickly
or ``a<CR>``. Every ordinary character becomes its own token; an angle-bracket
unit such as ``<C-a>`` or ``<Tab>`` stays whole.
"""


def split_keys(raw: str, keep_partial: bool = False) -> list[str]:
    """Split a raw input chunk into key tokens.

    Args:
        raw: Input in key notation, possibly holding several keys.
        keep_partial: Emit a trailing ``<...`` that never got its closing
            ``>`` as a final token. By default it is dropped.

    Returns:
        Tokens in input order. Never raises.
    """
    tokens: list[str] = []
    pending = ""
    bracket_open = False

    for char in raw:
        pending += char
        if char == "<":
            bracket_open = True
        elif char == ">":
            bracket_open = False
        if not bracket_open:
            tokens.append(pending)
            pending = ""

    if pending and keep_partial:
        tokens.append(pending)

    return tokens
