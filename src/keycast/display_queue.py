"""Bounded, run-length compressing history of display symbols.

Symbols are appended as keys arrive and only compressed when the line is
rendered. Rendering drops whole tokens from the front until the line fits the
width budget, and removes the symbols behind those tokens from the queue for
good.
"""

from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from wcwidth import wcswidth, wcwidth

# Columns kept free on each side of the rendered line.
MARGIN = 2


def display_width(text: str) -> int:
    """Width of text in terminal columns."""
    width = wcswidth(text)
    if width < 0:
        # Non-printable characters make wcswidth give up; count the rest.
        width = sum(max(wcwidth(char), 0) for char in text)
    return width


@dataclass(frozen=True)
class RenderedToken:
    """One space-separated token of the rendered line."""

    text: str
    count: int  # queue elements this token stands for


def compress(symbols: Iterable[str], compress_after: int) -> list[RenderedToken]:
    """Turn symbols into rendered tokens, collapsing runs of compress_after or more."""
    tokens: list[RenderedToken] = []
    for symbol, count in runs(symbols):
        if count >= compress_after:
            tokens.append(RenderedToken(f"{symbol}..x{count}", count))
        else:
            tokens.extend(RenderedToken(symbol, 1) for _ in range(count))
    return tokens


def runs(symbols: Iterable[str]) -> list[tuple[str, int]]:
    """Group consecutive equal symbols into (symbol, count) pairs."""
    grouped: list[tuple[str, int]] = []
    for symbol in symbols:
        if grouped and grouped[-1][0] == symbol:
            grouped[-1] = (symbol, grouped[-1][1] + 1)
        else:
            grouped.append((symbol, 1))
    return grouped


class DisplayQueue:
    """Chronological queue of display symbols rendered into one line."""

    def __init__(self, width: int, compress_after: int):
        self.width = width
        self.compress_after = compress_after
        self._symbols: deque[str] = deque()

    @property
    def budget(self) -> int:
        """Maximum display width of the rendered line."""
        return self.width - MARGIN

    def append(self, symbols: Iterable[str]) -> None:
        self._symbols.extend(symbols)

    def clear(self) -> None:
        self._symbols.clear()

    def runs(self) -> list[tuple[str, int]]:
        return runs(self._symbols)

    def render(self) -> str:
        """Render the queue, evicting the oldest tokens that do not fit."""
        tokens = compress(self._symbols, self.compress_after)
        text = " ".join(token.text for token in tokens)

        start = 0
        while display_width(text) > self.budget and start < len(tokens):
            evicted = tokens[start]
            start += 1
            for _ in range(evicted.count):
                self._symbols.popleft()
            text = " ".join(token.text for token in tokens[start:])

        return text

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __repr__(self) -> str:
        return f"DisplayQueue(width={self.width}, compress_after={self.compress_after}, size={len(self)})"
