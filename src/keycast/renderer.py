"""Placement of the rendered key line inside the overlay."""

from dataclasses import dataclass

from .display_queue import display_width


@dataclass(frozen=True)
class RenderedLine:
    """Text to write at a fixed cell of the overlay content area.

    ``row`` and ``col`` are the zero-based target cell handed to the host.
    The text is already centered across the full width, so ``col`` is
    always 0 and ``set_line`` replaces the whole row.
    """

    row: int
    col: int
    text: str


def center(text: str, width: int) -> str:
    """Pad text with the same number of spaces on both sides."""
    padding = " " * max(0, (width - display_width(text)) // 2)
    return f"{padding}{text}{padding}"


def place(text: str, width: int, height: int) -> RenderedLine:
    """Center text horizontally on the middle row of a width x height area."""
    return RenderedLine(row=height // 2, col=0, text=center(text, width))


def blank_rows(height: int) -> list[str]:
    """Initial content of a freshly shown overlay: one empty string per row."""
    return [""] * height
