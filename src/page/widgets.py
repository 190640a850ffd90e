"""Pure view layer: one text box per grid cell."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from grid.model import GRID_SIZE, SIDE


@dataclass
class CellWidget:
    """Single-character input box.

    ``index`` is declared once at construction and is what the render
    pipeline matches on, never the widget's position in a list.
    """

    index: int
    value: str = ""
    placeholder: str = ""

    @property
    def element_id(self) -> str:
        return f"cell_{self.index}"

    @property
    def title(self) -> str:
        return f"Cell {self.index}"


def build_widgets() -> List[CellWidget]:
    return [CellWidget(index) for index in range(GRID_SIZE)]


def format_board(widgets: Iterable[CellWidget], *, show_placeholders: bool = False) -> str:
    """Render the widgets as a boxed text grid."""

    by_index = {widget.index: widget for widget in widgets}
    width = 1
    if show_placeholders:
        width = max([1] + [len(w.placeholder) for w in by_index.values() if not w.value])

    def text(index: int) -> str:
        widget = by_index.get(index)
        if widget is None:
            return "?".center(width)
        if widget.value:
            return widget.value.center(width)
        if show_placeholders and widget.placeholder:
            return widget.placeholder.center(width)
        return ".".center(width)

    border = "+" + "+".join(["-" * ((width + 1) * 3 + 1)] * 3) + "+"
    lines = []
    for r in range(SIDE):
        if r % 3 == 0:
            lines.append(border)
        row = []
        for c in range(SIDE):
            row.append(text(r * SIDE + c))
            if c % 3 == 2:
                row.append("|")
        lines.append("| " + " ".join(row[:-1]) + " |")
    lines.append(border)
    return "\n".join(lines)


__all__ = ["CellWidget", "build_widgets", "format_board"]
