"""Render pipeline writing a response onto the cell widgets."""

from __future__ import annotations

from typing import Iterable, List

from contracts.response import Response
from grid.model import Cell

from .widgets import CellWidget


def placeholder_for(cell: Cell, *, hints: bool) -> str:
    """Ascending candidate digits of an empty cell, or ``""``."""

    if not hints or not cell.is_empty:
        return ""
    return "".join(str(d) for d in sorted(cell.candidates) if d != 0)


def apply(widgets: Iterable[CellWidget], response: Response, *, hints: bool) -> List[int]:
    """Update each widget from the response cell matching its declared index.

    Widgets with no matching cell are left alone.  Returns the indices that
    were written.
    """

    touched: List[int] = []
    for widget in widgets:
        cell = response.cell(widget.index)
        if cell is None:
            continue
        if cell.is_empty:
            widget.value = ""
            widget.placeholder = placeholder_for(cell, hints=hints)
        else:
            widget.value = str(cell.value)
            widget.placeholder = ""
        touched.append(widget.index)
    return touched


__all__ = ["apply", "placeholder_for"]
