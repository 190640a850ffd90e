from __future__ import annotations

from contracts.response import Response, decode_response
from grid.model import Cell
from page import render
from page.widgets import CellWidget, build_widgets, format_board


def _response(*cells: Cell) -> Response:
    return Response.from_cells(cells)


def test_placeholder_lists_candidates_in_ascending_order() -> None:
    cell = Cell(0, 0, frozenset({9, 2, 5}))
    assert render.placeholder_for(cell, hints=True) == "259"
    assert render.placeholder_for(cell, hints=False) == ""


def test_placeholder_never_shows_zero() -> None:
    assert render.placeholder_for(Cell(0, 0, frozenset({0, 3})), hints=True) == "3"
    assert render.placeholder_for(Cell(0, 0, frozenset({0})), hints=True) == ""


def test_filled_cell_clears_placeholder() -> None:
    widgets = build_widgets()
    widgets[7].placeholder = "12"
    render.apply(widgets, _response(Cell(7, 4)), hints=True)
    assert widgets[7].value == "4"
    assert widgets[7].placeholder == ""


def test_empty_cell_clears_value() -> None:
    widgets = build_widgets()
    widgets[3].value = "8"
    render.apply(widgets, _response(Cell(3, 0, frozenset({1, 8}))), hints=True)
    assert widgets[3].value == ""
    assert widgets[3].placeholder == "18"


def test_untouched_positions_keep_their_state() -> None:
    widgets = build_widgets()
    widgets[50].value = "6"
    widgets[60].placeholder = "47"
    touched = render.apply(widgets, decode_response({"cells": [{"value": 1}, {"value": 2}]}), hints=True)
    assert touched == [0, 1]
    assert widgets[50].value == "6"
    assert widgets[60].placeholder == "47"


def test_matching_uses_the_declared_index_not_list_order() -> None:
    widgets = list(reversed(build_widgets()))
    render.apply(widgets, _response(Cell(0, 5), Cell(80, 9)), hints=False)
    by_index = {widget.index: widget for widget in widgets}
    assert by_index[0].value == "5"
    assert by_index[80].value == "9"
    assert widgets[0].index == 80 and widgets[0].value == "9"


def test_widgets_without_a_cell_are_skipped() -> None:
    widgets = [CellWidget(4, value="2")]
    assert render.apply(widgets, _response(Cell(5, 1)), hints=True) == []
    assert widgets[0].value == "2"


def test_widget_identity() -> None:
    widget = CellWidget(12)
    assert widget.element_id == "cell_12"
    assert widget.title == "Cell 12"


def test_format_board_shows_values_and_hints() -> None:
    widgets = build_widgets()
    widgets[0].value = "5"
    widgets[1].placeholder = "12"
    plain = format_board(widgets)
    lines = plain.splitlines()
    assert len(lines) == 13
    assert lines[1].startswith("| 5 . .")
    hinted = format_board(widgets, show_placeholders=True)
    assert "12" in hinted.splitlines()[1]
