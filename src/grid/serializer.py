"""Conversions between the owned grid and its wire and URL shapes.

Every function here is pure.  The decoders are deliberately forgiving: a
response cell with a missing ``value`` is empty, a missing candidate map means
no candidates, and positions beyond the 81-cell grid are skipped instead of
raising.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from .codec import to_digit
from .model import DIGITS, EMPTY, GRID_SIZE, Cell, Grid

EMPTY_CHAR = "."
CANDIDATE_KEYS = ("possible", "possibilities")

IssueSink = Callable[[str, str, str], None]


def to_request(grid: Iterable[Cell]) -> List[int]:
    """Row-major list of cell values with ``0`` for empty cells."""

    return [cell.value for cell in grid]


def to_query_string(grid: Iterable[Cell]) -> str:
    """81-character form used by the ``grid`` URL parameter."""

    return "".join(EMPTY_CHAR if cell.is_empty else str(cell.value) for cell in grid)


def decode_query_cells(text: str) -> List[Cell]:
    """Decode each character of ``text`` into a candidate-free cell.

    Characters outside ``1``-``9`` decode as empty, the same policy the cell
    codec applies to keystrokes.  Only the first 81 characters are used.
    """

    cells: List[Cell] = []
    for index, char in enumerate(text[:GRID_SIZE]):
        value = EMPTY if char == EMPTY_CHAR else to_digit(char)
        cells.append(Cell(index, value))
    return cells


def from_query_string(text: str, base: Optional[Grid] = None) -> Grid:
    """Build a grid from ``text``; positions it does not cover keep ``base``."""

    grid = base.copy() if base is not None else Grid()
    for cell in decode_query_cells(text):
        grid.set(cell.index, cell.value)
    return grid


def _report(on_issue: Optional[IssueSink], code: str, msg: str, path: str) -> None:
    if on_issue is not None:
        on_issue(code, msg, path)


def _decode_value(raw: Any, path: str, on_issue: Optional[IssueSink]) -> int:
    if raw is None:
        return EMPTY
    if isinstance(raw, bool) or not isinstance(raw, int):
        _report(on_issue, "cell.bad_value", f"Unsupported value {raw!r}", path)
        return EMPTY
    if not 0 <= raw <= 9:
        _report(on_issue, "cell.value_range", f"Value {raw} outside 0..9", path)
        return EMPTY
    return raw


def _decode_candidates(entry: Mapping[str, Any], path: str, on_issue: Optional[IssueSink]) -> frozenset[int]:
    flags: Any = None
    for key in CANDIDATE_KEYS:
        if entry.get(key) is not None:
            flags = entry[key]
            break
    if flags is None:
        return frozenset()
    if not isinstance(flags, Mapping):
        _report(on_issue, "cell.bad_candidates", "Candidate map is not an object", path)
        return frozenset()
    # p0 is tolerated but never displayed; 0 means "empty", not a playable digit.
    return frozenset(digit for digit in range(10) if flags.get(f"p{digit}") is True)


def from_response(
    cells: Optional[Sequence[Any]],
    *,
    on_issue: Optional[IssueSink] = None,
) -> Dict[int, Cell]:
    """Index the cells of a backend response by grid position.

    Missing entries are simply absent from the result, which is what lets a
    short response leave the rest of the grid untouched.
    """

    decoded: Dict[int, Cell] = {}
    if not cells:
        return decoded

    for index, entry in enumerate(cells):
        path = f"$.cells[{index}]"
        if index >= GRID_SIZE:
            _report(on_issue, "cells.out_of_range", f"Ignoring {len(cells) - GRID_SIZE} extra cells", path)
            break
        if isinstance(entry, Cell):
            decoded[index] = Cell(index, entry.value, entry.candidates)
            continue
        if not isinstance(entry, Mapping):
            if entry is not None:
                _report(on_issue, "cell.bad_entry", f"Unsupported cell entry {entry!r}", path)
            continue
        value = _decode_value(entry.get("value"), f"{path}.value", on_issue)
        candidates = _decode_candidates(entry, path, on_issue) if value == EMPTY else frozenset()
        decoded[index] = Cell(index, value, candidates)
    return decoded


def is_query_string(text: Optional[str]) -> bool:
    """``True`` when ``text`` is a well-formed 81-character grid string."""

    if text is None or len(text) != GRID_SIZE:
        return False
    return all(char == EMPTY_CHAR or char in DIGITS for char in text)


__all__ = [
    "CANDIDATE_KEYS",
    "EMPTY_CHAR",
    "decode_query_cells",
    "from_query_string",
    "from_response",
    "is_query_string",
    "to_query_string",
    "to_request",
]
