"""Value objects describing the editor grid."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Iterable, Iterator, List

GRID_SIZE = 81
SIDE = 9
EMPTY = 0
DIGITS = "123456789"


class ResultCode(IntEnum):
    """Outcome of a solver invocation as sent over the wire."""

    NOTHING = 0
    UPDATED = 1
    SOLVED = 2
    INVALID = 3


_RESULT_LABELS = {
    ResultCode.NOTHING: "nothing",
    ResultCode.UPDATED: "updated",
    ResultCode.SOLVED: "solved",
    ResultCode.INVALID: "invalid",
}


def result_label(code: Any) -> str:
    """Map a wire-level result code to its label, ``unknown`` otherwise."""

    if isinstance(code, bool) or not isinstance(code, int):
        return "unknown"
    try:
        return _RESULT_LABELS[ResultCode(code)]
    except ValueError:
        return "unknown"


@dataclass(frozen=True)
class Cell:
    """Single grid position.

    ``candidates`` only ever holds digits while ``value`` is empty; a filled
    cell silently drops them.
    """

    index: int
    value: int = EMPTY
    candidates: frozenset[int] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not 0 <= self.index < GRID_SIZE:
            raise ValueError(f"Cell index {self.index} outside [0, {GRID_SIZE})")
        if not 0 <= self.value <= 9:
            raise ValueError(f"Cell value {self.value} outside 0..9")
        candidates = frozenset(int(d) for d in self.candidates)
        if any(not 0 <= d <= 9 for d in candidates):
            raise ValueError(f"Candidate digits must be within 0..9, got {sorted(candidates)}")
        if self.value != EMPTY:
            candidates = frozenset()
        object.__setattr__(self, "candidates", candidates)

    @property
    def row(self) -> int:
        return self.index // SIDE

    @property
    def col(self) -> int:
        return self.index % SIDE

    @property
    def is_empty(self) -> bool:
        return self.value == EMPTY


class Grid:
    """Row-major sequence of exactly 81 cells owned by the page controller."""

    __slots__ = ("_cells",)

    def __init__(self, cells: Iterable[Cell] | None = None) -> None:
        if cells is None:
            self._cells: List[Cell] = [Cell(i) for i in range(GRID_SIZE)]
            return
        ordered = list(cells)
        if len(ordered) != GRID_SIZE:
            raise ValueError(f"Grid requires {GRID_SIZE} cells, got {len(ordered)}")
        for position, cell in enumerate(ordered):
            if cell.index != position:
                raise ValueError(f"Cell at position {position} declares index {cell.index}")
        self._cells = ordered

    @classmethod
    def from_values(cls, values: Iterable[int]) -> "Grid":
        return cls(Cell(i, int(v)) for i, v in enumerate(values))

    def __len__(self) -> int:
        return GRID_SIZE

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def __getitem__(self, index: int) -> Cell:
        return self._cells[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        filled = sum(1 for cell in self._cells if not cell.is_empty)
        return f"Grid(filled={filled})"

    def set(self, index: int, value: int, candidates: Iterable[int] = ()) -> Cell:
        """Replace the cell at ``index`` and return the new value object."""

        cell = Cell(index, value, frozenset(candidates))
        self._cells[index] = cell
        return cell

    def values(self) -> List[int]:
        return [cell.value for cell in self._cells]

    def copy(self) -> "Grid":
        return Grid(self._cells)


__all__ = ["DIGITS", "EMPTY", "GRID_SIZE", "SIDE", "Cell", "Grid", "ResultCode", "result_label"]
