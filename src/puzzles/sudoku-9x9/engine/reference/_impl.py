# Reference in-process engine: candidate marking, singles, search and a
# seeded generator.  Cells travel as plain dicts shaped like the HTTP API.

from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence, Tuple

GRID_SIZE = 81
FULL = (1 << 9) - 1  # 0b111111111, bit d-1 for digit d

RESULT_NOTHING = 0
RESULT_UPDATED = 1
RESULT_SOLVED = 2
RESULT_INVALID = 3

# ---------- Geometry ----------


def _units() -> List[List[int]]:
    rows = [[r * 9 + c for c in range(9)] for r in range(9)]
    cols = [[r * 9 + c for r in range(9)] for c in range(9)]
    boxes = [
        [(br + r) * 9 + (bc + c) for r in range(3) for c in range(3)]
        for br in (0, 3, 6)
        for bc in (0, 3, 6)
    ]
    return rows + cols + boxes


UNITS = _units()
PEERS: List[frozenset] = [
    frozenset(i for unit in UNITS if idx in unit for i in unit if i != idx)
    for idx in range(GRID_SIZE)
]


def bits_to_list(bits: int) -> List[int]:
    return [d for d in range(1, 10) if bits & (1 << (d - 1))]


def _combine(current: int, other: int) -> int:
    # Higher codes win: nothing < updated < solved < invalid.
    return other if other >= current else current


# ---------- State ----------


class Board:
    """Values plus candidate bitmasks for one engine call."""

    def __init__(self, values: Sequence[int]) -> None:
        self.values = list(values)
        self.cands = [0 if v else FULL for v in self.values]

    def copy(self) -> "Board":
        clone = Board(self.values)
        clone.cands = self.cands[:]
        return clone

    def has_conflict(self) -> bool:
        for unit in UNITS:
            seen = 0
            for idx in unit:
                v = self.values[idx]
                if not v:
                    continue
                bit = 1 << (v - 1)
                if seen & bit:
                    return True
                seen |= bit
        return False

    def is_complete(self) -> bool:
        return all(self.values)

    def place(self, idx: int, digit: int) -> None:
        bit = 1 << (digit - 1)
        self.values[idx] = digit
        self.cands[idx] = 0
        for peer in PEERS[idx]:
            self.cands[peer] &= ~bit


def to_board(cells: Sequence[int]) -> Board:
    if len(cells) != GRID_SIZE:
        raise ValueError(f"Cells must be {GRID_SIZE}, got {len(cells)}")
    values: List[int] = []
    for raw in cells:
        value = int(raw)
        if not 0 <= value <= 9:
            raise ValueError(f"Cell value {value} outside 0..9")
        values.append(value)
    return Board(values)


def to_cells(board: Board) -> List[Dict[str, object]]:
    cells = []
    for idx in range(GRID_SIZE):
        value = board.values[idx]
        mask = 0 if value else board.cands[idx]
        cells.append({
            "value": value,
            "possibilities": {f"p{d}": bool(mask & (1 << (d - 1))) for d in range(1, 10)},
        })
    return cells


# ---------- Strategies ----------


def mark_simple(board: Board) -> int:
    """Strike candidates already used by a peer."""

    changed = False
    for idx in range(GRID_SIZE):
        if board.values[idx]:
            continue
        used = 0
        for peer in PEERS[idx]:
            v = board.values[peer]
            if v:
                used |= 1 << (v - 1)
        narrowed = board.cands[idx] & ~used
        if narrowed != board.cands[idx]:
            board.cands[idx] = narrowed
            changed = True
    return RESULT_UPDATED if changed else RESULT_NOTHING


def determined(board: Board) -> int:
    """Place every cell left with exactly one candidate."""

    result = RESULT_NOTHING
    for idx in range(GRID_SIZE):
        if board.values[idx]:
            continue
        mask = board.cands[idx]
        if mask == 0:
            return RESULT_INVALID
        if mask & (mask - 1) == 0:
            board.place(idx, mask.bit_length())
            result = RESULT_UPDATED
    return result


def survivor(board: Board) -> int:
    """Place a digit that fits only one cell of a unit."""

    result = RESULT_NOTHING
    for unit in UNITS:
        placed = 0
        for idx in unit:
            if board.values[idx]:
                placed |= 1 << (board.values[idx] - 1)
        for digit in range(1, 10):
            bit = 1 << (digit - 1)
            if placed & bit:
                continue
            spots = [idx for idx in unit if not board.values[idx] and board.cands[idx] & bit]
            if not spots:
                return RESULT_INVALID
            if len(spots) == 1:
                board.place(spots[0], digit)
                placed |= bit
                result = RESULT_UPDATED
    return result


STRATEGIES = (mark_simple, determined, survivor)


def solve_round(board: Board) -> int:
    """Run every strategy once and classify the combined outcome."""

    if board.has_conflict():
        return RESULT_INVALID
    result = RESULT_NOTHING
    for strategy in STRATEGIES:
        result = _combine(result, strategy(board))
        if result == RESULT_INVALID:
            return result
    if board.has_conflict():
        return RESULT_INVALID
    if board.is_complete():
        return RESULT_SOLVED
    return result


# ---------- Search ----------


def search(board: Board, rng: Optional[random.Random] = None) -> Optional[Board]:
    """Depth-first search picking the cell with the fewest candidates."""

    mark_simple(board)
    best = -1
    best_count = 10
    for idx in range(GRID_SIZE):
        if board.values[idx]:
            continue
        k = board.cands[idx].bit_count()
        if k == 0:
            return None
        if k < best_count:
            best, best_count = idx, k
            if k == 1:
                break
    if best < 0:
        return None if board.has_conflict() else board

    options = bits_to_list(board.cands[best])
    if rng is not None:
        rng.shuffle(options)
    for digit in options:
        attempt = board.copy()
        attempt.place(best, digit)
        found = search(attempt, rng)
        if found is not None:
            return found
    return None


def solve_values(cells: Sequence[int], max_iterations: int = 1000) -> Tuple[Board, int, int]:
    """Iterate rounds until nothing changes, then fall back to search."""

    board = to_board(cells)
    result = RESULT_UPDATED
    iterations = 0
    while result == RESULT_UPDATED and iterations < max_iterations:
        result = solve_round(board)
        iterations += 1

    if result == RESULT_NOTHING and not board.is_complete():
        found = search(board.copy())
        iterations += 1
        if found is None:
            return board, iterations, RESULT_INVALID
        return found, iterations, RESULT_SOLVED
    return board, iterations, result


def solve_once_values(cells: Sequence[int]) -> Tuple[Board, int]:
    board = to_board(cells)
    return board, solve_round(board)


# ---------- Generator ----------


def generate_values(difficulty: int, seed: int) -> Board:
    """Seeded full grid with ``difficulty`` cells removed."""

    if seed == 0:
        raise ValueError("Seed cannot be 0")
    rng = random.Random(seed)
    full = search(Board([0] * GRID_SIZE), rng)
    if full is None:  # pragma: no cover - an empty grid always has a solution
        raise RuntimeError("Could not build a full grid")

    amount = max(0, min(GRID_SIZE, int(difficulty)))
    for idx in rng.sample(range(GRID_SIZE), amount):
        full.values[idx] = 0
        full.cands[idx] = FULL
    mark_simple(full)
    return full


__all__ = [
    "GRID_SIZE",
    "RESULT_INVALID",
    "RESULT_NOTHING",
    "RESULT_SOLVED",
    "RESULT_UPDATED",
    "Board",
    "generate_values",
    "search",
    "solve_once_values",
    "solve_round",
    "solve_values",
    "to_board",
    "to_cells",
]
