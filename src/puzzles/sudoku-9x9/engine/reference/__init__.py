"""Reference in-process engine for the classic 9x9 Sudoku."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Sequence

from . import _impl

DESCRIPTOR = {
    "module_id": "sudoku-9x9:engine/reference@1.0.0",
    "puzzle_kind": "sudoku-9x9",
    "role": "engine",
    "impl_id": "reference",
    "module_version": "1.0.0",
    "capabilities": {"solve": True, "solve_once": True, "generate": True},
}

_READY = False


async def init() -> None:
    """One-time initialisation; the other entry points refuse to run before it."""

    global _READY
    if _READY:
        return
    # Yield once so callers observe a genuinely asynchronous start-up.
    await asyncio.sleep(0)
    _READY = len(_impl.PEERS) == _impl.GRID_SIZE and all(len(p) == 20 for p in _impl.PEERS)


def is_ready() -> bool:
    return _READY


def _require_ready() -> None:
    if not _READY:
        raise RuntimeError("Engine used before init() completed")


def new_grid() -> List[Dict[str, Any]]:
    """An empty grid with every candidate still possible."""

    return _impl.to_cells(_impl.Board([0] * _impl.GRID_SIZE))


def solve(cells: Sequence[int], *, max_iterations: int = 1000) -> Dict[str, Any]:
    _require_ready()
    board, iterations, result = _impl.solve_values(cells, max_iterations=max_iterations)
    return {"cells": _impl.to_cells(board), "iterations": iterations, "result": result}


def solve_once(cells: Sequence[int]) -> Dict[str, Any]:
    _require_ready()
    board, result = _impl.solve_once_values(cells)
    return {"cells": _impl.to_cells(board), "iterations": 1, "result": result}


def generate_with(difficulty: int, seed: int) -> Dict[str, Any]:
    """Generate a puzzle with ``difficulty`` cells removed; ``0`` keeps it full."""

    _require_ready()
    board = _impl.generate_values(difficulty, seed)
    return {"cells": _impl.to_cells(board)}


__all__ = ["DESCRIPTOR", "generate_with", "init", "is_ready", "new_grid", "solve", "solve_once"]
