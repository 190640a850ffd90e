#!/usr/bin/env python3
"""Smoke-test seeded puzzle generation through the in-process backend."""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from contracts import validator
from grid.model import Grid
from grid.serializer import to_query_string, to_request
from ports.backend_port import select_backend


async def _run_with_seed(seed: int) -> dict:
    backend = select_backend("offline", {"CLI_PUZZLE_BACKEND_KIND": "inprocess"})
    await backend.initialize()
    difficulty = os.environ.get("EDITOR_SMOKE_DIFFICULTY", "medium")
    generated = await backend.generate(difficulty, seed)

    grid = Grid()
    for index, cell in generated.cells.items():
        grid.set(index, cell.value, cell.candidates)
    validator.assert_valid(validator.GRID_REQUEST, {"cells": to_request(grid)})

    solved = await backend.solve(grid)
    await backend.close()
    return {
        "puzzle": to_query_string(grid),
        "solution": "".join(str(solved.cells[i].value) for i in sorted(solved.cells)),
        "result": solved.result,
    }


def main() -> int:
    first = asyncio.run(_run_with_seed(20240601))
    second = asyncio.run(_run_with_seed(20240601))

    for key in ("puzzle", "solution", "result"):
        if first[key] != second[key]:
            print(f"determinism failed for {key}: {first[key]} vs {second[key]}")
            return 1
    if first["result"] != 2:
        print(f"generated puzzle did not solve: result={first['result']}")
        return 1

    third = asyncio.run(_run_with_seed(20240602))
    if first["puzzle"] == third["puzzle"]:
        print(f"different seed produced identical puzzle: {first['puzzle']}")
        return 1

    print("Determinism smoke-test passed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
