"""Facade selecting the backend the editor talks to."""

from __future__ import annotations

import os
from typing import Any, Dict, FrozenSet, Mapping, Protocol, runtime_checkable

from contracts.response import Response
from grid.model import Grid
from orchestrator.router import resolve
from project_config import backend_settings, difficulty_table

from ._loader import load_module

CAP_SOLVE = "solve"
CAP_SOLVE_ONCE = "solve_once"
CAP_FETCH_FILLED = "fetch_filled"
CAP_GENERATE = "generate"

PUZZLE_KIND = "sudoku-9x9"


@runtime_checkable
class Backend(Protocol):
    """Uniform solving interface; callers never branch on the transport."""

    kind: str
    capabilities: FrozenSet[str]

    async def solve(self, grid: Grid) -> Response:
        """Run the solver until it is solved or stops making progress."""

    async def solve_once(self, grid: Grid) -> Response:
        """Run exactly one pass of the solving strategy."""

    async def close(self) -> None:
        """Release transport resources."""


def build_env(overrides: Mapping[str, str] | None = None) -> Dict[str, str]:
    """Merge process environment with optional overrides."""

    env: Dict[str, str] = {str(k): str(v) for k, v in os.environ.items()}
    if overrides:
        env.update({str(k): str(v) for k, v in overrides.items()})
    return env


def select_backend(
    profile: str = "dev",
    env: Mapping[str, str] | None = None,
    *,
    session: Any = None,
    engine: Any = None,
) -> Backend:
    """Pick the backend once at startup from configuration and environment.

    ``session`` replaces the HTTP session of the remote adapter and
    ``engine`` replaces the routed engine module of the in-process adapter.
    """

    env_map = build_env(env)
    settings = backend_settings(profile, env_map)

    if settings.kind == "remote":
        from .remote_adapter import RemoteBackend

        return RemoteBackend(settings.base_url, timeout_s=settings.timeout_s, session=session)

    from .inprocess_adapter import InProcessBackend

    if engine is None:
        resolved = resolve(PUZZLE_KIND, "engine", profile, env_map)
        engine = load_module(resolved)
    return InProcessBackend(engine, difficulties=difficulty_table())


__all__ = [
    "CAP_FETCH_FILLED",
    "CAP_GENERATE",
    "CAP_SOLVE",
    "CAP_SOLVE_ONCE",
    "Backend",
    "build_env",
    "select_backend",
]
