"""Backend adapter calling a locally loaded engine module."""

from __future__ import annotations

import asyncio
import logging
import random
from array import array
from typing import Any, Callable, Mapping, Optional

from contracts.errors import EngineNotReadyError, RequestError, TransportError
from contracts.response import Response, response_from_engine
from grid.model import Grid
from grid.serializer import to_request

from .backend_port import CAP_GENERATE, CAP_SOLVE, CAP_SOLVE_ONCE

_LOGGER = logging.getLogger(__name__)

MAX_SAFE_INTEGER = 2**53 - 1


def new_seed(rng: Optional[random.Random] = None) -> int:
    """Client-side seed in ``[1, 2**53 - 1]``; the engine rejects ``0``."""

    source = rng or random
    return source.randint(1, MAX_SAFE_INTEGER)


class InProcessBackend:
    """Synchronous calls into an engine exposing ``solve``, ``solve_once``,
    ``generate_with`` and an asynchronous ``init``.

    Operations issued while ``init`` is still running wait for it; operations
    issued before it was ever started, or after it failed or was cancelled, are rejected with
    :class:`EngineNotReadyError`.
    """

    kind = "inprocess"
    capabilities = frozenset({CAP_SOLVE, CAP_SOLVE_ONCE, CAP_GENERATE})

    def __init__(
        self,
        engine: Any,
        *,
        difficulties: Optional[Mapping[str, int]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.engine = engine
        self.difficulties = {str(k).lower(): int(v) for k, v in (difficulties or {}).items()}
        self._rng = rng
        self._init_task: Optional[asyncio.Task] = None
        self._ready = False

    @property
    def ready(self) -> bool:
        return self._ready

    def start(self) -> asyncio.Task:
        """Kick off the engine's one-time initialisation on the running loop."""

        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._run_init())
        return self._init_task

    async def initialize(self) -> None:
        await self.start()

    async def _run_init(self) -> None:
        await self.engine.init()
        self._ready = True
        _LOGGER.debug("engine %s initialised", getattr(self.engine, "DESCRIPTOR", {}).get("module_id"))

    async def _ensure_ready(self) -> None:
        if self._ready:
            return
        task = self._init_task
        if task is None:
            raise EngineNotReadyError("Engine initialisation has not been started")
        if task.cancelled():
            raise EngineNotReadyError("Engine initialisation was cancelled")
        if task.done() and task.exception() is not None:
            raise EngineNotReadyError("Engine initialisation failed") from task.exception()
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            # Only the init task being cancelled is translated; our own cancellation propagates.
            if task.cancelled():
                raise EngineNotReadyError("Engine initialisation was cancelled") from None
            raise
        except Exception as exc:
            raise EngineNotReadyError("Engine initialisation failed") from exc

    def _call(self, name: str, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return fn(*args)
        except (ValueError, RuntimeError, TypeError) as exc:
            raise TransportError(f"Engine call '{name}' failed: {exc}", operation=name) from exc

    async def solve(self, grid: Grid) -> Response:
        await self._ensure_ready()
        cells = array("i", to_request(grid))
        return response_from_engine(self._call("solve", self.engine.solve, cells))

    async def solve_once(self, grid: Grid) -> Response:
        await self._ensure_ready()
        cells = array("i", to_request(grid))
        return response_from_engine(self._call("solve_once", self.engine.solve_once, cells))

    def resolve_difficulty(self, difficulty: str | int) -> int:
        """Map a difficulty label (or a plain count) to removed cells."""

        if isinstance(difficulty, int) and not isinstance(difficulty, bool):
            amount = difficulty
        else:
            label = str(difficulty).strip().lower()
            if label in self.difficulties:
                amount = self.difficulties[label]
            else:
                try:
                    amount = int(label)
                except ValueError as exc:
                    raise RequestError(f"Unknown difficulty '{difficulty}'") from exc
        if not 0 <= amount <= 81:
            raise RequestError(f"Difficulty {amount} outside 0..81")
        return amount

    async def generate(self, difficulty: str | int, seed: Optional[int] = None) -> Response:
        await self._ensure_ready()
        amount = self.resolve_difficulty(difficulty)
        if seed is None:
            seed = new_seed(self._rng)
        _LOGGER.debug("seed %d", seed)
        output = self._call("generate_with", self.engine.generate_with, amount, seed)
        return response_from_engine(output, difficulty=str(difficulty), seed=seed)

    async def close(self) -> None:
        return None


__all__ = ["MAX_SAFE_INTEGER", "InProcessBackend", "new_seed"]
