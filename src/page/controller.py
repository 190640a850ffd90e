"""Page controller owning the grid state and driving every user action."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Tuple

from contracts.errors import BackendError, RequestError
from contracts.response import Response
from feature_flags import hints_default, is_request_fencing_enabled
from grid.codec import normalize, to_digit
from grid.model import Grid
from grid.serializer import to_query_string
from orchestrator import log
from ports.backend_port import CAP_FETCH_FILLED, CAP_GENERATE, Backend

from . import render
from .annotation import Annotation, annotate
from .history import AddressBar, HistorySync
from .widgets import CellWidget, build_widgets

_LOGGER = logging.getLogger(__name__)

LEVEL_INFO = "info"
LEVEL_ERROR = "error"


@dataclass(frozen=True)
class Message:
    """Text shown under the grid; hidden while empty."""

    text: str = ""
    level: str = ""
    lines: Tuple[str, ...] = ()

    @property
    def hidden(self) -> bool:
        return not self.text


class PageController:
    """Explicit owner of the 81-cell grid.

    Widgets are a view over :attr:`grid`; every mutation goes through the
    cell codec (keystrokes) or the render pipeline (responses), after which
    the address bar is updated.
    """

    def __init__(
        self,
        backend: Backend,
        *,
        address_bar: Optional[AddressBar] = None,
        hints: Optional[bool] = None,
        fencing: Optional[bool] = None,
        profile: str = "dev",
        env: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.backend = backend
        self.grid = Grid()
        self.widgets: List[CellWidget] = build_widgets()
        self.history = HistorySync(address_bar or AddressBar())
        self.hints = hints_default(env, profile=profile) if hints is None else hints
        self.fencing = is_request_fencing_enabled(env, profile=profile) if fencing is None else fencing
        self.message = Message()
        self.annotation: Optional[Annotation] = None
        self.last_response: Optional[Response] = None
        self._generation = 0

    @property
    def url(self) -> str:
        return self.history.address_bar.url

    # ---------- user edits ----------

    def load(self) -> bool:
        """Seed the grid from the address bar; ``False`` when nothing usable is there."""

        restored = self.history.restore()
        if restored is None:
            return False
        self.render(Response.from_cells(restored))
        return True

    def key_up(self, index: int, raw: str) -> str:
        """Normalise a keystroke into the widget and the owned grid."""

        text = normalize(raw)
        cell = self.grid.set(index, to_digit(text))
        widget = self.widgets[index]
        widget.value = text
        widget.placeholder = render.placeholder_for(cell, hints=self.hints)
        return text

    def change(self, index: int) -> str:
        _LOGGER.debug("cell %d changed", index)
        return self.history.push(self.grid)

    def set_hints(self, enabled: bool) -> None:
        """Redraw placeholders from the owned grid; no backend call, values untouched."""

        self.hints = enabled
        for widget in self.widgets:
            widget.placeholder = render.placeholder_for(self.grid[widget.index], hints=enabled)

    def set_message(self, lines: List[str], level: str) -> None:
        self.message = Message(text="\n".join(lines), level=level, lines=tuple(lines))

    # ---------- rendering ----------

    def render(self, response: Response) -> List[int]:
        touched = render.apply(self.widgets, response, hints=self.hints)
        for index in touched:
            cell = response.cells[index]
            self.grid.set(index, cell.value, cell.candidates)
        self.last_response = response
        self.history.push(self.grid)
        return touched

    # ---------- backend actions ----------

    async def solve(self) -> bool:
        return await self._run("solve", self.backend.solve)

    async def solve_once(self) -> bool:
        return await self._run("solve_once", self.backend.solve_once)

    async def fetch_filled(self) -> bool:
        if CAP_FETCH_FILLED not in self.backend.capabilities:
            return self._reject("fetch_filled", RequestError(f"Backend '{self.backend.kind}' cannot fetch a filled grid"))
        fetch = getattr(self.backend, "fetch_filled")
        return await self._run("fetch_filled", lambda _grid: fetch())

    async def generate(self, difficulty: str | int, seed: Optional[int] = None) -> bool:
        if CAP_GENERATE not in self.backend.capabilities:
            return self._reject("generate", RequestError(f"Backend '{self.backend.kind}' cannot generate puzzles"))
        generate = getattr(self.backend, "generate")
        return await self._run("generate", lambda _grid: generate(difficulty, seed))

    def _reject(self, operation: str, exc: BackendError) -> bool:
        log.append_event({
            "event": "editor.error",
            "operation": operation,
            "backend": self.backend.kind,
            "error": type(exc).__name__,
            "message": str(exc),
        })
        self.set_message([f"Error: {exc}"], LEVEL_ERROR)
        return False

    async def _run(self, operation: str, call: Callable[[Grid], Awaitable[Response]]) -> bool:
        self._generation += 1
        token = self._generation
        snapshot = self.grid.copy()
        log.append_event({
            "event": "editor.request",
            "operation": operation,
            "backend": self.backend.kind,
            "generation": token,
            "grid": to_query_string(snapshot),
        })

        start = time.perf_counter()
        try:
            response = await call(snapshot)
        except BackendError as exc:
            if self._is_stale(token, operation):
                return False
            _LOGGER.warning("%s failed: %s", operation, exc)
            return self._reject(operation, exc)
        elapsed_ms = int(round((time.perf_counter() - start) * 1000))

        if self._is_stale(token, operation):
            return False

        for issue in response.issues:
            _LOGGER.warning("%s response issue %s at %s: %s", operation, issue.code, issue.path, issue.msg)

        self.annotation = annotate(response, elapsed_ms)
        self.set_message(self.annotation.lines(), LEVEL_INFO)
        touched = self.render(response)
        log.append_event(self._response_event(operation, token, response, elapsed_ms, len(touched)))
        return True

    def _is_stale(self, token: int, operation: str) -> bool:
        if not self.fencing or token == self._generation:
            return False
        log.append_event({
            "event": "editor.stale_dropped",
            "operation": operation,
            "generation": token,
            "latest": self._generation,
        })
        return True

    def _response_event(
        self,
        operation: str,
        token: int,
        response: Response,
        elapsed_ms: int,
        touched: int,
    ) -> dict[str, Any]:
        return {
            "event": "editor.response",
            "operation": operation,
            "backend": self.backend.kind,
            "generation": token,
            "elapsed_ms": elapsed_ms,
            "iterations": response.iterations,
            "result": response.result,
            "difficulty": response.difficulty,
            "seed": response.seed,
            "cells": touched,
            "issues": len(response.issues),
            "grid": to_query_string(self.grid),
        }


__all__ = ["LEVEL_ERROR", "LEVEL_INFO", "Message", "PageController"]
