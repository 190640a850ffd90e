from __future__ import annotations

import asyncio
from typing import Dict, List, Optional

from contracts.errors import TransportError
from contracts.response import Response, decode_response
from grid.model import Grid
from grid.serializer import to_query_string
from page.controller import LEVEL_ERROR, LEVEL_INFO, PageController
from page.history import AddressBar
from ports.backend_port import CAP_SOLVE, CAP_SOLVE_ONCE

PUZZLE = "53..7....6..195....98....6.8...6...34..8.3..17...2...6.6....28....419..5....8..79"
SOLUTION = "534678912672195348198342567859761423426853791713924856961537284287419635345286179"


def _body(text: str, **extra: object) -> Dict[str, object]:
    cells = []
    for char in text:
        value = 0 if char == "." else int(char)
        cells.append({"value": value, "possibilities": {f"p{d}": value == 0 and d in (1, 2) for d in range(1, 10)}})
    body: Dict[str, object] = {"cells": cells}
    body.update(extra)
    return body


class _ScriptedBackend:
    """Answers each call with the next queued body, optionally held behind a gate."""

    kind = "fake"
    capabilities = frozenset({CAP_SOLVE, CAP_SOLVE_ONCE})

    def __init__(self, bodies: List[object], gates: Optional[List[asyncio.Event]] = None) -> None:
        self.bodies = list(bodies)
        self.gates = list(gates or [])
        self.requests: List[str] = []

    async def _answer(self, grid: Grid) -> Response:
        self.requests.append(to_query_string(grid))
        body = self.bodies.pop(0)
        gate = self.gates.pop(0) if self.gates else None
        if gate is not None:
            await gate.wait()
        if isinstance(body, Exception):
            raise body
        return decode_response(body)

    async def solve(self, grid: Grid) -> Response:
        return await self._answer(grid)

    async def solve_once(self, grid: Grid) -> Response:
        return await self._answer(grid)

    async def close(self) -> None:
        return None


def _controller(backend: _ScriptedBackend, *, url: str = "http://localhost:8080/", **kwargs: object) -> PageController:
    kwargs.setdefault("hints", True)
    kwargs.setdefault("fencing", False)
    return PageController(backend, address_bar=AddressBar(url), **kwargs)  # type: ignore[arg-type]


def _values(controller: PageController) -> str:
    return "".join(widget.value or "." for widget in controller.widgets)


def test_load_restores_grid_from_address_bar() -> None:
    controller = _controller(_ScriptedBackend([]), url=f"http://localhost:8080/?grid={PUZZLE}", hints=False)
    assert controller.load() is True
    assert controller.widgets[0].value == "5"
    assert controller.widgets[2].value == ""
    assert controller.widgets[3].value == ""
    assert controller.widgets[2].placeholder == ""
    assert to_query_string(controller.grid) == PUZZLE


def test_load_without_grid_keeps_empty_board() -> None:
    controller = _controller(_ScriptedBackend([]))
    assert controller.load() is False
    assert all(widget.value == "" for widget in controller.widgets)
    assert controller.history.address_bar.entries == ["http://localhost:8080/"]


def test_key_up_normalises_and_change_pushes_history() -> None:
    controller = _controller(_ScriptedBackend([]))
    assert controller.key_up(10, "73") == "7"
    assert controller.key_up(11, "x") == ""
    assert controller.grid[10].value == 7
    assert controller.grid[11].value == 0

    url = controller.change(10)
    assert url.endswith("?grid=" + "." * 10 + "7" + "." * 70)
    assert controller.url == url


def test_solve_renders_and_annotates() -> None:
    backend = _ScriptedBackend([_body(SOLUTION, iterations=4, result=2)])
    controller = _controller(backend, url=f"http://localhost:8080/?grid={PUZZLE}")
    controller.load()

    assert asyncio.run(controller.solve()) is True

    assert backend.requests == [PUZZLE]
    assert _values(controller) == SOLUTION
    assert all(widget.placeholder == "" for widget in controller.widgets)
    assert controller.message.level == LEVEL_INFO
    assert controller.message.lines[:2] == ("Iterations: 4", "Result: solved")
    assert controller.message.lines[-1].startswith("Time: ")
    assert controller.url.endswith(f"?grid={SOLUTION}")


def test_empty_cells_show_candidates_when_hints_are_on() -> None:
    backend = _ScriptedBackend([_body("1" + "." * 80, result=1)])
    controller = _controller(backend)
    asyncio.run(controller.solve_once())
    assert controller.widgets[0].value == "1"
    assert controller.widgets[1].placeholder == "12"
    assert controller.grid[1].candidates == frozenset({1, 2})


def test_partial_response_leaves_other_cells_untouched() -> None:
    backend = _ScriptedBackend([{"cells": [{"value": 9}, {"value": 8}]}])
    controller = _controller(backend, url=f"http://localhost:8080/?grid={PUZZLE}")
    controller.load()
    asyncio.run(controller.solve_once())
    assert _values(controller) == "98" + PUZZLE[2:]


def test_transport_error_keeps_grid_and_shows_message() -> None:
    backend = _ScriptedBackend([TransportError("POST /api/v1/solve failed with HTTP 500", status=500)])
    controller = _controller(backend, url=f"http://localhost:8080/?grid={PUZZLE}")
    controller.load()
    entries = len(controller.history.address_bar.entries)

    assert asyncio.run(controller.solve()) is False

    assert _values(controller) == PUZZLE
    assert controller.message.level == LEVEL_ERROR
    assert "HTTP 500" in controller.message.text
    assert len(controller.history.address_bar.entries) == entries


def test_missing_capability_is_reported_without_a_call() -> None:
    backend = _ScriptedBackend([])
    controller = _controller(backend)
    assert asyncio.run(controller.generate("easy")) is False
    assert asyncio.run(controller.fetch_filled()) is False
    assert backend.requests == []
    assert controller.message.level == LEVEL_ERROR


def test_hints_toggle_makes_no_backend_call() -> None:
    backend = _ScriptedBackend([_body("1" + "." * 80)])
    controller = _controller(backend)
    asyncio.run(controller.solve_once())
    before = _values(controller)

    controller.set_hints(False)
    assert all(widget.placeholder == "" for widget in controller.widgets)
    controller.set_hints(True)
    assert controller.widgets[1].placeholder == "12"

    assert len(backend.requests) == 1
    assert _values(controller) == before


def test_overlapping_requests_render_in_arrival_order() -> None:
    async def scenario() -> PageController:
        first_gate, second_gate = asyncio.Event(), asyncio.Event()
        backend = _ScriptedBackend(
            [_body("1" + "." * 80, iterations=1), _body("2" + "." * 80, iterations=2)],
            gates=[first_gate, second_gate],
        )
        controller = _controller(backend)
        entries = len(controller.history.address_bar.entries)

        first = asyncio.ensure_future(controller.solve())
        second = asyncio.ensure_future(controller.solve_once())
        await asyncio.sleep(0)
        second_gate.set()
        await second
        assert controller.widgets[0].value == "2"
        first_gate.set()
        await first

        assert controller.widgets[0].value == "1"
        assert controller.message.lines[0] == "Iterations: 1"
        assert len(controller.history.address_bar.entries) == entries + 2
        return controller

    asyncio.run(scenario())


def test_fencing_drops_stale_responses() -> None:
    async def scenario() -> None:
        first_gate, second_gate = asyncio.Event(), asyncio.Event()
        backend = _ScriptedBackend(
            [_body("1" + "." * 80, iterations=1), _body("2" + "." * 80, iterations=2)],
            gates=[first_gate, second_gate],
        )
        controller = _controller(backend, fencing=True)
        entries = len(controller.history.address_bar.entries)

        first = asyncio.ensure_future(controller.solve())
        second = asyncio.ensure_future(controller.solve())
        await asyncio.sleep(0)
        second_gate.set()
        assert await second is True
        first_gate.set()
        assert await first is False

        assert controller.widgets[0].value == "2"
        assert controller.message.lines[0] == "Iterations: 2"
        assert len(controller.history.address_bar.entries) == entries + 1

    asyncio.run(scenario())


def test_profile_supplies_hint_default() -> None:
    controller = PageController(_ScriptedBackend([]), profile="prod")  # type: ignore[arg-type]
    assert controller.hints is False
    assert controller.fencing is False
    strict = PageController(_ScriptedBackend([]), profile="strict", env={"EDITOR_HINTS": "1"})  # type: ignore[arg-type]
    assert strict.hints is True
    assert strict.fencing is True


def test_typing_over_a_hinted_cell_keeps_widget_in_step_with_grid() -> None:
    controller = _controller(_ScriptedBackend([_body("." * 81)]))
    asyncio.run(controller.solve_once())
    assert controller.widgets[1].placeholder == "12"

    controller.key_up(1, "7")
    assert controller.widgets[1].value == "7"
    assert controller.widgets[1].placeholder == ""

    controller.key_up(1, "")
    assert controller.widgets[1].value == ""
    assert controller.widgets[1].placeholder == ""
    assert controller.grid[1].candidates == frozenset()

    controller.set_hints(True)
    assert controller.widgets[1].placeholder == ""
    assert controller.widgets[2].placeholder == "12"
