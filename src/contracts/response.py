"""Normalised backend response record and its tolerant decoder."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from grid.model import Cell
from grid.serializer import from_response

from .errors import DecodeIssue, make_issue


@dataclass(frozen=True)
class Response:
    """What every backend returns once transport details are stripped.

    ``cells`` maps grid positions to decoded cells; positions the backend did
    not mention are absent.  The optional annotation fields stay ``None`` when
    the backend did not provide them.  ``result`` keeps whatever the backend
    sent so an unrecognised code can still be shown as ``unknown``.
    """

    cells: Mapping[int, Cell]
    iterations: Optional[int] = None
    result: Optional[Any] = None
    difficulty: Optional[str] = None
    seed: Optional[int] = None
    issues: Tuple[DecodeIssue, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "cells", MappingProxyType(dict(self.cells)))

    @classmethod
    def from_cells(cls, cells: Iterable[Cell]) -> "Response":
        """Wrap plain cells, e.g. a grid restored from the address bar."""

        return cls(cells={cell.index: cell for cell in cells})

    def cell(self, index: int) -> Optional[Cell]:
        return self.cells.get(index)


def _optional_int(body: Mapping[str, Any], key: str, issues: List[DecodeIssue]) -> Optional[int]:
    raw = body.get(key)
    if raw is None:
        return None
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, bool) or not isinstance(raw, int):
        issues.append(make_issue(f"{key}.bad_type", f"Expected integer, got {raw!r}", f"$.{key}"))
        return None
    return raw


def _result_code(body: Mapping[str, Any], issues: List[DecodeIssue]) -> Any:
    raw = body.get("result")
    if raw is None:
        return None
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, bool) or not isinstance(raw, int):
        issues.append(make_issue("result.bad_type", f"Unrecognised result code {raw!r}", "$.result"))
    return raw


def _optional_str(body: Mapping[str, Any], key: str, issues: List[DecodeIssue]) -> Optional[str]:
    raw = body.get(key)
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, (str, int)):
        issues.append(make_issue(f"{key}.bad_type", f"Expected string, got {raw!r}", f"$.{key}"))
        return None
    return str(raw)


def decode_response(body: Mapping[str, Any]) -> Response:
    """Decode a JSON-shaped mapping field by field.

    Nothing in here raises for a missing or odd field; each problem is kept
    as a :class:`DecodeIssue` on the returned record.
    """

    issues: List[DecodeIssue] = []

    def on_issue(code: str, msg: str, path: str) -> None:
        issues.append(make_issue(code, msg, path))

    raw_cells = body.get("cells")
    if raw_cells is not None and not isinstance(raw_cells, (list, tuple)):
        on_issue("cells.bad_type", "Expected a list of cells", "$.cells")
        raw_cells = None

    cells = from_response(raw_cells, on_issue=on_issue)
    return Response(
        cells=cells,
        iterations=_optional_int(body, "iterations", issues),
        result=_result_code(body, issues),
        difficulty=_optional_str(body, "difficulty", issues),
        seed=_optional_int(body, "seed", issues),
        issues=tuple(issues),
    )


def response_from_engine(
    output: Any,
    *,
    difficulty: Optional[str] = None,
    seed: Optional[int] = None,
) -> Response:
    """Normalise engine output, which is either a cell list or a mapping."""

    if isinstance(output, Mapping):
        body = dict(output)
    else:
        body = {"cells": list(output)}
    if difficulty is not None:
        body["difficulty"] = difficulty
    if seed is not None:
        body["seed"] = seed
    return decode_response(body)


__all__ = ["Response", "decode_response", "response_from_engine"]
