"""Backend adapter for the HTTP solver API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import requests

from contracts.errors import RequestError, TransportError
from contracts.response import Response, decode_response
from contracts.validator import GRID_REQUEST, GRID_RESPONSE, schema_issues
from grid.model import Grid
from grid.serializer import to_request

from .backend_port import CAP_FETCH_FILLED, CAP_SOLVE, CAP_SOLVE_ONCE

_LOGGER = logging.getLogger(__name__)

SOLVE_PATH = "/api/v1/solve"
SOLVE_ONCE_PATH = "/api/v1/solve/once"
FILLED_PATH = "/api/v1/filled"


class RemoteBackend:
    """Talks to ``/api/v1/*`` over HTTP.

    The blocking ``requests`` call runs in a worker thread, so the awaiting
    caller suspends at the network call and resumes when the reply arrives.
    """

    kind = "remote"
    capabilities = frozenset({CAP_SOLVE, CAP_SOLVE_ONCE, CAP_FETCH_FILLED})

    def __init__(
        self,
        base_url: str,
        *,
        timeout_s: float = 10.0,
        session: Optional[Any] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.session = session if session is not None else requests.Session()

    async def solve(self, grid: Grid) -> Response:
        return await self._dispatch("POST", SOLVE_PATH, self._payload(grid))

    async def solve_once(self, grid: Grid) -> Response:
        return await self._dispatch("POST", SOLVE_ONCE_PATH, self._payload(grid))

    async def fetch_filled(self) -> Response:
        return await self._dispatch("GET", FILLED_PATH, None)

    async def close(self) -> None:
        self.session.close()

    @staticmethod
    def _payload(grid: Grid) -> Dict[str, Any]:
        payload = {"cells": to_request(grid)}
        issues = schema_issues(GRID_REQUEST, payload)
        if issues:
            raise RequestError(f"Request body is not valid: {issues[0].path}: {issues[0].msg}")
        return payload

    async def _dispatch(self, method: str, path: str, payload: Optional[Dict[str, Any]]) -> Response:
        return await asyncio.to_thread(self._send, method, path, payload)

    def _send(self, method: str, path: str, payload: Optional[Dict[str, Any]]) -> Response:
        url = f"{self.base_url}{path}"
        _LOGGER.debug("sending %s %s", method, url)
        try:
            reply = self.session.request(method, url, json=payload, timeout=self.timeout_s)
            reply.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise TransportError(f"{method} {path} failed with HTTP {status}", status=status, operation=path) from exc
        except requests.RequestException as exc:
            raise TransportError(f"{method} {path} failed: {exc}", operation=path) from exc

        try:
            body = reply.json()
        except ValueError as exc:
            raise TransportError(
                f"{method} {path} returned a body that is not JSON",
                status=reply.status_code,
                operation=path,
            ) from exc

        issues = schema_issues(GRID_RESPONSE, body)
        if issues:
            raise TransportError(
                f"{method} {path} returned a malformed body: {issues[0].path}: {issues[0].msg}",
                status=reply.status_code,
                operation=path,
            )

        _LOGGER.debug("received %d cells from %s", len(body.get("cells") or ()), url)
        return decode_response(body)


__all__ = ["FILLED_PATH", "SOLVE_ONCE_PATH", "SOLVE_PATH", "RemoteBackend"]
