"""Shared error types for the grid editor core."""

from __future__ import annotations


from dataclasses import dataclass
from typing import Optional

SEVERITY_ERROR = "ERROR"
SEVERITY_WARN = "WARN"


class GridEditorError(RuntimeError):
    """Base class for failures surfaced by the editor core."""


class BackendError(GridEditorError):
    """A backend operation could not produce a response."""


class TransportError(BackendError):
    """The request failed on the wire or came back unusable."""

    def __init__(self, msg: str, *, status: Optional[int] = None, operation: str | None = None) -> None:
        super().__init__(msg)
        self.status = status
        self.operation = operation


class EngineNotReadyError(BackendError):
    """The in-process engine was used before its initialisation finished."""


class RequestError(BackendError):
    """The request could not be built from the caller's input."""


@dataclass(frozen=True)
class DecodeIssue:
    """Single tolerated problem found while decoding a backend response."""

    code: str
    msg: str
    path: str
    severity: str = SEVERITY_WARN


def make_issue(code: str, msg: str, path: str) -> DecodeIssue:
    """Construct a warning-level :class:`DecodeIssue`."""

    return DecodeIssue(code=code, msg=msg, path=path, severity=SEVERITY_WARN)


__all__ = [
    "SEVERITY_ERROR",
    "SEVERITY_WARN",
    "BackendError",
    "DecodeIssue",
    "EngineNotReadyError",
    "GridEditorError",
    "RequestError",
    "TransportError",
    "make_issue",
]
