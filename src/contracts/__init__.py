"""Wire contracts shared by every backend adapter."""

from __future__ import annotations

from .errors import (
    BackendError,
    DecodeIssue,
    EngineNotReadyError,
    GridEditorError,
    RequestError,
    TransportError,
)
from .response import Response, decode_response, response_from_engine
from .validator import ContractViolation, assert_valid, schema_issues

__all__ = [
    "BackendError",
    "ContractViolation",
    "DecodeIssue",
    "EngineNotReadyError",
    "GridEditorError",
    "RequestError",
    "Response",
    "TransportError",
    "assert_valid",
    "decode_response",
    "response_from_engine",
    "schema_issues",
]
