"""Schema checks for request and response bodies."""

from __future__ import annotations

from typing import Any, List

from . import loader
from .errors import SEVERITY_ERROR, DecodeIssue

GRID_REQUEST = "GridRequest"
GRID_RESPONSE = "GridResponse"


class ContractViolation(ValueError):
    """Raised when a payload does not satisfy its contract schema."""

    def __init__(self, contract: str, issues: List[DecodeIssue]) -> None:
        summary = "; ".join(f"{issue.path}: {issue.msg}" for issue in issues[:3])
        super().__init__(f"{contract} violates its schema: {summary}")
        self.contract = contract
        self.issues = issues


def _jsonschema_path(exc: Any) -> str:
    path = getattr(exc, "absolute_path", [])
    if not path:
        return "$"
    components: List[str] = ["$"]
    for part in path:
        if isinstance(part, int):
            components.append(f"[{part}]")
        else:
            components.append(f".{part}")
    return "".join(components)


def schema_issues(contract: str, payload: Any) -> List[DecodeIssue]:
    """Return every schema violation of ``payload`` ordered by location."""

    validator = loader.compiled_validator(contract)
    issues = [
        DecodeIssue(
            code=f"schema.{err.validator}",
            msg=err.message,
            path=_jsonschema_path(err),
            severity=SEVERITY_ERROR,
        )
        for err in validator.iter_errors(payload)
    ]
    issues.sort(key=lambda issue: (issue.path, issue.code))
    return issues


def assert_valid(contract: str, payload: Any) -> None:
    """Raise :class:`ContractViolation` if ``payload`` breaks ``contract``."""

    issues = schema_issues(contract, payload)
    if issues:
        raise ContractViolation(contract, issues)


__all__ = [
    "GRID_REQUEST",
    "GRID_RESPONSE",
    "ContractViolation",
    "assert_valid",
    "schema_issues",
]
