from __future__ import annotations

import pytest

from contracts import loader
from contracts.validator import GRID_REQUEST, GRID_RESPONSE, ContractViolation, assert_valid, schema_issues


def test_catalog_lists_both_contracts() -> None:
    catalog = loader.load_catalog()
    assert {GRID_REQUEST, GRID_RESPONSE} <= set(catalog)
    descriptor = loader.get_descriptor(GRID_REQUEST)
    assert loader.load_schema(GRID_REQUEST)["$id"] == descriptor.schema_id


def test_unknown_contract() -> None:
    with pytest.raises(KeyError):
        loader.get_descriptor("GridTelegram")


def test_valid_request() -> None:
    assert schema_issues(GRID_REQUEST, {"cells": [0] * 81}) == []


@pytest.mark.parametrize(
    "payload",
    [
        {"cells": [0] * 80},
        {"cells": [0] * 82},
        {"cells": [10] + [0] * 80},
        {"cells": ["1"] + [0] * 80},
        {"cells": [0] * 81, "extra": True},
        {},
    ],
)
def test_invalid_requests(payload: dict) -> None:
    issues = schema_issues(GRID_REQUEST, payload)
    assert issues
    assert all(issue.severity == "ERROR" for issue in issues)


def test_response_schema_only_checks_the_envelope() -> None:
    assert schema_issues(GRID_RESPONSE, {}) == []
    assert schema_issues(GRID_RESPONSE, {"cells": [{"value": 1}, {}], "iterations": 3}) == []
    assert schema_issues(GRID_RESPONSE, {"cells": "nope"})
    assert schema_issues(GRID_RESPONSE, ["not", "an", "object"])


def test_assert_valid_raises_with_paths() -> None:
    with pytest.raises(ContractViolation) as excinfo:
        assert_valid(GRID_REQUEST, {"cells": [0] * 80 + [11]})
    assert excinfo.value.contract == GRID_REQUEST
    assert any(issue.path == "$.cells[80]" for issue in excinfo.value.issues)
