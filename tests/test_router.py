from __future__ import annotations

import pytest

from orchestrator.router import RouterError, resolve
from ports import backend_port
from ports._loader import load_module, module_name_for
from ports.inprocess_adapter import InProcessBackend
from ports.remote_adapter import RemoteBackend


def test_engine_resolves_to_reference_by_default() -> None:
    resolved = resolve("sudoku-9x9", "engine", "dev", {})
    assert resolved.impl_id == "reference"
    assert resolved.module_id == "sudoku-9x9:engine/reference"
    assert resolved.decision_source == "config"
    assert resolved.module_path.name == "__init__.py"
    assert resolved.fallback_used is False


def test_missing_impl_falls_back_to_reference() -> None:
    resolved = resolve("sudoku-9x9", "engine", "dev", {"PUZZLE_ENGINE_IMPL": "turbo"})
    assert resolved.impl_id == "reference"
    assert resolved.fallback_used is True
    assert resolved.decision_source == "fallback"


def test_cli_impl_wins_over_env() -> None:
    resolved = resolve(
        "sudoku-9x9",
        "engine",
        "dev",
        {"PUZZLE_ENGINE_IMPL": "turbo", "CLI_PUZZLE_ENGINE_IMPL": "reference", "CLI_PUZZLE_ENGINE_STATE": "beta"},
    )
    assert resolved.impl_id == "reference"
    assert resolved.state == "beta"
    assert resolved.decision_source == "cli"


def test_unknown_role_and_puzzle() -> None:
    with pytest.raises(RouterError):
        resolve("sudoku-9x9", "printer", "dev", {})
    with pytest.raises(RouterError):
        resolve("kakuro", "engine", "dev", {})


def test_loader_caches_module() -> None:
    resolved = resolve("sudoku-9x9", "engine", "dev", {})
    assert module_name_for(resolved) == "puzzle_sudoku_9x9_engine_reference"
    assert load_module(resolved) is load_module(resolved)


def test_select_backend_defaults_to_remote() -> None:
    backend = backend_port.select_backend("dev", {"PUZZLE_BACKEND_URL": "http://solver.test/"})
    assert isinstance(backend, RemoteBackend)
    assert backend.base_url == "http://solver.test"
    assert isinstance(backend, backend_port.Backend)


def test_select_backend_offline_profile_loads_engine() -> None:
    backend = backend_port.select_backend("offline", {})
    assert isinstance(backend, InProcessBackend)
    assert backend.engine.DESCRIPTOR["impl_id"] == "reference"
    assert backend.difficulties["medium"] == 40
    assert backend.ready is False


def test_select_backend_accepts_engine_override() -> None:
    engine = object()
    backend = backend_port.select_backend("dev", {"CLI_PUZZLE_BACKEND_KIND": "inprocess"}, engine=engine)
    assert isinstance(backend, InProcessBackend)
    assert backend.engine is engine
