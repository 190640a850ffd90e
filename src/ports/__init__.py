"""Backend adapters hiding transport differences from the editor."""

from __future__ import annotations

from .backend_port import (
    CAP_FETCH_FILLED,
    CAP_GENERATE,
    CAP_SOLVE,
    CAP_SOLVE_ONCE,
    Backend,
    select_backend,
)
from .inprocess_adapter import InProcessBackend, new_seed
from .remote_adapter import RemoteBackend

__all__ = [
    "CAP_FETCH_FILLED",
    "CAP_GENERATE",
    "CAP_SOLVE",
    "CAP_SOLVE_ONCE",
    "Backend",
    "InProcessBackend",
    "RemoteBackend",
    "new_seed",
    "select_backend",
]
