"""Import engine packages resolved by the router."""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Dict

from orchestrator.router import ResolvedModule

ENGINE_ENTRY_POINTS = ("init", "solve", "solve_once", "generate_with")

_LOADED: Dict[Path, ModuleType] = {}


def module_name_for(resolved: ResolvedModule) -> str:
    kind = resolved.puzzle_kind.replace("-", "_")
    return f"puzzle_{kind}_{resolved.role}_{resolved.impl_id}"


def load_module(resolved: ResolvedModule) -> ModuleType:
    """Execute the engine package once and hand back the same module afterwards.

    A package missing any of :data:`ENGINE_ENTRY_POINTS` is refused.
    """

    path = resolved.module_path.resolve()
    if path in _LOADED:
        return _LOADED[path]

    name = module_name_for(resolved)
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Could not load engine from {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
        missing = [entry for entry in ENGINE_ENTRY_POINTS if not callable(getattr(module, entry, None))]
        if missing:
            raise ImportError(f"Engine {resolved.module_id} lacks {', '.join(missing)}")
    except Exception:
        sys.modules.pop(name, None)
        raise
    _LOADED[path] = module
    return module


__all__ = ["ENGINE_ENTRY_POINTS", "load_module", "module_name_for"]
