"""Utility helpers for loading the grid editor configuration."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib  # type: ignore[import-untyped]


_CONFIG_FILENAME = "config.toml"
_BACKEND_KINDS = {"remote", "inprocess"}


@dataclass(frozen=True)
class BackendSettings:
    """Backend selection after config, profile and environment precedence."""

    kind: str
    base_url: str
    timeout_s: float
    decision_source: str


def _config_path() -> Path:
    return Path(__file__).resolve().parents[1] / _CONFIG_FILENAME


@lru_cache(maxsize=1)
def get_config() -> Dict[str, Any]:
    """Load and cache the project configuration as a dictionary."""
    path = _config_path()
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except FileNotFoundError as exc:  # pragma: no cover - defensive guard
        raise RuntimeError(
            f"Configuration file '{_CONFIG_FILENAME}' was not found next to the project root"
        ) from exc


def get_section(path: str, default: Any = None) -> Any:
    """Retrieve a nested configuration value using dotted notation."""

    data: Any = get_config()
    for part in path.split("."):
        if isinstance(data, dict) and part in data:
            data = data[part]
        else:
            if default is not None:
                return default
            raise KeyError(f"Configuration path '{path}' not found")
    return data


def _coerce_float(value: Any, fallback: float) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return fallback
    return parsed if parsed > 0 else fallback


def backend_settings(profile: str = "dev", env: Mapping[str, str] | None = None) -> BackendSettings:
    """Resolve which backend the editor talks to.

    Precedence is ``CLI_PUZZLE_BACKEND_*`` over ``PUZZLE_BACKEND_*`` over the
    profile block over the base ``[backend]`` table.
    """

    env_map = {str(k).upper(): str(v) for k, v in (env or {}).items()}
    section = get_section("backend", {})
    policy: Dict[str, Any] = {k: v for k, v in section.items() if k != "by_profile"}
    decision_source = "config"

    by_profile = section.get("by_profile")
    if isinstance(by_profile, dict):
        block = by_profile.get(profile.lower())
        if isinstance(block, dict):
            policy.update(block)
            decision_source = "profile"

    kind = str(policy.get("kind", "remote"))
    base_url = str(policy.get("base_url", "http://localhost:8080"))
    timeout_s = _coerce_float(policy.get("timeout_s"), 10.0)

    if env_map.get("PUZZLE_BACKEND_KIND"):
        kind = env_map["PUZZLE_BACKEND_KIND"]
        decision_source = "env"
    if env_map.get("PUZZLE_BACKEND_URL"):
        base_url = env_map["PUZZLE_BACKEND_URL"]
    if env_map.get("PUZZLE_BACKEND_TIMEOUT_S"):
        timeout_s = _coerce_float(env_map["PUZZLE_BACKEND_TIMEOUT_S"], timeout_s)

    if env_map.get("CLI_PUZZLE_BACKEND_KIND"):
        kind = env_map["CLI_PUZZLE_BACKEND_KIND"]
        decision_source = "cli"

    kind = kind.strip().lower()
    if kind not in _BACKEND_KINDS:
        raise ValueError(f"Unsupported backend kind '{kind}'")

    return BackendSettings(
        kind=kind,
        base_url=base_url.rstrip("/"),
        timeout_s=timeout_s,
        decision_source=decision_source,
    )


def difficulty_table() -> Dict[str, int]:
    """Return the difficulty label to removed-cell-count mapping."""

    table = get_section("generator.difficulties", {})
    return {str(k).lower(): int(v) for k, v in table.items()}


__all__ = ["BackendSettings", "backend_settings", "difficulty_table", "get_config", "get_section"]
