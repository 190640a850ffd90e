"""Runtime feature flag helpers for the grid editor."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib  # type: ignore[import-untyped]

__all__ = [
    "get_editor_feature",
    "hints_default",
    "is_request_fencing_enabled",
    "reload",
]

_FEATURES_FILENAME = "config/features.toml"


def _features_path() -> Path:
    return Path(__file__).resolve().parents[1] / _FEATURES_FILENAME


@lru_cache(maxsize=1)
def _load_features() -> dict[str, Any]:
    path = _features_path()
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def reload() -> None:
    """Clear the cached feature configuration."""

    _load_features.cache_clear()


def _coerce_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalised = value.strip().lower()
        if normalised in {"1", "true", "yes", "on"}:
            return True
        if normalised in {"0", "false", "no", "off"}:
            return False
    return None


def get_editor_feature(profile: str | None = None) -> dict[str, Any]:
    """Return the merged editor feature block for the given profile."""

    entry = _load_features().get("editor")
    if not isinstance(entry, dict):
        return {}
    merged = {key: value for key, value in entry.items() if key != "by_profile"}
    profiles = entry.get("by_profile")
    if profile and isinstance(profiles, dict):
        block = profiles.get(profile.lower())
        if isinstance(block, dict):
            merged.update(block)
    return merged


def _resolve_flag(
    name: str,
    default: bool,
    env: Mapping[str, str] | None,
    profile: str | None,
) -> bool:
    enabled = _coerce_bool(get_editor_feature(profile).get(name))
    if enabled is None:
        enabled = default

    if env:
        suffix = name.upper()
        for key in (f"CLI_EDITOR_{suffix}", f"EDITOR_{suffix}"):
            override = _coerce_bool(env.get(key))
            if override is not None:
                enabled = override
                break

    return enabled


def hints_default(env: Mapping[str, str] | None = None, *, profile: str | None = None) -> bool:
    """Return whether candidate hints start enabled."""

    return _resolve_flag("hints", True, env, profile)


def is_request_fencing_enabled(env: Mapping[str, str] | None = None, *, profile: str | None = None) -> bool:
    """Return ``True`` when stale backend responses should be dropped."""

    return _resolve_flag("request_fencing", False, env, profile)
