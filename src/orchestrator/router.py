"""Pick the in-process engine package for a puzzle kind.

Engines live at ``src/puzzles/<kind>/engine/<impl>/__init__.py``.  The
implementation id comes from ``[modules.<kind>.engine]`` in ``config.toml``
(with an optional ``by_profile`` block) and may be overridden through the
environment; ``CLI_*`` keys beat plain ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

from project_config import get_section

PUZZLES_ROOT = Path(__file__).resolve().parents[1] / "puzzles"
SUPPORTED_ROLES = {"engine"}

_DEF_IMPL = "reference"
_DEF_STATE = "default"


class RouterError(RuntimeError):
    """Raised when no engine package can be found for a request."""


@dataclass(frozen=True)
class ResolvedModule:
    """Engine package chosen for a puzzle kind, plus how it was chosen."""

    puzzle_kind: str
    role: str
    impl_id: str
    module_id: str
    module_path: Path
    state: str
    decision_source: str
    allow_fallback: bool
    fallback_used: bool
    config: Dict[str, Any]


def _role_policy(puzzle_kind: str, role: str, profile: str) -> Dict[str, Any]:
    block = get_section("modules", {}).get(puzzle_kind, {}).get(role, {})
    if not isinstance(block, dict):
        return {}
    policy = {key: value for key, value in block.items() if key != "by_profile"}
    override = (block.get("by_profile") or {}).get(profile)
    if isinstance(override, dict):
        policy.update(override)
    policy.setdefault("impl", _DEF_IMPL)
    policy.setdefault("state", _DEF_STATE)
    policy.setdefault("allow_fallback", True)
    return policy


def _override(env: Mapping[str, str], role: str, field: str) -> Tuple[str | None, str]:
    """Return the winning environment value for ``field`` and its source."""

    suffix = f"PUZZLE_{role.upper()}_{field}"
    for key, source in ((f"CLI_{suffix}", "cli"), (suffix, "env")):
        value = env.get(key)
        if value:
            return value, source
    return None, "config"


def _locate(puzzle_root: Path, role: str, impl: str, allow_fallback: bool) -> Tuple[Path, str, bool]:
    package = puzzle_root / role / impl
    if package.is_dir():
        return package, impl, False
    fallback = puzzle_root / role / _DEF_IMPL
    if allow_fallback and impl != _DEF_IMPL and fallback.is_dir():
        return fallback, _DEF_IMPL, True
    raise RouterError(f"No '{impl}' {role} for puzzle '{puzzle_root.name}' and no usable fallback")


def resolve(puzzle_kind: str, role: str, profile: str, env: Mapping[str, str]) -> ResolvedModule:
    if role not in SUPPORTED_ROLES:
        raise RouterError(f"Unsupported role '{role}'")
    puzzle_root = PUZZLES_ROOT / puzzle_kind
    if not puzzle_root.is_dir():
        raise RouterError(f"Puzzle '{puzzle_kind}' is not registered under 'src/puzzles'")

    upper_env = {str(k).upper(): str(v) for k, v in env.items()}
    policy = _role_policy(puzzle_kind, role, profile)

    impl, impl_source = _override(upper_env, role, "IMPL")
    state, state_source = _override(upper_env, role, "STATE")
    impl = impl or str(policy["impl"])
    state = state or str(policy["state"])
    # The strongest source among the two overrides is reported.
    ranking = ("config", "env", "cli")
    decision_source = max(impl_source, state_source, key=ranking.index)

    allow_fallback = bool(policy["allow_fallback"])
    package, impl, fallback_used = _locate(puzzle_root, role, impl, allow_fallback)
    if fallback_used:
        decision_source = "fallback"

    module_path = package / "__init__.py"
    if not module_path.exists():
        raise RouterError(f"Engine package '{package}' has no __init__.py")

    return ResolvedModule(
        puzzle_kind=puzzle_kind,
        role=role,
        impl_id=impl,
        module_id=f"{puzzle_kind}:{role}/{impl}",
        module_path=module_path,
        state=state,
        decision_source=decision_source,
        allow_fallback=allow_fallback,
        fallback_used=fallback_used,
        config=policy,
    )


__all__ = ["ResolvedModule", "RouterError", "SUPPORTED_ROLES", "resolve"]
