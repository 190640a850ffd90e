"""Structured JSONL event log for editor requests.

Every event goes to the module logger at DEBUG level.  When the file sink is
enabled, events are also appended to ``<dir>/<YYYYMMDD>/editor_NN.jsonl``; a
file that reaches ``max_bytes`` is left alone and the next number is used.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from project_config import get_section

__all__ = ["EventLog", "append_event", "configure", "configure_from_config", "current_log_path", "is_enabled"]

_DEFAULT_MAX_BYTES = 10 * 1024 * 1024
_LOGGER = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EventLog:
    """Date-partitioned, size-rotated JSONL sink."""

    def __init__(self, base_dir: str | Path, *, max_bytes: int | None = None, enabled: bool = True) -> None:
        self.base_dir = Path(base_dir)
        self.max_bytes = max_bytes or _DEFAULT_MAX_BYTES
        self.enabled = enabled
        self.path: Path | None = None
        self._lock = threading.Lock()

    def _has_room(self, path: Path) -> bool:
        return not path.exists() or path.stat().st_size < self.max_bytes

    def _target(self, day: str) -> Path:
        if self.path is not None and self.path.parent.name == day and self._has_room(self.path):
            return self.path
        folder = self.base_dir / day
        folder.mkdir(parents=True, exist_ok=True)
        number = 0
        while not self._has_room(folder / f"editor_{number:02d}.jsonl"):
            number += 1
        self.path = folder / f"editor_{number:02d}.jsonl"
        return self.path

    def write(self, event: Dict[str, Any]) -> Path | None:
        now = _utcnow()
        record = {"ts": now.isoformat(timespec="milliseconds"), **event}
        line = json.dumps(record, sort_keys=True, ensure_ascii=False)
        _LOGGER.debug("event %s", line)
        if not self.enabled:
            return None
        with self._lock:
            target = self._target(now.strftime("%Y%m%d"))
            with target.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")
        return target


_ACTIVE = EventLog("logs/editor", enabled=False)


def configure(base_dir: str | Path, *, max_bytes: int | None = None, enabled: bool = True) -> None:
    """Point the shared event log at ``base_dir``."""

    global _ACTIVE
    _ACTIVE = EventLog(base_dir, max_bytes=max_bytes, enabled=enabled)


def configure_from_config() -> None:
    """Apply the ``[logging]`` section of ``config.toml``."""

    section = get_section("logging", {})
    configure(
        section.get("dir", "logs/editor"),
        max_bytes=int(section.get("max_bytes", _DEFAULT_MAX_BYTES)),
        enabled=bool(section.get("events", False)),
    )


def is_enabled() -> bool:
    return _ACTIVE.enabled


def append_event(event: Dict[str, Any]) -> Path | None:
    """Record ``event``; returns the file written to, or ``None`` when disabled."""

    return _ACTIVE.write(event)


def current_log_path() -> Path | None:
    return _ACTIVE.path
