"""Keystroke normalisation for single-digit cell inputs."""

from __future__ import annotations

from .model import DIGITS, EMPTY


def normalize(raw: str | None) -> str:
    """Reduce ``raw`` to one digit ``1``-``9`` or the empty string.

    Anything longer than one character is truncated to its first character,
    and characters outside ``1``-``9`` clear the cell instead of raising.
    """

    if not raw:
        return ""
    head = raw[0]
    return head if head in DIGITS else ""


def to_digit(text: str | None) -> int:
    """Numeric value of an input box, ``0`` when it is empty."""

    normalised = normalize(text)
    return int(normalised) if normalised else EMPTY


__all__ = ["normalize", "to_digit"]
