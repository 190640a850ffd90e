"""User-facing summary of a backend response."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

from contracts.response import Response
from grid.model import result_label


@dataclass(frozen=True)
class Annotation:
    """Transient display aggregate, rebuilt on every response."""

    elapsed_ms: int
    iterations: Optional[int] = None
    result: Optional[Any] = None
    difficulty: Optional[str] = None
    seed: Optional[int] = None

    def lines(self) -> List[str]:
        lines: List[str] = []
        if self.iterations is not None:
            lines.append(f"Iterations: {self.iterations}")
        if self.result is not None:
            lines.append(f"Result: {result_label(self.result)}")
        if self.difficulty is not None:
            lines.append(f"Difficulty: {self.difficulty}")
        if self.seed is not None:
            lines.append(f"Seed: {self.seed}")
        lines.append(f"Time: {self.elapsed_ms} ms")
        return lines


def annotate(response: Response, elapsed_ms: int) -> Annotation:
    return Annotation(
        elapsed_ms=int(elapsed_ms),
        iterations=response.iterations,
        result=response.result,
        difficulty=response.difficulty,
        seed=response.seed,
    )


def build(response: Response, elapsed_ms: int) -> List[str]:
    """Ordered display lines; only fields present in ``response`` appear."""

    return annotate(response, elapsed_ms).lines()


__all__ = ["Annotation", "annotate", "build"]
