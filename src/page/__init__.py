"""Page-level pieces: widgets, render pipeline, annotations, history and controller."""

from __future__ import annotations

from .annotation import Annotation, annotate, build
from .controller import Message, PageController
from .history import AddressBar, HistorySync
from .render import apply
from .widgets import CellWidget, build_widgets, format_board

__all__ = [
    "AddressBar",
    "Annotation",
    "CellWidget",
    "HistorySync",
    "Message",
    "PageController",
    "annotate",
    "apply",
    "build",
    "build_widgets",
    "format_board",
]
