"""Grid state, cell codec and serializers for the 9x9 editor."""

from __future__ import annotations

from .codec import normalize, to_digit
from .model import GRID_SIZE, Cell, Grid, ResultCode, result_label
from .serializer import (
    decode_query_cells,
    from_query_string,
    from_response,
    to_query_string,
    to_request,
)

__all__ = [
    "GRID_SIZE",
    "Cell",
    "Grid",
    "ResultCode",
    "decode_query_cells",
    "from_query_string",
    "from_response",
    "normalize",
    "result_label",
    "to_digit",
    "to_query_string",
    "to_request",
]
