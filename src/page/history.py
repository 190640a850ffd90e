"""Mirror the grid into the address bar and restore it on load."""

from __future__ import annotations

from typing import List, Optional
from urllib.parse import parse_qs, urljoin, urlsplit

from grid.model import Grid
from grid.serializer import from_query_string, is_query_string, to_query_string

GRID_PARAM = "grid"


class AddressBar:
    """Current page URL plus the navigation history stack.

    ``push_state`` never reloads anything; it only records the new URL.
    """

    def __init__(self, url: str = "http://localhost:8080/") -> None:
        self.url = url
        self.entries: List[str] = [url]

    def push_state(self, target: str) -> str:
        self.url = urljoin(self.url, target)
        self.entries.append(self.url)
        return self.url

    def replace_state(self, target: str) -> str:
        self.url = urljoin(self.url, target)
        self.entries[-1] = self.url
        return self.url

    def query_param(self, name: str) -> Optional[str]:
        values = parse_qs(urlsplit(self.url).query, keep_blank_values=True).get(name)
        return values[0] if values else None


def query_for(grid: Grid) -> str:
    return f"?{GRID_PARAM}={to_query_string(grid)}"


class HistorySync:
    def __init__(self, address_bar: AddressBar) -> None:
        self.address_bar = address_bar

    def push(self, grid: Grid) -> str:
        """Push ``?grid=<81 chars>`` for ``grid`` and return the new URL."""

        return self.address_bar.push_state(query_for(grid))

    def restore(self) -> Optional[Grid]:
        """Grid encoded in the address bar, or ``None`` if absent or malformed."""

        raw = self.address_bar.query_param(GRID_PARAM)
        if not is_query_string(raw):
            return None
        return from_query_string(raw)


__all__ = ["GRID_PARAM", "AddressBar", "HistorySync", "query_for"]
