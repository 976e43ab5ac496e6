"""Paginated iteration over the keys of a KV namespace."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, Mapping

from .config import WranglerError

log = logging.getLogger(__name__)

FetchPage = Callable[[str | None, str | None], tuple[list[Any], Mapping[str, Any] | None]]


def extract_cursor(result_info: Mapping[str, Any] | None) -> str | None:
    """The pagination cursor from a response's result_info, or None when exhausted."""
    if result_info is None:
        raise WranglerError("response is missing result_info")
    cursor = result_info.get("cursor")
    if not isinstance(cursor, str):
        raise WranglerError("result_info has no string cursor")
    return cursor or None


class KeyList:
    """Iterates over namespace keys, fetching further pages as needed.

    ``fetch_page(cursor, prefix)`` returns the keys of one page together with
    the page's result_info. Keys within a page are yielded last-first.
    """

    def __init__(self, fetch_page: FetchPage, prefix: str | None = None) -> None:
        self._fetch_page = fetch_page
        self.prefix = prefix
        self._keys: list[Any] = []
        self._cursor: str | None = None
        self._fetched = False

    def __iter__(self) -> Iterator[Any]:
        return self

    def __next__(self) -> Any:
        if self._keys:
            return self._keys.pop()
        if self._fetched and self._cursor is None:
            raise StopIteration
        self._fetched = True
        keys, result_info = self._fetch_page(self._cursor, self.prefix)
        self._cursor = extract_cursor(result_info)
        log.info("cursor: %s", self._cursor)
        self._keys = list(keys)
        if not self._keys:
            raise StopIteration
        return self._keys.pop()