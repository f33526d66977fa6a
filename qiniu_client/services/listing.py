"""Marker-based paginated listing as a lazy async iterator."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from qiniu_client.core.exceptions import TransportError
from qiniu_client.http import Transport

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PaginatedLister(Generic[T]):
    """Turns a page-at-a-time list endpoint into one lazy sequence.

    Pages are fetched on demand while the consumer pulls items with
    ``async for``. The lister is single-use: once exhausted, or after a
    transport error, it stays exhausted. To resume later, build a new lister
    seeded with :attr:`marker`.

    Each page reply is a JSON object holding ``items`` and ``marker``. An
    empty page ends the sequence even if a marker is returned, and so does an
    absent or empty marker once the current page has been consumed.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        method: str,
        base_url: str,
        path: str,
        item_factory: Callable[[dict[str, Any]], T],
        params: dict[str, Any] | None = None,
        prefix: str | None = None,
        limit: int | None = None,
        marker: str | None = None,
        page_size: int | None = None,
    ) -> None:
        """Initialize the lister.

        Args:
            transport: Request executor.
            method: HTTP verb of the list endpoint.
            base_url: Endpoint base URL.
            path: List endpoint path.
            item_factory: Builds the consumer-facing item from a raw item.
            params: Fixed query parameters sent with every page.
            prefix: Only list items starting with this prefix.
            limit: Maximum items to yield overall; ``None`` or ``<= 0`` is unbounded.
            marker: Resume from this marker.
            page_size: Maximum items per page request.
        """
        self._transport = transport
        self._method = method
        self._base_url = base_url
        self._path = path
        self._item_factory = item_factory
        self._params = dict(params or {})
        self._prefix = prefix or None
        self._limit = limit if limit is not None and limit > 0 else None
        self._page_size = page_size if page_size is not None and page_size > 0 else None
        self._marker = marker or None
        self._buffer: deque[dict[str, Any]] = deque()
        self._yielded = 0
        self._pages = 0
        self._last_page = False
        self._exhausted = False

    @property
    def marker(self) -> str | None:
        """Marker of the next page not yet requested."""
        return self._marker

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    @property
    def pages_fetched(self) -> int:
        return self._pages

    def __aiter__(self) -> PaginatedLister[T]:
        return self

    async def __anext__(self) -> T:
        while not self._buffer:
            if self._exhausted or self._last_page or self._limit_reached():
                self._exhausted = True
                raise StopAsyncIteration
            await self._fetch_page()

        if self._limit_reached():
            self._buffer.clear()
            self._exhausted = True
            raise StopAsyncIteration

        raw = self._buffer.popleft()
        self._yielded += 1
        return self._item_factory(raw)

    def _limit_reached(self) -> bool:
        return self._limit is not None and self._yielded >= self._limit

    def _page_limit(self) -> int | None:
        if self._limit is None:
            return self._page_size
        remaining = self._limit - self._yielded
        if self._page_size is None:
            return remaining
        return min(self._page_size, remaining)

    def _page_params(self) -> dict[str, Any]:
        params = dict(self._params)
        if self._prefix:
            params["prefix"] = self._prefix
        page_limit = self._page_limit()
        if page_limit:
            params["limit"] = page_limit
        if self._marker:
            params["marker"] = self._marker
        return params

    async def _fetch_page(self) -> None:
        params = self._page_params()
        try:
            response = await self._transport.request(
                self._method,
                self._base_url,
                self._path,
                params=params,
            )
        except TransportError as e:
            self._exhausted = True
            logger.error(f"Listing {self._path} failed on page {self._pages + 1}: {e}")
            raise

        self._pages += 1
        body = response.body or {}
        if not isinstance(body, dict):
            self._exhausted = True
            logger.error(f"Listing {self._path} returned a malformed page {self._pages}")
            raise TransportError(f"Malformed list page from {self._path}: expected an object")
        items = body.get("items") or []
        next_marker = body.get("marker")
        logger.debug(f"Listed page {self._pages} of {self._path}: {len(items)} items")

        if not items:
            self._exhausted = True
            return

        self._buffer.extend(items)
        self._marker = next_marker or None
        if self._marker is None:
            self._last_page = True
