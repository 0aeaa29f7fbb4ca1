"""Offset-based pagination over list endpoints.

``PageIterator`` is a pull-based async iterator: a page is requested only
when the consumer asks for an item and the current page is used up, so
stopping early (``break``, ``aclose()``, leaving ``async with``) never
triggers further requests. Pages are fetched strictly one after another
because each request depends on the ``hasMore`` flag of the previous one.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import (
    Any,
    Awaitable,
    Callable,
    Deque,
    Dict,
    Generic,
    List,
    Mapping,
    Optional,
    TypeVar,
)

from justtcg.errors import ApiError, PaginationError
from justtcg.models import ApiResponse, UsageMeta

logger = logging.getLogger(__name__)

T = TypeVar("T")

PageFetcher = Callable[[Dict[str, Any]], Awaitable[ApiResponse[List[T]]]]


@dataclass
class PageCursor:
    offset: int
    limit: int
    has_more: bool = True


class PageIterator(Generic[T]):
    """Yields the items of every page of a paginated endpoint, in order.

    *fetch_page* is called with ``{**base_params, "limit": page_size,
    "offset": offset}`` and must return a normalized response. Iteration
    stops when a page reports ``has_more`` false or carries no pagination
    block. An API-level error on any page raises ``ApiError`` and ends the
    sequence. A ``TransportError`` propagates without ending it: the
    consumer decides whether to pull again (re-requesting the same page)
    or stop.
    """

    def __init__(
        self,
        fetch_page: PageFetcher[T],
        base_params: Optional[Mapping[str, Any]] = None,
        page_size: int = 100,
        max_pages: Optional[int] = None,
    ) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        if max_pages is not None and max_pages < 1:
            raise ValueError(f"max_pages must be >= 1, got {max_pages}")
        self._fetch_page = fetch_page
        self._base_params = dict(base_params or {})
        self._page_size = page_size
        self._max_pages = max_pages
        self._cursor = PageCursor(offset=0, limit=page_size)
        self._buffer: Deque[T] = deque()
        self._pages_fetched = 0
        self._last_usage: Optional[UsageMeta] = None
        self._closed = False

    @property
    def offset(self) -> int:
        """Offset of the next page to request."""
        return self._cursor.offset

    @property
    def pages_fetched(self) -> int:
        return self._pages_fetched

    @property
    def last_usage(self) -> Optional[UsageMeta]:
        """Quota counters from the most recently fetched page."""
        return self._last_usage

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> "PageIterator[T]":
        return self

    async def __anext__(self) -> T:
        while not self._buffer:
            if self._closed or not self._cursor.has_more:
                self._closed = True
                raise StopAsyncIteration
            await self._fetch_next_page()
        return self._buffer.popleft()

    async def aclose(self) -> None:
        """Stop the sequence; no further pages will be requested."""
        self._closed = True
        self._buffer.clear()

    async def __aenter__(self) -> "PageIterator[T]":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def collect(self) -> List[T]:
        """Drain the sequence into a list."""
        return [item async for item in self]

    async def _fetch_next_page(self) -> None:
        if self._max_pages is not None and self._pages_fetched >= self._max_pages:
            self._closed = True
            raise PaginationError(
                f"Server still reports more results after {self._pages_fetched} pages "
                f"(max_pages={self._max_pages}, offset={self._cursor.offset})"
            )

        params = {
            **self._base_params,
            "limit": self._cursor.limit,
            "offset": self._cursor.offset,
        }
        logger.debug("Fetching page %d (offset=%d)", self._pages_fetched + 1, self._cursor.offset)
        # A transport error leaves the cursor untouched; pulling again retries this page
        response = await self._fetch_page(params)
        self._pages_fetched += 1
        self._last_usage = response.usage

        if response.error:
            self._closed = True
            raise ApiError(response.error, response.code)

        items = list(response.data or [])
        has_more = bool(response.pagination and response.pagination.has_more)
        if not items and has_more:
            logger.warning(
                "Empty page at offset %d but server reports more results; continuing",
                self._cursor.offset,
            )

        self._buffer.extend(items)
        self._cursor.has_more = has_more
        if has_more:
            self._cursor.offset += self._page_size


def paginate(
    fetch_page: PageFetcher[T],
    base_params: Optional[Mapping[str, Any]] = None,
    page_size: int = 100,
    max_pages: Optional[int] = None,
) -> PageIterator[T]:
    """Return a fresh lazy sequence of items across all pages."""
    return PageIterator(fetch_page, base_params, page_size=page_size, max_pages=max_pages)
