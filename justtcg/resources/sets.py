"""The /sets resource."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from justtcg.models import ApiResponse, CardSet
from justtcg.pagination import PageIterator, paginate
from justtcg.resources.base import BaseResource, parse_records

logger = logging.getLogger(__name__)


class SetsResource(BaseResource):
    async def list(
        self,
        game: Optional[str] = None,
        query: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> ApiResponse[List[CardSet]]:
        """Fetch one page of sets, optionally filtered by game."""
        return await self._list_page(
            {"game": game, "query": query, "limit": limit, "offset": offset}
        )

    def fetch_all(
        self,
        game: str,
        query: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> PageIterator[CardSet]:
        """Iterate every set of *game*, fetching pages as needed.

        Usage::

            async for card_set in client.v1.sets.fetch_all(game="pokemon"):
                ...
        """
        return paginate(
            self._list_page,
            {"game": game, "query": query},
            page_size=page_size or self._page_size,
            max_pages=self._max_pages,
        )

    async def _list_page(self, params: Dict[str, Any]) -> ApiResponse[List[CardSet]]:
        response = await self._get("/sets", params)
        return parse_records(response, CardSet.from_dict, "set")
