"""The /cards resource: filtered queries, search, batch lookups."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from justtcg.models import ApiResponse, BatchLookupItem, Card
from justtcg.pagination import PageIterator, paginate
from justtcg.resources.base import BaseResource, parse_records

logger = logging.getLogger(__name__)

# Python keyword -> wire parameter name
CARD_FILTERS: Dict[str, str] = {
    "tcgplayer_id": "tcgplayerId",
    "tcgplayer_sku_id": "tcgplayerSkuId",
    "card_id": "cardId",
    "variant_id": "variantId",
    "scryfall_id": "scryfallId",
    "mtgjson_id": "mtgjsonId",
    "query": "query",
    "game": "game",
    "set": "set",
    "condition": "condition",
    "printing": "printing",
    "limit": "limit",
    "offset": "offset",
    "order": "order",
    "order_by": "orderBy",
    "include_price_history": "include_price_history",
    "include_statistics": "include_statistics",
    "price_history_duration": "priceHistoryDuration",
    "updated_after": "updated_after",
}

ORDERS = ("asc", "desc")
ORDER_BY = ("price", "24h", "7d", "30d", "90d")

LookupItem = Union[BatchLookupItem, Mapping[str, Any]]


class CardsResource(BaseResource):
    async def get(self, **filters: Any) -> ApiResponse[List[Card]]:
        """Fetch one page of cards matching *filters*.

        Accepted filters: ``tcgplayer_id``, ``tcgplayer_sku_id``, ``card_id``,
        ``variant_id``, ``scryfall_id``, ``mtgjson_id``, ``query``, ``game``,
        ``set``, ``condition`` (list, e.g. ``["NM", "LP"]``), ``printing``
        (list), ``limit``, ``offset``, ``order`` (asc/desc), ``order_by``
        (price/24h/7d/30d/90d), ``include_price_history``,
        ``include_statistics`` (list, e.g. ``["7d", "30d"]``),
        ``price_history_duration`` and ``updated_after`` (epoch seconds).
        """
        return await self._get_page(card_params(**filters))

    async def search(self, query: str, **options: Any) -> ApiResponse[List[Card]]:
        """Search cards by name; *options* are the same filters as ``get``."""
        return await self.get(query=query, **options)

    async def get_by_batch(self, items: Iterable[LookupItem]) -> ApiResponse[List[Card]]:
        """Look up many cards in one POST request.

        Items may be ``BatchLookupItem`` instances or mappings that already
        use wire parameter names.
        """
        body = [
            item.to_params() if isinstance(item, BatchLookupItem) else dict(item)
            for item in items
        ]
        if not body:
            raise ValueError("get_by_batch requires at least one lookup item")
        response = await self._post("/cards", body)
        cards = parse_records(response, Card.from_dict, "card")
        logger.info("Cards: batch of %d -> %d cards", len(body), len(cards.data))
        return cards

    def fetch_all(self, page_size: Optional[int] = None, **filters: Any) -> PageIterator[Card]:
        """Iterate every card matching *filters* across all pages.

        ``limit`` and ``offset`` are driven by the iterator and may not be
        passed here.
        """
        if "limit" in filters or "offset" in filters:
            raise TypeError("fetch_all() manages limit/offset itself; use page_size")
        return paginate(
            self._get_page,
            card_params(**filters),
            page_size=page_size or self._page_size,
            max_pages=self._max_pages,
        )

    async def _get_page(self, params: Dict[str, Any]) -> ApiResponse[List[Card]]:
        response = await self._get("/cards", params)
        return parse_records(response, Card.from_dict, "card")


def card_params(**filters: Any) -> Dict[str, Any]:
    """Translate keyword filters into a wire-named parameter mapping."""
    unknown = sorted(set(filters) - set(CARD_FILTERS))
    if unknown:
        raise TypeError(f"Unknown card filter(s): {', '.join(unknown)}")

    order = filters.get("order")
    if order is not None and order not in ORDERS:
        raise ValueError(f"order must be one of {ORDERS}, got {order!r}")
    order_by = filters.get("order_by")
    if order_by is not None and order_by not in ORDER_BY:
        raise ValueError(f"order_by must be one of {ORDER_BY}, got {order_by!r}")

    return {CARD_FILTERS[name]: value for name, value in filters.items()}
