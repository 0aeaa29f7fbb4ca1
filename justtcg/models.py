"""Data models for API envelopes and JustTCG records.

Envelope types (``ApiResponse``, ``PaginationMeta``, ``UsageMeta``) are
produced by the response normalizer. Record types (``Game``, ``CardSet``,
``Card``, ``Variant``) are parsed from the ``data`` payload by the
resource classes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")

# Condition abbreviations accepted by the ``condition`` filter.
CONDITIONS: Dict[str, str] = {
    "S": "Sealed",
    "NM": "Near Mint",
    "LP": "Lightly Played",
    "MP": "Moderately Played",
    "HP": "Heavily Played",
    "DMG": "Damaged",
}


@dataclass(frozen=True)
class PaginationMeta:
    """Pagination block of a list response."""

    total: Optional[int]
    limit: Optional[int]
    offset: Optional[int]
    has_more: Optional[bool]


@dataclass(frozen=True)
class UsageMeta:
    """Quota counters reported with every successful call."""

    api_request_limit: Optional[int] = None
    api_requests_used: Optional[int] = None
    api_requests_remaining: Optional[int] = None
    api_plan: Optional[str] = None
    api_daily_limit: Optional[int] = None
    api_daily_requests_used: Optional[int] = None
    api_daily_requests_remaining: Optional[int] = None
    api_rate_limit: Optional[int] = None


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    """Uniform result of one API call."""

    data: T
    usage: UsageMeta
    pagination: Optional[PaginationMeta] = None
    error: Optional[str] = None
    code: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class Game:
    id: str
    name: str
    cards_count: Optional[int] = None
    sets_count: Optional[int] = None
    last_updated: Optional[int] = None  # epoch seconds

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Game":
        return cls(
            id=str(raw["id"]),
            name=str(raw.get("name", "")),
            cards_count=_int_or_none(raw.get("cards_count", raw.get("cardsCount"))),
            sets_count=_int_or_none(raw.get("sets_count", raw.get("setsCount"))),
            last_updated=_int_or_none(raw.get("last_updated", raw.get("lastUpdated"))),
        )


@dataclass
class CardSet:
    """A set / expansion within a game."""

    id: str
    name: str
    game_id: Optional[str] = None
    game: Optional[str] = None
    cards_count: Optional[int] = None
    release_date: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "CardSet":
        return cls(
            id=str(raw["id"]),
            name=str(raw.get("name", "")),
            game_id=raw.get("gameId", raw.get("game_id")),
            game=raw.get("game"),
            cards_count=_int_or_none(raw.get("cards_count", raw.get("cardsCount"))),
            release_date=raw.get("release_date", raw.get("releaseDate")),
        )


@dataclass
class PriceHistoryEntry:
    t: int  # epoch seconds
    p: float  # USD


@dataclass
class Variant:
    """One condition/printing/language combination of a card, with prices."""

    id: str
    condition: Optional[str] = None
    printing: Optional[str] = None
    language: Optional[str] = None
    price: Optional[float] = None
    last_updated: Optional[int] = None
    tcgplayer_sku_id: Optional[str] = None
    price_change_24hr: Optional[float] = None
    price_change_7d: Optional[float] = None
    price_change_30d: Optional[float] = None
    price_change_90d: Optional[float] = None
    avg_price: Optional[float] = None
    avg_price_30d: Optional[float] = None
    avg_price_90d: Optional[float] = None
    min_price_7d: Optional[float] = None
    max_price_7d: Optional[float] = None
    min_price_30d: Optional[float] = None
    max_price_30d: Optional[float] = None
    min_price_90d: Optional[float] = None
    max_price_90d: Optional[float] = None
    price_history: List[PriceHistoryEntry] = field(default_factory=list)
    price_history_30d: List[PriceHistoryEntry] = field(default_factory=list)
    # Full record, for the statistics not promoted to attributes above
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Variant":
        return cls(
            id=str(raw["id"]),
            condition=raw.get("condition"),
            printing=raw.get("printing"),
            language=raw.get("language"),
            price=_float_or_none(raw.get("price")),
            last_updated=_int_or_none(raw.get("lastUpdated")),
            tcgplayer_sku_id=_str_or_none(raw.get("tcgplayerSkuId")),
            price_change_24hr=_float_or_none(raw.get("priceChange24hr")),
            price_change_7d=_float_or_none(raw.get("priceChange7d")),
            price_change_30d=_float_or_none(raw.get("priceChange30d")),
            price_change_90d=_float_or_none(raw.get("priceChange90d")),
            avg_price=_float_or_none(raw.get("avgPrice")),
            avg_price_30d=_float_or_none(raw.get("avgPrice30d")),
            avg_price_90d=_float_or_none(raw.get("avgPrice90d")),
            min_price_7d=_float_or_none(raw.get("minPrice7d")),
            max_price_7d=_float_or_none(raw.get("maxPrice7d")),
            min_price_30d=_float_or_none(raw.get("minPrice30d")),
            max_price_30d=_float_or_none(raw.get("maxPrice30d")),
            min_price_90d=_float_or_none(raw.get("minPrice90d")),
            max_price_90d=_float_or_none(raw.get("maxPrice90d")),
            price_history=_parse_history(raw.get("priceHistory")),
            price_history_30d=_parse_history(raw.get("priceHistory30d")),
            raw=dict(raw),
        )


@dataclass
class Card:
    """A trading card with one or more priced variants."""

    id: str
    name: str
    game: str = ""
    set: str = ""
    set_name: Optional[str] = None
    number: Optional[str] = None
    rarity: Optional[str] = None
    tcgplayer_id: Optional[str] = None
    details: Optional[str] = None
    variants: List[Variant] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Card":
        return cls(
            id=str(raw["id"]),
            name=str(raw.get("name", "")),
            game=str(raw.get("game", "")),
            set=str(raw.get("set", "")),
            set_name=raw.get("set_name", raw.get("setName")),
            number=_str_or_none(raw.get("number")),
            rarity=raw.get("rarity"),
            tcgplayer_id=_str_or_none(raw.get("tcgplayerId")),
            details=raw.get("details"),
            variants=[Variant.from_dict(v) for v in raw.get("variants") or []],
        )

    def top_variant(self) -> Optional[Variant]:
        """Return the highest-priced variant, or None if the card has none."""
        if not self.variants:
            return None
        return max(self.variants, key=lambda v: v.price or 0.0)

    def find_variant(self, variant_id: str) -> Optional[Variant]:
        for v in self.variants:
            if v.id == variant_id:
                return v
        return None


@dataclass
class BatchLookupItem:
    """One entry of a batch card lookup.

    At least one identifier should be set. ``printing`` and ``condition``
    narrow the variants returned for that card.
    """

    tcgplayer_id: Optional[str] = None
    tcgplayer_sku_id: Optional[str] = None
    card_id: Optional[str] = None
    variant_id: Optional[str] = None
    scryfall_id: Optional[str] = None
    mtgjson_id: Optional[str] = None
    printing: Optional[List[str]] = None
    condition: Optional[List[str]] = None
    include_price_history: Optional[bool] = None
    include_statistics: Optional[List[str]] = None

    def to_params(self) -> Dict[str, Any]:
        """Return the wire-named parameter mapping for this item."""
        return {
            "tcgplayerId": self.tcgplayer_id,
            "tcgplayerSkuId": self.tcgplayer_sku_id,
            "cardId": self.card_id,
            "variantId": self.variant_id,
            "scryfallId": self.scryfall_id,
            "mtgjsonId": self.mtgjson_id,
            "printing": self.printing,
            "condition": self.condition,
            "include_price_history": self.include_price_history,
            "include_statistics": self.include_statistics,
        }


def _parse_history(val: Any) -> List[PriceHistoryEntry]:
    if not isinstance(val, list):
        return []
    entries: List[PriceHistoryEntry] = []
    for point in val:
        if isinstance(point, dict) and "t" in point and "p" in point:
            entries.append(PriceHistoryEntry(t=int(point["t"]), p=float(point["p"])))
    return entries


def _int_or_none(val: Any) -> Optional[int]:
    if val is None or val == "":
        return None
    try:
        return int(val)
    except (ValueError, TypeError):
        return None


def _float_or_none(val: Any) -> Optional[float]:
    if val is None or val == "":
        return None
    try:
        return float(val)
    except (ValueError, TypeError):
        return None


def _str_or_none(val: Any) -> Optional[str]:
    if val is None or val == "":
        return None
    return str(val)
