"""Python client for the JustTCG trading card pricing API."""

from __future__ import annotations

from justtcg.client import JustTCG, V1Client
from justtcg.config import ClientConfig, load_config
from justtcg.errors import (
    ApiError,
    AuthenticationError,
    ConfigError,
    JustTCGError,
    PaginationError,
    TransportError,
)
from justtcg.models import (
    CONDITIONS,
    ApiResponse,
    BatchLookupItem,
    Card,
    CardSet,
    Game,
    PaginationMeta,
    PriceHistoryEntry,
    UsageMeta,
    Variant,
)
from justtcg.pagination import PageIterator, paginate
from justtcg.response import normalize

__version__ = "0.1.0"

__all__ = [
    "CONDITIONS",
    "ApiError",
    "ApiResponse",
    "AuthenticationError",
    "BatchLookupItem",
    "Card",
    "CardSet",
    "ClientConfig",
    "ConfigError",
    "Game",
    "JustTCG",
    "JustTCGError",
    "PageIterator",
    "PaginationError",
    "PaginationMeta",
    "PriceHistoryEntry",
    "TransportError",
    "UsageMeta",
    "V1Client",
    "Variant",
    "load_config",
    "normalize",
    "paginate",
]
