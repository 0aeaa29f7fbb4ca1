"""API resource classes, one per endpoint family."""

from __future__ import annotations

from justtcg.resources.cards import CardsResource
from justtcg.resources.games import GamesResource
from justtcg.resources.sets import SetsResource

__all__ = ["CardsResource", "GamesResource", "SetsResource"]
