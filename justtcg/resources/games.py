"""The /games resource."""

from __future__ import annotations

import logging
from typing import List

from justtcg.models import ApiResponse, Game
from justtcg.resources.base import BaseResource, parse_records

logger = logging.getLogger(__name__)


class GamesResource(BaseResource):
    async def list(self) -> ApiResponse[List[Game]]:
        """Fetch all supported games (not paginated)."""
        response = await self._get("/games")
        games = parse_records(response, Game.from_dict, "game")
        logger.info("Games: %d returned", len(games.data))
        return games
