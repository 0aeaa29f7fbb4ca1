"""Polling for cards updated since the last seen game timestamp.

One poll compares the game's ``last_updated`` from /games with the stored
baseline. When the game has moved on, cards changed since the baseline are
fetched with ``updated_after`` (or all cards of the game in snapshot mode)
and the baseline is advanced. The baseline is only saved after every page
was fetched, so an interrupted poll is repeated from the old baseline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from justtcg.client import JustTCG
from justtcg.errors import ApiError, JustTCGError
from justtcg.models import Card, Game, UsageMeta
from justtcg.state import BaselineTracker

logger = logging.getLogger(__name__)


@dataclass
class UpdateResult:
    game: Game
    previous_baseline: Optional[int]
    current_baseline: Optional[int]
    cards: List[Card] = field(default_factory=list)
    fetched: bool = False  # whether cards were requested in this poll
    usage: Optional[UsageMeta] = None  # quota after the last request of the poll


async def find_game(client: JustTCG, game: str) -> Game:
    """Return the game whose id or name matches *game* (case-insensitive)."""
    g, _ = await _lookup_game(client, game)
    return g


async def _lookup_game(client: JustTCG, game: str) -> Tuple[Game, UsageMeta]:
    response = await client.v1.games.list()
    if response.error:
        raise ApiError(response.error, response.code)

    wanted = game.lower()
    for g in response.data:
        if g.id.lower() == wanted or g.name.lower() == wanted:
            return g, response.usage
    raise JustTCGError(f"Game '{game}' not found in the games list")


async def check_for_updates(
    client: JustTCG,
    game: str,
    tracker: BaselineTracker,
    snapshot: bool = False,
    initial_snapshot: bool = True,
) -> UpdateResult:
    """Run one poll for *game* and return any updated cards.

    Without a stored baseline, all cards are fetched when *initial_snapshot*
    is set; otherwise the current timestamp is just recorded.
    """
    g, usage = await _lookup_game(client, game)
    previous = tracker.get(g.id)
    current = g.last_updated
    result = UpdateResult(game=g, previous_baseline=previous, current_baseline=current, usage=usage)

    if current is None:
        logger.warning("Game %s reports no last_updated timestamp; nothing to compare", g.id)
        return result

    if previous is not None and current <= previous:
        logger.info("No updates for %s since %d", g.id, previous)
        return result

    if previous is None and not initial_snapshot:
        logger.info("Recording initial baseline %d for %s", current, g.id)
    else:
        filters = {"game": g.id}
        if previous is not None and not snapshot:
            filters["updated_after"] = previous
        logger.info(
            "Fetching %s cards for %s%s",
            "all" if "updated_after" not in filters else "updated",
            g.id,
            f" since {previous}" if "updated_after" in filters else "",
        )
        async with client.v1.cards.fetch_all(**filters) as cards:
            result.cards = await cards.collect()
            result.usage = cards.last_usage or usage
        result.fetched = True
        logger.info("Fetched %d cards for %s", len(result.cards), g.id)

    tracker.set(g.id, current)
    tracker.save()
    return result
