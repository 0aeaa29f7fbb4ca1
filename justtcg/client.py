"""Top-level JustTCG client."""

from __future__ import annotations

import dataclasses
import logging
import os
from typing import Any, Optional

from justtcg.config import ClientConfig, resolve_api_key, validate_config
from justtcg.resources import CardsResource, GamesResource, SetsResource
from justtcg.transport import HttpTransport

logger = logging.getLogger(__name__)


class V1Client:
    """Resources of the v1 API."""

    def __init__(self, transport: HttpTransport, config: ClientConfig) -> None:
        kwargs = {"page_size": config.page_size, "max_pages": config.max_pages}
        self.games = GamesResource(transport, **kwargs)
        self.sets = SetsResource(transport, **kwargs)
        self.cards = CardsResource(transport, **kwargs)


class JustTCG:
    """Entry point for the JustTCG API.

    The API key is resolved once, here: the *api_key* argument wins over
    ``config.api_key``, which wins over the ``JUSTTCG_API_KEY`` environment
    variable. A missing key raises ``AuthenticationError`` before any
    request is made.

    Usage::

        async with JustTCG(api_key="...") as client:
            games = await client.v1.games.list()
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        config: Optional[ClientConfig] = None,
        transport: Optional[HttpTransport] = None,
    ) -> None:
        base = config or ClientConfig()
        validate_config(base)
        self.config = dataclasses.replace(
            base, api_key=resolve_api_key(api_key, base, os.environ)
        )

        self._transport = transport or HttpTransport(
            api_key=self.config.api_key,
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            user_agent=self.config.user_agent,
        )
        self.v1 = V1Client(self._transport, self.config)
        logger.debug("JustTCG client ready for %s", self.config.base_url)

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> "JustTCG":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
