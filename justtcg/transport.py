"""HTTP transport for the JustTCG API."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx

from justtcg.errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.justtcg.com/v1"
DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "justtcg-python/0.1"


class HttpTransport:
    """Performs single authenticated requests and returns the decoded body.

    One call to ``request`` is exactly one HTTP exchange. Nothing is
    retried; non-2xx statuses, network errors and undecodable bodies all
    raise ``TransportError``.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._user_agent = user_agent
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def base_url(self) -> str:
        return self._base_url

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                headers=self._headers(),
            )
        return self._client

    def _headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self._api_key,
            "Content-Type": "application/json",
            "User-Agent": self._user_agent,
        }

    async def request(self, method: str, path: str, payload: Any = None) -> Any:
        """Send one request; GET payloads go in the query, POST payloads in the body."""
        method = method.upper()
        client = self._get_client()
        kwargs: Dict[str, Any] = {}
        if method == "GET":
            if payload:
                kwargs["params"] = payload
        elif payload is not None:
            kwargs["content"] = json.dumps(payload)

        logger.debug("%s %s%s", method, self._base_url, path)
        try:
            resp = await client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to {path} failed: {exc}") from exc

        logger.debug("%s %s -> %d", method, path, resp.status_code)
        if not resp.is_success:
            raise TransportError(_error_message(resp), status_code=resp.status_code)

        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(
                f"Invalid JSON in response from {path}", status_code=resp.status_code
            ) from exc

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params)

    async def post(self, path: str, body: Any) -> Any:
        return await self.request("POST", path, body)

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return "An API error occurred"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return "An API error occurred"
