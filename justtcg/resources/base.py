"""Shared request plumbing for API resources."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

from justtcg.models import ApiResponse
from justtcg.response import normalize
from justtcg.serializer import FieldPolicy, serialize_body, serialize_query
from justtcg.transport import HttpTransport

logger = logging.getLogger(__name__)

R = TypeVar("R")


class BaseResource:
    """Serializes parameters, calls the transport and normalizes the result."""

    # Per-resource overrides of the serializer policy table; None uses the defaults
    field_policies: Optional[Mapping[str, FieldPolicy]] = None

    def __init__(self, transport: HttpTransport, page_size: int = 100,
                 max_pages: Optional[int] = None) -> None:
        self._transport = transport
        self._page_size = page_size
        self._max_pages = max_pages

    async def _get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> ApiResponse[Any]:
        query = serialize_query(params, self.field_policies)
        raw = await self._transport.get(path, query or None)
        return normalize(raw)

    async def _post(self, path: str, items: List[Mapping[str, Any]]) -> ApiResponse[Any]:
        body = [serialize_body(item, self.field_policies) for item in items]
        raw = await self._transport.post(path, body)
        return normalize(raw)


def parse_records(
    response: ApiResponse[Any],
    parse: Callable[[Dict[str, Any]], R],
    label: str,
) -> ApiResponse[List[R]]:
    """Replace the raw ``data`` list of *response* with parsed records.

    Records that fail to parse are logged and skipped. Envelope fields are
    carried over untouched.
    """
    data = response.data
    if isinstance(data, dict):
        data = [data]
    records: List[R] = []
    for raw in data or []:
        try:
            records.append(parse(raw))
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Failed to parse %s record %r: %s", label, _record_id(raw), exc)
    return dataclasses.replace(response, data=records)


def _record_id(raw: Any) -> Any:
    if isinstance(raw, dict):
        return raw.get("id", "?")
    return "?"
