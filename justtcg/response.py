"""Normalization of raw JustTCG response envelopes."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from justtcg.errors import TransportError
from justtcg.models import ApiResponse, PaginationMeta, UsageMeta


def normalize(raw: Mapping[str, Any]) -> ApiResponse[Any]:
    """Map a raw envelope to an ``ApiResponse``.

    ``data`` is copied as-is, ``meta`` becomes ``pagination`` only when the
    server sent one, ``_metadata`` always becomes ``usage``, and
    ``error``/``code`` are kept only when non-empty. API-level errors are
    returned, not raised. A body that is not a JSON object raises
    ``TransportError``.
    """
    if not isinstance(raw, Mapping):
        raise TransportError(f"Invalid response envelope: expected an object, got {type(raw).__name__}")
    meta = raw.get("meta")
    metadata = raw.get("_metadata")
    return ApiResponse(
        data=raw.get("data"),
        usage=_usage(metadata if isinstance(metadata, Mapping) else {}),
        pagination=_pagination(meta) if isinstance(meta, Mapping) else None,
        error=raw.get("error") or None,
        code=raw.get("code") or None,
    )


def _pagination(meta: Mapping[str, Any]) -> PaginationMeta:
    return PaginationMeta(
        total=meta.get("total"),
        limit=meta.get("limit"),
        offset=meta.get("offset"),
        has_more=meta.get("hasMore"),
    )


def _usage(metadata: Mapping[str, Any]) -> UsageMeta:
    return UsageMeta(
        api_request_limit=metadata.get("apiRequestLimit"),
        api_requests_used=metadata.get("apiRequestsUsed"),
        api_requests_remaining=metadata.get("apiRequestsRemaining"),
        api_plan=metadata.get("apiPlan"),
        api_daily_limit=metadata.get("apiDailyLimit"),
        api_daily_requests_used=metadata.get("apiDailyRequestsUsed"),
        api_daily_requests_remaining=metadata.get("apiDailyRequestsRemaining"),
        api_rate_limit=metadata.get("apiRateLimit"),
    )


def describe_usage(usage: Optional[UsageMeta]) -> str:
    """One-line human summary of the quota counters."""
    if usage is None or usage.api_requests_remaining is None:
        return "API usage unavailable"
    text = f"API requests remaining: {usage.api_requests_remaining}"
    if usage.api_request_limit is not None:
        text += f"/{usage.api_request_limit}"
    if usage.api_plan:
        text += f" ({usage.api_plan})"
    return text
