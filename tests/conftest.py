"""Shared fixtures for the JustTCG client tests."""

import pytest

from justtcg.client import JustTCG

BASE_URL = "https://api.justtcg.com/v1"

USAGE = {
    "apiRequestLimit": 1000,
    "apiRequestsUsed": 4,
    "apiRequestsRemaining": 996,
    "apiPlan": "Free Tier",
}


def envelope(data, meta=None, **extra):
    """Build a raw response envelope the way the API returns it."""
    body = {"data": data, "_metadata": dict(USAGE)}
    if meta is not None:
        body["meta"] = meta
    body.update(extra)
    return body


@pytest.fixture(autouse=True)
def _no_env_key(monkeypatch):
    monkeypatch.delenv("JUSTTCG_API_KEY", raising=False)


@pytest.fixture
async def client():
    c = JustTCG(api_key="test-key")
    yield c
    await c.close()
