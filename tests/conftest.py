"""
Shared pytest fixtures for testing the dashboard and the Blockchair client.

The upstream API is replaced by an httpx.MockTransport, so no test touches
the network.
"""

import os

os.environ["OTLP_ENABLED"] = "false"

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from explorer.client import AsyncBlockchairClient, BlockchairClient
from web import client as web_client
from web.app import app
from web.state import DashboardRegistry

TEST_API_KEY = "test-key"

GENERAL_STATS = {
    "data": {
        "bitcoin": {
            "data": {
                "blocks": 800000,
                "transactions": 870000000,
                "best_block_time": "2023-07-24 12:00:00",
                "market_price_usd": 29123.45,
                "market_price_usd_change_24h_percentage": -1.234,
                "market_cap_usd": 566000000000,
            }
        },
        "ethereum": {
            "data": {
                "blocks": 17750000,
                "circulation": "120200000000000000000000000",
                "market_price_usd": 1850.1,
            }
        },
        "litecoin": None,
    },
    "context": {"code": 200, "state": 800000},
}


class MockUpstream:
    """Programmable stand-in for api.blockchair.com."""

    def __init__(self):
        self.routes: dict[str, tuple[int, object, str | None]] = {}
        self.requests: list[httpx.Request] = []

    def route(self, path: str, status: int = 200, json=None, text: str | None = None) -> None:
        """Answer GET requests for ``path`` with the given status and body."""
        self.routes[path] = (status, json, text)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path not in self.routes:
            return httpx.Response(
                404, json={"data": None, "context": {"code": 404, "error": "Not found"}}
            )
        status, body, text = self.routes[request.url.path]
        if text is not None:
            return httpx.Response(status, text=text)
        return httpx.Response(status, json=body)

    def client(self, api_key: str | None = TEST_API_KEY) -> BlockchairClient:
        return BlockchairClient(api_key, transport=httpx.MockTransport(self.handler))

    def async_client(self, api_key: str | None = TEST_API_KEY) -> AsyncBlockchairClient:
        return AsyncBlockchairClient(api_key, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def upstream():
    """Provide a fresh mock upstream."""
    return MockUpstream()


@pytest.fixture
def general_stats():
    """The aggregated /stats body used across tests."""
    return GENERAL_STATS


@pytest_asyncio.fixture
async def dashboard_client(upstream, monkeypatch):
    """Provide a test client for the dashboard backed by the mock upstream.

    Each test gets a fresh view state and its own Blockchair client.
    """
    blockchair = upstream.async_client()
    monkeypatch.setattr(web_client, "_client", blockchair)
    monkeypatch.setattr(app.state, "dashboards", DashboardRegistry())

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    await blockchair.aclose()
