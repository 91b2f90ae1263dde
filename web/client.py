"""Blockchair client for the dashboard.

Wraps AsyncBlockchairClient from explorer.client for use in the web application.
"""

import os

from explorer.client import AsyncBlockchairClient

# Configuration from environment
API_KEY = os.getenv("BLOCKCHAIR_API_KEY", "")

# Global client instance
_client: AsyncBlockchairClient | None = None


def get_client() -> AsyncBlockchairClient:
    """Get the AsyncBlockchairClient instance."""
    global _client
    if _client is None:
        _client = AsyncBlockchairClient(api_key=API_KEY)
    return _client


async def close_client() -> None:
    """Close the shared client's connection pool."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


__all__ = ["get_client", "close_client", "AsyncBlockchairClient", "API_KEY"]
