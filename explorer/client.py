"""HTTP clients for the Blockchair API.

Every call is a single GET with the API key attached as the ``key`` query
parameter. Failures are raised as one of the errors in ``explorer.errors``.
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from explorer.errors import AuthorizationError, ConfigurationError, TransientError
from explorer.models import ChainStats, StatsSnapshot, parse_stats

logger = logging.getLogger(__name__)

BASE_URL = "https://api.blockchair.com"


def _segment(value: str) -> str:
    """URL-encode a single path segment."""
    return quote(str(value), safe="")


def _params(api_key: str | None, **extra: Any) -> dict[str, Any]:
    """Build query parameters, failing before any request if the key is missing."""
    if not api_key:
        raise ConfigurationError()
    return {**extra, "key": api_key}


def _decode(path: str, response: httpx.Response) -> Any:
    """Classify the response status and decode its JSON body."""
    if response.status_code == 402:
        logger.warning(f"Blockchair rejected the API key for {path} (HTTP 402)")
        raise AuthorizationError(402, _detail(response))

    if not response.is_success:
        logger.warning(f"Blockchair request {path} failed with HTTP {response.status_code}")
        raise TransientError(response.status_code, _detail(response))

    try:
        return response.json()
    except ValueError as e:
        logger.warning(f"Blockchair request {path} returned malformed JSON")
        raise TransientError(response.status_code, "malformed JSON response") from e


def _detail(response: httpx.Response) -> str:
    """Best-effort error detail from a failed response."""
    try:
        context = response.json().get("context", {})
        return context.get("error") or response.text
    except Exception:
        return response.text


def _unwrap(path: str, body: Any) -> Any:
    """Return the ``data`` member of a response body."""
    if not isinstance(body, dict) or "data" not in body:
        logger.warning(f"Blockchair request {path} returned no data member")
        raise TransientError(None, "response has no data member")
    return body["data"]


def _snapshot(path: str, body: Any) -> StatsSnapshot:
    if not isinstance(body, dict):
        raise TransientError(None, "stats response is not an object")
    try:
        return StatsSnapshot.from_payload(body)
    except ValueError as e:
        logger.warning(f"Blockchair request {path} returned unexpected stats: {e}")
        raise TransientError(None, str(e)) from e


def _chain_stats(chain: str, path: str, data: Any) -> ChainStats:
    if not isinstance(data, dict):
        logger.warning(f"Blockchair request {path} returned unexpected chain stats")
        raise TransientError(None, "chain stats is not an object")
    return parse_stats(chain, data)


class BlockchairClient:
    """Blocking client for the Blockchair API."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str = BASE_URL,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.transport = transport
        if not api_key:
            logger.warning("Blockchair API key is missing; every request will fail")

    def _get(self, path: str, **params: Any) -> Any:
        """Make a GET request and return the decoded body."""
        query = _params(self.api_key, **params)
        try:
            with httpx.Client(base_url=self.base_url, transport=self.transport) as client:
                response = client.get(path, params=query)
        except httpx.HTTPError as e:
            logger.warning(f"Blockchair request {path} failed: {e.__class__.__name__}")
            raise TransientError(None, str(e) or e.__class__.__name__) from e
        return _decode(path, response)

    def get_general_stats(self) -> StatsSnapshot:
        """Get the aggregated statistics of every chain."""
        path = "/stats"
        return _snapshot(path, self._get(path))

    def get_chain_stats(self, chain: str) -> ChainStats:
        """Get statistics for a single chain."""
        path = f"/{_segment(chain)}/stats"
        return _chain_stats(chain, path, _unwrap(path, self._get(path)))

    def get_recent_transactions(self, chain: str, limit: int = 5) -> list[dict]:
        """Get the latest transactions on a chain, newest first."""
        path = f"/{_segment(chain)}/transactions"
        data = _unwrap(path, self._get(path, limit=limit))
        if not isinstance(data, list):
            raise TransientError(None, "transactions response is not a list")
        return data

    def get_address(self, chain: str, address: str) -> dict:
        """Get the address dashboard record."""
        path = f"/{_segment(chain)}/dashboards/address/{_segment(address)}"
        return _unwrap(path, self._get(path))

    def get_transaction(self, chain: str, txid: str) -> dict:
        """Get the transaction dashboard record."""
        path = f"/{_segment(chain)}/dashboards/transaction/{_segment(txid)}"
        return _unwrap(path, self._get(path))


class AsyncBlockchairClient:
    """Async client for the Blockchair API."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str = BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            api_key: Blockchair API key. May be empty; operations then fail
                with ConfigurationError without touching the network.
            base_url: Base URL of the API
            transport: Optional httpx transport, mainly for tests
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.transport = transport
        self._client: httpx.AsyncClient | None = None
        if not api_key:
            logger.warning("Blockchair API key is missing; every request will fail")

    async def __aenter__(self) -> "AsyncBlockchairClient":
        """Enter async context."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Exit async context."""
        await self.aclose()

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the HTTP client, creating one if needed."""
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, transport=self.transport)
        return self._client

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _get(self, path: str, **params: Any) -> Any:
        query = _params(self.api_key, **params)
        try:
            response = await self.client.get(path, params=query)
        except httpx.HTTPError as e:
            logger.warning(f"Blockchair request {path} failed: {e.__class__.__name__}")
            raise TransientError(None, str(e) or e.__class__.__name__) from e
        return _decode(path, response)

    async def get_general_stats(self) -> StatsSnapshot:
        """Get the aggregated statistics of every chain."""
        path = "/stats"
        return _snapshot(path, await self._get(path))

    async def get_chain_stats(self, chain: str) -> ChainStats:
        """Get statistics for a single chain."""
        path = f"/{_segment(chain)}/stats"
        return _chain_stats(chain, path, _unwrap(path, await self._get(path)))

    async def get_recent_transactions(self, chain: str, limit: int = 5) -> list[dict]:
        """Get the latest transactions on a chain, newest first."""
        path = f"/{_segment(chain)}/transactions"
        data = _unwrap(path, await self._get(path, limit=limit))
        if not isinstance(data, list):
            raise TransientError(None, "transactions response is not a list")
        return data

    async def get_address(self, chain: str, address: str) -> dict:
        """Get the address dashboard record."""
        path = f"/{_segment(chain)}/dashboards/address/{_segment(address)}"
        return _unwrap(path, await self._get(path))

    async def get_transaction(self, chain: str, txid: str) -> dict:
        """Get the transaction dashboard record."""
        path = f"/{_segment(chain)}/dashboards/transaction/{_segment(txid)}"
        return _unwrap(path, await self._get(path))
