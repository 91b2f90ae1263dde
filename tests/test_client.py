"""Tests for the blocking Blockchair client."""

import httpx
import pytest

from explorer.client import BASE_URL, BlockchairClient
from explorer.errors import (
    AuthorizationError,
    ConfigurationError,
    ErrorKind,
    TransientError,
)
from explorer.models import ChainStats, StatsSnapshot

OPERATIONS = [
    ("get_general_stats", (), "/stats"),
    ("get_chain_stats", ("bitcoin",), "/bitcoin/stats"),
    ("get_recent_transactions", ("bitcoin", 5), "/bitcoin/transactions"),
    ("get_address", ("bitcoin", "1A1zP1"), "/bitcoin/dashboards/address/1A1zP1"),
    ("get_transaction", ("bitcoin", "abc123"), "/bitcoin/dashboards/transaction/abc123"),
]


# ============================================================================
# Error classification
# ============================================================================


@pytest.mark.parametrize("api_key", [None, ""])
@pytest.mark.parametrize("method,args,path", OPERATIONS)
def test_missing_key_fails_before_request(upstream, api_key, method, args, path):
    """Without a key every operation raises ConfigurationError offline."""
    upstream.route(path, json={"data": {}})
    client = upstream.client(api_key=api_key)

    with pytest.raises(ConfigurationError) as exc_info:
        getattr(client, method)(*args)

    assert exc_info.value.kind is ErrorKind.CONFIGURATION
    assert str(exc_info.value) == "credential missing"
    assert upstream.requests == []


@pytest.mark.parametrize("method,args,path", OPERATIONS)
def test_402_is_authorization_error(upstream, method, args, path):
    """HTTP 402 means the key was rejected."""
    upstream.route(
        path,
        status=402,
        json={"data": None, "context": {"code": 402, "error": "Invalid API key"}},
    )

    with pytest.raises(AuthorizationError) as exc_info:
        getattr(upstream.client(), method)(*args)

    assert exc_info.value.kind is ErrorKind.AUTHORIZATION
    assert exc_info.value.status_code == 402
    assert exc_info.value.detail == "Invalid API key"


@pytest.mark.parametrize("status", [400, 401, 403, 404, 429, 430, 500, 503])
@pytest.mark.parametrize("method,args,path", OPERATIONS)
def test_other_error_status_is_transient(upstream, status, method, args, path):
    """Every non-2xx status other than 402 is transient."""
    upstream.route(path, status=status, text="nope")

    with pytest.raises(TransientError) as exc_info:
        getattr(upstream.client(), method)(*args)

    assert exc_info.value.kind is ErrorKind.TRANSIENT
    assert exc_info.value.status_code == status


@pytest.mark.parametrize("method,args,path", OPERATIONS)
def test_malformed_json_is_transient(upstream, method, args, path):
    """An undecodable body is transient."""
    upstream.route(path, text="<html>gateway hiccup</html>")

    with pytest.raises(TransientError):
        getattr(upstream.client(), method)(*args)


@pytest.mark.parametrize(
    "exc",
    [
        httpx.ConnectError("Name or service not known"),
        httpx.ReadTimeout("timed out"),
    ],
)
def test_transport_failure_is_transient(exc):
    """DNS failures and timeouts are transient and carry no status."""

    def handler(request):
        raise exc

    client = BlockchairClient("test-key", transport=httpx.MockTransport(handler))

    with pytest.raises(TransientError) as exc_info:
        client.get_general_stats()

    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, httpx.HTTPError)


def test_missing_data_member_is_transient(upstream):
    """Single-entity endpoints require a data member."""
    upstream.route("/bitcoin/dashboards/address/1A1zP1", json={"context": {"code": 200}})

    with pytest.raises(TransientError):
        upstream.client().get_address("bitcoin", "1A1zP1")


def test_construction_without_key_does_not_raise(caplog):
    """A missing key is only reported, not raised, at construction."""
    client = BlockchairClient(None)

    assert client.api_key is None
    assert "API key is missing" in caplog.text


# ============================================================================
# Request building
# ============================================================================


def test_key_is_sent_as_query_parameter(upstream, general_stats):
    upstream.route("/stats", json=general_stats)

    upstream.client().get_general_stats()

    request = upstream.requests[0]
    assert request.method == "GET"
    assert request.url.host == httpx.URL(BASE_URL).host
    assert request.url.params["key"] == "test-key"


def test_recent_transactions_sends_limit_before_key(upstream):
    upstream.route("/ethereum/transactions", json={"data": []})

    upstream.client().get_recent_transactions("ethereum", limit=10)

    request = upstream.requests[0]
    assert request.url.params["limit"] == "10"
    assert request.url.query == b"limit=10&key=test-key"


def test_path_segments_are_url_encoded(upstream):
    """Lookup input is passed through, only URL-encoded."""
    upstream.route("/bitcoin/dashboards/address/a/b c", json={"data": {}})

    upstream.client().get_address("bitcoin", "a/b c")

    raw_path = upstream.requests[0].url.raw_path
    assert raw_path.startswith(b"/bitcoin/dashboards/address/a%2Fb%20c?")


def test_base_url_trailing_slash_is_ignored():
    client = BlockchairClient("k", base_url="https://example.test/")

    assert client.base_url == "https://example.test"


# ============================================================================
# Response mapping
# ============================================================================


def test_general_stats_snapshot(upstream):
    """A null chain entry is absent from the snapshot, not an error."""
    upstream.route(
        "/stats",
        json={"data": {"bitcoin": {"data": {"blocks": 800000}}}, "ethereum": None},
    )

    snapshot = upstream.client().get_general_stats()

    assert isinstance(snapshot, StatsSnapshot)
    assert snapshot.get("bitcoin").blocks == 800000
    assert snapshot.get("ethereum") is None
    assert "ethereum" not in snapshot


def test_general_stats_keeps_upstream_order(upstream, general_stats):
    upstream.route("/stats", json=general_stats)

    snapshot = upstream.client().get_general_stats()

    assert list(snapshot) == ["bitcoin", "ethereum", "litecoin"]
    assert [chain for chain, _ in snapshot.available()] == ["bitcoin", "ethereum"]
    assert snapshot.raw["context"]["state"] == 800000


def test_general_stats_without_data_is_transient(upstream):
    upstream.route("/stats", json={"context": {"code": 200}})

    with pytest.raises(TransientError):
        upstream.client().get_general_stats()


def test_chain_stats(upstream):
    upstream.route(
        "/bitcoin/stats",
        json={"data": {"blocks": 800000, "hashrate_24h": "400000000000000000000"}},
    )

    stats = upstream.client().get_chain_stats("bitcoin")

    assert isinstance(stats, ChainStats)
    assert stats.blocks == 800000
    assert stats.hashrate_24h == "400000000000000000000"
    assert stats.market_price_usd is None


def test_chain_stats_with_mistyped_field_keeps_the_rest(upstream):
    upstream.route(
        "/monero/stats",
        json={"data": {"blocks": 3000000, "hashrate_24h": 2500000000, "difficulty": "n/a"}},
    )

    stats = upstream.client().get_chain_stats("monero")

    assert stats.blocks == 3000000
    assert stats.hashrate_24h == 2500000000
    assert stats.difficulty is None


def test_recent_transactions(upstream):
    txs = [{"hash": "aa", "block_id": 1}, {"hash": "bb", "block_id": 2}]
    upstream.route("/bitcoin/transactions", json={"data": txs})

    assert upstream.client().get_recent_transactions("bitcoin") == txs
    assert upstream.requests[0].url.params["limit"] == "5"


def test_recent_transactions_must_be_a_list(upstream):
    upstream.route("/bitcoin/transactions", json={"data": {"hash": "aa"}})

    with pytest.raises(TransientError):
        upstream.client().get_recent_transactions("bitcoin")


def test_address_returns_inner_data_unmodified(upstream):
    inner = {
        "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa": {
            "address": {"type": "pubkeyhash", "balance": 7300000000},
            "transactions": ["4a5e1e"],
        }
    }
    upstream.route(
        "/bitcoin/dashboards/address/1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa",
        json={"data": inner, "context": {"code": 200}},
    )

    result = upstream.client().get_address("bitcoin", "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa")

    assert result == inner


def test_transaction_returns_inner_data_unmodified(upstream):
    inner = {"4a5e1e": {"transaction": {"block_id": 0}, "inputs": [], "outputs": []}}
    upstream.route("/bitcoin/dashboards/transaction/4a5e1e", json={"data": inner})

    assert upstream.client().get_transaction("bitcoin", "4a5e1e") == inner
