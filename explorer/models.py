"""Typed views over Blockchair statistics payloads."""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


class ChainStats(BaseModel):
    """Statistics for a single chain.

    Every field is optional: chains report different subsets, and the
    aggregated endpoint omits some of them entirely. Fields not listed here
    are kept as extras.
    """

    blocks: int | None = None
    transactions: int | None = None
    circulation: int | float | str | None = None
    blockchain_size: int | None = None
    difficulty: float | None = None
    hashrate_24h: int | float | str | None = None
    best_block_height: int | None = None
    best_block_hash: str | None = None
    best_block_time: str | None = None
    mempool_transactions: int | None = None
    market_price_usd: float | None = None
    market_price_btc: float | None = None
    market_price_usd_change_24h_percentage: float | None = None
    market_cap_usd: float | None = None
    market_dominance_percentage: float | None = None

    model_config = {"extra": "allow"}


def parse_stats(chain: str, data: Mapping[str, Any]) -> ChainStats:
    """Validate one chain's stats, dropping fields of an unexpected type.

    A mistyped field ends up as None, which renders as a placeholder,
    instead of discarding the whole record.
    """
    try:
        return ChainStats.model_validate(data)
    except ValidationError as e:
        invalid = {error["loc"][0] for error in e.errors() if error["loc"]}
        logger.warning(f"Dropping invalid stats fields for {chain}: {', '.join(sorted(map(str, invalid)))}")
        return ChainStats.model_validate({k: v for k, v in data.items() if k not in invalid})


def parse_chain_entry(chain: str, entry: Any) -> ChainStats | None:
    """Parse one ``{"data": {...}}`` entry of the aggregated stats body.

    Returns None for entries that are null or have no ``data`` object, so
    one odd chain never spoils the snapshot.
    """
    if not isinstance(entry, Mapping):
        return None
    data = entry.get("data")
    if not isinstance(data, Mapping):
        return None
    return parse_stats(chain, data)


@dataclass(frozen=True)
class StatsSnapshot:
    """Aggregated statistics for every chain, keyed by chain id."""

    chains: dict[str, ChainStats | None]
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, body: Mapping[str, Any]) -> "StatsSnapshot":
        """Build a snapshot from the full ``/stats`` response body."""
        data = body.get("data")
        if not isinstance(data, Mapping):
            raise ValueError("stats response has no data object")
        chains = {chain: parse_chain_entry(chain, entry) for chain, entry in data.items()}
        return cls(chains=chains, raw=dict(body))

    def get(self, chain: str) -> ChainStats | None:
        """Get stats for a chain, or None if it is absent."""
        return self.chains.get(chain)

    def available(self) -> list[tuple[str, ChainStats]]:
        """Chains with stats, in upstream order."""
        return [(chain, stats) for chain, stats in self.chains.items() if stats is not None]

    def to_dict(self) -> dict[str, Any]:
        return {
            chain: stats.model_dump() if stats is not None else None
            for chain, stats in self.chains.items()
        }

    def __contains__(self, chain) -> bool:
        return self.chains.get(chain) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.chains)

    def __len__(self) -> int:
        return len(self.chains)
