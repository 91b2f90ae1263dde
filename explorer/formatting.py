"""Display formatting for chain statistics.

Shared by the CLI and the dashboard templates. Every helper degrades to
PLACEHOLDER when the value is missing or unusable instead of raising.
"""

from dataclasses import dataclass
from datetime import datetime, timezone

PLACEHOLDER = "--"

# Chains reported by the aggregated /stats endpoint
KNOWN_CHAINS = [
    "bitcoin",
    "bitcoin-cash",
    "ethereum",
    "litecoin",
    "bitcoin-sv",
    "dogecoin",
    "dash",
    "ripple",
    "groestlcoin",
    "stellar",
    "monero",
    "cardano",
    "zcash",
    "mixin",
]

CHAIN_ICONS = {
    "bitcoin": "₿",
    "ethereum": "Ξ",
    "bitcoin-cash": "₿",
    "litecoin": "Ł",
    "bitcoin-sv": "₿",
    "dogecoin": "Ð",
    "dash": "Ð",
    "ripple": "XRP",
    "stellar": "XLM",
    "monero": "XMR",
    "cardano": "₳",
    "zcash": "ZEC",
    "mixin": "XIN",
}


@dataclass(frozen=True)
class ChainMeta:
    """Visual metadata for a chain card."""

    name: str
    symbol: str
    color: str
    icon: str


_CHAIN_META = {
    "bitcoin": ChainMeta("Bitcoin", "BTC", "#F7931A", "₿"),
    "ethereum": ChainMeta("Ethereum", "ETH", "#627EEA", "Ξ"),
    "bitcoin-cash": ChainMeta("Bitcoin Cash", "BCH", "#8DC351", "B"),
}

DEFAULT_COLOR = "#374151"


def chain_icon(chain: str) -> str:
    """Get the glyph for a chain, falling back to its initial."""
    if chain in CHAIN_ICONS:
        return CHAIN_ICONS[chain]
    return chain[:1].upper() or "?"


def chain_meta(chain: str) -> ChainMeta:
    """Get display metadata for a chain."""
    if chain in _CHAIN_META:
        return _CHAIN_META[chain]
    return ChainMeta(name=chain, symbol="", color=DEFAULT_COLOR, icon=chain_icon(chain))


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def format_number(value) -> str:
    """Format an integer with thousands separators."""
    if not _is_number(value):
        return PLACEHOLDER
    if isinstance(value, float) and not value.is_integer():
        return f"{value:,.2f}"
    return f"{int(value):,}"


def format_price(value) -> str:
    """Format a USD amount."""
    if not _is_number(value):
        return PLACEHOLDER
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_percentage(value) -> str:
    """Format a value already expressed in percent."""
    if not _is_number(value):
        return PLACEHOLDER
    return f"{value:.2f}%"


def parse_timestamp(value) -> datetime | None:
    """Parse a Blockchair UTC timestamp (``YYYY-MM-DD HH:MM:SS``)."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def time_ago(value, now: datetime | None = None) -> str:
    """Describe how long ago a timestamp was."""
    moment = parse_timestamp(value)
    if moment is None:
        return PLACEHOLDER
    now = now or datetime.now(timezone.utc)
    seconds = max(int((now - moment).total_seconds()), 0)
    if seconds < 60:
        return f"{seconds} seconds ago"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes} minutes ago"
    return f"{minutes // 60} hours ago"
