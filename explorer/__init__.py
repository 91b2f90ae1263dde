"""Blockchair API client and command-line tools."""

from explorer.client import BASE_URL, AsyncBlockchairClient, BlockchairClient
from explorer.errors import (
    APIError,
    AuthorizationError,
    BlockchairError,
    ConfigurationError,
    ErrorKind,
    TransientError,
    user_message,
)
from explorer.models import ChainStats, StatsSnapshot

__all__ = [
    "BASE_URL",
    "AsyncBlockchairClient",
    "BlockchairClient",
    "APIError",
    "AuthorizationError",
    "BlockchairError",
    "ConfigurationError",
    "ErrorKind",
    "TransientError",
    "user_message",
    "ChainStats",
    "StatsSnapshot",
]
