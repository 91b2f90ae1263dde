"""Error taxonomy for the Blockchair client.

Callers branch on ``kind`` rather than on the underlying detail: every
failure is one of three kinds, each with a single fixed message.
"""

import enum


class ErrorKind(str, enum.Enum):
    """Classification of a failed client operation."""

    CONFIGURATION = "configuration"  # Credential missing, detected before any request
    AUTHORIZATION = "authorization"  # Upstream rejected the credential (HTTP 402)
    TRANSIENT = "transient"  # Anything else: network, non-2xx, malformed body


USER_MESSAGES = {
    ErrorKind.CONFIGURATION: (
        "Blockchair API key is missing. Please set BLOCKCHAIR_API_KEY in your environment."
    ),
    ErrorKind.AUTHORIZATION: (
        "Invalid or expired Blockchair API key. Please check BLOCKCHAIR_API_KEY."
    ),
    ErrorKind.TRANSIENT: "Failed to fetch data from Blockchair. Please try again later.",
}


def user_message(kind: ErrorKind) -> str:
    """Get the fixed human-readable message for an error kind."""
    return USER_MESSAGES[kind]


class BlockchairError(Exception):
    """Base class for all client errors."""

    kind: ErrorKind = ErrorKind.TRANSIENT

    @property
    def message(self) -> str:
        return user_message(self.kind)


class ConfigurationError(BlockchairError):
    """The client has no credential to send."""

    kind = ErrorKind.CONFIGURATION

    def __init__(self, detail: str = "credential missing"):
        self.detail = detail
        super().__init__(detail)


class APIError(BlockchairError):
    """A request was sent and failed."""

    def __init__(self, status_code: int | None, detail: str):
        self.status_code = status_code
        self.detail = detail
        if status_code is None:
            super().__init__(detail)
        else:
            super().__init__(f"HTTP {status_code}: {detail}")


class AuthorizationError(APIError):
    """Upstream answered 402: the credential is invalid or expired."""

    kind = ErrorKind.AUTHORIZATION


class TransientError(APIError):
    """Network failure, unexpected status or undecodable response."""

    kind = ErrorKind.TRANSIENT
