"""Dashboard view state.

The state is an immutable value replaced wholesale on every transition.
Each operation owns one slot; a transition only ever rewrites that slot,
so operations running concurrently cannot clobber each other's results.
"""

import enum
import logging
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field, replace
from typing import Any

from explorer.errors import BlockchairError, ErrorKind, user_message
from explorer.models import StatsSnapshot
from web import telemetry

logger = logging.getLogger(__name__)


class Operation(str, enum.Enum):
    """Independent operations the dashboard runs."""

    GENERAL = "general"
    ADDRESS = "address"
    TRANSACTION = "transaction"


class Phase(str, enum.Enum):
    """Lifecycle of a single operation."""

    NOT_STARTED = "not_started"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class Slot:
    """Outcome of the latest run of one operation."""

    phase: Phase = Phase.NOT_STARTED
    value: Any = None
    error: ErrorKind | None = None

    @property
    def loading(self) -> bool:
        return self.phase is Phase.IN_FLIGHT

    @property
    def message(self) -> str | None:
        """Fixed user-facing message for a failure, if any."""
        return user_message(self.error) if self.error is not None else None

    def to_dict(self) -> dict:
        value = self.value
        if isinstance(value, StatsSnapshot):
            value = value.to_dict()
        return {
            "phase": self.phase.value,
            "loading": self.loading,
            "value": value,
            "error": self.error.value if self.error is not None else None,
            "message": self.message,
        }


@dataclass(frozen=True)
class DashboardState:
    """Complete view state of the dashboard."""

    general: Slot = field(default_factory=Slot)
    address: Slot = field(default_factory=Slot)
    transaction: Slot = field(default_factory=Slot)

    def slot(self, operation: Operation) -> Slot:
        return getattr(self, operation.value)

    def _with(self, operation: Operation, slot: Slot) -> "DashboardState":
        return replace(self, **{operation.value: slot})

    def begin(self, operation: Operation) -> "DashboardState":
        """Mark an operation in flight, discarding its previous outcome."""
        return self._with(operation, Slot(phase=Phase.IN_FLIGHT))

    def succeed(self, operation: Operation, value: Any) -> "DashboardState":
        return self._with(operation, Slot(phase=Phase.SUCCEEDED, value=value))

    def fail(self, operation: Operation, kind: ErrorKind) -> "DashboardState":
        return self._with(operation, Slot(phase=Phase.FAILED, error=kind))

    @property
    def loading(self) -> dict[str, bool]:
        return {op.value: self.slot(op).loading for op in Operation}

    def to_dict(self) -> dict:
        return {op.value: self.slot(op).to_dict() for op in Operation}


class DashboardStore:
    """Holds the current DashboardState for a running dashboard."""

    def __init__(self, state: DashboardState | None = None):
        self._state = state or DashboardState()

    @property
    def state(self) -> DashboardState:
        return self._state

    async def run(
        self,
        operation: Operation,
        call: Callable[[], Awaitable[Any]],
    ) -> DashboardState:
        """Drive one operation through its lifecycle.

        The transition after the await is applied to whatever the state is
        at that point, not the state seen when the call started.
        """
        self._state = self._state.begin(operation)
        try:
            value = await call()
        except BlockchairError as e:
            logger.info(f"Dashboard {operation.value} failed: {e.kind.value}")
            self._state = self._state.fail(operation, e.kind)
            telemetry.record_lookup(operation.value, e.kind.value)
        except Exception:
            # Never leave the slot in flight
            self._state = self._state.fail(operation, ErrorKind.TRANSIENT)
            raise
        else:
            self._state = self._state.succeed(operation, value)
            telemetry.record_lookup(operation.value, "success")
        return self._state


class DashboardRegistry:
    """One DashboardStore per browser session.

    Least recently used stores are evicted once ``max_sessions`` is
    exceeded; an evicted session starts over with a fresh state.
    """

    def __init__(self, max_sessions: int = 1000):
        self.max_sessions = max_sessions
        self._stores: OrderedDict[str, DashboardStore] = OrderedDict()

    def get(self, session_id: str) -> DashboardStore:
        store = self._stores.get(session_id)
        if store is None:
            store = self._stores[session_id] = DashboardStore()
            while len(self._stores) > self.max_sessions:
                evicted, _ = self._stores.popitem(last=False)
                logger.debug(f"Evicted dashboard state for session {evicted}")
        else:
            self._stores.move_to_end(session_id)
        return store

    def __len__(self) -> int:
        return len(self._stores)
