"""Fake analytics transport for testing."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set

from eventrelay.core.exceptions import UnsupportedOperationError
from eventrelay.core.protocols.transport import ErrorCallback
from eventrelay.dispatch.payloads import EventPayload


@dataclass
class DeliveredCall:
    """Single recorded transport call."""

    operation: str
    payload: EventPayload
    message: Dict[str, Any]


class FakeTransport:
    """In-memory test double for AnalyticsTransport.

    Records every delivered payload, and the wire message it renders to,
    for assertions. Can be told to raise on chosen operations.

    Usage:
        transport = FakeTransport()
        dispatcher = EventDispatcher(settings, lambda s, on_error: transport)
        dispatcher.track(payload)
        assert transport.get("track").payload.event == "Signed Up"

        transport.fail("track", ConnectionError("collector down"))
    """

    def __init__(self, unsupported: Optional[Set[str]] = None) -> None:
        """Initialize with no recorded calls."""
        self.calls: List[DeliveredCall] = []
        self.unsupported: Set[str] = set(unsupported or ())
        self.failures: dict[str, Exception] = {}
        self.flush_count = 0
        self.shut_down = False

    def fail(self, operation: str, error: Exception) -> None:
        """Raise ``error`` on every subsequent ``operation`` call."""
        self.failures[operation] = error

    def _record(self, operation: str, payload: EventPayload) -> None:
        if operation in self.unsupported:
            raise UnsupportedOperationError(operation)
        if operation in self.failures:
            raise self.failures[operation]
        self.calls.append(
            DeliveredCall(operation=operation, payload=payload, message=payload.to_message())
        )

    def identify(self, payload: EventPayload) -> None:
        """Record an identify call."""
        self._record("identify", payload)

    def track(self, payload: EventPayload) -> None:
        """Record a track call."""
        self._record("track", payload)

    def page(self, payload: EventPayload) -> None:
        """Record a page call."""
        self._record("page", payload)

    def flush(self) -> None:
        self.flush_count += 1

    def shutdown(self) -> None:
        self.shut_down = True

    # Test helpers

    def has(self, operation: str) -> bool:
        """Return True if a call with the given operation was recorded."""
        return any(c.operation == operation for c in self.calls)

    def get(self, operation: str) -> DeliveredCall:
        """Return the first recorded call for ``operation``, or raise AssertionError."""
        for call in self.calls:
            if call.operation == operation:
                return call
        raise AssertionError(
            f"No '{operation}' call delivered. Delivered: {[c.operation for c in self.calls]}"
        )

    def get_all(self, operation: str) -> List[DeliveredCall]:
        """Return all recorded calls for ``operation``."""
        return [c for c in self.calls if c.operation == operation]

    def clear(self) -> None:
        """Reset recorded calls."""
        self.calls.clear()


class FakeTransportFactory:
    """Transport factory that hands out FakeTransports and remembers each build.

    ``on_error`` holds the dispatcher's asynchronous error hook from the
    latest build, so tests can simulate a failed background upload.
    """

    def __init__(self, unsupported: Optional[Set[str]] = None) -> None:
        """Initialize with no builds."""
        self.built: List[FakeTransport] = []
        self.on_error: Optional[ErrorCallback] = None
        self._unsupported = unsupported
        self.raise_on_build: Optional[Exception] = None

    def __call__(self, settings, on_error: ErrorCallback) -> FakeTransport:
        """Build a new FakeTransport."""
        if self.raise_on_build is not None:
            raise self.raise_on_build
        self.on_error = on_error
        transport = FakeTransport(unsupported=self._unsupported)
        self.built.append(transport)
        return transport

    @property
    def build_count(self) -> int:
        return len(self.built)

    @property
    def latest(self) -> FakeTransport:
        """Most recently built transport."""
        if not self.built:
            raise AssertionError("No transport has been built")
        return self.built[-1]
