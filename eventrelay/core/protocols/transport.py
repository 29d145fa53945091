"""Protocol for analytics transports.

A transport is the adapter boundary between the dispatcher and a concrete
collector SDK (Segment, PostHog). There is one implementation per
destination; the dispatcher only ever calls the methods declared here.
"""

from typing import TYPE_CHECKING, Any, Callable, Protocol, runtime_checkable

if TYPE_CHECKING:
    from eventrelay.dispatch.payloads import EventPayload

# Invoked with the failure and the operation name ("identify", "track", "page",
# or "batch" for asynchronous upload failures reported by the SDK).
ErrorCallback = Callable[[BaseException, str], Any]


@runtime_checkable
class AnalyticsTransport(Protocol):
    """Delivers payloads to a remote collector.

    Implementations may batch and upload on background threads. They may
    raise from any method; the dispatcher contains every failure. A transport
    that cannot express an operation raises ``UnsupportedOperationError``.
    """

    def identify(self, payload: "EventPayload") -> None:
        """Associate traits with an identity."""
        ...

    def track(self, payload: "EventPayload") -> None:
        """Record a named event."""
        ...

    def page(self, payload: "EventPayload") -> None:
        """Record a page view."""
        ...

    def flush(self) -> None:
        """Upload anything queued."""
        ...

    def shutdown(self) -> None:
        """Flush and stop background consumers."""
        ...


TransportFactory = Callable[[Any, ErrorCallback], AnalyticsTransport]
"""Builds a transport from ``(settings, on_error)``."""
