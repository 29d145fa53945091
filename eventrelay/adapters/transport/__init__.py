"""Analytics transport adapters."""

from eventrelay.adapters.transport.factory import create_transport
from eventrelay.adapters.transport.fake import FakeTransport, FakeTransportFactory
from eventrelay.adapters.transport.posthog import PostHogTransport
from eventrelay.adapters.transport.segment import SegmentTransport

__all__ = [
    "FakeTransport",
    "FakeTransportFactory",
    "PostHogTransport",
    "SegmentTransport",
    "create_transport",
]
