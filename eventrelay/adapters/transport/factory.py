"""Transport selection."""

from eventrelay.adapters.transport.posthog import PostHogTransport
from eventrelay.adapters.transport.segment import SegmentTransport
from eventrelay.core.config import Settings, TransportBackend
from eventrelay.core.exceptions import ConfigurationError
from eventrelay.core.protocols.transport import AnalyticsTransport, ErrorCallback


def create_transport(settings: Settings, on_error: ErrorCallback) -> AnalyticsTransport:
    """Build the transport for ``settings.TRANSPORT``.

    Used as the dispatcher's transport factory, so it only runs once the
    delivery gate is open.
    """
    if not settings.WRITE_KEY:
        raise ConfigurationError("Cannot build an analytics transport without a write key")

    if settings.TRANSPORT == TransportBackend.POSTHOG:
        return PostHogTransport.from_settings(settings, on_error)
    if settings.TRANSPORT == TransportBackend.SEGMENT:
        return SegmentTransport.from_settings(settings, on_error)
    raise ConfigurationError(f"Unknown analytics transport: {settings.TRANSPORT}")
