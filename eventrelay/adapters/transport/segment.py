"""Segment transport adapter."""

from typing import Optional

from segment.analytics import Client

from eventrelay.core.config import Settings
from eventrelay.core.logging import logger
from eventrelay.core.protocols.transport import ErrorCallback
from eventrelay.dispatch.payloads import EventPayload


class SegmentTransport:
    """Wraps ``segment.analytics.Client`` behind the AnalyticsTransport protocol.

    The SDK queues messages and uploads them in batches from its own
    consumer thread, bounded by ``timeout``. Upload failures surface there,
    long after the calling request returned, so they are routed to
    ``on_error`` rather than raised.
    """

    def __init__(
        self,
        write_key: str,
        on_error: Optional[ErrorCallback] = None,
        host: Optional[str] = None,
        timeout: float = 15.0,
        max_retries: int = 3,
        send: bool = True,
        sync_mode: bool = False,
    ) -> None:
        """Build the Segment client."""
        self._on_error = on_error
        options = {
            "write_key": write_key,
            "on_error": self._handle_upload_error,
            "timeout": timeout,
            "max_retries": max_retries,
            "send": send,
            "sync_mode": sync_mode,
        }
        if host:
            options["host"] = host
        self._client = Client(**options)
        logger.info(f"Segment transport initialized (send={send})")

    @classmethod
    def from_settings(cls, settings: Settings, on_error: Optional[ErrorCallback] = None):
        """Build from application settings."""
        return cls(
            write_key=settings.WRITE_KEY or "",
            on_error=on_error,
            host=settings.HOST,
            timeout=settings.TIMEOUT,
            max_retries=settings.MAX_RETRIES,
            send=settings.SEND,
            sync_mode=settings.SYNC_MODE,
        )

    def _handle_upload_error(self, error: Exception, batch: list) -> None:
        if self._on_error is not None:
            self._on_error(error, "batch")
        else:
            logger.error(f"Segment upload of {len(batch)} messages failed: {error}")

    def identify(self, payload: EventPayload) -> None:
        """Queue an identify call."""
        self._client.identify(
            traits=payload.traits,
            context=payload.context,
            timestamp=payload.timestamp,
            **payload.identity_kwargs(),
        )

    def track(self, payload: EventPayload) -> None:
        """Queue a track call."""
        self._client.track(
            event=payload.event,
            properties=payload.properties,
            context=payload.context,
            timestamp=payload.timestamp,
            **payload.identity_kwargs(),
        )

    def page(self, payload: EventPayload) -> None:
        """Queue a page call."""
        self._client.page(
            name=payload.name,
            properties=payload.properties,
            context=payload.context,
            timestamp=payload.timestamp,
            **payload.identity_kwargs(),
        )

    def flush(self) -> None:
        """Block until the queue is uploaded."""
        self._client.flush()

    def shutdown(self) -> None:
        """Flush and stop the consumer thread."""
        self._client.shutdown()
