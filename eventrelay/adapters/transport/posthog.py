"""PostHog transport adapter."""

from typing import Any, Dict, Optional

from posthog import Posthog

from eventrelay.core.config import Settings
from eventrelay.core.logging import logger
from eventrelay.core.protocols.transport import ErrorCallback
from eventrelay.dispatch.payloads import EventPayload


class PostHogTransport:
    """Wraps the PostHog SDK behind the AnalyticsTransport protocol.

    PostHog has a single ``capture`` call, so identify and page are sent as
    its reserved ``$identify`` and ``$pageview`` events. The payload's
    user_id or anonymous_id becomes the distinct id either way.
    """

    IDENTIFY_EVENT = "$identify"
    PAGEVIEW_EVENT = "$pageview"

    def __init__(
        self,
        api_key: str,
        on_error: Optional[ErrorCallback] = None,
        host: Optional[str] = None,
        timeout: float = 15.0,
        max_retries: int = 3,
        send: bool = True,
    ) -> None:
        """Configure the PostHog client."""
        self._on_error = on_error
        options: Dict[str, Any] = {
            "on_error": self._handle_upload_error,
            "timeout": timeout,
            "max_retries": max_retries,
            "send": send,
        }
        if host:
            options["host"] = host
        self._client = Posthog(api_key, **options)
        logger.info(f"PostHog transport initialized (host={host or 'default'})")

    @classmethod
    def from_settings(cls, settings: Settings, on_error: Optional[ErrorCallback] = None):
        """Build from application settings."""
        return cls(
            api_key=settings.WRITE_KEY or "",
            on_error=on_error,
            host=settings.HOST,
            timeout=settings.TIMEOUT,
            max_retries=settings.MAX_RETRIES,
            send=settings.SEND,
        )

    def _handle_upload_error(self, error: Exception, batch: list) -> None:
        if self._on_error is not None:
            self._on_error(error, "batch")
        else:
            logger.error(f"PostHog upload of {len(batch)} messages failed: {error}")

    @staticmethod
    def _properties(payload: EventPayload, **extra: Any) -> Dict[str, Any]:
        properties = {**payload.properties, **extra}
        if payload.context.get("ip"):
            properties["$ip"] = payload.context["ip"]
        if payload.context.get("userAgent"):
            properties["$raw_user_agent"] = payload.context["userAgent"]
        return properties

    def _capture(self, event: str, payload: EventPayload, properties: Dict[str, Any]) -> None:
        self._client.capture(
            distinct_id=payload.distinct_id,
            event=event,
            properties=properties,
            timestamp=payload.timestamp,
        )

    def identify(self, payload: EventPayload) -> None:
        """Set person properties from the payload's traits."""
        self._capture(self.IDENTIFY_EVENT, payload, self._properties(payload, **{"$set": payload.traits}))

    def track(self, payload: EventPayload) -> None:
        """Capture the payload's event."""
        self._capture(payload.event or "", payload, self._properties(payload))

    def page(self, payload: EventPayload) -> None:
        """Capture a page view."""
        extra = {"name": payload.name} if payload.name else {}
        self._capture(self.PAGEVIEW_EVENT, payload, self._properties(payload, **extra))

    def flush(self) -> None:
        """Upload queued events."""
        self._client.flush()

    def shutdown(self) -> None:
        """Flush and stop the consumer thread."""
        self._client.shutdown()
