"""The process-wide analytics dispatcher.

``EventDispatcher`` owns the single transport client of a process:

- Gate: while delivery is disabled or no write key is set, every call is a
  silent no-op. Callers never check enablement themselves.
- Lazy construction: the transport is built on the first call that passes
  the gate, under a lock, so concurrent first calls build one client.
- Containment: unknown operations and transports that cannot express an
  operation are logged and skipped; transport failures (raised, or reported
  later by the SDK's upload thread) go to the error callback. Nothing raises
  into the host application.
- Hot reload: ``reconfigure`` swaps settings; the next call rebuilds the
  transport if the values it was built from changed.
- Teardown: ``shutdown`` flushes and drops the transport, which the next
  call rebuilds; ``close`` is final and turns later calls into no-ops.
"""

import threading
from typing import Callable, Dict, Optional

from eventrelay.core.config import Settings
from eventrelay.core.exceptions import TransportError, UnsupportedOperationError
from eventrelay.core.logging import logger
from eventrelay.core.protocols.transport import (
    AnalyticsTransport,
    ErrorCallback,
    TransportFactory,
)
from eventrelay.dispatch.payloads import EventPayload, OperationType

dispatch_logger = logger.with_context(component="dispatcher")


class EventDispatcher:
    """Thread-safe, lazily constructed gateway to the analytics transport."""

    OPERATIONS = tuple(op.value for op in OperationType)

    def __init__(
        self,
        settings: Settings,
        transport_factory: TransportFactory,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        """Create the dispatcher. No transport is built until first use.

        Args:
            settings: Gate and transport configuration.
            transport_factory: Builds a transport from ``(settings, on_error)``.
            on_error: Called once per delivery failure with a ``TransportError``
                and the operation name, after the failure is logged.
        """
        self._settings = settings
        self._transport_factory = transport_factory
        self._on_error = on_error
        self._transport: Optional[AnalyticsTransport] = None
        self._fingerprint: Optional[tuple] = None
        self._closed = False
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Gate and lifecycle
    # ------------------------------------------------------------------

    @property
    def enabled(self) -> bool:
        """True when delivery is switched on, a write key is configured and not closed."""
        return self._settings.delivery_enabled and not self._closed

    @property
    def settings(self) -> Settings:
        return self._settings

    def reconfigure(self, settings: Settings) -> None:
        """Use ``settings`` from the next call on.

        The transport is rebuilt lazily if the write key, backend or other
        transport options changed; disabling only closes the gate.
        """
        with self._lock:
            self._settings = settings
        dispatch_logger.info(
            f"Dispatcher reconfigured (enabled={settings.delivery_enabled}, "
            f"transport={settings.TRANSPORT.value})"
        )

    def _get_transport(self) -> Optional[AnalyticsTransport]:
        settings = self._settings
        fingerprint = settings.transport_fingerprint
        transport = self._transport
        if transport is not None and self._fingerprint == fingerprint:
            return transport

        with self._lock:
            if self._closed:
                return None
            settings = self._settings
            fingerprint = settings.transport_fingerprint
            if self._transport is not None and self._fingerprint == fingerprint:
                return self._transport

            if self._transport is not None:
                dispatch_logger.info("Transport configuration changed; rebuilding client")
                self._close(self._transport)
                self._transport = None
                self._fingerprint = None

            try:
                self._transport = self._transport_factory(settings, self._handle_async_error)
            except Exception as e:
                dispatch_logger.error(f"Failed to build analytics transport: {e}")
                return None

            self._fingerprint = fingerprint
            dispatch_logger.info(f"Analytics transport built ({settings.TRANSPORT.value})")
            return self._transport

    def flush(self) -> None:
        """Upload anything the transport has queued. Best-effort."""
        transport = self._transport
        if transport is None:
            return
        try:
            transport.flush()
        except Exception as e:
            dispatch_logger.warning(f"Analytics flush failed: {e}")

    def shutdown(self) -> None:
        """Flush and drop the transport. The next enabled call rebuilds it."""
        with self._lock:
            transport, self._transport, self._fingerprint = self._transport, None, None
        if transport is not None:
            self._close(transport)

    def close(self) -> None:
        """Shut down for good. Later calls are dropped instead of rebuilding a transport."""
        with self._lock:
            self._closed = True
        self.shutdown()

    @staticmethod
    def _close(transport: AnalyticsTransport) -> None:
        try:
            transport.shutdown()
        except Exception as e:
            dispatch_logger.warning(f"Analytics transport shutdown failed: {e}")

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def identify(self, payload: EventPayload) -> None:
        """Deliver an identify payload."""
        self.call(OperationType.IDENTIFY.value, payload)

    def track(self, payload: EventPayload) -> None:
        """Deliver a track payload."""
        self.call(OperationType.TRACK.value, payload)

    def page(self, payload: EventPayload) -> None:
        """Deliver a page payload."""
        self.call(OperationType.PAGE.value, payload)

    def call(self, operation: str, payload: EventPayload) -> None:
        """Deliver ``payload`` as ``operation``. Never raises."""
        if not self.enabled:
            dispatch_logger.debug(f"Analytics disabled; skipping '{operation}'")
            return

        if operation not in self.OPERATIONS:
            dispatch_logger.warning(f"Unsupported analytics operation '{operation}'; skipping")
            return

        transport = self._get_transport()
        if transport is None:
            return

        handlers: Dict[str, Callable[[EventPayload], None]] = {
            OperationType.IDENTIFY.value: transport.identify,
            OperationType.TRACK.value: transport.track,
            OperationType.PAGE.value: transport.page,
        }
        try:
            handlers[operation](payload)
        except (UnsupportedOperationError, NotImplementedError):
            dispatch_logger.warning(
                f"Transport {type(transport).__name__} does not support '{operation}'; skipping"
            )
        except Exception as e:
            self._report(e, operation)

    # ------------------------------------------------------------------
    # Error reporting
    # ------------------------------------------------------------------

    def _handle_async_error(self, error: BaseException, operation: str) -> None:
        self._report(error, operation)

    def _report(self, error: BaseException, operation: str) -> None:
        if not isinstance(error, TransportError):
            error = TransportError(operation, error)
        dispatch_logger.error(f"Analytics delivery failed: {error}")
        if self._on_error is None:
            return
        try:
            self._on_error(error, operation)
        except Exception as callback_error:
            dispatch_logger.error(f"Analytics error callback failed: {callback_error}")
