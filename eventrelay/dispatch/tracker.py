"""Host-facing tracking facade.

``EventTracker`` is what request handlers and lifecycle hooks call. Each
method resolves identity, assembles the payload and hands it to the
dispatcher; any failure along the way is logged and the event dropped, so
a broken analytics setup can never fail the host's operation.
"""

from typing import Any, Dict, Optional

from eventrelay.core.exceptions import InvalidPayloadError
from eventrelay.core.logging import logger
from eventrelay.core.protocols.actor import Actor
from eventrelay.dispatch.dispatcher import EventDispatcher
from eventrelay.dispatch.payloads import (
    RequestContext,
    build_identify_payload,
    build_page_payload,
    build_track_payload,
)
from eventrelay.identity.strategy import IdentityStrategy, Session

tracker_logger = logger.with_context(component="tracker")


class EventTracker:
    """Resolve, assemble, dispatch."""

    def __init__(self, strategy: IdentityStrategy, dispatcher: EventDispatcher) -> None:
        """Initialize the tracker.

        Args:
            strategy: Identity resolution for actors and guests.
            dispatcher: Delivery gateway.
        """
        self.strategy = strategy
        self.dispatcher = dispatcher

    def _context(
        self, actor: Optional[Actor], request: Optional[RequestContext]
    ) -> Dict[str, Any]:
        context = request.to_context() if request else {}
        if "ip" not in context and actor is not None:
            ip_address = getattr(actor, "ip_address", None)
            if ip_address:
                context["ip"] = ip_address
        return context

    def identify(
        self,
        actor: Actor,
        session: Optional[Session] = None,
        request: Optional[RequestContext] = None,
    ) -> None:
        """Send the actor's traits to the collector."""
        if not self.dispatcher.enabled:
            return
        try:
            identifier = self.strategy.resolve(actor, session)
            context = self.strategy.embed_trait_email(self._context(actor, request), actor)
            payload = build_identify_payload(identifier, self.strategy.traits(actor), context)
        except InvalidPayloadError as e:
            tracker_logger.error(f"Suppressed malformed identify payload: {e}")
            return
        except Exception as e:
            tracker_logger.error(f"Failed to prepare identify: {e}")
            return
        self.dispatcher.identify(payload)

    def emit(
        self,
        event_name: str,
        actor: Optional[Actor],
        properties: Optional[Dict[str, Any]] = None,
        session: Optional[Session] = None,
        request: Optional[RequestContext] = None,
    ) -> None:
        """Track ``event_name`` for ``actor`` (or the guest behind ``session``)."""
        if not self.dispatcher.enabled:
            return
        try:
            identifier = self.strategy.resolve(actor, session)
            context = self.strategy.embed_trait_email(self._context(actor, request), actor)
            payload = build_track_payload(identifier, event_name, properties, context)
        except InvalidPayloadError as e:
            tracker_logger.error(f"Suppressed malformed '{event_name}' payload: {e}")
            return
        except Exception as e:
            tracker_logger.error(f"Failed to prepare '{event_name}': {e}")
            return
        self.dispatcher.track(payload)

    track = emit

    def page(
        self,
        name: Optional[str],
        actor: Optional[Actor],
        properties: Optional[Dict[str, Any]] = None,
        session: Optional[Session] = None,
        request: Optional[RequestContext] = None,
    ) -> None:
        """Record a view of the page called ``name``."""
        if not self.dispatcher.enabled:
            return
        try:
            identifier = self.strategy.resolve(actor, session)
            context = self.strategy.embed_trait_email(self._context(actor, request), actor)
            payload = build_page_payload(identifier, name, properties, context)
        except InvalidPayloadError as e:
            tracker_logger.error(f"Suppressed malformed page payload: {e}")
            return
        except Exception as e:
            tracker_logger.error(f"Failed to prepare page view: {e}")
            return
        self.dispatcher.page(payload)
