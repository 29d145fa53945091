"""Maps host lifecycle events to analytics calls."""

from typing import Any, Callable, Dict, Optional

from eventrelay.core.logging import logger
from eventrelay.core.protocols.actor import Actor
from eventrelay.core.protocols.job_queue import JobQueue
from eventrelay.dispatch.payloads import RequestContext
from eventrelay.dispatch.tracker import EventTracker
from eventrelay.events.enums import LifecycleEventType
from eventrelay.identity.strategy import Session
from eventrelay.jobs.identify import enqueue_identify

_Handler = Callable[
    [Optional[Actor], Dict[str, Any], Optional[Session], Optional[RequestContext]], None
]


class LifecycleEventSubscriber:
    """Entry point for host lifecycle hooks.

    The host calls ``on_lifecycle_event`` right after a domain mutation
    commits. Each ``_handle_*`` method converts one lifecycle event into its
    analytics shape; names without a handler are tracked verbatim. Adding a
    mapped event = one new method + one entry in ``_handlers``.
    """

    TRACKED_EVENT_NAMES = {
        LifecycleEventType.USER_CREATED: "Signed Up",
        LifecycleEventType.POST_CREATED: "Post Created",
        LifecycleEventType.TOPIC_CREATED: "Topic Created",
        LifecycleEventType.TAG_CREATED: "Tag Created",
        LifecycleEventType.REACTION_CREATED: "Reaction Created",
    }

    def __init__(self, tracker: EventTracker, job_queue: JobQueue) -> None:
        """Wire handler dispatch table to the given tracker and job queue."""
        self._tracker = tracker
        self._job_queue = job_queue
        self._handlers: Dict[str, _Handler] = {
            LifecycleEventType.USER_CREATED.value: self._handle_user_created,
            LifecycleEventType.POST_CREATED.value: self._track_as(LifecycleEventType.POST_CREATED),
            LifecycleEventType.TOPIC_CREATED.value: self._track_as(LifecycleEventType.TOPIC_CREATED),
            LifecycleEventType.TAG_CREATED.value: self._track_as(LifecycleEventType.TAG_CREATED),
            LifecycleEventType.REACTION_CREATED.value: self._track_as(
                LifecycleEventType.REACTION_CREATED
            ),
            LifecycleEventType.PAGE_VIEWED.value: self._handle_page_viewed,
        }

    def on_lifecycle_event(
        self,
        event_name: str,
        actor: Optional[Actor],
        properties: Optional[Dict[str, Any]] = None,
        session: Optional[Session] = None,
        request: Optional[RequestContext] = None,
    ) -> None:
        """Dispatch a lifecycle event to its handler. Never raises."""
        handler = self._handlers.get(event_name)
        try:
            if handler is None:
                self._tracker.emit(event_name, actor, properties, session, request)
            else:
                handler(actor, dict(properties or {}), session, request)
        except Exception as e:
            logger.error(f"LifecycleEventSubscriber failed for '{event_name}': {e}")

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _handle_user_created(
        self,
        actor: Optional[Actor],
        properties: Dict[str, Any],
        session: Optional[Session],
        request: Optional[RequestContext],
    ) -> None:
        if actor is None:
            logger.warning("user.created fired without an actor; skipping")
            return
        # Identify now and again from a worker: both are best-effort and
        # either may land first.
        self._tracker.identify(actor, session, request)
        if self._tracker.dispatcher.enabled:
            enqueue_identify(self._job_queue, actor.id)
        self._tracker.emit(
            self.TRACKED_EVENT_NAMES[LifecycleEventType.USER_CREATED],
            actor,
            properties,
            session,
            request,
        )

    def _handle_page_viewed(
        self,
        actor: Optional[Actor],
        properties: Dict[str, Any],
        session: Optional[Session],
        request: Optional[RequestContext],
    ) -> None:
        name = properties.pop("name", None)
        self._tracker.page(name, actor, properties, session, request)

    def _track_as(self, event_type: LifecycleEventType) -> _Handler:
        event_name = self.TRACKED_EVENT_NAMES[event_type]

        def handler(
            actor: Optional[Actor],
            properties: Dict[str, Any],
            session: Optional[Session],
            request: Optional[RequestContext],
        ) -> None:
            self._tracker.emit(event_name, actor, properties, session, request)

        return handler
