"""Deferred identify.

``IdentifyActorJob`` re-resolves an actor's identity on a background worker
and issues ``identify``. It takes only the actor id: no session or request
exists out there, so resolution runs without session context and the IP
comes from the actor record. Running it twice sends two equivalent identify
calls, which the collector merges.
"""

from typing import Any, Dict, Iterable

from eventrelay.core.logging import logger
from eventrelay.core.protocols.actor import ActorLookup
from eventrelay.core.protocols.job_queue import JobQueue
from eventrelay.dispatch.dispatcher import EventDispatcher
from eventrelay.dispatch.tracker import EventTracker

IDENTIFY_JOB = "identify"


class IdentifyActorJob:
    """Background identify for one actor."""

    def __init__(self, actor_lookup: ActorLookup, tracker: EventTracker) -> None:
        """Initialize the job.

        Args:
            actor_lookup: Reloads the actor by id.
            tracker: Resolves identity and dispatches the identify call.
        """
        self._actors = actor_lookup
        self._tracker = tracker

    def run(self, actor_id: Any) -> None:
        """Identify ``actor_id``. A closed delivery gate makes this a no-op."""
        if not self._tracker.dispatcher.enabled:
            return

        job_logger = logger.with_context(job=IDENTIFY_JOB, actor_id=actor_id)
        actor = self._actors.get_actor(actor_id)
        if actor is None:
            job_logger.debug("Actor not found; skipping identify")
            return

        self._tracker.identify(actor, session=None)

    def handle(self, args: Dict[str, Any]) -> None:
        """JobQueue entry point: ``args`` is ``{"actor_id": ...}``."""
        self.run(args["actor_id"])


def enqueue_identify(job_queue: JobQueue, actor_id: Any) -> None:
    """Schedule a deferred identify for ``actor_id``."""
    job_queue.enqueue(IDENTIFY_JOB, {"actor_id": actor_id})


def backfill_identify(
    actor_ids: Iterable[Any], job_queue: JobQueue, dispatcher: EventDispatcher
) -> int:
    """Enqueue an identify job for every actor in ``actor_ids``.

    Used to seed the collector with the existing user base when tracking is
    first switched on. Returns the number of jobs enqueued; nothing is
    enqueued while delivery is disabled.
    """
    if not dispatcher.enabled:
        logger.info("Analytics disabled; skipping identify backfill")
        return 0

    count = 0
    for actor_id in actor_ids:
        enqueue_identify(job_queue, actor_id)
        count += 1
    logger.info(f"Enqueued identify backfill for {count} actors")
    return count
