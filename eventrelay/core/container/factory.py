"""Container factory.

The single place that decides which adapter backs each protocol.
"""

import atexit
from typing import Optional

from eventrelay.adapters.jobs.thread_pool import ThreadPoolJobQueue
from eventrelay.adapters.transport.factory import create_transport
from eventrelay.core.config import Settings
from eventrelay.core.container.container import Container
from eventrelay.core.logging import configure_logging, logger
from eventrelay.core.protocols import ActorLookup, ErrorCallback, JobQueue, TransportFactory
from eventrelay.dispatch.dispatcher import EventDispatcher
from eventrelay.dispatch.tracker import EventTracker
from eventrelay.events.subscriber import LifecycleEventSubscriber
from eventrelay.identity.guest import GuestSessionRegistry
from eventrelay.identity.strategy import IdentityStrategy
from eventrelay.jobs.identify import IDENTIFY_JOB, IdentifyActorJob


def create_container(
    settings: Settings,
    actor_lookup: ActorLookup,
    job_queue: Optional[JobQueue] = None,
    transport_factory: Optional[TransportFactory] = None,
    on_error: Optional[ErrorCallback] = None,
    register_shutdown: bool = True,
) -> Container:
    """Build a fully wired container.

    Args:
        settings: Application settings (from core/config).
        actor_lookup: Host repository used by background identify jobs.
        job_queue: Host job queue. Defaults to an in-process worker pool.
        transport_factory: Overrides transport selection (tests, custom collectors).
        on_error: Delivery failure callback passed to the dispatcher.
        register_shutdown: Flush and stop on interpreter exit.

    Example:
        from eventrelay.core.config import settings
        from eventrelay.core.container import create_container

        container = create_container(settings, actor_lookup=users)
    """
    configure_logging(settings.LOG_LEVEL, attach_handler=settings.LOG_HANDLER)

    guest_registry = GuestSessionRegistry()
    strategy = IdentityStrategy(settings, guest_registry)

    dispatcher = EventDispatcher(
        settings,
        transport_factory=transport_factory or create_transport,
        on_error=on_error,
    )
    tracker = EventTracker(strategy, dispatcher)

    if job_queue is None:
        job_queue = ThreadPoolJobQueue(
            max_workers=settings.JOB_WORKERS,
            max_attempts=settings.JOB_MAX_ATTEMPTS,
            backoff=settings.JOB_RETRY_BACKOFF,
        )
    identify_job = IdentifyActorJob(actor_lookup, tracker)
    job_queue.register(IDENTIFY_JOB, identify_job.handle)

    container = Container(
        settings=settings,
        guest_registry=guest_registry,
        strategy=strategy,
        dispatcher=dispatcher,
        tracker=tracker,
        job_queue=job_queue,
        actor_lookup=actor_lookup,
        identify_job=identify_job,
        subscriber=LifecycleEventSubscriber(tracker, job_queue),
    )

    if register_shutdown:
        atexit.register(container.shutdown)

    logger.info(
        f"eventrelay container created (enabled={settings.delivery_enabled}, "
        f"transport={settings.TRANSPORT.value}, user_id_source={settings.USER_ID_SOURCE})"
    )
    return container
