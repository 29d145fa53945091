"""Dependency container.

The container is the context object a host builds once at startup and hands
to its collaborators. It owns every piece of process-wide state eventrelay
has (the dispatcher's transport, the fallback guest id, the job workers), so
tests can build as many isolated containers as they like.

Container serves, factory builds.
"""

from dataclasses import dataclass, replace
from typing import Any

from eventrelay.core.config import Settings
from eventrelay.core.logging import logger
from eventrelay.core.protocols import ActorLookup, JobQueue
from eventrelay.dispatch.dispatcher import EventDispatcher
from eventrelay.dispatch.tracker import EventTracker
from eventrelay.events.subscriber import LifecycleEventSubscriber
from eventrelay.identity.guest import GuestSessionRegistry
from eventrelay.identity.strategy import IdentityStrategy
from eventrelay.jobs.identify import IdentifyActorJob


@dataclass(frozen=True)
class Container:
    """Immutable container holding eventrelay's collaborators.

    Usage:
        # Production: built by the factory
        container = create_container(settings, actor_lookup=UserRepository())
        container.subscriber.on_lifecycle_event("user.created", user)

        # Testing: construct with fakes (see conftest.py test_container)
    """

    settings: Settings

    # Identity
    guest_registry: GuestSessionRegistry
    strategy: IdentityStrategy

    # Delivery
    dispatcher: EventDispatcher
    tracker: EventTracker

    # Background work
    job_queue: JobQueue
    actor_lookup: ActorLookup
    identify_job: IdentifyActorJob

    # Host lifecycle entry point
    subscriber: LifecycleEventSubscriber

    # -----------------------------------------------------------------
    # Convenience methods
    # -----------------------------------------------------------------

    def replace(self, **changes: Any) -> "Container":
        """Create a new container with some dependencies replaced."""
        return replace(self, **changes)

    def reconfigure(self, settings: Settings) -> "Container":
        """Apply new settings without a restart.

        The dispatcher rebuilds its transport on next use if the transport
        settings changed. Returns a container carrying the new settings.
        """
        self.strategy.reconfigure(settings)
        self.dispatcher.reconfigure(settings)
        return replace(self, settings=settings)

    def shutdown(self) -> None:
        """Drain background jobs, then flush and close the dispatcher. Never raises.

        Jobs still queued or running get to deliver through the live
        transport; anything that reaches the dispatcher afterwards is dropped.
        """
        try:
            self.job_queue.shutdown(wait=True)
        except Exception as e:
            logger.warning(f"Job queue shutdown failed: {e}")
        self.dispatcher.close()
