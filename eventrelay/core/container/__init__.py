"""Dependency Injection Container Module.

Usage:
------
    # Initialize at startup (call once)
    from eventrelay.core.container import initialize_container
    from eventrelay.core.config import settings
    initialize_container(settings, actor_lookup=users)

    # Use the global container after initialization
    from eventrelay.core import container as container_module
    container_module.container.tracker.emit("Post Created", user, {...})

    # In tests (construct directly with fakes, don't use global)
    container = create_container(settings, actor_lookup, job_queue=FakeJobQueue(),
                                 transport_factory=FakeTransportFactory(),
                                 register_shutdown=False)
"""

from typing import TYPE_CHECKING, Optional

from eventrelay.core.container.container import Container
from eventrelay.core.container.factory import create_container

if TYPE_CHECKING:
    from eventrelay.core.config import Settings
    from eventrelay.core.protocols import ActorLookup, JobQueue

__all__ = ["Container", "create_container", "container", "initialize_container", "reset_container"]


container: Optional[Container] = None
"""Global container instance, set by ``initialize_container()``.

Hosts wire it into their lifecycle hooks; eventrelay's own modules never
import it and receive collaborators as constructor arguments instead.
"""


def initialize_container(
    settings: "Settings",
    actor_lookup: "ActorLookup",
    job_queue: Optional["JobQueue"] = None,
) -> Container:
    """Initialize the global container. Call once at startup.

    Raises:
        RuntimeError: If called more than once (container already initialized)
    """
    global container

    if container is not None:
        raise RuntimeError(
            "Container already initialized. "
            "initialize_container() should only be called once at startup."
        )

    container = create_container(settings, actor_lookup, job_queue=job_queue)
    return container


def reset_container() -> None:
    """Shut down and forget the global container. For testing only."""
    global container
    if container is not None:
        container.shutdown()
    container = None
