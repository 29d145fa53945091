"""Core protocols for dependency injection."""

from eventrelay.core.protocols.actor import Actor, ActorId, ActorLookup
from eventrelay.core.protocols.job_queue import JobHandler, JobQueue
from eventrelay.core.protocols.transport import (
    AnalyticsTransport,
    ErrorCallback,
    TransportFactory,
)

__all__ = [
    "Actor",
    "ActorId",
    "ActorLookup",
    "AnalyticsTransport",
    "ErrorCallback",
    "JobHandler",
    "JobQueue",
    "TransportFactory",
]
