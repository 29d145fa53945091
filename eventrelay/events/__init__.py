"""Host lifecycle events and their analytics mapping."""

from eventrelay.events.enums import LifecycleEventType
from eventrelay.events.subscriber import LifecycleEventSubscriber

__all__ = ["LifecycleEventSubscriber", "LifecycleEventType"]
