"""Event payloads and their delivery."""

from eventrelay.dispatch.dispatcher import EventDispatcher
from eventrelay.dispatch.payloads import (
    EventPayload,
    OperationType,
    RequestContext,
    build_identify_payload,
    build_page_payload,
    build_track_payload,
)
from eventrelay.dispatch.tracker import EventTracker

__all__ = [
    "EventDispatcher",
    "EventPayload",
    "EventTracker",
    "OperationType",
    "RequestContext",
    "build_identify_payload",
    "build_page_payload",
    "build_track_payload",
]
