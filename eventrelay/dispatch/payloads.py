"""Outbound event payloads.

Every payload carries exactly one of ``user_id``/``anonymous_id``. The
model validator enforces that, so a payload that would be malformed on the
wire can never be constructed; the builders surface the failure as
``InvalidPayloadError`` and callers suppress the event.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from eventrelay.core.exceptions import InvalidPayloadError
from eventrelay.identity.types import Identifier


class OperationType(str, Enum):
    """Operations a payload can be delivered as."""

    IDENTIFY = "identify"
    TRACK = "track"
    PAGE = "page"


class RequestContext(BaseModel):
    """Request details worth attaching to an event's context."""

    ip: Optional[str] = None
    user_agent: Optional[str] = None

    def to_context(self) -> Dict[str, Any]:
        """Render as a collector context map, excluding None values."""
        context = {"ip": self.ip, "userAgent": self.user_agent}
        return {k: v for k, v in context.items() if v is not None}


class EventPayload(BaseModel):
    """Logical shape of one identify/track/page call."""

    model_config = ConfigDict(frozen=True)

    type: OperationType
    user_id: Optional[str] = None
    anonymous_id: Optional[str] = None

    event: Optional[str] = None
    name: Optional[str] = None
    traits: Dict[str, Any] = Field(default_factory=dict)
    properties: Dict[str, Any] = Field(default_factory=dict)
    context: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @model_validator(mode="after")
    def _validate_shape(self) -> "EventPayload":
        if bool(self.user_id) == bool(self.anonymous_id):
            raise ValueError("payload needs exactly one of user_id or anonymous_id")
        if self.type == OperationType.TRACK and not self.event:
            raise ValueError("track payload needs an event name")
        return self

    @property
    def distinct_id(self) -> str:
        """Whichever identity field is set."""
        return self.user_id or self.anonymous_id  # type: ignore[return-value]

    @property
    def is_anonymous(self) -> bool:
        return self.anonymous_id is not None

    def identity_kwargs(self) -> Dict[str, str]:
        """The identity field as SDK keyword arguments."""
        if self.user_id:
            return {"user_id": self.user_id}
        return {"anonymous_id": self.anonymous_id}  # type: ignore[dict-item]

    def to_message(self) -> Dict[str, Any]:
        """JSON-shaped message; operation-specific fields only, no None values."""
        message: Dict[str, Any] = {"type": self.type.value, **self.identity_kwargs()}
        if self.type == OperationType.IDENTIFY:
            message["traits"] = dict(self.traits)
        elif self.type == OperationType.TRACK:
            message["event"] = self.event
            message["properties"] = dict(self.properties)
        else:
            if self.name is not None:
                message["name"] = self.name
            message["properties"] = dict(self.properties)
        if self.context:
            message["context"] = dict(self.context)
        message["timestamp"] = self.timestamp.isoformat()
        return message


def _build(**fields: Any) -> EventPayload:
    try:
        return EventPayload(**fields)
    except ValidationError as e:
        raise InvalidPayloadError(str(e)) from e


def build_identify_payload(
    identifier: Identifier,
    traits: Dict[str, Any],
    context: Optional[Dict[str, Any]] = None,
) -> EventPayload:
    """Identify payload for ``identifier`` carrying ``traits``."""
    return _build(
        type=OperationType.IDENTIFY,
        traits=traits,
        context=context or {},
        **identifier.as_payload_fields(),
    )


def build_track_payload(
    identifier: Identifier,
    event: str,
    properties: Optional[Dict[str, Any]] = None,
    context: Optional[Dict[str, Any]] = None,
) -> EventPayload:
    """Track payload for ``event``."""
    return _build(
        type=OperationType.TRACK,
        event=event,
        properties=properties or {},
        context=context or {},
        **identifier.as_payload_fields(),
    )


def build_page_payload(
    identifier: Identifier,
    name: Optional[str],
    properties: Optional[Dict[str, Any]] = None,
    context: Optional[Dict[str, Any]] = None,
) -> EventPayload:
    """Page-view payload for the page called ``name``."""
    return _build(
        type=OperationType.PAGE,
        name=name,
        properties=properties or {},
        context=context or {},
        **identifier.as_payload_fields(),
    )
