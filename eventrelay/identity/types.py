"""Identity value types.

An identity resolution always yields exactly one of ``UserId`` or
``AnonymousId``; ``as_payload_fields`` renders it as the single
``user_id``/``anonymous_id`` key an outbound payload carries.
"""

from datetime import datetime
from typing import Annotated, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from eventrelay.core.protocols.actor import ActorId


class UserId(BaseModel):
    """A durable, collector-facing user identifier."""

    model_config = ConfigDict(frozen=True)

    type: Literal["user"] = "user"
    id: str = Field(..., min_length=1)

    @field_validator("id")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("UserId must not be blank")
        return value

    def as_payload_fields(self) -> Dict[str, str]:
        """Return the identity field for an outbound payload."""
        return {"user_id": self.id}


class AnonymousId(BaseModel):
    """An identifier that carries no durable user identity."""

    model_config = ConfigDict(frozen=True)

    type: Literal["anonymous"] = "anonymous"
    id: str = Field(..., min_length=1)

    def as_payload_fields(self) -> Dict[str, str]:
        """Return the identity field for an outbound payload."""
        return {"anonymous_id": self.id}


Identifier = Annotated[Union[UserId, AnonymousId], Field(discriminator="type")]


class ActorRecord(BaseModel):
    """Plain actor record satisfying the Actor protocol.

    Hosts whose user model already exposes these attributes can pass it
    directly; this model exists for hosts that prefer to hand over a copy,
    and for background jobs that load actors from a cache or API.
    """

    model_config = ConfigDict(frozen=True)

    id: ActorId
    name: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    sso_external_id: Optional[str] = None
    ip_address: Optional[str] = None
