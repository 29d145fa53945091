"""Protocols for the host application's actor records.

The host owns its user model; eventrelay only reads the attributes below.
``sso_external_id`` and ``ip_address`` are optional and looked up with
``getattr`` so host models that lack them still satisfy the contract.
"""

from datetime import datetime
from typing import Any, Optional, Protocol, Union, runtime_checkable

ActorId = Union[int, str]


@runtime_checkable
class Actor(Protocol):
    """An authenticated identity in the host application."""

    @property
    def id(self) -> ActorId:
        """Opaque, stable actor id."""
        ...

    @property
    def name(self) -> Optional[str]:
        """Display name."""
        ...

    @property
    def username(self) -> Optional[str]:
        """Handle."""
        ...

    @property
    def email(self) -> Optional[str]:
        """Primary email as stored by the host (not normalized)."""
        ...

    @property
    def created_at(self) -> Optional[datetime]:
        """Account creation time."""
        ...


@runtime_checkable
class ActorLookup(Protocol):
    """Reloads an actor by id outside of request context (background jobs)."""

    def get_actor(self, actor_id: Any) -> Optional[Actor]:
        """Return the actor, or None if it no longer exists."""
        ...
