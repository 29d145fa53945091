"""Identity resolution: who an analytics event is about."""

from eventrelay.identity.guest import GUEST_ID_KEY, GuestSessionRegistry, generate_token
from eventrelay.identity.strategy import (
    IdentityStrategy,
    deterministic_anonymous_id,
    normalize_email,
)
from eventrelay.identity.types import ActorRecord, AnonymousId, Identifier, UserId

__all__ = [
    "GUEST_ID_KEY",
    "ActorRecord",
    "AnonymousId",
    "GuestSessionRegistry",
    "Identifier",
    "IdentityStrategy",
    "UserId",
    "deterministic_anonymous_id",
    "generate_token",
    "normalize_email",
]
