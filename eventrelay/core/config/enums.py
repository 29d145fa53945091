"""Configuration enums for type-safe settings.

These enums inherit from str to maintain JSON serialization compatibility.
"""

from enum import Enum
from typing import Optional


class UserIdSource(str, Enum):
    """Where the collector-facing user id of an authenticated actor comes from."""

    EMAIL = "email"
    SSO_EXTERNAL_ID = "sso_external_id"
    USE_ANON = "use_anon"
    DISCOURSE_ID = "discourse_id"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["UserIdSource"]:
        """Return the member for ``value``, or None when unset or unknown."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class TransportBackend(str, Enum):
    """Analytics collectors a transport can be built for."""

    SEGMENT = "segment"
    POSTHOG = "posthog"
