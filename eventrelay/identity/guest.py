"""Anonymous identifiers for guests.

Two lifecycles are managed here:

- a per-session guest id, stored in the host's session under
  ``segment_guest_id`` and reused for the session's lifetime;
- a process fallback id, generated once and shared by every caller that has
  neither an actor nor a session (background jobs, health checks, ...).

The tokens are random identifiers, not secrets: they only need enough entropy
that two sessions never share one.
"""

import secrets
import string
import threading
from typing import Any, MutableMapping, Optional

from eventrelay.core.logging import logger

GUEST_ID_KEY = "segment_guest_id"
TOKEN_ALPHABET = string.ascii_lowercase + string.digits
TOKEN_LENGTH = 36
GUEST_PREFIX = "g"


def generate_token(prefix: str = "", length: int = TOKEN_LENGTH) -> str:
    """Return ``prefix`` padded to ``length`` with random lowercase alphanumerics."""
    if len(prefix) >= length:
        raise ValueError(f"Prefix '{prefix}' leaves no room in a {length}-char token")
    body = "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length - len(prefix)))
    return f"{prefix}{body}"


class GuestSessionRegistry:
    """Hands out guest ids per session and a single per-process fallback id."""

    def __init__(self) -> None:
        """Initialize with no fallback id generated yet."""
        self._fallback_id: Optional[str] = None
        self._lock = threading.Lock()

    def session_guest_id(self, session: MutableMapping[str, Any]) -> str:
        """Return the session's guest id, generating and storing it on first use.

        Concurrent first requests in one session may each generate a token;
        ``setdefault`` makes them converge on whichever was stored first.
        """
        existing = session.get(GUEST_ID_KEY)
        if isinstance(existing, str) and existing:
            return existing

        token = generate_token(GUEST_PREFIX)
        if existing is None:
            stored = session.setdefault(GUEST_ID_KEY, token)
        else:
            # Unusable value (empty, wrong type): replace it.
            session[GUEST_ID_KEY] = token
            stored = token
        return stored if isinstance(stored, str) and stored else token

    def fallback_id(self) -> str:
        """Return the process-wide guest id, generating it exactly once."""
        if self._fallback_id is None:
            with self._lock:
                if self._fallback_id is None:
                    self._fallback_id = generate_token(GUEST_PREFIX)
                    logger.debug("Generated process fallback guest id")
        return self._fallback_id
