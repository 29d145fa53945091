"""Identity resolution for actors and guests.

``IdentityStrategy.resolve`` turns an (actor, session) pair into a
``UserId`` or ``AnonymousId`` according to ``USER_ID_SOURCE``:

    email            normalized email, else fallback
    sso_external_id  SSO external id, else normalized email, else fallback
    use_anon         deterministic anonymous id
    discourse_id     the host's native actor id
    unset / unknown  native actor id, with a warning

The fallback is the deterministic anonymous id; if even that cannot be
computed a random ``err_ua_`` id is returned and logged at error level.
Guests resolve through the ``GuestSessionRegistry``.
"""

import hashlib
import secrets
from datetime import datetime
from typing import Any, Dict, MutableMapping, Optional

from eventrelay.core.config import Settings, UserIdSource
from eventrelay.core.exceptions import IdentityResolutionError
from eventrelay.core.logging import logger
from eventrelay.core.protocols.actor import Actor
from eventrelay.identity.guest import GuestSessionRegistry, generate_token
from eventrelay.identity.types import AnonymousId, Identifier, UserId

ANON_ID_NAMESPACE = "eventrelay:anonymous-id:v1"
ANON_ID_LENGTH = 36
ANON_ID_SEPARATOR = "-dc-"
OVERFLOW_MARKER = "ovf"
ERROR_ID_PREFIX = "err_ua_"

Session = MutableMapping[str, Any]

identity_logger = logger.with_context(component="identity")


def normalize_email(email: Any) -> Optional[str]:
    """Trim and lowercase an email; None when it is missing or blank."""
    if not isinstance(email, str):
        return None
    normalized = email.strip().lower()
    return normalized or None


def deterministic_anonymous_id(actor_id: Any, secret: str) -> str:
    """Return the 36-char anonymous id for ``actor_id`` under ``secret``.

    The id is ``"<actor_id>-dc-"`` followed by a truncated SHA-256 of the
    namespaced actor id and secret. When the prefix alone fills the length,
    the prefix is returned whole with an ``ovf`` marker instead of cutting
    into the actor id.
    """
    prefix = f"{actor_id}{ANON_ID_SEPARATOR}"
    room = ANON_ID_LENGTH - len(prefix)
    if room <= 0:
        identity_logger.warning(
            f"Actor id too long for a {ANON_ID_LENGTH}-char anonymous id; using overflow marker"
        )
        return f"{prefix}{OVERFLOW_MARKER}"

    digest = hashlib.sha256(f"{ANON_ID_NAMESPACE}:{actor_id}:{secret}".encode("utf-8"))
    return f"{prefix}{digest.hexdigest()[:room]}"


class IdentityStrategy:
    """Resolves identifiers, traits and internal-actor status for actors."""

    def __init__(
        self,
        settings: Settings,
        guest_registry: GuestSessionRegistry,
        secret: Optional[str] = None,
    ) -> None:
        """Bind the strategy to settings and the guest registry.

        Args:
            settings: Source of USER_ID_SOURCE, INTERNAL_DOMAIN and ANON_ID_SECRET.
            guest_registry: Owner of guest and fallback anonymous ids.
            secret: Salt for deterministic anonymous ids. Defaults to
                ``settings.ANON_ID_SECRET``; when both are unset a random
                per-process secret is used, so anonymous ids only stay
                stable until the process restarts.
        """
        self._settings = settings
        self._guests = guest_registry
        self._secret = secret or settings.ANON_ID_SECRET or self._process_secret()

    @staticmethod
    def _process_secret() -> str:
        identity_logger.warning(
            "ANON_ID_SECRET is not set; anonymous ids will change on every restart"
        )
        return secrets.token_hex(32)

    def reconfigure(self, settings: Settings) -> None:
        """Switch to new settings. A changed ANON_ID_SECRET re-keys anonymous ids."""
        if settings.ANON_ID_SECRET and settings.ANON_ID_SECRET != self._secret:
            self._secret = settings.ANON_ID_SECRET
        self._settings = settings

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, actor: Optional[Actor], session: Optional[Session] = None) -> Identifier:
        """Resolve the collector identity for ``actor`` (or the guest behind ``session``)."""
        if actor is None:
            if session is not None:
                return AnonymousId(id=self._guests.session_guest_id(session))
            return AnonymousId(id=self._guests.fallback_id())

        source = self._settings.user_id_source
        try:
            return self._resolve_for_source(actor, source)
        except IdentityResolutionError as e:
            identity_logger.warning(f"{e}; falling back to anonymous id (actor={_actor_id(actor)})")

        return self._fallback(actor)

    def _resolve_for_source(self, actor: Actor, source: Optional[UserIdSource]) -> Identifier:
        if source == UserIdSource.EMAIL:
            email = normalize_email(getattr(actor, "email", None))
            if not email:
                raise IdentityResolutionError(source.value, "Actor has no usable email")
            return UserId(id=email)

        if source == UserIdSource.SSO_EXTERNAL_ID:
            sso_id = self._sso_external_id(actor)
            if sso_id:
                return UserId(id=sso_id)
            email = normalize_email(getattr(actor, "email", None))
            if not email:
                raise IdentityResolutionError(source.value, "Actor has no SSO id and no email")
            identity_logger.warning(
                f"Actor has no SSO external id; using email (actor={_actor_id(actor)})"
            )
            return UserId(id=email)

        if source == UserIdSource.USE_ANON:
            token = self.anonymous_id_for(actor)
            if token is None:
                raise IdentityResolutionError(source.value, "Actor has no id to hash")
            return AnonymousId(id=token)

        if source != UserIdSource.DISCOURSE_ID:
            identity_logger.warning(
                f"Unknown USER_ID_SOURCE {self._settings.USER_ID_SOURCE!r}; using native actor id"
            )
        native_id = _actor_id(actor)
        if not native_id:
            raise IdentityResolutionError("native_id", "Actor has no id")
        return UserId(id=native_id)

    def _sso_external_id(self, actor: Actor) -> Optional[str]:
        try:
            value = getattr(actor, "sso_external_id", None)
        except Exception as e:
            identity_logger.warning(f"SSO external id lookup failed: {e}")
            return None
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    def _fallback(self, actor: Actor) -> AnonymousId:
        token = self.anonymous_id_for(actor)
        if token is not None:
            return AnonymousId(id=token)

        token = generate_token(ERROR_ID_PREFIX)
        identity_logger.error(
            f"Could not derive any identifier for actor; sent random id {token}. "
            "Check USER_ID_SOURCE and the actor records passed in."
        )
        return AnonymousId(id=token)

    def anonymous_id_for(self, actor: Actor) -> Optional[str]:
        """Deterministic anonymous id for ``actor``, or None if it has no id."""
        actor_id = _actor_id(actor)
        if not actor_id:
            return None
        return deterministic_anonymous_id(actor_id, self._secret)

    # ------------------------------------------------------------------
    # Traits
    # ------------------------------------------------------------------

    def is_internal_actor(self, actor: Optional[Actor]) -> bool:
        """True when the actor's email domain is INTERNAL_DOMAIN or a subdomain of it."""
        domain = (self._settings.INTERNAL_DOMAIN or "").strip().lower().lstrip("@")
        if not domain or actor is None:
            return False
        email = normalize_email(getattr(actor, "email", None))
        if not email or "@" not in email:
            return False
        host = email.rpartition("@")[2]
        return host == domain or host.endswith(f".{domain}")

    def traits(self, actor: Actor) -> Dict[str, Any]:
        """Identify traits for ``actor``; None values are left out."""
        created_at = getattr(actor, "created_at", None)
        if isinstance(created_at, datetime):
            created_at = created_at.isoformat()
        traits = {
            "name": getattr(actor, "name", None),
            "username": getattr(actor, "username", None),
            "email": normalize_email(getattr(actor, "email", None)),
            "created_at": created_at,
            "internal": self.is_internal_actor(actor),
        }
        return {key: value for key, value in traits.items() if value is not None}

    def embed_trait_email(self, context: Dict[str, Any], actor: Optional[Actor]) -> Dict[str, Any]:
        """Put the actor's normalized email under ``context["traits"]["email"]``.

        Lets the collector merge anonymous and identified activity sharing an
        email without promoting the email to a top-level trait.
        """
        if actor is None:
            return context
        email = normalize_email(getattr(actor, "email", None))
        if email:
            context.setdefault("traits", {})["email"] = email
        return context


def _actor_id(actor: Actor) -> Optional[str]:
    actor_id = getattr(actor, "id", None)
    if actor_id is None:
        return None
    actor_id = str(actor_id).strip()
    return actor_id or None
