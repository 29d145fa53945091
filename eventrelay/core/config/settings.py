"""Application settings loaded from the environment.

Every field can be set through an ``EVENTRELAY_``-prefixed env var, e.g.
``EVENTRELAY_WRITE_KEY`` or ``EVENTRELAY_USER_ID_SOURCE=email``.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from eventrelay.core.config.enums import TransportBackend, UserIdSource


class Settings(BaseSettings):
    """Settings for identity resolution, delivery and background jobs."""

    model_config = SettingsConfigDict(
        env_prefix="EVENTRELAY_",
        extra="ignore",
        case_sensitive=True,
    )

    # Delivery gate
    ENABLED: bool = Field(False, description="Master switch for analytics delivery")
    WRITE_KEY: Optional[str] = Field(None, description="Collector write key / project API key")

    # Identity
    USER_ID_SOURCE: Optional[str] = Field(
        None,
        description="email | sso_external_id | use_anon | discourse_id",
    )
    INTERNAL_DOMAIN: Optional[str] = Field(
        None, description="Email domain identifying the operator's own staff"
    )
    ANON_ID_SECRET: Optional[str] = Field(
        None, description="Secret salting deterministic anonymous ids"
    )

    # Transport
    TRANSPORT: TransportBackend = TransportBackend.SEGMENT
    HOST: Optional[str] = Field(None, description="Collector host override")
    TIMEOUT: float = Field(15.0, gt=0, description="Per-request timeout in seconds")
    MAX_RETRIES: int = Field(3, ge=0)
    SEND: bool = Field(True, description="False builds the client but never uploads")
    SYNC_MODE: bool = Field(
        False, description="Segment only: upload inline on the calling thread, no consumer"
    )

    # Background jobs
    JOB_WORKERS: int = Field(2, ge=1)
    JOB_MAX_ATTEMPTS: int = Field(3, ge=1)
    JOB_RETRY_BACKOFF: float = Field(0.5, ge=0)

    LOG_LEVEL: str = "INFO"
    LOG_HANDLER: bool = Field(
        False, description="Attach a stderr handler to the eventrelay logger"
    )

    @property
    def user_id_source(self) -> Optional[UserIdSource]:
        """Parsed USER_ID_SOURCE; None when unset or not a known source."""
        return UserIdSource.parse(self.USER_ID_SOURCE)

    @property
    def delivery_enabled(self) -> bool:
        """True only when delivery is switched on and a write key is present."""
        return bool(self.ENABLED and self.WRITE_KEY and self.WRITE_KEY.strip())

    @property
    def transport_fingerprint(self) -> tuple:
        """Values the dispatcher's transport is built from."""
        return (
            self.WRITE_KEY,
            self.TRANSPORT,
            self.HOST,
            self.TIMEOUT,
            self.MAX_RETRIES,
            self.SEND,
            self.SYNC_MODE,
        )
