"""Configuration module for eventrelay.

Usage:
    from eventrelay.core.config import settings, UserIdSource

    if settings.user_id_source == UserIdSource.EMAIL:
        ...
"""

from eventrelay.core.config.enums import TransportBackend, UserIdSource
from eventrelay.core.config.settings import Settings

__all__ = [
    "Settings",
    "TransportBackend",
    "UserIdSource",
    "settings",
]

# Singleton settings instance
settings = Settings()
