"""Unit tests for settings and configuration enums."""

import pytest

from eventrelay.core.config import Settings, TransportBackend, UserIdSource


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("email", UserIdSource.EMAIL),
        ("SSO_EXTERNAL_ID", UserIdSource.SSO_EXTERNAL_ID),
        (" use_anon ", UserIdSource.USE_ANON),
        ("discourse_id", UserIdSource.DISCOURSE_ID),
        ("bogus", None),
        ("", None),
        (None, None),
    ],
)
def test_user_id_source_parsing(raw, expected):
    assert UserIdSource.parse(raw) is expected
    assert Settings(USER_ID_SOURCE=raw).user_id_source is expected


@pytest.mark.parametrize(
    "enabled, write_key, expected",
    [
        (True, "key", True),
        (True, None, False),
        (True, "  ", False),
        (False, "key", False),
    ],
)
def test_delivery_enabled(enabled, write_key, expected):
    assert Settings(ENABLED=enabled, WRITE_KEY=write_key).delivery_enabled is expected


def test_reads_prefixed_environment(monkeypatch):
    monkeypatch.setenv("EVENTRELAY_ENABLED", "true")
    monkeypatch.setenv("EVENTRELAY_WRITE_KEY", "env-key")
    monkeypatch.setenv("EVENTRELAY_TRANSPORT", "posthog")
    monkeypatch.setenv("EVENTRELAY_USER_ID_SOURCE", "email")

    settings = Settings()

    assert settings.delivery_enabled is True
    assert settings.WRITE_KEY == "env-key"
    assert settings.TRANSPORT is TransportBackend.POSTHOG
    assert settings.user_id_source is UserIdSource.EMAIL


def test_defaults(monkeypatch):
    for name in ("EVENTRELAY_ENABLED", "EVENTRELAY_SEND", "EVENTRELAY_ANON_ID_SECRET"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings()

    assert settings.ENABLED is False
    assert settings.TRANSPORT is TransportBackend.SEGMENT
    assert settings.TIMEOUT == 15.0
    assert settings.SEND is True


def test_fingerprint_ignores_identity_settings():
    a = Settings(WRITE_KEY="k", USER_ID_SOURCE="email")
    b = Settings(WRITE_KEY="k", USER_ID_SOURCE="use_anon", ENABLED=True)
    c = Settings(WRITE_KEY="other")
    assert a.transport_fingerprint == b.transport_fingerprint
    assert a.transport_fingerprint != c.transport_fingerprint


def test_sync_mode_is_part_of_fingerprint():
    a = Settings(WRITE_KEY="k")
    b = Settings(WRITE_KEY="k", SYNC_MODE=True)
    assert a.SYNC_MODE is False
    assert a.transport_fingerprint != b.transport_fingerprint


def test_log_handler_is_opt_in():
    assert Settings().LOG_HANDLER is False
    assert Settings(LOG_HANDLER=True).LOG_HANDLER is True
