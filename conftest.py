"""Root conftest for pytest configuration and shared fixtures.

Loaded before both testpaths (tests/ and eventrelay/), so its fixtures are
available to centralized tests AND colocated adapter tests.
"""

import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import pytest

# ---------------------------------------------------------------------------
# Environment variables: must be set before any eventrelay module import
# Uses setdefault so real env vars are never overridden.
# ---------------------------------------------------------------------------
os.environ.setdefault("EVENTRELAY_ENABLED", "false")
os.environ.setdefault("EVENTRELAY_SEND", "false")
os.environ.setdefault("EVENTRELAY_ANON_ID_SECRET", "test-anon-secret")


# ---------------------------------------------------------------------------
# Host doubles
# ---------------------------------------------------------------------------


class InMemoryActorLookup:
    """ActorLookup over a dict, as a host repository would provide."""

    def __init__(self, actors: Optional[Dict[Any, Any]] = None) -> None:
        self.actors: Dict[Any, Any] = dict(actors or {})
        self.lookups: list = []

    def add(self, actor: Any) -> Any:
        self.actors[actor.id] = actor
        return actor

    def get_actor(self, actor_id: Any) -> Any:
        self.lookups.append(actor_id)
        return self.actors.get(actor_id)


def make_actor(actor_id: Any = 42, **overrides: Any):
    """Build an ActorRecord with realistic defaults."""
    from eventrelay.identity.types import ActorRecord

    fields = {
        "id": actor_id,
        "name": "Ada Lovelace",
        "username": "ada",
        "email": "  Ada@Example.COM ",
        "created_at": datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        "ip_address": "203.0.113.7",
    }
    fields.update(overrides)
    return ActorRecord(**fields)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture
def make_settings():
    """Factory for Settings that ignores the process environment."""
    from eventrelay.core.config import Settings

    def _make(**overrides: Any) -> Settings:
        values = {
            "ENABLED": True,
            "WRITE_KEY": "test-write-key",
            "ANON_ID_SECRET": "test-anon-secret",
            "SEND": False,
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def settings(make_settings):
    """Enabled settings with a write key and the native id strategy."""
    return make_settings(USER_ID_SOURCE="discourse_id")


@pytest.fixture
def disabled_settings(make_settings):
    return make_settings(ENABLED=False)


# ---------------------------------------------------------------------------
# Shared fake fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_transport_factory():
    """Transport factory that builds recording FakeTransports."""
    from eventrelay.adapters.transport.fake import FakeTransportFactory

    return FakeTransportFactory()


@pytest.fixture
def fake_job_queue():
    """Fake JobQueue that records jobs and runs them on demand."""
    from eventrelay.adapters.jobs.fake import FakeJobQueue

    return FakeJobQueue()


@pytest.fixture
def actor_factory():
    """``make_actor`` as a fixture: actor_factory(7, email=None)."""
    return make_actor


@pytest.fixture
def lookup_factory():
    """Build an InMemoryActorLookup from actors."""

    def _make(*actors: Any) -> InMemoryActorLookup:
        return InMemoryActorLookup({a.id: a for a in actors})

    return _make


@pytest.fixture
def actor():
    return make_actor()


@pytest.fixture
def actor_lookup(actor):
    return InMemoryActorLookup({actor.id: actor})


# ---------------------------------------------------------------------------
# Test container: fully faked Container for injection
# ---------------------------------------------------------------------------


@pytest.fixture
def test_container(settings, actor_lookup, fake_job_queue, fake_transport_factory):
    """A Container wired with fakes.

    For partial overrides, use container.replace() or build another with
    create_container(...).
    """
    from eventrelay.core.container import create_container

    container = create_container(
        settings,
        actor_lookup,
        job_queue=fake_job_queue,
        transport_factory=fake_transport_factory,
        register_shutdown=False,
    )
    yield container
    container.shutdown()
