"""Unit tests for EventPayload and the payload builders."""

import itertools
import json

import pytest
from pydantic import ValidationError

from eventrelay.core.exceptions import InvalidPayloadError
from eventrelay.dispatch.payloads import (
    EventPayload,
    OperationType,
    RequestContext,
    build_identify_payload,
    build_page_payload,
    build_track_payload,
)
from eventrelay.identity.guest import GuestSessionRegistry
from eventrelay.identity.strategy import IdentityStrategy
from eventrelay.identity.types import AnonymousId, UserId


class TestEventPayloadShape:
    def test_rejects_both_identity_fields(self):
        with pytest.raises(ValidationError):
            EventPayload(type=OperationType.TRACK, event="x", user_id="u", anonymous_id="a")

    def test_rejects_neither_identity_field(self):
        with pytest.raises(ValidationError):
            EventPayload(type=OperationType.TRACK, event="x")

    def test_track_needs_event(self):
        with pytest.raises(ValidationError):
            EventPayload(type=OperationType.TRACK, user_id="u")

    def test_builders_wrap_validation_errors(self):
        with pytest.raises(InvalidPayloadError):
            build_track_payload(UserId(id="u"), "")


class TestMessages:
    def test_identify_message(self):
        payload = build_identify_payload(
            UserId(id="42"), {"username": "ada"}, {"ip": "203.0.113.7"}
        )
        message = payload.to_message()

        assert message["type"] == "identify"
        assert message["user_id"] == "42"
        assert "anonymous_id" not in message
        assert message["traits"] == {"username": "ada"}
        assert message["context"] == {"ip": "203.0.113.7"}
        assert "event" not in message and "properties" not in message
        json.dumps(message)

    def test_track_message(self):
        payload = build_track_payload(AnonymousId(id="g" * 36), "Post Created", {"slug": "hi"})
        message = payload.to_message()

        assert message["anonymous_id"] == "g" * 36
        assert "user_id" not in message
        assert message["event"] == "Post Created"
        assert message["properties"] == {"slug": "hi"}
        assert "context" not in message
        assert "traits" not in message

    def test_page_message(self):
        message = build_page_payload(UserId(id="42"), "Latest", {"path": "/latest"}).to_message()
        assert message["name"] == "Latest"
        assert message["properties"] == {"path": "/latest"}

    def test_unnamed_page_omits_name(self):
        message = build_page_payload(UserId(id="42"), None).to_message()
        assert "name" not in message

    def test_distinct_id_and_identity_kwargs(self):
        anon = build_track_payload(AnonymousId(id="anon"), "e")
        user = build_track_payload(UserId(id="user"), "e")
        assert anon.distinct_id == "anon" and anon.is_anonymous
        assert user.identity_kwargs() == {"user_id": "user"}


def test_request_context_drops_none():
    assert RequestContext(ip="1.2.3.4").to_context() == {"ip": "1.2.3.4"}
    assert RequestContext(ip="1.2.3.4", user_agent="curl/8").to_context() == {
        "ip": "1.2.3.4",
        "userAgent": "curl/8",
    }
    assert RequestContext().to_context() == {}


# ---------------------------------------------------------------------------
# Exclusivity across resolution inputs
# ---------------------------------------------------------------------------

SOURCES = [None, "email", "sso_external_id", "use_anon", "discourse_id", "bogus"]
ACTOR_SHAPES = [
    None,
    {},
    {"email": None},
    {"email": "  "},
    {"sso_external_id": "sso-1"},
    {"email": None, "sso_external_id": None},
    {"actor_id": ""},
    {"actor_id": "x" * 40},
]
SESSIONS = [None, "fresh", "reused"]


@pytest.mark.parametrize(
    "source, actor_shape, session_kind",
    list(itertools.product(SOURCES, ACTOR_SHAPES, SESSIONS)),
)
def test_every_payload_has_exactly_one_identity_field(
    make_settings, actor_factory, source, actor_shape, session_kind
):
    strategy = IdentityStrategy(make_settings(USER_ID_SOURCE=source), GuestSessionRegistry())
    actor = None
    if actor_shape is not None:
        shape = dict(actor_shape)
        actor = actor_factory(shape.pop("actor_id", 42), **shape)
    session = {"fresh": {}, "reused": {"segment_guest_id": "g" + "1" * 35}}.get(session_kind)

    identifier = strategy.resolve(actor, session)
    for payload in (
        build_identify_payload(identifier, {}),
        build_track_payload(identifier, "Something Happened"),
        build_page_payload(identifier, "Home"),
    ):
        message = payload.to_message()
        assert ("user_id" in message) != ("anonymous_id" in message)
        assert message.get("user_id") or message.get("anonymous_id")
