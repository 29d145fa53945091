"""Tests for PostHogTransport."""

from unittest.mock import MagicMock

import pytest

from eventrelay.adapters.transport import posthog as posthog_module
from eventrelay.adapters.transport.posthog import PostHogTransport
from eventrelay.dispatch.payloads import (
    build_identify_payload,
    build_page_payload,
    build_track_payload,
)
from eventrelay.identity.types import AnonymousId, UserId


@pytest.fixture
def client_cls(monkeypatch):
    mock_cls = MagicMock(name="Posthog")
    monkeypatch.setattr(posthog_module, "Posthog", mock_cls)
    return mock_cls


def _capture_kwargs(client_cls):
    return client_cls.return_value.capture.call_args.kwargs


def test_client_options(client_cls):
    PostHogTransport("phc_key", host="https://eu.i.posthog.com", timeout=3)

    args, kwargs = client_cls.call_args
    assert args == ("phc_key",)
    assert kwargs["host"] == "https://eu.i.posthog.com"
    assert kwargs["timeout"] == 3


def test_identify_is_identify_event_with_set(client_cls):
    transport = PostHogTransport("phc_key")
    payload = build_identify_payload(UserId(id="42"), {"username": "ada"}, {"ip": "203.0.113.7"})
    transport.identify(payload)

    kwargs = _capture_kwargs(client_cls)
    assert kwargs["event"] == "$identify"
    assert kwargs["distinct_id"] == "42"
    assert kwargs["properties"] == {"$set": {"username": "ada"}, "$ip": "203.0.113.7"}
    assert kwargs["timestamp"] == payload.timestamp


def test_track_uses_distinct_id_for_anonymous(client_cls):
    transport = PostHogTransport("phc_key")
    transport.track(
        build_track_payload(AnonymousId(id="g" * 36), "Post Created", {"slug": "s"})
    )

    kwargs = _capture_kwargs(client_cls)
    assert kwargs["event"] == "Post Created"
    assert kwargs["distinct_id"] == "g" * 36
    assert kwargs["properties"] == {"slug": "s"}


def test_page_is_pageview(client_cls):
    transport = PostHogTransport("phc_key")
    transport.page(
        build_page_payload(UserId(id="42"), "Latest", {"path": "/latest"}, {"userAgent": "UA"})
    )

    kwargs = _capture_kwargs(client_cls)
    assert kwargs["event"] == "$pageview"
    assert kwargs["properties"] == {"path": "/latest", "name": "Latest", "$raw_user_agent": "UA"}


def test_upload_errors_reach_callback(client_cls):
    errors = []
    PostHogTransport("phc_key", on_error=lambda e, op: errors.append(op))
    client_cls.call_args.kwargs["on_error"](OSError("down"), [])
    assert errors == ["batch"]


def test_flush_and_shutdown(client_cls):
    transport = PostHogTransport("phc_key")
    transport.flush()
    transport.shutdown()
    client_cls.return_value.flush.assert_called_once_with()
    client_cls.return_value.shutdown.assert_called_once_with()
