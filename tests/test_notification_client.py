import asyncio
import dataclasses
import json

import httpx
import pytest

from boundless.config import Settings
from boundless.data_client.notification_client import (
    EVENT_HACKATHON_PUBLISHED,
    NotificationClient,
)
from boundless.errors import NotificationError
from boundless.routes.deps import notify_best_effort

WEBHOOK = Settings(
    notify_provider="webhook",
    notify_webhook_url="https://hooks.example.com/notify",
    notify_api_token="tok",
)


def _client(handler):
    return NotificationClient(WEBHOOK, transport=httpx.MockTransport(handler))


def test_mock_provider_makes_no_requests():
    client = NotificationClient(Settings())
    asyncio.run(client.notify(EVENT_HACKATHON_PUBLISHED, ["a@example.com"], {"slug": "x"}))


def test_webhook_posts_event():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(202, json={"accepted": True})

    asyncio.run(_client(handler).notify(EVENT_HACKATHON_PUBLISHED, ["a@example.com", ""], {"slug": "x"}))

    assert len(seen) == 1
    assert seen[0].headers["Authorization"] == "Bearer tok"
    body = json.loads(seen[0].content)
    assert body == {"event": EVENT_HACKATHON_PUBLISHED, "recipients": ["a@example.com"], "data": {"slug": "x"}}


def test_no_recipients_skips_request():
    def handler(request):
        raise AssertionError("no request expected")

    asyncio.run(_client(handler).notify(EVENT_HACKATHON_PUBLISHED, [], {}))


def test_http_error_raises_notification_error():
    def handler(request):
        return httpx.Response(500, text="boom")

    with pytest.raises(NotificationError, match="500"):
        asyncio.run(_client(handler).notify(EVENT_HACKATHON_PUBLISHED, ["a@example.com"], {}))


def test_best_effort_swallows_failures():
    def handler(request):
        return httpx.Response(503, text="down")

    asyncio.run(notify_best_effort(_client(handler), EVENT_HACKATHON_PUBLISHED, ["a@example.com"], {}))


def _failing_client(fail_max, calls):
    settings = dataclasses.replace(WEBHOOK, notify_breaker_fail_max=fail_max)

    def handler(request):
        calls.append(request)
        # Not a transient error, so it is not retried but still counts as a failure
        raise RuntimeError("relay crashed")

    return NotificationClient(settings, transport=httpx.MockTransport(handler))


def test_breaker_opens_after_failures():
    calls = []
    client = _failing_client(1, calls)

    with pytest.raises(NotificationError):
        asyncio.run(client.notify(EVENT_HACKATHON_PUBLISHED, ["a@example.com"], {}))
    with pytest.raises(NotificationError, match="temporarily unavailable"):
        asyncio.run(client.notify(EVENT_HACKATHON_PUBLISHED, ["a@example.com"], {}))
    assert len(calls) == 1


def test_breaker_state_is_per_client():
    calls = []
    broken = _failing_client(1, calls)
    with pytest.raises(NotificationError):
        asyncio.run(broken.notify(EVENT_HACKATHON_PUBLISHED, ["a@example.com"], {}))

    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(202)

    healthy = _client(handler)
    asyncio.run(healthy.notify(EVENT_HACKATHON_PUBLISHED, ["a@example.com"], {}))
    assert healthy.breaker is not broken.breaker
    assert len(seen) == 1


def test_http_errors_do_not_open_breaker():
    def handler(request):
        return httpx.Response(500, text="boom")

    client = NotificationClient(
        dataclasses.replace(WEBHOOK, notify_breaker_fail_max=1), transport=httpx.MockTransport(handler)
    )
    for _ in range(3):
        with pytest.raises(NotificationError, match="HTTP error 500"):
            asyncio.run(client.notify(EVENT_HACKATHON_PUBLISHED, ["a@example.com"], {}))
