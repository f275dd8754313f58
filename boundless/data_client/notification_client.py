# boundless/data_client/notification_client.py
"""
Notification client.

Delivery (email, in-app) is handled by an external service; this client only
hands it events.

Supports:
- NOTIFY_PROVIDER=mock    -> no network, log + metric only
- NOTIFY_PROVIDER=webhook -> POST JSON to NOTIFY_WEBHOOK_URL

Each client owns its circuit breaker, so an outage seen by one app instance
(or one test) never leaks into another. Transport errors are retried with
exponential backoff; HTTP error statuses are not retried and do not trip the
breaker.
"""

import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional

import httpx
from aiobreaker import CircuitBreaker, CircuitBreakerError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from boundless.config import Settings, validate_settings
from boundless.errors import NotificationError
from boundless.metrics import NOTIFICATION_LATENCY, NOTIFICATIONS

logger = logging.getLogger("boundless-api.notifications")

EVENT_HACKATHON_PUBLISHED = "hackathon_published"
EVENT_SUBMISSION_SHORTLISTED = "submission_shortlisted"
EVENT_PARTICIPANT_REGISTERED = "participant_registered"

# Connection drops and timeouts; a 4xx/5xx answer is final
TRANSIENT_ERRORS = (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)


@retry(
    reraise=True,
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=8),
    retry=retry_if_exception_type(TRANSIENT_ERRORS),
)
async def _deliver(client: httpx.AsyncClient, url: str, event: Dict[str, Any]) -> httpx.Response:
    with NOTIFICATION_LATENCY.time():
        try:
            resp = await client.post(url, json=event)
            resp.raise_for_status()
        except Exception:
            NOTIFICATIONS.labels(outcome="failure").inc()
            raise
    NOTIFICATIONS.labels(outcome="success").inc()
    return resp


class NotificationClient:
    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        validate_settings(settings)

        self.provider = settings.notify_provider
        self.url = settings.notify_webhook_url
        self.timeout = httpx.Timeout(float(settings.notify_timeout_seconds))
        self.transport = transport
        self.headers: Dict[str, str] = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if settings.notify_api_token:
            self.headers["Authorization"] = f"Bearer {settings.notify_api_token}"

        self.breaker = CircuitBreaker(
            fail_max=settings.notify_breaker_fail_max,
            timeout_duration=timedelta(seconds=settings.notify_breaker_reset_seconds),
            exclude=[httpx.HTTPStatusError],
        )

    async def notify(self, event: str, recipients: List[str], data: Dict[str, Any]) -> None:
        """
        Hand one event to the delivery service.
        Raises NotificationError; callers decide whether that matters.
        """
        recipients = [r for r in recipients if r]
        if not recipients:
            return

        if self.provider == "mock":
            NOTIFICATIONS.labels(outcome="mock").inc()
            logger.info("Notification[mock] %s -> %s", event, ", ".join(recipients))
            return

        body = {"event": event, "recipients": recipients, "data": data}
        logger.debug(f"Notification[{self.provider}] {event} -> {len(recipients)} recipient(s)")

        async with httpx.AsyncClient(
            headers=self.headers,
            timeout=self.timeout,
            transport=self.transport,
        ) as client:
            try:
                await self.breaker.call_async(_deliver, client, self.url, body)
            except CircuitBreakerError:
                NOTIFICATIONS.labels(outcome="circuit_breaker").inc()
                logger.warning(f"Notification breaker open, {event} dropped")
                raise NotificationError("Notification service temporarily unavailable (circuit breaker open).")
            except httpx.HTTPStatusError as exc:
                logger.error(f"Notification {event} rejected with HTTP {exc.response.status_code}")
                raise NotificationError(f"Notification HTTP error {exc.response.status_code}")
            except Exception as exc:
                logger.error(f"Notification {event} failed: {exc}")
                raise NotificationError(f"Notification request failed: {exc}")
