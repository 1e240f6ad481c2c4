"""Email delivery provider: Resend HTTP API, or a local simulation."""

import logging
import random

import httpx

from notification_dispatch.config import ProviderConfig
from notification_dispatch.db.models import NotificationLog
from notification_dispatch.enums import Channel
from notification_dispatch.log import notification_context
from notification_dispatch.providers.base import (
    DeliveryProvider,
    DeliveryResult,
    SimulatedDelivery,
)

logger = logging.getLogger(__name__)


class EmailProvider(DeliveryProvider):
    """Sends email through Resend when an API key is configured.

    The live/simulated decision is made once, here in the constructor,
    from *config*; it does not change for the lifetime of the provider.
    """

    channel = Channel.EMAIL

    def __init__(
        self,
        config: ProviderConfig,
        client: httpx.Client | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config
        self._client: httpx.Client | None = None
        self._api_key: str | None = None
        self._simulation: SimulatedDelivery | None = None

        if config.resend_api_key is not None:
            self._api_key = config.resend_api_key.get_secret_value()
            self._client = client or httpx.Client(timeout=config.timeout_seconds)
        else:
            self._simulation = SimulatedDelivery(
                Channel.EMAIL,
                config.simulated_failure_rate,
                "Simulated SMTP timeout",
                rng,
            )

    @property
    def is_live(self) -> bool:
        return self._client is not None

    def _deliver(self, notification: NotificationLog) -> DeliveryResult:
        if self._simulation is None:
            return self._send_with_resend(notification)

        result = self._simulation.attempt()
        logger.info(
            "Email sent (simulated)",
            extra=notification_context(
                notification,
                recipient=notification.recipient,
                subject=notification.subject,
                success=result.success,
            ),
        )
        return result

    def _send_with_resend(self, notification: NotificationLog) -> DeliveryResult:
        response = self._client.post(  # type: ignore[union-attr]
            self._config.resend_api_url,
            headers={"Authorization": f"Bearer {self._api_key}"},
            json={
                "from": self._config.email_from,
                "to": [notification.recipient],
                "subject": notification.subject or "(no subject)",
                "text": notification.body,
            },
        )
        if response.is_error:
            return DeliveryResult.failed(
                f"Resend error {response.status_code}: {response.text}"
            )

        message_id = _message_id(response)
        logger.info(
            "Email sent",
            extra=notification_context(notification, message_id=message_id),
        )
        return DeliveryResult.delivered(message_id)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()


def _message_id(response: httpx.Response) -> str:
    """Resend's message id, or "" when an accepted response carries none.

    A 2xx means the email was accepted; a missing or unreadable body must
    not turn that into a failure and trigger a duplicate send.
    """
    try:
        payload = response.json()
    except ValueError:
        return ""
    if not isinstance(payload, dict) or payload.get("id") is None:
        return ""
    return str(payload["id"])
