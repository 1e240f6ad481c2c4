"""SMS delivery provider (simulated)."""

import logging
import random

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


class SMSProvider(DeliveryProvider):
    """Simulated SMS gateway.

    Ready for integration with Twilio/AWS SNS: replace ``_deliver`` with
    the gateway call and return its message SID.
    """

    channel = Channel.SMS

    def __init__(
        self, config: ProviderConfig, rng: random.Random | None = None
    ) -> None:
        self._simulation = SimulatedDelivery(
            Channel.SMS,
            config.simulated_failure_rate,
            "Simulated SMS gateway error",
            rng,
        )

    def _deliver(self, notification: NotificationLog) -> DeliveryResult:
        result = self._simulation.attempt()
        logger.info(
            "SMS sent (simulated)",
            extra=notification_context(
                notification,
                recipient=notification.recipient,
                body_preview=notification.body[:60],
                success=result.success,
            ),
        )
        return result
