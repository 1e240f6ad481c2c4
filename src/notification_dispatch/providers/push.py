"""Push notification delivery provider (simulated)."""

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


class PushProvider(DeliveryProvider):
    """Simulated push provider.

    Ready for integration with FCM/APNs: the recipient is the device token.
    """

    channel = Channel.PUSH

    def __init__(
        self, config: ProviderConfig, rng: random.Random | None = None
    ) -> None:
        self._simulation = SimulatedDelivery(
            Channel.PUSH,
            config.simulated_failure_rate,
            "Simulated FCM error",
            rng,
        )

    def _deliver(self, notification: NotificationLog) -> DeliveryResult:
        result = self._simulation.attempt()
        logger.info(
            "Push sent (simulated)",
            extra=notification_context(
                notification,
                token_prefix=notification.recipient[:20],
                body_preview=notification.body[:60],
                success=result.success,
            ),
        )
        return result
