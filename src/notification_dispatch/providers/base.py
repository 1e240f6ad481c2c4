"""Delivery provider interface and the shared simulation behaviour."""

import logging
import random
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Self

from notification_dispatch.db.models import NotificationLog
from notification_dispatch.enums import Channel
from notification_dispatch.log import notification_context

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    """Outcome of one delivery attempt."""

    success: bool
    message_id: str | None = None
    error: str | None = None

    @classmethod
    def delivered(cls, message_id: str) -> Self:
        return cls(success=True, message_id=message_id)

    @classmethod
    def failed(cls, error: str) -> Self:
        return cls(success=False, error=error)


class DeliveryProvider(ABC):
    """Base class for all channel delivery providers.

    ``send`` is the boundary the pipeline talks to: it never raises.
    Subclasses implement ``_deliver`` and may raise freely; any exception
    is logged and turned into a failed result.
    """

    channel: ClassVar[Channel]

    def send(self, notification: NotificationLog) -> DeliveryResult:
        """Attempt to deliver a notification."""
        try:
            return self._deliver(notification)
        except Exception as exc:
            logger.exception(
                "Provider raised during send",
                extra=notification_context(notification),
            )
            return DeliveryResult.failed(str(exc) or type(exc).__name__)

    @abstractmethod
    def _deliver(self, notification: NotificationLog) -> DeliveryResult:
        """Channel-specific delivery."""

    def close(self) -> None:
        """Release transport resources. No-op unless overridden."""


class SimulatedDelivery:
    """Local stand-in for an external delivery network.

    Fails with *failure_reason* at the given rate, otherwise returns a
    ``sim_<channel>_...`` message id.
    """

    def __init__(
        self,
        channel: Channel,
        failure_rate: float,
        failure_reason: str,
        rng: random.Random | None = None,
    ) -> None:
        self._channel = channel
        self._failure_rate = failure_rate
        self._failure_reason = failure_reason
        self._rng = rng or random.Random()

    def attempt(self) -> DeliveryResult:
        if self._rng.random() < self._failure_rate:
            return DeliveryResult.failed(self._failure_reason)
        return DeliveryResult.delivered(f"sim_{self._channel}_{uuid.uuid4().hex}")
