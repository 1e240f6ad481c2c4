"""Helpers shared by the unit test modules."""

from unittest.mock import MagicMock

from notification_dispatch.enums import Channel
from notification_dispatch.providers import DeliveryProvider, DeliveryResult

BASE_DELAY = 0.5


def make_mock_provider(channel: Channel) -> MagicMock:
    """Provider double that succeeds unless the test reconfigures it."""
    provider = MagicMock(spec=DeliveryProvider)
    provider.channel = channel
    provider.send.return_value = DeliveryResult.delivered(f"{channel}-msg-1")
    return provider
