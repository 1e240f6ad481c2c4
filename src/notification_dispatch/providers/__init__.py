"""Provider registry for channel-based delivery dispatch."""

import random
from collections.abc import Iterable, Iterator
from types import MappingProxyType

from notification_dispatch.config import ProviderConfig
from notification_dispatch.errors import ProviderNotFoundError
from notification_dispatch.providers.base import DeliveryProvider, DeliveryResult
from notification_dispatch.providers.email import EmailProvider
from notification_dispatch.providers.push import PushProvider
from notification_dispatch.providers.sms import SMSProvider

__all__ = [
    "DeliveryProvider",
    "DeliveryResult",
    "EmailProvider",
    "PushProvider",
    "ProviderRegistry",
    "SMSProvider",
    "create_default_registry",
]


class ProviderRegistry:
    """Immutable mapping of channel to its single delivery provider."""

    def __init__(self, providers: Iterable[DeliveryProvider]) -> None:
        by_channel: dict[str, DeliveryProvider] = {}
        for provider in providers:
            if provider.channel in by_channel:
                raise ValueError(
                    f"Duplicate provider for channel {provider.channel!r}"
                )
            by_channel[provider.channel] = provider
        self._providers = MappingProxyType(by_channel)

    def __iter__(self) -> Iterator[str]:
        return iter(self._providers)

    def __contains__(self, channel: object) -> bool:
        return channel in self._providers

    def get(self, channel: str) -> DeliveryProvider:
        """Return the provider for a channel.

        Raises ProviderNotFoundError if no provider is registered for it.
        """
        try:
            return self._providers[channel]
        except KeyError:
            raise ProviderNotFoundError(channel) from None

    def close(self) -> None:
        for provider in self._providers.values():
            provider.close()


def create_default_registry(
    config: ProviderConfig, rng: random.Random | None = None
) -> ProviderRegistry:
    """Create a registry with the built-in email, SMS and push providers."""
    return ProviderRegistry([
        EmailProvider(config, rng=rng),
        SMSProvider(config, rng=rng),
        PushProvider(config, rng=rng),
    ])
