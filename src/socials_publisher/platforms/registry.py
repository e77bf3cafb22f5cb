"""Static provider -> adapter mapping."""

from __future__ import annotations

import asyncio
from types import MappingProxyType
from typing import Mapping, Optional, Type

import httpx

from ..config import PublisherSettings
from ..constants import Provider
from ..publishing.uploads import SleepFunc
from .amazon import AmazonPublisher
from .base import ProviderAdapter
from .facebook import FacebookPublisher
from .instagram import InstagramPublisher
from .tiktok import TikTokPublisher
from .twitter import TwitterPublisher


class PlatformRegistry:
    """Closed registry of provider adapters.

    The provider set is fixed; adding a provider means adding a Provider
    member and an entry here.

    Usage:
        adapters = PlatformRegistry.create_adapters(settings)
        adapter = PlatformRegistry.get_publisher("twitter", settings)
    """

    _platforms: Mapping[Provider, Type[ProviderAdapter]] = MappingProxyType({
        Provider.FACEBOOK: FacebookPublisher,
        Provider.INSTAGRAM: InstagramPublisher,
        Provider.TWITTER: TwitterPublisher,
        Provider.TIKTOK: TikTokPublisher,
        Provider.AMAZON: AmazonPublisher,
    })

    @classmethod
    def available_platforms(cls) -> list[str]:
        return [p.value for p in cls._platforms]

    @classmethod
    def to_provider(cls, name: Provider | str) -> Provider:
        """Normalize a provider name.

        Raises:
            ValueError: If the provider is unknown.
        """
        if isinstance(name, Provider):
            return name
        try:
            return Provider(str(name).strip().lower())
        except ValueError:
            available = ", ".join(cls.available_platforms())
            raise ValueError(f"Unknown platform: {name}. Available: {available}") from None

    @classmethod
    def get_publisher(
        cls,
        name: Provider | str,
        settings: Optional[PublisherSettings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> ProviderAdapter:
        """Get an adapter instance for a provider.

        Raises:
            ValueError: If the provider is unknown.
        """
        provider = cls.to_provider(name)
        return cls._platforms[provider](settings, http_client=http_client, sleep=sleep)

    @classmethod
    def create_adapters(
        cls,
        settings: Optional[PublisherSettings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> dict[Provider, ProviderAdapter]:
        """One adapter per provider, sharing settings and HTTP client."""
        settings = settings or PublisherSettings()
        return {
            provider: adapter_cls(settings, http_client=http_client, sleep=sleep)
            for provider, adapter_cls in cls._platforms.items()
        }
