"""Provider adapters.

This package provides one adapter per supported provider behind a single
interface (``ProviderAdapter.publish``).

Usage:
    from socials_publisher.platforms import PlatformRegistry

    adapter = PlatformRegistry.get_publisher("facebook")
    result = await adapter.publish(connection, content)
"""

from .base import ProviderAdapter, PublishResult
from .registry import PlatformRegistry

__all__ = [
    "ProviderAdapter",
    "PublishResult",
    "PlatformRegistry",
]
