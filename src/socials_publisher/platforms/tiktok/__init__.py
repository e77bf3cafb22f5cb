"""TikTok platform implementation."""

from .client import CreatorInfo, TikTokClient
from .publisher import TikTokPublisher

__all__ = ["CreatorInfo", "TikTokClient", "TikTokPublisher"]
