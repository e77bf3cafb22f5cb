"""Instagram platform implementation."""

from .client import InstagramClient
from .publisher import InstagramPublisher

__all__ = ["InstagramClient", "InstagramPublisher"]
