"""Facebook platform implementation."""

from .client import FacebookClient
from .publisher import FacebookPublisher

__all__ = ["FacebookClient", "FacebookPublisher"]
