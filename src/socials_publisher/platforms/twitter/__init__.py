"""X (Twitter) platform implementation."""

from .client import TwitterClient
from .publisher import TwitterPublisher, append_media_notice

__all__ = ["TwitterClient", "TwitterPublisher", "append_media_notice"]
