"""Abstract base classes for provider adapters.

This module defines the interface that all provider implementations follow
and the uniform result they return.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from ..config import PublisherSettings
from ..constants import ErrorKind, Provider
from ..publishing.models import PlatformConnection, PostContent
from ..publishing.uploads import MediaFetcher, SleepFunc, StatusPoller


@dataclass
class PublishResult:
    """Unified result from publishing to any provider.

    Provider-native response shapes never leave the adapter; anything worth
    keeping goes in ``details`` or ``annotations``.
    """

    success: bool
    platform: str
    platform_post_id: Optional[str] = None
    url: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None
    media_skipped: bool = False
    annotations: list[str] = field(default_factory=list)
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        if self.success:
            return f"[{self.platform}] Success: {self.url or self.platform_post_id}"
        kind = self.error_kind.value if self.error_kind else "ERROR"
        return f"[{self.platform}] Failed ({kind}): {self.error}"

    @property
    def status_code(self) -> int:
        """HTTP status callers should answer with."""
        if self.success or self.error_kind is None:
            return 200
        return self.error_kind.http_status

    def to_dict(self) -> dict[str, Any]:
        """Caller-facing shape: ``{success, platformPostId?, url?, error?}``."""
        payload: dict[str, Any] = {"success": self.success}
        if self.platform_post_id:
            payload["platformPostId"] = self.platform_post_id
        if self.url:
            payload["url"] = self.url
        if not self.success:
            payload["error"] = {
                "kind": (self.error_kind or ErrorKind.INTERNAL_ERROR).value,
                "message": self.error or "Unknown error",
            }
        if self.media_skipped:
            payload["mediaSkipped"] = True
        if self.annotations:
            payload["annotations"] = list(self.annotations)
        return payload


class ProviderAdapter(ABC):
    """Abstract base class for provider adapters.

    Each provider implements ``publish`` with its own multi-step protocol.
    Adapters hold only immutable configuration and the (optional) shared
    HTTP client, so one instance can serve concurrent dispatches.
    """

    def __init__(
        self,
        settings: Optional[PublisherSettings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        """Initialize the adapter.

        Args:
            settings: Publisher settings (defaults from environment).
            http_client: Shared client; a short-lived one is opened per
                request when omitted.
            sleep: Sleep used while polling processing status.
        """
        self.settings = settings or PublisherSettings()
        self.http_client = http_client
        self._sleep = sleep

    @property
    @abstractmethod
    def platform_name(self) -> Provider:
        """Provider served by this adapter."""
        ...

    @abstractmethod
    async def publish(self, connection: PlatformConnection, content: PostContent) -> PublishResult:
        """Publish validated content.

        Failures are raised, not returned: the orchestrator classifies them.
        """
        ...

    def _make_poller(self) -> StatusPoller:
        return StatusPoller(
            max_attempts=self.settings.poll_max_attempts,
            default_interval=self.settings.poll_default_interval_seconds,
            max_interval=self.settings.poll_max_interval_seconds,
            sleep=self._sleep,
        )

    def _make_fetcher(self) -> MediaFetcher:
        return MediaFetcher(self.http_client, timeout=self.settings.upload_timeout_seconds)

    def _make_result(self, success: bool, **kwargs: Any) -> PublishResult:
        """Helper to create a PublishResult for this provider."""
        return PublishResult(success=success, platform=self.platform_name.value, **kwargs)
