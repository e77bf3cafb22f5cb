"""Instagram platform publisher.

Instagram refuses text-only posts, so every publish goes through media
containers: one container for a single asset, or child containers plus a
carousel for several.
"""

from __future__ import annotations

import logging

import httpx

from ...constants import ErrorKind, Provider
from ...publishing.exceptions import (
    ConnectionResolutionError,
    ContentValidationError,
    ProviderAPIError,
)
from ...publishing.models import PlatformConnection, PostContent
from ...publishing.uploads import ContainerPipeline
from ..base import ProviderAdapter, PublishResult
from .client import InstagramClient

_logger = logging.getLogger("instagram_api")


class InstagramPublisher(ProviderAdapter):
    """Instagram publisher implementing the adapter interface."""

    @property
    def platform_name(self) -> Provider:
        return Provider.INSTAGRAM

    def _make_client(self, connection: PlatformConnection) -> InstagramClient:
        return InstagramClient(
            connection.access_token,
            config=self.settings.instagram,
            http_client=self.http_client,
            timeout=self.settings.request_timeout_seconds,
        )

    async def publish(self, connection: PlatformConnection, content: PostContent) -> PublishResult:
        if not content.media:
            raise ContentValidationError(["instagram requires at least one media asset"])

        client = self._make_client(connection)
        account_id = await client.find_business_account()
        if account_id is None:
            raise ConnectionResolutionError(
                ErrorKind.NOT_CONNECTED,
                "No Instagram Business Account is linked to the connected pages",
            )

        pipeline = ContainerPipeline(client, self._make_poller())
        media_id = await pipeline.publish(content.media, content.formatted_text())
        _logger.info(f"Published media {media_id} to account {account_id}")

        # The post is live at this point; a failed permalink lookup only
        # changes the URL we report.
        permalink = None
        try:
            permalink = await client.get_permalink(media_id)
        except (ProviderAPIError, httpx.HTTPError) as e:
            _logger.warning(f"Permalink lookup failed for {media_id}: {e}")

        return self._make_result(
            success=True,
            platform_post_id=media_id,
            url=permalink or f"https://instagram.com/p/{media_id}",
            details={
                "business_account_id": account_id,
                "media_type": "CAROUSEL" if len(content.media) > 1 else content.media[0].kind.value,
            },
        )
