"""Facebook page publisher.

Posts to a page using a page-scoped token exchanged from the user token.
Zero media goes to the feed; one asset goes to the photos or videos edge.
Several assets post only the first one and say so in the result's
annotations (the Graph API has no atomic multi-media page post here).
"""

from __future__ import annotations

import logging

from ...constants import ErrorKind, MediaKind, Provider
from ...publishing.exceptions import ConnectionResolutionError
from ...publishing.models import PlatformConnection, PostContent
from ..base import ProviderAdapter, PublishResult
from .client import FacebookClient

_logger = logging.getLogger("facebook_api")


class FacebookPublisher(ProviderAdapter):
    """Facebook publisher implementing the adapter interface."""

    @property
    def platform_name(self) -> Provider:
        return Provider.FACEBOOK

    def _make_client(self, connection: PlatformConnection) -> FacebookClient:
        return FacebookClient(
            connection.access_token,
            config=self.settings.facebook,
            http_client=self.http_client,
            timeout=self.settings.request_timeout_seconds,
        )

    async def _resolve_page_id(
        self, client: FacebookClient, connection: PlatformConnection, content: PostContent
    ) -> str:
        if content.extensions.page_id:
            return content.extensions.page_id
        if connection.account_id:
            return connection.account_id
        page = client.pick_page(await client.get_pages())
        if page is None:
            raise ConnectionResolutionError(
                ErrorKind.NOT_CONNECTED, "No Facebook page is available for this connection"
            )
        return str(page["id"])

    async def publish(self, connection: PlatformConnection, content: PostContent) -> PublishResult:
        client = self._make_client(connection)
        page_id = await self._resolve_page_id(client, connection, content)
        page_token = await client.get_page_token(page_id)
        message = content.formatted_text()
        annotations: list[str] = []

        if not content.media:
            post_id = await client.post_feed(page_id, page_token, message)
        else:
            if len(content.media) > 1:
                annotations.append(f"Posted first of {len(content.media)} media items")
                _logger.warning(
                    f"Multiple media for page {page_id}: posting first of {len(content.media)}"
                )
            asset = content.media[0]
            if asset.kind == MediaKind.VIDEO:
                post_id = await client.post_video(page_id, page_token, asset.url, message)
            else:
                post_id = await client.post_photo(page_id, page_token, asset.url, message)

        _logger.info(f"Published to page {page_id}: {post_id}")
        return self._make_result(
            success=True,
            platform_post_id=post_id,
            url=f"https://facebook.com/{post_id}",
            annotations=annotations,
            details={"page_id": page_id, "media_count": len(content.media)},
        )
