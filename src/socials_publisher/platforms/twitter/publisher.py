"""X (Twitter) publisher.

With a signed (token + secret) connection, media is uploaded and attached
by id. With a bearer-only connection the media upload endpoint is not
reachable, so the tweet is still posted, text-only, with a notice appended
and ``media_skipped`` set on the result.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from ...constants import TWITTER_MEDIA_OMITTED_NOTICE, TWITTER_TEXT_MAX_LENGTH, Provider
from ...publishing.exceptions import ProviderAPIError
from ...publishing.models import PlatformConnection, PostContent
from ...publishing.uploads import MediaUploadPipeline
from ..base import ProviderAdapter, PublishResult
from .client import TwitterClient

_logger = logging.getLogger("twitter_api")


def append_media_notice(
    text: str,
    notice: str = TWITTER_MEDIA_OMITTED_NOTICE,
    limit: int = TWITTER_TEXT_MAX_LENGTH,
) -> str:
    """Append ``notice`` to ``text``, cutting the text so the total fits."""
    separator = "\n\n" if text else ""
    combined = f"{text}{separator}{notice}"
    if len(combined) <= limit:
        return combined
    room = max(limit - len(separator) - len(notice) - 3, 0)
    return f"{text[:room].rstrip()}...{separator}{notice}"


class TwitterPublisher(ProviderAdapter):
    """X publisher implementing the adapter interface."""

    @property
    def platform_name(self) -> Provider:
        return Provider.TWITTER

    def _make_client(self, connection: PlatformConnection) -> TwitterClient:
        return TwitterClient(
            connection,
            config=self.settings.twitter,
            http_client=self.http_client,
            timeout=self.settings.request_timeout_seconds,
            upload_timeout=self.settings.upload_timeout_seconds,
        )

    def _make_pipeline(self, client: TwitterClient) -> MediaUploadPipeline:
        return MediaUploadPipeline(
            client,
            poller=self._make_poller(),
            fetcher=self._make_fetcher(),
            chunk_size=self.settings.chunk_size_bytes,
            chunk_threshold=self.settings.chunk_threshold_bytes,
            gif_chunk_threshold=self.settings.chunk_threshold_gif_bytes,
        )

    async def publish(self, connection: PlatformConnection, content: PostContent) -> PublishResult:
        client = self._make_client(connection)
        text = content.formatted_text()
        media_ids: list[str] = []
        annotations: list[str] = []
        media_skipped = False

        if content.media:
            if client.can_upload_media:
                pipeline = self._make_pipeline(client)
                for asset in content.media:
                    media_ids.append(await pipeline.upload(asset))
            else:
                media_skipped = True
                text = append_media_notice(text)
                annotations.append(
                    f"Media omitted: {len(content.media)} item(s) were not uploaded because "
                    "the X connection lacks media upload access (bearer token only)"
                )
                _logger.warning(f"Skipping {len(content.media)} media item(s): bearer-only connection")

        tweet_id = await client.create_tweet(text, media_ids)
        username = connection.account_name or await self._lookup_username(client)
        if username:
            url = f"https://x.com/{username}/status/{tweet_id}"
        else:
            url = f"https://x.com/i/web/status/{tweet_id}"

        _logger.info(f"Tweet posted: {tweet_id} ({len(media_ids)} media)")
        return self._make_result(
            success=True,
            platform_post_id=tweet_id,
            url=url,
            media_skipped=media_skipped,
            annotations=annotations,
            details={"media_ids": media_ids, "auth_scheme": connection.scheme.value},
        )

    async def _lookup_username(self, client: TwitterClient) -> Optional[str]:
        # The tweet already exists; a failed lookup only changes the URL.
        try:
            return await client.get_username()
        except (ProviderAPIError, httpx.HTTPError) as e:
            _logger.warning(f"Username lookup failed: {e}")
            return None
