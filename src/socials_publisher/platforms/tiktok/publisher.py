"""TikTok platform publisher.

Creator info is queried before anything is posted: the requested privacy
level must be one the creator may use, and videos must fit the creator's
maximum duration. Toggles the creator has disabled stay disabled.

Media is pulled by TikTok from the assets' public URLs, so no bytes are
transferred here.
"""

from __future__ import annotations

import logging
from typing import Any

from ...constants import MediaKind, Provider, TikTokPostType
from ...publishing.exceptions import ContentValidationError
from ...publishing.models import CreatorPostSettings, PlatformConnection, PostContent
from ...publishing.validator import resolve_post_type
from ..base import ProviderAdapter, PublishResult
from .client import CreatorInfo, TikTokClient

_logger = logging.getLogger("tiktok_api")


class TikTokPublisher(ProviderAdapter):
    """TikTok publisher implementing the adapter interface."""

    @property
    def platform_name(self) -> Provider:
        return Provider.TIKTOK

    def _make_client(self, connection: PlatformConnection) -> TikTokClient:
        return TikTokClient(
            connection.access_token,
            config=self.settings.tiktok,
            http_client=self.http_client,
            timeout=self.settings.request_timeout_seconds,
        )

    async def creator_info(self, connection: PlatformConnection) -> CreatorInfo:
        """Query what the connected creator is allowed to post."""
        return await self._make_client(connection).creator_info()

    @staticmethod
    def check_creator_limits(
        info: CreatorInfo,
        settings: CreatorPostSettings,
        content: PostContent,
        post_type: TikTokPostType,
    ) -> list[str]:
        """Violations of the creator's capabilities."""
        violations: list[str] = []
        if settings.privacy_level not in info.privacy_level_options:
            violations.append(
                f"Privacy level {settings.privacy_level} not supported. "
                f"Available options: {', '.join(info.privacy_level_options)}"
            )
        if post_type == TikTokPostType.VIDEO:
            for video in content.media_of_kind(MediaKind.VIDEO):
                if video.duration is not None and video.duration > info.max_video_post_duration_sec:
                    violations.append(
                        f"Video duration {video.duration:g}s exceeds creator maximum "
                        f"of {info.max_video_post_duration_sec}s"
                    )
        return violations

    async def publish(self, connection: PlatformConnection, content: PostContent) -> PublishResult:
        client = self._make_client(connection)
        settings = content.extensions.video_settings or CreatorPostSettings()
        post_type = resolve_post_type(content)

        info = await client.creator_info()
        violations = self.check_creator_limits(info, settings, content, post_type)
        if violations:
            raise ContentValidationError(violations)

        caption = content.formatted_text()
        post_info: dict[str, Any] = {
            "privacy_level": settings.privacy_level,
            "disable_comment": settings.disable_comment or info.comment_disabled,
        }

        if post_type == TikTokPostType.VIDEO:
            video = content.media_of_kind(MediaKind.VIDEO)[0]
            post_info.update(
                title=caption,
                disable_duet=settings.disable_duet or info.duet_disabled,
                disable_stitch=settings.disable_stitch or info.stitch_disabled,
            )
            publish_id = await client.init_video(post_info, video.url)
        else:
            post_info.update(
                title=caption,
                description=caption,
                auto_add_music=settings.auto_add_music,
            )
            image_urls = [m.url for m in content.media_of_kind(MediaKind.IMAGE)]
            publish_id = await client.init_photo(post_info, image_urls)

        profile = self.settings.tiktok.profile_url
        url = f"{profile}/@{info.username}" if info.username else profile
        _logger.info(f"TikTok {post_type.value} post initiated: {publish_id}")

        return self._make_result(
            success=True,
            platform_post_id=publish_id,
            url=url,
            details={"post_type": post_type.value, "status": "PROCESSING"},
        )
