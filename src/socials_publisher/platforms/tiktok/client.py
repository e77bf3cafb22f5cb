"""TikTok Content Posting API client.

API Reference:
- https://developers.tiktok.com/doc/content-posting-api-reference-query-creator-info
- https://developers.tiktok.com/doc/content-posting-api-reference-direct-post
- https://developers.tiktok.com/doc/content-posting-api-reference-photo-post
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from ...config import TikTokConfig
from ...constants import REQUEST_TIMEOUT_SECONDS, TIKTOK_DEFAULT_CREATOR_MAX_DURATION
from ...publishing.exceptions import ProviderAPIError
from ..client import BaseAPIClient


@dataclass(frozen=True)
class CreatorInfo:
    """What the creator account is allowed to post."""

    username: str = ""
    nickname: str = ""
    privacy_level_options: tuple[str, ...] = ("PUBLIC_TO_EVERYONE",)
    comment_disabled: bool = False
    duet_disabled: bool = False
    stitch_disabled: bool = False
    max_video_post_duration_sec: int = TIKTOK_DEFAULT_CREATOR_MAX_DURATION
    raw: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> "CreatorInfo":
        return cls(
            username=data.get("creator_username") or "",
            nickname=data.get("creator_nickname") or "",
            privacy_level_options=tuple(data.get("privacy_level_options") or ("PUBLIC_TO_EVERYONE",)),
            comment_disabled=bool(data.get("comment_disabled")),
            duet_disabled=bool(data.get("duet_disabled")),
            stitch_disabled=bool(data.get("stitch_disabled")),
            max_video_post_duration_sec=int(
                data.get("max_video_post_duration_sec") or TIKTOK_DEFAULT_CREATOR_MAX_DURATION
            ),
            raw=dict(data),
        )


class TikTokClient(BaseAPIClient):
    """TikTok API client bound to one access token."""

    logger_name = "tiktok_api"

    def __init__(
        self,
        access_token: str,
        config: Optional[TikTokConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ):
        super().__init__(http_client, timeout)
        self.access_token = access_token
        self.config = config or TikTokConfig()

    async def _make_request(self, endpoint: str, json_data: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """POST to the TikTok API.

        TikTok wraps every response as ``{"data": ..., "error": {"code", "message",
        "log_id"}}`` where a code of ``"ok"`` means success.

        Raises:
            ProviderAPIError: If the API returns an error.
        """
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json; charset=UTF-8",
        }
        response = await self._send(
            "POST", f"{self.config.base_url}/{endpoint}", json=json_data or {}, headers=headers,
            log_label=endpoint,
        )
        result = self._json(response)

        error = result.get("error") or {}
        code = error.get("code")
        if not response.is_success or (code and code != "ok"):
            raise ProviderAPIError(
                message=error.get("message") or f"HTTP {response.status_code}",
                provider="tiktok",
                error_code=code,
                http_status=response.status_code,
                log_id=error.get("log_id"),
            )
        return result.get("data") or {}

    async def creator_info(self) -> CreatorInfo:
        data = await self._make_request("v2/post/publish/creator_info/query/")
        return CreatorInfo.from_response(data)

    async def init_video(self, post_info: dict[str, Any], video_url: str) -> str:
        """Direct-post a video pulled from a public URL. Returns the publish id."""
        data = await self._make_request(
            "v2/post/publish/video/init/",
            {
                "post_info": post_info,
                "source_info": {"source": "PULL_FROM_URL", "video_url": video_url},
            },
        )
        return str(self._require(data, "publish_id", "Video init"))

    async def init_photo(self, post_info: dict[str, Any], image_urls: list[str]) -> str:
        """Direct-post a photo carousel pulled from public URLs."""
        data = await self._make_request(
            "v2/post/publish/content/init/",
            {
                "post_info": post_info,
                "source_info": {
                    "source": "PULL_FROM_URL",
                    "photo_cover_index": 0,
                    "photo_images": image_urls,
                },
                "post_mode": "DIRECT_POST",
                "media_type": "PHOTO",
            },
        )
        return str(self._require(data, "publish_id", "Photo init"))
