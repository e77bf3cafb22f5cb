"""Instagram Graph API client for container-based publishing."""

from __future__ import annotations

from typing import Any, Optional

from ...constants import INSTAGRAM_CAPTION_MAX_LENGTH, MediaKind
from ...publishing.models import MediaAsset
from ..graph import GraphAPIClient


class InstagramClient(GraphAPIClient):
    """Instagram Graph API client.

    Implements the container-based publishing workflow:
    1. Create a media container per asset (requires a public URL)
    2. Create a carousel container referencing the children (multi-asset)
    3. Publish the container

    Container calls need the business account id, discovered once per
    client through ``find_business_account``.

    API Reference:
    https://developers.facebook.com/docs/instagram-platform/instagram-graph-api/content-publishing
    """

    provider = "instagram"
    logger_name = "instagram_api"

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.business_account_id: Optional[str] = None

    async def find_business_account(self) -> Optional[str]:
        """Scan the user's pages; the first exposing a business account wins."""
        result = await self._make_request(
            "GET", "me/accounts", params={"fields": "id,name,instagram_business_account"}
        )
        for page in result.get("data") or []:
            account = page.get("instagram_business_account") or {}
            if account.get("id"):
                self.business_account_id = str(account["id"])
                self._logger.info(
                    f"Business account {self.business_account_id} via page {page.get('id')}"
                )
                return self.business_account_id
        return None

    def _account(self) -> str:
        if not self.business_account_id:
            raise RuntimeError("find_business_account() must succeed before publishing")
        return self.business_account_id

    async def create_media_container(
        self,
        asset: MediaAsset,
        caption: Optional[str],
        is_carousel_item: bool,
    ) -> str:
        """Create a media container for a single image or video.

        Returns:
            Container ID (creation_id)
        """
        params: dict[str, Any] = {}
        if asset.kind == MediaKind.VIDEO:
            params["media_type"] = "VIDEO" if is_carousel_item else "REELS"
            params["video_url"] = asset.url
        else:
            params["image_url"] = asset.url
            if asset.alt_text:
                params["alt_text"] = asset.alt_text
        if is_carousel_item:
            params["is_carousel_item"] = "true"
        elif caption:
            params["caption"] = caption[:INSTAGRAM_CAPTION_MAX_LENGTH]

        result = await self._make_request("POST", f"{self._account()}/media", params=params)
        return str(self._require(result, "id", "Media container"))

    async def create_carousel_container(self, children_ids: list[str], caption: str) -> str:
        """Create a carousel container from child containers."""
        params = {
            "media_type": "CAROUSEL",
            "children": ",".join(children_ids),
            "caption": caption[:INSTAGRAM_CAPTION_MAX_LENGTH],
        }
        result = await self._make_request("POST", f"{self._account()}/media", params=params)
        return str(self._require(result, "id", "Carousel container"))

    async def container_status(self, container_id: str) -> dict[str, Any]:
        """Dict with status_code and status fields."""
        return await self._make_request(
            "GET", container_id, params={"fields": "status_code,status"}
        )

    async def publish_container(self, container_id: str) -> str:
        """Publish a ready container and return the media id."""
        result = await self._make_request(
            "POST", f"{self._account()}/media_publish", params={"creation_id": container_id}
        )
        return str(self._require(result, "id", "Publish"))

    async def get_permalink(self, media_id: str) -> Optional[str]:
        result = await self._make_request("GET", media_id, params={"fields": "id,permalink"})
        return result.get("permalink")
