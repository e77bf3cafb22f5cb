"""Facebook Graph API client for page posting."""

from __future__ import annotations

from typing import Any, Optional

from ..graph import GraphAPIClient


class FacebookClient(GraphAPIClient):
    """Page feed, photo and video publishing.

    API Reference:
    https://developers.facebook.com/docs/pages-api/posts
    """

    provider = "facebook"
    logger_name = "facebook_api"

    async def get_pages(self) -> list[dict[str, Any]]:
        """Pages the user token can manage."""
        result = await self._make_request(
            "GET", "me/accounts", params={"fields": "id,name,access_token,tasks"}
        )
        return list(result.get("data") or [])

    async def get_page_token(self, page_id: str) -> str:
        """Exchange the user token for a page-scoped token."""
        result = await self._make_request("GET", page_id, params={"fields": "access_token"})
        return self._require(result, "access_token", "Page token")

    async def post_feed(self, page_id: str, page_token: str, message: str) -> str:
        result = await self._make_request(
            "POST", f"{page_id}/feed", data={"message": message}, access_token=page_token
        )
        return str(self._require(result, "id", "Feed post"))

    async def post_photo(
        self, page_id: str, page_token: str, url: str, caption: str
    ) -> str:
        data = {"url": url}
        if caption:
            data["caption"] = caption
        result = await self._make_request(
            "POST", f"{page_id}/photos", data=data, access_token=page_token
        )
        # photos return both the photo id and the feed story id
        return str(result.get("post_id") or self._require(result, "id", "Photo post"))

    async def post_video(
        self, page_id: str, page_token: str, url: str, description: str
    ) -> str:
        data = {"file_url": url}
        if description:
            data["description"] = description
        result = await self._make_request(
            "POST", f"{page_id}/videos", data=data, access_token=page_token
        )
        return str(self._require(result, "id", "Video post"))

    @staticmethod
    def pick_page(pages: list[dict[str, Any]]) -> Optional[dict[str, Any]]:
        """First page with CREATE_CONTENT, else the first page."""
        for page in pages:
            if "CREATE_CONTENT" in (page.get("tasks") or []):
                return page
        return pages[0] if pages else None
