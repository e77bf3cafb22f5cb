"""Tests for the Facebook page adapter."""

import httpx
import pytest

from socials_publisher.constants import ErrorKind, MediaKind, Provider
from socials_publisher.platforms.facebook import FacebookClient, FacebookPublisher
from socials_publisher.publishing.connections import resolve
from socials_publisher.publishing.exceptions import ConnectionResolutionError, ProviderAPIError
from socials_publisher.publishing.models import PostContent, PostExtensions

from conftest import FIXED_NOW, form_body, make_asset, make_record


def _connection(**overrides):
    return resolve(Provider.FACEBOOK, make_record(Provider.FACEBOOK, **overrides), now=FIXED_NOW)


@pytest.fixture
def publisher(settings, http_client) -> FacebookPublisher:
    return FacebookPublisher(settings, http_client=http_client)


class TestPagePicking:
    def test_prefers_create_content(self):
        pages = [
            {"id": "1", "tasks": ["ANALYZE"]},
            {"id": "2", "tasks": ["ANALYZE", "CREATE_CONTENT"]},
        ]
        assert FacebookClient.pick_page(pages)["id"] == "2"

    def test_falls_back_to_first(self):
        assert FacebookClient.pick_page([{"id": "1"}, {"id": "2"}])["id"] == "1"

    def test_no_pages(self):
        assert FacebookClient.pick_page([]) is None


class TestFacebookPublisher:
    @pytest.mark.asyncio
    async def test_page_discovered_from_accounts(self, publisher, fake_api):
        fake_api.add("GET", "/me/accounts", {"data": [{"id": "p9", "tasks": ["CREATE_CONTENT"]}]})
        fake_api.add("GET", "/p9", {"access_token": "page-token"})
        fake_api.add("POST", "/p9/feed", {"id": "p9_1"})

        result = await publisher.publish(_connection(), PostContent(text="Hi"))

        assert result.platform_post_id == "p9_1"
        assert result.details["page_id"] == "p9"

    @pytest.mark.asyncio
    async def test_extension_page_id_wins(self, publisher, fake_api):
        fake_api.add("GET", "/p2", {"access_token": "page-token"})
        fake_api.add("POST", "/p2/feed", {"id": "p2_1"})
        content = PostContent(text="Hi", extensions=PostExtensions(page_id="p2"))

        result = await publisher.publish(_connection(account_id="p1"), content)

        assert result.platform_post_id == "p2_1"
        assert not fake_api.calls_to("/me/accounts")

    @pytest.mark.asyncio
    async def test_no_pages_is_not_connected(self, publisher, fake_api):
        fake_api.add("GET", "/me/accounts", {"data": []})

        with pytest.raises(ConnectionResolutionError) as exc_info:
            await publisher.publish(_connection(), PostContent(text="Hi"))
        assert exc_info.value.kind == ErrorKind.NOT_CONNECTED

    @pytest.mark.asyncio
    async def test_single_photo(self, publisher, fake_api):
        fake_api.add("GET", "/p1", {"access_token": "page-token"})
        fake_api.add("POST", "/p1/photos", {"id": "photo-1", "post_id": "p1_55"})
        content = PostContent(text="Look", hashtags=["sun"], media=[make_asset("i1")])

        result = await publisher.publish(_connection(account_id="p1"), content)

        assert result.platform_post_id == "p1_55"
        body = form_body(fake_api.calls_to("/p1/photos")[0])
        assert body == {"url": "https://cdn.example.com/i1", "caption": "Look\n\n#sun"}
        assert not result.annotations

    @pytest.mark.asyncio
    async def test_video_uses_file_url(self, publisher, fake_api):
        fake_api.add("GET", "/p1", {"access_token": "page-token"})
        fake_api.add("POST", "/p1/videos", {"id": "vid-1"})
        content = PostContent(text="Clip", media=[make_asset("v1", MediaKind.VIDEO)])

        result = await publisher.publish(_connection(account_id="p1"), content)

        assert result.url == "https://facebook.com/vid-1"
        body = form_body(fake_api.calls_to("/p1/videos")[0])
        assert body["file_url"] == "https://cdn.example.com/v1"
        assert body["description"] == "Clip"

    @pytest.mark.asyncio
    async def test_multiple_media_posts_first_with_note(self, publisher, fake_api):
        fake_api.add("GET", "/p1", {"access_token": "page-token"})
        fake_api.add("POST", "/p1/photos", {"id": "photo-1"})
        content = PostContent(text="Album", media=[make_asset("i1"), make_asset("i2"), make_asset("i3")])

        result = await publisher.publish(_connection(account_id="p1"), content)

        assert result.platform_post_id == "photo-1"
        assert result.annotations == ["Posted first of 3 media items"]
        assert len(fake_api.calls_to("/p1/photos")) == 1

    @pytest.mark.asyncio
    async def test_graph_error_keeps_raw_fields(self, publisher, fake_api):
        fake_api.add(
            "GET",
            "/p1",
            httpx.Response(
                400,
                json={
                    "error": {
                        "message": "Error validating access token: Session has expired",
                        "code": 190,
                        "error_subcode": 463,
                        "fbtrace_id": "AbC123",
                    }
                },
            ),
        )

        with pytest.raises(ProviderAPIError) as exc_info:
            await publisher.publish(_connection(account_id="p1"), PostContent(text="Hi"))
        error = exc_info.value
        assert error.error_code == 190
        assert error.error_subcode == 463
        assert error.log_id == "AbC123"
        assert error.details["error_name"] == "SESSION_EXPIRED"
