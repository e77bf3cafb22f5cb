"""Tests for request and result models."""

from datetime import datetime, timedelta, timezone

from socials_publisher.constants import AuthScheme, ErrorKind, MediaKind, Provider
from socials_publisher.platforms.base import PublishResult
from socials_publisher.publishing.models import PlatformConnection, PostContent

from conftest import make_asset


class TestPostContent:
    def test_formatted_text(self):
        content = PostContent(text="Hello", hashtags=["python", "#async"], mentions=["guido"])
        assert content.formatted_text() == "Hello\n\n#python #async\n\n@guido"

    def test_formatted_text_without_text(self):
        assert PostContent(hashtags=["a"]).formatted_text() == "#a"

    def test_media_of_kind(self):
        content = PostContent(media=[make_asset("i1"), make_asset("v1", MediaKind.VIDEO)])
        assert [m.id for m in content.media_of_kind(MediaKind.VIDEO)] == ["v1"]


class TestMediaAsset:
    def test_aspect_ratio(self):
        assert make_asset(width=1080, height=1350).aspect_ratio == 0.8
        assert make_asset().aspect_ratio is None

    def test_is_gif(self):
        assert make_asset(mime_type="IMAGE/GIF").is_gif


class TestPlatformConnection:
    def test_usable_until_expiry(self):
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        connection = PlatformConnection(
            provider=Provider.FACEBOOK,
            access_token="t",
            scheme=AuthScheme.PRIMARY,
            expires_at=now + timedelta(seconds=1),
        )
        assert connection.is_usable(now)
        assert not connection.is_usable(now + timedelta(seconds=1))


class TestPublishResult:
    def test_success_dict(self):
        result = PublishResult(success=True, platform="facebook", platform_post_id="1",
                               url="https://facebook.com/1")
        assert result.to_dict() == {"success": True, "platformPostId": "1", "url": "https://facebook.com/1"}
        assert result.status_code == 200

    def test_failure_dict(self):
        result = PublishResult(success=False, platform="tiktok", error_kind=ErrorKind.PERMISSION_ERROR,
                               error="scope missing")
        assert result.to_dict() == {
            "success": False,
            "error": {"kind": "PERMISSION_ERROR", "message": "scope missing"},
        }
        assert result.status_code == 403
        assert str(result) == "[tiktok] Failed (PERMISSION_ERROR): scope missing"
