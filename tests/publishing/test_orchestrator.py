"""Tests for the dispatch orchestrator.

The end-to-end scenarios run real adapters against a fake HTTP transport;
the remaining tests use stub adapters to pin down the dispatch sequence.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from socials_publisher.constants import AuthScheme, ErrorKind, MediaKind, Provider
from socials_publisher.platforms.base import ProviderAdapter, PublishResult
from socials_publisher.publishing.exceptions import ProviderAPIError
from socials_publisher.publishing.interfaces import RateLimitDecision
from socials_publisher.publishing.models import (
    BrandContent,
    ConnectionRecord,
    PlatformConnection,
    PostContent,
    PostExtensions,
)
from socials_publisher.publishing.orchestrator import PublishingOrchestrator

from conftest import FIXED_NOW, form_body, json_body, make_asset, make_record


# =============================================================================
# Stubs
# =============================================================================

class StubAdapter(ProviderAdapter):
    """Adapter returning a canned result or raising a canned error."""

    def __init__(self, provider: Provider, error: Optional[Exception] = None):
        super().__init__()
        self._provider = provider
        self.error = error
        self.connections: list[PlatformConnection] = []

    @property
    def platform_name(self) -> Provider:
        return self._provider

    async def publish(self, connection, content) -> PublishResult:
        self.connections.append(connection)
        if self.error is not None:
            raise self.error
        await asyncio.sleep(0)
        return self._make_result(
            success=True,
            platform_post_id=f"{self._provider.value}-1",
            url=f"https://example.com/{self._provider.value}-1",
        )


class RecordingHealth:
    def __init__(self, fail: bool = False):
        self.successes: list[tuple] = []
        self.failures: list[tuple] = []
        self.fail = fail

    def record_success(self, provider, latency_ms):
        if self.fail:
            raise RuntimeError("health backend down")
        self.successes.append((provider, latency_ms))

    def record_failure(self, provider, message, code):
        if self.fail:
            raise RuntimeError("health backend down")
        self.failures.append((provider, message, code))


class StaticLimiter:
    def __init__(self, decision: Optional[RateLimitDecision] = None, error: Optional[Exception] = None):
        self.decision = decision
        self.error = error
        self.checks: list[tuple] = []

    async def check(self, provider, user_id):
        self.checks.append((provider, user_id))
        if self.error is not None:
            raise self.error
        return self.decision


class MemoryCredentialStore:
    def __init__(self, records: dict):
        self.records = records
        self.refreshed: list[ConnectionRecord] = []

    async def get_connection(self, user_id, provider):
        return self.records.get((user_id, provider))

    async def refresh_if_needed(self, record):
        self.refreshed.append(record)
        return record.model_copy(update={"expires_at": FIXED_NOW + timedelta(days=1)})


def _orchestrator(adapters=None, **kwargs) -> PublishingOrchestrator:
    if adapters is None:
        adapters = {p: StubAdapter(p) for p in Provider}
    return PublishingOrchestrator(adapters=adapters, clock=lambda: FIXED_NOW, **kwargs)


TEXT_POST = PostContent(text="Hello world")


# =============================================================================
# End-to-end scenarios
# =============================================================================

class TestScenarios:
    """Full dispatches through the real adapters."""

    @pytest.fixture
    def orchestrator(self, settings, http_client, fake_sleep) -> PublishingOrchestrator:
        return PublishingOrchestrator(
            settings=settings,
            http_client=http_client,
            sleep=fake_sleep,
            clock=lambda: FIXED_NOW,
            health=RecordingHealth(),
        )

    @pytest.mark.asyncio
    async def test_feed_post_without_media(self, orchestrator, fake_api):
        fake_api.add("GET", "/page_1", {"id": "page_1", "access_token": "page-token"})
        fake_api.add("POST", "/page_1/feed", {"id": "page_1_999"})
        record = make_record(Provider.FACEBOOK, account_id="page_1")

        result = await orchestrator.dispatch(Provider.FACEBOOK, record, TEXT_POST)

        assert result.success
        assert result.platform_post_id == "page_1_999"
        assert result.url == "https://facebook.com/page_1_999"
        feed_calls = fake_api.calls_to("/page_1/feed", "POST")
        assert len(feed_calls) == 1
        assert form_body(feed_calls[0])["message"] == "Hello world"
        assert feed_calls[0].url.params["access_token"] == "page-token"

    @pytest.mark.asyncio
    async def test_bearer_only_microblog_skips_media(self, orchestrator, fake_api):
        fake_api.add("POST", "/2/tweets", {"data": {"id": "1234", "text": "..."}})
        record = make_record(Provider.TWITTER, account_name="acme")
        content = PostContent(text="Look at this", media=[make_asset("i1")])

        result = await orchestrator.dispatch(Provider.TWITTER, record, content)

        assert result.success
        assert result.media_skipped
        assert result.to_dict()["mediaSkipped"] is True
        assert result.url == "https://x.com/acme/status/1234"
        tweet = json_body(fake_api.calls_to("/2/tweets")[0])
        assert "Media omitted" in tweet["text"]
        assert "media" not in tweet
        assert not [r for r in fake_api.requests if r.url.host == "upload.twitter.com"]

    @pytest.mark.asyncio
    async def test_video_privacy_not_allowed(self, orchestrator, fake_api):
        fake_api.add(
            "POST",
            "creator_info/query/",
            {
                "data": {"creator_username": "dancer", "privacy_level_options": ["SELF_ONLY"]},
                "error": {"code": "ok", "message": ""},
            },
        )
        content = PostContent(text="Dance", media=[make_asset("v1", MediaKind.VIDEO, duration=20.0)])

        result = await orchestrator.dispatch(Provider.TIKTOK, make_record(Provider.TIKTOK), content)

        assert not result.success
        assert result.error_kind == ErrorKind.CONTENT_ERROR
        assert result.status_code == 400
        assert "PUBLIC_TO_EVERYONE" in result.error
        assert not fake_api.calls_to("video/init/")
        assert not fake_api.calls_to("content/init/")

    @pytest.mark.asyncio
    async def test_marketplace_lookup_failure_uses_placeholder(self, orchestrator, fake_api):
        fake_api.add(
            "GET",
            "/items/B000000001",
            {"asin": "B000000001", "summaries": [{"itemName": "Widget", "brand": "Acme"}]},
        )
        fake_api.add(
            "GET",
            "/items/B000000002",
            httpx.Response(500, json={"errors": [{"code": "InternalFailure", "message": "boom"}]}),
        )
        fake_api.add("POST", "/posts", {"payload": {"postId": "post-1"}})
        fake_api.add("POST", "/posts/post-1/submit", {"payload": {"submissionId": "sub-1"}})
        content = PostContent(
            text="Spring sale",
            extensions=PostExtensions(
                brand=BrandContent(brand_name="Acme"),
                catalog_refs=["B000000001", "B000000002"],
            ),
        )

        result = await orchestrator.dispatch(Provider.AMAZON, make_record(Provider.AMAZON), content)

        assert result.success
        assert result.platform_post_id == "post-1"
        post = json_body(fake_api.calls_to("/posts", "POST")[0])
        assert [p["asin"] for p in post["products"]] == ["B000000001", "B000000002"]
        assert post["products"][0]["title"] == "Widget"
        assert post["products"][1]["title"] == "Product B000000002"
        placeholders = [p for p in result.details["products"] if p["placeholder"]]
        assert len(placeholders) == 1
        assert any("B000000002" in note for note in result.annotations)


# =============================================================================
# Dispatch sequence
# =============================================================================

class TestDispatch:
    @pytest.mark.asyncio
    async def test_success_passes_through(self):
        health = RecordingHealth()
        orchestrator = _orchestrator(health=health)

        result = await orchestrator.dispatch("facebook", make_record(Provider.FACEBOOK), TEXT_POST)

        assert result.success
        assert result.platform_post_id == "facebook-1"
        assert health.successes[0][0] == Provider.FACEBOOK
        assert health.successes[0][1] >= 0
        assert not health.failures

    @pytest.mark.asyncio
    async def test_unknown_provider(self):
        result = await _orchestrator().dispatch("myspace", None, TEXT_POST)
        assert not result.success
        assert result.error_kind == ErrorKind.CONTENT_ERROR
        assert "Unknown platform" in result.error

    @pytest.mark.asyncio
    async def test_not_connected_skips_adapter(self):
        adapter = StubAdapter(Provider.FACEBOOK)
        orchestrator = _orchestrator({Provider.FACEBOOK: adapter})

        result = await orchestrator.dispatch(Provider.FACEBOOK, None, TEXT_POST)

        assert result.error_kind == ErrorKind.NOT_CONNECTED
        assert result.status_code == 400
        assert not adapter.connections

    @pytest.mark.asyncio
    async def test_expired_token(self):
        record = make_record(Provider.FACEBOOK, expires_at=FIXED_NOW - timedelta(seconds=1))
        result = await _orchestrator().dispatch(Provider.FACEBOOK, record, TEXT_POST)
        assert result.error_kind == ErrorKind.TOKEN_EXPIRED
        assert result.status_code == 401

    @pytest.mark.asyncio
    async def test_validation_failure_skips_adapter(self):
        adapter = StubAdapter(Provider.TWITTER)
        orchestrator = _orchestrator({Provider.TWITTER: adapter})

        result = await orchestrator.dispatch(
            Provider.TWITTER, make_record(Provider.TWITTER), PostContent(text="x" * 281)
        )

        assert result.error_kind == ErrorKind.CONTENT_ERROR
        assert result.details["violations"] == ["Text exceeds 280 characters for twitter (got 281)"]
        assert not adapter.connections

    @pytest.mark.asyncio
    async def test_adapter_receives_resolved_connection(self):
        adapter = StubAdapter(Provider.TWITTER)
        orchestrator = _orchestrator({Provider.TWITTER: adapter})
        record = make_record(Provider.TWITTER, token_secret="secret")

        await orchestrator.dispatch(Provider.TWITTER, record, TEXT_POST)

        assert adapter.connections[0].scheme == AuthScheme.SECONDARY

    @pytest.mark.asyncio
    async def test_provider_error_is_classified(self):
        error = ProviderAPIError("Error validating access token", error_code=190, http_status=400)
        health = RecordingHealth()
        orchestrator = _orchestrator({Provider.FACEBOOK: StubAdapter(Provider.FACEBOOK, error)}, health=health)

        result = await orchestrator.dispatch(Provider.FACEBOOK, make_record(Provider.FACEBOOK), TEXT_POST)

        assert result.error_kind == ErrorKind.AUTH_ERROR
        assert result.status_code == 401
        assert result.error == "Error validating access token"
        assert result.details["error_code"] == 190
        assert health.failures == [(Provider.FACEBOOK, "Error validating access token", "AUTH_ERROR")]

    @pytest.mark.asyncio
    async def test_unexpected_error_is_internal(self):
        orchestrator = _orchestrator(
            {Provider.FACEBOOK: StubAdapter(Provider.FACEBOOK, RuntimeError("kaboom"))}
        )
        result = await orchestrator.dispatch(Provider.FACEBOOK, make_record(Provider.FACEBOOK), TEXT_POST)
        assert result.error_kind == ErrorKind.INTERNAL_ERROR
        assert result.error == "kaboom"
        assert result.to_dict()["error"] == {"kind": "INTERNAL_ERROR", "message": "kaboom"}

    @pytest.mark.asyncio
    async def test_health_failure_does_not_change_result(self):
        orchestrator = _orchestrator(health=RecordingHealth(fail=True))
        result = await orchestrator.dispatch(Provider.FACEBOOK, make_record(Provider.FACEBOOK), TEXT_POST)
        assert result.success

    @pytest.mark.asyncio
    async def test_concurrent_dispatches_are_independent(self):
        orchestrator = _orchestrator()
        results = await asyncio.gather(
            orchestrator.dispatch(Provider.FACEBOOK, make_record(Provider.FACEBOOK), TEXT_POST),
            orchestrator.dispatch(Provider.TWITTER, make_record(Provider.TWITTER), TEXT_POST),
            orchestrator.dispatch(Provider.FACEBOOK, None, TEXT_POST),
        )
        assert [r.success for r in results] == [True, True, False]
        assert results[1].platform_post_id == "twitter-1"


class TestRateLimit:
    @pytest.mark.asyncio
    async def test_denied_returns_rate_limit(self):
        adapter = StubAdapter(Provider.FACEBOOK)
        limiter = StaticLimiter(RateLimitDecision(allowed=False, limit=10, remaining=0, retry_after=30.0))
        orchestrator = _orchestrator({Provider.FACEBOOK: adapter}, rate_limiter=limiter)

        result = await orchestrator.dispatch(
            Provider.FACEBOOK, make_record(Provider.FACEBOOK), TEXT_POST, user_id="u1"
        )

        assert result.error_kind == ErrorKind.RATE_LIMIT
        assert result.status_code == 429
        assert result.details["retryAfter"] == 30.0
        assert limiter.checks == [(Provider.FACEBOOK, "u1")]
        assert not adapter.connections

    @pytest.mark.asyncio
    async def test_allowed_proceeds(self):
        limiter = StaticLimiter(RateLimitDecision(allowed=True, limit=10, remaining=9))
        result = await _orchestrator(rate_limiter=limiter).dispatch(
            Provider.FACEBOOK, make_record(Provider.FACEBOOK), TEXT_POST
        )
        assert result.success

    @pytest.mark.asyncio
    async def test_limiter_error_is_advisory(self):
        limiter = StaticLimiter(error=ConnectionError("redis unavailable"))
        result = await _orchestrator(rate_limiter=limiter).dispatch(
            Provider.FACEBOOK, make_record(Provider.FACEBOOK), TEXT_POST
        )
        assert result.success


class TestDispatchForUser:
    @pytest.mark.asyncio
    async def test_uses_refreshed_record(self):
        stale = make_record(Provider.TIKTOK, expires_at=FIXED_NOW - timedelta(minutes=5))
        store = MemoryCredentialStore({("u1", Provider.TIKTOK): stale})
        adapter = StubAdapter(Provider.TIKTOK)
        orchestrator = _orchestrator({Provider.TIKTOK: adapter}, credential_store=store)
        content = PostContent(text="Dance", media=[make_asset("v1", MediaKind.VIDEO)])

        result = await orchestrator.dispatch_for_user("u1", "tiktok", content)

        assert result.success
        assert store.refreshed == [stale]
        assert adapter.connections[0].expires_at == FIXED_NOW + timedelta(days=1)

    @pytest.mark.asyncio
    async def test_missing_record_is_not_connected(self):
        store = MemoryCredentialStore({})
        result = await _orchestrator(credential_store=store).dispatch_for_user(
            "u1", Provider.FACEBOOK, TEXT_POST
        )
        assert result.error_kind == ErrorKind.NOT_CONNECTED
        assert not store.refreshed

    @pytest.mark.asyncio
    async def test_store_called_with_user_and_provider(self):
        record = make_record(Provider.FACEBOOK)
        store = AsyncMock()
        store.get_connection.return_value = record
        store.refresh_if_needed.return_value = record
        health = MagicMock()
        orchestrator = _orchestrator(credential_store=store, health=health)

        result = await orchestrator.dispatch_for_user("u7", "facebook", TEXT_POST)

        assert result.success
        store.get_connection.assert_awaited_once_with("u7", Provider.FACEBOOK)
        store.refresh_if_needed.assert_awaited_once_with(record)
        health.record_success.assert_called_once()
        health.record_failure.assert_not_called()

    @pytest.mark.asyncio
    async def test_requires_store(self):
        with pytest.raises(RuntimeError):
            await _orchestrator().dispatch_for_user("u1", Provider.FACEBOOK, TEXT_POST)


class TestDispatchMany:
    @pytest.mark.asyncio
    async def test_publishes_to_every_target(self):
        adapters = {p: StubAdapter(p) for p in (Provider.FACEBOOK, Provider.TWITTER)}
        records = {p: make_record(p) for p in adapters}

        results = await _orchestrator(adapters).dispatch_many(
            ["twitter", "facebook"], records, TEXT_POST
        )

        assert list(results) == ["twitter", "facebook"]
        assert all(r.success for r in results.values())
        assert results["twitter"].platform_post_id == "twitter-1"
        assert len(adapters[Provider.FACEBOOK].connections) == 1

    @pytest.mark.asyncio
    async def test_missing_connection_blocks_every_target(self):
        adapters = {p: StubAdapter(p) for p in (Provider.FACEBOOK, Provider.TWITTER)}
        records = {Provider.FACEBOOK: make_record(Provider.FACEBOOK)}

        results = await _orchestrator(adapters).dispatch_many(
            [Provider.FACEBOOK, Provider.TWITTER], records, TEXT_POST
        )

        assert results["twitter"].error_kind == ErrorKind.NOT_CONNECTED
        skipped = results["facebook"]
        assert not skipped.success
        assert skipped.details == {"skipped": True, "blockedBy": ["twitter"]}
        assert not adapters[Provider.FACEBOOK].connections
        assert not adapters[Provider.TWITTER].connections

    @pytest.mark.asyncio
    async def test_invalid_content_for_one_target_blocks_all(self):
        adapters = {p: StubAdapter(p) for p in (Provider.FACEBOOK, Provider.INSTAGRAM)}
        records = {p: make_record(p) for p in adapters}

        results = await _orchestrator(adapters).dispatch_many(
            ["facebook", "instagram"], records, TEXT_POST
        )

        assert results["instagram"].error_kind == ErrorKind.CONTENT_ERROR
        assert results["instagram"].details["violations"]
        assert results["facebook"].details["blockedBy"] == ["instagram"]
        assert not adapters[Provider.FACEBOOK].connections

    @pytest.mark.asyncio
    async def test_unknown_provider_blocks_all(self):
        adapter = StubAdapter(Provider.FACEBOOK)
        results = await _orchestrator({Provider.FACEBOOK: adapter}).dispatch_many(
            ["facebook", "myspace"], {"facebook": make_record(Provider.FACEBOOK)}, TEXT_POST
        )

        assert list(results) == ["facebook", "myspace"]
        assert "Unknown platform" in results["myspace"].error
        assert results["facebook"].details["blockedBy"] == ["myspace"]
        assert not adapter.connections

    @pytest.mark.asyncio
    async def test_duplicates_dispatched_once(self):
        adapter = StubAdapter(Provider.FACEBOOK)
        results = await _orchestrator({Provider.FACEBOOK: adapter}).dispatch_many(
            ["facebook", Provider.FACEBOOK], {"facebook": make_record(Provider.FACEBOOK)}, TEXT_POST
        )

        assert list(results) == ["facebook"]
        assert len(adapter.connections) == 1

    @pytest.mark.asyncio
    async def test_adapter_failure_does_not_affect_other_targets(self):
        adapters = {
            Provider.FACEBOOK: StubAdapter(Provider.FACEBOOK),
            Provider.TWITTER: StubAdapter(
                Provider.TWITTER, error=ProviderAPIError("Rate limit exceeded", error_code=88)
            ),
        }
        records = {p: make_record(p) for p in adapters}
        health = RecordingHealth()

        results = await _orchestrator(adapters, health=health).dispatch_many(
            ["facebook", "twitter"], records, TEXT_POST
        )

        assert results["facebook"].success
        assert results["twitter"].error_kind == ErrorKind.RATE_LIMIT
        assert [s[0] for s in health.successes] == [Provider.FACEBOOK]
        assert [f[0] for f in health.failures] == [Provider.TWITTER]
