"""Shared test fixtures and configuration.

Provider APIs are faked with ``httpx.MockTransport``: tests register routes
on a ``FakeAPI`` and every request the adapters send is recorded, so tests
can assert on exactly which calls were (or were not) made.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional, Union

import httpx
import pytest

from socials_publisher.config import PublisherSettings, TwitterConfig
from socials_publisher.constants import MediaKind, Provider
from socials_publisher.publishing.models import ConnectionRecord, MediaAsset

FIXED_NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

Reply = Union[dict, httpx.Response, Callable[[httpx.Request], httpx.Response]]


# =============================================================================
# Fake provider APIs
# =============================================================================

@dataclass
class Route:
    """One registered fake endpoint."""

    method: str
    path: str
    replies: list[Reply]
    params: dict[str, str] = field(default_factory=dict)
    host: Optional[str] = None
    calls: int = 0

    def matches(self, request: httpx.Request) -> bool:
        if request.method != self.method:
            return False
        if self.host and request.url.host != self.host:
            return False
        if not request.url.path.endswith(self.path):
            return False
        return all(request.url.params.get(k) == v for k, v in self.params.items())

    def respond(self, request: httpx.Request) -> httpx.Response:
        # The last reply repeats once the sequence is exhausted
        reply = self.replies[min(self.calls, len(self.replies) - 1)]
        self.calls += 1
        if callable(reply):
            return reply(request)
        if isinstance(reply, httpx.Response):
            return reply
        return httpx.Response(200, json=reply)


class FakeAPI:
    """Routes requests to canned replies and records every request."""

    def __init__(self) -> None:
        self.routes: list[Route] = []
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        *replies: Reply,
        params: Optional[dict[str, str]] = None,
        host: Optional[str] = None,
    ) -> Route:
        route = Route(method.upper(), path, list(replies) or [{}], dict(params or {}), host)
        self.routes.append(route)
        return route

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for route in self.routes:
            if route.matches(request):
                return route.respond(request)
        return httpx.Response(404, json={"error": {"message": f"No route for {request.url}"}})

    def calls_to(self, path: str, method: Optional[str] = None) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.url.path.endswith(path) and (method is None or r.method == method.upper())
        ]

    def param_values(self, name: str) -> list[str]:
        return [r.url.params[name] for r in self.requests if name in r.url.params]


def json_body(request: httpx.Request) -> dict[str, Any]:
    return json.loads(request.content.decode("utf-8"))


def form_body(request: httpx.Request) -> dict[str, str]:
    return dict(httpx.QueryParams(request.content.decode("utf-8")))


@pytest.fixture
def fake_api() -> FakeAPI:
    return FakeAPI()


@pytest.fixture
def http_client(fake_api: FakeAPI) -> httpx.AsyncClient:
    """AsyncClient whose transport is the fake API."""
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_api))


# =============================================================================
# Settings and time
# =============================================================================

@pytest.fixture
def sleeps() -> list[float]:
    """Delays requested by the code under test."""
    return []


@pytest.fixture
def fake_sleep(sleeps: list[float]):
    """Sleep replacement that records the delay and returns immediately."""

    async def _sleep(delay: float) -> None:
        sleeps.append(delay)

    return _sleep


@pytest.fixture
def settings() -> PublisherSettings:
    """Settings with tiny chunk sizes and a short polling budget."""
    return PublisherSettings(
        chunk_size_bytes=4,
        chunk_threshold_bytes=8,
        chunk_threshold_gif_bytes=16,
        poll_max_attempts=3,
        poll_default_interval_seconds=1.0,
        poll_max_interval_seconds=5.0,
        twitter=TwitterConfig(consumer_key="test-consumer-key", consumer_secret="test-consumer-secret"),
    )


# =============================================================================
# Factories
# =============================================================================

def make_asset(
    asset_id: str = "a1",
    kind: MediaKind = MediaKind.IMAGE,
    mime_type: Optional[str] = None,
    size: int = 1024,
    url: Optional[str] = None,
    **extra: Any,
) -> MediaAsset:
    if mime_type is None:
        mime_type = "video/mp4" if kind == MediaKind.VIDEO else "image/jpeg"
    return MediaAsset(
        id=asset_id,
        url=url or f"https://cdn.example.com/{asset_id}",
        kind=kind,
        mime_type=mime_type,
        size=size,
        **extra,
    )


def make_record(provider: Provider, **overrides: Any) -> ConnectionRecord:
    values: dict[str, Any] = {
        "provider": provider,
        "access_token": f"{provider.value}-token",
        "expires_at": FIXED_NOW + timedelta(hours=1),
    }
    values.update(overrides)
    return ConnectionRecord(**values)
