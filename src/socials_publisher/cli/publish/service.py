"""Stateless service for publish commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from ...config import PublisherSettings, load_settings
from ...constants import Provider
from ...platforms.base import PublishResult
from ...platforms.registry import PlatformRegistry
from ...platforms.tiktok import CreatorInfo, TikTokPublisher
from ...publishing import connections, validator
from ...publishing.classifier import classify
from ...publishing.exceptions import ConnectionResolutionError, ProviderAPIError, PublishingError
from ...publishing.models import ConnectionRecord, PostContent
from ...publishing.orchestrator import PublishingOrchestrator
from ..core.types import Failure, Result, Success


def _read_json(path: Path) -> Result[Any]:
    if not path.exists():
        return Failure(f"File not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            return Success(json.load(f))
    except json.JSONDecodeError as e:
        return Failure(f"Invalid JSON in {path}", {"error": str(e)})


def load_content(path: Path) -> Result[PostContent]:
    """Load a PostContent payload from a JSON file."""
    data = _read_json(path)
    if data.is_failure():
        return data
    try:
        return Success(PostContent.model_validate(data.value))
    except ValidationError as e:
        return Failure(f"Invalid content in {path}", {"errors": e.error_count(), "detail": str(e)})


def load_connection(path: Path, provider: Provider) -> Result[ConnectionRecord]:
    """Load a ConnectionRecord, defaulting its provider to the command argument."""
    data = _read_json(path)
    if data.is_failure():
        return data
    payload = dict(data.value) if isinstance(data.value, dict) else {}
    payload.setdefault("provider", provider.value)
    try:
        return Success(ConnectionRecord.model_validate(payload))
    except ValidationError as e:
        return Failure(f"Invalid connection in {path}", {"errors": e.error_count(), "detail": str(e)})


def parse_provider(name: str) -> Result[Provider]:
    try:
        return Success(PlatformRegistry.to_provider(name))
    except ValueError as e:
        return Failure(str(e))


def parse_connection_pairs(values: list[str]) -> Result[dict[Provider, Path]]:
    """Parse ``PROVIDER=PATH`` options into a provider-to-file mapping."""
    paths: dict[Provider, Path] = {}
    for value in values:
        name, sep, path = value.partition("=")
        if not sep or not path:
            return Failure(f"Expected PROVIDER=PATH, got: {value}")
        target = parse_provider(name.strip())
        if target.is_failure():
            return target
        paths[target.value] = Path(path.strip())
    return Success(paths)


def load_connections(paths: dict[Provider, Path]) -> Result[dict[Provider, ConnectionRecord]]:
    records: dict[Provider, ConnectionRecord] = {}
    for provider, path in paths.items():
        record = load_connection(path, provider)
        if record.is_failure():
            return record
        records[provider] = record.value
    return Success(records)


def get_settings(config_path: Optional[Path] = None) -> PublisherSettings:
    return load_settings(config_path)


def validate_content(provider: Provider, content: PostContent) -> validator.ValidationReport:
    return validator.validate(provider, content)


async def publish(
    provider: Provider,
    record: ConnectionRecord,
    content: PostContent,
    settings: Optional[PublisherSettings] = None,
) -> PublishResult:
    """Run one dispatch with default collaborators."""
    orchestrator = PublishingOrchestrator(settings=settings)
    return await orchestrator.dispatch(provider, record, content)


async def publish_many(
    providers: list[Provider],
    records: dict[Provider, ConnectionRecord],
    content: PostContent,
    settings: Optional[PublisherSettings] = None,
) -> dict[str, PublishResult]:
    """Fan one post out to several providers."""
    orchestrator = PublishingOrchestrator(settings=settings)
    return await orchestrator.dispatch_many(providers, records, content)


async def fetch_creator_info(
    record: ConnectionRecord,
    settings: Optional[PublisherSettings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> Result[CreatorInfo]:
    """Query the TikTok creator's posting capabilities."""
    settings = settings or PublisherSettings()
    try:
        connection = connections.resolve(Provider.TIKTOK, record)
        info = await TikTokPublisher(settings, http_client=http_client).creator_info(connection)
    except ConnectionResolutionError as e:
        return Failure(e.message, {"kind": e.kind.value})
    except (ProviderAPIError, PublishingError, httpx.HTTPError) as e:
        classified = classify(e, Provider.TIKTOK.value)
        return Failure(classified.message, {"kind": classified.kind.value})
    return Success(info)


def describe_providers() -> list[dict[str, Any]]:
    """Summaries of each provider's constraint table for display."""
    rows = []
    for name in PlatformRegistry.available_platforms():
        table = validator.get_constraints(name)
        if table.max_per_kind:
            media = ", ".join(f"{v} {k.value}" for k, v in table.max_per_kind.items())
        elif table.max_media is not None:
            media = str(table.max_media)
        elif table.max_photos is not None:
            media = f"1 video or {table.max_photos} photos"
        else:
            media = "-"
        rows.append({
            "name": name,
            "max_text": table.max_text_length,
            "requires_media": table.requires_media,
            "media": media,
            "mixed": table.allow_mixed_kinds,
        })
    return rows


def creator_info_dict(info: CreatorInfo) -> dict[str, Any]:
    return {
        "username": info.username,
        "nickname": info.nickname,
        "privacyOptions": list(info.privacy_level_options),
        "maxVideoDuration": info.max_video_post_duration_sec,
        "settings": {
            "commentDisabled": info.comment_disabled,
            "duetDisabled": info.duet_disabled,
            "stitchDisabled": info.stitch_disabled,
        },
    }
