"""Publish CLI commands - thin wrappers orchestrating display and service."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import typer

from ...constants import Provider
from ..core.console import console, print_error, print_info, print_success, print_warning
from .display import (
    show_creator_info,
    show_dispatch_start,
    show_providers_table,
    show_publish_result,
    show_validation_report,
)
from . import service


def publish(
    provider: str = typer.Argument(..., help="Target provider (facebook, instagram, twitter, tiktok, amazon)"),
    connection: Path = typer.Option(..., "--connection", "-c", help="Connection record JSON file"),
    content: Path = typer.Option(..., "--content", "-p", help="Post content JSON file"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML settings override"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Publish one post to one provider.

    Exits with status 1 when the dispatch fails.
    """
    target = service.parse_provider(provider)
    if target.is_failure():
        print_error(target.error)
        raise typer.Exit(1)

    record = service.load_connection(connection, target.value)
    if record.is_failure():
        print_error(record.error, record.details)
        raise typer.Exit(1)

    payload = service.load_content(content)
    if payload.is_failure():
        print_error(payload.error, payload.details)
        raise typer.Exit(1)

    settings = service.get_settings(config)
    if not as_json:
        show_dispatch_start(console, target.value.value, len(payload.value.media))

    result = asyncio.run(service.publish(target.value, record.value, payload.value, settings))

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        show_publish_result(console, result)

    if not result.success:
        raise typer.Exit(1)


def publish_many(
    providers: List[str] = typer.Argument(..., help="Target providers"),
    connection: Optional[List[str]] = typer.Option(
        None, "--connection", "-c", help="PROVIDER=PATH connection record (repeatable)"
    ),
    content: Path = typer.Option(..., "--content", "-p", help="Post content JSON file"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML settings override"),
    as_json: bool = typer.Option(False, "--json", help="Print the results as JSON"),
) -> None:
    """Publish one post to several providers.

    Nothing is published unless every provider is connected and accepts the
    content. Exits with status 1 when any provider fails.
    """
    targets = []
    for name in providers:
        target = service.parse_provider(name)
        if target.is_failure():
            print_error(target.error)
            raise typer.Exit(1)
        targets.append(target.value)

    paths = service.parse_connection_pairs(connection or [])
    if paths.is_failure():
        print_error(paths.error)
        raise typer.Exit(1)

    records = service.load_connections(paths.value)
    if records.is_failure():
        print_error(records.error, records.details)
        raise typer.Exit(1)

    payload = service.load_content(content)
    if payload.is_failure():
        print_error(payload.error, payload.details)
        raise typer.Exit(1)

    settings = service.get_settings(config)
    if not as_json:
        print_info(f"Publishing to {', '.join(t.value for t in targets)}")

    results = asyncio.run(service.publish_many(targets, records.value, payload.value, settings))
    failed = [name for name, result in results.items() if not result.success]

    if as_json:
        typer.echo(json.dumps({name: r.to_dict() for name, r in results.items()}, indent=2))
    else:
        for result in results.values():
            show_publish_result(console, result)
        if failed:
            print_warning(f"{len(failed)} of {len(results)} providers failed: {', '.join(failed)}")
        else:
            print_success(f"Published to all {len(results)} providers")

    if failed:
        raise typer.Exit(1)


def validate(
    provider: str = typer.Argument(..., help="Target provider"),
    content: Path = typer.Option(..., "--content", "-p", help="Post content JSON file"),
) -> None:
    """Check content against a provider's constraints without publishing."""
    target = service.parse_provider(provider)
    if target.is_failure():
        print_error(target.error)
        raise typer.Exit(1)

    payload = service.load_content(content)
    if payload.is_failure():
        print_error(payload.error, payload.details)
        raise typer.Exit(1)

    report = service.validate_content(target.value, payload.value)
    show_validation_report(console, target.value.value, report)
    if not report.valid:
        raise typer.Exit(1)


def providers() -> None:
    """List supported providers and their main constraints."""
    show_providers_table(console, service.describe_providers())


def creator_info(
    connection: Path = typer.Option(..., "--connection", "-c", help="TikTok connection record JSON file"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML settings override"),
    as_json: bool = typer.Option(False, "--json", help="Print the creator info as JSON"),
) -> None:
    """Show what the connected TikTok creator is allowed to post."""
    record = service.load_connection(connection, Provider.TIKTOK)
    if record.is_failure():
        print_error(record.error, record.details)
        raise typer.Exit(1)

    settings = service.get_settings(config)
    if not as_json:
        print_info("Querying TikTok creator info...")

    info = asyncio.run(service.fetch_creator_info(record.value, settings))
    if info.is_failure():
        print_error(info.error, info.details)
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(service.creator_info_dict(info.value), indent=2))
    else:
        show_creator_info(console, info.value)
