"""Display functions for publish commands - pure functions for Rich output."""

from __future__ import annotations

from typing import List

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ...platforms.base import PublishResult
from ...platforms.tiktok import CreatorInfo
from ...publishing.validator import ValidationReport


def show_dispatch_start(console: Console, provider: str, media_count: int) -> None:
    console.print(f"[bold]Publishing to {provider}[/bold] [dim]({media_count} media)[/dim]")


def show_publish_result(console: Console, result: PublishResult) -> None:
    """Display the outcome of a dispatch."""
    if result.success:
        lines = [f"[bold green]Published to {result.platform}![/bold green]"]
        if result.platform_post_id:
            lines.append(f"Post ID: [cyan]{result.platform_post_id}[/cyan]")
        if result.url:
            lines.append(f"URL: [cyan]{result.url}[/cyan]")
        if result.media_skipped:
            lines.append("[yellow]Media was skipped[/yellow]")
        console.print(Panel("\n".join(lines), border_style="green"))
    else:
        kind = result.error_kind.value if result.error_kind else "INTERNAL_ERROR"
        console.print(Panel(
            f"[bold red]{kind}[/bold red] (HTTP {result.status_code})\n{result.error}",
            title=f"{result.platform} failed",
            border_style="red",
        ))
        for violation in result.details.get("violations", []):
            console.print(f"  [red]-[/red] {violation}")

    for note in result.annotations:
        console.print(f"  [dim]note:[/dim] {note}")


def show_validation_report(console: Console, provider: str, report: ValidationReport) -> None:
    if report.valid:
        console.print(f"[green]Content is valid for {provider}[/green]")
        return
    console.print(f"[red]{len(report.violations)} violation(s) for {provider}:[/red]")
    for violation in report.violations:
        console.print(f"  [red]-[/red] {violation}")


def show_providers_table(console: Console, rows: List[dict]) -> None:
    table = Table(title="Providers")
    table.add_column("Provider", style="cyan")
    table.add_column("Max text", style="white")
    table.add_column("Media", style="green")
    table.add_column("Requires media", style="yellow")
    table.add_column("Mixed kinds", style="dim")

    for row in rows:
        table.add_row(
            row["name"],
            str(row["max_text"]) if row["max_text"] is not None else "-",
            row["media"],
            "yes" if row["requires_media"] else "no",
            "yes" if row["mixed"] else "no",
        )

    console.print(table)


def show_creator_info(console: Console, info: CreatorInfo) -> None:
    table = Table(title=f"TikTok creator @{info.username}" if info.username else "TikTok creator")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Nickname", info.nickname or "-")
    table.add_row("Privacy options", ", ".join(info.privacy_level_options))
    table.add_row("Max video duration", f"{info.max_video_post_duration_sec}s")
    table.add_row("Comments", "disabled" if info.comment_disabled else "allowed")
    table.add_row("Duet", "disabled" if info.duet_disabled else "allowed")
    table.add_row("Stitch", "disabled" if info.stitch_disabled else "allowed")

    console.print(table)
