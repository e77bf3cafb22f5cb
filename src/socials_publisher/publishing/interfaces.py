"""Interfaces of the external collaborators the orchestrator consumes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from ..constants import Provider
from .models import ConnectionRecord

_logger = logging.getLogger("publisher")


@dataclass(frozen=True)
class RateLimitDecision:
    """Answer from the external rate limiter."""

    allowed: bool
    limit: int
    remaining: int
    reset_at: Optional[datetime] = None
    retry_after: Optional[float] = None  # seconds


@runtime_checkable
class CredentialStore(Protocol):
    """Owns connection records; the orchestrator never writes credentials."""

    async def get_connection(self, user_id: str, provider: Provider) -> Optional[ConnectionRecord]: ...

    async def refresh_if_needed(self, record: ConnectionRecord) -> ConnectionRecord: ...


@runtime_checkable
class RateLimiter(Protocol):
    """Advisory gate consulted before dispatch."""

    async def check(self, provider: Provider, user_id: Optional[str]) -> RateLimitDecision: ...


@runtime_checkable
class HealthRecorder(Protocol):
    """Receives fire-and-forget outcome observations."""

    def record_success(self, provider: Provider, latency_ms: float) -> None: ...

    def record_failure(self, provider: Provider, message: str, code: str) -> None: ...


class LoggingHealthRecorder:
    """Default recorder: writes observations to the publisher log."""

    def record_success(self, provider: Provider, latency_ms: float) -> None:
        _logger.info(f"HEALTH | {Provider(provider).value} | success | {latency_ms:.0f}ms")

    def record_failure(self, provider: Provider, message: str, code: str) -> None:
        _logger.warning(f"HEALTH | {Provider(provider).value} | failure | {code} | {message}")
