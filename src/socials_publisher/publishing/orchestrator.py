"""Dispatch orchestrator: the single public entry point for publishing.

``dispatch`` runs one self-contained workflow::

    rate-limit gate -> resolve connection -> validate content
        -> provider adapter -> (classify failure) -> PublishResult

``dispatch_many`` checks every target first, then runs ``dispatch`` for each
concurrently.

Nothing is retried here. Health observations are fire-and-forget and
never change the returned result.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Callable, Iterable, Mapping, Optional

import httpx

from ..config import PublisherSettings
from ..constants import ErrorKind, Provider
from ..platforms.base import ProviderAdapter, PublishResult
from ..platforms.registry import PlatformRegistry
from . import connections, validator
from .classifier import classify
from .exceptions import ConnectionResolutionError
from .interfaces import CredentialStore, HealthRecorder, LoggingHealthRecorder, RateLimiter
from .models import ConnectionRecord, PlatformConnection, PostContent
from .uploads import SleepFunc

_logger = logging.getLogger("publisher")

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PublishingOrchestrator:
    """Selects the adapter for a provider, runs it and returns a uniform result.

    Collaborators are injected; the orchestrator holds no per-dispatch state,
    so concurrent dispatches are independent.
    """

    def __init__(
        self,
        settings: Optional[PublisherSettings] = None,
        adapters: Optional[Mapping[Provider, ProviderAdapter]] = None,
        health: Optional[HealthRecorder] = None,
        rate_limiter: Optional[RateLimiter] = None,
        credential_store: Optional[CredentialStore] = None,
        clock: Clock = _utc_now,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self.settings = settings or PublisherSettings()
        if adapters is None:
            adapters = PlatformRegistry.create_adapters(self.settings, http_client, sleep)
        self._adapters: dict[Provider, ProviderAdapter] = dict(adapters)
        self.health = health if health is not None else LoggingHealthRecorder()
        self.rate_limiter = rate_limiter
        self.credential_store = credential_store
        self._clock = clock

    def _failure(
        self,
        provider: str,
        kind: ErrorKind,
        message: str,
        details: Optional[dict] = None,
    ) -> PublishResult:
        return PublishResult(
            success=False,
            platform=provider,
            error_kind=kind,
            error=message,
            details=details or {},
        )

    async def dispatch(
        self,
        provider: Provider | str,
        record: Optional[ConnectionRecord],
        content: PostContent,
        user_id: Optional[str] = None,
    ) -> PublishResult:
        """Publish ``content`` to one provider.

        Args:
            provider: Target provider name.
            record: Stored connection record (None when not connected).
            content: Payload to publish.
            user_id: Caller identity, passed to the rate limiter.

        Returns:
            PublishResult; failures are returned, never raised.
        """
        started = time.monotonic()

        try:
            target = PlatformRegistry.to_provider(provider)
        except ValueError as e:
            return self._failure(str(provider), ErrorKind.CONTENT_ERROR, str(e))
        adapter = self._adapters.get(target)
        if adapter is None:
            return self._failure(
                target.value, ErrorKind.CONTENT_ERROR, f"No adapter configured for {target.value}"
            )

        # 0. Advisory rate-limit gate
        denied = await self._check_rate_limit(target, user_id)
        if denied is not None:
            self._observe(target, denied, started)
            return denied

        # 1. Resolve connection, 2. validate content (no network before both pass)
        prepared = self._prepare(target, record, content)
        if isinstance(prepared, PublishResult):
            self._observe(target, prepared, started)
            return prepared
        connection = prepared

        # 3. Run the adapter, 4. classify failures
        _logger.info(f"DISPATCH | {target.value} | media={len(content.media)}")
        try:
            result = await adapter.publish(connection, content)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            classified = classify(e, target.value)
            _logger.error(f"DISPATCH | {target.value} | {classified.kind.value} | {classified.message}")
            result = self._failure(
                target.value, classified.kind, classified.message, details=classified.details
            )

        # 5. Success passes through unchanged
        self._observe(target, result, started)
        return result

    async def dispatch_for_user(
        self,
        user_id: str,
        provider: Provider | str,
        content: PostContent,
    ) -> PublishResult:
        """Fetch (and refresh) the user's record from the credential store, then dispatch."""
        if self.credential_store is None:
            raise RuntimeError("dispatch_for_user requires a credential store")
        try:
            target = PlatformRegistry.to_provider(provider)
        except ValueError as e:
            return self._failure(str(provider), ErrorKind.CONTENT_ERROR, str(e))

        record = await self.credential_store.get_connection(user_id, target)
        if record is not None:
            record = await self.credential_store.refresh_if_needed(record)
        return await self.dispatch(target, record, content, user_id=user_id)

    async def dispatch_many(
        self,
        providers: Iterable[Provider | str],
        records: Mapping[Provider | str, Optional[ConnectionRecord]],
        content: PostContent,
        user_id: Optional[str] = None,
    ) -> dict[str, PublishResult]:
        """Publish the same content to several providers.

        Every target's connection and content are checked before anything is
        sent. If any target fails that check nothing is published: failing
        targets report their own error and the rest report which targets
        blocked them. Otherwise the dispatches run concurrently.

        Returns:
            Results keyed by provider name, in request order.
        """
        order: list[str] = []
        targets: list[Provider] = []
        blocked: dict[str, PublishResult] = {}

        for provider in providers:
            try:
                target = PlatformRegistry.to_provider(provider)
            except ValueError as e:
                order.append(str(provider))
                blocked[str(provider)] = self._failure(str(provider), ErrorKind.CONTENT_ERROR, str(e))
                continue
            if target.value in order:
                continue
            order.append(target.value)
            targets.append(target)

            if target not in self._adapters:
                blocked[target.value] = self._failure(
                    target.value, ErrorKind.CONTENT_ERROR, f"No adapter configured for {target.value}"
                )
                continue
            prepared = self._prepare(target, _record_for(records, target), content)
            if isinstance(prepared, PublishResult):
                self._observe(target, prepared, time.monotonic())
                blocked[target.value] = prepared

        if blocked:
            names = list(blocked)
            _logger.warning(f"DISPATCH_MANY | blocked by {', '.join(names)}")
            results: dict[str, PublishResult] = {}
            for name in order:
                results[name] = blocked.get(name) or self._failure(
                    name,
                    ErrorKind.CONTENT_ERROR,
                    f"Not published: checks failed for {', '.join(names)}",
                    details={"skipped": True, "blockedBy": names},
                )
            return results

        outcomes = await asyncio.gather(*(
            self.dispatch(target, _record_for(records, target), content, user_id=user_id)
            for target in targets
        ))
        return {target.value: result for target, result in zip(targets, outcomes)}

    def _prepare(
        self,
        target: Provider,
        record: Optional[ConnectionRecord],
        content: PostContent,
    ) -> PlatformConnection | PublishResult:
        """Resolve the connection and validate content, or return the failure."""
        try:
            connection = connections.resolve(target, record, now=self._clock())
        except ConnectionResolutionError as e:
            return self._failure(target.value, e.kind, e.message)

        report = validator.validate(target, content)
        if not report.valid:
            return self._failure(
                target.value,
                ErrorKind.CONTENT_ERROR,
                "Content validation failed: " + "; ".join(report.violations),
                details={"violations": list(report.violations)},
            )
        return connection

    async def _check_rate_limit(
        self, provider: Provider, user_id: Optional[str]
    ) -> Optional[PublishResult]:
        if self.rate_limiter is None:
            return None
        try:
            decision = await self.rate_limiter.check(provider, user_id)
        except Exception as e:
            # Advisory gate: an unavailable limiter does not block publishing
            _logger.warning(f"Rate limiter check failed for {provider.value}: {e}")
            return None
        if decision.allowed:
            return None

        details = {"limit": decision.limit, "remaining": decision.remaining}
        if decision.retry_after is not None:
            details["retryAfter"] = decision.retry_after
        if decision.reset_at is not None:
            details["resetAt"] = decision.reset_at.isoformat()
        return self._failure(
            provider.value,
            ErrorKind.RATE_LIMIT,
            f"Rate limit exceeded for {provider.value}",
            details=details,
        )

    def _observe(self, provider: Provider, result: PublishResult, started: float) -> None:
        """Report the outcome to the health recorder; its errors are logged only."""
        try:
            if result.success:
                self.health.record_success(provider, (time.monotonic() - started) * 1000)
            else:
                kind = result.error_kind or ErrorKind.INTERNAL_ERROR
                self.health.record_failure(provider, result.error or "", kind.value)
        except Exception as e:
            _logger.warning(f"Health recorder failed for {provider.value}: {e}")


def _record_for(
    records: Mapping[Provider | str, Optional[ConnectionRecord]], target: Provider
) -> Optional[ConnectionRecord]:
    record = records.get(target)
    return record if record is not None else records.get(target.value)
