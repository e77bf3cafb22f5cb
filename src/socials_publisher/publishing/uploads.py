"""Media upload pipeline.

Two protocols are driven from here:

1. Byte transfer (X-style media upload). Small payloads go up in a single
   request; large ones, and anything that needs server-side processing, use
   the chunked protocol::

       INIT -> APPEND(0) ... APPEND(n-1) -> FINALIZE -> STATUS polling

   APPEND segments are sent strictly in order; providers reject
   out-of-order segments.

2. Containers (Graph API media publishing). Media is referenced by URL and
   wrapped in a container; multi-asset posts create one child container per
   asset and a parent carousel. Any child failure aborts before the parent
   exists, so a partial carousel is never published.

Processing-status polling is a bounded state machine (``StatusPoller``)
with an injectable sleep so tests can run it without waiting.
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Protocol, Sequence

import httpx

from ..constants import (
    CHUNK_SIZE_BYTES,
    CHUNK_THRESHOLD_BYTES,
    CHUNK_THRESHOLD_GIF_BYTES,
    POLL_DEFAULT_INTERVAL_SECONDS,
    POLL_MAX_ATTEMPTS,
    POLL_MAX_INTERVAL_SECONDS,
    UPLOAD_TIMEOUT_SECONDS,
    ContainerStatus,
    MediaKind,
    ProcessingState,
    UploadState,
)
from .exceptions import (
    MalformedResponseError,
    MediaProcessingFailed,
    MediaProcessingTimeout,
    MediaUploadError,
)
from .models import MediaAsset, UploadSession

_logger = logging.getLogger("publisher")

SleepFunc = Callable[[float], Awaitable[None]]


# =============================================================================
# PROCESSING STATUS
# =============================================================================

@dataclass(frozen=True)
class ProcessingStatus:
    """One STATUS observation."""

    state: ProcessingState
    check_after_secs: Optional[float] = None
    progress_percent: Optional[int] = None
    error: Optional[str] = None
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_processing_info(cls, info: Optional[dict[str, Any]]) -> "ProcessingStatus":
        """Parse an X ``processing_info`` object.

        A missing object means the provider has nothing left to process.
        Unknown states are treated as still in progress.
        """
        if not info:
            return cls(state=ProcessingState.SUCCEEDED)
        try:
            state = ProcessingState(str(info.get("state", "")).lower())
        except ValueError:
            _logger.warning(f"Unknown media processing state: {info.get('state')}")
            state = ProcessingState.IN_PROGRESS
        error = info.get("error")
        error_text = None
        if isinstance(error, dict):
            error_text = f"{error.get('name', 'Error')}: {error.get('message', 'Unknown processing error')}"
        elif error:
            error_text = str(error)
        return cls(
            state=state,
            check_after_secs=info.get("check_after_secs"),
            progress_percent=info.get("progress_percent"),
            error=error_text,
            raw=dict(info),
        )

    @classmethod
    def from_container(cls, payload: dict[str, Any]) -> "ProcessingStatus":
        """Parse a Graph container ``status_code`` response."""
        code = str(payload.get("status_code", "")).upper()
        if code in (ContainerStatus.FINISHED.value, ContainerStatus.PUBLISHED.value):
            state = ProcessingState.SUCCEEDED
        elif code in (ContainerStatus.ERROR.value, ContainerStatus.EXPIRED.value):
            state = ProcessingState.FAILED
        else:
            state = ProcessingState.IN_PROGRESS
        error = None
        if state == ProcessingState.FAILED:
            error = payload.get("status") or f"Container status {code}"
        return cls(state=state, error=error, raw=dict(payload))


class StatusPoller:
    """Bounded processing-status state machine.

    Queries status until a terminal state, sleeping for the provider's
    suggested interval (clamped to ``max_interval``) between queries. At most
    ``max_attempts`` queries are made, and the whole wait is also bounded by
    ``max_attempts * max_interval`` seconds.
    """

    def __init__(
        self,
        max_attempts: int = POLL_MAX_ATTEMPTS,
        default_interval: float = POLL_DEFAULT_INTERVAL_SECONDS,
        max_interval: float = POLL_MAX_INTERVAL_SECONDS,
        sleep: SleepFunc = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.default_interval = default_interval
        self.max_interval = max_interval
        self._sleep = sleep

    @property
    def budget_seconds(self) -> float:
        return self.max_attempts * self.max_interval

    def interval_for(self, status: ProcessingStatus) -> float:
        suggested = status.check_after_secs
        if suggested is None or suggested <= 0:
            suggested = self.default_interval
        return min(float(suggested), self.max_interval)

    async def wait(
        self,
        fetch_status: Callable[[], Awaitable[ProcessingStatus]],
        media_id: str,
        initial: Optional[ProcessingStatus] = None,
        session: Optional[UploadSession] = None,
    ) -> ProcessingStatus:
        """Poll until ``succeeded``.

        Args:
            fetch_status: Coroutine factory performing one STATUS query.
            media_id: Remote id, used in error messages.
            initial: Status already known (e.g. from FINALIZE).
            session: Upload session to record attempts on.

        Returns:
            The succeeded status.

        Raises:
            MediaProcessingFailed: Provider reported ``failed``.
            MediaProcessingTimeout: No terminal state within the bounds.
        """
        try:
            return await asyncio.wait_for(
                self._run(fetch_status, media_id, initial, session),
                timeout=self.budget_seconds,
            )
        except asyncio.TimeoutError:
            raise MediaProcessingTimeout(
                f"Media processing for {media_id} exceeded {self.budget_seconds:g}s",
                media_id=media_id,
            ) from None

    async def _run(
        self,
        fetch_status: Callable[[], Awaitable[ProcessingStatus]],
        media_id: str,
        initial: Optional[ProcessingStatus],
        session: Optional[UploadSession],
    ) -> ProcessingStatus:
        status = initial
        for attempt in range(1, self.max_attempts + 1):
            if status is not None:
                self._check_terminal(status, media_id)
                if status.state == ProcessingState.SUCCEEDED:
                    return status
                await self._sleep(self.interval_for(status))

            status = await fetch_status()
            if session is not None:
                session.attempts = attempt
                session.last_status = status.raw
            _logger.info(
                f"Processing status {media_id} (attempt {attempt}/{self.max_attempts}): "
                f"{status.state.value} {status.progress_percent or 0}%"
            )

        if status is not None:
            self._check_terminal(status, media_id)
            if status.state == ProcessingState.SUCCEEDED:
                return status
        raise MediaProcessingTimeout(
            f"Media processing for {media_id} did not complete within {self.max_attempts} attempts",
            media_id=media_id,
        )

    @staticmethod
    def _check_terminal(status: ProcessingStatus, media_id: str) -> None:
        if status.state == ProcessingState.FAILED:
            raise MediaProcessingFailed(
                f"Media processing failed for {media_id}: {status.error or 'Unknown processing error'}",
                media_id=media_id,
                details={"processing_status": status.raw},
            )


# =============================================================================
# BYTE TRANSFER
# =============================================================================

class ChunkedUploadTransport(Protocol):
    """Provider operations used by the byte-transfer pipeline."""

    async def upload_simple(self, data: bytes, mime_type: str, category: str) -> dict[str, Any]: ...

    async def init_upload(self, total_bytes: int, mime_type: str, category: str) -> dict[str, Any]: ...

    async def append_chunk(self, media_id: str, segment_index: int, chunk: bytes) -> None: ...

    async def finalize_upload(self, media_id: str) -> dict[str, Any]: ...

    async def upload_status(self, media_id: str) -> dict[str, Any]: ...

    async def set_alt_text(self, media_id: str, alt_text: str) -> None: ...


class MediaFetcher:
    """Downloads media bytes from an asset's source URL."""

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = UPLOAD_TIMEOUT_SECONDS,
    ):
        self._http_client = http_client
        self._timeout = timeout

    async def fetch(self, asset: MediaAsset) -> bytes:
        try:
            if self._http_client is not None:
                response = await self._http_client.get(asset.url, timeout=self._timeout)
            else:
                async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
                    response = await client.get(asset.url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise MediaUploadError(
                f"Failed to fetch media from URL {asset.url}: {e}", asset_id=asset.id
            ) from e
        return response.content


def media_category(asset: MediaAsset) -> str:
    if asset.kind == MediaKind.VIDEO:
        return "tweet_video"
    if asset.is_gif:
        return "tweet_gif"
    return "tweet_image"


def _media_id_from(payload: dict[str, Any], step: str) -> str:
    media_id = payload.get("media_id_string") or payload.get("media_id")
    if media_id is None:
        raise MalformedResponseError(f"{step} response did not include a media id")
    return str(media_id)


class MediaUploadPipeline:
    """Uploads one asset and returns the remote media id."""

    def __init__(
        self,
        transport: ChunkedUploadTransport,
        poller: Optional[StatusPoller] = None,
        fetcher: Optional[MediaFetcher] = None,
        chunk_size: int = CHUNK_SIZE_BYTES,
        chunk_threshold: int = CHUNK_THRESHOLD_BYTES,
        gif_chunk_threshold: int = CHUNK_THRESHOLD_GIF_BYTES,
    ):
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self.transport = transport
        self.poller = poller or StatusPoller()
        self.fetcher = fetcher or MediaFetcher()
        self.chunk_size = chunk_size
        self.chunk_threshold = chunk_threshold
        self.gif_chunk_threshold = gif_chunk_threshold

    def needs_chunked(self, asset: MediaAsset, size: int) -> bool:
        """Videos always need processing; other media only when large.

        The GIF threshold is an extra trigger on top of the general one.
        """
        if asset.kind == MediaKind.VIDEO:
            return True
        if asset.is_gif and size > self.gif_chunk_threshold:
            return True
        return size > self.chunk_threshold

    def segment_count(self, size: int) -> int:
        return math.ceil(size / self.chunk_size)

    async def upload(self, asset: MediaAsset) -> str:
        """Transfer one asset.

        Raises:
            MediaUploadError: Transfer or processing failed.
            ProviderAPIError: The provider rejected a request.
        """
        data = await self.fetcher.fetch(asset)
        if not data:
            raise MediaUploadError(f"Media {asset.id} is empty", asset_id=asset.id)

        session = UploadSession(asset_id=asset.id, total_bytes=len(data))
        try:
            if self.needs_chunked(asset, len(data)):
                media_id = await self._upload_chunked(asset, data, session)
            else:
                media_id = await self._upload_simple(asset, data, session)

            if asset.alt_text:
                await self.transport.set_alt_text(media_id, asset.alt_text)
        except MediaUploadError as e:
            session.advance(UploadState.FAILED)
            if e.asset_id is None:
                e.asset_id = asset.id
            raise
        except MalformedResponseError as e:
            session.advance(UploadState.FAILED)
            raise MediaUploadError(str(e), asset_id=asset.id, media_id=session.media_id) from e
        except httpx.HTTPError as e:
            session.advance(UploadState.FAILED)
            raise MediaUploadError(
                f"Network error uploading media {asset.id}: {e}",
                asset_id=asset.id,
                media_id=session.media_id,
            ) from e
        except Exception:
            session.advance(UploadState.FAILED)
            raise

        session.advance(UploadState.SUCCEEDED)
        _logger.info(f"Uploaded media {asset.id} -> {media_id} ({len(data)} bytes)")
        return media_id

    async def _upload_simple(self, asset: MediaAsset, data: bytes, session: UploadSession) -> str:
        result = await self.transport.upload_simple(data, asset.mime_type, media_category(asset))
        session.media_id = _media_id_from(result, "Upload")
        session.bytes_transferred = len(data)
        return session.media_id

    async def _upload_chunked(self, asset: MediaAsset, data: bytes, session: UploadSession) -> str:
        total = len(data)

        # INIT
        init = await self.transport.init_upload(total, asset.mime_type, media_category(asset))
        media_id = _media_id_from(init, "INIT")
        session.media_id = media_id
        session.advance(UploadState.INITIALIZED)

        # APPEND, strictly sequential
        session.advance(UploadState.APPENDING)
        for segment_index in range(self.segment_count(total)):
            start = segment_index * self.chunk_size
            chunk = data[start:start + self.chunk_size]
            await self.transport.append_chunk(media_id, segment_index, chunk)
            session.segments_sent.append(segment_index)
            session.bytes_transferred += len(chunk)

        # FINALIZE
        finalize = await self.transport.finalize_upload(media_id)
        session.advance(UploadState.FINALIZED)

        # STATUS
        info = finalize.get("processing_info")
        if info:
            session.advance(UploadState.PROCESSING)

            async def fetch_status() -> ProcessingStatus:
                payload = await self.transport.upload_status(media_id)
                return ProcessingStatus.from_processing_info(payload.get("processing_info"))

            await self.poller.wait(
                fetch_status,
                media_id,
                initial=ProcessingStatus.from_processing_info(info),
                session=session,
            )
        return media_id


# =============================================================================
# CONTAINERS
# =============================================================================

class ContainerTransport(Protocol):
    """Provider operations used by the container pipeline."""

    async def create_media_container(
        self, asset: MediaAsset, caption: Optional[str], is_carousel_item: bool
    ) -> str: ...

    async def create_carousel_container(self, children_ids: list[str], caption: str) -> str: ...

    async def container_status(self, container_id: str) -> dict[str, Any]: ...

    async def publish_container(self, container_id: str) -> str: ...


class ContainerPipeline:
    """Create container(s), wait until ready, publish."""

    def __init__(self, transport: ContainerTransport, poller: Optional[StatusPoller] = None):
        self.transport = transport
        self.poller = poller or StatusPoller()

    async def publish(self, assets: Sequence[MediaAsset], caption: str) -> str:
        """Publish one asset or a carousel and return the published media id."""
        if not assets:
            raise ValueError("Container publishing needs at least one asset")

        if len(assets) == 1:
            asset = assets[0]
            container_id = await self.transport.create_media_container(
                asset, caption, is_carousel_item=False
            )
            if asset.kind == MediaKind.VIDEO:
                await self.wait_ready(container_id)
        else:
            children: list[str] = []
            for asset in assets:
                child_id = await self.transport.create_media_container(
                    asset, None, is_carousel_item=True
                )
                if asset.kind == MediaKind.VIDEO:
                    await self.wait_ready(child_id)
                children.append(child_id)
            container_id = await self.transport.create_carousel_container(children, caption)
            await self.wait_ready(container_id)

        return await self.transport.publish_container(container_id)

    async def wait_ready(self, container_id: str) -> None:
        async def fetch_status() -> ProcessingStatus:
            return ProcessingStatus.from_container(
                await self.transport.container_status(container_id)
            )

        await self.poller.wait(fetch_status, container_id)
