"""Data models for publishing requests, connections and upload sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..constants import AuthScheme, MediaKind, Provider, TikTokPostType, UploadState


def _ensure_aware(value: datetime) -> datetime:
    """Treat naive timestamps as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# =============================================================================
# CONTENT
# =============================================================================

class MediaAsset(BaseModel):
    """One media item referenced by URL. Immutable once constructed."""

    model_config = ConfigDict(frozen=True)

    id: str
    url: str
    kind: MediaKind
    mime_type: str
    size: int = Field(ge=0)
    duration: Optional[float] = None  # seconds
    width: Optional[int] = None
    height: Optional[int] = None
    alt_text: Optional[str] = None

    @property
    def is_gif(self) -> bool:
        return self.mime_type.lower() == "image/gif"

    @property
    def aspect_ratio(self) -> float | None:
        """Width / height, or None when dimensions are unknown."""
        if not self.width or not self.height:
            return None
        return self.width / self.height


class BrandContent(BaseModel):
    """Brand metadata required by the marketplace provider."""

    brand_name: str
    headline: Optional[str] = None
    target_audience: Optional[str] = None
    product_highlights: list[str] = Field(default_factory=list)


class CreatorPostSettings(BaseModel):
    """Short-form video post settings."""

    post_type: Optional[TikTokPostType] = None  # inferred from media when unset
    privacy_level: str = "PUBLIC_TO_EVERYONE"
    disable_comment: bool = False
    disable_duet: bool = False
    disable_stitch: bool = False
    auto_add_music: bool = True


class PostExtensions(BaseModel):
    """Provider-specific extras carried alongside the common payload."""

    brand: Optional[BrandContent] = None
    catalog_refs: list[str] = Field(default_factory=list)
    video_settings: Optional[CreatorPostSettings] = None
    page_id: Optional[str] = None


class PostContent(BaseModel):
    """The canonical publish request payload."""

    text: str = ""
    hashtags: list[str] = Field(default_factory=list)
    mentions: list[str] = Field(default_factory=list)
    media: list[MediaAsset] = Field(default_factory=list)
    extensions: PostExtensions = Field(default_factory=PostExtensions)

    def formatted_text(self) -> str:
        """Render text followed by #hashtags and @mentions.

        Prefixes are only added when missing, so callers may pass either
        ``"python"`` or ``"#python"``.
        """
        parts = [self.text.strip()] if self.text.strip() else []
        if self.hashtags:
            parts.append(" ".join(_prefixed(tag, "#") for tag in self.hashtags))
        if self.mentions:
            parts.append(" ".join(_prefixed(m, "@") for m in self.mentions))
        return "\n\n".join(parts)

    def media_of_kind(self, kind: MediaKind) -> list[MediaAsset]:
        return [m for m in self.media if m.kind == kind]

    @property
    def has_text(self) -> bool:
        return bool(self.text.strip())


def _prefixed(value: str, prefix: str) -> str:
    value = value.strip()
    return value if value.startswith(prefix) else f"{prefix}{value}"


# =============================================================================
# CONNECTIONS
# =============================================================================

class ConnectionRecord(BaseModel):
    """Stored credentials handed over by the external credential store."""

    provider: Provider
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    token_secret: Optional[str] = None
    expires_at: Optional[datetime] = None
    account_id: Optional[str] = None
    account_name: Optional[str] = None
    scopes: list[str] = Field(default_factory=list)


@dataclass(frozen=True)
class PlatformConnection:
    """A resolved, scheme-tagged connection. Read-only to this package."""

    provider: Provider
    access_token: str
    scheme: AuthScheme
    refresh_token: Optional[str] = None
    token_secret: Optional[str] = None
    expires_at: Optional[datetime] = None
    account_id: Optional[str] = None
    account_name: Optional[str] = None

    def is_usable(self, now: datetime) -> bool:
        """A connection is usable only while ``now < expires_at``."""
        if self.expires_at is None:
            return True
        return _ensure_aware(now) < _ensure_aware(self.expires_at)


# =============================================================================
# UPLOAD SESSION
# =============================================================================

@dataclass
class UploadSession:
    """Transient per-asset upload state. Never persisted."""

    asset_id: str
    total_bytes: int
    media_id: Optional[str] = None
    bytes_transferred: int = 0
    state: UploadState = UploadState.CREATED
    last_status: Optional[dict[str, Any]] = None
    attempts: int = 0
    segments_sent: list[int] = field(default_factory=list)

    def advance(self, state: UploadState) -> None:
        self.state = state
