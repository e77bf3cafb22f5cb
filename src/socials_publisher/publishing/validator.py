"""Per-provider content validation.

Each provider has a constraint table (``ProviderConstraints``). ``validate``
evaluates every rule of the table and returns all violations at once, in a
stable order, so callers can show a complete error list. Validation is a
pure function of its input and never touches the network.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping, Optional

from ..constants import (
    AMAZON_ASIN_PATTERN,
    AMAZON_IMAGE_FORMATS,
    AMAZON_IMAGE_MAX_SIZE,
    AMAZON_PRODUCTS_MAX_COUNT,
    AMAZON_VIDEO_FORMATS,
    AMAZON_VIDEO_MAX_SIZE,
    FACEBOOK_IMAGE_FORMATS,
    FACEBOOK_IMAGE_MAX_SIZE,
    FACEBOOK_MEDIA_MAX_COUNT,
    FACEBOOK_TEXT_MAX_LENGTH,
    FACEBOOK_VIDEO_FORMATS,
    FACEBOOK_VIDEO_MAX_DURATION,
    FACEBOOK_VIDEO_MAX_SIZE,
    INSTAGRAM_ASPECT_RATIO_MAX,
    INSTAGRAM_ASPECT_RATIO_MIN,
    INSTAGRAM_CAPTION_MAX_LENGTH,
    INSTAGRAM_CAROUSEL_MAX_SLIDES,
    INSTAGRAM_HASHTAG_MAX_COUNT,
    INSTAGRAM_IMAGE_FORMATS,
    INSTAGRAM_IMAGE_MAX_SIZE,
    INSTAGRAM_VIDEO_FORMATS,
    INSTAGRAM_VIDEO_MAX_DURATION,
    INSTAGRAM_VIDEO_MAX_SIZE,
    TIKTOK_HASHTAG_MAX_COUNT,
    TIKTOK_PHOTO_FORMATS,
    TIKTOK_PHOTO_MAX_COUNT,
    TIKTOK_PHOTO_MAX_SIZE,
    TIKTOK_TITLE_MAX_LENGTH,
    TIKTOK_VIDEO_FORMATS,
    TIKTOK_VIDEO_MAX_DURATION,
    TIKTOK_VIDEO_MAX_SIZE,
    TWITTER_GIF_MAX_SIZE,
    TWITTER_IMAGE_FORMATS,
    TWITTER_IMAGE_MAX_COUNT,
    TWITTER_IMAGE_MAX_SIZE,
    TWITTER_TEXT_MAX_LENGTH,
    TWITTER_VIDEO_FORMATS,
    TWITTER_VIDEO_MAX_COUNT,
    TWITTER_VIDEO_MAX_DURATION,
    TWITTER_VIDEO_MAX_SIZE,
    MediaKind,
    Provider,
    TikTokPostType,
)
from .models import MediaAsset, PostContent


@dataclass(frozen=True)
class ProviderConstraints:
    """Constraint table for one provider. ``None`` disables a rule."""

    provider: Provider
    max_text_length: Optional[int] = None
    max_hashtags: Optional[int] = None
    requires_media: bool = False
    max_media: Optional[int] = None
    max_per_kind: Mapping[MediaKind, int] = field(default_factory=dict)
    allow_mixed_kinds: bool = True
    formats: Mapping[MediaKind, frozenset[str]] = field(default_factory=dict)
    max_size: Mapping[MediaKind, int] = field(default_factory=dict)
    max_gif_size: Optional[int] = None
    max_video_duration: Optional[float] = None
    aspect_ratio: Optional[tuple[float, float]] = None
    requires_brand: bool = False
    min_catalog_refs: int = 0
    max_catalog_refs: Optional[int] = None
    catalog_ref_pattern: Optional[str] = None
    enforce_post_type: bool = False
    max_photos: Optional[int] = None


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of validating one payload."""

    valid: bool
    violations: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {"valid": self.valid, "violations": list(self.violations)}


CONSTRAINTS: dict[Provider, ProviderConstraints] = {
    Provider.FACEBOOK: ProviderConstraints(
        provider=Provider.FACEBOOK,
        max_text_length=FACEBOOK_TEXT_MAX_LENGTH,
        max_media=FACEBOOK_MEDIA_MAX_COUNT,
        allow_mixed_kinds=False,
        formats={MediaKind.IMAGE: FACEBOOK_IMAGE_FORMATS, MediaKind.VIDEO: FACEBOOK_VIDEO_FORMATS},
        max_size={MediaKind.IMAGE: FACEBOOK_IMAGE_MAX_SIZE, MediaKind.VIDEO: FACEBOOK_VIDEO_MAX_SIZE},
        max_video_duration=FACEBOOK_VIDEO_MAX_DURATION,
    ),
    Provider.INSTAGRAM: ProviderConstraints(
        provider=Provider.INSTAGRAM,
        max_text_length=INSTAGRAM_CAPTION_MAX_LENGTH,
        max_hashtags=INSTAGRAM_HASHTAG_MAX_COUNT,
        requires_media=True,
        max_media=INSTAGRAM_CAROUSEL_MAX_SLIDES,
        formats={MediaKind.IMAGE: INSTAGRAM_IMAGE_FORMATS, MediaKind.VIDEO: INSTAGRAM_VIDEO_FORMATS},
        max_size={MediaKind.IMAGE: INSTAGRAM_IMAGE_MAX_SIZE, MediaKind.VIDEO: INSTAGRAM_VIDEO_MAX_SIZE},
        max_video_duration=INSTAGRAM_VIDEO_MAX_DURATION,
        aspect_ratio=(INSTAGRAM_ASPECT_RATIO_MIN, INSTAGRAM_ASPECT_RATIO_MAX),
    ),
    Provider.TWITTER: ProviderConstraints(
        provider=Provider.TWITTER,
        max_text_length=TWITTER_TEXT_MAX_LENGTH,
        max_per_kind={MediaKind.IMAGE: TWITTER_IMAGE_MAX_COUNT, MediaKind.VIDEO: TWITTER_VIDEO_MAX_COUNT},
        allow_mixed_kinds=False,
        formats={MediaKind.IMAGE: TWITTER_IMAGE_FORMATS, MediaKind.VIDEO: TWITTER_VIDEO_FORMATS},
        max_size={MediaKind.IMAGE: TWITTER_IMAGE_MAX_SIZE, MediaKind.VIDEO: TWITTER_VIDEO_MAX_SIZE},
        max_gif_size=TWITTER_GIF_MAX_SIZE,
        max_video_duration=TWITTER_VIDEO_MAX_DURATION,
    ),
    Provider.TIKTOK: ProviderConstraints(
        provider=Provider.TIKTOK,
        max_text_length=TIKTOK_TITLE_MAX_LENGTH,
        max_hashtags=TIKTOK_HASHTAG_MAX_COUNT,
        requires_media=True,
        formats={MediaKind.IMAGE: TIKTOK_PHOTO_FORMATS, MediaKind.VIDEO: TIKTOK_VIDEO_FORMATS},
        max_size={MediaKind.IMAGE: TIKTOK_PHOTO_MAX_SIZE, MediaKind.VIDEO: TIKTOK_VIDEO_MAX_SIZE},
        max_video_duration=TIKTOK_VIDEO_MAX_DURATION,
        enforce_post_type=True,
        max_photos=TIKTOK_PHOTO_MAX_COUNT,
    ),
    Provider.AMAZON: ProviderConstraints(
        provider=Provider.AMAZON,
        formats={MediaKind.IMAGE: AMAZON_IMAGE_FORMATS, MediaKind.VIDEO: AMAZON_VIDEO_FORMATS},
        max_size={MediaKind.IMAGE: AMAZON_IMAGE_MAX_SIZE, MediaKind.VIDEO: AMAZON_VIDEO_MAX_SIZE},
        requires_brand=True,
        min_catalog_refs=1,
        max_catalog_refs=AMAZON_PRODUCTS_MAX_COUNT,
        catalog_ref_pattern=AMAZON_ASIN_PATTERN,
    ),
}


def get_constraints(provider: Provider | str) -> ProviderConstraints:
    return CONSTRAINTS[Provider(provider)]


def resolve_post_type(content: PostContent) -> TikTokPostType:
    """Requested post type, or the one implied by the attached media."""
    settings = content.extensions.video_settings
    if settings and settings.post_type:
        return settings.post_type
    if content.media_of_kind(MediaKind.VIDEO):
        return TikTokPostType.VIDEO
    if content.media_of_kind(MediaKind.IMAGE):
        return TikTokPostType.PHOTO
    return TikTokPostType.VIDEO


def _mb(size: int) -> str:
    return f"{size / (1024 * 1024):.1f}MB"


def validate(provider: Provider | str, content: PostContent) -> ValidationReport:
    """Check content against the provider's constraint table.

    Args:
        provider: Target provider.
        content: Payload to check.

    Returns:
        ValidationReport listing every violation found.
    """
    table = get_constraints(provider)
    name = table.provider.value
    violations: list[str] = []

    images = content.media_of_kind(MediaKind.IMAGE)
    videos = content.media_of_kind(MediaKind.VIDEO)

    # Payload shape
    if not content.has_text and not content.media:
        violations.append("Content must include text or at least one media asset")
    if table.requires_media and not content.media:
        violations.append(f"{name} requires at least one media asset")

    # Text
    text = content.formatted_text()
    if table.max_text_length is not None and len(text) > table.max_text_length:
        violations.append(
            f"Text exceeds {table.max_text_length} characters for {name} (got {len(text)})"
        )
    if table.max_hashtags is not None and len(content.hashtags) > table.max_hashtags:
        violations.append(
            f"Too many hashtags for {name}: {len(content.hashtags)} (max {table.max_hashtags})"
        )

    # Media counts
    if table.max_media is not None and len(content.media) > table.max_media:
        violations.append(
            f"Too many media items for {name}: {len(content.media)} (max {table.max_media})"
        )
    for kind, limit in table.max_per_kind.items():
        count = len(content.media_of_kind(kind))
        if count > limit:
            violations.append(f"Too many {kind.value}s for {name}: {count} (max {limit})")
    if not table.allow_mixed_kinds and images and videos:
        violations.append(f"{name} does not allow mixing images and videos in one post")

    # Per-asset checks
    for index, asset in enumerate(content.media, start=1):
        violations.extend(_check_asset(table, asset, index))

    # Provider-specific rules
    if table.enforce_post_type:
        violations.extend(_check_post_type(table, content, images, videos))
    if table.requires_brand:
        brand = content.extensions.brand
        if brand is None or not brand.brand_name.strip():
            violations.append(f"{name} posts require brand metadata")
    violations.extend(_check_catalog_refs(table, content.extensions.catalog_refs))

    return ValidationReport(valid=not violations, violations=tuple(violations))


def _check_asset(table: ProviderConstraints, asset: MediaAsset, index: int) -> list[str]:
    name = table.provider.value
    label = f"Media #{index} ({asset.id})"
    found: list[str] = []

    allowed = table.formats.get(asset.kind)
    if allowed is not None and asset.mime_type.lower() not in allowed:
        found.append(
            f"{label}: unsupported {asset.kind.value} format {asset.mime_type} for {name}"
        )

    limit = table.max_size.get(asset.kind)
    if asset.is_gif and table.max_gif_size is not None:
        limit = table.max_gif_size
    if limit is not None and asset.size > limit:
        found.append(f"{label}: file size {_mb(asset.size)} exceeds {_mb(limit)} for {name}")

    if (
        asset.kind == MediaKind.VIDEO
        and table.max_video_duration is not None
        and asset.duration is not None
        and asset.duration > table.max_video_duration
    ):
        found.append(
            f"{label}: duration {asset.duration:g}s exceeds {table.max_video_duration:g}s for {name}"
        )

    ratio = asset.aspect_ratio
    if asset.kind == MediaKind.IMAGE and table.aspect_ratio is not None and ratio is not None:
        low, high = table.aspect_ratio
        if not low <= ratio <= high:
            found.append(
                f"{label}: aspect ratio {ratio:.2f} outside {low}-{high} for {name}"
            )
    return found


def _check_post_type(
    table: ProviderConstraints,
    content: PostContent,
    images: list[MediaAsset],
    videos: list[MediaAsset],
) -> list[str]:
    name = table.provider.value
    found: list[str] = []
    if not content.has_text:
        found.append(f"{name} posts require text")

    post_type = resolve_post_type(content)
    if post_type == TikTokPostType.VIDEO:
        if len(videos) != 1:
            found.append(f"{name} video posts require exactly one video (got {len(videos)})")
        if images:
            found.append(f"{name} video posts cannot include images")
    else:
        if not images:
            found.append(f"{name} photo posts require at least one image")
        if table.max_photos is not None and len(images) > table.max_photos:
            found.append(
                f"Too many photos for {name}: {len(images)} (max {table.max_photos})"
            )
        if videos:
            found.append(f"{name} photo posts cannot include videos")
    return found


def _check_catalog_refs(table: ProviderConstraints, refs: list[str]) -> list[str]:
    name = table.provider.value
    found: list[str] = []
    if len(refs) < table.min_catalog_refs:
        found.append(f"{name} posts require at least {table.min_catalog_refs} catalog reference(s)")
    if table.max_catalog_refs is not None and len(refs) > table.max_catalog_refs:
        found.append(
            f"Too many catalog references for {name}: {len(refs)} (max {table.max_catalog_refs})"
        )
    if table.catalog_ref_pattern:
        pattern = re.compile(table.catalog_ref_pattern)
        for position, ref in enumerate(refs, start=1):
            if not pattern.match(ref):
                found.append(f"Invalid catalog reference at position {position}: {ref}")
    return found
