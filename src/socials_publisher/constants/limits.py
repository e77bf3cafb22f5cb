"""Limit constants for the socials publisher.

This module contains all limits and constraints:
- Content length limits per provider
- Media counts, sizes, formats and durations per provider
- Chunked upload and processing-status polling settings
- Request timeouts

AI CONTEXT:
-----------
These limits are derived from the providers' publishing requirements
(Graph API, X API, TikTok Content Posting API, Amazon Posts). Exceeding
them results in rejected content, so the validator checks them before any
network call is made.

MODIFICATION GUIDE:
------------------
- <PROVIDER>_* limits: Check provider documentation before changing
- CHUNK_* settings: X rejects APPEND segments larger than 5MB
- POLL_* settings: Bound the whole processing wait, not only one attempt
"""

from typing import Final

_MB: Final[int] = 1024 * 1024

# =============================================================================
# FACEBOOK LIMITS
# =============================================================================

FACEBOOK_TEXT_MAX_LENGTH: Final[int] = 63206
"""Maximum message length for a page feed post."""

FACEBOOK_MEDIA_MAX_COUNT: Final[int] = 30
"""Maximum number of media items attached to one request."""

FACEBOOK_IMAGE_MAX_SIZE: Final[int] = 4 * _MB
"""Maximum image size in bytes."""

FACEBOOK_VIDEO_MAX_SIZE: Final[int] = 10 * 1024 * _MB
"""Maximum video size in bytes (10GB)."""

FACEBOOK_VIDEO_MAX_DURATION: Final[float] = 240.0
"""Maximum video duration in seconds."""

FACEBOOK_IMAGE_FORMATS: Final[frozenset[str]] = frozenset(
    {"image/jpeg", "image/png", "image/gif"}
)
FACEBOOK_VIDEO_FORMATS: Final[frozenset[str]] = frozenset({"video/mp4"})


# =============================================================================
# INSTAGRAM LIMITS
# =============================================================================

INSTAGRAM_CAPTION_MAX_LENGTH: Final[int] = 2200
"""Maximum caption length in characters for Instagram posts."""

INSTAGRAM_HASHTAG_MAX_COUNT: Final[int] = 30
"""Maximum number of hashtags allowed per post."""

INSTAGRAM_CAROUSEL_MAX_SLIDES: Final[int] = 10
"""Maximum slides in a carousel post."""

INSTAGRAM_IMAGE_MAX_SIZE: Final[int] = 8 * _MB
"""Maximum image size in bytes."""

INSTAGRAM_VIDEO_MAX_SIZE: Final[int] = 100 * _MB
"""Maximum video size in bytes."""

INSTAGRAM_VIDEO_MAX_DURATION: Final[float] = 60.0
"""Maximum video duration in seconds for feed videos."""

INSTAGRAM_ASPECT_RATIO_MIN: Final[float] = 0.8
"""Minimum width/height ratio for images (4:5 portrait)."""

INSTAGRAM_ASPECT_RATIO_MAX: Final[float] = 1.91
"""Maximum width/height ratio for images (1.91:1 landscape)."""

INSTAGRAM_IMAGE_FORMATS: Final[frozenset[str]] = frozenset({"image/jpeg", "image/png"})
INSTAGRAM_VIDEO_FORMATS: Final[frozenset[str]] = frozenset({"video/mp4"})


# =============================================================================
# TWITTER / X LIMITS
# =============================================================================

TWITTER_TEXT_MAX_LENGTH: Final[int] = 280
"""Maximum tweet length in characters."""

TWITTER_IMAGE_MAX_COUNT: Final[int] = 4
"""Maximum images per tweet (images cannot be combined with a video)."""

TWITTER_VIDEO_MAX_COUNT: Final[int] = 1
"""Maximum videos per tweet."""

TWITTER_IMAGE_MAX_SIZE: Final[int] = 5 * _MB
"""Maximum image size in bytes."""

TWITTER_GIF_MAX_SIZE: Final[int] = 15 * _MB
"""Maximum animated GIF size in bytes."""

TWITTER_VIDEO_MAX_SIZE: Final[int] = 512 * _MB
"""Maximum video size in bytes."""

TWITTER_VIDEO_MAX_DURATION: Final[float] = 140.0
"""Maximum video duration in seconds."""

TWITTER_IMAGE_FORMATS: Final[frozenset[str]] = frozenset(
    {"image/jpeg", "image/png", "image/gif", "image/webp"}
)
TWITTER_VIDEO_FORMATS: Final[frozenset[str]] = frozenset({"video/mp4"})

TWITTER_MEDIA_OMITTED_NOTICE: Final[str] = "[Media omitted: reconnect X with media permissions]"
"""Annotation appended to tweets posted without their media."""


# =============================================================================
# TIKTOK LIMITS
# =============================================================================

TIKTOK_TITLE_MAX_LENGTH: Final[int] = 150
"""Maximum caption length in characters, checked on the formatted text."""

TIKTOK_HASHTAG_MAX_COUNT: Final[int] = 100
"""Maximum number of hashtags per post."""

TIKTOK_PHOTO_MAX_COUNT: Final[int] = 35
"""Maximum images in a photo post."""

TIKTOK_VIDEO_MAX_SIZE: Final[int] = 287 * _MB
"""Maximum video size in bytes."""

TIKTOK_PHOTO_MAX_SIZE: Final[int] = 50 * _MB
"""Maximum photo size in bytes."""

TIKTOK_VIDEO_MAX_DURATION: Final[float] = 600.0
"""Absolute maximum video duration in seconds (creator info may lower it)."""

TIKTOK_DEFAULT_CREATOR_MAX_DURATION: Final[int] = 300
"""Creator max duration assumed when creator info omits it."""

TIKTOK_VIDEO_FORMATS: Final[frozenset[str]] = frozenset(
    {
        "video/mp4",
        "video/quicktime",
        "video/mpeg",
        "video/x-flv",
        "video/webm",
        "video/3gpp",
    }
)
TIKTOK_PHOTO_FORMATS: Final[frozenset[str]] = frozenset(
    {"image/jpeg", "image/jpg", "image/gif", "image/tiff", "image/bmp", "image/webp"}
)


# =============================================================================
# AMAZON POSTS LIMITS
# =============================================================================

AMAZON_HEADLINE_MAX_LENGTH: Final[int] = 80
"""Maximum headline length; longer text is cut when used as the headline."""

AMAZON_BODY_MAX_LENGTH: Final[int] = 500
"""Maximum body text length; the body is cut to this length."""

AMAZON_PRODUCTS_MAX_COUNT: Final[int] = 5
"""Maximum products linked to one post."""

AMAZON_TAGS_MAX_COUNT: Final[int] = 10
"""Maximum tags sent with one post."""

AMAZON_IMAGE_MAX_SIZE: Final[int] = 500 * _MB
"""Maximum image size in bytes."""

AMAZON_VIDEO_MAX_SIZE: Final[int] = 100 * _MB
"""Maximum video size in bytes."""

AMAZON_IMAGE_FORMATS: Final[frozenset[str]] = frozenset(
    {"image/jpeg", "image/png", "image/webp"}
)
AMAZON_VIDEO_FORMATS: Final[frozenset[str]] = frozenset(
    {"video/mp4", "video/quicktime", "video/x-msvideo"}
)

AMAZON_ASIN_PATTERN: Final[str] = r"^[A-Z0-9]{10}$"
"""Format of a catalog reference (ASIN)."""


# =============================================================================
# CHUNKED UPLOAD
# =============================================================================

CHUNK_SIZE_BYTES: Final[int] = 5 * _MB
"""Size of each APPEND segment."""

CHUNK_THRESHOLD_BYTES: Final[int] = TWITTER_IMAGE_MAX_SIZE // 2
"""Payloads larger than this use the chunked protocol."""

CHUNK_THRESHOLD_GIF_BYTES: Final[int] = TWITTER_GIF_MAX_SIZE // 2
"""Chunked threshold for animated GIFs."""


# =============================================================================
# PROCESSING STATUS POLLING
# =============================================================================

POLL_MAX_ATTEMPTS: Final[int] = 20
"""Maximum STATUS queries before giving up."""

POLL_DEFAULT_INTERVAL_SECONDS: Final[float] = 5.0
"""Wait between STATUS queries when the provider suggests none."""

POLL_MAX_INTERVAL_SECONDS: Final[float] = 30.0
"""Upper clamp for provider-suggested waits."""


# =============================================================================
# TIMEOUTS
# =============================================================================

REQUEST_TIMEOUT_SECONDS: Final[float] = 60.0
"""Per-call timeout for provider API requests."""

UPLOAD_TIMEOUT_SECONDS: Final[float] = 300.0
"""Per-call timeout for media transfer requests."""
