"""Global constants package for the socials publisher.

PACKAGE STRUCTURE:
-----------------
- limits.py   : Provider content constraints, chunking, polling, timeouts
- status.py   : Provider ids, auth schemes, upload states, error kinds

USAGE EXAMPLES:
--------------
    from socials_publisher.constants import Provider, ErrorKind
    from socials_publisher.constants import CHUNK_SIZE_BYTES, POLL_MAX_ATTEMPTS

AI CONTEXT:
-----------
This package is the single source of truth for all magic numbers used by
the validator and the upload pipeline. Add new ones here rather than inline.
"""

# =============================================================================
# LIMITS
# =============================================================================
from .limits import (
    # Facebook
    FACEBOOK_TEXT_MAX_LENGTH,
    FACEBOOK_MEDIA_MAX_COUNT,
    FACEBOOK_IMAGE_MAX_SIZE,
    FACEBOOK_VIDEO_MAX_SIZE,
    FACEBOOK_VIDEO_MAX_DURATION,
    FACEBOOK_IMAGE_FORMATS,
    FACEBOOK_VIDEO_FORMATS,
    # Instagram
    INSTAGRAM_CAPTION_MAX_LENGTH,
    INSTAGRAM_HASHTAG_MAX_COUNT,
    INSTAGRAM_CAROUSEL_MAX_SLIDES,
    INSTAGRAM_IMAGE_MAX_SIZE,
    INSTAGRAM_VIDEO_MAX_SIZE,
    INSTAGRAM_VIDEO_MAX_DURATION,
    INSTAGRAM_ASPECT_RATIO_MIN,
    INSTAGRAM_ASPECT_RATIO_MAX,
    INSTAGRAM_IMAGE_FORMATS,
    INSTAGRAM_VIDEO_FORMATS,
    # Twitter
    TWITTER_TEXT_MAX_LENGTH,
    TWITTER_IMAGE_MAX_COUNT,
    TWITTER_VIDEO_MAX_COUNT,
    TWITTER_IMAGE_MAX_SIZE,
    TWITTER_GIF_MAX_SIZE,
    TWITTER_VIDEO_MAX_SIZE,
    TWITTER_VIDEO_MAX_DURATION,
    TWITTER_IMAGE_FORMATS,
    TWITTER_VIDEO_FORMATS,
    TWITTER_MEDIA_OMITTED_NOTICE,
    # TikTok
    TIKTOK_TITLE_MAX_LENGTH,
    TIKTOK_HASHTAG_MAX_COUNT,
    TIKTOK_PHOTO_MAX_COUNT,
    TIKTOK_VIDEO_MAX_SIZE,
    TIKTOK_PHOTO_MAX_SIZE,
    TIKTOK_VIDEO_MAX_DURATION,
    TIKTOK_DEFAULT_CREATOR_MAX_DURATION,
    TIKTOK_VIDEO_FORMATS,
    TIKTOK_PHOTO_FORMATS,
    # Amazon
    AMAZON_HEADLINE_MAX_LENGTH,
    AMAZON_BODY_MAX_LENGTH,
    AMAZON_PRODUCTS_MAX_COUNT,
    AMAZON_TAGS_MAX_COUNT,
    AMAZON_IMAGE_MAX_SIZE,
    AMAZON_VIDEO_MAX_SIZE,
    AMAZON_IMAGE_FORMATS,
    AMAZON_VIDEO_FORMATS,
    AMAZON_ASIN_PATTERN,
    # Chunked upload
    CHUNK_SIZE_BYTES,
    CHUNK_THRESHOLD_BYTES,
    CHUNK_THRESHOLD_GIF_BYTES,
    # Polling
    POLL_MAX_ATTEMPTS,
    POLL_DEFAULT_INTERVAL_SECONDS,
    POLL_MAX_INTERVAL_SECONDS,
    # Timeouts
    REQUEST_TIMEOUT_SECONDS,
    UPLOAD_TIMEOUT_SECONDS,
)

# =============================================================================
# STATUS ENUMS
# =============================================================================
from .status import (
    Provider,
    AuthScheme,
    MediaKind,
    TikTokPostType,
    UploadState,
    ProcessingState,
    ContainerStatus,
    ErrorKind,
    ERROR_HTTP_STATUS,
)

__all__ = [
    # Facebook
    "FACEBOOK_TEXT_MAX_LENGTH",
    "FACEBOOK_MEDIA_MAX_COUNT",
    "FACEBOOK_IMAGE_MAX_SIZE",
    "FACEBOOK_VIDEO_MAX_SIZE",
    "FACEBOOK_VIDEO_MAX_DURATION",
    "FACEBOOK_IMAGE_FORMATS",
    "FACEBOOK_VIDEO_FORMATS",
    # Instagram
    "INSTAGRAM_CAPTION_MAX_LENGTH",
    "INSTAGRAM_HASHTAG_MAX_COUNT",
    "INSTAGRAM_CAROUSEL_MAX_SLIDES",
    "INSTAGRAM_IMAGE_MAX_SIZE",
    "INSTAGRAM_VIDEO_MAX_SIZE",
    "INSTAGRAM_VIDEO_MAX_DURATION",
    "INSTAGRAM_ASPECT_RATIO_MIN",
    "INSTAGRAM_ASPECT_RATIO_MAX",
    "INSTAGRAM_IMAGE_FORMATS",
    "INSTAGRAM_VIDEO_FORMATS",
    # Twitter
    "TWITTER_TEXT_MAX_LENGTH",
    "TWITTER_IMAGE_MAX_COUNT",
    "TWITTER_VIDEO_MAX_COUNT",
    "TWITTER_IMAGE_MAX_SIZE",
    "TWITTER_GIF_MAX_SIZE",
    "TWITTER_VIDEO_MAX_SIZE",
    "TWITTER_VIDEO_MAX_DURATION",
    "TWITTER_IMAGE_FORMATS",
    "TWITTER_VIDEO_FORMATS",
    "TWITTER_MEDIA_OMITTED_NOTICE",
    # TikTok
    "TIKTOK_TITLE_MAX_LENGTH",
    "TIKTOK_HASHTAG_MAX_COUNT",
    "TIKTOK_PHOTO_MAX_COUNT",
    "TIKTOK_VIDEO_MAX_SIZE",
    "TIKTOK_PHOTO_MAX_SIZE",
    "TIKTOK_VIDEO_MAX_DURATION",
    "TIKTOK_DEFAULT_CREATOR_MAX_DURATION",
    "TIKTOK_VIDEO_FORMATS",
    "TIKTOK_PHOTO_FORMATS",
    # Amazon
    "AMAZON_HEADLINE_MAX_LENGTH",
    "AMAZON_BODY_MAX_LENGTH",
    "AMAZON_PRODUCTS_MAX_COUNT",
    "AMAZON_TAGS_MAX_COUNT",
    "AMAZON_IMAGE_MAX_SIZE",
    "AMAZON_VIDEO_MAX_SIZE",
    "AMAZON_IMAGE_FORMATS",
    "AMAZON_VIDEO_FORMATS",
    "AMAZON_ASIN_PATTERN",
    # Chunked upload
    "CHUNK_SIZE_BYTES",
    "CHUNK_THRESHOLD_BYTES",
    "CHUNK_THRESHOLD_GIF_BYTES",
    # Polling
    "POLL_MAX_ATTEMPTS",
    "POLL_DEFAULT_INTERVAL_SECONDS",
    "POLL_MAX_INTERVAL_SECONDS",
    # Timeouts
    "REQUEST_TIMEOUT_SECONDS",
    "UPLOAD_TIMEOUT_SECONDS",
    # Status
    "Provider",
    "AuthScheme",
    "MediaKind",
    "TikTokPostType",
    "UploadState",
    "ProcessingState",
    "ContainerStatus",
    "ErrorKind",
    "ERROR_HTTP_STATUS",
]
