"""Status enums and state constants for the socials publisher.

This module contains all enums and state definitions:
- Provider identifiers and auth schemes
- Media kinds
- Upload session and processing-status states
- Canonical error kinds and their HTTP statuses

AI CONTEXT:
-----------
UploadState is the state machine for one chunked upload:
  CREATED -> INITIALIZED -> APPENDING -> FINALIZED -> PROCESSING -> SUCCEEDED
                                                          |
                                                          v
                                                        FAILED

ProcessingState values are the provider's own STATUS vocabulary.

MODIFICATION GUIDE:
------------------
- Provider is a closed set: adding one requires an adapter in platforms/
- Add new enum values at the END to maintain backwards compatibility
- ERROR_HTTP_STATUS must cover every ErrorKind
"""

from enum import Enum
from typing import Final


# =============================================================================
# PROVIDERS
# =============================================================================

class Provider(str, Enum):
    """Supported publishing providers."""

    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"
    TWITTER = "twitter"
    TIKTOK = "tiktok"
    AMAZON = "amazon"


class AuthScheme(str, Enum):
    """Credential shape used for provider requests.

    PRIMARY is a single bearer-style token; SECONDARY is a token plus
    secret used for signed requests (OAuth 1.0a).
    """

    PRIMARY = "primary"
    SECONDARY = "secondary"


class MediaKind(str, Enum):
    """Kind of a media asset."""

    IMAGE = "image"
    VIDEO = "video"


class TikTokPostType(str, Enum):
    """Post types accepted by the TikTok publisher."""

    VIDEO = "video"
    PHOTO = "photo"


# =============================================================================
# UPLOAD STATES
# =============================================================================

class UploadState(str, Enum):
    """State of a transient upload session."""

    CREATED = "created"
    INITIALIZED = "initialized"
    APPENDING = "appending"
    FINALIZED = "finalized"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ProcessingState(str, Enum):
    """Processing state reported by a media STATUS query."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ProcessingState.SUCCEEDED, ProcessingState.FAILED)


class ContainerStatus(str, Enum):
    """Status codes reported for Graph API media containers."""

    IN_PROGRESS = "IN_PROGRESS"
    FINISHED = "FINISHED"
    PUBLISHED = "PUBLISHED"
    ERROR = "ERROR"
    EXPIRED = "EXPIRED"


# =============================================================================
# CANONICAL ERRORS
# =============================================================================

class ErrorKind(str, Enum):
    """Canonical error taxonomy returned to callers."""

    AUTH_ERROR = "AUTH_ERROR"
    RATE_LIMIT = "RATE_LIMIT"
    CONTENT_ERROR = "CONTENT_ERROR"
    MEDIA_ERROR = "MEDIA_ERROR"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    API_ERROR = "API_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    NOT_CONNECTED = "NOT_CONNECTED"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    @property
    def http_status(self) -> int:
        return ERROR_HTTP_STATUS[self]


ERROR_HTTP_STATUS: Final[dict[ErrorKind, int]] = {
    ErrorKind.AUTH_ERROR: 401,
    ErrorKind.RATE_LIMIT: 429,
    ErrorKind.CONTENT_ERROR: 400,
    ErrorKind.MEDIA_ERROR: 400,
    ErrorKind.PERMISSION_ERROR: 403,
    ErrorKind.API_ERROR: 500,
    ErrorKind.INTERNAL_ERROR: 500,
    ErrorKind.NOT_CONNECTED: 400,
    ErrorKind.TOKEN_EXPIRED: 401,
}
"""HTTP status for each canonical error kind."""
