"""Exceptions raised while resolving, validating and publishing content.

Errors raised by this package fall in two groups:

- ``PublishingError`` subclasses already carry a canonical ``ErrorKind``
  (resolution failures, validation failures, media pipeline failures,
  malformed provider responses).
- ``ProviderAPIError`` carries the provider's raw diagnostics (numeric or
  string code, subcode, HTTP status, message) and no kind; the error
  classifier maps it to the canonical taxonomy.
"""

from __future__ import annotations

from typing import Any

from ..constants import ErrorKind


class PublishingError(Exception):
    """Base class for errors with a known canonical kind."""

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details or {}


class ConnectionResolutionError(PublishingError):
    """No usable connection for the requested provider."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


class ContentValidationError(PublishingError):
    """Content breaks one or more provider constraints."""

    kind = ErrorKind.CONTENT_ERROR

    def __init__(self, violations: list[str], message: str | None = None):
        super().__init__(
            message or "; ".join(violations),
            details={"violations": list(violations)},
        )
        self.violations = list(violations)


class MediaUploadError(PublishingError):
    """A media asset could not be transferred or processed."""

    kind = ErrorKind.MEDIA_ERROR

    def __init__(
        self,
        message: str,
        asset_id: str | None = None,
        media_id: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.asset_id = asset_id
        self.media_id = media_id


class MediaProcessingFailed(MediaUploadError):
    """The provider reported that processing of uploaded media failed."""


class MediaProcessingTimeout(MediaUploadError):
    """Processing did not reach a terminal state within the polling budget."""


class MalformedResponseError(PublishingError):
    """A provider response was missing a field the protocol requires."""

    kind = ErrorKind.API_ERROR


class ConfigurationError(PublishingError):
    """Publisher configuration is incomplete (e.g. missing app credentials)."""

    kind = ErrorKind.INTERNAL_ERROR


class ProviderAPIError(Exception):
    """Raw error returned by a provider API."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        error_code: int | str | None = None,
        error_subcode: int | None = None,
        http_status: int | None = None,
        log_id: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.error_code = error_code
        self.error_subcode = error_subcode
        self.http_status = http_status
        self.log_id = log_id
        self.details: dict[str, Any] = details or {}

    def __str__(self) -> str:
        if self.error_code is not None:
            return f"{self.message} (code {self.error_code})"
        return self.message
