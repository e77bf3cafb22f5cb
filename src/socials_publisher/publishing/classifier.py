"""Maps provider errors to the canonical error taxonomy.

Adapters pass provider failures through untouched; this module is the only
place that interprets numeric codes, string codes, message substrings and
HTTP statuses.

Rules are evaluated in order (auth, rate limit, permission, media). Each
rule matches on a provider code or a message substring, so an earlier rule
wins over a later one even when only the later rule knows the code. HTTP
status is consulted only when no rule matched that way. Anything unmatched
is INTERNAL_ERROR with the original message kept.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from ..constants import ErrorKind
from .exceptions import ProviderAPIError, PublishingError

_logger = logging.getLogger("publisher")


@dataclass(frozen=True)
class ClassificationRule:
    """One ordered entry of the classification table."""

    kind: ErrorKind
    codes: frozenset[int | str] = frozenset()
    substrings: tuple[str, ...] = ()
    http_statuses: frozenset[int] = frozenset()

    def matches_code(self, code: int | str | None) -> bool:
        if code is None:
            return False
        if isinstance(code, str):
            return code in self.codes or code.lower() in self.codes
        return code in self.codes

    def matches_message(self, message: str) -> bool:
        lowered = message.lower()
        return any(s in lowered for s in self.substrings)

    def matches_status(self, status: int | None) -> bool:
        return status is not None and status in self.http_statuses


CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        kind=ErrorKind.AUTH_ERROR,
        # Graph: 190 invalid token, 102 session, 104 signature; X: 32, 89;
        # TikTok: access_token_invalid
        codes=frozenset({190, 102, 104, 32, 89, 215, "access_token_invalid", "unauthorized"}),
        substrings=("auth", "token", "login", "unauthorized"),
        http_statuses=frozenset({401}),
    ),
    ClassificationRule(
        kind=ErrorKind.RATE_LIMIT,
        # Graph: 4, 17, 613, 80001; X: 88, 185
        codes=frozenset({
            4, 17, 613, 80001, 88, 185,
            "rate_limit_exceeded",
            "spam_risk_too_many_posts",
            "spam_risk_too_many_pending_share",
            "quotaexceeded",
        }),
        substrings=("rate limit", "throttle", "too many"),
        http_statuses=frozenset({429}),
    ),
    ClassificationRule(
        kind=ErrorKind.PERMISSION_ERROR,
        codes=frozenset({10, 200, 803, "scope_not_authorized", "forbidden"}),
        substrings=("permission", "access", "denied", "forbidden"),
        http_statuses=frozenset({403}),
    ),
    ClassificationRule(
        kind=ErrorKind.MEDIA_ERROR,
        codes=frozenset({324, 2207001, 2207003, 2207026, 2207032, "file_format_check_failed"}),
        substrings=("media", "image", "video"),
    ),
)


@dataclass(frozen=True)
class ClassifiedError:
    """Canonical view of a failure."""

    kind: ErrorKind
    message: str
    code: Optional[int | str] = None
    details: Optional[dict[str, Any]] = None

    @property
    def status(self) -> int:
        return self.kind.http_status


def _diagnostics(error: BaseException) -> tuple[int | str | None, int | None, str]:
    """Extract (code, http_status, message) from any exception."""
    if isinstance(error, ProviderAPIError):
        return error.error_code, error.http_status, error.message
    if isinstance(error, httpx.HTTPStatusError):
        return None, error.response.status_code, str(error)
    message = str(error) or type(error).__name__
    return None, None, message


def classify_raw(
    code: int | str | None,
    message: str,
    http_status: int | None = None,
) -> ErrorKind:
    """Apply the rule table to raw diagnostic fields."""
    for rule in CLASSIFICATION_RULES:
        if rule.matches_code(code) or rule.matches_message(message):
            return rule.kind
    for rule in CLASSIFICATION_RULES:
        if rule.matches_status(http_status):
            return rule.kind
    return ErrorKind.INTERNAL_ERROR


def classify(error: BaseException, provider: str | None = None) -> ClassifiedError:
    """Map an exception raised during a publish to its canonical kind.

    Errors that already know their kind (validation, resolution, media
    pipeline, malformed responses) keep it.
    """
    if isinstance(error, PublishingError):
        return ClassifiedError(
            kind=error.kind,
            message=error.message,
            details=dict(error.details) or None,
        )

    code, http_status, message = _diagnostics(error)
    kind = classify_raw(code, message, http_status)

    details: dict[str, Any] = {}
    if isinstance(error, ProviderAPIError):
        details.update(error.details)
        if error.error_subcode is not None:
            details["error_subcode"] = error.error_subcode
        if error.log_id:
            details["log_id"] = error.log_id
    if http_status is not None:
        details["http_status"] = http_status
    if code is not None:
        details["error_code"] = code

    if kind == ErrorKind.INTERNAL_ERROR:
        _logger.warning(f"Unclassified {provider or 'provider'} error: {type(error).__name__}: {message}")

    return ClassifiedError(kind=kind, message=message, code=code, details=details or None)
