"""Publishing core: connections, validation, uploads, error classification.

The orchestrator lives in ``socials_publisher.publishing.orchestrator`` and is
imported from there, since it depends on the provider adapters, which in
turn depend on this package.
"""

from .classifier import ClassifiedError, classify
from .connections import resolve
from .exceptions import (
    ConnectionResolutionError,
    ContentValidationError,
    MediaProcessingFailed,
    MediaProcessingTimeout,
    MediaUploadError,
    ProviderAPIError,
    PublishingError,
)
from .models import (
    BrandContent,
    ConnectionRecord,
    CreatorPostSettings,
    MediaAsset,
    PlatformConnection,
    PostContent,
    PostExtensions,
)
from .validator import ValidationReport, validate

__all__ = [
    "BrandContent",
    "ClassifiedError",
    "ConnectionRecord",
    "ConnectionResolutionError",
    "ContentValidationError",
    "CreatorPostSettings",
    "MediaAsset",
    "MediaProcessingFailed",
    "MediaProcessingTimeout",
    "MediaUploadError",
    "PlatformConnection",
    "PostContent",
    "PostExtensions",
    "ProviderAPIError",
    "PublishingError",
    "ValidationReport",
    "classify",
    "resolve",
    "validate",
]
