"""Publish feature - dispatch and validation commands."""

from .commands import creator_info, providers, publish, publish_many, validate
from .display import show_publish_result, show_validation_report

__all__ = [
    "creator_info",
    "providers",
    "publish",
    "publish_many",
    "validate",
    "show_publish_result",
    "show_validation_report",
]
