"""Core utilities for CLI - console helpers and shared types."""

from .console import console, print_error, print_info, print_success, print_warning
from .types import Failure, Result, Success

__all__ = [
    # Types
    "Result",
    "Success",
    "Failure",
    # Console
    "console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
