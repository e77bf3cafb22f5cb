"""Command-line interface for the publisher.

- core/: Shared console helpers and Result types
- publish/: publish, validate and providers commands

Usage:
    python -m socials_publisher.cli --help
    socials-publish publish twitter --connection conn.json --content post.json
"""

from .app import app, main

__all__ = ["app", "main"]
