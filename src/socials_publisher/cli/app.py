"""Typer app configuration and logging setup."""

from __future__ import annotations

import logging
import warnings
from pathlib import Path

import typer
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Suppress httpx/asyncio cleanup warnings
warnings.filterwarnings("ignore", message=".*Event loop is closed.*")
warnings.filterwarnings("ignore", category=ResourceWarning)

# Loggers written to logs/publisher_api.log
API_LOGGERS = [
    "publisher",
    "facebook_api",
    "instagram_api",
    "twitter_api",
    "tiktok_api",
    "amazon_api",
]

# Create Typer app
app = typer.Typer(
    name="socials-publish",
    help="Publish posts to Facebook, Instagram, X, TikTok and Amazon",
    add_completion=False,
)


def register_commands() -> None:
    """Register all commands from feature modules."""
    from .publish.commands import creator_info, providers, publish, publish_many, validate

    app.command(name="publish")(publish)
    app.command(name="validate")(validate)
    app.command(name="publish-many")(publish_many)
    app.command(name="creator-info")(creator_info)
    app.command(name="providers")(providers)


def setup_logging(log_dir: Path | None = None) -> None:
    """Configure logging for CLI.

    - Suppresses console output from libraries
    - Sends provider API loggers to a single log file
    """
    if log_dir is None:
        log_dir = Path(__file__).parent.parent.parent.parent / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    # Remove any default console handlers from root logger
    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.setLevel(logging.CRITICAL)

    # Suppress loggers that might print to console
    for logger_name in ["httpx", "httpcore", "asyncio"]:
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.WARNING)
        logger.propagate = False

    file_handler = logging.FileHandler(log_dir / "publisher_api.log", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(name)s | %(levelname)s | %(message)s")
    )

    for logger_name in API_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
        logger.handlers = []
        logger.addHandler(file_handler)


# Initialize logging on module import
setup_logging()

# Register all commands
register_commands()


def main() -> None:
    """CLI entry point."""
    app()
