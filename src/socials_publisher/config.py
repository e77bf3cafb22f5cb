"""Publisher configuration loading and validation."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    CHUNK_SIZE_BYTES,
    CHUNK_THRESHOLD_BYTES,
    CHUNK_THRESHOLD_GIF_BYTES,
    POLL_DEFAULT_INTERVAL_SECONDS,
    POLL_MAX_ATTEMPTS,
    POLL_MAX_INTERVAL_SECONDS,
    REQUEST_TIMEOUT_SECONDS,
    UPLOAD_TIMEOUT_SECONDS,
)

# Load .env file
load_dotenv()


class GraphAPIConfig(BaseModel):
    """Graph API settings shared by Facebook and Instagram."""

    base_url: str = "https://graph.facebook.com"
    api_version: str = "v23.0"

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.api_version}"


class TwitterConfig(BaseModel):
    """X API endpoints and app credentials.

    The consumer key/secret belong to the app, not the user, so they are read
    from the environment rather than from a connection record.
    """

    api_base_url: str = "https://api.x.com"
    upload_url: str = "https://upload.twitter.com/1.1/media/upload.json"
    metadata_url: str = "https://upload.twitter.com/1.1/media/metadata/create.json"
    consumer_key: str | None = None
    consumer_key_env: str | None = "TWITTER_API_KEY"
    consumer_secret: str | None = None
    consumer_secret_env: str | None = "TWITTER_API_SECRET"

    def get_consumer_key(self) -> str | None:
        """Get consumer key from config or environment."""
        if self.consumer_key:
            return self.consumer_key
        if self.consumer_key_env:
            return os.getenv(self.consumer_key_env)
        return None

    def get_consumer_secret(self) -> str | None:
        """Get consumer secret from config or environment."""
        if self.consumer_secret:
            return self.consumer_secret
        if self.consumer_secret_env:
            return os.getenv(self.consumer_secret_env)
        return None


class TikTokConfig(BaseModel):
    """TikTok Content Posting API settings."""

    base_url: str = "https://open.tiktokapis.com"
    profile_url: str = "https://www.tiktok.com"


class AmazonMarketplace(BaseModel):
    """One Amazon marketplace."""

    id: str
    name: str
    country_code: str
    currency: str
    domain: str
    endpoint: str


AMAZON_MARKETPLACES: dict[str, AmazonMarketplace] = {
    m.id: m
    for m in (
        AmazonMarketplace(
            id="ATVPDKIKX0DER", name="Amazon.com", country_code="US", currency="USD",
            domain="https://www.amazon.com", endpoint="https://sellingpartnerapi-na.amazon.com",
        ),
        AmazonMarketplace(
            id="A2EUQ1WTGCTBG2", name="Amazon.ca", country_code="CA", currency="CAD",
            domain="https://www.amazon.ca", endpoint="https://sellingpartnerapi-na.amazon.com",
        ),
        AmazonMarketplace(
            id="A1PA6795UKMFR9", name="Amazon.de", country_code="DE", currency="EUR",
            domain="https://www.amazon.de", endpoint="https://sellingpartnerapi-eu.amazon.com",
        ),
        AmazonMarketplace(
            id="A1RKKUPIHCS9HS", name="Amazon.es", country_code="ES", currency="EUR",
            domain="https://www.amazon.es", endpoint="https://sellingpartnerapi-eu.amazon.com",
        ),
        AmazonMarketplace(
            id="A13V1IB3VIYZZH", name="Amazon.fr", country_code="FR", currency="EUR",
            domain="https://www.amazon.fr", endpoint="https://sellingpartnerapi-eu.amazon.com",
        ),
    )
}


class AmazonConfig(BaseModel):
    """Amazon SP-API settings."""

    marketplace_id: str = "ATVPDKIKX0DER"
    endpoint: str | None = None  # overrides the marketplace's regional endpoint
    catalog_api_version: str = "2022-04-01"
    posts_api_version: str = "2023-01-01"

    @property
    def marketplace(self) -> AmazonMarketplace:
        try:
            return AMAZON_MARKETPLACES[self.marketplace_id]
        except KeyError:
            raise ValueError(f"Unsupported marketplace: {self.marketplace_id}") from None

    def get_endpoint(self) -> str:
        return self.endpoint or self.marketplace.endpoint


class PublisherSettings(BaseSettings):
    """Top-level publisher settings.

    Values come from, in order of precedence: constructor arguments,
    SOCIALS_PUBLISHER_* environment variables, then the defaults below.
    Nested sections use a double underscore, e.g.
    SOCIALS_PUBLISHER_AMAZON__MARKETPLACE_ID=A1PA6795UKMFR9.
    """

    model_config = SettingsConfigDict(
        env_prefix="SOCIALS_PUBLISHER_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    request_timeout_seconds: float = REQUEST_TIMEOUT_SECONDS
    upload_timeout_seconds: float = UPLOAD_TIMEOUT_SECONDS
    chunk_size_bytes: int = CHUNK_SIZE_BYTES
    chunk_threshold_bytes: int = CHUNK_THRESHOLD_BYTES
    chunk_threshold_gif_bytes: int = CHUNK_THRESHOLD_GIF_BYTES
    poll_max_attempts: int = POLL_MAX_ATTEMPTS
    poll_default_interval_seconds: float = POLL_DEFAULT_INTERVAL_SECONDS
    poll_max_interval_seconds: float = POLL_MAX_INTERVAL_SECONDS

    facebook: GraphAPIConfig = Field(default_factory=GraphAPIConfig)
    instagram: GraphAPIConfig = Field(default_factory=GraphAPIConfig)
    twitter: TwitterConfig = Field(default_factory=TwitterConfig)
    tiktok: TikTokConfig = Field(default_factory=TikTokConfig)
    amazon: AmazonConfig = Field(default_factory=AmazonConfig)


def load_settings(config_path: Path | None = None) -> PublisherSettings:
    """Load publisher settings, applying an optional YAML override file."""
    if config_path is None:
        # Default to config/publisher.yaml relative to project root
        config_path = Path(__file__).parent.parent.parent / "config" / "publisher.yaml"

    if not config_path.exists():
        return PublisherSettings()

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return PublisherSettings(**data)
