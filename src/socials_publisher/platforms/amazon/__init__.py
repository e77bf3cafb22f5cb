"""Amazon Posts platform implementation."""

from .client import AmazonClient, CatalogProduct
from .publisher import AmazonPublisher

__all__ = ["AmazonClient", "AmazonPublisher", "CatalogProduct"]
