"""Amazon Selling Partner API client for catalog lookups and Posts."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Optional

import httpx

from ...config import AmazonConfig
from ...constants import REQUEST_TIMEOUT_SECONDS
from ...publishing.exceptions import MalformedResponseError, ProviderAPIError
from ..client import BaseAPIClient


@dataclass(frozen=True)
class CatalogProduct:
    """Display record for one catalog reference."""

    asin: str
    title: str
    brand: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    price_amount: float = 0.0
    currency: str = "USD"
    availability: str = "UNKNOWN"
    placeholder: bool = False

    @classmethod
    def placeholder_for(cls, asin: str, brand: str, currency: str = "USD") -> "CatalogProduct":
        return cls(
            asin=asin,
            title=f"Product {asin}",
            brand=brand,
            category="Unknown",
            currency=currency,
            placeholder=True,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class AmazonClient(BaseAPIClient):
    """SP-API client bound to one LWA access token."""

    logger_name = "amazon_api"

    def __init__(
        self,
        access_token: str,
        config: Optional[AmazonConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ):
        super().__init__(http_client, timeout)
        self.access_token = access_token
        self.config = config or AmazonConfig()
        self.base_url = self.config.get_endpoint()

    async def _make_request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json_data: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Make an SP-API request.

        Raises:
            ProviderAPIError: On ``{"errors": [...]}`` bodies or HTTP failures.
        """
        headers = {
            "x-amz-access-token": self.access_token,
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }
        response = await self._send(
            method, f"{self.base_url}{path}", params=params, json=json_data, headers=headers,
            log_label=path,
        )
        result = self._json(response)

        errors = result.get("errors") or []
        if not response.is_success or errors:
            first = errors[0] if errors else {}
            raise ProviderAPIError(
                message=first.get("message") or f"SP-API request failed: HTTP {response.status_code}",
                provider="amazon",
                error_code=first.get("code"),
                http_status=response.status_code,
                details={"details": first["details"]} if first.get("details") else None,
            )
        return result

    async def get_product(self, asin: str) -> CatalogProduct:
        """Look up one catalog item by ASIN.

        Raises:
            ProviderAPIError: The lookup was rejected.
            MalformedResponseError: The item did not have the documented shape.
        """
        marketplace = self.config.marketplace
        result = await self._make_request(
            "GET",
            f"/catalog/{self.config.catalog_api_version}/items/{asin}",
            params={
                "marketplaceIds": marketplace.id,
                "includedData": "attributes,images,summaries",
            },
        )
        try:
            return self.parse_product(asin, result.get("payload") or result, marketplace.currency)
        except (AttributeError, IndexError, KeyError, TypeError) as e:
            raise MalformedResponseError(f"Catalog item {asin} has an unexpected shape: {e}") from e

    @staticmethod
    def parse_product(asin: str, item: dict[str, Any], currency: str) -> CatalogProduct:
        attributes = item.get("attributes") or {}
        summaries = item.get("summaries") or [{}]
        images = item.get("images") or [{}]

        def first_value(key: str) -> Optional[str]:
            values = attributes.get(key) or [{}]
            return values[0].get("value")

        image_links = images[0].get("images") or [{}]
        return CatalogProduct(
            asin=asin,
            title=first_value("item_name") or summaries[0].get("itemName") or "Unknown Product",
            brand=first_value("brand") or summaries[0].get("brand"),
            category=(summaries[0].get("itemClassification") or None),
            image_url=image_links[0].get("link"),
            currency=currency,
        )

    async def create_post(self, post: dict[str, Any]) -> str:
        """Create a post (not yet live). Returns the post id."""
        result = await self._make_request(
            "POST", f"/posts/{self.config.posts_api_version}/posts", json_data=post
        )
        payload = result.get("payload") or result
        return str(self._require(payload, "postId", "Create post"))

    async def submit_post(self, post_id: str) -> Optional[str]:
        """Submit a created post for moderation. Returns the submission id."""
        result = await self._make_request(
            "POST", f"/posts/{self.config.posts_api_version}/posts/{post_id}/submit"
        )
        payload = result.get("payload") or result
        return payload.get("submissionId")
