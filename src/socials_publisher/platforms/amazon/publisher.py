"""Amazon Posts publisher.

Every catalog reference is resolved to a product record before the post is
created; a failed lookup is replaced by a placeholder record and noted in
the result rather than failing the post. The post is then created and
submitted for moderation as two separate calls. A post id exists after
creation, but the post is not live until submission succeeds.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ...constants import (
    AMAZON_BODY_MAX_LENGTH,
    AMAZON_HEADLINE_MAX_LENGTH,
    AMAZON_PRODUCTS_MAX_COUNT,
    AMAZON_TAGS_MAX_COUNT,
    Provider,
)
from ...publishing.exceptions import (
    ContentValidationError,
    MalformedResponseError,
    ProviderAPIError,
)
from ...publishing.models import BrandContent, PlatformConnection, PostContent
from ..base import ProviderAdapter, PublishResult
from .client import AmazonClient, CatalogProduct

_logger = logging.getLogger("amazon_api")


class AmazonPublisher(ProviderAdapter):
    """Amazon publisher implementing the adapter interface."""

    @property
    def platform_name(self) -> Provider:
        return Provider.AMAZON

    def _make_client(self, connection: PlatformConnection) -> AmazonClient:
        return AmazonClient(
            connection.access_token,
            config=self.settings.amazon,
            http_client=self.http_client,
            timeout=self.settings.request_timeout_seconds,
        )

    async def _resolve_products(
        self, client: AmazonClient, refs: list[str], brand: BrandContent
    ) -> tuple[list[CatalogProduct], list[str]]:
        products: list[CatalogProduct] = []
        annotations: list[str] = []
        currency = client.config.marketplace.currency
        for asin in refs[:AMAZON_PRODUCTS_MAX_COUNT]:
            try:
                products.append(await client.get_product(asin))
            except (ProviderAPIError, MalformedResponseError, httpx.HTTPError) as e:
                _logger.warning(f"Catalog lookup failed for ASIN {asin}: {e}")
                products.append(CatalogProduct.placeholder_for(asin, brand.brand_name, currency))
                annotations.append(f"Catalog lookup failed for {asin}; used placeholder product record")
        return products, annotations

    def build_post(
        self,
        client: AmazonClient,
        content: PostContent,
        brand: BrandContent,
        products: list[CatalogProduct],
    ) -> dict[str, Any]:
        text = content.formatted_text()
        return {
            "marketplaceId": client.config.marketplace.id,
            "brandEntityId": brand.brand_name,
            "headline": brand.headline or text[:AMAZON_HEADLINE_MAX_LENGTH] or "Check out our products",
            "bodyText": text[:AMAZON_BODY_MAX_LENGTH],
            "callToAction": "SHOP_NOW",
            "products": [{"asin": p.asin, "title": p.title} for p in products],
            "mediaAssets": [
                {"assetId": m.id, "assetType": m.kind.value.upper(), "url": m.url}
                for m in content.media
            ],
            "brandContent": {
                "brandName": brand.brand_name,
                "brandStoryTitle": brand.headline or "Our Brand Story",
                "targetAudience": brand.target_audience,
                "brandValues": brand.product_highlights[:5],
            },
            "tags": [tag.lstrip("#") for tag in content.hashtags[:AMAZON_TAGS_MAX_COUNT]],
        }

    async def publish(self, connection: PlatformConnection, content: PostContent) -> PublishResult:
        brand = content.extensions.brand
        refs = content.extensions.catalog_refs
        if brand is None or not refs:
            raise ContentValidationError(
                ["amazon posts require brand metadata and at least one catalog reference"]
            )

        client = self._make_client(connection)
        products, annotations = await self._resolve_products(client, refs, brand)

        post_id = await client.create_post(self.build_post(client, content, brand, products))
        _logger.info(f"Amazon post created: {post_id}")

        try:
            submission_id = await client.submit_post(post_id)
        except ProviderAPIError as e:
            # Created but never submitted: keep the id for the caller.
            e.details["platform_post_id"] = post_id
            e.details["stage"] = "submit"
            raise

        domain = client.config.marketplace.domain
        return self._make_result(
            success=True,
            platform_post_id=post_id,
            url=f"{domain}/brand-store/post/{post_id}",
            annotations=annotations,
            details={
                "submission_id": submission_id,
                "products": [p.to_dict() for p in products],
                "moderation_status": "PENDING",
            },
        )
