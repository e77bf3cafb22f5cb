"""X (Twitter) API client.

Tweets go through the v2 API. Media goes through the v1.1 upload endpoint,
which only accepts OAuth 1.0a user-context signatures, so media support
depends on the connection's auth scheme:

- secondary (token + secret): every request is OAuth 1.0a signed
- primary (bearer): v2 calls only, no media upload
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from oauthlib.oauth1 import Client as OAuth1Client

from ...config import TwitterConfig
from ...constants import REQUEST_TIMEOUT_SECONDS, UPLOAD_TIMEOUT_SECONDS, AuthScheme
from ...publishing.exceptions import ConfigurationError, ProviderAPIError
from ...publishing.models import PlatformConnection
from ..client import BaseAPIClient


class TwitterClient(BaseAPIClient):
    """X API client bound to one connection."""

    logger_name = "twitter_api"

    def __init__(
        self,
        connection: PlatformConnection,
        config: Optional[TwitterConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        upload_timeout: float = UPLOAD_TIMEOUT_SECONDS,
    ):
        super().__init__(http_client, timeout)
        self.connection = connection
        self.config = config or TwitterConfig()
        self.upload_timeout = upload_timeout
        self._signer: Optional[OAuth1Client] = None

    @property
    def can_upload_media(self) -> bool:
        return self.connection.scheme == AuthScheme.SECONDARY

    def _oauth1(self) -> OAuth1Client:
        if self._signer is None:
            consumer_key = self.config.get_consumer_key()
            consumer_secret = self.config.get_consumer_secret()
            if not consumer_key or not consumer_secret:
                raise ConfigurationError(
                    "X consumer key/secret are not configured "
                    f"(set {self.config.consumer_key_env} and {self.config.consumer_secret_env})"
                )
            self._signer = OAuth1Client(
                consumer_key,
                client_secret=consumer_secret,
                resource_owner_key=self.connection.access_token,
                resource_owner_secret=self.connection.token_secret,
            )
        return self._signer

    def _auth_headers(self, method: str, url: str) -> dict[str, str]:
        """Authorization header for a request to ``url`` (query included)."""
        if self.connection.scheme == AuthScheme.SECONDARY:
            _, headers, _ = self._oauth1().sign(url, http_method=method.upper())
            return {"Authorization": headers["Authorization"]}
        return {"Authorization": f"Bearer {self.connection.access_token}"}

    async def _make_request(
        self,
        method: str,
        url: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
        files: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> dict[str, Any]:
        """Make a signed or bearer request.

        Query parameters are folded into the URL before signing so the
        signature covers exactly what is sent. JSON and multipart bodies are
        not part of an OAuth 1.0a signature.

        Raises:
            ProviderAPIError: If the API returns an error
        """
        full_url = str(httpx.URL(url, params=params)) if params else url
        headers = self._auth_headers(method, full_url)

        response = await self._send(
            method, full_url, json=json, files=files, headers=headers, timeout=timeout,
            log_label=url,
        )
        result = self._json(response)

        errors = result.get("errors") or []
        if not response.is_success or (errors and "data" not in result and "media_id" not in result):
            first = errors[0] if errors and isinstance(errors[0], dict) else {}
            message = (
                first.get("message")
                or result.get("detail")
                or result.get("title")
                or result.get("error")
                or f"HTTP {response.status_code}"
            )
            raise ProviderAPIError(
                message=str(message),
                provider="twitter",
                error_code=first.get("code"),
                http_status=response.status_code,
                details={"type": result["type"]} if "type" in result else None,
            )
        return result

    # -- media upload (v1.1, OAuth 1.0a only) ---------------------------------

    async def upload_simple(self, data: bytes, mime_type: str, category: str) -> dict[str, Any]:
        return await self._make_request(
            "POST",
            self.config.upload_url,
            params={"media_category": category},
            files={"media": ("media", data, mime_type)},
            timeout=self.upload_timeout,
        )

    async def init_upload(self, total_bytes: int, mime_type: str, category: str) -> dict[str, Any]:
        return await self._make_request(
            "POST",
            self.config.upload_url,
            params={
                "command": "INIT",
                "total_bytes": total_bytes,
                "media_type": mime_type,
                "media_category": category,
            },
        )

    async def append_chunk(self, media_id: str, segment_index: int, chunk: bytes) -> None:
        await self._make_request(
            "POST",
            self.config.upload_url,
            params={"command": "APPEND", "media_id": media_id, "segment_index": segment_index},
            files={"media": ("chunk", chunk, "application/octet-stream")},
            timeout=self.upload_timeout,
        )

    async def finalize_upload(self, media_id: str) -> dict[str, Any]:
        return await self._make_request(
            "POST",
            self.config.upload_url,
            params={"command": "FINALIZE", "media_id": media_id},
        )

    async def upload_status(self, media_id: str) -> dict[str, Any]:
        return await self._make_request(
            "GET",
            self.config.upload_url,
            params={"command": "STATUS", "media_id": media_id},
        )

    async def set_alt_text(self, media_id: str, alt_text: str) -> None:
        await self._make_request(
            "POST",
            self.config.metadata_url,
            json={"media_id": media_id, "alt_text": {"text": alt_text}},
        )

    # -- tweets (v2) ----------------------------------------------------------

    async def create_tweet(self, text: str, media_ids: Optional[list[str]] = None) -> str:
        payload: dict[str, Any] = {"text": text}
        if media_ids:
            payload["media"] = {"media_ids": list(media_ids)}
        result = await self._make_request(
            "POST", f"{self.config.api_base_url}/2/tweets", json=payload
        )
        data = result.get("data") or {}
        return str(self._require(data, "id", "Tweet"))

    async def get_username(self) -> Optional[str]:
        result = await self._make_request("GET", f"{self.config.api_base_url}/2/users/me")
        return (result.get("data") or {}).get("username")
