"""Shared HTTP plumbing for provider API clients."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

import httpx

from ..constants import REQUEST_TIMEOUT_SECONDS
from ..publishing.exceptions import MalformedResponseError


class BaseAPIClient:
    """Sends requests through an injected client or a short-lived one.

    Subclasses set ``logger_name`` and turn responses into dicts or
    ``ProviderAPIError`` according to their provider's error shape.
    """

    logger_name = "publisher"

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ):
        self._http_client = http_client
        self._timeout = timeout
        self._api_call_count = 0
        self._logger = logging.getLogger(self.logger_name)

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                yield client

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: Optional[dict[str, Any]] = None,
        data: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
        files: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        timeout: Optional[float] = None,
        log_label: Optional[str] = None,
    ) -> httpx.Response:
        """Send one request with a per-call timeout."""
        self._api_call_count += 1
        call = self._api_call_count
        safe_params = {k: v for k, v in (params or {}).items() if "token" not in k}
        self._logger.info(f"API CALL #{call} | {method.upper()} {log_label or url} | params: {safe_params}")

        async with self._client() as client:
            response = await client.request(
                method.upper(),
                url,
                params=params,
                data=data,
                json=json,
                files=files,
                headers=headers,
                timeout=timeout if timeout is not None else self._timeout,
            )

        level = logging.INFO if response.is_success else logging.ERROR
        self._logger.log(level, f"API CALL #{call} | HTTP {response.status_code}")
        return response

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        """Decode a JSON object body; empty bodies decode to ``{}``."""
        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError:
            if response.is_success:
                raise MalformedResponseError(
                    f"Expected JSON from {response.request.url}, got: {response.text[:200]}"
                ) from None
            return {}
        if not isinstance(body, dict):
            if response.is_success:
                raise MalformedResponseError(f"Expected a JSON object from {response.request.url}")
            return {}
        return body

    @staticmethod
    def _require(payload: dict[str, Any], key: str, what: str) -> Any:
        value = payload.get(key)
        if value in (None, ""):
            raise MalformedResponseError(f"{what} response is missing '{key}'")
        return value
