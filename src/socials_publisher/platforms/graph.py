"""Graph API plumbing shared by the Facebook and Instagram clients."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from ..config import GraphAPIConfig
from ..constants import REQUEST_TIMEOUT_SECONDS
from ..publishing.exceptions import ProviderAPIError
from .client import BaseAPIClient


# Known Graph API error codes. Used to name errors in logs and details;
# the canonical kind is decided by the classifier.
GRAPH_ERROR_CODES: dict[int, dict[str, str]] = {
    1: {"name": "API_UNKNOWN", "description": "Unknown or temporary API error"},
    2: {"name": "API_SERVICE", "description": "Temporary service error"},
    4: {"name": "RATE_LIMIT", "description": "Application request limit reached"},
    10: {"name": "PERMISSION_DENIED", "description": "Permission denied"},
    17: {"name": "USER_RATE_LIMIT", "description": "User request limit reached"},
    100: {"name": "INVALID_PARAMETER", "description": "Invalid parameter"},
    190: {"name": "ACCESS_TOKEN_EXPIRED", "description": "Access token expired or invalid"},
    200: {"name": "PERMISSION_ERROR", "description": "Missing permission"},
    368: {"name": "TEMPORARILY_BLOCKED", "description": "Action deemed abusive or disallowed"},
    613: {"name": "CALLS_LIMIT", "description": "Calls to this API exceed the rate limit"},
    2207001: {"name": "MEDIA_TYPE_NOT_SUPPORTED", "description": "Unsupported media type"},
    2207003: {"name": "MEDIA_SIZE_ERROR", "description": "Media exceeds size limits"},
    2207026: {"name": "MEDIA_NOT_READY", "description": "Media container is not ready yet"},
    2207032: {"name": "MEDIA_UPLOAD_FAILED", "description": "Failed to process the media upload"},
}

# Subcodes are more specific than codes and take precedence when present
GRAPH_ERROR_SUBCODES: dict[int, dict[str, str]] = {
    463: {"name": "SESSION_EXPIRED", "description": "Session has expired"},
    467: {"name": "INVALID_ACCESS_TOKEN", "description": "Access token is invalid"},
    2207069: {"name": "DAILY_POSTING_LIMIT", "description": "Content Publishing API daily limit exceeded"},
}


def get_error_info(error_code: int | None, error_subcode: int | None = None) -> dict[str, str]:
    """Get the name and description for a Graph error code."""
    if error_subcode is not None and error_subcode in GRAPH_ERROR_SUBCODES:
        return GRAPH_ERROR_SUBCODES[error_subcode]
    if error_code is None:
        return {"name": "UNKNOWN", "description": "Unknown error"}
    return GRAPH_ERROR_CODES.get(
        error_code,
        {"name": f"ERROR_{error_code}", "description": f"Unknown error code: {error_code}"},
    )


class GraphAPIClient(BaseAPIClient):
    """Graph API requests with the ``{"error": {...}}`` error shape."""

    provider = "graph"

    def __init__(
        self,
        access_token: str,
        config: Optional[GraphAPIConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ):
        super().__init__(http_client, timeout)
        self.access_token = access_token
        self.config = config or GraphAPIConfig()
        self.base_url = self.config.url

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict[str, Any]] = None,
        data: Optional[dict[str, Any]] = None,
        access_token: Optional[str] = None,
    ) -> dict[str, Any]:
        """Make a request to the Graph API.

        Args:
            method: HTTP method (GET, POST)
            endpoint: API endpoint (without base URL)
            params: Query parameters
            data: Form body for POST
            access_token: Token to use instead of the connection's (e.g. a page token)

        Returns:
            JSON response as dict

        Raises:
            ProviderAPIError: If the API returns an error
        """
        params = dict(params or {})
        params["access_token"] = access_token or self.access_token

        response = await self._send(
            method, f"{self.base_url}/{endpoint}", params=params, data=data, log_label=endpoint
        )
        result = self._json(response)

        if "error" in result or not response.is_success:
            error = result.get("error") or {}
            error_code = error.get("code")
            error_subcode = error.get("error_subcode")
            info = get_error_info(error_code, error_subcode)
            self._logger.error(f"Graph error {info['name']}: {error}")
            raise ProviderAPIError(
                message=error.get("message") or f"HTTP {response.status_code}",
                provider=self.provider,
                error_code=error_code,
                error_subcode=error_subcode,
                http_status=response.status_code,
                log_id=error.get("fbtrace_id"),
                details={"error_name": info["name"]},
            )
        return result
