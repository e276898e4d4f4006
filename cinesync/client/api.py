"""HTTP client the browser-side hooks use to reach the CineSync API."""

import logging
from typing import Any, Dict, Optional

import httpx

from cinesync.client.storage import AuthStorage
from cinesync.errors import (
    AuthenticationError,
    CineSyncError,
    InternalError,
    UpstreamError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def error_from_response(response: httpx.Response) -> CineSyncError:
    """
    Turn a non-2xx response into a typed error.
    Movie routes answer {"error": ...} and auth routes {"message": ...}; both are read.
    """
    message = None
    try:
        body = response.json()
        if isinstance(body, dict):
            message = body.get("message") or body.get("error")
    except ValueError:
        pass

    if response.status_code == 401:
        return AuthenticationError(message)
    if 400 <= response.status_code < 500:
        return ValidationError(message)
    return InternalError(message)


class ApiClient:
    def __init__(
        self,
        base_url: str,
        storage: AuthStorage,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 20.0,
    ):
        self.storage = storage
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.storage.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise UpstreamError(f"Could not reach the server: {e}") from e

        if response.is_error:
            raise error_from_response(response)
        try:
            return response.json()
        except ValueError as e:
            logger.error("%s %s returned a non-JSON body: %s", method, path, e)
            raise InternalError() from e

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("POST", path, json=data)

    async def close(self) -> None:
        await self._client.aclose()
