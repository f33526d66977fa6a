"""Signed HTTP transport for the Qiniu APIs."""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

import httpx
import msgspec

from qiniu_client.core.config import Settings, get_settings
from qiniu_client.core.exceptions import (
    TransportConnectionError,
    TransportError,
    error_for_status,
)
from qiniu_client.security import Credentials

logger = logging.getLogger(__name__)


class TransportResponse(msgspec.Struct, kw_only=True):
    """Parsed reply of a successful request."""

    status_code: int
    body: Any = None
    headers: dict[str, str] = msgspec.field(default_factory=dict)


@runtime_checkable
class Transport(Protocol):
    """Protocol for request execution.

    Implementations raise :class:`TransportError` for network failures and
    non-2xx replies, and own any retry policy.
    """

    async def request(
        self,
        method: str,
        base_url: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> TransportResponse:
        """Perform one request.

        Args:
            method: HTTP verb.
            base_url: Scheme and host, e.g. ``https://rs.qbox.me``.
            path: Absolute path on that host.
            params: Query parameters.
            json: JSON-encoded body.
            data: Form-encoded body; list values are repeated.
            headers: Extra headers.

        Returns:
            Status code and parsed JSON body.

        Raises:
            TransportError: If the request fails or the reply is not 2xx.
        """
        ...


class HttpTransport:
    """Async httpx transport that signs every request.

    ``auth_version`` 1 signs with the ``QBox`` scheme used by the storage
    management endpoints, 2 with the ``Qiniu`` scheme used by streaming hubs.
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        auth_version: int = 1,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if auth_version not in (1, 2):
            raise ValueError("auth_version must be 1 or 2")
        self._credentials = credentials
        self._auth_version = auth_version
        self._settings = settings or get_settings()
        self._client = client

    async def __aenter__(self) -> HttpTransport:
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def connect(self) -> None:
        """Initialize HTTP client connection."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(
                    self._settings.read_timeout,
                    connect=self._settings.connect_timeout,
                ),
            )
            logger.debug("Qiniu transport connected")

    async def close(self) -> None:
        """Close HTTP client connection."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.debug("Qiniu transport disconnected")

    @property
    def client(self) -> httpx.AsyncClient:
        """Get HTTP client, raising if not connected."""
        if self._client is None:
            raise TransportConnectionError("Transport not connected. Call connect() first.")
        return self._client

    async def request(
        self,
        method: str,
        base_url: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> TransportResponse:
        url = f"{base_url.rstrip('/')}{path}"
        request = self.client.build_request(
            method.upper(),
            url,
            params=params,
            json=json,
            data=data,
            headers=headers,
        )
        request.headers["Authorization"] = self._authorization(request)

        try:
            response = await self.client.send(request)
        except httpx.RequestError as e:
            logger.error(f"Qiniu request {method.upper()} {url} failed: {e}")
            raise TransportConnectionError(f"Failed to connect to {base_url}: {e}", cause=e) from e

        logger.debug(f"{method.upper()} {request.url} -> {response.status_code}")
        body = self._parse_body(response)

        if not response.is_success:
            error = body.get("error") if isinstance(body, dict) else None
            message = error or response.text or response.reason_phrase
            error_cls = error_for_status(response.status_code)
            logger.error(f"Qiniu API error {response.status_code} for {method.upper()} {url}: {message}")
            raise error_cls(
                f"Request failed with status {response.status_code}: {message}",
                response.status_code,
                error=error,
            )

        return TransportResponse(
            status_code=response.status_code,
            body=body,
            headers=dict(response.headers),
        )

    def _authorization(self, request: httpx.Request) -> str:
        content_type = request.headers.get("Content-Type")
        if content_type:
            content_type = content_type.split(";")[0].strip()
        if self._auth_version == 1:
            return self._credentials.authorization_v1(str(request.url), request.content, content_type)
        return self._credentials.authorization_v2(
            request.method,
            str(request.url),
            request.content,
            content_type,
        )

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            if response.is_success:
                raise TransportError(f"Invalid JSON in response: {e}", cause=e) from e
            return None
