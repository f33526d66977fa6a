"""Top-level client owning transports and credentials."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from qiniu_client.core.config import Settings, get_settings
from qiniu_client.core.enums import EndpointKind
from qiniu_client.core.exceptions import CallerInputError
from qiniu_client.core.zone import Zone
from qiniu_client.http import HttpTransport, Transport
from qiniu_client.security import Credentials, urlsafe_b64encode
from qiniu_client.services.storage import Bucket
from qiniu_client.services.streaming import Hub

logger = logging.getLogger(__name__)


class Client:
    """Entry point for buckets and streaming hubs.

    Storage endpoints are called through a ``QBox`` signed transport and the
    streaming service through a ``Qiniu`` signed one; both can be injected.

    Example::

        async with Client(access_key="...", secret_key="...") as client:
            async for entry in client.bucket("photos").files(prefix="2024/"):
                print(entry.key)
    """

    def __init__(
        self,
        *,
        access_key: str | None = None,
        secret_key: str | None = None,
        settings: Settings | None = None,
        transport: Transport | None = None,
        streaming_transport: Transport | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize client.

        Args:
            access_key: Access key, defaults to settings.
            secret_key: Secret key, defaults to settings.
            settings: Client settings.
            transport: Transport for storage endpoints.
            streaming_transport: Transport for the streaming service.
            clock: Epoch-seconds clock used for URL and token expiry.
        """
        self._settings = settings or get_settings()
        access_key = access_key or self._settings.access_key
        secret_key = secret_key or self._settings.secret_key
        if not access_key or not secret_key:
            raise CallerInputError("access_key and secret_key are required")
        self._credentials = Credentials(access_key=access_key, secret_key=secret_key)
        self._transport = transport or HttpTransport(
            self._credentials, auth_version=1, settings=self._settings
        )
        self._streaming_transport = streaming_transport or HttpTransport(
            self._credentials, auth_version=2, settings=self._settings
        )
        self._clock = clock

    async def __aenter__(self) -> Client:
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def connect(self) -> None:
        for transport in (self._transport, self._streaming_transport):
            if isinstance(transport, HttpTransport):
                await transport.connect()

    async def close(self) -> None:
        for transport in (self._transport, self._streaming_transport):
            if isinstance(transport, HttpTransport):
                await transport.close()

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def settings(self) -> Settings:
        return self._settings

    def bucket(self, name: str, *, zone: Zone | str | None = None, domain: str | None = None) -> Bucket:
        """Handle for an existing bucket.

        Args:
            name: Bucket name.
            zone: Zone or region id, defaults to ``settings.default_region``.
            domain: Download domain used by entry URLs.
        """
        if isinstance(zone, str):
            zone = Zone.from_region(zone)
        return Bucket(
            name,
            transport=self._transport,
            credentials=self._credentials,
            zone=zone,
            domain=domain,
            settings=self._settings,
            clock=self._clock,
        )

    def hub(self, name: str, *, domain: str | None = None, bucket: str | None = None) -> Hub:
        return Hub(
            name,
            transport=self._streaming_transport,
            domain=domain,
            bucket=bucket,
            settings=self._settings,
        )

    async def bucket_names(self, *, https: bool | None = None) -> list[str]:
        response = await self._transport.request("GET", self._rs_url(https), "/buckets")
        return list(response.body or [])

    async def create_bucket(
        self,
        name: str,
        *,
        region: str | None = None,
        https: bool | None = None,
    ) -> Bucket:
        """Create a bucket in ``region`` and return its handle."""
        zone = Zone.from_region(region or self._settings.default_region)
        await self._transport.request(
            "POST",
            self._rs_url(https),
            f"/mkbucketv2/{urlsafe_b64encode(name)}/region/{zone.region}",
        )
        logger.info(f"Created bucket {name} in region {zone.region}")
        return self.bucket(name, zone=zone)

    async def drop_bucket(self, name: str, *, https: bool | None = None) -> None:
        await self.bucket(name).drop(https=https)

    def _rs_url(self, https: bool | None) -> str:
        if https is None:
            https = self._settings.use_https
        return Zone.from_region(self._settings.default_region).resolve(EndpointKind.RS, https)
