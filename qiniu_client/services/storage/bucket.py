"""Bucket management, listing and batch sessions."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from qiniu_client.core.config import Settings, get_settings
from qiniu_client.core.enums import EndpointKind
from qiniu_client.core.exceptions import CallerInputError
from qiniu_client.core.zone import Zone
from qiniu_client.http import Transport
from qiniu_client.security import Credentials, UploadPolicy, urlsafe_b64encode
from qiniu_client.services.listing import PaginatedLister

from .batch import BatchOperations
from .entry import Entry
from .schemas import ImageSource, ListedEntry

logger = logging.getLogger(__name__)


class Bucket:
    """A storage bucket.

    Owns the collaborators its entries, listers and batch sessions need: the
    transport, the credentials, the region zone and the download domain.
    """

    def __init__(
        self,
        name: str,
        *,
        transport: Transport,
        credentials: Credentials,
        zone: Zone | None = None,
        domain: str | None = None,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not name:
            raise CallerInputError("bucket name is required")
        self._name = name
        self._transport = transport
        self._credentials = credentials
        self._settings = settings or get_settings()
        self._zone = zone or Zone.from_region(self._settings.default_region)
        self._domain = domain
        self._clock = clock

    @property
    def name(self) -> str:
        return self._name

    @property
    def zone(self) -> Zone:
        return self._zone

    @zone.setter
    def zone(self, zone: Zone) -> None:
        self._zone = zone

    @property
    def domain(self) -> str | None:
        return self._domain

    @domain.setter
    def domain(self, domain: str | None) -> None:
        self._domain = domain

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def clock(self) -> Callable[[], float]:
        return self._clock

    def __repr__(self) -> str:
        return f"<Bucket {self._name} ({self._zone.region})>"

    def endpoint(self, kind: EndpointKind, https: bool | None = None) -> str:
        """Base URL of a region endpoint for this bucket."""
        if https is None:
            https = self._settings.use_https
        return self._zone.resolve(kind, https)

    def sibling(self, name: str) -> Bucket:
        """Another bucket sharing this bucket's collaborators."""
        if name == self._name:
            return self
        return Bucket(
            name,
            transport=self._transport,
            credentials=self._credentials,
            zone=self._zone,
            settings=self._settings,
            clock=self._clock,
        )

    def entry(self, key: str) -> Entry:
        return Entry(self, key)

    def files(
        self,
        *,
        prefix: str | None = None,
        limit: int | None = None,
        marker: str | None = None,
        https: bool | None = None,
    ) -> PaginatedLister[ListedEntry]:
        """List objects lazily.

        Args:
            prefix: Only list keys starting with this prefix.
            limit: Maximum number of objects; ``None`` or ``<= 0`` lists all.
            marker: Resume a previous listing from its marker.
            https: Scheme override.

        Returns:
            Async iterator of listed objects.
        """
        return PaginatedLister(
            self._transport,
            method="POST",
            base_url=self.endpoint(EndpointKind.RSF, https),
            path="/list",
            params={"bucket": self._name},
            item_factory=lambda item: ListedEntry.from_item(self._name, item),
            prefix=prefix,
            limit=limit,
            marker=marker,
            page_size=self._settings.list_page_size,
        )

    def batch(self, *, max_batch_size: int | None = None, https: bool | None = None) -> BatchOperations:
        """Start a batch session defaulting to this bucket."""
        if max_batch_size is None:
            max_batch_size = self._settings.batch_max_size
        return BatchOperations(
            self._transport,
            self.endpoint(EndpointKind.RS, https),
            bucket=self._name,
            max_batch_size=max_batch_size,
        )

    def upload_token(
        self,
        *,
        key: str | None = None,
        key_prefix: str | None = None,
        lifetime: int | None = None,
        deadline: int | None = None,
    ) -> str:
        """Upload token scoped to this bucket, a key or a key prefix."""
        policy = UploadPolicy(bucket=self._name, key=key, key_prefix=key_prefix, clock=self._clock)
        policy.set_expiry(lifetime=lifetime, deadline=deadline)
        return policy.upload_token(self._credentials)

    async def domains(self, *, https: bool | None = None) -> list[str]:
        response = await self._transport.request(
            "GET",
            self.endpoint(EndpointKind.API, https),
            "/v6/domain/list",
            params={"tbl": self._name},
        )
        return list(response.body or [])

    async def info(self, *, https: bool | None = None) -> dict[str, Any]:
        response = await self._transport.request(
            "GET",
            self._settings.service_url(self._settings.uc_host, https),
            "/v2/bucketInfo",
            params={"bucket": self._name},
        )
        return response.body or {}

    async def make_private(self, *, https: bool | None = None) -> None:
        await self._update_acl(private=True, https=https)

    async def make_public(self, *, https: bool | None = None) -> None:
        await self._update_acl(private=False, https=https)

    async def is_private(self, *, https: bool | None = None) -> bool:
        return (await self.info(https=https)).get("private") == 1

    async def set_image(
        self,
        source_url: str,
        *,
        source_host: str | None = None,
        https: bool | None = None,
    ) -> None:
        """Mirror missing objects from ``source_url``."""
        path = f"/image/{self._name}/from/{urlsafe_b64encode(source_url)}"
        if source_host:
            path += f"/host/{urlsafe_b64encode(source_host)}"
        await self._transport.request("POST", self._settings.service_url(self._settings.uc_host, https), path)
        logger.info(f"Set mirror source of bucket {self._name} to {source_url}")

    async def unset_image(self, *, https: bool | None = None) -> None:
        await self._transport.request(
            "POST",
            self._settings.service_url(self._settings.uc_host, https),
            f"/unimage/{self._name}",
        )
        logger.info(f"Removed mirror source of bucket {self._name}")

    async def image(self, *, https: bool | None = None) -> ImageSource | None:
        info = await self.info(https=https)
        if not info.get("source"):
            return None
        return ImageSource(source_url=info["source"], source_host=info.get("host") or None)

    async def enable_index_page(self, *, https: bool | None = None) -> None:
        await self._set_index_page(True, https=https)

    async def disable_index_page(self, *, https: bool | None = None) -> None:
        await self._set_index_page(False, https=https)

    async def has_index_page(self, *, https: bool | None = None) -> bool:
        return (await self.info(https=https)).get("no_index_page", 0) == 0

    async def drop(self, *, https: bool | None = None) -> None:
        """Delete the bucket itself."""
        await self._transport.request("POST", self.endpoint(EndpointKind.RS, https), f"/drop/{self._name}")
        logger.info(f"Dropped bucket {self._name}")

    async def _update_acl(self, *, private: bool, https: bool | None) -> None:
        await self._transport.request(
            "POST",
            self._settings.service_url(self._settings.uc_host, https),
            "/private",
            params={"bucket": self._name, "private": int(private)},
        )
        logger.info(f"Bucket {self._name} is now {'private' if private else 'public'}")

    async def _set_index_page(self, enabled: bool, *, https: bool | None) -> None:
        await self._transport.request(
            "POST",
            self._settings.service_url(self._settings.uc_host, https),
            "/noIndexPage",
            params={"bucket": self._name, "noIndexPage": int(not enabled)},
        )
