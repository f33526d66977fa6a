"""Single-object operations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from qiniu_client.core.enums import EndpointKind, StorageType
from qiniu_client.core.exceptions import CallerInputError, ResourceNotFoundError

from .operations import (
    ChangeMimeTypeOperation,
    ChangeStorageTypeOperation,
    CopyOperation,
    DeleteAfterDaysOperation,
    DeleteOperation,
    DisableOperation,
    EnableOperation,
    MoveOperation,
    Operation,
    RenameOperation,
    StatOperation,
)
from .schemas import EntryStat
from .urls import PublicURL

if TYPE_CHECKING:
    from .bucket import Bucket

logger = logging.getLogger(__name__)


class Entry:
    """An object in a bucket, addressed by key.

    Every mutation sends the same command a batch would send for it.
    """

    def __init__(self, bucket: Bucket, key: str) -> None:
        if not isinstance(key, str) or not key:
            raise CallerInputError("key is required")
        self._bucket = bucket
        self._key = key

    @property
    def bucket(self) -> Bucket:
        return self._bucket

    @property
    def key(self) -> str:
        return self._key

    def __repr__(self) -> str:
        return f"<Entry {self._bucket.name}:{self._key}>"

    async def stat(self, *, https: bool | None = None) -> EntryStat:
        """Fetch the object's metadata.

        Raises:
            ResourceNotFoundError: If the object doesn't exist.
        """
        body = await self._execute(StatOperation(bucket=self._bucket.name, key=self._key), https)
        return EntryStat.from_response(body or {})

    async def delete(self, *, https: bool | None = None) -> None:
        await self._execute(DeleteOperation(bucket=self._bucket.name, key=self._key), https)
        logger.info(f"Deleted {self._bucket.name}:{self._key}")

    async def try_delete(self, *, https: bool | None = None) -> bool:
        """Delete the object, returning False if it didn't exist."""
        try:
            await self.delete(https=https)
        except ResourceNotFoundError:
            return False
        return True

    async def copy_to(
        self,
        bucket: str,
        key: str,
        *,
        force: bool = False,
        https: bool | None = None,
    ) -> Entry:
        """Copy the object, returning the destination entry."""
        await self._execute(
            CopyOperation(
                bucket=self._bucket.name,
                key=self._key,
                to_bucket=bucket,
                to_key=key,
                force=force,
            ),
            https,
        )
        return self._bucket.sibling(bucket).entry(key)

    async def move_to(
        self,
        bucket: str,
        key: str,
        *,
        force: bool = False,
        https: bool | None = None,
    ) -> Entry:
        """Move the object, returning the destination entry."""
        await self._execute(
            MoveOperation(
                bucket=self._bucket.name,
                key=self._key,
                to_bucket=bucket,
                to_key=key,
                force=force,
            ),
            https,
        )
        return self._bucket.sibling(bucket).entry(key)

    async def rename_to(self, key: str, *, force: bool = False, https: bool | None = None) -> Entry:
        await self._execute(
            RenameOperation(bucket=self._bucket.name, key=self._key, to_key=key, force=force),
            https,
        )
        return self._bucket.entry(key)

    async def change_mime_type(self, mime_type: str, *, https: bool | None = None) -> None:
        await self._execute(
            ChangeMimeTypeOperation(bucket=self._bucket.name, key=self._key, mime_type=mime_type),
            https,
        )

    async def change_storage_type(self, storage_type: StorageType | int, *, https: bool | None = None) -> None:
        await self._execute(
            ChangeStorageTypeOperation(bucket=self._bucket.name, key=self._key, storage_type=int(storage_type)),
            https,
        )

    async def normal_storage(self, *, https: bool | None = None) -> None:
        await self.change_storage_type(StorageType.NORMAL, https=https)

    async def infrequent_storage(self, *, https: bool | None = None) -> None:
        await self.change_storage_type(StorageType.INFREQUENT, https=https)

    async def disable(self, *, https: bool | None = None) -> None:
        await self._execute(DisableOperation(bucket=self._bucket.name, key=self._key), https)

    async def enable(self, *, https: bool | None = None) -> None:
        await self._execute(EnableOperation(bucket=self._bucket.name, key=self._key), https)

    async def delete_after_days(self, days: int, *, https: bool | None = None) -> None:
        await self._execute(
            DeleteAfterDaysOperation(bucket=self._bucket.name, key=self._key, days=days),
            https,
        )

    def download_url(
        self,
        *,
        domain: str | None = None,
        https: bool | None = None,
        filename: str | None = None,
        fop: str | None = None,
    ) -> PublicURL:
        """Build the public download URL.

        Args:
            domain: Download domain, defaults to the bucket's domain.
            https: Scheme override.
            filename: Name the browser saves the download as.
            fop: Data processing parameters.

        Raises:
            CallerInputError: If neither the call nor the bucket has a domain.
        """
        domain = domain or self._bucket.domain
        if https is None:
            https = self._bucket.settings.use_https
        if not domain:
            raise CallerInputError(f"No download domain configured for bucket {self._bucket.name}")
        return PublicURL(
            domain,
            self._key,
            self._bucket.credentials,
            https=https,
            filename=filename,
            fop=fop,
            clock=self._bucket.clock,
            default_lifetime=self._bucket.settings.default_url_lifetime,
        )

    def upload_token(self) -> str:
        """Upload token restricted to this key."""
        return self._bucket.upload_token(key=self._key)

    async def _execute(self, operation: Operation, https: bool | None) -> Any:
        rs_url = self._bucket.endpoint(EndpointKind.RS, https)
        response = await self._bucket.transport.request("POST", rs_url, operation.command)
        logger.debug(f"Executed {operation.command_name} on {self._bucket.name}:{self._key}")
        return response.body
