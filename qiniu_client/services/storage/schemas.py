"""Storage DTOs using msgspec."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import msgspec

from qiniu_client.core.enums import EntryStatus, StorageType

from .operations import Operation


def put_time_to_datetime(put_time: int | float | None) -> datetime | None:
    """Convert a ``putTime`` (100ns units since epoch) to an aware datetime."""
    if put_time is None:
        return None
    return datetime.fromtimestamp(put_time / 10_000_000, tz=timezone.utc)


class EntryStat(msgspec.Struct, kw_only=True):
    """Metadata of a single object."""

    file_size: int
    hash: str
    mime_type: str
    created_at: datetime | None = None
    # Known codes parse to the enums, unknown ones stay raw ints
    storage_type: int = StorageType.NORMAL
    status: int = EntryStatus.ENABLED
    end_user: str | None = None

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> EntryStat:
        return cls(
            file_size=data.get("fsize", 0),
            hash=data.get("hash", ""),
            mime_type=data.get("mimeType", ""),
            created_at=put_time_to_datetime(data.get("putTime")),
            storage_type=StorageType.parse(data.get("type", 0)),
            status=EntryStatus.parse(data.get("status", 0)),
            end_user=data.get("endUser"),
        )

    @property
    def is_normal_storage(self) -> bool:
        return self.storage_type == StorageType.NORMAL

    @property
    def is_infrequent_storage(self) -> bool:
        return self.storage_type == StorageType.INFREQUENT

    @property
    def is_disabled(self) -> bool:
        return self.status == EntryStatus.DISABLED


class ListedEntry(msgspec.Struct, kw_only=True):
    """An object returned by a bucket listing."""

    bucket: str
    key: str
    file_size: int
    hash: str
    mime_type: str
    created_at: datetime | None = None
    # Known codes parse to the enums, unknown ones stay raw ints
    storage_type: int = StorageType.NORMAL
    status: int = EntryStatus.ENABLED
    end_user: str | None = None

    @classmethod
    def from_item(cls, bucket: str, item: dict[str, Any]) -> ListedEntry:
        return cls(
            bucket=bucket,
            key=item["key"],
            file_size=item.get("fsize", 0),
            hash=item.get("hash", ""),
            mime_type=item.get("mimeType", ""),
            created_at=put_time_to_datetime(item.get("putTime")),
            storage_type=StorageType.parse(item.get("type", 0)),
            status=EntryStatus.parse(item.get("status", 0)),
            end_user=item.get("endUser"),
        )


class BatchResult(msgspec.Struct, frozen=True, kw_only=True):
    """Outcome of one operation of a batch, in submission order."""

    operation_index: int
    operation: Operation
    success: bool
    status_code: int | None
    response: dict[str, Any] | None = None
    error: str | None = None

    @property
    def stat(self) -> EntryStat | None:
        """Parsed metadata for successful ``stat`` operations."""
        if not self.success or self.operation.command_name != "stat" or not self.response:
            return None
        return EntryStat.from_response(self.response)


class ImageSource(msgspec.Struct, frozen=True, kw_only=True):
    """Mirror source configured for a bucket."""

    source_url: str
    source_host: str | None = None
