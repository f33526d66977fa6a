"""Per-object operations rendered to server-side command strings.

Every operation is an immutable tagged struct. Single-object calls and
batches share the same rendering, so an operation sent alone and the same
operation inside a batch are byte-identical.
"""

from __future__ import annotations

from typing import ClassVar

import msgspec

from qiniu_client.core.enums import StorageType
from qiniu_client.core.exceptions import CallerInputError
from qiniu_client.security import urlsafe_b64encode


def encode_entry(bucket: str, key: str) -> str:
    """Encode ``bucket:key`` for use as a path segment."""
    return urlsafe_b64encode(f"{bucket}:{key}")


def _force(force: bool) -> str:
    return "true" if force else "false"


class BaseOperation(msgspec.Struct, frozen=True, kw_only=True, tag=True):
    """Operation on one object identified by bucket and key."""

    command_name: ClassVar[str] = ""

    bucket: str
    key: str

    def __post_init__(self) -> None:
        if not self.bucket:
            raise CallerInputError(f"{self.command_name}: bucket is required")
        if not isinstance(self.key, str) or not self.key:
            raise CallerInputError(f"{self.command_name}: key is required")

    @property
    def entry(self) -> str:
        return encode_entry(self.bucket, self.key)

    @property
    def command(self) -> str:
        return f"/{self.command_name}/{self.entry}"


class StatOperation(BaseOperation, frozen=True, kw_only=True):
    command_name: ClassVar[str] = "stat"


class DeleteOperation(BaseOperation, frozen=True, kw_only=True):
    command_name: ClassVar[str] = "delete"


class CopyOperation(BaseOperation, frozen=True, kw_only=True):
    command_name: ClassVar[str] = "copy"

    to_bucket: str
    to_key: str
    force: bool = False

    def __post_init__(self) -> None:
        super().__post_init__()
        if not self.to_bucket or not self.to_key:
            raise CallerInputError(f"{self.command_name}: destination bucket and key are required")

    @property
    def command(self) -> str:
        destination = encode_entry(self.to_bucket, self.to_key)
        return f"/{self.command_name}/{self.entry}/{destination}/force/{_force(self.force)}"


class MoveOperation(CopyOperation, frozen=True, kw_only=True):
    command_name: ClassVar[str] = "move"


class RenameOperation(BaseOperation, frozen=True, kw_only=True):
    """Move within the same bucket."""

    command_name: ClassVar[str] = "move"

    to_key: str
    force: bool = False

    def __post_init__(self) -> None:
        super().__post_init__()
        if not self.to_key:
            raise CallerInputError("rename: destination key is required")

    @property
    def command(self) -> str:
        destination = encode_entry(self.bucket, self.to_key)
        return f"/move/{self.entry}/{destination}/force/{_force(self.force)}"


class ChangeStorageTypeOperation(BaseOperation, frozen=True, kw_only=True):
    command_name: ClassVar[str] = "chtype"

    storage_type: int

    def __post_init__(self) -> None:
        super().__post_init__()
        try:
            StorageType(self.storage_type)
        except ValueError as e:
            raise CallerInputError(f"chtype: unknown storage type {self.storage_type!r}") from e

    @property
    def command(self) -> str:
        return f"/chtype/{self.entry}/type/{int(self.storage_type)}"


class ChangeMimeTypeOperation(BaseOperation, frozen=True, kw_only=True):
    command_name: ClassVar[str] = "chgm"

    mime_type: str

    def __post_init__(self) -> None:
        super().__post_init__()
        if not self.mime_type:
            raise CallerInputError("chgm: mime_type is required")

    @property
    def command(self) -> str:
        return f"/chgm/{self.entry}/mime/{urlsafe_b64encode(self.mime_type)}"


class DisableOperation(BaseOperation, frozen=True, kw_only=True):
    command_name: ClassVar[str] = "chstatus"

    @property
    def command(self) -> str:
        return f"/chstatus/{self.entry}/status/1"


class EnableOperation(BaseOperation, frozen=True, kw_only=True):
    command_name: ClassVar[str] = "chstatus"

    @property
    def command(self) -> str:
        return f"/chstatus/{self.entry}/status/0"


class DeleteAfterDaysOperation(BaseOperation, frozen=True, kw_only=True):
    """Schedule deletion; ``days == 0`` cancels a previous schedule."""

    command_name: ClassVar[str] = "deleteAfterDays"

    days: int

    def __post_init__(self) -> None:
        super().__post_init__()
        if isinstance(self.days, bool) or not isinstance(self.days, int) or self.days < 0:
            raise CallerInputError("deleteAfterDays: days must be a non-negative integer")

    @property
    def command(self) -> str:
        return f"/deleteAfterDays/{self.entry}/{self.days}"


Operation = (
    StatOperation
    | DeleteOperation
    | CopyOperation
    | MoveOperation
    | RenameOperation
    | ChangeStorageTypeOperation
    | ChangeMimeTypeOperation
    | DisableOperation
    | EnableOperation
    | DeleteAfterDaysOperation
)
