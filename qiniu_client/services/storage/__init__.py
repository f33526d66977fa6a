"""Storage service module.

Buckets, objects, batch sessions and download URLs.
"""

from .batch import BatchOperations
from .bucket import Bucket
from .entry import Entry
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
    encode_entry,
)
from .schemas import BatchResult, EntryStat, ImageSource, ListedEntry
from .urls import PrivateURL, PublicURL, TimestampAntiLeechURL, escape_key

__all__ = [
    # Resources
    "Bucket",
    "Entry",
    # Batch
    "BatchOperations",
    "BatchResult",
    # Operations
    "ChangeMimeTypeOperation",
    "ChangeStorageTypeOperation",
    "CopyOperation",
    "DeleteAfterDaysOperation",
    "DeleteOperation",
    "DisableOperation",
    "EnableOperation",
    "MoveOperation",
    "Operation",
    "RenameOperation",
    "StatOperation",
    "encode_entry",
    # Schemas
    "EntryStat",
    "ImageSource",
    "ListedEntry",
    # URLs
    "PrivateURL",
    "PublicURL",
    "TimestampAntiLeechURL",
    "escape_key",
]
