"""Configuration, enums and exceptions shared by all services."""

from .config import Settings, get_settings, reset_settings
from .enums import EndpointKind, EntryStatus, StorageType
from .exceptions import (
    APIError,
    BucketNotFoundError,
    CallerInputError,
    QiniuError,
    ResourceExistsError,
    ResourceNotFoundError,
    TransportConnectionError,
    TransportError,
    error_for_status,
)
from .zone import Zone

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "reset_settings",
    # Enums
    "EndpointKind",
    "EntryStatus",
    "StorageType",
    # Exceptions
    "APIError",
    "BucketNotFoundError",
    "CallerInputError",
    "QiniuError",
    "ResourceExistsError",
    "ResourceNotFoundError",
    "TransportConnectionError",
    "TransportError",
    "error_for_status",
    # Endpoints
    "Zone",
]
