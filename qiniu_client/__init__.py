"""Async client for Qiniu object storage, streaming hubs and CDN URLs."""

from .client import Client
from .core import (
    APIError,
    CallerInputError,
    QiniuError,
    Settings,
    TransportError,
    Zone,
    get_settings,
)
from .http import HttpTransport, Transport, TransportResponse
from .security import Credentials, UploadPolicy
from .services import PaginatedLister
from .services.storage import (
    BatchOperations,
    BatchResult,
    Bucket,
    Entry,
    PrivateURL,
    PublicURL,
    TimestampAntiLeechURL,
)
from .services.streaming import Hub, Stream

__all__ = [
    "APIError",
    "BatchOperations",
    "BatchResult",
    "Bucket",
    "CallerInputError",
    "Client",
    "Credentials",
    "Entry",
    "HttpTransport",
    "Hub",
    "PaginatedLister",
    "PrivateURL",
    "PublicURL",
    "QiniuError",
    "Settings",
    "Stream",
    "TimestampAntiLeechURL",
    "Transport",
    "TransportError",
    "TransportResponse",
    "UploadPolicy",
    "Zone",
    "get_settings",
]
