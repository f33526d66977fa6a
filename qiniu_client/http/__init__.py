"""HTTP transport."""

from .transport import HttpTransport, Transport, TransportResponse

__all__ = [
    "HttpTransport",
    "Transport",
    "TransportResponse",
]
