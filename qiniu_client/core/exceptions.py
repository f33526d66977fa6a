"""Client exceptions."""

from __future__ import annotations


class QiniuError(Exception):
    """Base exception for client operations."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class CallerInputError(QiniuError, ValueError):
    """Raised when arguments are malformed or conflict with each other."""


class TransportError(QiniuError):
    """Raised when a request cannot be completed."""

    status_code: int | None = None


class TransportConnectionError(TransportError):
    """Raised when the server cannot be reached or times out."""


class APIError(TransportError):
    """Raised when the server answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        *,
        error: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.status_code = status_code
        self.error = error


class ResourceNotFoundError(APIError):
    """Raised when the requested object or stream doesn't exist."""


class ResourceExistsError(APIError):
    """Raised when the target object or stream already exists."""


class BucketNotFoundError(APIError):
    """Raised when the bucket doesn't exist."""


_STATUS_ERRORS: dict[int, type[APIError]] = {
    404: ResourceNotFoundError,
    612: ResourceNotFoundError,
    614: ResourceExistsError,
    631: BucketNotFoundError,
}


def error_for_status(status_code: int) -> type[APIError]:
    """Pick the exception class for a server status code."""
    return _STATUS_ERRORS.get(status_code, APIError)
