"""Upload policies and upload tokens."""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from typing import Any

from qiniu_client.core.exceptions import CallerInputError

from .credentials import Credentials

DEFAULT_UPLOAD_LIFETIME = 3600


class UploadPolicy:
    """Restricts an upload token to a bucket, a key or a key prefix.

    The scope is ``bucket``, ``bucket:key`` or ``bucket:prefix`` with
    ``isPrefixalScope`` set.
    """

    def __init__(
        self,
        *,
        bucket: str,
        key: str | None = None,
        key_prefix: str | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not bucket:
            raise CallerInputError("bucket is required")
        if key is not None and key_prefix is not None:
            raise CallerInputError("key and key_prefix cannot be used together")
        self.bucket = bucket
        self.key = key
        self.key_prefix = key_prefix
        self._clock = clock
        self._deadline: int | None = None
        self.infrequent = False
        self.return_body: str | None = None
        self.mime_limit: str | None = None

    @property
    def scope(self) -> str:
        suffix = self.key if self.key is not None else self.key_prefix
        return self.bucket if suffix is None else f"{self.bucket}:{suffix}"

    @property
    def is_prefixal_scope(self) -> bool:
        return self.key_prefix is not None

    @property
    def deadline(self) -> int:
        """Absolute expiry in epoch seconds."""
        if self._deadline is None:
            return int(self._clock()) + DEFAULT_UPLOAD_LIFETIME
        return self._deadline

    @deadline.setter
    def deadline(self, deadline: int) -> None:
        self._deadline = int(deadline)

    @property
    def lifetime(self) -> int:
        """Seconds left before the policy expires."""
        return self.deadline - int(self._clock())

    @lifetime.setter
    def lifetime(self, seconds: int) -> None:
        if seconds <= 0:
            raise CallerInputError("lifetime must be greater than zero")
        self._deadline = int(self._clock()) + int(seconds)

    def set_expiry(self, *, lifetime: int | None = None, deadline: int | None = None) -> UploadPolicy:
        """Set exactly one of ``lifetime`` or ``deadline``."""
        if lifetime is not None and deadline is not None:
            raise CallerInputError("lifetime and deadline cannot be used together")
        if lifetime is not None:
            self.lifetime = lifetime
        elif deadline is not None:
            self.deadline = deadline
        return self

    def to_dict(self) -> dict[str, Any]:
        policy: dict[str, Any] = {"scope": self.scope, "deadline": self.deadline}
        if self.is_prefixal_scope:
            policy["isPrefixalScope"] = 1
        if self.infrequent:
            policy["fileType"] = 1
        if self.return_body:
            policy["returnBody"] = self.return_body
        if self.mime_limit:
            policy["mimeLimit"] = self.mime_limit
        return policy

    def upload_token(self, credentials: Credentials) -> str:
        """Serialize and sign the policy."""
        payload = json.dumps(self.to_dict(), separators=(",", ":"))
        return credentials.sign_with_data(payload)
