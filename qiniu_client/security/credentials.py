"""Access key / secret key signing."""

from __future__ import annotations

import base64
import hashlib
import hmac
from dataclasses import dataclass
from urllib.parse import urlsplit

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def urlsafe_b64encode(data: str | bytes) -> str:
    """URL-safe base64 with padding, as expected by the service."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return base64.urlsafe_b64encode(data).decode("ascii")


@dataclass(frozen=True)
class Credentials:
    """Key pair used to sign requests, URLs and upload tokens."""

    access_key: str
    secret_key: str

    def __repr__(self) -> str:
        return f"<Credentials {self.access_key}>"

    def sign(self, data: str | bytes) -> str:
        """Sign ``data`` with HMAC-SHA1.

        Returns:
            ``<access_key>:<urlsafe base64 digest>``.
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        digest = hmac.new(self.secret_key.encode("utf-8"), data, hashlib.sha1).digest()
        return f"{self.access_key}:{urlsafe_b64encode(digest)}"

    def sign_with_data(self, data: str | bytes) -> str:
        """Sign the encoded ``data`` and append it to the signature."""
        encoded = urlsafe_b64encode(data)
        return f"{self.sign(encoded)}:{encoded}"

    def authorization_v1(self, url: str, body: bytes = b"", content_type: str | None = None) -> str:
        """Build a ``QBox`` authorization header value.

        The request body is only part of the signed data for form posts.
        """
        parts = urlsplit(url)
        data = parts.path or "/"
        if parts.query:
            data += f"?{parts.query}"
        data = data.encode("utf-8") + b"\n"
        if body and content_type == FORM_CONTENT_TYPE:
            data += body
        return f"QBox {self.sign(data)}"

    def authorization_v2(
        self,
        method: str,
        url: str,
        body: bytes = b"",
        content_type: str | None = None,
    ) -> str:
        """Build a ``Qiniu`` authorization header value."""
        parts = urlsplit(url)
        data = f"{method.upper()} {parts.path or '/'}"
        if parts.query:
            data += f"?{parts.query}"
        data += f"\nHost: {parts.netloc}"
        if content_type:
            data += f"\nContent-Type: {content_type}"
        signed = data.encode("utf-8") + b"\n\n"
        if body and content_type and content_type != "application/octet-stream":
            signed += body
        return f"Qiniu {self.sign(signed)}"
