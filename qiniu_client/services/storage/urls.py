"""Download URL builders: public, private, and CDN timestamp anti-leech.

All builders are pure: no network I/O. Time only enters through an
injected clock returning epoch seconds.
"""

from __future__ import annotations

import hashlib
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime, timedelta
from urllib.parse import quote

from qiniu_client.core.config import get_settings
from qiniu_client.core.exceptions import CallerInputError
from qiniu_client.security import Credentials

Clock = Callable[[], float]
Lifetime = int | float | timedelta
Deadline = int | float | datetime


def escape_key(key: str) -> str:
    """Percent-encode a key as one path segment; ``/`` is encoded too."""
    return quote(key, safe="")


def resolve_deadline(
    lifetime: Lifetime | None,
    deadline: Deadline | None,
    clock: Clock,
    default_lifetime: Lifetime | None = None,
) -> int:
    """Resolve exactly one expiry input to epoch seconds.

    Without either input, ``default_lifetime`` applies, falling back to
    ``Settings.default_url_lifetime``.

    Raises:
        CallerInputError: If both are given or the lifetime is not positive.
    """
    if lifetime is not None and deadline is not None:
        raise CallerInputError("lifetime and deadline cannot be used together")
    if deadline is not None:
        if isinstance(deadline, datetime):
            return int(deadline.timestamp())
        return int(deadline)
    if lifetime is None:
        lifetime = default_lifetime if default_lifetime is not None else get_settings().default_url_lifetime
    seconds = lifetime.total_seconds() if isinstance(lifetime, timedelta) else lifetime
    if seconds <= 0:
        raise CallerInputError("lifetime must be greater than zero")
    return int(clock()) + int(seconds)


class URL(ABC):
    """A URL usable wherever its rendered string is expected."""

    @abstractmethod
    def render(self) -> str:
        """Render the full URL string."""

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.render()}>"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (URL, str)):
            return self.render() == str(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]


class PublicURL(URL):
    """Public download URL of an object.

    ``filename``, ``fop`` and :meth:`refresh` update the structured fields and
    the rendered URL follows them; the same instance is returned so it can be
    kept and reused.
    """

    def __init__(
        self,
        domain: str,
        key: str,
        credentials: Credentials | None = None,
        *,
        https: bool | None = None,
        filename: str | None = None,
        fop: str | None = None,
        clock: Clock = time.time,
        default_lifetime: Lifetime | None = None,
    ) -> None:
        if not domain:
            raise CallerInputError("domain is required")
        self._domain = domain.rstrip("/")
        self._key = key
        self._credentials = credentials
        self._https = get_settings().use_https if https is None else https
        self._filename = filename
        self._fop = fop
        self._clock = clock
        self._default_lifetime = default_lifetime
        self._cache_bust_token: int | None = None

    @property
    def domain(self) -> str:
        return self._domain

    @property
    def key(self) -> str:
        return self._key

    @property
    def https(self) -> bool:
        return self._https

    @property
    def filename(self) -> str | None:
        """Name the browser saves the download as."""
        return self._filename

    @filename.setter
    def filename(self, filename: str | None) -> None:
        self._filename = filename

    @property
    def fop(self) -> str | None:
        """Data processing parameters, e.g. ``imageView2/1/w/100``."""
        return self._fop

    @fop.setter
    def fop(self, fop: str | None) -> None:
        self._fop = fop

    @property
    def cache_bust_token(self) -> int | None:
        return self._cache_bust_token

    @property
    def scheme(self) -> str:
        return "https" if self._https else "http"

    @property
    def path(self) -> str:
        return f"/{escape_key(self._key)}"

    @property
    def query(self) -> str:
        params = []
        if self._fop:
            params.append(self._fop)
        if self._filename:
            params.append(f"attname={quote(self._filename, safe='')}")
        if self._cache_bust_token:
            params.append(f"tt={self._cache_bust_token}")
        return "&".join(params)

    def render(self) -> str:
        url = f"{self.scheme}://{self._domain}{self.path}"
        query = self.query
        return f"{url}?{query}" if query else url

    def set(self, *, fop: str | None = None, filename: str | None = None) -> PublicURL:
        """Update ``fop`` and/or ``filename``; ``None`` leaves a field unchanged."""
        if fop is not None:
            self._fop = fop
        if filename is not None:
            self._filename = filename
        return self

    def refresh(self) -> PublicURL:
        """Add a cache-busting token taken from the clock's microseconds."""
        self._cache_bust_token = int(self._clock() * 1_000_000)
        return self

    def private(
        self,
        *,
        lifetime: Lifetime | None = None,
        deadline: Deadline | None = None,
    ) -> PrivateURL:
        """Sign this URL for a private bucket."""
        if self._credentials is None:
            raise CallerInputError("credentials are required to sign a private URL")
        return PrivateURL(
            self,
            self._credentials,
            lifetime=lifetime,
            deadline=deadline,
            clock=self._clock,
            default_lifetime=self._default_lifetime,
        )

    def timestamp_anti_leech(
        self,
        *,
        encrypt_key: str,
        lifetime: Lifetime | None = None,
        deadline: Deadline | None = None,
    ) -> TimestampAntiLeechURL:
        """Build a CDN URL protected by timestamp anti-leech."""
        return TimestampAntiLeechURL(
            self,
            encrypt_key,
            lifetime=lifetime,
            deadline=deadline,
            clock=self._clock,
            default_lifetime=self._default_lifetime,
        )


class PrivateURL(URL):
    """Time-limited URL signed with the account's secret key.

    The expiry is resolved when the URL is built and the signature covers the
    public URL with its ``e`` parameter appended.
    """

    def __init__(
        self,
        public_url: PublicURL,
        credentials: Credentials,
        *,
        lifetime: Lifetime | None = None,
        deadline: Deadline | None = None,
        clock: Clock = time.time,
        default_lifetime: Lifetime | None = None,
    ) -> None:
        if not credentials.secret_key:
            raise CallerInputError("secret key is required to sign a private URL")
        self._deadline = resolve_deadline(lifetime, deadline, clock, default_lifetime)
        self._base = str(public_url)
        self._credentials = credentials
        separator = "&" if "?" in self._base else "?"
        self._unsigned = f"{self._base}{separator}e={self._deadline}"
        self._token = credentials.sign(self._unsigned)

    @property
    def deadline(self) -> int:
        return self._deadline

    @property
    def token(self) -> str:
        return self._token

    def render(self) -> str:
        return f"{self._unsigned}&token={self._token}"


class TimestampAntiLeechURL(URL):
    """CDN URL whose token and hex expiry are path segments.

    ``sign = md5(encrypt_key + "/" + escaped_key + hex_deadline)``; the URL
    becomes ``scheme://domain/<sign>/<hex_deadline>/<escaped_key>`` followed
    by the public URL's query string, unchanged.
    """

    def __init__(
        self,
        public_url: PublicURL,
        encrypt_key: str,
        *,
        lifetime: Lifetime | None = None,
        deadline: Deadline | None = None,
        clock: Clock = time.time,
        default_lifetime: Lifetime | None = None,
    ) -> None:
        if not encrypt_key:
            raise CallerInputError("encrypt_key is required for anti-leech URLs")
        self._deadline = resolve_deadline(lifetime, deadline, clock, default_lifetime)
        self._scheme = public_url.scheme
        self._domain = public_url.domain
        self._path = public_url.path
        self._query = public_url.query
        self._timestamp = format(self._deadline, "x")
        self._sign = hashlib.md5(
            f"{encrypt_key}{self._path}{self._timestamp}".encode("utf-8")
        ).hexdigest()

    @property
    def deadline(self) -> int:
        return self._deadline

    @property
    def timestamp(self) -> str:
        """Deadline in lowercase hex."""
        return self._timestamp

    @property
    def sign(self) -> str:
        return self._sign

    def render(self) -> str:
        url = f"{self._scheme}://{self._domain}/{self._sign}/{self._timestamp}{self._path}"
        return f"{url}?{self._query}" if self._query else url
