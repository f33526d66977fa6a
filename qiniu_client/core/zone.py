"""Region endpoint table."""

from __future__ import annotations

import msgspec

from .enums import EndpointKind
from .exceptions import CallerInputError


class Zone(msgspec.Struct, frozen=True, kw_only=True):
    """Base URLs of every region-scoped service, for both schemes."""

    region: str
    up_http: str | None = None
    up_https: str | None = None
    up_backup_http: str | None = None
    up_backup_https: str | None = None
    io_http: str | None = None
    io_https: str | None = None
    rs_http: str = "http://rs.qiniu.com"
    rs_https: str = "https://rs.qbox.me"
    rsf_http: str = "http://rsf.qiniu.com"
    rsf_https: str = "https://rsf.qbox.me"
    api_http: str = "http://api.qiniu.com"
    api_https: str = "https://api.qiniu.com"

    def resolve(self, kind: EndpointKind | str, https: bool) -> str:
        """Return the base URL of ``kind`` in this region.

        Raises:
            CallerInputError: If the endpoint is unknown or not configured.
        """
        try:
            kind = EndpointKind(kind)
        except ValueError as e:
            raise CallerInputError(f"Unknown endpoint kind: {kind}") from e
        url = getattr(self, f"{kind.value}_{'https' if https else 'http'}")
        if not url:
            raise CallerInputError(f"Zone {self.region} has no {kind.value} endpoint")
        return url

    @classmethod
    def huadong(cls) -> Zone:
        return cls._standard("z0", "")

    @classmethod
    def huabei(cls) -> Zone:
        return cls._standard("z1", "-z1")

    @classmethod
    def huanan(cls) -> Zone:
        return cls._standard("z2", "-z2")

    @classmethod
    def beimei(cls) -> Zone:
        return cls._standard("na0", "-na0")

    @classmethod
    def xinjiapo(cls) -> Zone:
        return cls._standard("as0", "-as0")

    @classmethod
    def from_region(cls, region: str) -> Zone:
        """Look up a zone by region id (``z0``, ``z1``, ``z2``, ``na0``, ``as0``)."""
        factory = _REGIONS.get(region)
        if factory is None:
            raise CallerInputError(f"Unknown region: {region}")
        return factory()

    @classmethod
    def _standard(cls, region: str, suffix: str) -> Zone:
        # Huadong keeps the legacy unsuffixed hosts
        return cls(
            region=region,
            up_http=f"http://up{suffix}.qiniu.com",
            up_https=f"https://up{suffix}.qbox.me",
            up_backup_http=f"http://upload{suffix}.qiniu.com",
            up_backup_https=f"https://upload{suffix}.qbox.me",
            io_http=f"http://iovip{suffix}.qbox.me",
            io_https=f"https://iovip{suffix}.qbox.me",
            rs_http=f"http://rs{suffix}.qiniu.com",
            rs_https=f"https://rs{suffix}.qbox.me",
            rsf_http=f"http://rsf{suffix}.qiniu.com",
            rsf_https=f"https://rsf{suffix}.qbox.me",
            api_http=f"http://api{suffix}.qiniu.com",
            api_https=f"https://api{suffix}.qiniu.com",
        )


_REGIONS = {
    "z0": Zone.huadong,
    "z1": Zone.huabei,
    "z2": Zone.huanan,
    "na0": Zone.beimei,
    "as0": Zone.xinjiapo,
}
