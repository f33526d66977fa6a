"""Streaming hubs and their streams."""

from __future__ import annotations

import logging
from typing import Any

from qiniu_client.core.config import Settings, get_settings
from qiniu_client.core.exceptions import CallerInputError
from qiniu_client.http import Transport
from qiniu_client.security import urlsafe_b64encode
from qiniu_client.services.listing import PaginatedLister

from .schemas import LiveInfo, StreamInfo

logger = logging.getLogger(__name__)


class Hub:
    """A live streaming hub.

    Requests go to the streaming service with ``Qiniu`` signed requests, so
    the injected transport must use the v2 authorization scheme.
    """

    def __init__(
        self,
        name: str,
        *,
        transport: Transport,
        domain: str | None = None,
        bucket: str | None = None,
        settings: Settings | None = None,
    ) -> None:
        if not name:
            raise CallerInputError("hub name is required")
        self._name = name
        self._transport = transport
        self._domain = domain
        self._bucket = bucket
        self._settings = settings or get_settings()

    @property
    def name(self) -> str:
        return self._name

    @property
    def domain(self) -> str | None:
        return self._domain

    @property
    def bucket(self) -> str | None:
        return self._bucket

    @property
    def transport(self) -> Transport:
        return self._transport

    def __repr__(self) -> str:
        return f"<Hub {self._name}>"

    def pili_url(self, https: bool | None = None) -> str:
        return self._settings.service_url(self._settings.pili_host, https)

    def stream(self, key: str) -> Stream:
        return Stream(key, self)

    async def create_stream(self, key: str, *, https: bool | None = None) -> Stream:
        """Create a stream.

        Raises:
            ResourceExistsError: If the stream already exists.
        """
        stream = self.stream(key)
        await self._transport.request(
            "POST",
            self.pili_url(https),
            f"/v2/hubs/{self._name}/streams",
            json={"key": key},
        )
        logger.info(f"Created stream {key} in hub {self._name}")
        return stream

    async def live_info(self, *stream_keys: str, https: bool | None = None) -> dict[str, LiveInfo]:
        """Real-time info of the given streams.

        Streams that are not live are missing from the result.
        """
        if not stream_keys:
            return {}
        response = await self._transport.request(
            "POST",
            self.pili_url(https),
            f"/v2/hubs/{self._name}/livestreams",
            json={"items": list(stream_keys)},
        )
        items = (response.body or {}).get("items") or []
        return {item["key"]: LiveInfo.from_item(item) for item in items}

    def streams(
        self,
        *,
        live_only: bool = False,
        prefix: str | None = None,
        limit: int | None = None,
        marker: str | None = None,
        https: bool | None = None,
    ) -> PaginatedLister[Stream]:
        """List streams lazily.

        Args:
            live_only: Only list streams that are live.
            prefix: Only list stream keys starting with this prefix.
            limit: Maximum number of streams; ``None`` or ``<= 0`` lists all.
            marker: Resume a previous listing from its marker.
            https: Scheme override.
        """
        params: dict[str, Any] = {}
        if live_only:
            params["liveonly"] = "true"
        return PaginatedLister(
            self._transport,
            method="GET",
            base_url=self.pili_url(https),
            path=f"/v2/hubs/{self._name}/streams",
            params=params,
            item_factory=lambda item: self.stream(item["key"]),
            prefix=prefix,
            limit=limit,
            marker=marker,
        )


class Stream:
    """A stream of a hub, addressed by key."""

    def __init__(self, key: str, hub: Hub) -> None:
        if not key:
            raise CallerInputError("stream key is required")
        self._key = key
        self._hub = hub

    @property
    def key(self) -> str:
        return self._key

    @property
    def hub(self) -> Hub:
        return self._hub

    def __repr__(self) -> str:
        return f"<Stream {self._hub.name}/{self._key}>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Stream):
            return NotImplemented
        return self._key == other._key and self._hub.name == other._hub.name

    def __hash__(self) -> int:
        return hash((self._hub.name, self._key))

    @property
    def _path(self) -> str:
        return f"/v2/hubs/{self._hub.name}/streams/{urlsafe_b64encode(self._key)}"

    async def info(self, *, https: bool | None = None) -> StreamInfo:
        response = await self._hub.transport.request("GET", self._hub.pili_url(https), self._path)
        return StreamInfo.from_response(self._key, response.body or {})

    async def disable(self, *, till: int | None = None, https: bool | None = None) -> None:
        """Disable the stream until epoch ``till``, or forever."""
        await self._set_disabled_till(-1 if till is None else int(till), https)
        logger.info(f"Disabled stream {self._key} in hub {self._hub.name}")

    async def enable(self, *, https: bool | None = None) -> None:
        await self._set_disabled_till(0, https)
        logger.info(f"Enabled stream {self._key} in hub {self._hub.name}")

    async def _set_disabled_till(self, till: int, https: bool | None) -> None:
        await self._hub.transport.request(
            "POST",
            self._hub.pili_url(https),
            f"{self._path}/disabled",
            json={"disabledTill": till},
        )
