"""Streaming hub DTOs using msgspec."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import msgspec


def _from_epoch(value: int | None) -> datetime | None:
    if not value or value < 0:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


class LiveInfo(msgspec.Struct, frozen=True, kw_only=True):
    """Real-time state of a stream that is currently live."""

    key: str
    started_at: datetime | None
    client_ip: str | None = None
    bps: int = 0
    audio_fps: int = 0
    video_fps: int = 0
    data_fps: int = 0

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> LiveInfo:
        fps = item.get("fps") or {}
        return cls(
            key=item["key"],
            started_at=_from_epoch(item.get("startAt")),
            client_ip=item.get("clientIP"),
            bps=item.get("bps", 0),
            audio_fps=fps.get("audio", 0),
            video_fps=fps.get("video", 0),
            data_fps=fps.get("data", 0),
        )


class StreamInfo(msgspec.Struct, frozen=True, kw_only=True):
    """Stored configuration of a stream."""

    key: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    expire_at: datetime | None = None
    disabled_till: int = 0
    converts: list[str] = msgspec.field(default_factory=list)

    @property
    def disabled(self) -> bool:
        """``-1`` disables forever, a future timestamp disables until then."""
        return self.disabled_till == -1 or self.disabled_till > 0

    @classmethod
    def from_response(cls, key: str, data: dict[str, Any]) -> StreamInfo:
        return cls(
            key=key,
            created_at=_from_epoch(data.get("createdAt")),
            updated_at=_from_epoch(data.get("updatedAt")),
            expire_at=_from_epoch(data.get("expireAt")),
            disabled_till=data.get("disabledTill", 0),
            converts=list(data.get("converts") or []),
        )
