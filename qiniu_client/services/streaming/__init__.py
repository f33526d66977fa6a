"""Streaming hub service module."""

from .hub import Hub, Stream
from .schemas import LiveInfo, StreamInfo

__all__ = [
    "Hub",
    "LiveInfo",
    "Stream",
    "StreamInfo",
]
