"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import pytest

from qiniu_client.core.config import Settings
from qiniu_client.core.zone import Zone
from qiniu_client.http import TransportResponse
from qiniu_client.security import Credentials
from qiniu_client.services.storage import Bucket


@dataclass
class RecordedRequest:
    """A request captured by FakeTransport."""

    method: str
    base_url: str
    path: str
    params: dict[str, Any] | None = None
    json: Any = None
    data: dict[str, Any] | None = None
    headers: dict[str, str] | None = None


@dataclass
class FakeTransport:
    """Transport double replaying queued replies or delegating to a handler.

    Queued items may be TransportResponse objects, raw bodies, or exceptions
    to raise.
    """

    responses: list[Any] = field(default_factory=list)
    handler: Callable[[RecordedRequest], Any] | None = None
    calls: list[RecordedRequest] = field(default_factory=list)

    async def request(
        self,
        method: str,
        base_url: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> TransportResponse:
        call = RecordedRequest(method, base_url, path, params, json, data, headers)
        self.calls.append(call)

        if self.handler is not None:
            response = self.handler(call)
        elif self.responses:
            response = self.responses.pop(0)
        else:
            response = None

        if isinstance(response, Exception):
            raise response
        if not isinstance(response, TransportResponse):
            response = TransportResponse(status_code=200, body=response)
        return response


class FakeClock:
    """Epoch-seconds clock that only moves when told to."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def settings() -> Settings:
    """Provide test settings independent of the environment."""
    return Settings(
        _env_file=None,
        access_key="test_access_key",
        secret_key="test_secret_key",
        use_https=False,
        batch_max_size=1000,
        list_page_size=1000,
    )


@pytest.fixture
def credentials() -> Credentials:
    """Create credentials for testing."""
    return Credentials(access_key="test_access_key", secret_key="test_secret_key")


@pytest.fixture
def clock() -> FakeClock:
    """Create a fixed clock."""
    return FakeClock()


@pytest.fixture
def transport() -> FakeTransport:
    """Create an empty fake transport."""
    return FakeTransport()


@pytest.fixture
def bucket(
    transport: FakeTransport,
    credentials: Credentials,
    settings: Settings,
    clock: FakeClock,
) -> Bucket:
    """Create a bucket in the z0 zone with a download domain."""
    return Bucket(
        "test-bucket",
        transport=transport,
        credentials=credentials,
        zone=Zone.huadong(),
        domain="cdn.example.com",
        settings=settings,
        clock=clock,
    )
