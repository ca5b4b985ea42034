from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field

import pytest

from pygeotrack.config import TrackingConfig
from pygeotrack.exceptions import PermissionDeniedError, PositionUnavailableError
from pygeotrack.models.location import AccuracyTier, LocationSample
from pygeotrack.models.report import TransportResponse
from pygeotrack.models.results import TickOutcome
from pygeotrack.models.session import SessionState

INTERVAL = 0.05


@dataclass
class FakePositionSource:
    latitude: float = 52.37
    longitude: float = 4.89
    fail_on: set[int] = field(default_factory=set)
    raise_on: dict[int, Exception] = field(default_factory=dict)
    delay: float = 0.0
    calls: int = 0
    in_flight: int = 0
    max_in_flight: int = 0

    async def sample(self, accuracy_tier: AccuracyTier) -> LocationSample:
        self.calls += 1
        call = self.calls
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if call in self.fail_on:
                raise PositionUnavailableError(f"no fix on call {call}")
            if call in self.raise_on:
                raise self.raise_on[call]
            return LocationSample(latitude=self.latitude, longitude=self.longitude, accuracy_tier=accuracy_tier)
        finally:
            self.in_flight -= 1


@dataclass
class Submission:
    url: str
    headers: dict[str, str]
    body: str


@dataclass
class RecordingTransport:
    status_code: int = 200
    error: Exception | None = None
    delay: float = 0.0
    submissions: list[Submission] = field(default_factory=list)
    completed: int = 0

    async def submit(self, url: str, headers: Mapping[str, str], body: str) -> TransportResponse:
        self.submissions.append(Submission(url=url, headers=dict(headers), body=body))
        if self.delay:
            await asyncio.sleep(self.delay)
        self.completed += 1
        if self.error is not None:
            raise self.error
        return TransportResponse(status_code=self.status_code, body="ok")


@dataclass
class FakePresenceIndicator:
    deny: bool = False
    engage_gate: asyncio.Event | None = None
    release_gate: asyncio.Event | None = None
    engage_calls: int = 0
    release_calls: int = 0
    titles: list[str] = field(default_factory=list)
    # Optional hook returning the owning controller's state; each call
    # into the indicator records (event, state, active) when it is set.
    state_of: Callable[[], SessionState] | None = None
    transitions: list[tuple[str, SessionState, bool]] = field(default_factory=list)

    @property
    def active(self) -> bool:
        return self.engage_calls > self.release_calls

    def _record(self, event: str) -> None:
        if self.state_of is not None:
            self.transitions.append((event, self.state_of(), self.active))

    async def engage(self, title: str, description: str) -> None:
        self._record("engage")
        if self.engage_gate is not None:
            await self.engage_gate.wait()
        if self.deny:
            raise PermissionDeniedError("background execution not allowed")
        self.engage_calls += 1
        self.titles.append(title)
        self._record("engaged")

    async def release(self) -> None:
        self._record("release")
        if self.release_gate is not None:
            await self.release_gate.wait()
        self.release_calls += 1
        self._record("released")


async def _wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Poll *predicate* until it holds or fail the test."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.005)


@pytest.fixture
def config() -> TrackingConfig:
    return TrackingConfig(
        driver_id="driver-7",
        order_id="order-99",
        auth_token="secret-token",
        endpoint_url="https://collector.example/api/location",
        interval=INTERVAL,
    )


@pytest.fixture
def source() -> FakePositionSource:
    return FakePositionSource()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def indicator() -> FakePresenceIndicator:
    return FakePresenceIndicator()


@pytest.fixture
def outcomes() -> list[TickOutcome]:
    return []


@pytest.fixture
def wait_until() -> Callable[..., Awaitable[None]]:
    return _wait_until
