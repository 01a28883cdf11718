import asyncio

import pytest

from music_session_manager.application.interfaces.notification_sink import (
    Notification,
    NotificationSink,
)
from music_session_manager.application.interfaces.session_gateway import SessionGateway, Transport
from music_session_manager.application.interfaces.stream_provider import (
    StreamHandle,
    StreamProvider,
)
from music_session_manager.domain.music.entities import Track
from music_session_manager.domain.music.value_objects import StreamEvent
from music_session_manager.domain.shared.events import EventBus
from music_session_manager.domain.shared.exceptions import ConnectError, StreamOpenError


# ============================================================================
# In-memory port fakes
# ============================================================================


class FakeStreamHandle(StreamHandle):
    """Stream whose terminal event is fired by the test."""

    def __init__(self, locator: str, volume: int) -> None:
        self._locator = locator
        self._terminal: asyncio.Future[StreamEvent] = asyncio.get_running_loop().create_future()
        self.initial_volume = volume
        self.volumes: list[int] = []
        self.volume_applies = True
        self.paused = False
        self.closed = False

    @property
    def locator(self) -> str:
        return self._locator

    def finish(self) -> None:
        if not self._terminal.done():
            self._terminal.set_result(StreamEvent.exhausted())

    def fail(self, detail: str = "decoder crashed") -> None:
        if not self._terminal.done():
            self._terminal.set_result(StreamEvent.error(detail))

    async def wait_terminal(self) -> StreamEvent:
        return await asyncio.shield(self._terminal)

    def set_volume(self, level: int) -> bool:
        self.volumes.append(level)
        return self.volume_applies

    async def pause(self) -> None:
        self.paused = True

    async def resume(self) -> None:
        self.paused = False

    async def close(self) -> None:
        self.closed = True


class FakeStreamProvider(StreamProvider):
    """Opens FakeStreamHandles; locators in ``failing`` raise StreamOpenError."""

    def __init__(self) -> None:
        self.failing: set[str] = set()
        self.opened: list[str] = []
        self.handles: list[FakeStreamHandle] = []
        self.gate: asyncio.Event | None = None

    async def open(self, locator: str, volume: int) -> FakeStreamHandle:
        self.opened.append(locator)
        if self.gate is not None:
            await self.gate.wait()
        if locator in self.failing:
            raise StreamOpenError(locator, "unplayable")
        handle = FakeStreamHandle(locator, volume)
        self.handles.append(handle)
        return handle

    @property
    def last(self) -> FakeStreamHandle:
        return self.handles[-1]


class FakeTransport(Transport):
    def __init__(self, session_id: int, channel_ref: int) -> None:
        self._session_id = session_id
        self._channel_ref = channel_ref
        self.connected = True

    @property
    def session_id(self) -> int:
        return self._session_id

    @property
    def channel_ref(self) -> int:
        return self._channel_ref

    def is_connected(self) -> bool:
        return self.connected


class FakeGateway(SessionGateway):
    def __init__(self) -> None:
        self.fail_connect = False
        self.fail_bind = False
        self.acquired: list[FakeTransport] = []
        self.bound: list[tuple[FakeTransport, FakeStreamHandle]] = []
        self.released: list[FakeTransport] = []
        self.on_transport_lost = None

    async def acquire_transport(self, session_id: int, channel_ref: int) -> FakeTransport:
        if self.fail_connect:
            raise ConnectError(session_id, "no route to channel")
        transport = FakeTransport(session_id, channel_ref)
        self.acquired.append(transport)
        return transport

    async def bind_output(self, transport, stream) -> None:
        if self.fail_bind:
            raise ConnectError(transport.session_id, "bind failed")
        self.bound.append((transport, stream))

    async def release(self, transport) -> None:
        transport.connected = False
        self.released.append(transport)

    def set_on_transport_lost(self, callback) -> None:
        self.on_transport_lost = callback


class RecordingSink(NotificationSink):
    def __init__(self) -> None:
        self.notifications: list[tuple[int, Notification]] = []

    def notify(self, session_id: int, notification: Notification) -> None:
        self.notifications.append((session_id, notification))

    @property
    def kinds(self) -> list:
        return [n.kind for _, n in self.notifications]


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def provider():
    return FakeStreamProvider()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def make_track():
    """Factory for tracks whose locator is derived from the title."""

    def _make(title: str = "Test Track", **kwargs) -> Track:
        kwargs.setdefault("locator", f"https://www.youtube.com/watch?v={title.replace(' ', '_')}")
        return Track(title=title, **kwargs)

    return _make


@pytest.fixture
def sample_track(make_track):
    return make_track("Test Track", duration=180, requested_by="TestUser")


@pytest.fixture
def settle():
    """Let scheduled tasks (watchers, event publishes) run to completion."""

    async def _settle(rounds: int = 20) -> None:
        for _ in range(rounds):
            await asyncio.sleep(0)

    return _settle
