"""Session Registry - process-wide map of session id to queue and driver."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ...domain.music.entities import SessionQueue
from ...domain.music.value_objects import SessionDestroyReason
from ...domain.shared.events import SessionCreated, SessionDestroyed
from ...domain.shared.messages import LogTemplates
from .playback_driver import DEFAULT_IDLE_TIMEOUT_SECONDS, PlaybackDriver

if TYPE_CHECKING:
    from ...domain.shared.events import EventBus
    from ...domain.shared.types import SessionId
    from ..interfaces.notification_sink import NotificationSink
    from ..interfaces.session_gateway import SessionGateway
    from ..interfaces.stream_provider import StreamProvider

logger = logging.getLogger(__name__)


@dataclass
class SessionEntry:
    """A live session: the queue and the driver that plays it."""

    queue: SessionQueue
    driver: PlaybackDriver

    @property
    def session_id(self) -> SessionId:
        return self.queue.session_id


class SessionRegistry:
    """Holds at most one live :class:`SessionEntry` per session id.

    Entries are created lazily and evicted when their driver terminates
    (explicit stop, idle teardown or transport loss). All mutation happens
    synchronously on the event loop, so the dict needs no lock of its own.
    """

    def __init__(
        self,
        *,
        gateway: SessionGateway,
        stream_provider: StreamProvider,
        notifier: NotificationSink,
        event_bus: EventBus,
        default_volume: int = 100,
        idle_timeout_seconds: float = DEFAULT_IDLE_TIMEOUT_SECONDS,
        max_queue_size: int | None = None,
    ) -> None:
        self._gateway = gateway
        self._stream_provider = stream_provider
        self._notifier = notifier
        self._event_bus = event_bus
        self._default_volume = default_volume
        self._idle_timeout = idle_timeout_seconds
        self._max_queue_size = max_queue_size

        self._entries: dict[SessionId, SessionEntry] = {}
        self._background: set[asyncio.Task[Any]] = set()

        self._gateway.set_on_transport_lost(self._on_transport_lost)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._entries

    def active_session_ids(self) -> list[SessionId]:
        return list(self._entries)

    def get(self, session_id: SessionId) -> SessionEntry | None:
        """Return the live entry for *session_id*, if any."""
        entry = self._entries.get(session_id)
        if entry is not None and entry.driver.is_terminated:
            return None
        return entry

    def get_or_create(self, session_id: SessionId) -> SessionEntry:
        """Return the live entry, creating the queue/driver pair on first use.

        A registered entry whose driver already terminated (eviction pending)
        is replaced by a fresh one.
        """
        entry = self.get(session_id)
        if entry is not None:
            return entry

        queue = SessionQueue(
            session_id=session_id,
            volume=self._default_volume,
            max_size=self._max_queue_size,
        )
        driver = PlaybackDriver(
            queue=queue,
            gateway=self._gateway,
            stream_provider=self._stream_provider,
            notifier=self._notifier,
            event_bus=self._event_bus,
            idle_timeout_seconds=self._idle_timeout,
            on_terminated=self._handle_terminated,
        )
        entry = SessionEntry(queue=queue, driver=driver)
        self._entries[session_id] = entry
        logger.info(LogTemplates.SESSION_CREATED, session_id)
        self._spawn(self._event_bus.publish(SessionCreated(session_id=session_id)))
        return entry

    def evict(self, session_id: SessionId, entry: SessionEntry | None = None) -> bool:
        """Remove the entry for *session_id*.

        When *entry* is given, only that exact entry is removed; a newer entry
        registered under the same id is left alone. Returns True if removed.
        """
        current = self._entries.get(session_id)
        if current is None:
            return False
        if entry is not None and current is not entry:
            logger.debug(LogTemplates.SESSION_EVICT_STALE, session_id)
            return False

        del self._entries[session_id]
        return True

    async def shutdown(self) -> None:
        """Stop every active session."""
        entries = list(self._entries.values())
        if not entries:
            return

        logger.info(LogTemplates.SESSION_REGISTRY_SHUTDOWN, len(entries))
        results = await asyncio.gather(
            *(entry.driver.stop(SessionDestroyReason.SHUTDOWN) for entry in entries),
            return_exceptions=True,
        )
        for entry, result in zip(entries, results):
            if isinstance(result, Exception):
                logger.error("Error stopping session %s: %r", entry.session_id, result)
        self._entries.clear()

    async def _handle_terminated(
        self, driver: PlaybackDriver, reason: SessionDestroyReason, discarded: int
    ) -> None:
        current = self._entries.get(driver.session_id)
        if current is not None and current.driver is driver:
            self.evict(driver.session_id, current)
            logger.info(LogTemplates.SESSION_EVICTED, driver.session_id, reason.value)

        await self._event_bus.publish(
            SessionDestroyed(
                session_id=driver.session_id,
                reason=reason.value,
                tracks_discarded=discarded,
            )
        )

    async def _on_transport_lost(self, session_id: SessionId) -> None:
        entry = self.get(session_id)
        if entry is None:
            return
        await entry.driver.handle_transport_lost()

    def _spawn(self, coro: Any) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
