"""Playback driver - owns the single active stream of one session."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine
from typing import TYPE_CHECKING, Any

from ...domain.music.entities import SessionQueue, Track
from ...domain.music.value_objects import (
    PlaybackState,
    SessionDestroyReason,
    StreamEvent,
    TrackFinishReason,
)
from ...domain.shared.events import (
    DomainEvent,
    QueueExhausted,
    TrackFailedToOpen,
    TrackFinishedPlaying,
    TrackStartedPlaying,
)
from ...domain.shared.exceptions import ConnectError, InvalidStateError, SessionClosedError
from ...domain.shared.messages import ErrorMessages, LogTemplates, NotificationMessages
from ..interfaces.notification_sink import Notification, NotificationKind
from .queue_models import EnqueueOutcome

if TYPE_CHECKING:
    from ...domain.shared.events import EventBus
    from ...domain.shared.types import ChannelRef, SessionId
    from ..interfaces.notification_sink import NotificationSink
    from ..interfaces.session_gateway import SessionGateway, Transport
    from ..interfaces.stream_provider import StreamHandle, StreamProvider

logger = logging.getLogger(__name__)

DEFAULT_IDLE_TIMEOUT_SECONDS: float = 300.0

TerminatedCallback = Callable[["PlaybackDriver", SessionDestroyReason, int], Awaitable[None]]


class PlaybackDriver:
    """Drives at most one open stream for a session and advances its queue.

    Every mutation of the paired :class:`SessionQueue` goes through this class
    under ``self._lock``. Stream opening runs with the lock released; its result
    is only applied if ``self._generation`` still matches the value captured
    when the attempt began, so a stop or skip issued meanwhile wins.
    """

    def __init__(
        self,
        *,
        queue: SessionQueue,
        gateway: SessionGateway,
        stream_provider: StreamProvider,
        notifier: NotificationSink,
        event_bus: EventBus,
        idle_timeout_seconds: float = DEFAULT_IDLE_TIMEOUT_SECONDS,
        on_terminated: TerminatedCallback | None = None,
    ) -> None:
        self._queue = queue
        self._gateway = gateway
        self._stream_provider = stream_provider
        self._notifier = notifier
        self._event_bus = event_bus
        self._idle_timeout = idle_timeout_seconds
        self._on_terminated = on_terminated

        self._lock = asyncio.Lock()
        self._state = PlaybackState.IDLE
        self._generation = 0
        self._transport: Transport | None = None
        self._channel_ref: ChannelRef | None = None
        self._stream: StreamHandle | None = None
        self._watcher: asyncio.Task[None] | None = None
        self._idle_task: asyncio.Task[None] | None = None
        self._background: set[asyncio.Task[Any]] = set()

    # ─────────────────────────────────────────────────────────────────
    # Inspection
    # ─────────────────────────────────────────────────────────────────

    @property
    def session_id(self) -> SessionId:
        return self._queue.session_id

    @property
    def queue(self) -> SessionQueue:
        return self._queue

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def transport(self) -> Transport | None:
        return self._transport

    @property
    def is_terminated(self) -> bool:
        return self._state is PlaybackState.TERMINATED

    @property
    def idle_timer_armed(self) -> bool:
        return self._idle_task is not None and not self._idle_task.done()

    @property
    def now_playing(self) -> Track | None:
        """The bound head track, or None when no stream is bound."""
        if self._state.has_stream:
            return self._queue.peek_head()
        return None

    # ─────────────────────────────────────────────────────────────────
    # Commands
    # ─────────────────────────────────────────────────────────────────

    async def enqueue(self, track: Track, channel_ref: ChannelRef) -> EnqueueOutcome:
        """Append *track*, joining *channel_ref* first if no transport is bound.

        Raises:
            ConnectError: The transport could not be acquired; the queue is untouched.
            QueueFullError: The queue is capped and full.
        """
        async with self._lock:
            self._ensure_open("enqueue")
            if self._transport is None or not self._transport.is_connected():
                try:
                    self._transport = await self._gateway.acquire_transport(
                        self.session_id, channel_ref
                    )
                except ConnectError:
                    self._arm_idle_timer_if_unused()
                    raise
                self._channel_ref = channel_ref
                logger.info(LogTemplates.TRANSPORT_ACQUIRED, self.session_id, channel_ref)

            position = self._queue.enqueue(track)
            self._disarm_idle_timer()
            should_start = self._state is PlaybackState.IDLE and not self._queue.playing
            logger.info(LogTemplates.QUEUE_ENQUEUED, track.title, position, self.session_id)

        open_failed = False
        if should_start:
            # The caller reports this start itself; later advances are announced.
            dropped = await self.start(announce=False)
            open_failed = any(t is track for t in dropped)

        return EnqueueOutcome(
            track=track,
            position=position,
            started_playback=should_start,
            open_failed=open_failed,
            now_playing=self.now_playing,
        )

    async def start(self, *, announce: bool = True) -> list[Track]:
        """Open the head of the queue, dropping heads that fail to open.

        Runs iteratively: every failed attempt removes exactly one track, so the
        loop ends once a stream is bound or the queue is empty. With
        ``announce=False`` the first track bound sends no now-playing notice;
        a track reached after a failure always does.

        Returns the tracks dropped because their stream could not be opened.
        A head removed by a concurrent skip or stop is not among them.
        """
        dropped: list[Track] = []
        while True:
            async with self._lock:
                attempt = self._begin_opening()
            if attempt is None:
                return dropped

            generation, track, volume, transport = attempt
            stream: StreamHandle | None = None
            error: Exception | None = None
            try:
                stream = await self._stream_provider.open(track.locator, volume)
                # A stop or skip during the open supersedes this attempt
                if generation == self._generation:
                    await self._gateway.bind_output(transport, stream)
            except Exception as exc:
                error = exc
                if stream is not None:
                    await self._close_stream(stream)
                    stream = None

            async with self._lock:
                if generation != self._generation:
                    logger.info(
                        LogTemplates.PLAYBACK_STALE_OPEN, self.session_id, generation, self._generation
                    )
                    if stream is not None:
                        await self._close_stream(stream)
                    return dropped

                if stream is not None:
                    self._bind_stream(stream, track, volume, generation, announce=announce)
                    return dropped

                self._drop_failed_head(track, error)
                dropped.append(track)
                announce = True

    async def skip(self) -> Track:
        """Drop the current head and start the next one.

        Raises:
            InvalidStateError: Nothing is queued.
        """
        async with self._lock:
            self._ensure_open("skip")
            head = self._queue.peek_head()
            if head is None:
                raise InvalidStateError("skip", self._state.value, ErrorMessages.NOTHING_PLAYING)

            self._generation += 1
            stream = self._detach_stream()
            if stream is not None:
                await self._close_stream(stream)
            self._state = PlaybackState.IDLE
            self._queue.advance()
            logger.info(LogTemplates.TRACK_SKIPPED, head.title, self.session_id)
            self._publish(
                TrackFinishedPlaying(
                    session_id=self.session_id,
                    track_title=head.title,
                    reason=TrackFinishReason.SKIPPED.value,
                )
            )

        await self.start()
        return head

    async def pause(self) -> None:
        async with self._lock:
            if self._state is not PlaybackState.PLAYING or self._stream is None:
                raise InvalidStateError("pause", self._state.value, ErrorMessages.NOTHING_PLAYING)
            await self._stream.pause()
            self._state = PlaybackState.PAUSED
            logger.debug(LogTemplates.PLAYBACK_PAUSED, self.session_id)

    async def resume(self) -> None:
        async with self._lock:
            if self._state is not PlaybackState.PAUSED or self._stream is None:
                raise InvalidStateError("resume", self._state.value, ErrorMessages.NOTHING_PAUSED)
            await self._stream.resume()
            self._state = PlaybackState.PLAYING
            logger.debug(LogTemplates.PLAYBACK_RESUMED, self.session_id)

    async def set_volume(self, level: int) -> None:
        """Store *level* and apply it to the live stream if one is bound.

        Raises:
            InvalidArgumentError: *level* is outside 1..100; nothing changes.
        """
        async with self._lock:
            self._ensure_open("set_volume")
            self._queue.set_volume(level)
            logger.info(LogTemplates.VOLUME_SET, level, self.session_id)
            if self._stream is not None and self._state.has_stream:
                self._apply_live_volume(self._stream, level)
            else:
                self._arm_idle_timer_if_unused()

    async def stop(self, reason: SessionDestroyReason = SessionDestroyReason.STOPPED) -> int:
        """Tear the session down and return the number of discarded tracks.

        A second call on a terminated driver is a no-op returning 0.
        """
        async with self._lock:
            if self.is_terminated:
                return 0
            discarded = await self._terminate(reason, release_transport=True)

        await self._notify_terminated(reason, discarded)
        return discarded

    async def handle_transport_lost(self) -> None:
        """React to the gateway tearing the transport down underneath us."""
        async with self._lock:
            if self.is_terminated:
                return
            logger.warning(LogTemplates.TRANSPORT_LOST, self.session_id)
            self._transport = None
            discarded = await self._terminate(
                SessionDestroyReason.TRANSPORT_LOST, release_transport=False
            )

        self._emit(NotificationKind.DISCONNECTED, NotificationMessages.TRANSPORT_LOST)
        await self._notify_terminated(SessionDestroyReason.TRANSPORT_LOST, discarded)

    # ─────────────────────────────────────────────────────────────────
    # State transitions (caller holds the lock)
    # ─────────────────────────────────────────────────────────────────

    def _ensure_open(self, operation: str) -> None:
        if self.is_terminated:
            raise SessionClosedError(self.session_id, operation)

    def _begin_opening(self) -> tuple[int, Track, int, Transport] | None:
        if self._state is not PlaybackState.IDLE:
            return None

        head = self._queue.peek_head()
        if head is None:
            logger.info(LogTemplates.QUEUE_EMPTY, self.session_id)
            self._arm_idle_timer()
            self._publish(QueueExhausted(session_id=self.session_id))
            return None

        if self._transport is None:
            logger.warning(LogTemplates.TRANSPORT_LOST, self.session_id)
            return None

        self._generation += 1
        self._state = PlaybackState.OPENING
        self._queue.mark_playing()
        logger.info(LogTemplates.PLAYBACK_OPENING, head.title, self.session_id, self._generation)
        return self._generation, head, self._queue.volume, self._transport

    def _bind_stream(
        self, stream: StreamHandle, track: Track, volume: int, generation: int, *, announce: bool
    ) -> None:
        self._stream = stream
        self._state = PlaybackState.PLAYING
        if self._queue.volume != volume:
            self._apply_live_volume(stream, self._queue.volume)

        self._watcher = asyncio.create_task(
            self._watch_stream(stream, generation),
            name=f"stream-watcher-{self.session_id}-{generation}",
        )
        logger.info(LogTemplates.PLAYBACK_STARTED, track.title, self.session_id)
        if announce:
            self._emit(
                NotificationKind.NOW_PLAYING,
                NotificationMessages.NOW_PLAYING.format(title=track.title),
                track,
            )
        self._publish(
            TrackStartedPlaying(
                session_id=self.session_id, track_title=track.title, locator=track.locator
            )
        )

    def _drop_failed_head(self, track: Track, error: Exception | None) -> None:
        logger.warning(LogTemplates.PLAYBACK_OPEN_FAILED, track.title, self.session_id, error)
        self._state = PlaybackState.IDLE
        self._queue.advance()
        self._emit(
            NotificationKind.PLAYBACK_ERROR,
            NotificationMessages.PLAYBACK_FAILED.format(title=track.title),
            track,
        )
        self._publish(
            TrackFailedToOpen(
                session_id=self.session_id,
                track_title=track.title,
                locator=track.locator,
                error=str(error),
            )
        )

    def _detach_stream(self) -> StreamHandle | None:
        stream, self._stream = self._stream, None
        watcher, self._watcher = self._watcher, None
        if watcher is not None and not watcher.done():
            watcher.cancel()
        return stream

    async def _terminate(self, reason: SessionDestroyReason, *, release_transport: bool) -> int:
        self._generation += 1
        self._state = PlaybackState.TERMINATED
        self._disarm_idle_timer()

        stream = self._detach_stream()
        if stream is not None:
            await self._close_stream(stream)

        discarded = self._queue.clear()
        transport, self._transport = self._transport, None
        if transport is not None and release_transport:
            try:
                await self._gateway.release(transport)
                logger.info(LogTemplates.TRANSPORT_RELEASED, self.session_id)
            except Exception as exc:
                logger.warning(LogTemplates.TRANSPORT_RELEASE_FAILED, self.session_id, exc)

        logger.info(LogTemplates.PLAYBACK_STOPPED, self.session_id, reason.value)
        return discarded

    # ─────────────────────────────────────────────────────────────────
    # Stream events and idle teardown
    # ─────────────────────────────────────────────────────────────────

    async def _watch_stream(self, stream: StreamHandle, generation: int) -> None:
        try:
            event = await stream.wait_terminal()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            event = StreamEvent.error(repr(exc))
        await self._handle_stream_event(event, generation)

    async def _handle_stream_event(self, event: StreamEvent, generation: int) -> None:
        async with self._lock:
            if generation != self._generation:
                logger.debug(
                    LogTemplates.PLAYBACK_STALE_EVENT, self.session_id, generation, self._generation
                )
                return

            finished = self._queue.peek_head()
            title = finished.title if finished is not None else ""
            if event.is_error:
                logger.warning(LogTemplates.TRACK_ERRORED, title, self.session_id, event.detail)
                reason = TrackFinishReason.ERROR
            else:
                logger.info(LogTemplates.TRACK_EXHAUSTED, title, self.session_id)
                reason = TrackFinishReason.COMPLETED

            self._stream = None
            self._watcher = None
            self._state = PlaybackState.IDLE
            self._queue.advance()
            self._publish(
                TrackFinishedPlaying(
                    session_id=self.session_id,
                    track_title=title,
                    reason=reason.value,
                    detail=event.detail,
                )
            )

        await self.start()

    def _arm_idle_timer(self) -> None:
        self._disarm_idle_timer(quiet=True)
        self._idle_task = asyncio.create_task(
            self._idle_teardown(), name=f"idle-teardown-{self.session_id}"
        )
        logger.debug(LogTemplates.IDLE_TIMER_ARMED, self._idle_timeout, self.session_id)

    def _arm_idle_timer_if_unused(self) -> None:
        """Arm teardown for a session left idle with nothing queued.

        Covers sessions that never reached start(): a failed connect or a
        volume change on a fresh session. A running timer is left as is.
        """
        if (
            self._state is PlaybackState.IDLE
            and self._queue.is_empty
            and not self.idle_timer_armed
        ):
            self._arm_idle_timer()

    def _disarm_idle_timer(self, *, quiet: bool = False) -> None:
        task, self._idle_task = self._idle_task, None
        if task is not None and not task.done():
            task.cancel()
            if not quiet:
                logger.debug(LogTemplates.IDLE_TIMER_DISARMED, self.session_id)

    async def _idle_teardown(self) -> None:
        await asyncio.sleep(self._idle_timeout)

        async with self._lock:
            if (
                self._idle_task is not asyncio.current_task()
                or self._state is not PlaybackState.IDLE
                or not self._queue.is_empty
            ):
                logger.debug(LogTemplates.IDLE_TIMER_STALE, self.session_id)
                return

            logger.info(LogTemplates.IDLE_TIMER_FIRED, self.session_id)
            self._idle_task = None
            was_connected = self._transport is not None
            discarded = await self._terminate(
                SessionDestroyReason.IDLE_TIMEOUT, release_transport=True
            )

        if was_connected:
            self._emit(
                NotificationKind.DISCONNECTED,
                NotificationMessages.IDLE_DISCONNECT.format(minutes=round(self._idle_timeout / 60)),
            )
        await self._notify_terminated(SessionDestroyReason.IDLE_TIMEOUT, discarded)

    # ─────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────

    def _apply_live_volume(self, stream: StreamHandle, level: int) -> None:
        try:
            applied = stream.set_volume(level)
        except Exception as exc:
            logger.warning(LogTemplates.VOLUME_LIVE_FAILED, self.session_id, exc)
            return
        if not applied:
            logger.warning(LogTemplates.VOLUME_LIVE_FAILED, self.session_id, "not applied")

    async def _close_stream(self, stream: StreamHandle) -> None:
        try:
            await stream.close()
        except Exception as exc:
            logger.warning(LogTemplates.PLAYBACK_STREAM_CLOSE_FAILED, self.session_id, exc)

    async def _notify_terminated(self, reason: SessionDestroyReason, discarded: int) -> None:
        if self._on_terminated is not None:
            await self._on_terminated(self, reason, discarded)

    def _emit(self, kind: NotificationKind, text: str, track: Track | None = None) -> None:
        try:
            self._notifier.notify(self.session_id, Notification(kind=kind, text=text, track=track))
        except Exception as exc:
            logger.warning(LogTemplates.NOTIFY_FAILED, self.session_id, exc)

    def _publish(self, event: DomainEvent) -> None:
        self._spawn(self._event_bus.publish(event))

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
