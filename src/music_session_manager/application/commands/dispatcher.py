"""Command Dispatcher - single entry point for external requests."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

from music_session_manager.domain.shared.exceptions import SessionClosedError
from music_session_manager.domain.shared.messages import LogTemplates

from ..queries.get_current import CurrentTrackInfo, GetCurrentTrackQuery
from ..queries.get_queue import GetQueueQuery, QueueInfo
from .pause_resume import PauseResumeCommand, PauseResumeResult, PlaybackAction
from .play_track import PlayTrackCommand, PlayTrackResult
from .set_volume import SetVolumeCommand, SetVolumeResult
from .skip_track import SkipResult, SkipTrackCommand
from .stop_playback import StopPlaybackCommand, StopResult

if TYPE_CHECKING:
    from ..queries.get_current import GetCurrentTrackHandler
    from ..queries.get_queue import GetQueueHandler
    from .pause_resume import PauseResumeHandler
    from .play_track import PlayTrackHandler
    from .set_volume import SetVolumeHandler
    from .skip_track import SkipTrackHandler
    from .stop_playback import StopPlaybackHandler

logger = logging.getLogger(__name__)

R = TypeVar("R")


class CommandDispatcher:
    """Routes requests to their handlers.

    A request that reaches a session torn down while it waited for the
    session lock is retried once; the registry hands out a fresh entry.
    """

    def __init__(
        self,
        *,
        play_handler: PlayTrackHandler,
        skip_handler: SkipTrackHandler,
        stop_handler: StopPlaybackHandler,
        pause_resume_handler: PauseResumeHandler,
        volume_handler: SetVolumeHandler,
        queue_handler: GetQueueHandler,
        current_handler: GetCurrentTrackHandler,
        queue_display_limit: int = 10,
    ) -> None:
        self._play = play_handler
        self._skip = skip_handler
        self._stop = stop_handler
        self._pause_resume = pause_resume_handler
        self._volume = volume_handler
        self._queue = queue_handler
        self._current = current_handler
        self._queue_display_limit = queue_display_limit

    async def play(
        self, session_id: int, channel_ref: int, user_name: str, query: str
    ) -> PlayTrackResult:
        command = PlayTrackCommand(
            session_id=session_id, channel_ref=channel_ref, user_name=user_name, query=query
        )
        return await self._with_retry("play", session_id, lambda: self._play.handle(command))

    async def skip(self, session_id: int) -> SkipResult:
        command = SkipTrackCommand(session_id=session_id)
        return await self._with_retry("skip", session_id, lambda: self._skip.handle(command))

    async def stop(self, session_id: int) -> StopResult:
        command = StopPlaybackCommand(session_id=session_id)
        return await self._with_retry("stop", session_id, lambda: self._stop.handle(command))

    async def pause(self, session_id: int) -> PauseResumeResult:
        command = PauseResumeCommand(session_id=session_id, action=PlaybackAction.PAUSE)
        return await self._with_retry(
            "pause", session_id, lambda: self._pause_resume.handle(command)
        )

    async def resume(self, session_id: int) -> PauseResumeResult:
        command = PauseResumeCommand(session_id=session_id, action=PlaybackAction.RESUME)
        return await self._with_retry(
            "resume", session_id, lambda: self._pause_resume.handle(command)
        )

    async def set_volume(self, session_id: int, level: int) -> SetVolumeResult:
        command = SetVolumeCommand(session_id=session_id, level=level)
        return await self._with_retry(
            "set_volume", session_id, lambda: self._volume.handle(command)
        )

    async def get_queue(self, session_id: int, limit: int | None = None) -> QueueInfo:
        query = GetQueueQuery(session_id=session_id, limit=limit or self._queue_display_limit)
        return await self._queue.handle(query)

    async def now_playing(self, session_id: int) -> CurrentTrackInfo:
        return await self._current.handle(GetCurrentTrackQuery(session_id=session_id))

    async def _with_retry(
        self, operation: str, session_id: int, call: Callable[[], Awaitable[R]]
    ) -> R:
        try:
            return await call()
        except SessionClosedError:
            logger.info(LogTemplates.SESSION_CLOSED_RETRY, session_id, operation)
            return await call()
