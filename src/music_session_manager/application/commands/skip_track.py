"""Command and handler for skipping the current track."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from music_session_manager.domain.music.entities import Track
from music_session_manager.domain.shared.exceptions import InvalidStateError, SessionClosedError
from music_session_manager.domain.shared.messages import ErrorMessages, NotificationMessages
from music_session_manager.domain.shared.types import SessionId

if TYPE_CHECKING:
    from ..services.session_registry import SessionRegistry


class SkipStatus(Enum):
    """Status codes for skip results."""

    SUCCESS = "success"
    NOTHING_PLAYING = "nothing_playing"


class SkipTrackCommand(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    session_id: SessionId


class SkipResult(BaseModel):
    """Result of a skip track command."""

    model_config = ConfigDict(frozen=True)

    status: SkipStatus
    message: str
    skipped_track: Track | None = None
    next_track: Track | None = None

    @property
    def is_success(self) -> bool:
        return self.status == SkipStatus.SUCCESS

    @classmethod
    def success(cls, skipped_track: Track, next_track: Track | None = None) -> SkipResult:
        return cls(
            status=SkipStatus.SUCCESS,
            message=NotificationMessages.SKIPPED.format(title=skipped_track.title),
            skipped_track=skipped_track,
            next_track=next_track,
        )

    @classmethod
    def nothing_playing(cls) -> SkipResult:
        return cls(status=SkipStatus.NOTHING_PLAYING, message=ErrorMessages.NOTHING_PLAYING)


class SkipTrackHandler:

    def __init__(self, *, registry: SessionRegistry) -> None:
        self._registry = registry

    async def handle(self, command: SkipTrackCommand) -> SkipResult:
        entry = self._registry.get(command.session_id)
        if entry is None:
            return SkipResult.nothing_playing()

        try:
            skipped = await entry.driver.skip()
        except SessionClosedError:
            raise
        except InvalidStateError:
            return SkipResult.nothing_playing()

        return SkipResult.success(skipped, entry.driver.now_playing)
