"""Command and handler for stopping playback and tearing the session down."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from music_session_manager.domain.shared.messages import ErrorMessages, NotificationMessages
from music_session_manager.domain.shared.types import NonNegativeInt, SessionId

if TYPE_CHECKING:
    from ..services.session_registry import SessionRegistry


class StopStatus(Enum):
    """Status codes for stop results."""

    SUCCESS = "success"
    NOTHING_PLAYING = "nothing_playing"


class StopPlaybackCommand(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    session_id: SessionId


class StopResult(BaseModel):

    status: StopStatus
    message: str
    tracks_cleared: NonNegativeInt = 0

    @property
    def is_success(self) -> bool:
        return self.status == StopStatus.SUCCESS

    @classmethod
    def success(cls, tracks_cleared: int = 0) -> StopResult:
        return cls(
            status=StopStatus.SUCCESS,
            message=NotificationMessages.STOPPED,
            tracks_cleared=tracks_cleared,
        )

    @classmethod
    def error(cls, status: StopStatus, message: str) -> StopResult:
        return cls(status=status, message=message)


class StopPlaybackHandler:
    """Clears the queue, releases the transport and evicts the session."""

    def __init__(self, *, registry: SessionRegistry) -> None:
        self._registry = registry

    async def handle(self, command: StopPlaybackCommand) -> StopResult:
        entry = self._registry.get(command.session_id)

        if entry is None:
            return StopResult.error(StopStatus.NOTHING_PLAYING, ErrorMessages.NOTHING_PLAYING)

        tracks_cleared = await entry.driver.stop()
        return StopResult.success(tracks_cleared)
