"""Command and handler for pausing and resuming the current stream."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from music_session_manager.domain.shared.exceptions import InvalidStateError, SessionClosedError
from music_session_manager.domain.shared.messages import ErrorMessages, NotificationMessages
from music_session_manager.domain.shared.types import SessionId

if TYPE_CHECKING:
    from ..services.session_registry import SessionRegistry


class PlaybackAction(Enum):
    PAUSE = "pause"
    RESUME = "resume"


class PauseResumeStatus(Enum):
    SUCCESS = "success"
    INVALID_STATE = "invalid_state"


class PauseResumeCommand(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    session_id: SessionId
    action: PlaybackAction


class PauseResumeResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: PauseResumeStatus
    action: PlaybackAction
    message: str

    @property
    def is_success(self) -> bool:
        return self.status == PauseResumeStatus.SUCCESS


class PauseResumeHandler:
    """Pause is only valid while playing; resume only while paused."""

    def __init__(self, *, registry: SessionRegistry) -> None:
        self._registry = registry

    async def handle(self, command: PauseResumeCommand) -> PauseResumeResult:
        pausing = command.action is PlaybackAction.PAUSE
        rejection = ErrorMessages.NOTHING_PLAYING if pausing else ErrorMessages.NOTHING_PAUSED

        entry = self._registry.get(command.session_id)
        if entry is None:
            return self._rejected(command.action, rejection)

        try:
            if pausing:
                await entry.driver.pause()
            else:
                await entry.driver.resume()
        except SessionClosedError:
            raise
        except InvalidStateError:
            return self._rejected(command.action, rejection)

        return PauseResumeResult(
            status=PauseResumeStatus.SUCCESS,
            action=command.action,
            message=NotificationMessages.PAUSED if pausing else NotificationMessages.RESUMED,
        )

    @staticmethod
    def _rejected(action: PlaybackAction, message: str) -> PauseResumeResult:
        return PauseResumeResult(
            status=PauseResumeStatus.INVALID_STATE, action=action, message=message
        )
