"""Command and handler for changing a session's volume."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from music_session_manager.domain.shared.exceptions import InvalidArgumentError
from music_session_manager.domain.shared.messages import NotificationMessages
from music_session_manager.domain.shared.types import SessionId

if TYPE_CHECKING:
    from ..services.session_registry import SessionRegistry


class SetVolumeStatus(Enum):
    SUCCESS = "success"
    INVALID_ARGUMENT = "invalid_argument"


class SetVolumeCommand(BaseModel):
    """Range checking is left to the session queue so the error carries its message."""

    model_config = ConfigDict(frozen=True, strict=True)

    session_id: SessionId
    level: int


class SetVolumeResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: SetVolumeStatus
    message: str
    level: int | None = None

    @property
    def is_success(self) -> bool:
        return self.status == SetVolumeStatus.SUCCESS


class SetVolumeHandler:
    """Stores the level on the session queue and applies it to the live stream."""

    def __init__(self, *, registry: SessionRegistry) -> None:
        self._registry = registry

    async def handle(self, command: SetVolumeCommand) -> SetVolumeResult:
        entry = self._registry.get_or_create(command.session_id)

        try:
            await entry.driver.set_volume(command.level)
        except InvalidArgumentError as e:
            return SetVolumeResult(status=SetVolumeStatus.INVALID_ARGUMENT, message=e.message)

        return SetVolumeResult(
            status=SetVolumeStatus.SUCCESS,
            message=NotificationMessages.VOLUME_SET.format(level=command.level),
            level=command.level,
        )
