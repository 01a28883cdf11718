"""Port interface for user-facing notifications."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from pydantic import BaseModel, ConfigDict

from music_session_manager.domain.music.entities import Track
from music_session_manager.domain.shared.types import SessionId


class NotificationKind(Enum):
    NOW_PLAYING = "now_playing"
    PLAYBACK_ERROR = "playback_error"
    DISCONNECTED = "disconnected"


class Notification(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: NotificationKind
    text: str
    track: Track | None = None


class NotificationSink(ABC):
    """Fire-and-forget delivery of messages to a session's users."""

    @abstractmethod
    def notify(self, session_id: SessionId, notification: Notification) -> None:
        ...
