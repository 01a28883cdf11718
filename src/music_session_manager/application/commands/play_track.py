"""Command and handler for playing a track from a query or URL."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, field_validator

from music_session_manager.domain.music.entities import Track
from music_session_manager.domain.shared.exceptions import (
    ConnectError,
    QueueFullError,
    TrackLookupError,
    TrackNotFoundError,
)
from music_session_manager.domain.shared.messages import NotificationMessages
from music_session_manager.domain.shared.types import (
    ChannelRef,
    NonEmptyStr,
    NonNegativeInt,
    SessionId,
)

if TYPE_CHECKING:
    from ..interfaces.track_resolver import TrackResolver
    from ..services.session_registry import SessionRegistry

logger = logging.getLogger(__name__)


class PlayTrackStatus(Enum):
    """Status codes for play track results."""

    NOW_PLAYING = "now_playing"
    QUEUED = "queued"
    TRACK_NOT_FOUND = "track_not_found"
    RESOLUTION_ERROR = "resolution_error"
    VOICE_ERROR = "voice_error"
    QUEUE_FULL = "queue_full"
    PLAYBACK_FAILED = "playback_failed"


class PlayTrackCommand(BaseModel):
    """Request to resolve a query/URL, queue the track, and start playback if idle."""

    model_config = ConfigDict(frozen=True, strict=True)

    session_id: SessionId
    channel_ref: ChannelRef
    user_name: NonEmptyStr
    query: NonEmptyStr

    @field_validator("query", mode="before")
    @classmethod
    def _strip_query(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v


class PlayTrackResult(BaseModel):
    """Result of a play track command."""

    model_config = ConfigDict(frozen=True)

    status: PlayTrackStatus
    message: str
    track: Track | None = None
    queue_position: NonNegativeInt | None = None
    started_playing: bool = False

    @property
    def is_success(self) -> bool:
        return self.status in {PlayTrackStatus.NOW_PLAYING, PlayTrackStatus.QUEUED}

    @classmethod
    def success(cls, track: Track, queue_position: int, started_playing: bool) -> PlayTrackResult:
        if started_playing:
            status = PlayTrackStatus.NOW_PLAYING
            message = NotificationMessages.NOW_PLAYING.format(title=track.title)
        else:
            status = PlayTrackStatus.QUEUED
            message = NotificationMessages.QUEUED.format(title=track.title, position=queue_position)

        return cls(
            status=status,
            message=message,
            track=track,
            queue_position=queue_position,
            started_playing=started_playing,
        )

    @classmethod
    def error(cls, status: PlayTrackStatus, message: str, track: Track | None = None) -> PlayTrackResult:
        return cls(status=status, message=message, track=track)


class PlayTrackHandler:
    """Resolves a track, enqueues it on the session, and lets the driver start it."""

    def __init__(
        self,
        *,
        registry: SessionRegistry,
        track_resolver: TrackResolver,
    ) -> None:
        self._registry = registry
        self._resolver = track_resolver

    async def handle(self, command: PlayTrackCommand) -> PlayTrackResult:
        # Resolve before touching the registry so a miss leaves no state behind.
        try:
            track = await self._resolver.resolve(command.query, command.user_name)
        except TrackNotFoundError as e:
            return PlayTrackResult.error(PlayTrackStatus.TRACK_NOT_FOUND, e.message)
        except TrackLookupError as e:
            logger.warning("Lookup failed for '%s': %s", command.query, e.message)
            return PlayTrackResult.error(PlayTrackStatus.RESOLUTION_ERROR, e.message)

        entry = self._registry.get_or_create(command.session_id)

        try:
            outcome = await entry.driver.enqueue(track, command.channel_ref)
        except ConnectError as e:
            return PlayTrackResult.error(PlayTrackStatus.VOICE_ERROR, e.message, track)
        except QueueFullError as e:
            return PlayTrackResult.error(PlayTrackStatus.QUEUE_FULL, e.message, track)

        if outcome.open_failed:
            return PlayTrackResult.error(
                PlayTrackStatus.PLAYBACK_FAILED,
                NotificationMessages.PLAYBACK_FAILED.format(title=track.title),
                track,
            )

        return PlayTrackResult.success(
            track=track,
            queue_position=outcome.position,
            started_playing=outcome.is_now_playing,
        )
