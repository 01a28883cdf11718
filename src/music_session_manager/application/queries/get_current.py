"""Query for retrieving the currently playing track."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from music_session_manager.domain.music.entities import Track
from music_session_manager.domain.music.value_objects import PlaybackState
from music_session_manager.domain.shared.types import MAX_VOLUME, NonNegativeInt, SessionId, VolumeLevel

if TYPE_CHECKING:
    from ..services.session_registry import SessionRegistry


class GetCurrentTrackQuery(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    session_id: SessionId


class CurrentTrackInfo(BaseModel):

    session_id: SessionId
    track: Track | None = None
    is_playing: bool = False
    is_paused: bool = False
    queue_length: NonNegativeInt = 0
    volume: VolumeLevel = MAX_VOLUME


class GetCurrentTrackHandler:

    def __init__(self, *, registry: SessionRegistry) -> None:
        self._registry = registry

    async def handle(self, query: GetCurrentTrackQuery) -> CurrentTrackInfo:
        entry = self._registry.get(query.session_id)

        if entry is None:
            return CurrentTrackInfo(session_id=query.session_id)

        state = entry.driver.state
        return CurrentTrackInfo(
            session_id=query.session_id,
            track=entry.driver.now_playing,
            is_playing=state is PlaybackState.PLAYING,
            is_paused=state is PlaybackState.PAUSED,
            queue_length=len(entry.queue),
            volume=entry.queue.volume,
        )
