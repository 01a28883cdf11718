"""DTOs returned by the playback driver."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ...domain.music.entities import Track
from ...domain.shared.types import PositiveInt


class EnqueueOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    track: Track
    position: PositiveInt
    started_playback: bool = False
    open_failed: bool = False
    now_playing: Track | None = None

    @property
    def is_now_playing(self) -> bool:
        """True when the enqueued track is the one that just started."""
        return self.started_playback and self.now_playing is self.track
