"""Core domain entities for the music bounded context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from music_session_manager.domain.shared.exceptions import (
    InvalidArgumentError,
    QueueFullError,
)
from music_session_manager.domain.shared.messages import ErrorMessages
from music_session_manager.domain.shared.types import (
    MAX_VOLUME,
    MIN_VOLUME,
    DurationSeconds,
    LocatorStr,
    MaxQueueSize,
    NonEmptyStr,
    NonNegativeInt,
    SessionId,
    TrackTitleStr,
    VolumeLevel,
)


class Track(BaseModel):
    """Immutable descriptor of one playable item, created at resolution time."""

    model_config = ConfigDict(frozen=True, strict=True)

    title: TrackTitleStr
    locator: LocatorStr
    duration: DurationSeconds | NonEmptyStr | None = None
    thumbnail_url: NonEmptyStr | None = None
    requested_by: NonEmptyStr = "unknown"

    @property
    def duration_formatted(self) -> str:
        """Format duration as MM:SS or HH:MM:SS; text durations pass through."""
        if self.duration is None:
            return "Unknown"
        if isinstance(self.duration, str):
            return self.duration

        hours, remainder = divmod(self.duration, 3600)
        minutes, seconds = divmod(remainder, 60)

        if hours > 0:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes}:{seconds:02d}"

    @property
    def display_title(self) -> str:
        if self.duration is not None:
            return f"{self.title} [{self.duration_formatted}]"
        return self.title

    def with_requester(self, requested_by: NonEmptyStr) -> Track:
        """Return a copy of this track attributed to *requested_by*."""
        return self.model_copy(update={"requested_by": requested_by})


class QueueSnapshot(BaseModel):
    """Read-only view of a queue for display."""

    model_config = ConfigDict(frozen=True)

    tracks: list[Track] = Field(default_factory=list)
    total: NonNegativeInt = 0
    playing: bool = False
    volume: VolumeLevel = MAX_VOLUME

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    @property
    def truncated(self) -> bool:
        return self.total > len(self.tracks)


class SessionQueue(BaseModel):
    """Ordered tracks plus playing flag and volume for one session.

    The head of ``tracks`` is the track bound to the playback driver whenever
    ``playing`` is True.
    """

    model_config = ConfigDict(strict=True)

    session_id: SessionId
    tracks: list[Track] = Field(default_factory=list)
    playing: bool = False
    volume: VolumeLevel = MAX_VOLUME
    max_size: MaxQueueSize | None = None

    def __len__(self) -> int:
        return len(self.tracks)

    @property
    def is_empty(self) -> bool:
        return not self.tracks

    def enqueue(self, track: Track) -> int:
        """Append a track and return the queue length after insertion."""
        if self.max_size is not None and len(self.tracks) >= self.max_size:
            raise QueueFullError(self.max_size)
        self.tracks.append(track)
        return len(self.tracks)

    def advance(self) -> Track | None:
        """Drop the head and return the new head.

        On an empty queue this is a no-op and ``playing`` is left untouched.
        """
        if not self.tracks:
            return None
        self.tracks.pop(0)
        self.playing = False
        return self.peek_head()

    def clear(self) -> int:
        """Empty the queue, reset ``playing`` and return the count removed."""
        count = len(self.tracks)
        self.tracks.clear()
        self.playing = False
        return count

    def mark_playing(self) -> None:
        if not self.tracks:
            raise InvalidArgumentError("tracks", ErrorMessages.NOTHING_QUEUED)
        self.playing = True

    def set_volume(self, level: int) -> None:
        """Store a new volume level; out-of-range values leave it unchanged."""
        if isinstance(level, bool) or not isinstance(level, int) or not (
            MIN_VOLUME <= level <= MAX_VOLUME
        ):
            raise InvalidArgumentError(
                "level",
                ErrorMessages.INVALID_VOLUME.format(min=MIN_VOLUME, max=MAX_VOLUME, level=level),
            )
        self.volume = level

    def peek_head(self) -> Track | None:
        return self.tracks[0] if self.tracks else None

    def snapshot(self, limit: int) -> QueueSnapshot:
        """Return up to *limit* tracks in play order plus the total count."""
        return QueueSnapshot(
            tracks=list(self.tracks[: max(0, limit)]),
            total=len(self.tracks),
            playing=self.playing,
            volume=self.volume,
        )
