"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class PlaybackState(Enum):
    """Playback driver state with enforced transitions.

    State transitions:
    - IDLE -> OPENING (start with a non-empty queue)
    - OPENING -> PLAYING (stream opened and bound)
    - OPENING -> IDLE (open failed; head dropped)
    - PLAYING -> IDLE (stream exhausted or errored)
    - PLAYING <-> PAUSED (pause / resume)
    - Any -> TERMINATED (stop, idle teardown, transport lost)
    """

    IDLE = "idle"
    OPENING = "opening"
    PLAYING = "playing"
    PAUSED = "paused"
    TERMINATED = "terminated"

    def can_transition_to(self, target: PlaybackState) -> bool:
        """Check if transition to target state is valid."""
        if target is PlaybackState.TERMINATED:
            return self is not PlaybackState.TERMINATED

        valid_transitions = {
            PlaybackState.IDLE: {PlaybackState.OPENING},
            PlaybackState.OPENING: {PlaybackState.PLAYING, PlaybackState.IDLE},
            PlaybackState.PLAYING: {PlaybackState.PAUSED, PlaybackState.IDLE},
            PlaybackState.PAUSED: {PlaybackState.PLAYING, PlaybackState.IDLE},
        }
        return target in valid_transitions.get(self, set())

    @property
    def has_stream(self) -> bool:
        """True while a stream is bound to the transport."""
        return self in {PlaybackState.PLAYING, PlaybackState.PAUSED}


class StreamEventKind(Enum):
    """Terminal events a stream handle can emit."""

    EXHAUSTED = "exhausted"
    ERROR = "error"


class StreamEvent(BaseModel):
    """The single terminal event of an open stream."""

    model_config = ConfigDict(frozen=True)

    kind: StreamEventKind
    detail: str | None = None

    @classmethod
    def exhausted(cls) -> StreamEvent:
        return cls(kind=StreamEventKind.EXHAUSTED)

    @classmethod
    def error(cls, detail: str) -> StreamEvent:
        return cls(kind=StreamEventKind.ERROR, detail=detail)

    @property
    def is_error(self) -> bool:
        return self.kind is StreamEventKind.ERROR


class TrackFinishReason(Enum):
    """Reasons a track can finish playing."""

    COMPLETED = "completed"
    ERROR = "error"
    SKIPPED = "skipped"
    STOPPED = "stopped"


class SessionDestroyReason(Enum):
    """Reasons a session can be destroyed."""

    STOPPED = "stopped"
    IDLE_TIMEOUT = "idle_timeout"
    TRANSPORT_LOST = "transport_lost"
    SHUTDOWN = "shutdown"
