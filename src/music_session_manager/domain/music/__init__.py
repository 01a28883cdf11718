"""
Music Bounded Context

Domain logic for track descriptors, per-session queues and playback state.
"""

from music_session_manager.domain.music.entities import QueueSnapshot, SessionQueue, Track
from music_session_manager.domain.music.value_objects import (
    PlaybackState,
    SessionDestroyReason,
    StreamEvent,
    StreamEventKind,
    TrackFinishReason,
)

__all__ = [
    # Entities
    "Track",
    "SessionQueue",
    "QueueSnapshot",
    # Value Objects
    "PlaybackState",
    "StreamEvent",
    "StreamEventKind",
    "TrackFinishReason",
    "SessionDestroyReason",
]
