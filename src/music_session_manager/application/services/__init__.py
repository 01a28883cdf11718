"""Application services: the per-session playback driver and the session registry."""

from music_session_manager.application.services.playback_driver import PlaybackDriver
from music_session_manager.application.services.queue_models import EnqueueOutcome
from music_session_manager.application.services.session_registry import (
    SessionEntry,
    SessionRegistry,
)

__all__ = [
    "EnqueueOutcome",
    "PlaybackDriver",
    "SessionEntry",
    "SessionRegistry",
]
