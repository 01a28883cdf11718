"""
Application Commands (CQRS Write Side)

Command objects and their handlers for write operations.
Commands represent intent to change the system state.
"""

from music_session_manager.application.commands.dispatcher import CommandDispatcher
from music_session_manager.application.commands.pause_resume import (
    PauseResumeCommand,
    PauseResumeResult,
    PlaybackAction,
)
from music_session_manager.application.commands.play_track import (
    PlayTrackCommand,
    PlayTrackResult,
    PlayTrackStatus,
)
from music_session_manager.application.commands.set_volume import SetVolumeCommand, SetVolumeResult
from music_session_manager.application.commands.skip_track import SkipResult, SkipTrackCommand
from music_session_manager.application.commands.stop_playback import (
    StopPlaybackCommand,
    StopResult,
)

__all__ = [
    "CommandDispatcher",
    # Play
    "PlayTrackCommand",
    "PlayTrackResult",
    "PlayTrackStatus",
    # Skip
    "SkipTrackCommand",
    "SkipResult",
    # Stop
    "StopPlaybackCommand",
    "StopResult",
    # Pause / Resume
    "PauseResumeCommand",
    "PauseResumeResult",
    "PlaybackAction",
    # Volume
    "SetVolumeCommand",
    "SetVolumeResult",
]
