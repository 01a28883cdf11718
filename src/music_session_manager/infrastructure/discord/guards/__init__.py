"""Reusable guard functions for Discord slash commands."""

from music_session_manager.infrastructure.discord.guards.voice_guards import (
    get_member,
    get_member_voice_channel,
    send_ephemeral,
)

__all__ = ["get_member", "get_member_voice_channel", "send_ephemeral"]
