"""Discord cogs - command handlers."""

from music_session_manager.infrastructure.discord.cogs.music_cog import MusicCog

__all__ = ["MusicCog"]
