"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Discord (bot, slash commands, voice gateway, notification delivery)
- Audio (yt-dlp resolution, FFmpeg streams)
"""

from music_session_manager.infrastructure.discord.bot import create_bot
from music_session_manager.infrastructure.discord.session_gateway import DiscordSessionGateway

__all__ = [
    "create_bot",
    "DiscordSessionGateway",
]
