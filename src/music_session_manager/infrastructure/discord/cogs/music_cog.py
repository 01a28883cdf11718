"""Slash-command cog: play, skip, stop, queue, pause, resume, nowplaying, volume."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from music_session_manager.application.commands.play_track import PlayTrackStatus
from music_session_manager.domain.shared.messages import DiscordUIMessages, ErrorMessages
from music_session_manager.infrastructure.discord.guards.voice_guards import (
    get_member,
    get_member_voice_channel,
    send_ephemeral,
)

if TYPE_CHECKING:
    from ....application.queries.get_queue import QueueInfo
    from ....config.container import Container
    from ....domain.music.entities import Track

logger = logging.getLogger(__name__)


def build_now_playing_embed(track: Track, volume: int | None = None) -> discord.Embed:
    embed = discord.Embed(
        title=DiscordUIMessages.EMBED_NOW_PLAYING,
        description=f"**[{track.title}]({track.locator})**",
        color=DiscordUIMessages.EMBED_COLOR,
        timestamp=discord.utils.utcnow(),
    )
    if track.thumbnail_url:
        embed.set_thumbnail(url=track.thumbnail_url)
    embed.add_field(
        name=DiscordUIMessages.EMBED_FIELD_DURATION, value=track.duration_formatted, inline=True
    )
    embed.add_field(
        name=DiscordUIMessages.EMBED_FIELD_REQUESTED_BY, value=track.requested_by, inline=True
    )
    if volume is not None:
        embed.add_field(name=DiscordUIMessages.EMBED_FIELD_VOLUME, value=f"{volume}%", inline=True)
    return embed


def build_queue_embed(queue_info: QueueInfo) -> discord.Embed:
    snapshot = queue_info.snapshot
    lines = [
        DiscordUIMessages.EMBED_QUEUE_LINE.format(
            index=i,
            title=track.title,
            url=track.locator,
            duration=track.duration_formatted,
        )
        for i, track in enumerate(snapshot.tracks, start=1)
    ]
    embed = discord.Embed(
        title=DiscordUIMessages.EMBED_QUEUE,
        description="\n".join(lines) or ErrorMessages.NOTHING_QUEUED,
        color=DiscordUIMessages.EMBED_COLOR,
        timestamp=discord.utils.utcnow(),
    )
    embed.set_footer(text=DiscordUIMessages.EMBED_QUEUE_FOOTER.format(total=snapshot.total))
    return embed


class MusicCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    # ─────────────────────────────────────────────────────────────────
    # Play
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="play", description="Play a song from YouTube")
    @app_commands.describe(query="Song name or YouTube URL")
    async def play(self, interaction: discord.Interaction, query: str) -> None:
        voice_channel = await get_member_voice_channel(interaction)
        if voice_channel is None or interaction.guild is None:
            return

        await interaction.response.defer()

        guild_id = interaction.guild.id
        if interaction.channel_id is not None:
            self.container.notification_sink.register_channel(guild_id, interaction.channel_id)

        result = await self.container.dispatcher.play(
            guild_id, voice_channel.id, interaction.user.display_name, query
        )

        if result.status is PlayTrackStatus.NOW_PLAYING and result.track is not None:
            await interaction.followup.send(embed=build_now_playing_embed(result.track))
        elif result.is_success:
            await interaction.followup.send(result.message)
        elif result.status is PlayTrackStatus.TRACK_NOT_FOUND:
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_NO_RESULTS)
        else:
            await send_ephemeral(
                interaction, DiscordUIMessages.ERROR_GENERIC.format(error=result.message)
            )

    # ─────────────────────────────────────────────────────────────────
    # Transport control
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="skip", description="Skip the current song")
    async def skip(self, interaction: discord.Interaction) -> None:
        if await get_member_voice_channel(interaction) is None or interaction.guild is None:
            return

        # Skipping opens the next stream, which can outlast the interaction deadline
        await interaction.response.defer()

        result = await self.container.dispatcher.skip(interaction.guild.id)
        if not result.is_success:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_NOTHING_PLAYING)
            return
        await interaction.followup.send(result.message)

    @app_commands.command(name="stop", description="Stop playback and clear the queue")
    async def stop(self, interaction: discord.Interaction) -> None:
        if await get_member_voice_channel(interaction) is None or interaction.guild is None:
            return

        result = await self.container.dispatcher.stop(interaction.guild.id)
        if not result.is_success:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_NOTHING_PLAYING)
            return
        await interaction.response.send_message(result.message)

    @app_commands.command(name="pause", description="Pause the current song")
    async def pause(self, interaction: discord.Interaction) -> None:
        if await get_member_voice_channel(interaction) is None or interaction.guild is None:
            return

        result = await self.container.dispatcher.pause(interaction.guild.id)
        if not result.is_success:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_NOTHING_PLAYING)
            return
        await interaction.response.send_message(result.message)

    @app_commands.command(name="resume", description="Resume the paused song")
    async def resume(self, interaction: discord.Interaction) -> None:
        if await get_member_voice_channel(interaction) is None or interaction.guild is None:
            return

        result = await self.container.dispatcher.resume(interaction.guild.id)
        if not result.is_success:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_NOTHING_PAUSED)
            return
        await interaction.response.send_message(result.message)

    @app_commands.command(name="volume", description="Set the volume (1-100)")
    @app_commands.describe(level="Volume level (1-100)")
    async def volume(
        self, interaction: discord.Interaction, level: app_commands.Range[int, 1, 100]
    ) -> None:
        if await get_member(interaction) is None or interaction.guild is None:
            return

        result = await self.container.dispatcher.set_volume(interaction.guild.id, level)
        if not result.is_success:
            await send_ephemeral(interaction, result.message)
            return
        await interaction.response.send_message(result.message)

    # ─────────────────────────────────────────────────────────────────
    # Inspection
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="queue", description="Show the current queue")
    async def queue(self, interaction: discord.Interaction) -> None:
        if await get_member(interaction) is None or interaction.guild is None:
            return

        queue_info = await self.container.dispatcher.get_queue(interaction.guild.id)
        await interaction.response.send_message(embed=build_queue_embed(queue_info))

    @app_commands.command(name="nowplaying", description="Show the currently playing song")
    async def nowplaying(self, interaction: discord.Interaction) -> None:
        if await get_member(interaction) is None or interaction.guild is None:
            return

        info = await self.container.dispatcher.now_playing(interaction.guild.id)
        if info.track is None:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_NOTHING_PLAYING)
            return
        await interaction.response.send_message(embed=build_now_playing_embed(info.track, info.volume))

    # ─────────────────────────────────────────────────────────────────
    # Voice state
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ) -> None:
        from ..session_gateway import DiscordSessionGateway

        gateway = self.container.session_gateway
        if isinstance(gateway, DiscordSessionGateway):
            await gateway.handle_voice_state_update(member, before, after)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(MusicCog(bot, container))
