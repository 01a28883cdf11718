"""Discord voice gateway implementing SessionGateway for connection and output binding."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

import discord

from music_session_manager.application.interfaces.session_gateway import (
    SessionGateway,
    Transport,
)
from music_session_manager.application.interfaces.stream_provider import StreamHandle
from music_session_manager.domain.shared.exceptions import ConnectError
from music_session_manager.domain.shared.messages import ErrorMessages, LogTemplates
from music_session_manager.domain.shared.types import ChannelRef, SessionId

from ..audio.ffmpeg_stream import FFmpegStreamHandle

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT: float = 10.0

TransportLostCallback = Callable[[SessionId], Awaitable[None]]


class VoiceTransport(Transport):
    """A guild's voice connection."""

    def __init__(self, session_id: SessionId, voice_client: discord.VoiceClient) -> None:
        self._session_id = session_id
        self._voice_client = voice_client

    @property
    def session_id(self) -> SessionId:
        return self._session_id

    @property
    def channel_ref(self) -> ChannelRef | None:
        channel = self._voice_client.channel
        return channel.id if channel is not None else None

    @property
    def voice_client(self) -> discord.VoiceClient:
        return self._voice_client

    def is_connected(self) -> bool:
        return self._voice_client.is_connected()


class DiscordSessionGateway(SessionGateway):
    def __init__(self, bot: discord.Client) -> None:
        self._bot = bot
        self._on_transport_lost: TransportLostCallback | None = None
        # Guilds we are disconnecting from ourselves; their voice update is not a loss
        self._releasing: set[int] = set()

    def _get_guild(self, guild_id: int) -> discord.Guild | None:
        return self._bot.get_guild(guild_id)

    def _get_voice_client(self, guild: discord.Guild) -> discord.VoiceClient | None:
        vc = guild.voice_client
        return vc if isinstance(vc, discord.VoiceClient) else None

    def _get_voice_channel(
        self, guild: discord.Guild, channel_ref: ChannelRef
    ) -> discord.VoiceChannel | discord.StageChannel:
        channel = guild.get_channel(channel_ref)
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            raise ConnectError(
                guild.id, ErrorMessages.CHANNEL_NOT_VOICE.format(channel_id=channel_ref)
            )
        return channel

    # ─────────────────────────────────────────────────────────────────
    # SessionGateway
    # ─────────────────────────────────────────────────────────────────

    async def acquire_transport(self, session_id: SessionId, channel_ref: ChannelRef) -> VoiceTransport:
        """Connect to *channel_ref*, reusing or moving an existing connection.

        Raises:
            ConnectError: Guild or channel missing, timeout, or no permission.
        """
        guild = self._get_guild(session_id)
        if guild is None:
            raise ConnectError(session_id, ErrorMessages.GUILD_NOT_FOUND.format(guild_id=session_id))

        channel = self._get_voice_channel(guild, channel_ref)
        vc = self._get_voice_client(guild)

        if vc is not None and not vc.is_connected():
            logger.warning(LogTemplates.VOICE_STALE_CLEANUP, session_id)
            await self._disconnect(session_id, vc)
            vc = None

        try:
            async with asyncio.timeout(CONNECT_TIMEOUT):
                if vc is None:
                    vc = await channel.connect(self_deaf=True)
                    logger.info(LogTemplates.VOICE_CONNECTED, channel.name, guild.name)
                elif vc.channel is None or vc.channel.id != channel.id:
                    await vc.move_to(channel)
                    logger.info(LogTemplates.VOICE_MOVED, channel.name)
        except TimeoutError as e:
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, channel_ref)
            raise ConnectError(
                session_id, ErrorMessages.VOICE_CONNECT_TIMEOUT.format(channel_id=channel_ref)
            ) from e
        except discord.Forbidden as e:
            logger.error(LogTemplates.VOICE_NO_PERMISSION, channel_ref)
            raise ConnectError(
                session_id, ErrorMessages.VOICE_NO_PERMISSION.format(channel_id=channel_ref)
            ) from e
        except discord.ClientException as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            raise ConnectError(session_id, str(e)) from e

        await self._ensure_self_deaf(guild, channel)
        return VoiceTransport(session_id, vc)

    async def bind_output(self, transport: Transport, stream: StreamHandle) -> None:
        if not isinstance(transport, VoiceTransport) or not isinstance(stream, FFmpegStreamHandle):
            raise TypeError("Discord gateway only binds FFmpeg streams to voice transports")

        vc = transport.voice_client
        if not vc.is_connected():
            raise ConnectError(transport.session_id)

        if vc.is_playing() or vc.is_paused():
            vc.stop()

        vc.play(stream.source, after=stream.after_callback)
        stream.attach(vc)

    async def release(self, transport: Transport) -> None:
        if not isinstance(transport, VoiceTransport):
            raise TypeError("Discord gateway only releases voice transports")
        await self._disconnect(transport.session_id, transport.voice_client)

    def set_on_transport_lost(self, callback: TransportLostCallback) -> None:
        self._on_transport_lost = callback

    # ─────────────────────────────────────────────────────────────────
    # Voice state tracking
    # ─────────────────────────────────────────────────────────────────

    async def handle_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ) -> None:
        """Report the bot being removed from voice by anyone but us."""
        if self._bot.user is None or member.id != self._bot.user.id:
            return
        if before.channel is None or after.channel is not None:
            return

        guild_id = member.guild.id
        if guild_id in self._releasing:
            self._releasing.discard(guild_id)
            return

        vc = self._get_voice_client(member.guild)
        if vc is not None and vc.is_connected():
            return

        logger.warning(LogTemplates.VOICE_DISCONNECTED, guild_id)
        if self._on_transport_lost is not None:
            await self._on_transport_lost(guild_id)

    async def _disconnect(self, session_id: SessionId, vc: discord.VoiceClient) -> None:
        if vc.is_connected():
            self._releasing.add(session_id)
        if vc.is_playing() or vc.is_paused():
            vc.stop()
        await vc.disconnect(force=True)
        logger.info(LogTemplates.VOICE_DISCONNECTED, session_id)

    async def _ensure_self_deaf(
        self,
        guild: discord.Guild,
        channel: discord.VoiceChannel | discord.StageChannel,
    ) -> None:
        try:
            await guild.change_voice_state(channel=channel, self_deaf=True)
        except Exception as exc:
            logger.debug(LogTemplates.VOICE_SELF_DEAFEN_FAILED, guild.id, exc)
