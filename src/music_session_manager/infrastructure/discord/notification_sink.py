"""NotificationSink that posts driver notifications into a session's text channel."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import discord

from music_session_manager.application.interfaces.notification_sink import (
    Notification,
    NotificationSink,
)
from music_session_manager.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from music_session_manager.domain.shared.types import SessionId

logger = logging.getLogger(__name__)


class DiscordNotificationSink(NotificationSink):
    """Delivers notifications to the text channel last used for each session.

    ``notify`` never blocks the caller: the send is scheduled as a task and
    delivery failures are only logged.
    """

    def __init__(self, bot: discord.Client) -> None:
        self._bot = bot
        self._channels: dict[SessionId, int] = {}
        self._pending: set[asyncio.Task[Any]] = set()

    def register_channel(self, session_id: SessionId, channel_id: int) -> None:
        """Remember where notifications for *session_id* should go."""
        self._channels[session_id] = channel_id

    def forget(self, session_id: SessionId) -> None:
        self._channels.pop(session_id, None)

    def channel_for(self, session_id: SessionId) -> int | None:
        return self._channels.get(session_id)

    def notify(self, session_id: SessionId, notification: Notification) -> None:
        channel_id = self._channels.get(session_id)
        if channel_id is None:
            logger.debug(LogTemplates.NOTIFY_NO_CHANNEL, session_id)
            return

        task = asyncio.get_running_loop().create_task(
            self._send(session_id, channel_id, notification.text)
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _send(self, session_id: SessionId, channel_id: int, text: str) -> None:
        channel = self._bot.get_channel(channel_id)
        if not isinstance(channel, discord.abc.Messageable):
            logger.debug(LogTemplates.NOTIFY_NO_CHANNEL, session_id)
            return

        try:
            await channel.send(text)
        except discord.HTTPException as exc:
            logger.warning(LogTemplates.NOTIFY_FAILED, session_id, exc)
