"""Discord event listeners for session activity, gateway lifecycle, and guild removal."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from music_session_manager.domain.music.value_objects import TrackFinishReason
from music_session_manager.domain.shared.events import (
    QueueExhausted,
    SessionCreated,
    SessionDestroyed,
    TrackFailedToOpen,
    TrackFinishedPlaying,
    TrackStartedPlaying,
)
from music_session_manager.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


@dataclass
class SessionActivity:
    """Running counters for one session, reset when the session closes."""

    played: int = 0
    failed: int = 0
    skipped: int = 0


class EventCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container
        self._resumed_logged_once = False
        self._activity: dict[int, SessionActivity] = {}

        self._event_bus = container.event_bus
        self._subscriptions = (
            (SessionCreated, self._on_session_created),
            (TrackStartedPlaying, self._on_track_started),
            (TrackFinishedPlaying, self._on_track_finished),
            (TrackFailedToOpen, self._on_track_failed),
            (QueueExhausted, self._on_queue_exhausted),
            (SessionDestroyed, self._on_session_destroyed),
        )
        for event_type, handler in self._subscriptions:
            self._event_bus.subscribe(event_type, handler)

    async def cog_unload(self) -> None:
        for event_type, handler in self._subscriptions:
            self._event_bus.unsubscribe(event_type, handler)

    def activity_for(self, session_id: int) -> SessionActivity | None:
        return self._activity.get(session_id)

    # ─────────────────────────────────────────────────────────────────
    # Session Activity
    # ─────────────────────────────────────────────────────────────────

    def _counters(self, session_id: int) -> SessionActivity:
        return self._activity.setdefault(session_id, SessionActivity())

    async def _on_session_created(self, event: SessionCreated) -> None:
        self._activity[event.session_id] = SessionActivity()

    async def _on_track_started(self, event: TrackStartedPlaying) -> None:
        self._counters(event.session_id).played += 1

    async def _on_track_finished(self, event: TrackFinishedPlaying) -> None:
        if event.reason == TrackFinishReason.SKIPPED.value:
            self._counters(event.session_id).skipped += 1

    async def _on_track_failed(self, event: TrackFailedToOpen) -> None:
        self._counters(event.session_id).failed += 1
        logger.info(
            LogTemplates.ACTIVITY_TRACK_FAILED, event.track_title, event.session_id, event.error
        )

    async def _on_queue_exhausted(self, event: QueueExhausted) -> None:
        logger.info(
            LogTemplates.ACTIVITY_QUEUE_EXHAUSTED,
            event.session_id,
            self._counters(event.session_id).played,
        )

    async def _on_session_destroyed(self, event: SessionDestroyed) -> None:
        activity = self._activity.pop(event.session_id, SessionActivity())
        logger.info(
            LogTemplates.ACTIVITY_SESSION_SUMMARY,
            event.session_id,
            event.reason,
            activity.played,
            activity.failed,
            activity.skipped,
            event.tracks_discarded,
        )

    # ─────────────────────────────────────────────────────────────────
    # Lifecycle Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_connect(self) -> None:
        logger.info(LogTemplates.GATEWAY_CONNECTED)

    @commands.Cog.listener()
    async def on_disconnect(self) -> None:
        logger.warning(LogTemplates.GATEWAY_DISCONNECTED)

    @commands.Cog.listener()
    async def on_resumed(self) -> None:
        if not self._resumed_logged_once:
            logger.info(LogTemplates.GATEWAY_RESUMED)
            self._resumed_logged_once = True

    # ─────────────────────────────────────────────────────────────────
    # Guild Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_guild_remove(self, guild: discord.Guild) -> None:
        entry = self.container.session_registry.get(guild.id)
        if entry is None:
            return

        logger.info(LogTemplates.GUILD_REMOVED, guild.name, guild.id)
        await entry.driver.stop()


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(EventCog(bot, container))
