"""
Unit Tests for EventCog

Tests for the event listeners in the event cog:
- Session activity counters fed by domain events on the bus
- Summary on SessionDestroyed and counter reset
- Unsubscribing on cog unload
- Lifecycle events (on_connect, on_disconnect, on_resumed)
- Guild removal stopping the guild's session
- setup()
"""

import logging
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
from discord.ext import commands

from music_session_manager.domain.music.value_objects import TrackFinishReason
from music_session_manager.domain.shared.events import (
    EventBus,
    QueueExhausted,
    SessionCreated,
    SessionDestroyed,
    TrackFailedToOpen,
    TrackFinishedPlaying,
    TrackStartedPlaying,
)
from music_session_manager.infrastructure.discord.cogs.event_cog import (
    EventCog,
    SessionActivity,
    setup,
)

GUILD_ID = 111111111111111111

COG_LOGGER = "music_session_manager.infrastructure.discord.cogs.event_cog"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def mock_bot():
    bot = MagicMock(spec=commands.Bot)
    bot.add_cog = AsyncMock()
    return bot


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def mock_container(bus):
    container = MagicMock()
    container.event_bus = bus
    return container


@pytest.fixture
def event_cog(mock_bot, mock_container):
    return EventCog(mock_bot, mock_container)


@pytest.fixture
def mock_guild():
    guild = MagicMock(spec=discord.Guild)
    guild.id = GUILD_ID
    guild.name = "Test Guild"
    return guild


# =============================================================================
# Session Activity Tests
# =============================================================================


class TestSessionActivity:
    @pytest.mark.asyncio
    async def test_counts_playback_events(self, event_cog, bus):
        await bus.publish(SessionCreated(session_id=GUILD_ID))
        await bus.publish(TrackStartedPlaying(session_id=GUILD_ID, track_title="A"))
        await bus.publish(
            TrackFinishedPlaying(
                session_id=GUILD_ID, track_title="A", reason=TrackFinishReason.SKIPPED.value
            )
        )
        await bus.publish(TrackFailedToOpen(session_id=GUILD_ID, track_title="B", error="boom"))
        await bus.publish(TrackStartedPlaying(session_id=GUILD_ID, track_title="C"))
        await bus.publish(
            TrackFinishedPlaying(
                session_id=GUILD_ID, track_title="C", reason=TrackFinishReason.COMPLETED.value
            )
        )

        assert event_cog.activity_for(GUILD_ID) == SessionActivity(played=2, failed=1, skipped=1)

    @pytest.mark.asyncio
    async def test_queue_exhausted_logs_played_count(self, event_cog, bus, caplog):
        await bus.publish(TrackStartedPlaying(session_id=GUILD_ID, track_title="A"))

        with caplog.at_level(logging.INFO, logger=COG_LOGGER):
            await bus.publish(QueueExhausted(session_id=GUILD_ID))

        assert f"Queue exhausted in session {GUILD_ID} after 1 track(s)" in caplog.text

    @pytest.mark.asyncio
    async def test_session_destroyed_logs_summary_and_resets(self, event_cog, bus, caplog):
        await bus.publish(SessionCreated(session_id=GUILD_ID))
        await bus.publish(TrackStartedPlaying(session_id=GUILD_ID, track_title="A"))

        with caplog.at_level(logging.INFO, logger=COG_LOGGER):
            await bus.publish(
                SessionDestroyed(session_id=GUILD_ID, reason="idle_timeout", tracks_discarded=2)
            )

        assert event_cog.activity_for(GUILD_ID) is None
        assert (
            f"Session {GUILD_ID} closed (idle_timeout): 1 played, 0 failed, 0 skipped, 2 discarded"
            in caplog.text
        )

    @pytest.mark.asyncio
    async def test_unknown_session_destroyed(self, event_cog, bus):
        await bus.publish(SessionDestroyed(session_id=GUILD_ID, reason="stopped"))

        assert event_cog.activity_for(GUILD_ID) is None

    @pytest.mark.asyncio
    async def test_unload_unsubscribes(self, event_cog, bus):
        await event_cog.cog_unload()

        await bus.publish(TrackStartedPlaying(session_id=GUILD_ID, track_title="A"))

        assert event_cog.activity_for(GUILD_ID) is None
        assert not any(bus._handlers.values())


# =============================================================================
# Lifecycle Event Tests
# =============================================================================


class TestLifecycleEvents:
    @pytest.mark.asyncio
    async def test_on_connect(self, event_cog, caplog):
        with caplog.at_level(logging.INFO, logger=COG_LOGGER):
            await event_cog.on_connect()
        assert "WebSocket connected" in caplog.text

    @pytest.mark.asyncio
    async def test_on_disconnect(self, event_cog, caplog):
        with caplog.at_level(logging.WARNING, logger=COG_LOGGER):
            await event_cog.on_disconnect()
        assert "WebSocket disconnected" in caplog.text

    @pytest.mark.asyncio
    async def test_on_resumed_logged_once(self, event_cog, caplog):
        with caplog.at_level(logging.INFO, logger=COG_LOGGER):
            await event_cog.on_resumed()
            await event_cog.on_resumed()
        assert caplog.text.count("WebSocket session resumed") == 1


# =============================================================================
# Guild Event Tests
# =============================================================================


class TestGuildRemove:
    @pytest.mark.asyncio
    async def test_stops_active_session(self, event_cog, mock_container, mock_guild):
        entry = MagicMock()
        entry.driver.stop = AsyncMock()
        mock_container.session_registry.get.return_value = entry

        await event_cog.on_guild_remove(mock_guild)

        mock_container.session_registry.get.assert_called_once_with(GUILD_ID)
        entry.driver.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_no_session(self, event_cog, mock_container, mock_guild):
        mock_container.session_registry.get.return_value = None

        await event_cog.on_guild_remove(mock_guild)


class TestSetup:
    @pytest.mark.asyncio
    async def test_setup_adds_cog(self, mock_container):
        bot = MagicMock()
        bot.container = mock_container
        bot.add_cog = AsyncMock()

        await setup(bot)

        assert isinstance(bot.add_cog.call_args.args[0], EventCog)

    @pytest.mark.asyncio
    async def test_setup_without_container(self):
        bot = MagicMock(spec=["add_cog"])

        with pytest.raises(RuntimeError):
            await setup(bot)
