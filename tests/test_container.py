"""
Unit Tests for Dependency Injection Container

Tests for:
- Container initialization with settings
- Lazy initialization and caching of components
- Bot instance management (set_bot, bot property, error when not set)
- Wiring of settings into the session registry and dispatcher
- Shutdown
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from music_session_manager.application.commands.dispatcher import CommandDispatcher
from music_session_manager.application.services.session_registry import SessionRegistry
from music_session_manager.config.container import Container, create_container
from music_session_manager.config.settings import AudioSettings, SessionSettings, Settings
from music_session_manager.domain.shared.events import EventBus
from music_session_manager.infrastructure.audio.ffmpeg_stream import FFmpegStreamProvider
from music_session_manager.infrastructure.audio.ytdlp_resolver import YtDlpResolver
from music_session_manager.infrastructure.discord.notification_sink import (
    DiscordNotificationSink,
)
from music_session_manager.infrastructure.discord.session_gateway import DiscordSessionGateway


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        audio=AudioSettings(default_volume=70, max_queue_size=20),
        session=SessionSettings(idle_timeout_seconds=45.0, queue_display_limit=5),
    )


@pytest.fixture
def container(settings):
    return Container(settings=settings)


@pytest.fixture
def mock_bot():
    bot = MagicMock()
    bot.user.id = 123456789
    return bot


# =============================================================================
# Initialization Tests
# =============================================================================


class TestContainerInitialization:
    def test_create_container_factory(self, settings):
        container = create_container(settings)

        assert isinstance(container, Container)
        assert container.settings is settings

    def test_nothing_built_up_front(self, container):
        assert container._session_registry is None
        assert container._dispatcher is None
        assert container._event_bus is None


class TestBotManagement:
    def test_bot_not_set_raises(self, container):
        with pytest.raises(RuntimeError, match="Bot not initialized"):
            _ = container.bot

    def test_set_bot(self, container, mock_bot):
        container.set_bot(mock_bot)
        assert container.bot is mock_bot

    def test_bot_backed_adapters_need_bot(self, container):
        with pytest.raises(RuntimeError):
            _ = container.session_gateway


# =============================================================================
# Lazy Component Tests
# =============================================================================


class TestAdapters:
    def test_adapter_types(self, container, mock_bot):
        container.set_bot(mock_bot)

        assert isinstance(container.event_bus, EventBus)
        assert isinstance(container.track_resolver, YtDlpResolver)
        assert isinstance(container.stream_provider, FFmpegStreamProvider)
        assert isinstance(container.session_gateway, DiscordSessionGateway)
        assert isinstance(container.notification_sink, DiscordNotificationSink)

    def test_components_are_cached(self, container, mock_bot):
        container.set_bot(mock_bot)

        assert container.event_bus is container.event_bus
        assert container.track_resolver is container.track_resolver
        assert container.session_gateway is container.session_gateway
        assert container.session_registry is container.session_registry
        assert container.dispatcher is container.dispatcher


class TestWiring:
    def test_registry_uses_settings(self, container, mock_bot):
        container.set_bot(mock_bot)

        registry = container.session_registry

        assert isinstance(registry, SessionRegistry)
        assert registry._default_volume == 70
        assert registry._max_queue_size == 20
        assert registry._idle_timeout == 45.0
        assert registry._gateway is container.session_gateway

    def test_handlers_share_registry(self, container, mock_bot):
        container.set_bot(mock_bot)

        registry = container.session_registry

        assert container.play_track_handler._registry is registry
        assert container.skip_track_handler._registry is registry
        assert container.stop_playback_handler._registry is registry
        assert container.pause_resume_handler._registry is registry
        assert container.set_volume_handler._registry is registry
        assert container.get_queue_handler._registry is registry
        assert container.get_current_handler._registry is registry

    def test_dispatcher_wiring(self, container, mock_bot):
        container.set_bot(mock_bot)

        dispatcher = container.dispatcher

        assert isinstance(dispatcher, CommandDispatcher)
        assert dispatcher._play is container.play_track_handler
        assert dispatcher._queue_display_limit == 5


# =============================================================================
# Lifecycle Tests
# =============================================================================


class TestShutdown:
    @pytest.mark.asyncio
    async def test_shutdown_without_components(self, container):
        await container.shutdown()

    @pytest.mark.asyncio
    async def test_shutdown_stops_registry_and_clears_bus(self, container):
        registry = MagicMock()
        registry.shutdown = AsyncMock()
        bus = MagicMock()
        container._session_registry = registry
        container._event_bus = bus

        await container.shutdown()

        registry.shutdown.assert_awaited_once()
        bus.clear.assert_called_once()

    @pytest.mark.asyncio
    async def test_shutdown_survives_registry_failure(self, container):
        registry = MagicMock()
        registry.shutdown = AsyncMock(side_effect=RuntimeError("boom"))
        container._session_registry = registry

        await container.shutdown()
