"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the session registry, adapters, and handlers.
Components are created on-demand and cached for reuse throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.commands.dispatcher import CommandDispatcher
    from ..application.commands.pause_resume import PauseResumeHandler
    from ..application.commands.play_track import PlayTrackHandler
    from ..application.commands.set_volume import SetVolumeHandler
    from ..application.commands.skip_track import SkipTrackHandler
    from ..application.commands.stop_playback import StopPlaybackHandler
    from ..application.interfaces.notification_sink import NotificationSink
    from ..application.interfaces.session_gateway import SessionGateway
    from ..application.interfaces.stream_provider import StreamProvider
    from ..application.interfaces.track_resolver import TrackResolver
    from ..application.queries.get_current import GetCurrentTrackHandler
    from ..application.queries.get_queue import GetQueueHandler
    from ..application.services.session_registry import SessionRegistry
    from ..domain.shared.events import EventBus
    from ..infrastructure.discord.notification_sink import DiscordNotificationSink
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    This container manages all application dependencies and their lifecycle.
    Components are lazily initialized when first accessed.
    """

    settings: Settings
    _bot: Bot | None = None

    _event_bus: EventBus | None = None

    # Infrastructure adapters
    _track_resolver: TrackResolver | None = None
    _stream_provider: StreamProvider | None = None
    _session_gateway: SessionGateway | None = None
    _notification_sink: DiscordNotificationSink | None = None

    # Application services
    _session_registry: SessionRegistry | None = None

    # Command handlers
    _play_track_handler: PlayTrackHandler | None = None
    _skip_track_handler: SkipTrackHandler | None = None
    _stop_playback_handler: StopPlaybackHandler | None = None
    _pause_resume_handler: PauseResumeHandler | None = None
    _set_volume_handler: SetVolumeHandler | None = None

    # Query handlers
    _get_queue_handler: GetQueueHandler | None = None
    _get_current_handler: GetCurrentTrackHandler | None = None

    _dispatcher: CommandDispatcher | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            from ..domain.shared.events import EventBus

            self._event_bus = EventBus()
        return self._event_bus

    # === Adapters ===

    @property
    def track_resolver(self) -> TrackResolver:
        if self._track_resolver is None:
            from ..infrastructure.audio.ytdlp_resolver import YtDlpResolver

            self._track_resolver = YtDlpResolver(self.settings.audio)
        return self._track_resolver

    @property
    def stream_provider(self) -> StreamProvider:
        if self._stream_provider is None:
            from ..infrastructure.audio.ffmpeg_stream import FFmpegStreamProvider

            self._stream_provider = FFmpegStreamProvider(self.settings.audio)
        return self._stream_provider

    @property
    def session_gateway(self) -> SessionGateway:
        if self._session_gateway is None:
            from ..infrastructure.discord.session_gateway import DiscordSessionGateway

            self._session_gateway = DiscordSessionGateway(self.bot)
        return self._session_gateway

    @property
    def notification_sink(self) -> DiscordNotificationSink:
        if self._notification_sink is None:
            from ..infrastructure.discord.notification_sink import DiscordNotificationSink

            self._notification_sink = DiscordNotificationSink(self.bot)
        return self._notification_sink

    # === Application Services ===

    @property
    def session_registry(self) -> SessionRegistry:
        """Get the process-wide session registry."""
        if self._session_registry is None:
            from ..application.services.session_registry import SessionRegistry

            self._session_registry = SessionRegistry(
                gateway=self.session_gateway,
                stream_provider=self.stream_provider,
                notifier=self.notification_sink,
                event_bus=self.event_bus,
                default_volume=self.settings.audio.default_volume,
                idle_timeout_seconds=self.settings.session.idle_timeout_seconds,
                max_queue_size=self.settings.audio.max_queue_size,
            )
        return self._session_registry

    # === Command Handlers ===

    @property
    def play_track_handler(self) -> PlayTrackHandler:
        if self._play_track_handler is None:
            from ..application.commands.play_track import PlayTrackHandler

            self._play_track_handler = PlayTrackHandler(
                registry=self.session_registry,
                track_resolver=self.track_resolver,
            )
        return self._play_track_handler

    @property
    def skip_track_handler(self) -> SkipTrackHandler:
        if self._skip_track_handler is None:
            from ..application.commands.skip_track import SkipTrackHandler

            self._skip_track_handler = SkipTrackHandler(registry=self.session_registry)
        return self._skip_track_handler

    @property
    def stop_playback_handler(self) -> StopPlaybackHandler:
        if self._stop_playback_handler is None:
            from ..application.commands.stop_playback import StopPlaybackHandler

            self._stop_playback_handler = StopPlaybackHandler(registry=self.session_registry)
        return self._stop_playback_handler

    @property
    def pause_resume_handler(self) -> PauseResumeHandler:
        if self._pause_resume_handler is None:
            from ..application.commands.pause_resume import PauseResumeHandler

            self._pause_resume_handler = PauseResumeHandler(registry=self.session_registry)
        return self._pause_resume_handler

    @property
    def set_volume_handler(self) -> SetVolumeHandler:
        if self._set_volume_handler is None:
            from ..application.commands.set_volume import SetVolumeHandler

            self._set_volume_handler = SetVolumeHandler(registry=self.session_registry)
        return self._set_volume_handler

    # === Query Handlers ===

    @property
    def get_queue_handler(self) -> GetQueueHandler:
        if self._get_queue_handler is None:
            from ..application.queries.get_queue import GetQueueHandler

            self._get_queue_handler = GetQueueHandler(registry=self.session_registry)
        return self._get_queue_handler

    @property
    def get_current_handler(self) -> GetCurrentTrackHandler:
        if self._get_current_handler is None:
            from ..application.queries.get_current import GetCurrentTrackHandler

            self._get_current_handler = GetCurrentTrackHandler(registry=self.session_registry)
        return self._get_current_handler

    @property
    def dispatcher(self) -> CommandDispatcher:
        """Get the command dispatcher used by the delivery layer."""
        if self._dispatcher is None:
            from ..application.commands.dispatcher import CommandDispatcher

            self._dispatcher = CommandDispatcher(
                play_handler=self.play_track_handler,
                skip_handler=self.skip_track_handler,
                stop_handler=self.stop_playback_handler,
                pause_resume_handler=self.pause_resume_handler,
                volume_handler=self.set_volume_handler,
                queue_handler=self.get_queue_handler,
                current_handler=self.get_current_handler,
                queue_display_limit=self.settings.session.queue_display_limit,
            )
        return self._dispatcher

    # === Lifecycle ===

    async def shutdown(self) -> None:
        """Stop every active session and drop cached components."""
        if self._session_registry is not None:
            try:
                await self._session_registry.shutdown()
            except Exception as exc:
                logger.warning(LogTemplates.SESSION_REGISTRY_SHUTDOWN_FAILED, exc)

        if self._event_bus is not None:
            self._event_bus.clear()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
