"""
Unit Tests for Application Layer Queries

Tests for:
- GetQueueQuery / GetQueueHandler / QueueInfo
- GetCurrentTrackQuery / GetCurrentTrackHandler
"""

import pytest
from pydantic import ValidationError

from music_session_manager.application.queries.get_current import (
    GetCurrentTrackHandler,
    GetCurrentTrackQuery,
)
from music_session_manager.application.queries.get_queue import (
    DEFAULT_QUEUE_DISPLAY_LIMIT,
    GetQueueHandler,
    GetQueueQuery,
    QueueInfo,
)
from music_session_manager.application.services.session_registry import SessionRegistry
from music_session_manager.domain.music.entities import QueueSnapshot

GUILD_ID = 111111111111111111
VOICE_CHANNEL_ID = 222222222222222222


@pytest.fixture
def registry(gateway, provider, sink, event_bus):
    return SessionRegistry(
        gateway=gateway, stream_provider=provider, notifier=sink, event_bus=event_bus
    )


class TestGetQueueQuery:
    def test_default_limit(self):
        assert GetQueueQuery(session_id=GUILD_ID).limit == DEFAULT_QUEUE_DISPLAY_LIMIT

    def test_limit_must_be_positive(self):
        with pytest.raises(ValidationError):
            GetQueueQuery(session_id=GUILD_ID, limit=0)


class TestQueueInfo:
    def test_total_duration_skips_unknown_and_text(self, make_track):
        snapshot = QueueSnapshot(
            tracks=[
                make_track("a", duration=60),
                make_track("b", duration="LIVE"),
                make_track("c"),
                make_track("d", duration=30),
            ],
            total=4,
        )
        info = QueueInfo(session_id=GUILD_ID, snapshot=snapshot)
        assert info.total_duration == 90
        assert not info.is_empty


class TestGetQueueHandler:
    @pytest.mark.asyncio
    async def test_no_session_returns_empty_snapshot(self, registry):
        info = await GetQueueHandler(registry=registry).handle(GetQueueQuery(session_id=GUILD_ID))

        assert info.is_empty
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_snapshot_limited_with_total(self, registry, make_track):
        entry = registry.get_or_create(GUILD_ID)
        for i in range(12):
            await entry.driver.enqueue(make_track(f"t{i}"), VOICE_CHANNEL_ID)

        info = await GetQueueHandler(registry=registry).handle(GetQueueQuery(session_id=GUILD_ID))

        assert len(info.snapshot.tracks) == 10
        assert info.snapshot.total == 12
        assert info.snapshot.playing is True
        assert info.snapshot.tracks[0].title == "t0"


class TestGetCurrentTrackHandler:
    @pytest.mark.asyncio
    async def test_no_session(self, registry):
        info = await GetCurrentTrackHandler(registry=registry).handle(
            GetCurrentTrackQuery(session_id=GUILD_ID)
        )

        assert info.track is None
        assert info.is_playing is False
        assert info.queue_length == 0

    @pytest.mark.asyncio
    async def test_playing_and_paused(self, registry, make_track):
        entry = registry.get_or_create(GUILD_ID)
        track = make_track("A")
        await entry.driver.enqueue(track, VOICE_CHANNEL_ID)
        await entry.driver.enqueue(make_track("B"), VOICE_CHANNEL_ID)
        handler = GetCurrentTrackHandler(registry=registry)

        playing = await handler.handle(GetCurrentTrackQuery(session_id=GUILD_ID))
        await entry.driver.pause()
        paused = await handler.handle(GetCurrentTrackQuery(session_id=GUILD_ID))

        assert playing.track == track
        assert playing.is_playing and not playing.is_paused
        assert playing.queue_length == 2
        assert paused.is_paused and not paused.is_playing

    @pytest.mark.asyncio
    async def test_idle_session_has_no_current_track(self, registry, make_track, provider):
        entry = registry.get_or_create(GUILD_ID)
        broken = make_track("broken")
        provider.failing.add(broken.locator)
        await entry.driver.enqueue(broken, VOICE_CHANNEL_ID)

        info = await GetCurrentTrackHandler(registry=registry).handle(
            GetCurrentTrackQuery(session_id=GUILD_ID)
        )

        assert info.track is None
        assert info.queue_length == 0
