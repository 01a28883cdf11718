"""
Tests for domain events and the in-memory EventBus.
"""

from music_session_manager.domain.shared.events import (
    DomainEvent,
    EventBus,
    SessionDestroyed,
    TrackFinishedPlaying,
    TrackStartedPlaying,
)

GUILD_ID = 111111111111111111


class TestDomainEvent:
    def test_unique_event_ids(self):
        assert DomainEvent().event_id != DomainEvent().event_id

    def test_occurred_at_is_timezone_aware(self):
        assert DomainEvent().occurred_at.tzinfo is not None

    def test_session_destroyed_fields(self):
        event = SessionDestroyed(session_id=GUILD_ID, reason="idle", tracks_discarded=2)
        assert event.session_id == GUILD_ID
        assert event.tracks_discarded == 2


class TestEventBus:
    """Tests for subscribing, publishing and handler isolation."""

    async def test_publish_with_no_handlers(self):
        """Should be a no-op when nobody subscribed."""
        await EventBus().publish(TrackStartedPlaying(session_id=GUILD_ID, track_title="Song"))

    async def test_publish_reaches_every_handler(self):
        bus = EventBus()
        received: list[tuple[str, DomainEvent]] = []

        async def first(event):
            received.append(("first", event))

        async def second(event):
            received.append(("second", event))

        bus.subscribe(TrackStartedPlaying, first)
        bus.subscribe(TrackStartedPlaying, second)
        event = TrackStartedPlaying(session_id=GUILD_ID, track_title="Song")

        await bus.publish(event)

        assert sorted(name for name, _ in received) == ["first", "second"]
        assert all(e is event for _, e in received)

    async def test_handlers_are_keyed_by_event_type(self):
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe(TrackFinishedPlaying, handler)

        await bus.publish(TrackStartedPlaying(session_id=GUILD_ID))

        assert received == []

    async def test_failing_handler_does_not_block_others(self):
        """Should log handler errors and keep delivering."""
        bus = EventBus()
        received = []

        async def broken(event):
            raise RuntimeError("handler crashed")

        async def healthy(event):
            received.append(event)

        bus.subscribe(SessionDestroyed, broken)
        bus.subscribe(SessionDestroyed, healthy)

        await bus.publish(SessionDestroyed(session_id=GUILD_ID, reason="stopped"))

        assert len(received) == 1

    async def test_unsubscribe(self):
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe(TrackStartedPlaying, handler)
        bus.unsubscribe(TrackStartedPlaying, handler)
        bus.unsubscribe(TrackStartedPlaying, handler)

        await bus.publish(TrackStartedPlaying(session_id=GUILD_ID))

        assert received == []

    async def test_clear(self):
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe(TrackStartedPlaying, handler)
        bus.clear()

        await bus.publish(TrackStartedPlaying(session_id=GUILD_ID))

        assert received == []
