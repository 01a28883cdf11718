"""Shared kernel: constrained types, exceptions, messages and the event bus."""

from music_session_manager.domain.shared.events import DomainEvent, EventBus
from music_session_manager.domain.shared.exceptions import (
    ConnectError,
    DomainError,
    InvalidArgumentError,
    InvalidStateError,
    QueueFullError,
    SessionClosedError,
    StreamOpenError,
    TrackLookupError,
    TrackNotFoundError,
)

__all__ = [
    "DomainEvent",
    "EventBus",
    "DomainError",
    "ConnectError",
    "InvalidArgumentError",
    "InvalidStateError",
    "QueueFullError",
    "SessionClosedError",
    "StreamOpenError",
    "TrackLookupError",
    "TrackNotFoundError",
]
