"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from music_session_manager.application.interfaces.notification_sink import (
    Notification,
    NotificationKind,
    NotificationSink,
)
from music_session_manager.application.interfaces.session_gateway import SessionGateway, Transport
from music_session_manager.application.interfaces.stream_provider import StreamHandle, StreamProvider
from music_session_manager.application.interfaces.track_resolver import TrackResolver

__all__ = [
    "Notification",
    "NotificationKind",
    "NotificationSink",
    "SessionGateway",
    "StreamHandle",
    "StreamProvider",
    "TrackResolver",
    "Transport",
]
