"""
Application Queries (CQRS Read Side)

Query objects and handlers for read operations.
Queries do not modify state, only retrieve data.
"""

from music_session_manager.application.queries.get_current import (
    CurrentTrackInfo,
    GetCurrentTrackHandler,
    GetCurrentTrackQuery,
)
from music_session_manager.application.queries.get_queue import (
    GetQueueHandler,
    GetQueueQuery,
    QueueInfo,
)

__all__ = [
    "GetQueueQuery",
    "GetQueueHandler",
    "QueueInfo",
    "GetCurrentTrackQuery",
    "GetCurrentTrackHandler",
    "CurrentTrackInfo",
]
