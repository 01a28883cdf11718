"""Query for retrieving the current queue."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from music_session_manager.domain.music.entities import QueueSnapshot
from music_session_manager.domain.shared.types import PositiveInt, SessionId

if TYPE_CHECKING:
    from ..services.session_registry import SessionRegistry

DEFAULT_QUEUE_DISPLAY_LIMIT = 10


class GetQueueQuery(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    session_id: SessionId
    limit: PositiveInt = DEFAULT_QUEUE_DISPLAY_LIMIT


class QueueInfo(BaseModel):

    session_id: SessionId
    snapshot: QueueSnapshot

    @property
    def is_empty(self) -> bool:
        return self.snapshot.is_empty

    @property
    def total_duration(self) -> int:
        """Sum of the known numeric durations of the listed tracks."""
        return sum(t.duration for t in self.snapshot.tracks if isinstance(t.duration, int))


class GetQueueHandler:

    def __init__(self, *, registry: SessionRegistry) -> None:
        self._registry = registry

    async def handle(self, query: GetQueueQuery) -> QueueInfo:
        entry = self._registry.get(query.session_id)

        if entry is None:
            return QueueInfo(session_id=query.session_id, snapshot=QueueSnapshot())

        return QueueInfo(session_id=query.session_id, snapshot=entry.queue.snapshot(query.limit))
