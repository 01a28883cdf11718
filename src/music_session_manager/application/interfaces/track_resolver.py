"""Port interface for resolving user queries to track descriptors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from music_session_manager.domain.shared.types import NonEmptyStr, PositiveInt

if TYPE_CHECKING:
    from ...domain.music.entities import Track


class TrackResolver(ABC):
    """Interface for resolving URLs and search queries to playable tracks."""

    @abstractmethod
    async def resolve(self, query: NonEmptyStr, requested_by: NonEmptyStr) -> "Track":
        """Resolve a direct locator, or take the top-ranked search result.

        Raises:
            TrackNotFoundError: If the search returns nothing.
            TrackLookupError: If the lookup itself fails.
        """
        ...

    @abstractmethod
    async def search(self, query: NonEmptyStr, limit: PositiveInt = 5) -> list["Track"]:
        """Return ranked search results for a free-text query."""
        ...

    @abstractmethod
    def is_url(self, query: NonEmptyStr) -> bool:
        ...
