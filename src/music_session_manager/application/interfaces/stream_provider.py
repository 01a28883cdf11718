"""Port interfaces for opening audio streams and controlling them once open."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from music_session_manager.domain.shared.types import LocatorStr, VolumeLevel

if TYPE_CHECKING:
    from ...domain.music.value_objects import StreamEvent


class StreamHandle(ABC):
    """An open, decodable audio stream.

    Emits exactly one terminal event, either exhausted or error(detail).
    """

    @property
    @abstractmethod
    def locator(self) -> LocatorStr: ...

    @abstractmethod
    async def wait_terminal(self) -> "StreamEvent":
        """Wait for the stream's terminal event."""
        ...

    @abstractmethod
    def set_volume(self, level: VolumeLevel) -> bool:
        """Apply a volume level to the live stream. Returns False if not applied."""
        ...

    @abstractmethod
    async def pause(self) -> None: ...

    @abstractmethod
    async def resume(self) -> None: ...

    @abstractmethod
    async def close(self) -> None:
        """Stop the stream and free its resources."""
        ...


class StreamProvider(ABC):
    """Interface for turning a track locator into an audio stream."""

    @abstractmethod
    async def open(self, locator: LocatorStr, volume: VolumeLevel) -> StreamHandle:
        """Open the stream for *locator* at the given volume.

        Raises:
            StreamOpenError: If the locator cannot be opened.
        """
        ...
