"""Port interface for joining, binding and releasing a session's transport."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from music_session_manager.domain.shared.types import ChannelRef, SessionId

if TYPE_CHECKING:
    from .stream_provider import StreamHandle


class Transport(ABC):
    """Active output channel obtained from the gateway for one session."""

    @property
    @abstractmethod
    def session_id(self) -> SessionId: ...

    @property
    @abstractmethod
    def channel_ref(self) -> ChannelRef | None: ...

    @abstractmethod
    def is_connected(self) -> bool: ...


class SessionGateway(ABC):
    """Interface for transport lifecycle operations."""

    @abstractmethod
    async def acquire_transport(self, session_id: SessionId, channel_ref: ChannelRef) -> Transport:
        """Join *channel_ref* for the session.

        Raises:
            ConnectError: If the transport cannot be established.
        """
        ...

    @abstractmethod
    async def bind_output(self, transport: Transport, stream: StreamHandle) -> None:
        """Route an open stream's audio into the transport."""
        ...

    @abstractmethod
    async def release(self, transport: Transport) -> None:
        """Leave the channel and free the transport."""
        ...

    @abstractmethod
    def set_on_transport_lost(
        self,
        callback: Callable[[SessionId], Awaitable[None]],
    ) -> None:
        """Set callback for when a transport is torn down externally."""
        ...
