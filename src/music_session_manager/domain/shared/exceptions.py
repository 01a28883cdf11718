"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class TrackNotFoundError(DomainError):
    """Raised when a query resolves to no playable track."""

    def __init__(self, query: str, message: str | None = None) -> None:
        msg = message or f"No results found for '{query}'"
        super().__init__(msg, code="NOT_FOUND")
        self.query = query


class TrackLookupError(DomainError):
    """Raised when the resolver fails for reasons other than an empty result."""

    def __init__(self, query: str, message: str | None = None) -> None:
        msg = message or f"Lookup failed for '{query}'"
        super().__init__(msg, code="LOOKUP_ERROR")
        self.query = query


class StreamOpenError(DomainError):
    """Raised by a stream provider when a locator cannot be opened."""

    def __init__(self, locator: str, message: str | None = None) -> None:
        msg = message or f"Could not open stream for '{locator}'"
        super().__init__(msg, code="OPEN_ERROR")
        self.locator = locator


class InvalidArgumentError(DomainError):
    """Raised when an operation receives an out-of-range argument."""

    def __init__(self, argument: str, message: str | None = None) -> None:
        msg = message or f"Invalid value for '{argument}'"
        super().__init__(msg, code="INVALID_ARGUMENT")
        self.argument = argument


class InvalidStateError(DomainError):
    """Raised when an operation is invalid in the current playback state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_STATE")
        self.operation = operation
        self.current_state = current_state


class SessionClosedError(InvalidStateError):
    """Raised when a request reaches a session that was torn down while it waited."""

    def __init__(self, session_id: int, operation: str) -> None:
        super().__init__(
            operation=operation,
            current_state="terminated",
            message=f"Session {session_id} was closed",
        )
        self.session_id = session_id


class ConnectError(DomainError):
    """Raised when the session gateway cannot provide a transport."""

    def __init__(self, session_id: int, message: str | None = None) -> None:
        msg = message or f"Could not connect transport for session {session_id}"
        super().__init__(msg, code="CONNECT_ERROR")
        self.session_id = session_id


class QueueFullError(DomainError):
    """Raised when a capped queue cannot accept another track."""

    def __init__(self, max_size: int) -> None:
        super().__init__(f"Queue is full (max {max_size} tracks)", code="QUEUE_FULL")
        self.max_size = max_size
