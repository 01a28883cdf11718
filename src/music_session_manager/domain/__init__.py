"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting types, events, messages and exceptions
- music/: Track, session queue and playback state
"""

from music_session_manager.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
