"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the package is defined here once,
so models can simply annotate their fields::

    from music_session_manager.domain.shared.types import SessionId, NonEmptyStr

    class MyModel(BaseModel):
        session_id: SessionId
        name: NonEmptyStr
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

# ── Numeric constraints ─────────────────────────────────────────────

DiscordSnowflake = Annotated[int, Field(gt=0, lt=2**64)]
"""Positive integer that fits a Discord snowflake (1 … 2^64-1)."""

SessionId = DiscordSnowflake
"""A session is keyed by its guild snowflake."""

ChannelRef = DiscordSnowflake
"""Voice channel the transport should join."""

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

PositiveInt = Annotated[int, Field(gt=0)]
"""Integer > 0."""

NonNegativeFloat = Annotated[float, Field(ge=0.0)]
"""Float >= 0.0."""

VolumeLevel = Annotated[int, Field(ge=1, le=100)]
"""User-facing volume percentage: 1 … 100."""

MIN_VOLUME: int = 1
MAX_VOLUME: int = 100


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

TrackTitleStr = Annotated[str, Field(min_length=1, max_length=500)]
"""Track title: 1-500 characters."""

LocatorStr = Annotated[str, Field(min_length=1)]
"""Opaque reference (URL or id) a stream provider can open."""


# ── Domain-specific numeric constraints ─────────────────────────────

DurationSeconds = Annotated[int, Field(ge=0, le=86_400)]
"""Track duration in seconds: 0 … 86 400 (24 hours)."""

MaxQueueSize = Annotated[int, Field(gt=0, le=10_000)]
"""Optional queue cap: 1 … 10 000."""
