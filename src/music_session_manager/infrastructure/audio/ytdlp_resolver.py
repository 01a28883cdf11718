"""TrackResolver implementation using yt-dlp for URL resolution and search."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from typing import Any, Final, cast

from yt_dlp import YoutubeDL

from music_session_manager.application.interfaces.track_resolver import TrackResolver
from music_session_manager.config.settings import AudioSettings
from music_session_manager.domain.music.entities import Track
from music_session_manager.domain.shared.exceptions import (
    StreamOpenError,
    TrackLookupError,
    TrackNotFoundError,
)
from music_session_manager.domain.shared.messages import ErrorMessages, LogTemplates

from .models import (
    CACHE_MAX_SIZE,
    CACHE_TTL,
    DEFAULT_SEARCH_LIMIT,
    LOG_URL_TRUNCATE,
    AudioFormatInfo,
    CacheEntry,
    YtDlpOpts,
    YtDlpTrackInfo,
)

logger = logging.getLogger(__name__)

# ── Module-level state and patterns ────────────────────────────────────

_info_cache: dict[str, CacheEntry] = {}

URL_PATTERNS: Final[list[re.Pattern[str]]] = [
    re.compile(r"https?://"),
    re.compile(r"www\."),
]


def clear_info_cache() -> None:
    _info_cache.clear()


class YtDlpResolver(TrackResolver):
    """Resolves queries to tracks and locators to direct media URLs.

    Blocking yt-dlp calls run in worker threads via :func:`asyncio.to_thread`.
    Extraction results are cached per URL for ``CACHE_TTL`` seconds.
    """

    def __init__(self, settings: AudioSettings | None = None) -> None:
        self._settings = settings or AudioSettings()
        self._format = (
            self._settings.ytdlp_format or "251/140/bestaudio[protocol^=http]/bestaudio/best"
        )
        self._base_opts = YtDlpOpts(format=self._format)

    def _get_opts(self, **overrides: Any) -> YtDlpOpts:
        if overrides:
            return self._base_opts.model_copy(update=overrides)
        return self._base_opts

    # ── Conversion helpers ─────────────────────────────────────────────

    def _info_to_track(self, info: YtDlpTrackInfo, requested_by: str) -> Track | None:
        locator = self._extract_webpage_url(info)
        if not locator:
            logger.warning(LogTemplates.YTDLP_NO_URL_IN_INFO_DICT)
            return None

        return Track(
            title=info.title,
            locator=locator,
            duration=info.duration,
            thumbnail_url=info.thumbnail,
            requested_by=requested_by,
        )

    def _extract_webpage_url(self, info: YtDlpTrackInfo) -> str | None:
        return info.webpage_url or info.url

    def _extract_stream_url(self, info: YtDlpTrackInfo) -> str | None:
        if info.url:
            return info.url
        return self._extract_stream_from_formats(info.formats)

    @staticmethod
    def _extract_stream_from_formats(formats: list[AudioFormatInfo]) -> str | None:
        if not formats:
            return None
        audio_formats = [f for f in formats if f.acodec != "none" and f.url]
        if audio_formats:
            return audio_formats[-1].url
        return None

    @staticmethod
    def _parse_info(data: dict[str, Any]) -> YtDlpTrackInfo:
        return YtDlpTrackInfo.model_validate(data)

    # ── Blocking extraction (worker thread) ────────────────────────────

    def _extract_info_sync(self, url: str) -> YtDlpTrackInfo | None:
        now = time.time()
        cached = _info_cache.get(url)
        if cached is not None:
            if now - cached.cached_at < CACHE_TTL:
                logger.debug(LogTemplates.CACHE_HIT_URL, url[:LOG_URL_TRUNCATE])
                return cached.info
            _info_cache.pop(url, None)

        with YoutubeDL(params=cast(Any, self._get_opts().model_dump(exclude_none=True))) as ydl:
            data = ydl.extract_info(url, download=False)
            result = self._parse_info(dict(data)) if isinstance(data, dict) else None

        _info_cache[url] = CacheEntry(info=result, cached_at=now)

        if len(_info_cache) > CACHE_MAX_SIZE:
            expired = [k for k, entry in _info_cache.items() if now - entry.cached_at >= CACHE_TTL]
            for k in expired:
                _info_cache.pop(k, None)
            if expired:
                logger.debug(LogTemplates.CACHE_EXPIRED_CLEANED, len(expired))

        return result

    def _search_sync(self, query: str, limit: int = 1) -> list[YtDlpTrackInfo]:
        search_query = f"ytsearch{limit}:{query}"
        with YoutubeDL(params=cast(Any, self._get_opts().model_dump(exclude_none=True))) as ydl:
            data = ydl.extract_info(search_query, download=False)

        if not isinstance(data, dict):
            return []

        entries = data.get("entries", [])
        if not isinstance(entries, list):
            return []

        return [self._parse_info(dict(e)) for e in entries if e]

    # ── TrackResolver ──────────────────────────────────────────────────

    async def resolve(self, query: str, requested_by: str = "unknown") -> Track:
        """Resolve a URL directly, or take the top search hit for free text.

        Raises:
            TrackNotFoundError: Nothing matched *query*.
            TrackLookupError: yt-dlp failed while looking it up.
        """
        try:
            if self.is_url(query):
                info = await asyncio.to_thread(self._extract_info_sync, query)
            else:
                results = await asyncio.to_thread(self._search_sync, query, 1)
                info = results[0] if results else None
        except Exception as e:
            logger.exception(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, query)
            raise TrackLookupError(
                query, ErrorMessages.RESOLVER_FAILED.format(query=query, error=e)
            ) from e

        track = self._info_to_track(info, requested_by) if info is not None else None
        if track is None:
            raise TrackNotFoundError(query, ErrorMessages.NO_RESULTS.format(query=query))
        return track

    async def search(self, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[Track]:
        try:
            results = await asyncio.to_thread(self._search_sync, query, limit)
        except Exception as e:
            logger.exception(LogTemplates.YTDLP_FAILED_SEARCH, query)
            raise TrackLookupError(
                query, ErrorMessages.RESOLVER_FAILED.format(query=query, error=e)
            ) from e

        tracks: list[Track] = []
        for info in results:
            track = self._info_to_track(info, "unknown")
            if track:
                tracks.append(track)
        return tracks

    def is_url(self, query: str) -> bool:
        return any(pattern.search(query) for pattern in URL_PATTERNS)

    # ── Stream URL lookup for the stream provider ──────────────────────

    async def extract_stream_url(self, locator: str) -> str:
        """Return a direct media URL for *locator*.

        Raises:
            StreamOpenError: yt-dlp failed or returned no playable format.
        """
        try:
            info = await asyncio.to_thread(self._extract_info_sync, locator)
        except Exception as e:
            logger.warning(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, locator[:LOG_URL_TRUNCATE])
            raise StreamOpenError(locator, str(e)) from e

        stream_url = self._extract_stream_url(info) if info is not None else None
        if not stream_url:
            logger.warning(LogTemplates.YTDLP_NO_STREAM_URL, locator[:LOG_URL_TRUNCATE])
            raise StreamOpenError(
                locator, ErrorMessages.NO_STREAM_URL_FOR_TRACK.format(locator=locator)
            )
        return stream_url
