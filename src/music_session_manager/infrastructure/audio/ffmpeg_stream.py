"""
FFmpeg Stream Provider

Opens locators as FFmpeg-decoded PCM sources and reports their single
terminal event back onto the event loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import discord

from music_session_manager.application.interfaces.stream_provider import (
    StreamHandle,
    StreamProvider,
)
from music_session_manager.config.settings import AudioSettings
from music_session_manager.domain.music.value_objects import StreamEvent
from music_session_manager.domain.shared.exceptions import StreamOpenError
from music_session_manager.domain.shared.types import MAX_VOLUME

from .ytdlp_resolver import YtDlpResolver

if TYPE_CHECKING:
    from music_session_manager.domain.shared.types import LocatorStr, VolumeLevel

logger = logging.getLogger(__name__)

# Makes ffmpeg appear as the Android client to avoid 403s on YouTube media URLs
YOUTUBE_HEADERS = (
    '-user_agent "com.google.android.youtube/19.02.39 (Linux; U; Android 14)" '
    '-referer "https://www.youtube.com/" '
    '-headers "Accept-Language: en-US,en;q=0.9"'
)


def volume_to_multiplier(level: int) -> float:
    """Map a 1-100 volume level onto PCMVolumeTransformer's 0.0-1.0 scale."""
    return max(0.0, min(1.0, level / MAX_VOLUME))


class FFmpegStreamHandle(StreamHandle):
    """One FFmpeg source plus the future that carries its terminal event.

    discord.py calls :meth:`after_callback` from its audio thread; the event is
    handed to the loop with ``call_soon_threadsafe`` and only the first one counts.
    """

    def __init__(
        self,
        locator: str,
        source: discord.PCMVolumeTransformer,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        self._locator = locator
        self._source = source
        self._loop = loop
        self._terminal: asyncio.Future[StreamEvent] = loop.create_future()
        self._voice_client: discord.VoiceClient | None = None
        self._closed = False

    @property
    def locator(self) -> LocatorStr:
        return self._locator

    @property
    def source(self) -> discord.PCMVolumeTransformer:
        return self._source

    @property
    def closed(self) -> bool:
        return self._closed

    def attach(self, voice_client: discord.VoiceClient) -> None:
        """Remember the voice client that is playing this source."""
        self._voice_client = voice_client

    def after_callback(self, error: Exception | None) -> None:
        """``after=`` hook for ``VoiceClient.play``; runs on the audio thread."""
        event = StreamEvent.error(repr(error)) if error else StreamEvent.exhausted()
        self._loop.call_soon_threadsafe(self._complete, event)

    def _complete(self, event: StreamEvent) -> None:
        if not self._terminal.done():
            self._terminal.set_result(event)

    async def wait_terminal(self) -> StreamEvent:
        return await asyncio.shield(self._terminal)

    def set_volume(self, level: VolumeLevel) -> bool:
        self._source.volume = volume_to_multiplier(level)
        return True

    async def pause(self) -> None:
        vc = self._voice_client
        if vc is not None and vc.is_playing():
            vc.pause()

    async def resume(self) -> None:
        vc = self._voice_client
        if vc is not None and vc.is_paused():
            vc.resume()

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        vc = self._voice_client
        if vc is not None and vc.source is self._source and (vc.is_playing() or vc.is_paused()):
            vc.stop()
        self._source.cleanup()
        self._complete(StreamEvent.exhausted())


class FFmpegStreamProvider(StreamProvider):
    """Builds ``FFmpegPCMAudio`` sources wrapped in ``PCMVolumeTransformer``."""

    def __init__(
        self,
        settings: AudioSettings | None = None,
        resolver: YtDlpResolver | None = None,
    ) -> None:
        self._settings = settings or AudioSettings()
        self._resolver = resolver or YtDlpResolver(self._settings)

    def _before_options(self) -> str:
        before = self._settings.ffmpeg_options.get("before_options", "")
        return f"{before} {YOUTUBE_HEADERS}".strip()

    def _options(self) -> str:
        return self._settings.ffmpeg_options.get("options", "-vn")

    def create_source(self, stream_url: str, volume: int) -> discord.PCMVolumeTransformer:
        source = discord.FFmpegPCMAudio(
            stream_url,
            before_options=self._before_options(),
            options=self._options(),
        )
        return discord.PCMVolumeTransformer(source, volume=volume_to_multiplier(volume))

    async def open(self, locator: LocatorStr, volume: VolumeLevel) -> FFmpegStreamHandle:
        """Resolve *locator* to a media URL and start an FFmpeg process for it.

        Raises:
            StreamOpenError: The URL could not be resolved or FFmpeg failed to start.
        """
        stream_url = await self._resolver.extract_stream_url(locator)

        try:
            source = self.create_source(stream_url, volume)
        except discord.ClientException as e:
            raise StreamOpenError(locator, str(e)) from e

        return FFmpegStreamHandle(locator, source, asyncio.get_running_loop())
