"""Audio infrastructure - yt-dlp resolver and FFmpeg stream provider."""

from music_session_manager.infrastructure.audio.ffmpeg_stream import (
    FFmpegStreamHandle,
    FFmpegStreamProvider,
)
from music_session_manager.infrastructure.audio.models import (
    AudioFormatInfo,
    CacheEntry,
    YtDlpOpts,
    YtDlpTrackInfo,
)
from music_session_manager.infrastructure.audio.ytdlp_resolver import YtDlpResolver

__all__ = [
    "AudioFormatInfo",
    "CacheEntry",
    "FFmpegStreamHandle",
    "FFmpegStreamProvider",
    "YtDlpOpts",
    "YtDlpResolver",
    "YtDlpTrackInfo",
]
