"""Centralized message constants for error messages, logging, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Queue / Volume Errors
    INVALID_VOLUME = "Volume must be between {min} and {max}, got {level}"

    # State Errors
    NOTHING_PLAYING = "Nothing is playing"
    NOTHING_PAUSED = "Nothing is paused"
    NOTHING_QUEUED = "Nothing is queued"

    # Resolver / Stream Errors
    NO_RESULTS = "No results found for '{query}'"
    NO_STREAM_URL_FOR_TRACK = "No stream URL found for {locator}"
    RESOLVER_FAILED = "Error resolving '{query}': {error}"

    # Transport Errors
    GUILD_NOT_FOUND = "Guild {guild_id} not found"
    CHANNEL_NOT_VOICE = "Channel {channel_id} is not a voice channel"
    VOICE_CONNECT_TIMEOUT = "Timed out connecting to channel {channel_id}"
    VOICE_NO_PERMISSION = "No permission to connect to channel {channel_id}"

    # Snowflake Validation
    INVALID_SNOWFLAKE = "Discord snowflake ID must be positive"
    SNOWFLAKE_TOO_LARGE = "Discord snowflake ID exceeds 64-bit range"

    # Configuration Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    DISCORD_TOKEN_REQUIRED = "DISCORD__TOKEN environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Container not found on bot instance"


class NotificationMessages:
    """User-facing texts emitted through the notification sink."""

    NOW_PLAYING = "🎵 Now playing: **{title}**"
    PLAYBACK_FAILED = "❌ Could not play **{title}**, skipping."
    IDLE_DISCONNECT = "Left the voice channel after {minutes} minutes of inactivity."
    TRANSPORT_LOST = "Disconnected from voice; queue cleared."

    QUEUED = "✅ Added to queue: **{title}** (position {position})"
    SKIPPED = "⏭️ Skipped **{title}**"
    STOPPED = "⏹️ Stopped and cleared the queue!"
    PAUSED = "⏸️ Paused!"
    RESUMED = "▶️ Resumed!"
    VOLUME_SET = "🔊 Volume set to {level}%"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Session Registry
    SESSION_CREATED = "Created session %s"
    SESSION_EVICTED = "Evicted session %s (%s)"
    SESSION_EVICT_STALE = "Ignoring eviction of stale entry for session %s"
    SESSION_REGISTRY_SHUTDOWN = "Stopping %d active session(s)"
    SESSION_REGISTRY_SHUTDOWN_FAILED = "Failed stopping active sessions: %r"
    SESSION_CLOSED_RETRY = "Session %s closed during %s, retrying on a fresh session"

    # Queue Operations
    QUEUE_ENQUEUED = "Enqueued '%s' at position %s in session %s"
    QUEUE_EMPTY = "Queue empty in session %s"
    VOLUME_SET = "Volume set to %s in session %s"
    VOLUME_LIVE_FAILED = "Failed to apply live volume in session %s: %r"

    # Playback Driver
    PLAYBACK_OPENING = "Opening stream for '%s' in session %s (generation %s)"
    PLAYBACK_STARTED = "Started playing '%s' in session %s"
    PLAYBACK_OPEN_FAILED = "Stream open failed for '%s' in session %s: %s"
    PLAYBACK_STALE_OPEN = "Discarding stale stream open in session %s (generation %s != %s)"
    PLAYBACK_STALE_EVENT = "Ignoring stale stream event in session %s (generation %s != %s)"
    PLAYBACK_PAUSED = "Paused playback in session %s"
    PLAYBACK_RESUMED = "Resumed playback in session %s"
    PLAYBACK_STOPPED = "Stopped playback in session %s (%s)"
    PLAYBACK_STREAM_CLOSE_FAILED = "Error closing stream in session %s: %r"
    TRACK_EXHAUSTED = "Track finished: '%s' in session %s"
    TRACK_ERRORED = "Track errored: '%s' in session %s: %s"
    TRACK_SKIPPED = "Skipped track '%s' in session %s"

    # Idle Teardown
    IDLE_TIMER_ARMED = "Armed idle teardown (%ss) for session %s"
    IDLE_TIMER_DISARMED = "Disarmed idle teardown for session %s"
    IDLE_TIMER_FIRED = "Idle teardown fired for session %s"
    IDLE_TIMER_STALE = "Idle teardown for session %s no longer applies"

    # Transport
    TRANSPORT_ACQUIRED = "Acquired transport for session %s in channel %s"
    TRANSPORT_RELEASED = "Released transport for session %s"
    TRANSPORT_RELEASE_FAILED = "Failed to release transport for session %s: %r"
    TRANSPORT_LOST = "Transport lost for session %s"

    # Notifications
    NOTIFY_FAILED = "Failed to deliver notification to session %s: %r"
    NOTIFY_NO_CHANNEL = "No notification channel registered for session %s"

    # Voice (Discord)
    VOICE_CONNECTED = "Connected to voice channel %s in %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_MOVED = "Moved to voice channel %s"
    VOICE_CONNECTION_TIMEOUT = "Timeout connecting to channel %s"
    VOICE_NO_PERMISSION = "No permission to connect to channel %s"
    VOICE_CLIENT_ERROR = "Client error connecting: %r"
    VOICE_STALE_CLEANUP = "Found stale voice client in guild %s, cleaning up"
    VOICE_SELF_DEAFEN_FAILED = "Failed to self-deafen in guild %s: %r"

    # yt-dlp
    YTDLP_FAILED_EXTRACT_INFO = "Failed to extract info for %s"
    YTDLP_FAILED_SEARCH = "Search failed for '%s'"
    YTDLP_NO_URL_IN_INFO_DICT = "No URL found in info dict"
    YTDLP_NO_STREAM_URL = "No stream URL found for %s"
    CACHE_HIT_URL = "Cache hit for URL: %s"
    CACHE_EXPIRED_CLEANED = "Cleaned %d expired cache entries"

    # Session Activity
    ACTIVITY_TRACK_FAILED = "Track '%s' failed to open in session %s: %s"
    ACTIVITY_QUEUE_EXHAUSTED = "Queue exhausted in session %s after %d track(s)"
    ACTIVITY_SESSION_SUMMARY = (
        "Session %s closed (%s): %d played, %d failed, %d skipped, %d discarded"
    )
    GATEWAY_CONNECTED = "WebSocket connected"
    GATEWAY_DISCONNECTED = "WebSocket disconnected"
    GATEWAY_RESUMED = "WebSocket session resumed"
    GUILD_REMOVED = "Removed from guild %s (%s), stopping its session"

    # Bot Lifecycle
    BOT_STARTING = "Starting music session manager ({environment})"
    BOT_FFMPEG_MISSING = "ffmpeg not found in PATH; streams will fail to open"
    BOT_SESSION_CONFIG = (
        "Sessions: default volume %d%%, idle timeout %ss, queue cap %s, queue display %d"
    )
    BOT_SETUP = "Running bot setup hook"
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_COG_LOADED = "Loaded cog: %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"
    BOT_SYNCED_GUILD = "Synced %d commands to guild %s"
    BOT_SYNCED_GLOBAL = "Synced %d global commands"
    BOT_SYNC_FAILED = "Failed to sync commands: %r"
    BOT_READY = "Logged in as %s (ID: %s)"
    BOT_CONNECTED_GUILDS = "Serving %d guild(s)"
    BOT_SHUTTING_DOWN = "Shutting down"
    BOT_SHUTDOWN_COMPLETE = "Shutdown complete"
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown timed out after %ss"
    BOT_SLASH_COMMAND_ERROR = "Slash command '%s' failed: %r"
    BOT_ERROR_MESSAGE_SEND_FAILED = "Failed to send error message to user"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error shutting down container: %r"
    BOT_STARTING_RUN = "Connecting to Discord"
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_KEYBOARD_INTERRUPT = "Interrupted by user"
    BOT_STOPPED = "Bot stopped"


class DiscordUIMessages:
    """Texts and embed labels used by the slash-command layer."""

    STATE_SERVER_ONLY = "❌ This command only works in a server!"
    STATE_NEED_TO_BE_IN_VOICE = "❌ You need to be in a voice channel!"
    STATE_NOTHING_PLAYING = "❌ Nothing is playing!"
    STATE_NOTHING_PAUSED = "❌ Nothing is paused!"
    ERROR_NO_RESULTS = "❌ No results found!"
    ERROR_GENERIC = "❌ An error occurred: {error}"

    EMBED_COLOR = 0x5865F2
    EMBED_NOW_PLAYING = "🎵 Now Playing"
    EMBED_QUEUE = "📋 Music Queue"
    EMBED_FIELD_DURATION = "Duration"
    EMBED_FIELD_REQUESTED_BY = "Requested by"
    EMBED_FIELD_VOLUME = "Volume"
    EMBED_QUEUE_LINE = "**{index}.** [{title}]({url}) - {duration}"
    EMBED_QUEUE_FOOTER = "Total songs: {total}"
