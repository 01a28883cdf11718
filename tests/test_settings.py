"""
Unit Tests for Application Settings

Tests for:
- DiscordSettings (token aliases, snowflake validation)
- AudioSettings (volume range, queue cap)
- SessionSettings (idle timeout, display limit)
- Settings (environment loading, log level validation)
- get_settings() caching
"""

import pytest
from pydantic import SecretStr, ValidationError

from music_session_manager.config.settings import (
    AudioSettings,
    DiscordSettings,
    SessionSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep host environment variables out of settings under test."""
    for name in ("ENVIRONMENT", "DEBUG", "LOG_LEVEL", "DISCORD__TOKEN", "AUDIO__DEFAULT_VOLUME"):
        monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# DiscordSettings Tests
# =============================================================================


class TestDiscordSettings:
    """Unit tests for DiscordSettings configuration."""

    def test_create_with_defaults(self):
        """Should create DiscordSettings with default values."""
        discord = DiscordSettings()

        assert discord.token.get_secret_value() == ""
        assert discord.guild_ids == ()
        assert discord.test_guild_ids == ()
        assert discord.sync_on_startup is False

    def test_token_aliases(self):
        """Should accept 'bot_token' and 'discord_token' aliases for token."""
        by_bot_token = DiscordSettings(bot_token=SecretStr("aliased-token"))
        by_discord_token = DiscordSettings(discord_token=SecretStr("discord-token"))

        assert by_bot_token.token.get_secret_value() == "aliased-token"
        assert by_discord_token.token.get_secret_value() == "discord-token"

    def test_token_is_masked(self):
        """Should not reveal the token in its string form."""
        discord = DiscordSettings(token=SecretStr("my-secret-token"))

        assert "my-secret-token" not in str(discord)

    def test_guild_ids_from_list(self):
        """Should convert JSON-style lists to tuples."""
        discord = DiscordSettings(guild_ids=[111111111111111111, 222222222222222222])

        assert discord.guild_ids == (111111111111111111, 222222222222222222)

    def test_guild_alias(self):
        """Should accept 'guilds' and 'test_guilds' aliases."""
        discord = DiscordSettings(guilds=(111111111111111111,), test_guilds=(222222222222222222,))

        assert discord.guild_ids == (111111111111111111,)
        assert discord.test_guild_ids == (222222222222222222,)

    @pytest.mark.parametrize("bad_id", [0, -1])
    def test_non_positive_guild_id(self, bad_id):
        """Should reject zero and negative snowflakes."""
        with pytest.raises(ValidationError, match="snowflake ID must be positive"):
            DiscordSettings(guild_ids=(bad_id,))

    def test_guild_id_too_large(self):
        """Should reject snowflakes beyond the 64-bit range."""
        with pytest.raises(ValidationError, match="exceeds 64-bit range"):
            DiscordSettings(test_guild_ids=(2**64,))

    def test_is_frozen(self):
        """Should be immutable after creation."""
        discord = DiscordSettings()

        with pytest.raises(ValidationError):
            discord.sync_on_startup = True


# =============================================================================
# AudioSettings Tests
# =============================================================================


class TestAudioSettings:
    """Unit tests for AudioSettings configuration."""

    def test_create_with_defaults(self):
        """Should create AudioSettings with default values."""
        audio = AudioSettings()

        assert audio.default_volume == 100
        assert audio.max_queue_size is None
        assert audio.ytdlp_format == "bestaudio/best"
        assert "before_options" in audio.ffmpeg_options
        assert audio.ffmpeg_options["options"] == "-vn"

    def test_volume_alias(self):
        """Should accept 'volume' alias for default_volume."""
        assert AudioSettings(volume=40).default_volume == 40

    @pytest.mark.parametrize("volume", [0, 101])
    def test_volume_out_of_range(self, volume):
        """Should reject volumes outside 1..100."""
        with pytest.raises(ValidationError):
            AudioSettings(default_volume=volume)

    def test_volume_rejects_float(self):
        """Should reject non-integer volumes in strict mode."""
        with pytest.raises(ValidationError):
            AudioSettings(default_volume=0.5)

    def test_queue_cap(self):
        """Should accept a positive queue cap and reject zero."""
        assert AudioSettings(max_queue_size=25).max_queue_size == 25
        with pytest.raises(ValidationError, match="greater than or equal to 1"):
            AudioSettings(max_queue_size=0)


# =============================================================================
# SessionSettings Tests
# =============================================================================


class TestSessionSettings:
    """Unit tests for SessionSettings configuration."""

    def test_create_with_defaults(self):
        session = SessionSettings()

        assert session.idle_timeout_seconds == 300.0
        assert session.queue_display_limit == 10

    def test_idle_timeout_alias(self):
        assert SessionSettings(idle_timeout=30.0).idle_timeout_seconds == 30.0

    def test_idle_timeout_must_be_positive(self):
        with pytest.raises(ValidationError, match="greater than 0"):
            SessionSettings(idle_timeout_seconds=0.0)

    def test_display_limit_bounds(self):
        with pytest.raises(ValidationError):
            SessionSettings(queue_display_limit=26)


# =============================================================================
# Settings Tests
# =============================================================================


class TestSettings:
    """Unit tests for main Settings configuration container."""

    def test_create_with_all_defaults(self):
        """Should create Settings with all default values."""
        settings = Settings(_env_file=None)

        assert settings.environment == "development"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert isinstance(settings.discord, DiscordSettings)
        assert isinstance(settings.audio, AudioSettings)
        assert isinstance(settings.session, SessionSettings)

    def test_load_from_environment_variables(self, monkeypatch):
        """Should load top-level settings from environment variables."""
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("LOG_LEVEL", "WARNING")

        settings = Settings(_env_file=None)

        assert settings.environment == "production"
        assert settings.log_level == "WARNING"

    def test_load_nested_token_from_env(self, monkeypatch):
        """Should load nested settings using the '__' delimiter."""
        monkeypatch.setenv("DISCORD__TOKEN", "env-token")

        settings = Settings(_env_file=None)

        assert settings.discord.token.get_secret_value() == "env-token"

    def test_explicit_nested_settings(self):
        """Should accept nested settings instances."""
        settings = Settings(
            _env_file=None,
            audio=AudioSettings(default_volume=60, max_queue_size=5),
            session=SessionSettings(idle_timeout_seconds=10.0),
        )

        assert settings.audio.default_volume == 60
        assert settings.audio.max_queue_size == 5
        assert settings.session.idle_timeout_seconds == 10.0

    def test_environment_validation(self, monkeypatch):
        """Should validate environment is one of allowed literal values."""
        monkeypatch.setenv("ENVIRONMENT", "staging")

        with pytest.raises(ValidationError, match="Input should be"):
            Settings(_env_file=None)

    def test_log_level_is_normalized(self):
        """Should accept case-insensitive log levels and normalize to uppercase."""
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_log_level_validation_invalid(self):
        """Should raise ValidationError for invalid log level."""
        with pytest.raises(ValidationError, match="Invalid log level"):
            Settings(_env_file=None, log_level="VERBOSE")


# =============================================================================
# Settings Caching Tests
# =============================================================================


class TestSettingsCaching:
    """Unit tests for settings caching mechanism."""

    def test_get_settings_returns_cached_instance(self, monkeypatch):
        """Should return same instance on multiple calls to get_settings()."""
        monkeypatch.setenv("ENVIRONMENT", "test")

        assert get_settings() is get_settings()

    def test_clear_settings_cache(self, monkeypatch):
        """Should return a fresh instance after clear_settings_cache()."""
        monkeypatch.setenv("ENVIRONMENT", "test")
        first = get_settings()

        clear_settings_cache()
        monkeypatch.setenv("ENVIRONMENT", "production")
        second = get_settings()

        assert first is not second
        assert first.environment == "test"
        assert second.environment == "production"
