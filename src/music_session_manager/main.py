#!/usr/bin/env python3
"""Main entry point for the music session manager bot."""

from __future__ import annotations

import json
import logging
import logging.config
import shutil
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from music_session_manager.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from music_session_manager.config.settings import Settings

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"


def setup_logging(log_level: str = "INFO", config_path: Path = _LOGGING_CONFIG_PATH) -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(config_path) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.basicConfig(
            level=resolved_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.warning("Could not load %s, falling back to basic config", config_path)

    logging.getLogger().setLevel(resolved_level)


def log_session_config(settings: Settings) -> None:
    """Log the per-session defaults and warn when ffmpeg cannot be found."""
    logger = logging.getLogger(__name__)
    logger.info(
        LogTemplates.BOT_SESSION_CONFIG,
        settings.audio.default_volume,
        settings.session.idle_timeout_seconds,
        settings.audio.max_queue_size or "none",
        settings.session.queue_display_limit,
    )

    # Streams cannot open without it; commands still answer
    if not shutil.which("ffmpeg"):
        logger.warning(LogTemplates.BOT_FFMPEG_MISSING)


def main() -> int:
    from music_session_manager.config.settings import get_settings

    settings = get_settings()
    setup_logging(settings.log_level)

    logger = logging.getLogger(__name__)

    token_value = settings.discord.token.get_secret_value()
    if not token_value:
        logger.error(ErrorMessages.DISCORD_TOKEN_REQUIRED)
        return 1

    logger.info(LogTemplates.BOT_STARTING.format(environment=settings.environment))
    log_session_config(settings)

    from music_session_manager.config.container import create_container
    from music_session_manager.infrastructure.discord.bot import create_bot

    container = create_container(settings)
    bot = create_bot(container, settings)

    try:
        logger.info(LogTemplates.BOT_STARTING_RUN)
        bot.run_with_graceful_shutdown(token_value)
        logger.info(LogTemplates.BOT_STOPPED)
        return 0
    except KeyboardInterrupt:
        logger.info(LogTemplates.BOT_KEYBOARD_INTERRUPT)
        return 0
    except Exception as e:
        logger.exception(LogTemplates.BOT_FATAL_ERROR, e)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
