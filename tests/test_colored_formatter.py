"""Tests for ColoredFormatter."""

import logging
import logging.config
from io import StringIO

import pytest

from music_session_manager.utils.logging import ColoredFormatter

RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}


class _TTY(StringIO):
    def isatty(self) -> bool:
        return True


def _make_record(level: int, message: str = "test") -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


@pytest.fixture(autouse=True)
def color_env(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("FORCE_COLOR", raising=False)


def _tty_formatter() -> ColoredFormatter:
    return ColoredFormatter("%(levelname)s | %(message)s", stream=_TTY())


class TestColoredFormatter:
    """Tests for ANSI color formatting."""

    @pytest.mark.parametrize(
        "level",
        [logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL],
    )
    def test_color_applied_per_level(self, level: int):
        output = _tty_formatter().format(_make_record(level))

        assert output.startswith(LEVEL_COLORS[level])
        assert RESET in output

    def test_no_color_env_wins_over_tty(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")

        output = _tty_formatter().format(_make_record(logging.INFO))

        assert "\033[" not in output

    def test_no_color_when_stream_not_tty(self):
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=StringIO())

        assert "\033[" not in fmt.format(_make_record(logging.ERROR))

    def test_force_color_without_tty(self, monkeypatch):
        monkeypatch.setenv("FORCE_COLOR", "1")
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=StringIO())

        assert LEVEL_COLORS[logging.ERROR] in fmt.format(_make_record(logging.ERROR))

    def test_format_output_matches_pattern(self):
        output = _tty_formatter().format(_make_record(logging.INFO, "hello world"))

        plain = output.replace(LEVEL_COLORS[logging.INFO], "").replace(RESET, "")
        assert plain == "INFO | hello world"

    def test_original_record_not_mutated(self):
        """Other handlers must still see the plain levelname."""
        record = _make_record(logging.WARNING)

        _tty_formatter().format(record)

        assert record.levelname == "WARNING"

    def test_usable_from_dict_config(self):
        """logging_config.json builds the formatter through the '()' factory key."""
        config = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {
                    "()": "music_session_manager.utils.logging.ColoredFormatter",
                    "fmt": "%(levelname)s %(message)s",
                    "datefmt": "%H:%M:%S",
                }
            },
            "handlers": {
                "test": {"class": "logging.NullHandler", "formatter": "console"},
            },
            "loggers": {"colored.formatter.test": {"handlers": ["test"], "propagate": False}},
        }

        logging.config.dictConfig(config)

        handler = logging.getLogger("colored.formatter.test").handlers[0]
        assert isinstance(handler.formatter, ColoredFormatter)
