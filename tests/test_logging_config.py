"""Tests for logging_config.py.

Tests logging setup, color formatting, and handler replacement.
"""

import logging
import typing
from unittest.mock import MagicMock, patch

import pytest

from logging_config import ColoredFormatter, get_logger, setup_logging


def get_tagged_handlers(root_logger: logging.Logger) -> list[logging.Handler]:
    """Find handlers installed by setup_logging (ignores pytest's own)."""
    return [h for h in root_logger.handlers if getattr(h, "_routepin_handler", False)]


def get_stream_handler(root_logger: logging.Logger) -> logging.StreamHandler[typing.Any] | None:
    """Find the console handler installed by setup_logging."""
    for handler in get_tagged_handlers(root_logger):
        if type(handler) is logging.StreamHandler:
            return handler
    return None


def make_record(level: int, msg: str = "message") -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestColoredFormatter:
    """Tests for ColoredFormatter class."""

    @pytest.mark.parametrize("level,code", [
        (logging.DEBUG, "\033[96m"),
        (logging.INFO, "\033[92m"),
        (logging.WARNING, "\033[93m"),
        (logging.ERROR, "\033[91m"),
        (logging.CRITICAL, "\033[95m"),
    ])
    def test_level_colors(self, level, code) -> None:
        """Test each level gets its color and a reset code."""
        formatter = ColoredFormatter("%(levelname)s: %(message)s")

        result = formatter.format(make_record(level))

        assert code in result
        assert "\033[0m" in result

    def test_record_not_modified(self) -> None:
        """Test other handlers still see the plain level name."""
        formatter = ColoredFormatter("%(levelname)s: %(message)s")
        record = make_record(logging.WARNING)

        formatter.format(record)

        assert record.levelname == "WARNING"

    def test_preserves_message_content(self) -> None:
        formatter = ColoredFormatter("%(levelname)s: %(message)s")

        result = formatter.format(make_record(logging.INFO, "[reset] Route table cleared"))

        assert "[reset] Route table cleared" in result


class TestSetupLogging:
    """Tests for setup_logging function."""

    def teardown_method(self) -> None:
        setup_logging(verbose=False, use_colors=False)

    def test_default_console_level_is_info(self) -> None:
        """Test stage narration (INFO) is visible by default."""
        setup_logging(verbose=False)

        handler = get_stream_handler(logging.getLogger())
        assert handler is not None
        assert handler.level == logging.INFO

    def test_verbose_console_level_is_debug(self) -> None:
        setup_logging(verbose=True)

        handler = get_stream_handler(logging.getLogger())
        assert handler is not None
        assert handler.level == logging.DEBUG

    def test_repeated_setup_replaces_handlers(self) -> None:
        """Test calling setup twice does not duplicate output."""
        setup_logging(verbose=False)
        setup_logging(verbose=True)

        assert len(get_tagged_handlers(logging.getLogger())) == 1

    def test_file_handler_added(self, tmp_path) -> None:
        log_file = tmp_path / "routepin.log"

        setup_logging(log_file=log_file)

        handlers = get_tagged_handlers(logging.getLogger())
        file_handlers = [h for h in handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].level == logging.DEBUG

    def test_uses_colored_formatter_by_default(self) -> None:
        setup_logging()

        handler = get_stream_handler(logging.getLogger())
        assert handler is not None
        assert isinstance(handler.formatter, ColoredFormatter)

    def test_plain_formatter_when_colors_disabled(self) -> None:
        setup_logging(use_colors=False)

        handler = get_stream_handler(logging.getLogger())
        assert handler is not None
        assert not isinstance(handler.formatter, ColoredFormatter)

    @patch("logging.FileHandler")
    def test_file_handler_uses_detailed_format(self, mock_handler: MagicMock, tmp_path) -> None:
        """Test file output carries timestamp and logger name."""
        instance = MagicMock()
        instance.level = logging.DEBUG
        mock_handler.return_value = instance

        setup_logging(log_file=tmp_path / "x.log")

        formatter = instance.setFormatter.call_args[0][0]
        assert "%(asctime)s" in formatter._fmt
        assert "%(name)s" in formatter._fmt
        logging.getLogger().removeHandler(instance)


class TestGetLogger:
    """Tests for get_logger function."""

    def test_returns_named_logger(self) -> None:
        logger = get_logger("reconciler")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "reconciler"

    def test_same_logger_for_same_name(self) -> None:
        assert get_logger("routing.windows") is get_logger("routing.windows")
