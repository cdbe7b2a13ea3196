#!/usr/bin/env python3
"""Tests for the Logger module."""

import io
import logging
import threading

import pytest

from jdd.infrastructure.logger import LogLevel, Logger


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def capture_logger(request, stream):
    """Logger writing bare messages to a string buffer."""
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
    return Logger(name=f"jdd.test.{request.node.name}", level="debug", handlers=[handler])


class TestLogLevel:
    """Tests for LogLevel enum."""

    def test_log_levels(self):
        """Test log level values match Python logging."""
        assert LogLevel.DEBUG == logging.DEBUG
        assert LogLevel.INFO == logging.INFO
        assert LogLevel.WARNING == logging.WARNING
        assert LogLevel.ERROR == logging.ERROR

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("debug", LogLevel.DEBUG),
            ("INFO", LogLevel.INFO),
            ("warn", LogLevel.WARNING),
            ("warning", LogLevel.WARNING),
            ("error", LogLevel.ERROR),
            (logging.ERROR, LogLevel.ERROR),
            (LogLevel.INFO, LogLevel.INFO),
        ],
    )
    def test_parse(self, name, expected):
        """Test parsing config level names."""
        assert LogLevel.parse(name) is expected

    def test_parse_unknown(self):
        """Test unknown names are rejected."""
        with pytest.raises(ValueError):
            LogLevel.parse("chatty")


class TestLogger:
    """Tests for Logger class."""

    def test_logger_creation(self):
        """Test creating a logger."""
        logger = Logger(name="jdd.test.creation", level="warn", handlers=[logging.NullHandler()])

        assert logger.name == "jdd.test.creation"
        assert logger.logger.level == logging.WARNING
        assert not logger.logger.propagate

    def test_default_console_handler(self):
        """Test a console handler is installed by default."""
        logger = Logger(name="jdd.test.console")

        assert len(logger.logger.handlers) == 1
        assert isinstance(logger.logger.handlers[0], logging.StreamHandler)

    def test_level_methods(self, capture_logger, stream):
        """Test each level method writes at its level."""
        capture_logger.debug("d")
        capture_logger.info("i")
        capture_logger.warning("w")
        capture_logger.error("e")

        assert stream.getvalue().splitlines() == ["DEBUG d", "INFO i", "WARNING w", "ERROR e"]

    def test_level_filtering(self, capture_logger, stream):
        """Test messages below the level are dropped."""
        capture_logger.set_level("error")
        capture_logger.info("hidden")
        capture_logger.error("shown")

        assert stream.getvalue() == "ERROR shown\n"
        assert not capture_logger.logger.isEnabledFor(logging.INFO)
        assert capture_logger.logger.isEnabledFor(LogLevel.ERROR)

    def test_context_appended(self, capture_logger, stream):
        """Test keyword context is appended as key=value pairs."""
        capture_logger.info("Moved file", source="a", destination="b")

        assert stream.getvalue() == "INFO Moved file | source=a destination=b\n"

    def test_add_context(self, capture_logger, stream):
        """Test temporary context applies only inside the block."""
        with capture_logger.add_context(root="/docs"):
            capture_logger.info("inside")
        capture_logger.info("outside")

        assert stream.getvalue().splitlines() == ["INFO inside | root=/docs", "INFO outside"]

    def test_context_is_thread_local(self, capture_logger, stream):
        """Test context from one thread does not leak into another."""
        entered = threading.Event()
        release = threading.Event()

        def worker():
            with capture_logger.add_context(worker="1"):
                entered.set()
                release.wait(5)

        thread = threading.Thread(target=worker)
        thread.start()
        entered.wait(5)
        capture_logger.info("main")
        release.set()
        thread.join(5)

        assert stream.getvalue() == "INFO main\n"

    def test_exception(self, capture_logger, stream):
        """Test exception logging includes type and traceback."""
        try:
            raise OSError("disk gone")
        except OSError as e:
            capture_logger.exception("Rename failed", e)

        output = stream.getvalue()
        assert "exception_type=OSError" in output
        assert "exception_message=disk gone" in output
        assert "Traceback" in output

    def test_log_to_file(self, tmp_path, capture_logger, stream):
        """Test switching to a rotating file replaces console output."""
        log_file = tmp_path / "jdd.log"

        capture_logger.log_to_file(log_file)
        capture_logger.info("to file")
        for handler in capture_logger.logger.handlers:
            handler.flush()

        assert stream.getvalue() == ""
        assert "to file" in log_file.read_text()
        assert len(capture_logger.logger.handlers) == 1
