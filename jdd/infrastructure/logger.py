#!/usr/bin/env python3
"""Structured logging for the JDD host process.

This module provides a structured logger with:
- Level names from the config file (debug, info, warn, error)
- Structured context (key-value pairs) appended to messages
- Thread-local context for the worker threads of the watcher
- Console output in the foreground, rotating file output as a daemon

Example:
    >>> logger = Logger(level="info")
    >>> logger.info("Moved file", source="15.23 a.txt")
    >>> with logger.add_context(root="/home/me/docs"):
    ...     logger.debug("Starting initial scan")
"""

import logging
import logging.handlers
import threading
from contextlib import contextmanager
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class LogLevel(IntEnum):
    """Log levels matching Python's logging module."""

    DEBUG = logging.DEBUG  # 10
    INFO = logging.INFO  # 20
    WARNING = logging.WARNING  # 30
    ERROR = logging.ERROR  # 40
    CRITICAL = logging.CRITICAL  # 50

    @classmethod
    def parse(cls, level: Union["LogLevel", str, int]) -> "LogLevel":
        """Convert a level name or number to LogLevel.

        "warn" is accepted as an alias of "warning".

        Raises:
            ValueError: If the level is unknown
        """
        if isinstance(level, cls):
            return level
        if isinstance(level, int):
            return cls(level)

        name = str(level).strip().upper()
        if name == "WARN":
            name = "WARNING"
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown log level: {level!r}")


class Logger:
    """Structured logger with context support."""

    # Thread-local storage for context
    _context_stack = threading.local()

    def __init__(
        self,
        name: str = "jdd",
        level: Union[LogLevel, str] = LogLevel.INFO,
        handlers: Optional[List[logging.Handler]] = None,
    ):
        """Initialize logger.

        Args:
            name: Logger name for identification
            level: Minimum log level to output
            handlers: Optional list of logging handlers
        """
        self.name = name
        self.logger = logging.getLogger(name)
        self.set_level(level)

        if handlers is None:
            handlers = [self._create_console_handler()]

        self.logger.handlers.clear()
        for handler in handlers:
            self.logger.addHandler(handler)

        self.logger.propagate = False

    def _create_console_handler(self) -> logging.StreamHandler:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        return handler

    def create_file_handler(
        self,
        filename: Union[str, Path],
        max_bytes: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
    ) -> logging.handlers.RotatingFileHandler:
        """Create rotating file handler.

        Args:
            filename: Path to log file
            max_bytes: Maximum size before rotation
            backup_count: Number of backup files to keep

        Returns:
            Configured rotating file handler
        """
        handler = logging.handlers.RotatingFileHandler(
            filename, maxBytes=max_bytes, backupCount=backup_count
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        return handler

    def log_to_file(self, filename: Union[str, Path]) -> None:
        """Replace all handlers with a rotating file handler."""
        handler = self.create_file_handler(filename)
        for existing in list(self.logger.handlers):
            self.logger.removeHandler(existing)
            existing.close()
        self.logger.addHandler(handler)

    def set_level(self, level: Union[LogLevel, str]) -> None:
        """Set the minimum log level (LogLevel or name)."""
        self.logger.setLevel(LogLevel.parse(level))

    def _get_context(self) -> Dict[str, Any]:
        if not hasattr(self._context_stack, "stack"):
            self._context_stack.stack = [{}]

        context = {}
        for ctx in self._context_stack.stack:
            context.update(ctx)
        return context

    def _format_message(self, msg: str, context: Dict[str, Any]) -> str:
        if context:
            ctx_str = " ".join(f"{k}={v}" for k, v in context.items())
            return f"{msg} | {ctx_str}"
        return msg

    @contextmanager
    def add_context(self, **kwargs):
        """Context manager to add temporary context.

        Example:
            >>> with logger.add_context(source="watch"):
            ...     logger.info("Moved file")
        """
        if not hasattr(self._context_stack, "stack"):
            self._context_stack.stack = [{}]

        self._context_stack.stack.append(kwargs)
        try:
            yield
        finally:
            self._context_stack.stack.pop()

    def _log(self, level: LogLevel, msg: str, context: Dict[str, Any], **kwargs) -> None:
        if not self.logger.isEnabledFor(level):
            return
        combined_context = self._get_context()
        combined_context.update(context)
        self.logger.log(
            level,
            self._format_message(msg, combined_context),
            extra={"context": combined_context},
            **kwargs,
        )

    def debug(self, msg: str, **context) -> None:
        self._log(LogLevel.DEBUG, msg, context)

    def info(self, msg: str, **context) -> None:
        self._log(LogLevel.INFO, msg, context)

    def warning(self, msg: str, **context) -> None:
        self._log(LogLevel.WARNING, msg, context)

    def error(self, msg: str, **context) -> None:
        self._log(LogLevel.ERROR, msg, context)

    def exception(self, msg: str, exc: BaseException, **context) -> None:
        """Log exception with traceback.

        Args:
            msg: Log message
            exc: Exception to log
            **context: Additional context key-value pairs
        """
        context["exception_type"] = type(exc).__name__
        context["exception_message"] = str(exc)
        self._log(LogLevel.ERROR, msg, context, exc_info=exc)
