"""
JDD Core: Constants and Type Definitions

This module provides system-wide constants, error codes, and configuration
keys shared by the engine and the host layer.
"""
from enum import IntEnum

# Version information
JDD_VERSION = "1.0.0"
APP_NAME = "Johnny Decimal Daemon"
NOTIFICATION_TITLE = "JDD"


# Error codes (1-9 range)
class ErrorCode(IntEnum):
    """Standardized error codes for JDD operations."""

    INVALID_INPUT = 1  # Bad path, invalid configuration or pattern
    NOT_FOUND = 2  # File or directory doesn't exist
    PERMISSION_DENIED = 3  # Insufficient permissions
    CONFLICT = 4  # Target already exists
    DEPENDENCY_ERROR = 5  # Missing platform facility (fork, notifier)
    INTERNAL_ERROR = 6  # Bug in JDD
    IO_ERROR = 7  # Listing, creation or rename failed
    WATCH_ERROR = 8  # Filesystem subscription failure


class Limits:
    """Default values and limits."""

    # Directories are created with this mode (before umask)
    FOLDER_MODE = 0o755

    # Worker threads for settle-delay + classification of watch events
    WATCH_WORKERS = 8

    # Seconds to wait for the observer thread on shutdown
    OBSERVER_JOIN_TIMEOUT = 5.0

    # Daemon process defaults
    DAEMON_UMASK = 0o027
    PID_FILE_MODE = 0o644


class ConfigKey:
    """Configuration key constants."""

    ROOT = "root"
    EXCLUDE = "exclude"
    DRY_RUN = "dry_run"
    DELAY = "delay"
    LOG_LEVEL = "log_level"
    DAEMONIZE = "daemonize"
    NOTIFICATIONS = "notifications"
    PID_FILE = "pid_file"
    LOG_FILE = "log_file"


DEFAULT_CONFIG_FILE = ".jd.yaml"
DEFAULT_PID_FILE = "jdd.pid"
DEFAULT_LOG_FILE = "jdd.log"

# Prefix for environment overrides (JDD_ROOT, JDD_DRY_RUN, ...)
ENV_PREFIX = "JDD_"

LOG_LEVELS = ("debug", "info", "warn", "warning", "error")

# Default configuration values
DEFAULT_CONFIG = {
    ConfigKey.ROOT: ".",
    ConfigKey.EXCLUDE: [],
    ConfigKey.DRY_RUN: False,
    ConfigKey.DELAY: 0,
    ConfigKey.LOG_LEVEL: "info",
    ConfigKey.DAEMONIZE: False,
    ConfigKey.NOTIFICATIONS: False,
    ConfigKey.PID_FILE: DEFAULT_PID_FILE,
    ConfigKey.LOG_FILE: DEFAULT_LOG_FILE,
}
