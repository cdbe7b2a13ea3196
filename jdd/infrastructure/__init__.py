"""JDD host infrastructure.

Services the daemon process wraps around the engine:
- ConfigManager: defaults, YAML file, JDD_* environment, CLI arguments
- Logger: structured logging to console or rotating file
- Notifier: desktop notifications
- daemonize: background process with a PID file
"""

from .config_manager import ConfigError, ConfigManager, ConfigSource
from .daemon import DaemonError, daemonize, remove_pid_file, write_pid_file
from .logger import Logger, LogLevel
from .notifier import Notifier

__all__ = [
    "ConfigError",
    "ConfigManager",
    "ConfigSource",
    "DaemonError",
    "daemonize",
    "remove_pid_file",
    "write_pid_file",
    "Logger",
    "LogLevel",
    "Notifier",
]
