"""Runtime configuration consumed by the engine."""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List

from jdd.core.constants import DEFAULT_LOG_FILE, DEFAULT_PID_FILE, ConfigKey
from jdd.core.validators import (
    parse_bool,
    parse_duration,
    split_patterns,
    validate_config,
    validate_log_level,
)


@dataclass
class DaemonConfig:
    """Validated daemon options.

    The engine reads root, exclude, dry_run and delay. The remaining fields
    are carried for the host (logger, notifier, daemonizer).
    """

    root: str = "."
    exclude: List[str] = field(default_factory=list)
    dry_run: bool = False
    delay: float = 0.0  # seconds
    log_level: str = "info"
    daemonize: bool = False
    notifications: bool = False
    pid_file: str = DEFAULT_PID_FILE
    log_file: str = DEFAULT_LOG_FILE

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "DaemonConfig":
        """Build a config from a merged configuration dictionary.

        Raises:
            ValidationError: If a value is invalid
        """
        validate_config(config)

        defaults = cls()
        return cls(
            root=config[ConfigKey.ROOT],
            exclude=split_patterns(config.get(ConfigKey.EXCLUDE)),
            dry_run=parse_bool(config.get(ConfigKey.DRY_RUN, False)),
            delay=parse_duration(config.get(ConfigKey.DELAY)),
            log_level=validate_log_level(config.get(ConfigKey.LOG_LEVEL, defaults.log_level)),
            daemonize=parse_bool(config.get(ConfigKey.DAEMONIZE, False)),
            notifications=parse_bool(config.get(ConfigKey.NOTIFICATIONS, False)),
            pid_file=config.get(ConfigKey.PID_FILE) or defaults.pid_file,
            log_file=config.get(ConfigKey.LOG_FILE) or defaults.log_file,
        )

    def resolved_root(self) -> str:
        """Root with "~" expanded, as an absolute path with symlinks resolved."""
        return os.path.realpath(os.path.expanduser(self.root))
