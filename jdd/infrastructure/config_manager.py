#!/usr/bin/env python3
"""Layered configuration for the JDD daemon.

This module merges configuration from several sources:
- Compiled defaults
- YAML config file (.jd.yaml by default)
- Environment variables (JDD_ROOT, JDD_DRY_RUN, ...)
- Command-line arguments

Later sources override earlier ones key by key.

Example:
    >>> config = ConfigManager()
    >>> config.load_file(".jd.yaml")
    >>> config.load_args({"dry_run": True})
    >>> daemon_config = config.to_daemon_config()
"""

import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from jdd.core.constants import DEFAULT_CONFIG, ENV_PREFIX, ConfigKey, ErrorCode
from jdd.core.exceptions import JDDError
from jdd.core.validators import ValidationError
from jdd.engine.config import DaemonConfig


class ConfigSource(Enum):
    """Configuration source precedence levels."""

    COMPILED_DEFAULTS = 1  # Lowest precedence
    CONFIG_FILE = 2
    ENVIRONMENT = 3
    CLI_ARGS = 4  # Highest precedence


class ConfigError(JDDError):
    """Configuration error."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        super().__init__(message, error_code)


# Keys that may be set from the environment as JDD_<KEY>
ENV_KEYS = (
    ConfigKey.ROOT,
    ConfigKey.EXCLUDE,
    ConfigKey.DRY_RUN,
    ConfigKey.DELAY,
    ConfigKey.LOG_LEVEL,
    ConfigKey.DAEMONIZE,
    ConfigKey.NOTIFICATIONS,
    ConfigKey.PID_FILE,
    ConfigKey.LOG_FILE,
)


class ConfigManager:
    """Hierarchical configuration manager.

    Each source holds a flat dictionary of daemon options. Lookups search
    from the highest precedence source down.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """Initialize configuration manager.

        Args:
            environ: Environment to read JDD_* variables from (defaults to os.environ)
        """
        self._config: Dict[ConfigSource, Dict[str, Any]] = {
            ConfigSource.COMPILED_DEFAULTS: dict(DEFAULT_CONFIG),
        }
        self.config_file: Optional[Path] = None
        self._load_environment(os.environ if environ is None else environ)

    def load_file(self, file_path: str) -> None:
        """Load configuration from a YAML file.

        A relative root in the file is resolved against the file's directory.

        Args:
            file_path: Path to YAML config file

        Raises:
            ConfigError: If file cannot be loaded or parsed
        """
        path = Path(file_path).expanduser().resolve()

        if not path.is_file():
            raise ConfigError(f"Config file not found: {file_path}", ErrorCode.NOT_FOUND)

        try:
            with open(path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML parse error in {file_path}: {e}")
        except OSError as e:
            raise ConfigError(f"Error loading config {file_path}: {e}", ErrorCode.IO_ERROR)

        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ConfigError(f"Invalid config format in {file_path}: expected a mapping")

        root = config_data.get(ConfigKey.ROOT)
        if isinstance(root, str) and root and not root.startswith("~") and not os.path.isabs(root):
            config_data[ConfigKey.ROOT] = str(path.parent / root)

        self._config[ConfigSource.CONFIG_FILE] = config_data
        self.config_file = path

    def _load_environment(self, environ: Mapping[str, str]) -> None:
        env_config = {}
        for key in ENV_KEYS:
            value = environ.get(ENV_PREFIX + key.upper())
            if value is not None:
                env_config[key] = value

        if env_config:
            self._config[ConfigSource.ENVIRONMENT] = env_config

    def load_args(self, args: Dict[str, Any]) -> None:
        """Load command-line overrides; None values mean "not given"."""
        self._config[ConfigSource.CLI_ARGS] = {k: v for k, v in args.items() if v is not None}

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key from the highest precedence source."""
        for source in sorted(self._config, key=lambda s: s.value, reverse=True):
            if key in self._config[source] and self._config[source][key] is not None:
                return self._config[source][key]
        return default

    def source_of(self, key: str) -> Optional[ConfigSource]:
        """Return the source that provides key."""
        for source in sorted(self._config, key=lambda s: s.value, reverse=True):
            if self._config[source].get(key) is not None:
                return source
        return None

    def get_all(self) -> Dict[str, Any]:
        """Get merged configuration from all sources."""
        merged: Dict[str, Any] = {}
        for source in sorted(self._config, key=lambda s: s.value):
            merged.update({k: v for k, v in self._config[source].items() if v is not None})
        return merged

    def to_daemon_config(self) -> DaemonConfig:
        """Validate the merged configuration.

        Raises:
            ConfigError: If any value is invalid
        """
        try:
            return DaemonConfig.from_dict(self.get_all())
        except ValidationError as e:
            raise ConfigError(str(e), e.error_code)
