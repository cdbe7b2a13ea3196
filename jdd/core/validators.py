"""
JDD Core: Input Validators.

This module provides validation and coercion functions for configuration
values coming from YAML files, environment variables and the command line.
"""
import re
from typing import Any, Dict, List, Union

from jdd.core.constants import LOG_LEVELS, ConfigKey, ErrorCode
from jdd.core.exceptions import JDDError

# Duration units in seconds ("1m30s", "500ms", "250us", "2h")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")

_TRUE_VALUES = ("true", "yes", "1", "on")
_FALSE_VALUES = ("false", "no", "0", "off", "")


class ValidationError(JDDError):
    """Invalid configuration value."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        super().__init__(message, error_code)


def parse_duration(value: Union[str, int, float, None]) -> float:
    """Convert a duration to seconds.

    Numbers are taken as seconds. Strings are either a bare number (seconds)
    or a sequence of number+unit parts such as "1m30s" or "500ms".

    Args:
        value: Duration value

    Returns:
        Duration in seconds

    Raises:
        ValidationError: If the value is negative or malformed
    """
    if value is None:
        return 0.0

    if isinstance(value, bool):
        raise ValidationError(f"Invalid duration: {value!r}")

    if isinstance(value, (int, float)):
        seconds = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text or text == "0":
            return 0.0

        try:
            seconds = float(text)
        except ValueError:
            seconds = _parse_duration_string(text)
    else:
        raise ValidationError(f"Invalid duration type: {type(value).__name__}")

    if seconds < 0:
        raise ValidationError(f"Duration must not be negative: {value!r}")

    return seconds


def _parse_duration_string(text: str) -> float:
    sign = 1.0
    if text[0] in "+-":
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]

    position = 0
    total = 0.0
    while position < len(text):
        match = _DURATION_PART.match(text, position)
        if not match:
            raise ValidationError(f"Invalid duration: {text!r}")
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()

    if position == 0:
        raise ValidationError(f"Invalid duration: {text!r}")

    return sign * total


def parse_bool(value: Any) -> bool:
    """Coerce a config or environment value to bool.

    Raises:
        ValidationError: If the value is not recognizable as a boolean
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    raise ValidationError(f"Invalid boolean value: {value!r}")


def split_patterns(values: Union[str, List[str], None]) -> List[str]:
    """Flatten exclude values, splitting comma-separated entries.

    Args:
        values: A single string or a list of strings

    Returns:
        List of non-empty, stripped patterns
    """
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]

    patterns = []
    for value in values:
        if not isinstance(value, str):
            raise ValidationError(f"Exclude pattern must be a string, got {type(value).__name__}")
        patterns.extend(part.strip() for part in value.split(",") if part.strip())
    return patterns


def validate_log_level(level: Any) -> str:
    """Validate and normalize a log level name.

    Returns:
        Lowercase level name

    Raises:
        ValidationError: If the level is unknown
    """
    if not isinstance(level, str) or level.lower() not in LOG_LEVELS:
        raise ValidationError(
            f"Invalid log level: {level!r} (expected one of {', '.join(LOG_LEVELS)})"
        )
    return level.lower()


def validate_config(config: Dict[str, Any]) -> bool:
    """Validate merged daemon configuration structure.

    Args:
        config: Configuration dictionary

    Returns:
        True if valid

    Raises:
        ValidationError: If configuration is invalid
    """
    if not isinstance(config, dict):
        raise ValidationError("Configuration must be a dictionary")

    root = config.get(ConfigKey.ROOT)
    if not isinstance(root, str) or not root.strip():
        raise ValidationError("Root must be a non-empty string")

    exclude = config.get(ConfigKey.EXCLUDE, [])
    if not isinstance(exclude, (list, str)):
        raise ValidationError("Exclude must be a list of glob patterns")
    split_patterns(exclude)

    for key in (ConfigKey.DRY_RUN, ConfigKey.DAEMONIZE, ConfigKey.NOTIFICATIONS):
        if key in config:
            try:
                parse_bool(config[key])
            except ValidationError as e:
                raise ValidationError(f"Invalid value for '{key}': {e}")

    if ConfigKey.DELAY in config:
        try:
            parse_duration(config[ConfigKey.DELAY])
        except ValidationError as e:
            raise ValidationError(f"Invalid value for '{ConfigKey.DELAY}': {e}")

    if ConfigKey.LOG_LEVEL in config:
        validate_log_level(config[ConfigKey.LOG_LEVEL])

    return True
