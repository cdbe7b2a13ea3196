"""JDD Core - Shared constants, errors and validators.

Import specific names from submodules:
    from jdd.core.constants import ConfigKey, ErrorCode
    from jdd.core.exceptions import JDDError
    from jdd.core.validators import ValidationError, parse_duration
"""

from jdd.core import constants, exceptions, validators

__all__ = [
    "constants",
    "exceptions",
    "validators",
]
