"""Base exception for JDD.

Each subsystem defines its own subclasses next to the code that raises them
(ParseError in jdd.jd.parser, PatternCompileError in jdd.rules.patterns, ...).
"""

from jdd.core.constants import ErrorCode


class JDDError(Exception):
    """Base exception carrying an error code."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        """Initialize JDDError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        self.message = message
        self.error_code = error_code
        super().__init__(message)
