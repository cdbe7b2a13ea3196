"""jdd - Johnny Decimal Daemon.

Keeps a directory tree filed by Johnny Decimal numbers: a file named
"15.23 Report.pdf" is moved to "10-19/15/15.23/15.23 Report.pdf" under the
watched root, creating folders as needed and reusing decorated ones.
"""

from jdd.core.constants import JDD_VERSION as __version__
from jdd.engine import DaemonConfig, Outcome, OutcomeKind, WatchSession, start, stop

__all__ = [
    "__version__",
    "DaemonConfig",
    "Outcome",
    "OutcomeKind",
    "WatchSession",
    "start",
    "stop",
]
