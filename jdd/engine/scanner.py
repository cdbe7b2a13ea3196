"""
Initial scan of the watched tree.

Walks the root once, depth-first, classifying every regular file. A subtree
that disappears or cannot be listed is recorded and skipped; only an
unreadable root aborts the scan, before any file is touched.
"""

import os
import threading
from dataclasses import dataclass, field
from typing import List, Optional

from jdd.core.constants import ErrorCode
from jdd.core.exceptions import JDDError
from jdd.engine.classifier import process_file
from jdd.engine.config import DaemonConfig
from jdd.engine.outcome import ErrorCallback, Outcome, OutcomeCallback, OutcomeKind
from jdd.rules.patterns import ExclusionSet


class ScanError(JDDError):
    """The scan root cannot be read."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.IO_ERROR):
        super().__init__(message, error_code)


@dataclass
class ScanReport:
    """Outcomes and traversal errors of one scan."""

    root: str
    outcomes: List[Outcome] = field(default_factory=list)
    errors: List[OSError] = field(default_factory=list)
    cancelled: bool = False

    @property
    def touched(self) -> int:
        """Number of files classified."""
        return len(self.outcomes)

    def count(self, kind: OutcomeKind) -> int:
        return sum(1 for outcome in self.outcomes if outcome.kind is kind)

    def summary(self) -> dict:
        summary = {kind.value: self.count(kind) for kind in OutcomeKind}
        summary["errors"] = len(self.errors)
        return summary


def scan(
    root: str,
    config: DaemonConfig,
    exclusions: ExclusionSet,
    report: Optional[OutcomeCallback] = None,
    on_error: Optional[ErrorCallback] = None,
    stop_event: Optional[threading.Event] = None,
) -> ScanReport:
    """Classify every regular file under root.

    Args:
        root: Absolute watched root
        config: Daemon configuration
        exclusions: Compiled exclude patterns
        report: Called with each outcome as it is produced
        on_error: Called with each traversal error
        stop_event: When set, the walk stops before the next file

    Returns:
        Report of the scan

    Raises:
        ScanError: If the root itself cannot be listed
    """
    try:
        with os.scandir(root):
            pass
    except OSError as e:
        raise ScanError(f"Cannot read scan root {root}: {e}") from e

    result = ScanReport(root=root)

    def walk_error(error: OSError) -> None:
        result.errors.append(error)
        if on_error is not None:
            on_error(error)

    # Files moved by this scan may be reached again further down the walk
    relocated = set()

    for dirpath, _dirnames, filenames in os.walk(root, onerror=walk_error):
        for filename in filenames:
            if stop_event is not None and stop_event.is_set():
                result.cancelled = True
                return result

            path = os.path.join(dirpath, filename)
            if path in relocated:
                continue
            if os.path.islink(path) or not os.path.isfile(path):
                continue

            outcome = process_file(path, root, config, exclusions)
            result.outcomes.append(outcome)
            if outcome.kind is OutcomeKind.MOVED and not outcome.dry_run:
                relocated.add(outcome.destination)
            if report is not None:
                report(outcome)

    return result
