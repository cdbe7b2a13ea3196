"""
Watch session lifecycle.

start() brings a session up in a fixed order:

1. Resolve the root and compile the exclude patterns
2. Subscribe to filesystem events
3. Scan the existing tree
4. Mark the session ready

Subscribing before the scan means a file created while the scan runs is
never missed; it may be seen twice, which the classifier tolerates.

Example:
    >>> session = start(config, report=print)
    >>> session.wait()
    >>> stop(session)
"""

import os
import threading
from typing import Optional

from jdd.core.constants import ErrorCode
from jdd.core.exceptions import JDDError
from jdd.engine.config import DaemonConfig
from jdd.engine.outcome import ErrorCallback, OutcomeCallback
from jdd.engine.scanner import ScanReport, scan
from jdd.engine.watcher import WatchDriver, WatchState
from jdd.rules.patterns import ExclusionSet


class RootError(JDDError):
    """The configured root is not a usable directory."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.NOT_FOUND):
        super().__init__(message, error_code)


class WatchSession:
    """Runtime state of one daemon run.

    Owns the subscription; drivers only read the config and exclusions.
    """

    def __init__(
        self,
        config: DaemonConfig,
        report: Optional[OutcomeCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ):
        self.config = config
        self.report = report
        self.on_error = on_error

        self.root = config.resolved_root()
        if not os.path.isdir(self.root):
            raise RootError(f"Root is not a directory: {self.root}")

        self.exclusions = ExclusionSet.compile(config.exclude, self.root)
        self.stop_event = threading.Event()
        self.ready = threading.Event()
        self.scan_report: Optional[ScanReport] = None
        self.watcher = WatchDriver(
            self.root,
            config,
            self.exclusions,
            report=report,
            on_error=on_error,
            stop_event=self.stop_event,
        )

    @property
    def state(self) -> WatchState:
        return self.watcher.state

    def start(self) -> "WatchSession":
        """Subscribe, scan, then mark ready.

        Raises:
            SubscriptionError: If the root cannot be watched
            ScanError: If the root cannot be read
        """
        self.watcher.subscribe()
        try:
            self.scan_report = scan(
                self.root,
                self.config,
                self.exclusions,
                report=self.report,
                on_error=self.on_error,
                stop_event=self.stop_event,
            )
        except BaseException:
            self.watcher.close()
            raise

        self.ready.set()
        return self

    def is_running(self) -> bool:
        return not self.stop_event.is_set() and self.watcher.is_alive()

    def wait(self, timeout: Optional[float] = None, poll_interval: float = 0.5) -> bool:
        """Block until stopped, the subscription dies, or timeout elapses.

        Returns:
            True if the session is no longer running
        """
        remaining = timeout
        while self.is_running():
            interval = poll_interval if remaining is None else min(poll_interval, remaining)
            if self.stop_event.wait(interval):
                break
            if remaining is not None:
                remaining -= interval
                if remaining <= 0:
                    return not self.is_running()
        return True

    def stop(self) -> None:
        """Cancel the scan if still running and close the subscription."""
        self.stop_event.set()
        self.watcher.close()


def start(
    config: DaemonConfig,
    report: Optional[OutcomeCallback] = None,
    on_error: Optional[ErrorCallback] = None,
) -> WatchSession:
    """Create and start a watch session.

    Args:
        config: Daemon configuration
        report: Called with every outcome (scan and watch)
        on_error: Called with traversal and watch-stream errors

    Returns:
        Running session, ready once the initial scan has completed

    Raises:
        RootError: If the root is not a directory
        PatternCompileError: If an exclude pattern is invalid
        SubscriptionError: If the root cannot be watched
        ScanError: If the root cannot be read
    """
    return WatchSession(config, report=report, on_error=on_error).start()


def stop(session: WatchSession) -> None:
    """Stop a session; safe to call more than once."""
    session.stop()
