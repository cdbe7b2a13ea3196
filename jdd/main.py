#!/usr/bin/env python3
"""Main entry point for the Johnny Decimal daemon.

This module handles:
- Component initialization (notifier, outcome reporter, watch session)
- Initial scan followed by live watching
- Signal handling for graceful shutdown
- PID file cleanup in daemon mode

Example:
    >>> from jdd.main import run_jdd
    >>> run_jdd(config, logger)
"""

import signal
import sys
import threading
from typing import Optional

from jdd.core.exceptions import JDDError
from jdd.engine.config import DaemonConfig
from jdd.engine.session import WatchSession
from jdd.infrastructure.daemon import remove_pid_file
from jdd.infrastructure.logger import Logger
from jdd.infrastructure.notifier import Notifier
from jdd.reporting import OutcomeReporter


class JDDMain:
    """
    Main class for the daemon process.

    Handles component lifecycle, the watch session, and shutdown.
    """

    def __init__(self, config: DaemonConfig, logger: Logger, pid_file: Optional[str] = None):
        """
        Initialize the main controller.

        Args:
            config: Validated daemon configuration
            logger: Logger instance
            pid_file: PID file to remove on exit (daemon mode only)
        """
        self.config = config
        self.logger = logger
        self.pid_file = pid_file
        self.shutdown_event = threading.Event()

        # Components
        self.notifier: Optional[Notifier] = None
        self.reporter: Optional[OutcomeReporter] = None
        self.session: Optional[WatchSession] = None

    def initialize_components(self) -> None:
        """
        Create the notifier, the reporter and the (not yet started) session.

        Raises:
            JDDError: If the root or an exclude pattern is invalid
        """
        self.logger.debug("Creating Notifier", enabled=self.config.notifications)
        self.notifier = Notifier(self.config.notifications, self.logger)

        self.reporter = OutcomeReporter(self.logger, self.notifier)

        self.logger.debug("Creating WatchSession", root=self.config.root)
        self.session = WatchSession(
            self.config, report=self.reporter, on_error=self.reporter.on_error
        )

        if self.session.exclusions.patterns:
            self.logger.info(f"Exclude patterns: {', '.join(self.session.exclusions.patterns)}")
        if self.config.dry_run:
            self.logger.info("Dry run: files will not be moved")

    def setup_signal_handlers(self) -> None:
        """
        Setup signal handlers for graceful shutdown.

        Handles:
        - SIGTERM: Graceful shutdown
        - SIGINT: Graceful shutdown (Ctrl+C)
        """

        def signal_handler(signum, frame):
            sig_name = signal.Signals(signum).name
            self.logger.info(f"Received signal {sig_name}, shutting down...")
            self.shutdown_event.set()

            # Stops a scan still in progress before its next file
            if self.session:
                self.session.stop_event.set()

        signal.signal(signal.SIGTERM, signal_handler)
        signal.signal(signal.SIGINT, signal_handler)

        self.logger.debug("Signal handlers registered")

    def watch(self) -> int:
        """
        Run the initial scan, then watch until shutdown.

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        self.logger.info(f"Watching {self.session.root}")
        self.logger.info("Starting initial scan...")

        self.session.start()

        report = self.session.scan_report
        if report.cancelled:
            self.logger.info("Initial scan cancelled")
        else:
            self.logger.info("Initial scan complete", **report.summary())

        while not self.shutdown_event.wait(0.5):
            if not self.session.is_running():
                self.logger.error("Filesystem watcher stopped unexpectedly")
                return 1

        return 0

    def cleanup(self) -> None:
        """
        Cleanup resources on shutdown.

        Performs:
        - Watch session shutdown
        - PID file removal
        - Final statistics
        """
        self.logger.info("Cleaning up...")

        if self.session:
            self.session.stop()

        if self.pid_file:
            try:
                remove_pid_file(self.pid_file)
            except OSError as e:
                self.logger.warning(f"Error removing PID file: {e}")

        if self.reporter:
            stats = {kind.value: count for kind, count in self.reporter.counts.items()}
            self.logger.info(f"Final statistics: {stats}")

        self.logger.info("Cleanup complete")

    def run(self) -> int:
        """
        Run the daemon main loop.

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        try:
            self.initialize_components()
            self.setup_signal_handlers()
            return self.watch()

        except KeyboardInterrupt:
            self.logger.info("Interrupted by user")
            return 130

        except JDDError as e:
            self.logger.error(f"Startup failed: {e}")
            return 1

        except Exception as e:
            self.logger.exception("Fatal error", e)
            return 1

        finally:
            self.cleanup()


def run_jdd(config: DaemonConfig, logger: Logger, pid_file: Optional[str] = None) -> int:
    """
    Main entry point for running the daemon.

    Args:
        config: Validated daemon configuration
        logger: Logger instance
        pid_file: PID file to remove on exit

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    return JDDMain(config, logger, pid_file=pid_file).run()


def main():
    """
    Entry point when run as standalone script.

    Typically called via cli.py.
    """
    from jdd.cli import main as cli_main

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
