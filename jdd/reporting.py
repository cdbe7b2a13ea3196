"""Turns engine outcomes into log lines and notifications."""

from typing import Dict

from jdd.core.constants import NOTIFICATION_TITLE
from jdd.engine.outcome import Outcome, OutcomeKind
from jdd.engine.watcher import WatchStreamError
from jdd.infrastructure.logger import Logger
from jdd.infrastructure.notifier import Notifier


class OutcomeReporter:
    """Outcome and error callback for a watch session.

    Moves and failures are logged and notified; everything else is logged
    at debug level.
    """

    def __init__(self, logger: Logger, notifier: Notifier):
        self.logger = logger
        self.notifier = notifier
        self.counts: Dict[OutcomeKind, int] = {kind: 0 for kind in OutcomeKind}

    def __call__(self, outcome: Outcome) -> None:
        self.counts[outcome.kind] += 1
        message = outcome.describe()

        if outcome.kind is OutcomeKind.MOVED:
            self.logger.info(message)
            self.notifier.send(NOTIFICATION_TITLE, message)
        elif outcome.kind is OutcomeKind.FAILED:
            self.logger.error(message)
            self.notifier.send(NOTIFICATION_TITLE, message)
        elif outcome.kind in (
            OutcomeKind.ALREADY_IN_PLACE,
            OutcomeKind.EXCLUDED,
            OutcomeKind.NOT_JD_FILE,
        ):
            self.logger.debug(message)
        else:
            raise ValueError(f"Unhandled outcome kind: {outcome.kind}")

    def on_error(self, error: BaseException) -> None:
        """Log traversal and watch-stream errors; they never stop the daemon."""
        if isinstance(error, WatchStreamError):
            self.logger.error(f"Watch error: {error}")
        else:
            self.logger.warning(f"Skipping unreadable path: {error}")
