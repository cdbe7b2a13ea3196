"""
Recursive filesystem watching.

The WatchDriver subscribes to creation events under the root with a watchdog
observer and classifies each new file on a worker pool:

    IDLE --subscribe()--> SUBSCRIBED --close() / observer died--> DRAINING --> CLOSED

Every event is its own task: the settle delay of one file never holds back
the next. Errors raised while handling an event are passed to the error
callback and the driver keeps going.
"""

import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from enum import Enum
from typing import Optional, Set

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from jdd.core.constants import ErrorCode, Limits
from jdd.core.exceptions import JDDError
from jdd.engine.classifier import process_file
from jdd.engine.config import DaemonConfig
from jdd.engine.outcome import ErrorCallback, OutcomeCallback
from jdd.rules.patterns import ExclusionSet


class SubscriptionError(JDDError):
    """The root could not be watched."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.WATCH_ERROR):
        super().__init__(message, error_code)


class WatchStreamError(JDDError):
    """An error surfaced while consuming watch events."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message, ErrorCode.WATCH_ERROR)


class WatchState(Enum):
    """Lifecycle of a WatchDriver."""

    IDLE = "idle"
    SUBSCRIBED = "subscribed"
    DRAINING = "draining"
    CLOSED = "closed"


class _CreationHandler(FileSystemEventHandler):
    """Forwards new files to the driver."""

    def __init__(self, driver: "WatchDriver"):
        super().__init__()
        self.driver = driver

    def on_created(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self.driver.submit(os.fsdecode(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:
        # A rename inside the tree shows up as a new name; the daemon's own
        # renames land here too and classify as already in place
        if event.is_directory:
            return
        self.driver.submit(os.fsdecode(event.dest_path))


class WatchDriver:
    """Watches root recursively and classifies files as they appear."""

    def __init__(
        self,
        root: str,
        config: DaemonConfig,
        exclusions: ExclusionSet,
        report: Optional[OutcomeCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        stop_event: Optional[threading.Event] = None,
        max_workers: int = Limits.WATCH_WORKERS,
    ):
        """Initialize the driver.

        Args:
            root: Absolute watched root
            config: Daemon configuration (delay, dry_run)
            exclusions: Compiled exclude patterns
            report: Called with each outcome
            on_error: Called with each WatchStreamError
            stop_event: Shared cancellation flag
            max_workers: Size of the classification pool
        """
        self.root = root
        self.config = config
        self.exclusions = exclusions
        self.report = report
        self.on_error = on_error
        self.stop_event = stop_event or threading.Event()

        self._state = WatchState.IDLE
        self._lock = threading.Lock()
        self._observer: Optional[Observer] = None
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="jdd-watch")
        self._pending: Set[Future] = set()

    @property
    def state(self) -> WatchState:
        return self._state

    def subscribe(self) -> None:
        """Start watching the root recursively.

        Raises:
            SubscriptionError: If the driver was already used or the root
                cannot be watched
        """
        with self._lock:
            if self._state is not WatchState.IDLE:
                raise SubscriptionError(
                    f"Cannot subscribe from state {self._state.value}; create a new driver"
                )

            observer = Observer()
            try:
                observer.schedule(_CreationHandler(self), self.root, recursive=True)
                observer.start()
            except OSError as e:
                raise SubscriptionError(f"Cannot watch {self.root}: {e}") from e

            self._observer = observer
            self._state = WatchState.SUBSCRIBED

    def is_alive(self) -> bool:
        """Return True while the subscription delivers events."""
        return (
            self._state is WatchState.SUBSCRIBED
            and self._observer is not None
            and self._observer.is_alive()
        )

    def submit(self, path: str) -> Optional[Future]:
        """Schedule classification of path after the settle delay.

        Returns:
            The scheduled task, or None once the driver is draining
        """
        with self._lock:
            if self._state is not WatchState.SUBSCRIBED or self.stop_event.is_set():
                return None
            future = self._executor.submit(self._handle, path)
            self._pending.add(future)

        future.add_done_callback(self._discard)
        return future

    def _discard(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def _handle(self, path: str) -> None:
        if self.config.delay > 0 and self.stop_event.wait(self.config.delay):
            return
        if self.stop_event.is_set():
            return

        # Gone already: relocated by the scan, or removed by its creator
        if os.path.islink(path) or not os.path.isfile(path):
            return

        try:
            outcome = process_file(path, self.root, self.config, self.exclusions)
        except Exception as e:
            self._error(WatchStreamError(f"Error handling {path}: {e}", path=path))
            return

        if self.report is not None:
            try:
                self.report(outcome)
            except Exception as e:
                self._error(WatchStreamError(f"Error reporting {path}: {e}", path=path))

    def _error(self, error: WatchStreamError) -> None:
        if self.on_error is not None:
            self.on_error(error)

    def join_pending(self, timeout: Optional[float] = None) -> bool:
        """Wait for scheduled tasks to finish.

        Returns:
            True if nothing is left pending
        """
        with self._lock:
            pending = set(self._pending)
        if not pending:
            return True
        _done, not_done = wait(pending, timeout=timeout)
        return not not_done

    def close(self) -> None:
        """Release the subscription and drain running tasks.

        Tasks that have not started are cancelled, running ones finish.
        Calling close more than once is harmless.
        """
        with self._lock:
            if self._state in (WatchState.DRAINING, WatchState.CLOSED):
                return
            self._state = WatchState.DRAINING
            observer = self._observer

        self.stop_event.set()

        if observer is not None:
            observer.stop()
            if observer.is_alive():
                observer.join(timeout=Limits.OBSERVER_JOIN_TIMEOUT)

        self._executor.shutdown(wait=True, cancel_futures=True)

        with self._lock:
            self._observer = None
            self._state = WatchState.CLOSED
