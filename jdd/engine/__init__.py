"""JDD classification engine.

This package moves Johnny Decimal files into place:
- process_file: classify and relocate one path
- scan: one pass over the existing tree
- WatchDriver: recursive creation events with a settle delay
- start / stop: session lifecycle (subscribe, scan, watch)

The engine reports Outcomes through callbacks and never logs on its own.
"""

from .classifier import process_file
from .config import DaemonConfig
from .outcome import Outcome, OutcomeKind
from .scanner import ScanError, ScanReport, scan
from .session import RootError, WatchSession, start, stop
from .watcher import SubscriptionError, WatchDriver, WatchState, WatchStreamError

__all__ = [
    "DaemonConfig",
    "Outcome",
    "OutcomeKind",
    "process_file",
    "ScanError",
    "ScanReport",
    "scan",
    "SubscriptionError",
    "WatchDriver",
    "WatchState",
    "WatchStreamError",
    "RootError",
    "WatchSession",
    "start",
    "stop",
]
