"""Classification outcomes.

Every file handed to the classifier produces exactly one Outcome. The kinds
form a closed set so reporters can handle each one explicitly.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class OutcomeKind(Enum):
    """What happened to a file."""

    EXCLUDED = "excluded"
    NOT_JD_FILE = "not_jd_file"
    MOVED = "moved"
    ALREADY_IN_PLACE = "already_in_place"
    FAILED = "failed"


@dataclass(frozen=True)
class Outcome:
    """Result of classifying one path."""

    kind: OutcomeKind
    source: str
    destination: Optional[str] = None
    error: Optional[BaseException] = None
    dry_run: bool = False

    @classmethod
    def excluded(cls, source: str) -> "Outcome":
        return cls(OutcomeKind.EXCLUDED, source)

    @classmethod
    def not_jd_file(cls, source: str) -> "Outcome":
        return cls(OutcomeKind.NOT_JD_FILE, source)

    @classmethod
    def moved(cls, source: str, destination: str, dry_run: bool = False) -> "Outcome":
        return cls(OutcomeKind.MOVED, source, destination, dry_run=dry_run)

    @classmethod
    def already_in_place(cls, source: str) -> "Outcome":
        return cls(OutcomeKind.ALREADY_IN_PLACE, source, source)

    @classmethod
    def failed(cls, source: str, error: BaseException, destination: Optional[str] = None) -> "Outcome":
        return cls(OutcomeKind.FAILED, source, destination, error=error)

    def describe(self) -> str:
        """One-line message for logs and notifications."""
        source = _pretty(self.source)
        if self.kind is OutcomeKind.MOVED:
            destination = _pretty(self.destination)
            if self.dry_run:
                return f"[dry run] Would move {source} -> {destination}"
            return f"Moved {source} -> {destination}"
        if self.kind is OutcomeKind.FAILED:
            return f"Error moving {source}: {self.error}"
        if self.kind is OutcomeKind.ALREADY_IN_PLACE:
            return f"Already in place: {source}"
        if self.kind is OutcomeKind.EXCLUDED:
            return f"Excluded: {source}"
        return f"Not a Johnny Decimal file: {source}"


def _pretty(path: Optional[str]) -> str:
    return (path or "").replace("\\", "/")


# Callback types for host integration
OutcomeCallback = Callable[[Outcome], None]
ErrorCallback = Callable[[BaseException], None]
