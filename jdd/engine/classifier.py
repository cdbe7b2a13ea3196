"""
File classification and relocation.

process_file decides what to do with one path and does it:

1. Excluded by a pattern          -> EXCLUDED
2. No Johnny Decimal prefix       -> NOT_JD_FILE
3. Destination folders resolved   (FAILED on I/O error)
4. Already at the destination     -> ALREADY_IN_PLACE
5. Another file at the target     -> FAILED (FileExistsError), dry run too
6. Dry run                        -> MOVED (dry_run=True), nothing touched
7. Moved into the destination     -> MOVED, or FAILED with the OS error

Running it again on a file it already moved is a no-op, which makes scan and
watch safe to overlap.
"""

import errno
import os

from jdd.engine.config import DaemonConfig
from jdd.engine.outcome import Outcome
from jdd.jd.folders import FolderResolutionError, ensure_folders
from jdd.jd.parser import ParseError, parse
from jdd.rules.patterns import ExclusionSet

# link() errors meaning "no hard links here" rather than "cannot move"
_NO_HARDLINK_ERRNOS = {errno.EPERM, errno.EOPNOTSUPP, errno.ENOTSUP, errno.EMLINK}


def _normalize(path: str) -> str:
    return os.path.normcase(os.path.normpath(os.path.abspath(path)))


def _exists_error(target: str) -> FileExistsError:
    return FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), target)


def move_exclusive(source: str, target: str) -> None:
    """Move source to target without ever replacing an existing target.

    Hard-links the file to its new name, which fails atomically if the name
    is taken, then unlinks the old name. Filesystems without hard links fall
    back to a check followed by rename.

    Raises:
        FileExistsError: If target exists
        OSError: If the move fails
    """
    try:
        os.link(source, target, follow_symlinks=False)
    except FileExistsError:
        raise
    except (AttributeError, NotImplementedError):
        _check_then_rename(source, target)
        return
    except OSError as e:
        if e.errno not in _NO_HARDLINK_ERRNOS:
            raise
        _check_then_rename(source, target)
        return

    try:
        os.unlink(source)
    except OSError:
        os.unlink(target)
        raise


def _check_then_rename(source: str, target: str) -> None:
    if os.path.lexists(target):
        raise _exists_error(target)
    os.rename(source, target)


def process_file(
    path: str, root: str, config: DaemonConfig, exclusions: ExclusionSet
) -> Outcome:
    """Classify path and move it into its Johnny Decimal folder.

    Args:
        path: File to classify
        root: Absolute watched root
        config: Daemon configuration (dry_run is honoured)
        exclusions: Compiled exclude patterns

    Returns:
        Outcome describing what happened
    """
    if exclusions.is_excluded(path):
        return Outcome.excluded(path)

    filename = os.path.basename(path)
    try:
        jd_id = parse(filename)
    except ParseError as e:
        return Outcome.failed(path, e)

    if jd_id is None:
        return Outcome.not_jd_file(path)

    if not os.path.lexists(path):
        # Removed or relocated since it was observed
        return Outcome.failed(
            path, FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)
        )

    try:
        destination_dir = ensure_folders(jd_id, root, create=not config.dry_run)
    except FolderResolutionError as e:
        return Outcome.failed(path, e)

    target = os.path.join(destination_dir, filename)

    if _normalize(target) == _normalize(path):
        return Outcome.already_in_place(path)

    if os.path.lexists(target):
        return Outcome.failed(path, _exists_error(target), target)

    if config.dry_run:
        return Outcome.moved(path, target, dry_run=True)

    try:
        move_exclusive(path, target)
    except OSError as e:
        return Outcome.failed(path, e, target)

    return Outcome.moved(path, target)
