"""Background process support (POSIX).

daemonize() detaches the current process with the classic double fork and
records the daemon's PID in a file. The original process gets False back and
is expected to exit; the daemon gets True and carries on.
"""

import errno
import os
import sys
from pathlib import Path
from typing import Optional, Union

from jdd.core.constants import ErrorCode, Limits
from jdd.core.exceptions import JDDError


class DaemonError(JDDError):
    """The process could not be daemonized."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.DEPENDENCY_ERROR):
        super().__init__(message, error_code)


def read_pid_file(pid_file: Union[str, Path]) -> Optional[int]:
    """Return the PID stored in pid_file, or None if missing or unreadable."""
    try:
        content = Path(pid_file).read_text().strip()
    except FileNotFoundError:
        return None
    try:
        return int(content)
    except ValueError:
        return None


def is_process_alive(pid: int) -> bool:
    """Return True if a process with pid exists."""
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists but belongs to another user
        return True
    return True


def write_pid_file(pid_file: Union[str, Path], pid: Optional[int] = None) -> None:
    """Write pid (default: current process) to pid_file.

    Raises:
        DaemonError: If another live process owns the PID file
    """
    path = Path(pid_file)
    existing = read_pid_file(path)
    if existing is not None and existing != os.getpid() and is_process_alive(existing):
        raise DaemonError(
            f"Daemon already running with PID {existing} ({path})", ErrorCode.CONFLICT
        )

    fd = os.open(str(path), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, Limits.PID_FILE_MODE)
    with os.fdopen(fd, "w") as f:
        f.write(f"{pid if pid is not None else os.getpid()}\n")


def remove_pid_file(pid_file: Union[str, Path]) -> None:
    """Remove pid_file; a missing file is not an error."""
    try:
        os.remove(pid_file)
    except FileNotFoundError:
        pass


def _redirect_stdio() -> None:
    sys.stdout.flush()
    sys.stderr.flush()
    with open(os.devnull, "rb") as devnull_in, open(os.devnull, "ab") as devnull_out:
        os.dup2(devnull_in.fileno(), sys.stdin.fileno())
        os.dup2(devnull_out.fileno(), sys.stdout.fileno())
        os.dup2(devnull_out.fileno(), sys.stderr.fileno())


def daemonize(
    pid_file: Union[str, Path],
    work_dir: Union[str, Path] = ".",
    umask: int = Limits.DAEMON_UMASK,
) -> bool:
    """Detach into the background.

    Args:
        pid_file: Where to record the daemon's PID (relative to work_dir)
        work_dir: Working directory of the daemon
        umask: File creation mask of the daemon

    Returns:
        False in the original process, True in the daemon

    Raises:
        DaemonError: If forking is unsupported or fails, or a daemon is
            already running
    """
    if not hasattr(os, "fork"):
        raise DaemonError("Daemon mode is not supported on this platform")

    work_dir = Path(work_dir).resolve()
    pid_path = Path(pid_file)
    if not pid_path.is_absolute():
        pid_path = work_dir / pid_path

    existing = read_pid_file(pid_path)
    if existing is not None and is_process_alive(existing):
        raise DaemonError(
            f"Daemon already running with PID {existing} ({pid_path})", ErrorCode.CONFLICT
        )

    try:
        if os.fork() > 0:
            return False
    except OSError as e:
        raise DaemonError(f"First fork failed: {e}")

    os.setsid()

    try:
        if os.fork() > 0:
            # Intermediate child: never return into the caller's code
            os._exit(0)
    except OSError as e:
        sys.stderr.write(f"Second fork failed: {e}\n")
        os._exit(errno.EAGAIN)

    os.chdir(work_dir)
    os.umask(umask)
    _redirect_stdio()
    write_pid_file(pid_path)
    return True
