"""
Folder resolution for Johnny Decimal identifiers.

Ensures the folder chain for an identifier exists under a root:

    root/
        10-19 Finance/          <- existing folder reused (starts with "10-19")
            15/                 <- created
                15.23/          <- created
                    15.23+JEM/  <- created when the name has an extension

An existing directory is reused when its name starts with the expected
prefix, so human-decorated names survive. When several entries match, the
first one in directory-listing order is used.
"""

import os
from typing import Optional

from jdd.core.constants import ErrorCode, Limits
from jdd.core.exceptions import JDDError
from jdd.jd.parser import JohnnyDecimalID

_LEVELS = ("area", "category", "id", "extension")


class FolderResolutionError(JDDError):
    """Listing or creating a folder in the chain failed."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.IO_ERROR):
        super().__init__(message, error_code)


def find_prefixed_folder(parent: str, prefix: str) -> Optional[str]:
    """Find the first directory in parent whose name starts with prefix.

    Args:
        parent: Directory to list
        prefix: Expected name prefix

    Returns:
        Full path of the matching directory, or None

    Raises:
        OSError: If parent cannot be listed
    """
    with os.scandir(parent) as entries:
        for entry in entries:
            if entry.name.startswith(prefix) and entry.is_dir():
                return entry.path
    return None


def find_or_create_prefixed_folder(parent: str, prefix: str) -> str:
    """Return the folder for prefix under parent, creating it if missing.

    A concurrent creator winning the race is not an error.

    Raises:
        OSError: If listing or creation fails
    """
    existing = find_prefixed_folder(parent, prefix)
    if existing is not None:
        return existing

    path = os.path.join(parent, prefix)
    try:
        os.mkdir(path, Limits.FOLDER_MODE)
    except FileExistsError:
        pass
    return path


def _planned_folder(parent: str, prefix: str) -> str:
    # Dry-run variant: reuse what exists, never create
    try:
        existing = find_prefixed_folder(parent, prefix)
    except (FileNotFoundError, NotADirectoryError):
        existing = None
    return existing if existing is not None else os.path.join(parent, prefix)


def ensure_folders(jd_id: JohnnyDecimalID, root: str, create: bool = True) -> str:
    """Ensure the folder chain for jd_id exists under root.

    Args:
        jd_id: Parsed Johnny Decimal identifier
        root: Watched root directory
        create: When False, compute the destination without creating anything

    Returns:
        Path of the destination folder

    Raises:
        FolderResolutionError: If a level cannot be listed or created
    """
    current = root
    for level, prefix in zip(_LEVELS, jd_id.folder_names()):
        try:
            if create:
                current = find_or_create_prefixed_folder(current, prefix)
            else:
                current = _planned_folder(current, prefix)
        except OSError as e:
            code = ErrorCode.PERMISSION_DENIED if isinstance(e, PermissionError) else ErrorCode.IO_ERROR
            raise FolderResolutionError(
                f"Could not ensure {level} folder {prefix!r}: {e}", code
            ) from e

    return current
