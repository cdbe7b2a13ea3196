"""Johnny Decimal naming and folder layout.

- parse: filename -> JohnnyDecimalID (or None)
- ensure_folders: JohnnyDecimalID + root -> destination folder
"""

from .folders import FolderResolutionError, ensure_folders, find_prefixed_folder
from .parser import JOHNNY_DECIMAL_PATTERN, JohnnyDecimalID, ParseError, matches, parse

__all__ = [
    "JOHNNY_DECIMAL_PATTERN",
    "JohnnyDecimalID",
    "ParseError",
    "matches",
    "parse",
    "FolderResolutionError",
    "ensure_folders",
    "find_prefixed_folder",
]
