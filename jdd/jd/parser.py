"""
Johnny Decimal name parsing.

A filename is a Johnny Decimal file when it starts with ``AA.BB``, optionally
followed by ``+token``:

    15.23 Report.pdf      -> area 10-19, category 15, id 15.23
    15.23+JEM Notes.txt   -> same, with extension "+JEM"

Anything after the prefix is ignored.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from jdd.core.constants import ErrorCode
from jdd.core.exceptions import JDDError

# ASCII digits only; \d would also accept other Unicode decimals
JOHNNY_DECIMAL_PATTERN = re.compile(r"^([0-9]{2})\.([0-9]{2})(\+\S+)?")


class ParseError(JDDError):
    """A name matched the prefix pattern but could not be decoded."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        super().__init__(message, error_code)


@dataclass(frozen=True)
class JohnnyDecimalID:
    """Parsed Johnny Decimal identifier."""

    area: str  # "10-19"
    category: str  # "15"
    id: str  # "15.23"
    extension: str = ""  # "+JEM" or ""

    def folder_names(self) -> List[str]:
        """Folder prefixes from the root down to the destination folder."""
        names = [self.area, self.category, self.id]
        if self.extension:
            names.append(self.id + self.extension)
        return names

    def __str__(self) -> str:
        text = f"Area: {self.area}, Category: {self.category}, ID: {self.id}"
        if self.extension:
            text = f"{text}, Extension: {self.extension}"
        return text


def matches(filename: str) -> bool:
    """Return True if filename starts with a Johnny Decimal prefix."""
    return JOHNNY_DECIMAL_PATTERN.match(filename) is not None


def parse(filename: str) -> Optional[JohnnyDecimalID]:
    """Parse the Johnny Decimal prefix of a filename.

    Args:
        filename: Base name of the file (no directory part)

    Returns:
        Parsed identifier, or None when the name has no JD prefix

    Raises:
        ParseError: If the matched prefix cannot be decoded
    """
    match = JOHNNY_DECIMAL_PATTERN.match(filename)
    if match is None:
        return None

    category, subcode, extension = match.group(1), match.group(2), match.group(3) or ""

    try:
        first_digit = int(category[0])
    except ValueError:
        raise ParseError(f"Invalid category {category!r} in {filename!r}")

    area_start = first_digit * 10
    area = f"{area_start:02d}-{area_start + 9:02d}"

    return JohnnyDecimalID(
        area=area,
        category=category,
        id=f"{category}.{subcode}",
        extension=extension,
    )
