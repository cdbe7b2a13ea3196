#!/usr/bin/env python3
r"""Glob pattern matching for exclusion rules.

This module provides the exclusion filter for JDD:
- Glob compilation with "/" as the path separator
- "*" and "?" never cross "/", "**" does
- Character classes ([abc], [a-z], [!abc]) and alternatives ({a,b})
- Validation at compile time (bad patterns fail startup)
- Paths matched relative to the watched root

Example:
    >>> exclusions = ExclusionSet.compile(["**/.git/**", "99.*"], "/home/me/docs")
    >>> exclusions.is_excluded("/home/me/docs/99.01 Scratch.txt")
    True
"""

import os
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Pattern

from jdd.core.constants import ErrorCode
from jdd.core.exceptions import JDDError


class PatternCompileError(JDDError):
    """An exclude pattern is not a valid glob."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid exclude pattern {pattern!r}: {reason}", ErrorCode.INVALID_INPUT)


def translate_glob(pattern: str) -> str:
    """Translate a glob pattern to an anchored regular expression.

    Args:
        pattern: Glob pattern using "/" as separator

    Returns:
        Regular expression source matching whole paths

    Raises:
        PatternCompileError: If the pattern is malformed
    """
    parts = []
    depth = 0
    i = 0
    n = len(pattern)

    while i < n:
        char = pattern[i]

        if char == "\\":
            if i + 1 >= n:
                raise PatternCompileError(pattern, "trailing escape character")
            parts.append(re.escape(pattern[i + 1]))
            i += 2
            continue

        if char == "*":
            if i + 1 < n and pattern[i + 1] == "*":
                while i < n and pattern[i] == "*":
                    i += 1
                # "**/" may also match zero directories
                if i < n and pattern[i] == "/":
                    parts.append("(?:.*/)?")
                    i += 1
                else:
                    parts.append(".*")
                continue
            parts.append("[^/]*")

        elif char == "?":
            parts.append("[^/]")

        elif char == "[":
            class_source, i = _translate_class(pattern, i)
            parts.append(class_source)
            continue

        elif char == "{":
            depth += 1
            parts.append("(?:")

        elif char == "}":
            if depth == 0:
                raise PatternCompileError(pattern, "unmatched '}'")
            depth -= 1
            parts.append(")")

        elif char == "," and depth > 0:
            parts.append("|")

        else:
            parts.append(re.escape(char))

        i += 1

    if depth:
        raise PatternCompileError(pattern, "unclosed '{'")

    return "^" + "".join(parts) + "$"


def _translate_class(pattern: str, start: int):
    """Translate the character class opening at pattern[start].

    Returns:
        Tuple of (regex source, index after the closing bracket)
    """
    i = start + 1
    n = len(pattern)
    negate = False

    if i < n and pattern[i] in "!^":
        negate = True
        i += 1

    members: List[str] = []
    while i < n and pattern[i] != "]":
        char = pattern[i]
        if char == "\\":
            if i + 1 >= n:
                raise PatternCompileError(pattern, "trailing escape character")
            members.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        if char == "-" and members and i + 1 < n and pattern[i + 1] != "]":
            members.append("-")
        else:
            members.append(re.escape(char))
        i += 1

    if i >= n:
        raise PatternCompileError(pattern, "unclosed '['")
    if not members:
        raise PatternCompileError(pattern, "empty character class")

    body = "".join(members)
    source = f"[^/{body}]" if negate else f"[{body}]"
    return source, i + 1


@dataclass
class PatternEntry:
    """A single compiled glob pattern."""

    pattern: str
    compiled: Pattern
    case_sensitive: bool = True


class PatternMatcher:
    """Ordered set of glob patterns with OR logic."""

    def __init__(self, case_sensitive: bool = True):
        """Initialize pattern matcher.

        Args:
            case_sensitive: Whether patterns are case-sensitive
        """
        self._patterns: List[PatternEntry] = []
        self._case_sensitive = case_sensitive

    def add_glob_pattern(self, pattern: str, case_sensitive: Optional[bool] = None) -> None:
        """Compile and add a glob pattern.

        Args:
            pattern: Glob pattern (e.g., "*.tmp", "**/.git/**")
            case_sensitive: Override default case sensitivity

        Raises:
            PatternCompileError: If the pattern is invalid
        """
        is_case_sensitive = case_sensitive if case_sensitive is not None else self._case_sensitive

        source = translate_glob(pattern)
        flags = re.DOTALL if is_case_sensitive else re.DOTALL | re.IGNORECASE

        try:
            compiled = re.compile(source, flags)
        except re.error as e:
            raise PatternCompileError(pattern, str(e))

        self._patterns.append(
            PatternEntry(pattern=pattern, compiled=compiled, case_sensitive=is_case_sensitive)
        )

    def matches(self, path: str) -> bool:
        """Check if a "/"-separated path matches any pattern."""
        return any(entry.compiled.match(path) for entry in self._patterns)

    def get_matching_patterns(self, path: str) -> List[str]:
        """Get all patterns that match the path."""
        return [entry.pattern for entry in self._patterns if entry.compiled.match(path)]

    def get_patterns(self) -> List[PatternEntry]:
        """Get all registered patterns."""
        return self._patterns.copy()

    def __len__(self) -> int:
        """Return number of patterns."""
        return len(self._patterns)

    def __bool__(self) -> bool:
        """Return True if any patterns are registered."""
        return bool(self._patterns)


class ExclusionSet:
    """Compiled exclude patterns rooted at the watched directory.

    Patterns are matched against the path relative to the root, with "/" as
    separator. Paths outside the root are matched in their absolute form.
    """

    def __init__(self, root: str, matcher: PatternMatcher):
        self.root = os.path.abspath(root)
        self._matcher = matcher

    @classmethod
    def compile(cls, patterns: Iterable[str], root: str) -> "ExclusionSet":
        """Compile patterns for root.

        Args:
            patterns: Glob patterns
            root: Watched root directory

        Returns:
            Compiled exclusion set

        Raises:
            PatternCompileError: On the first invalid pattern
        """
        matcher = PatternMatcher()
        for pattern in patterns:
            matcher.add_glob_pattern(pattern)
        return cls(root, matcher)

    def relative_path(self, path: str) -> str:
        """Return the "/"-normalized form of path that patterns are matched against."""
        absolute = os.path.abspath(path)
        try:
            relative = os.path.relpath(absolute, self.root)
        except ValueError:
            # Different drive on Windows
            relative = absolute
        else:
            if relative == os.pardir or relative.startswith(os.pardir + os.sep):
                relative = absolute

        return relative.replace(os.sep, "/").replace("\\", "/")

    def is_excluded(self, path: str) -> bool:
        """Return True if path matches any exclude pattern."""
        if not self._matcher:
            return False
        return self._matcher.matches(self.relative_path(path))

    def matching_patterns(self, path: str) -> List[str]:
        """Return the patterns that exclude path (for diagnostics)."""
        return self._matcher.get_matching_patterns(self.relative_path(path))

    @property
    def patterns(self) -> List[str]:
        """Source patterns in compile order."""
        return [entry.pattern for entry in self._matcher.get_patterns()]

    def __len__(self) -> int:
        return len(self._matcher)
