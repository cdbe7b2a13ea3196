"""JDD Rules System.

This module provides the exclusion filter:
- PatternMatcher: ordered glob patterns with OR logic
- ExclusionSet: patterns rooted at the watched directory

Excluded paths are never moved, whatever their name.
"""

from .patterns import ExclusionSet, PatternCompileError, PatternEntry, PatternMatcher, translate_glob

__all__ = [
    "ExclusionSet",
    "PatternCompileError",
    "PatternEntry",
    "PatternMatcher",
    "translate_glob",
]
