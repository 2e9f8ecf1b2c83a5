"""
File filtering for PR-Pilot.

Drops files matching exclude patterns and caps how many files go on
to review. Pattern lists are plain configuration data; nothing here
knows which paths a project wants excluded.

Pattern semantics:
- ``**`` matches any run of characters, ``/`` included; ``**/`` may
  also match no directory at all
- ``*`` matches within a single path segment
- a pattern without wildcards matches the path itself or anything
  below it as a directory

Wildcard patterns match a trailing run of whole path segments, so
``*.lock`` excludes ``yarn.lock`` as well as ``web/yarn.lock``.
"""

import re
from typing import List, Optional, Pattern, Sequence, Tuple

from .diff_parser import FileDiff
from .utils.logger import get_logger

DEFAULT_MAX_FILES = 20

_WILDCARD_TOKENS = re.compile(r'(\*\*/|\*\*|\*)')

logger = get_logger(__name__)


def compile_pattern(pattern: str) -> Optional[Pattern]:
    """
    Compile a glob-like exclude pattern.

    Args:
        pattern: Pattern text

    Returns:
        Compiled expression, or None for a literal pattern without wildcards
    """
    if '*' not in pattern:
        return None

    parts = []
    for token in _WILDCARD_TOKENS.split(pattern):
        if token == '**/':
            parts.append('(?:.*/)?')
        elif token == '**':
            parts.append('.*')
        elif token == '*':
            parts.append('[^/]*')
        else:
            parts.append(re.escape(token))

    return re.compile('(?:^|/)' + ''.join(parts) + '$')


class PatternFilter:
    """
    Excludes files whose path matches any configured pattern.

    Patterns are compiled once and tried in the order given; the first
    match wins.
    """

    def __init__(self, patterns: Optional[Sequence[str]] = None):
        self.patterns: List[str] = list(patterns or [])
        self._compiled: List[Tuple[str, Optional[Pattern]]] = [
            (pattern, compile_pattern(pattern)) for pattern in self.patterns
        ]
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")

    def matching_pattern(self, path: str) -> Optional[str]:
        """
        Find the first pattern matching a path.

        Args:
            path: File path to check

        Returns:
            The matching pattern, or None if no pattern matches
        """
        for pattern, regex in self._compiled:
            if regex is None:
                if path == pattern or path.startswith(pattern + '/'):
                    return pattern
            elif regex.search(path):
                return pattern
        return None

    def matches(self, path: str) -> bool:
        return self.matching_pattern(path) is not None

    def filter(self, file_diffs: List[FileDiff]) -> List[FileDiff]:
        """
        Drop excluded files, keeping the order of the rest.

        Args:
            file_diffs: Parsed file diffs

        Returns:
            The input list itself when there are no patterns, otherwise
            a new list of the files that matched nothing
        """
        if not self.patterns:
            return file_diffs

        kept = []
        for file_diff in file_diffs:
            pattern = self.matching_pattern(file_diff.path)
            if pattern is None:
                kept.append(file_diff)
            else:
                self.logger.debug(
                    f"Excluding file: {file_diff.path}",
                    extra={"file_path": file_diff.path, "pattern": pattern}
                )
        return kept


def filter_files(file_diffs: List[FileDiff], exclude_patterns: Optional[Sequence[str]] = None) -> List[FileDiff]:
    """Filter file diffs with a one-off PatternFilter."""
    return PatternFilter(exclude_patterns).filter(file_diffs)


def limit_files(file_diffs: List[FileDiff], max_files: Optional[int] = DEFAULT_MAX_FILES) -> List[FileDiff]:
    """
    Keep the first ``max_files`` files.

    A limit of None, zero or less disables truncation.

    Args:
        file_diffs: File diffs in review order
        max_files: Maximum number of files to keep

    Returns:
        The leading files, order preserved
    """
    if not max_files or max_files <= 0:
        return file_diffs

    if len(file_diffs) > max_files:
        logger.info(
            f"Limiting review to {max_files} of {len(file_diffs)} files",
            extra={"max_files": max_files, "total_files": len(file_diffs)}
        )
    return file_diffs[:max_files]
