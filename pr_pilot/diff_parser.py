"""
Diff parser for PR-Pilot.

This module turns raw unified-diff text, as returned by a source-control
host's diff endpoint, into structured, line-addressable records.

The module provides:
- FileDiff and Hunk dataclasses for parsed diff content
- parse_hunk_header() for ``@@ -a,b +c,d @@`` boundary lines
- FileDiffBuilder for accumulating one file's header and hunks
- DiffParser, a single-pass scanner over the whole diff text
- validate_diff() for a cheap structural pre-check

Example:
    parser = DiffParser()
    file_diffs = parser.parse(diff_text)
    for file_diff in file_diffs:
        print(file_diff.path, file_diff.status, file_diff.additions)
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .utils.exceptions import MalformedHunkHeaderError
from .utils.logger import get_logger

# Line prefixes recognised by the scanner
FILE_HEADER_PREFIX = "diff --git"
INDEX_PREFIX = "index "
BINARY_PREFIX = "Binary files"
NEW_FILE_PREFIX = "new file mode"
DELETED_FILE_PREFIX = "deleted file mode"
RENAME_FROM_PREFIX = "rename from "
RENAME_TO_PREFIX = "rename to "
HUNK_HEADER_PREFIX = "@@"
NO_NEWLINE_PREFIX = "\\"

# Regular expression patterns
FILE_HEADER_PATTERN = re.compile(r'diff --git a/(.+) b/(.+)')
HUNK_HEADER_PATTERN = re.compile(r'@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@(.*)')


class FileStatus(str, Enum):
    """Classification of a changed file."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    BINARY = "binary"

    def __str__(self) -> str:
        return self.value


class LineType(Enum):
    """Classification of a single hunk body line."""

    ADDITION = "addition"
    DELETION = "deletion"
    CONTEXT = "context"
    NO_NEWLINE = "no_newline"


def classify_line(line: str) -> LineType:
    """
    Classify a hunk body line by its leading marker.

    ``+++`` and ``---`` lines are file-summary markers, never changes,
    even when they appear inside a hunk body.

    Args:
        line: Raw hunk body line

    Returns:
        LineType for the line
    """
    if line.startswith('+') and not line.startswith('+++'):
        return LineType.ADDITION
    if line.startswith('-') and not line.startswith('---'):
        return LineType.DELETION
    if line.startswith(NO_NEWLINE_PREFIX):
        return LineType.NO_NEWLINE
    return LineType.CONTEXT


# ==============================
# Data Classes
# ==============================

@dataclass(frozen=True)
class HunkHeader:
    """Fields parsed from a ``@@`` hunk boundary line."""
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    context: str = ""


@dataclass
class Hunk:
    """
    One contiguous change region within a file.

    Attributes:
        old_start: First line of the region in the old file (1-based)
        old_count: Number of old-file lines covered
        new_start: First line of the region in the new file (1-based)
        new_count: Number of new-file lines covered
        lines: Every body line, verbatim and in order
        content: Header line followed by body lines, newline-terminated
        additions: Number of added lines in this hunk
        deletions: Number of removed lines in this hunk
        context: Trailing text of the header line (e.g. enclosing function)
    """
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: List[str] = field(default_factory=list)
    content: str = ""
    additions: int = 0
    deletions: int = 0
    context: str = ""

    @property
    def header(self) -> str:
        """Normalized ``@@`` header for this hunk."""
        return f"@@ -{self.old_start},{self.old_count} +{self.new_start},{self.new_count} @@"


@dataclass
class FileDiff:
    """
    Represents a single file's diff information.

    Attributes:
        path: Canonical path (the new path, or the removed file's path)
        old_path: Path on the ``a/`` side or from ``rename from``
        new_path: Path on the ``b/`` side or from ``rename to``
        status: Change classification
        hunks: Hunks in order of appearance
        additions: Added lines across all hunks
        deletions: Removed lines across all hunks
        binary: Whether the host reported the content as binary
        raw_diff: Raw header text, kept for debugging
        index: Verbatim ``index`` line, if present
    """
    path: str
    old_path: str
    new_path: str
    status: FileStatus = FileStatus.MODIFIED
    hunks: List[Hunk] = field(default_factory=list)
    additions: int = 0
    deletions: int = 0
    binary: bool = False
    raw_diff: str = ""
    index: Optional[str] = None


@dataclass
class ValidationResult:
    """Outcome of validate_diff()."""
    valid: bool
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "error": self.error}


# ==============================
# Hunk header parsing
# ==============================

def parse_hunk_header(line: str, line_index: int = 0) -> HunkHeader:
    """
    Parse a hunk boundary line.

    Counts default to 1 when the ``,count`` suffix is omitted, which is
    how the format spells a single-line range.

    Args:
        line: The ``@@`` line
        line_index: Zero-based position of the line in the diff, for errors

    Returns:
        HunkHeader with start/count pairs and trimmed trailing context

    Raises:
        MalformedHunkHeaderError: If the line does not match the expected shape
    """
    match = HUNK_HEADER_PATTERN.match(line)
    if not match:
        raise MalformedHunkHeaderError(line_index, line)

    old_start, old_count, new_start, new_count, context = match.groups()
    return HunkHeader(
        old_start=int(old_start),
        old_count=int(old_count) if old_count is not None else 1,
        new_start=int(new_start),
        new_count=int(new_count) if new_count is not None else 1,
        context=context.strip() if context else ""
    )


# ==============================
# Builder
# ==============================

class FileDiffBuilder:
    """
    Accumulates one file's header metadata and hunks.

    The builder owns all mutable per-file state during a parse; build()
    returns the finished FileDiff.
    """

    def __init__(self, header_line: str):
        """
        Start a new file from its ``diff --git`` line.

        Args:
            header_line: The file-start line
        """
        match = FILE_HEADER_PATTERN.match(header_line)
        self.old_path = match.group(1) if match else ""
        self.new_path = match.group(2) if match else ""
        self.status = FileStatus.MODIFIED
        self.binary = False
        self.index: Optional[str] = None
        self.additions = 0
        self.deletions = 0
        self._raw_lines = [header_line]
        self._hunks: List[Hunk] = []
        self._current_hunk: Optional[Hunk] = None

    @property
    def path(self) -> str:
        return self.new_path or self.old_path

    def add_header_line(self, line: str) -> None:
        """Record a metadata line in the raw header text."""
        self._raw_lines.append(line)

    def set_index(self, line: str) -> None:
        self.index = line

    def set_status(self, status: FileStatus) -> None:
        self.status = status

    def mark_binary(self) -> None:
        self.binary = True
        self.status = FileStatus.BINARY

    def rename_from(self, path: str) -> None:
        self.status = FileStatus.RENAMED
        self.old_path = path

    def rename_to(self, path: str) -> None:
        self.status = FileStatus.RENAMED
        self.new_path = path

    def start_hunk(self, header: HunkHeader, line: str) -> None:
        """
        Close the open hunk, if any, and open a new one.

        Args:
            header: Parsed header fields
            line: The raw ``@@`` line
        """
        self._close_hunk()
        self._current_hunk = Hunk(
            old_start=header.old_start,
            old_count=header.old_count,
            new_start=header.new_start,
            new_count=header.new_count,
            content=line + "\n",
            context=header.context
        )

    def add_hunk_line(self, line: str) -> None:
        """Append a body line to the open hunk and update the counters."""
        hunk = self._current_hunk
        if hunk is None:
            raise RuntimeError("add_hunk_line() called with no open hunk")

        hunk.lines.append(line)
        hunk.content += line + "\n"

        line_type = classify_line(line)
        if line_type is LineType.ADDITION:
            hunk.additions += 1
            self.additions += 1
        elif line_type is LineType.DELETION:
            hunk.deletions += 1
            self.deletions += 1

    def _close_hunk(self) -> None:
        if self._current_hunk is not None:
            self._hunks.append(self._current_hunk)
            self._current_hunk = None

    def build(self) -> FileDiff:
        """
        Finish the file.

        Returns:
            The completed FileDiff
        """
        self._close_hunk()

        status = self.status
        if status is FileStatus.RENAMED and self.old_path == self.new_path:
            # Rename lines naming the same path carry no rename
            status = FileStatus.MODIFIED

        return FileDiff(
            path=self.path,
            old_path=self.old_path,
            new_path=self.new_path,
            status=status,
            hunks=[] if self.binary else list(self._hunks),
            additions=0 if self.binary else self.additions,
            deletions=0 if self.binary else self.deletions,
            binary=self.binary,
            raw_diff="\n".join(self._raw_lines) + "\n",
            index=self.index
        )


# ==============================
# Main Parser Class
# ==============================

class ScanState(Enum):
    """Position of the scanner relative to the file/hunk structure."""

    OUTSIDE_FILE = "outside_file"
    IN_HEADER = "in_header"
    IN_HUNK = "in_hunk"


class DiffParser:
    """
    Parser for unified diff text.

    Scans the text once, line by line. Lines before the first
    ``diff --git`` line are ignored; header metadata is only interpreted
    before a file's first hunk; inside a hunk every line other than a new
    ``@@`` or ``diff --git`` line is hunk content.

    Example:
        parser = DiffParser()
        file_diffs = parser.parse(diff_text)
    """

    def __init__(self) -> None:
        """Initialize the diff parser."""
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")

    def parse(self, diff_text: Optional[str]) -> List[FileDiff]:
        """
        Parse a unified diff string into FileDiff objects.

        Args:
            diff_text: Raw unified diff content; None or non-diff text
                yields an empty list

        Returns:
            FileDiff objects in order of appearance

        Raises:
            MalformedHunkHeaderError: If a hunk header inside a file is invalid
        """
        if not isinstance(diff_text, str) or not diff_text:
            return []

        lines = diff_text.split('\n')
        if lines[-1] == "":
            # Terminating newline, not an empty context line
            lines.pop()

        file_diffs: List[FileDiff] = []
        builder: Optional[FileDiffBuilder] = None
        state = ScanState.OUTSIDE_FILE

        for line_index, line in enumerate(lines):
            if line.startswith(FILE_HEADER_PREFIX):
                if builder is not None:
                    file_diffs.append(builder.build())
                builder = FileDiffBuilder(line)
                state = ScanState.IN_HEADER
                self.logger.debug(
                    f"Found file header at line {line_index}: {builder.path}",
                    extra={"line_index": line_index, "file_path": builder.path}
                )
            elif builder is None:
                continue
            elif state is ScanState.IN_HEADER:
                state = self._scan_header_line(builder, line, line_index)
            else:
                state = self._scan_hunk_line(builder, line, line_index)

        if builder is not None:
            file_diffs.append(builder.build())

        self.logger.info(
            f"Parsed {len(file_diffs)} files from diff text",
            extra={"parsed_files": len(file_diffs), "diff_lines": len(lines)}
        )
        return file_diffs

    def _scan_header_line(self, builder: FileDiffBuilder, line: str, line_index: int) -> ScanState:
        """Interpret a metadata line between ``diff --git`` and the first hunk."""
        if line.startswith(HUNK_HEADER_PREFIX):
            if builder.binary:
                return ScanState.IN_HEADER
            return self._open_hunk(builder, line, line_index)

        builder.add_header_line(line)

        if line.startswith(INDEX_PREFIX):
            builder.set_index(line)
        elif line.startswith(BINARY_PREFIX):
            builder.mark_binary()
        elif line.startswith(NEW_FILE_PREFIX):
            builder.set_status(FileStatus.ADDED)
        elif line.startswith(DELETED_FILE_PREFIX):
            builder.set_status(FileStatus.DELETED)
        elif line.startswith(RENAME_FROM_PREFIX):
            builder.rename_from(line[len(RENAME_FROM_PREFIX):])
        elif line.startswith(RENAME_TO_PREFIX):
            builder.rename_to(line[len(RENAME_TO_PREFIX):])
        # "---"/"+++", mode and similarity lines only land in raw_diff

        return ScanState.IN_HEADER

    def _scan_hunk_line(self, builder: FileDiffBuilder, line: str, line_index: int) -> ScanState:
        """Route a line seen while inside a hunk body."""
        if line.startswith(HUNK_HEADER_PREFIX):
            return self._open_hunk(builder, line, line_index)

        builder.add_hunk_line(line)
        return ScanState.IN_HUNK

    def _open_hunk(self, builder: FileDiffBuilder, line: str, line_index: int) -> ScanState:
        try:
            header = parse_hunk_header(line, line_index)
        except MalformedHunkHeaderError as e:
            e.details["file_path"] = builder.path
            self.logger.error(
                f"Malformed hunk header in {builder.path} at line {line_index}",
                extra={"file_path": builder.path, "line_index": line_index}
            )
            raise

        builder.start_hunk(header, line)
        return ScanState.IN_HUNK


# ==============================
# Standalone Functions
# ==============================

def parse_diff(diff_text: Optional[str]) -> List[FileDiff]:
    """Parse unified diff text with a fresh DiffParser."""
    return DiffParser().parse(diff_text)


def validate_diff(diff_text: Any) -> ValidationResult:
    """
    Structural sanity check without running the parser.

    Args:
        diff_text: Candidate diff content

    Returns:
        ValidationResult with the first failing reason, if any
    """
    if not isinstance(diff_text, str) or not diff_text:
        return ValidationResult(False, "Diff content must be a non-empty string")

    if not diff_text.strip():
        return ValidationResult(False, "Diff content is empty")

    lines = diff_text.split('\n')

    if not any(line.startswith(FILE_HEADER_PREFIX) for line in lines):
        return ValidationResult(False, "Diff does not contain file headers (diff --git)")

    if not any(line.startswith(HUNK_HEADER_PREFIX) for line in lines):
        return ValidationResult(False, "Diff does not contain hunk headers (@@)")

    return ValidationResult(True)
