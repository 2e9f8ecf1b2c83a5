"""
Line Position Validator for inline review comments.

The diff parser only records file line numbers. Hosts differ in how an
inline comment is anchored: GitLab takes a ``line_code`` derived from the
old and new line numbers, GitHub's position-based API takes a counter of
lines since the file's first ``@@`` header. This module resolves both from
parsed FileDiff records, so the comment-posting side never re-reads the
raw diff.

Only lines that are part of a hunk (added or context lines) can carry an
inline comment on the new version of a file.
"""

from typing import Dict, List, Optional
from dataclasses import dataclass, field
import hashlib

from .diff_parser import FileDiff, LineType, classify_line
from .utils.logger import get_logger


def calculate_line_code(file_path: str, old_line: Optional[int], new_line: Optional[int]) -> str:
    """
    Calculate GitLab line_code identifier.

    GitLab uses line_code format: {file_sha}_{old_line}_{new_line}
    where file_sha is SHA1 hash of the file path.

    Args:
        file_path: Path to the file
        old_line: Line number in old file (None for added lines)
        new_line: Line number in new file (None for removed lines)

    Returns:
        GitLab line_code string

    Raises:
        ValueError: If file_path is empty or if both old_line and new_line are None
    """
    if not file_path or not file_path.strip():
        raise ValueError("file_path cannot be empty")

    if old_line is not None and old_line < 0:
        raise ValueError(f"old_line must be non-negative, got {old_line}")

    if new_line is not None and new_line < 0:
        raise ValueError(f"new_line must be non-negative, got {new_line}")

    if old_line is None and new_line is None:
        raise ValueError("At least one of old_line or new_line must be provided")

    file_sha = hashlib.sha1(file_path.encode('utf-8')).hexdigest()
    old = old_line if old_line is not None else ""
    new = new_line if new_line is not None else ""
    return f"{file_sha}_{old}_{new}"


@dataclass
class LinePositionInfo:
    """Information about a commentable line."""
    file_path: str
    line_number: int
    old_line: Optional[int]  # None for added lines
    line_type: str  # 'added' or 'context'
    position: int  # Lines since the file's first hunk header
    line_code: str


@dataclass
class FileLineMapping:
    """Stores valid line positions for a file."""
    file_path: str
    line_info: Dict[int, LinePositionInfo] = field(default_factory=dict)
    removed_positions: Dict[int, int] = field(default_factory=dict)  # old line -> position

    def is_valid_line(self, line_number: int) -> bool:
        """Check if a line number is valid for inline comments."""
        return line_number in self.line_info

    def add_valid_line(self, line_number: int, old_line: Optional[int], line_type: str, position: int) -> None:
        """Add a valid line position."""
        self.line_info[line_number] = LinePositionInfo(
            file_path=self.file_path,
            line_number=line_number,
            old_line=old_line,
            line_type=line_type,
            position=position,
            line_code=calculate_line_code(self.file_path, old_line, line_number)
        )

    def get_line_info(self, line_number: int) -> Optional[LinePositionInfo]:
        """Get detailed information about a line."""
        return self.line_info.get(line_number)


def build_file_mapping(file_diff: FileDiff) -> FileLineMapping:
    """
    Walk a file's hunks and record every commentable line.

    Args:
        file_diff: Parsed file diff

    Returns:
        FileLineMapping keyed by new-file line number
    """
    mapping = FileLineMapping(file_path=file_diff.path)
    position = 0

    for hunk_number, hunk in enumerate(file_diff.hunks):
        if hunk_number > 0:
            # Later hunk headers count as diff lines
            position += 1

        old_line = hunk.old_start
        new_line = hunk.new_start

        for line in hunk.lines:
            position += 1
            line_type = classify_line(line)

            if line_type is LineType.ADDITION:
                mapping.add_valid_line(new_line, None, 'added', position)
                new_line += 1
            elif line_type is LineType.DELETION:
                mapping.removed_positions[old_line] = position
                old_line += 1
            elif line_type is LineType.CONTEXT:
                mapping.add_valid_line(new_line, old_line, 'context', position)
                old_line += 1
                new_line += 1

    return mapping


class LinePositionValidator:
    """
    Validates line positions against parsed diff hunks.

    Example:
        validator = LinePositionValidator()
        validator.build_mappings(file_diffs)
        if validator.is_valid_position("src/app.js", 3):
            position = validator.get_diff_position("src/app.js", 3)
    """

    def __init__(self) -> None:
        """Initialize the line position validator."""
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")
        self.file_mappings: Dict[str, FileLineMapping] = {}

    def build_mappings(self, file_diffs: List[FileDiff]) -> None:
        """
        Build line position mappings from parsed file diffs.

        Replaces any mappings built earlier.

        Args:
            file_diffs: Parsed file diffs
        """
        self.file_mappings.clear()

        for file_diff in file_diffs:
            if not file_diff.path:
                continue

            mapping = build_file_mapping(file_diff)
            self.file_mappings[file_diff.path] = mapping

            self.logger.debug(
                f"Built line position mapping for {file_diff.path}",
                extra={
                    "file_path": file_diff.path,
                    "valid_lines_count": len(mapping.line_info)
                }
            )

        self.logger.info(
            f"Built line position mappings for {len(self.file_mappings)} files",
            extra={"total_files": len(self.file_mappings)}
        )

    def is_valid_position(self, file_path: str, line_number: int) -> bool:
        """
        Check if a file and line number is valid for inline commenting.

        Args:
            file_path: Path to the file
            line_number: Line number in the new version of the file

        Returns:
            True if the position is valid for inline comments, False otherwise
        """
        mapping = self.file_mappings.get(file_path)
        if not mapping:
            self.logger.warning(
                f"No mapping found for file {file_path}:{line_number}",
                extra={
                    "file_path": file_path,
                    "line_number": line_number,
                    "available_files": list(self.file_mappings.keys())[:5]
                }
            )
            return False

        is_valid = mapping.is_valid_line(line_number)
        if not is_valid:
            self.logger.warning(
                f"Line {line_number} is NOT in diff hunks for {file_path}",
                extra={
                    "file_path": file_path,
                    "line_number": line_number,
                    "valid_lines": self.get_valid_line_numbers(file_path)[:10]
                }
            )
        return is_valid

    def get_line_info(self, file_path: str, line_number: int) -> Optional[LinePositionInfo]:
        """Get detailed information about a line position."""
        mapping = self.file_mappings.get(file_path)
        if mapping:
            return mapping.get_line_info(line_number)
        return None

    def has_mapping(self, file_path: str) -> bool:
        """Check if a file has line position mappings."""
        return file_path in self.file_mappings

    def get_valid_line_numbers(self, file_path: str) -> List[int]:
        """Get all valid line numbers for inline comments in a file."""
        mapping = self.file_mappings.get(file_path)
        if mapping:
            return sorted(mapping.line_info)
        return []

    def find_nearest_valid_line(self, file_path: str, line_number: int) -> Optional[int]:
        """
        Find the nearest valid line number to the requested line.

        Ties go to the lower line number.

        Args:
            file_path: Path to the file
            line_number: Requested line number

        Returns:
            Nearest valid line number, or None if no valid lines exist
        """
        valid_lines = self.get_valid_line_numbers(file_path)
        if not valid_lines:
            return None

        return min(valid_lines, key=lambda x: abs(x - line_number))

    def get_diff_position(self, file_path: str, line_number: int, old_side: bool = False) -> Optional[int]:
        """
        Resolve a file line number to a diff-relative position.

        Args:
            file_path: Path to the file
            line_number: Line number in the new file, or in the old file
                when ``old_side`` is set
            old_side: Look up a removed line instead of a new-file line

        Returns:
            Position counted from the file's first hunk header, or None if
            the line is not part of the diff
        """
        mapping = self.file_mappings.get(file_path)
        if not mapping:
            return None

        if old_side:
            return mapping.removed_positions.get(line_number)

        info = mapping.get_line_info(line_number)
        return info.position if info else None
