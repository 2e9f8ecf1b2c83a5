"""
Summaries and views over parsed diffs.

Everything here reads FileDiff/Hunk records and returns new values;
the parsed records are never modified.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from .diff_parser import FileDiff, Hunk, LineType, classify_line

DEFAULT_CONTEXT_LINES = 60


@dataclass
class DiffStats:
    """Aggregate counts over a collection of file diffs."""
    total_files: int = 0
    total_additions: int = 0
    total_deletions: int = 0
    total_hunks: int = 0
    binary_files: int = 0
    files_by_status: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_files": self.total_files,
            "total_additions": self.total_additions,
            "total_deletions": self.total_deletions,
            "total_hunks": self.total_hunks,
            "binary_files": self.binary_files,
            "files_by_status": dict(self.files_by_status)
        }


@dataclass(frozen=True)
class ChangedLine:
    """
    One added or removed line.

    Attributes:
        type: "addition" or "deletion"
        line: Line text without its marker
        line_number: Line number in the new file (additions) or the old
            file (deletions)
        hunk_index: Index of the line within ``hunk.lines``
    """
    type: str
    line: str
    line_number: int
    hunk_index: int


def get_diff_stats(file_diffs: List[FileDiff]) -> DiffStats:
    """
    Generate aggregate statistics for file diffs.

    ``files_by_status`` only holds statuses that were observed.

    Args:
        file_diffs: Parsed file diffs

    Returns:
        DiffStats for the collection
    """
    stats = DiffStats(total_files=len(file_diffs))

    for file_diff in file_diffs:
        stats.total_additions += file_diff.additions
        stats.total_deletions += file_diff.deletions
        stats.total_hunks += len(file_diff.hunks)

        if file_diff.binary:
            stats.binary_files += 1

        status = str(file_diff.status)
        stats.files_by_status[status] = stats.files_by_status.get(status, 0) + 1

    return stats


def extract_changed_lines(hunk: Hunk) -> List[ChangedLine]:
    """
    Materialize the added and removed lines of a hunk.

    Line numbers are resolved by walking the hunk from its start
    positions: context lines advance both counters, additions only the
    new one, deletions only the old one.

    Args:
        hunk: Parsed hunk

    Returns:
        ChangedLine entries in hunk order
    """
    changed_lines = []
    old_line = hunk.old_start
    new_line = hunk.new_start

    for index, line in enumerate(hunk.lines):
        line_type = classify_line(line)

        if line_type is LineType.ADDITION:
            changed_lines.append(ChangedLine("addition", line[1:], new_line, index))
            new_line += 1
        elif line_type is LineType.DELETION:
            changed_lines.append(ChangedLine("deletion", line[1:], old_line, index))
            old_line += 1
        elif line_type is LineType.CONTEXT:
            old_line += 1
            new_line += 1

    return changed_lines


def _bounded_lines(lines: List[str], context_lines: int) -> List[str]:
    limit = 2 * context_lines
    changed = [
        index for index, line in enumerate(lines)
        if classify_line(line) in (LineType.ADDITION, LineType.DELETION)
    ]

    if not changed:
        return lines[:limit]

    start = max(0, changed[0] - context_lines)
    end = min(len(lines), changed[-1] + 1 + context_lines)

    if end - start > limit:
        # Split the remaining context evenly; a short side keeps all of its own
        before = changed[0] - start
        after = end - changed[-1] - 1
        keep = max(0, before + after - (end - start - limit))
        keep_before = min(before, keep - min(after, keep // 2))
        keep_after = keep - keep_before
        start = changed[0] - keep_before
        end = min(changed[-1] + 1 + keep_after, start + limit)

    return lines[start:end]


def extract_hunks_with_context(
    file_diff: Optional[FileDiff],
    context_lines: int = DEFAULT_CONTEXT_LINES
) -> List[Hunk]:
    """
    Build bounded views of a file's hunks for prompt construction.

    Each view keeps at most ``context_lines`` lines on either side of the
    changed region and at most ``2 * context_lines`` lines overall; when
    over that cap, context is trimmed evenly from both sides.
    A budget of zero or less disables bounding.

    Args:
        file_diff: Parsed file diff
        context_lines: Context budget per side

    Returns:
        New Hunk objects; the originals are left untouched
    """
    if file_diff is None or not file_diff.hunks:
        return []

    views = []
    for hunk in file_diff.hunks:
        if context_lines <= 0:
            lines = list(hunk.lines)
        else:
            lines = _bounded_lines(hunk.lines, context_lines)
        views.append(replace(hunk, lines=lines, content="\n".join(lines)))

    return views


def format_file_diff(file_diff: Optional[FileDiff]) -> str:
    """
    Format a file diff for display.

    Args:
        file_diff: Parsed file diff

    Returns:
        Human-readable description, or an empty string for None
    """
    if file_diff is None:
        return ""

    output = f"File: {file_diff.path}\n"
    output += f"Status: {file_diff.status}\n"

    if file_diff.binary:
        output += "Binary file\n"
        return output

    output += f"Changes: +{file_diff.additions} -{file_diff.deletions}\n\n"

    for index, hunk in enumerate(file_diff.hunks, start=1):
        header = f"{hunk.header} {hunk.context}" if hunk.context else hunk.header
        output += f"Hunk {index}:\n"
        output += header + "\n"
        output += "".join(line + "\n" for line in hunk.lines)
        output += "\n"

    return output
