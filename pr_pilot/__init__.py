"""
PR-Pilot diff engine.

Parses unified diffs into file and hunk records, filters and limits them,
and summarizes them for the review step.
"""

from .diff_parser import (
    DiffParser,
    FileDiff,
    FileStatus,
    Hunk,
    parse_diff,
    parse_hunk_header,
    validate_diff,
)
from .diff_filter import PatternFilter, filter_files, limit_files
from .diff_summary import (
    DiffStats,
    extract_changed_lines,
    extract_hunks_with_context,
    format_file_diff,
    get_diff_stats,
)
from .diff_handler import DiffHandler, ProcessedDiff
from .line_code_mapper import LinePositionValidator, calculate_line_code

__version__ = "1.0.0"

__all__ = [
    "DiffParser",
    "FileDiff",
    "FileStatus",
    "Hunk",
    "parse_diff",
    "parse_hunk_header",
    "validate_diff",
    "PatternFilter",
    "filter_files",
    "limit_files",
    "DiffStats",
    "extract_changed_lines",
    "extract_hunks_with_context",
    "format_file_diff",
    "get_diff_stats",
    "DiffHandler",
    "ProcessedDiff",
    "LinePositionValidator",
    "calculate_line_code",
]
