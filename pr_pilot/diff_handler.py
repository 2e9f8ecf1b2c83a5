"""
Diff Handler for PR-Pilot.

This module runs the diff processing pipeline: parse the raw diff,
drop excluded files, cap the number of files, and summarize what is
left for the review step.
"""

import time
from dataclasses import dataclass, field
from typing import List, Optional

from .config.settings import Settings
from .diff_filter import PatternFilter, limit_files
from .diff_parser import DiffParser, FileDiff, Hunk
from .diff_summary import DiffStats, extract_hunks_with_context, get_diff_stats
from .line_code_mapper import LinePositionValidator
from .models import DiffReport, DiffStatsModel, FileDiffModel
from .utils.logger import ReviewLogger, get_logger


@dataclass
class ProcessedDiff:
    """
    Files selected for review plus their statistics.

    Attributes:
        files: Files that survived filtering and limiting, in diff order
        stats: Statistics over ``files``
        parsed_count: Number of files found in the diff
        excluded_count: Files dropped by patterns or by the file limit
    """
    files: List[FileDiff] = field(default_factory=list)
    stats: DiffStats = field(default_factory=DiffStats)
    parsed_count: int = 0
    excluded_count: int = 0


class DiffHandler:
    """
    Handles diff processing for a review run.

    This class is responsible for:
    - Parsing the raw diff text
    - Applying the configured exclude patterns and file limit
    - Producing statistics and bounded hunk views for prompts
    """

    def __init__(self, settings: Optional[Settings] = None, diff_parser: Optional[DiffParser] = None):
        """
        Initialize the diff handler.

        Args:
            settings: Application settings instance (defaults to Settings())
            diff_parser: Diff parser instance
        """
        self.settings = settings or Settings()
        self.diff_parser = diff_parser or DiffParser()
        self.pattern_filter = PatternFilter(self.settings.exclude_patterns)
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")
        self.review_logger = ReviewLogger()

    def process(self, diff_text: Optional[str]) -> ProcessedDiff:
        """
        Run the complete diff processing pipeline.

        Args:
            diff_text: Raw unified diff content

        Returns:
            ProcessedDiff for the review step

        Raises:
            MalformedHunkHeaderError: If the diff contains an invalid hunk header
        """
        start_time = time.time()

        file_diffs = self.diff_parser.parse(diff_text)

        filtered = self.pattern_filter.filter(file_diffs)
        self.logger.info(
            f"{len(file_diffs) - len(filtered)} files excluded by patterns",
            extra={"patterns": len(self.pattern_filter.patterns)}
        )

        limited = limit_files(filtered, self.settings.max_files)
        self.logger.info(
            f"Limited to {len(limited)} files (max: {self.settings.max_files})"
        )

        if not limited:
            self.logger.warning("No files to review after filtering")

        stats = get_diff_stats(limited)
        processing_time_ms = (time.time() - start_time) * 1000
        self.review_logger.log_diff_processing(
            parsed_files=len(file_diffs),
            reviewed_files=len(limited),
            total_additions=stats.total_additions,
            total_deletions=stats.total_deletions,
            processing_time_ms=processing_time_ms
        )

        return ProcessedDiff(
            files=limited,
            stats=stats,
            parsed_count=len(file_diffs),
            excluded_count=len(file_diffs) - len(limited)
        )

    def context_view(self, file_diff: FileDiff) -> List[Hunk]:
        """Bounded hunk views using the configured context budget."""
        return extract_hunks_with_context(file_diff, self.settings.context_lines)

    def line_positions(self, file_diffs: List[FileDiff]) -> LinePositionValidator:
        """
        Map commentable lines of the reviewed files for inline comments.

        Args:
            file_diffs: Files selected for review, e.g. ``ProcessedDiff.files``

        Returns:
            LinePositionValidator with mappings built for every file
        """
        validator = LinePositionValidator()
        validator.build_mappings(file_diffs)
        return validator

    def build_report(self, diff_text: Optional[str]) -> DiffReport:
        """
        Process a diff and serialize the result.

        Hunks in the report are the bounded context views.

        Args:
            diff_text: Raw unified diff content

        Returns:
            DiffReport for collaborators and JSON output
        """
        processed = self.process(diff_text)
        return DiffReport(
            parsed_files=processed.parsed_count,
            excluded_files=processed.excluded_count,
            stats=DiffStatsModel.from_stats(processed.stats),
            files=[
                FileDiffModel.from_file_diff(file_diff, self.context_view(file_diff))
                for file_diff in processed.files
            ]
        )
