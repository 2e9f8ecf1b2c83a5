"""
Pydantic models for processed diff reports.

These models are the serialized hand-off to the prompt-construction and
comment-posting collaborators, and the JSON output of the command line.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .diff_parser import FileDiff, Hunk
from .diff_summary import DiffStats


class HunkModel(BaseModel):
    """
    Serialized hunk.

    Lines keep their leading ``+``/``-``/space markers.
    """

    model_config = ConfigDict(frozen=True)

    old_start: int = Field(..., ge=0, description="First old-file line")
    old_count: int = Field(..., ge=0, description="Old-file line count")
    new_start: int = Field(..., ge=0, description="First new-file line")
    new_count: int = Field(..., ge=0, description="New-file line count")
    context: str = Field("", description="Trailing text of the @@ line")
    additions: int = Field(0, ge=0)
    deletions: int = Field(0, ge=0)
    lines: List[str] = Field(default_factory=list, description="Hunk body lines")

    @classmethod
    def from_hunk(cls, hunk: Hunk) -> "HunkModel":
        return cls(
            old_start=hunk.old_start,
            old_count=hunk.old_count,
            new_start=hunk.new_start,
            new_count=hunk.new_count,
            context=hunk.context,
            additions=hunk.additions,
            deletions=hunk.deletions,
            lines=list(hunk.lines)
        )


class FileDiffModel(BaseModel):
    """Serialized file diff."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Canonical file path")
    old_path: str = Field("", description="Path before the change")
    new_path: str = Field("", description="Path after the change")
    status: str = Field(..., description="added, modified, deleted, renamed or binary")
    additions: int = Field(0, ge=0)
    deletions: int = Field(0, ge=0)
    binary: bool = Field(False)
    hunks: List[HunkModel] = Field(default_factory=list)

    @classmethod
    def from_file_diff(cls, file_diff: FileDiff, hunks: Optional[List[Hunk]] = None) -> "FileDiffModel":
        """
        Build from a parsed file diff.

        Args:
            file_diff: Parsed file diff
            hunks: Hunks to serialize instead of ``file_diff.hunks``,
                e.g. bounded context views
        """
        return cls(
            path=file_diff.path,
            old_path=file_diff.old_path,
            new_path=file_diff.new_path,
            status=str(file_diff.status),
            additions=file_diff.additions,
            deletions=file_diff.deletions,
            binary=file_diff.binary,
            hunks=[HunkModel.from_hunk(h) for h in (file_diff.hunks if hunks is None else hunks)]
        )


class DiffStatsModel(BaseModel):
    """Serialized aggregate statistics."""

    model_config = ConfigDict(frozen=True)

    total_files: int = Field(0, ge=0)
    total_additions: int = Field(0, ge=0)
    total_deletions: int = Field(0, ge=0)
    total_hunks: int = Field(0, ge=0)
    binary_files: int = Field(0, ge=0)
    files_by_status: Dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_stats(cls, stats: DiffStats) -> "DiffStatsModel":
        return cls(**stats.to_dict())


class DiffReport(BaseModel):
    """
    Result of processing one diff.

    ``excluded_files`` counts files dropped by exclude patterns and by
    the file limit together.
    """

    model_config = ConfigDict(frozen=True)

    parsed_files: int = Field(..., ge=0, description="Files found in the diff")
    excluded_files: int = Field(..., ge=0, description="Files not sent to review")
    stats: DiffStatsModel
    files: List[FileDiffModel] = Field(default_factory=list)
