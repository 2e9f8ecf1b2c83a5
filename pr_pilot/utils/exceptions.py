"""
Custom exception classes for PR-Pilot.

Provides specific exception types for different error scenarios
with appropriate error codes and messages.
"""

from typing import Optional, Dict, Any


class ReviewBotError(Exception):
    """
    Base exception for PR-Pilot.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            details: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary representation."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ConfigurationError(ReviewBotError):
    """
    Raised when there's a configuration error.

    This includes out-of-range values, unknown log levels,
    invalid command-line arguments, etc.
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[str] = None
    ):
        """Initialize configuration error."""
        details = {}
        if config_key:
            details["config_key"] = config_key
        if config_value is not None:
            details["config_value"] = config_value

        super().__init__(
            message=message,
            error_code="CONFIG_ERROR",
            details=details
        )


class DiffParsingError(ReviewBotError):
    """
    Raised when there's an error parsing a unified diff.

    This includes malformed hunk headers and other structural
    problems in the diff text.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        diff_line: Optional[int] = None,
        diff_content: Optional[str] = None,
        error_code: str = "DIFF_PARSING_ERROR"
    ):
        """Initialize diff parsing error."""
        details: Dict[str, Any] = {}
        if file_path:
            details["file_path"] = file_path
        if diff_line is not None:
            details["diff_line"] = diff_line
        if diff_content:
            details["diff_content"] = diff_content

        super().__init__(
            message=message,
            error_code=error_code,
            details=details
        )


class MalformedHunkHeaderError(DiffParsingError):
    """
    Raised when an ``@@`` line does not have the expected numeric shape.

    A malformed header is a data-integrity problem in the diff itself,
    so the whole parse fails instead of returning partial results.
    """

    def __init__(
        self,
        line_index: int,
        line: str,
        file_path: Optional[str] = None
    ):
        """
        Initialize malformed hunk header error.

        Args:
            line_index: Zero-based index of the offending line in the diff
            line: The offending line text
            file_path: Path of the file being parsed, if known
        """
        super().__init__(
            message=f"Invalid hunk header at line {line_index}: {line}",
            file_path=file_path,
            diff_line=line_index,
            diff_content=line,
            error_code="MALFORMED_HUNK_HEADER"
        )
        self.line_index = line_index
        self.line = line
