"""
Logging infrastructure for PR-Pilot.

Provides structured logging with configurable formats and levels.

This module offers:
- JSON and text formatters with customizable output
- A specialized logger for diff processing statistics
- Redaction of sensitive values in structured log fields

Example:
    >>> from pr_pilot.utils.logger import get_logger, setup_logging
    >>> setup_logging(level="DEBUG", format_type="json")
    >>> logger = get_logger(__name__)
    >>> logger.info("Diff parsed", extra={"parsed_files": 3})
"""

import logging
import sys
import json
import re
from datetime import datetime, timezone
from typing import Dict, Any, Optional, Union, List, Pattern
from pathlib import Path
from enum import Enum


class LogLevel(Enum):
    """Supported logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(Enum):
    """Supported log formats."""
    JSON = "json"
    TEXT = "text"


class Colors:
    """ANSI color codes for console output."""
    CYAN = '\033[36m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    RED = '\033[31m'
    MAGENTA = '\033[35m'
    RESET = '\033[0m'

    LEVEL_COLORS = {
        LogLevel.DEBUG.value: CYAN,
        LogLevel.INFO.value: GREEN,
        LogLevel.WARNING.value: YELLOW,
        LogLevel.ERROR.value: RED,
        LogLevel.CRITICAL.value: MAGENTA,
    }


# Field names whose values never reach the log output
SENSITIVE_FIELDS = {
    'authorization', 'token', 'password', 'secret', 'api_key',
    'private_key', 'access_token', 'refresh_token', 'credential',
    'credentials', 'client_secret', 'github_token', 'anthropic_api_key'
}

REDACTION_PLACEHOLDER = "***REDACTED***"

DEFAULT_TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'

# Standard log record fields to exclude when copying extra fields
STANDARD_LOG_FIELDS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'getMessage', 'exc_info',
    'exc_text', 'stack_info', 'taskName', 'message', 'asctime'
}

# Token-looking values inside free-form messages
SENSITIVE_PATTERNS: List[Pattern] = [
    re.compile(r'(?i)(bearer\s+)([a-zA-Z0-9_\-\.]{8,})'),
    re.compile(r'(?i)(api[_-]?key["\s]*[:=]["\s]*)([a-zA-Z0-9_\-]+)'),
    re.compile(r'(gh[pousr]_)([A-Za-z0-9]{20,})'),
    re.compile(r'(sk-ant-)([A-Za-z0-9_\-]{10,})'),
]


def redact_string(text: str) -> str:
    """
    Replace token-looking substrings in a message.

    Args:
        text: Text that may contain credentials

    Returns:
        Text with the secret part of every match replaced
    """
    for pattern in SENSITIVE_PATTERNS:
        text = pattern.sub(lambda m: f"{m.group(1)}{REDACTION_PLACEHOLDER}", text)
    return text


def redact_value(key: str, value: Any) -> Any:
    """Redact a structured field value if its name is sensitive."""
    if key.lower() in SENSITIVE_FIELDS:
        return REDACTION_PLACEHOLDER
    if isinstance(value, dict):
        return {k: redact_value(str(k), v) for k, v in value.items()}
    if isinstance(value, str):
        return redact_string(value)
    return value


# ============================================================================
# Formatter Classes
# ============================================================================

class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Converts log records to JSON with a consistent schema. Extra fields
    passed via ``extra=`` are copied to the top level of the entry.

    Example output:
        {
            "timestamp": "2024-05-01T10:30:45.123456Z",
            "level": "INFO",
            "logger": "pr_pilot.diff_parser.DiffParser",
            "message": "Parsed 2 files from diff text",
            "module": "diff_parser",
            "function": "parse",
            "line": 42,
            "parsed_files": 2
        }
    """

    def __init__(self, ensure_ascii: bool = False, sort_keys: bool = True):
        """
        Initialize JSON formatter.

        Args:
            ensure_ascii: Whether to ensure ASCII encoding in JSON output
            sort_keys: Whether to sort keys in JSON output
        """
        super().__init__()
        self.ensure_ascii = ensure_ascii
        self.sort_keys = sort_keys

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON string.

        Args:
            record: The log record to format

        Returns:
            JSON-formatted log entry as string
        """
        log_entry = self._create_base_log_entry(record)
        self._add_extra_fields(log_entry, record)
        self._add_exception_info(log_entry, record)

        return json.dumps(
            log_entry,
            default=str,
            ensure_ascii=self.ensure_ascii,
            sort_keys=self.sort_keys
        )

    def _create_base_log_entry(self, record: logging.LogRecord) -> Dict[str, Any]:
        """Create the base log entry with standard fields."""
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return {
            "timestamp": timestamp.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_string(record.getMessage()),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

    def _add_extra_fields(self, log_entry: Dict[str, Any], record: logging.LogRecord) -> None:
        """Add extra fields from the record while excluding standard fields."""
        for key, value in record.__dict__.items():
            if key not in STANDARD_LOG_FIELDS and not key.startswith('_'):
                log_entry[key] = redact_value(key, value)

    def _add_exception_info(self, log_entry: Dict[str, Any], record: logging.LogRecord) -> None:
        """Add exception information if present in the record."""
        if record.exc_info:
            log_entry["exception"] = redact_string(self.formatException(record.exc_info))


class TextFormatter(logging.Formatter):
    """
    Text formatter for human-readable logging with optional colors.

    Example output:
        [2024-05-01 10:30:45] INFO     pr_pilot.diff_handler:42 - Diff processed
    """

    def __init__(self, use_colors: bool = True, timestamp_format: Optional[str] = None):
        """
        Initialize text formatter with colors for console output.

        Args:
            use_colors: Whether to use ANSI colors in output
            timestamp_format: Custom timestamp format string
        """
        super().__init__()
        self.use_colors = use_colors and self._supports_color()
        self.timestamp_format = timestamp_format or DEFAULT_TIMESTAMP_FORMAT

    def _supports_color(self) -> bool:
        """Check if the terminal supports color output."""
        return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as colored text.

        Args:
            record: The log record to format

        Returns:
            Formatted text log entry
        """
        timestamp = datetime.fromtimestamp(record.created).strftime(self.timestamp_format)
        message = (
            f"[{timestamp}] {record.levelname:8} "
            f"{record.name}:{record.lineno} - {redact_string(record.getMessage())}"
        )

        if record.exc_info:
            message += f"\n{redact_string(self.formatException(record.exc_info))}"

        if self.use_colors:
            color = Colors.LEVEL_COLORS.get(record.levelname, '')
            message = f"{color}{message}{Colors.RESET}"

        return message


# ============================================================================
# Logger Setup and Configuration
# ============================================================================

def validate_log_level(level: str) -> str:
    """
    Validate and normalize log level string.

    Args:
        level: Log level string to validate

    Returns:
        Validated log level string

    Raises:
        ValueError: If the log level is not supported
    """
    if not level:
        raise ValueError("Log level cannot be empty")

    level_upper = level.upper()
    valid_levels = [log_level.value for log_level in LogLevel]

    if level_upper not in valid_levels:
        raise ValueError(f"Invalid log level: {level}. Valid levels: {', '.join(valid_levels)}")

    return level_upper


def validate_log_format(format_type: str) -> str:
    """
    Validate and normalize log format string.

    Args:
        format_type: Log format string to validate

    Returns:
        Validated log format string

    Raises:
        ValueError: If the log format is not supported
    """
    if not format_type:
        raise ValueError("Log format cannot be empty")

    format_lower = format_type.lower()
    valid_formats = [log_format.value for log_format in LogFormat]

    if format_lower not in valid_formats:
        raise ValueError(f"Invalid log format: {format_type}. Valid formats: {', '.join(valid_formats)}")

    return format_lower


def setup_logging(
    level: Union[str, LogLevel] = LogLevel.INFO,
    format_type: Union[str, LogFormat] = LogFormat.TEXT,
    log_file: Optional[str] = None,
    use_colors: Optional[bool] = None
) -> logging.Logger:
    """
    Set up logging configuration for the root logger.

    Console output goes to stderr so that command output on stdout stays
    machine-readable. File output is always JSON.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Log format ('json' or 'text')
        log_file: Optional log file path
        use_colors: Whether to use colors in text output (defaults to True)

    Returns:
        Configured root logger

    Raises:
        ValueError: If validation fails for level or format
        OSError: If the log file cannot be created
    """
    level_str = level.value if isinstance(level, LogLevel) else level
    format_str = format_type.value if isinstance(format_type, LogFormat) else format_type

    validated_level = validate_log_level(level_str)
    validated_format = validate_log_format(format_str)
    numeric_level = getattr(logging, validated_level, logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(numeric_level)

    # Clear existing handlers to avoid duplicate logs
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if validated_format == LogFormat.JSON.value:
        console_formatter: logging.Formatter = JSONFormatter()
    else:
        console_formatter = TextFormatter(use_colors=use_colors if use_colors is not None else True)

    logger.addHandler(_create_console_handler(numeric_level, console_formatter))

    if log_file:
        logger.addHandler(_create_file_handler(log_file, numeric_level, JSONFormatter()))

    return logger


def _create_console_handler(level: int, formatter: logging.Formatter) -> logging.StreamHandler:
    """Create and configure a console log handler."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _create_file_handler(log_file: str, level: int, formatter: logging.Formatter) -> logging.FileHandler:
    """Create and configure a file log handler."""
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(log_file, encoding='utf-8')
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


class ReviewLogger:
    """Specialized logger for diff processing statistics."""

    def __init__(self, logger_name: str = "pr_pilot.review"):
        """Initialize review logger."""
        self.logger = get_logger(logger_name)

    def log_diff_processing(
        self,
        parsed_files: int,
        reviewed_files: int,
        total_additions: int,
        total_deletions: int,
        processing_time_ms: float
    ) -> None:
        """Log diff processing statistics."""
        self.logger.info(
            "Diff processing completed",
            extra={
                "parsed_files": parsed_files,
                "files_reviewed": reviewed_files,
                "files_excluded": parsed_files - reviewed_files,
                "total_additions": total_additions,
                "total_deletions": total_deletions,
                "processing_time_ms": processing_time_ms
            }
        )
