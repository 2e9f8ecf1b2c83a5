"""
CLI Handler for PR-Pilot.

This module handles command-line argument parsing and validation for
inspecting a diff: validate it, parse it, apply the exclude patterns and
file limit, and print a summary.
"""

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, List, TextIO

from .config.settings import Settings, MAX_FILES_LIMIT
from .diff_handler import DiffHandler
from .diff_parser import validate_diff
from .diff_summary import format_file_diff
from .utils.logger import get_logger, setup_logging
from .utils.exceptions import ConfigurationError, DiffParsingError

EXIT_OK = 0
EXIT_INVALID_DIFF = 1
EXIT_USAGE = 2


class CLIHandler:
    """
    Handles command-line interface and execution.

    This class is responsible for:
    - Parsing and validating command-line arguments
    - Setting up logging configuration
    - Running the diff pipeline and printing its result
    """

    def __init__(self, settings: Optional[Settings] = None, stdout: Optional[TextIO] = None):
        """
        Initialize the CLI handler with settings.

        Args:
            settings: Base settings; command-line flags override them
            stdout: Stream for command output (defaults to sys.stdout)
        """
        self.settings = settings
        self.stdout = stdout or sys.stdout
        self.logger = get_logger("pr_pilot.cli")

    def create_parser(self) -> argparse.ArgumentParser:
        """
        Create and configure the argument parser.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="pr-pilot-diff",
            description="Parse, filter and summarize a unified diff",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Summarize a pull request diff
  git diff main... | python -m pr_pilot

  # JSON report for the first 5 files, skipping docs
  python -m pr_pilot change.diff --format json --max-files 5 --exclude "docs/**"

  # Only check that the input looks like a diff
  python -m pr_pilot change.diff --validate-only
            """
        )

        parser.add_argument(
            "diff_file",
            nargs="?",
            default="-",
            help="Diff file to read ('-' or omitted for stdin)"
        )

        parser.add_argument(
            "--exclude",
            action="append",
            default=[],
            metavar="PATTERN",
            help="Exclude files matching PATTERN (repeatable)"
        )

        parser.add_argument(
            "--no-default-excludes",
            action="store_true",
            help="Do not apply the default exclude patterns"
        )

        parser.add_argument(
            "--max-files",
            type=int,
            help="Maximum number of files to keep (0 for no limit)"
        )

        parser.add_argument(
            "--context-lines",
            type=int,
            help="Context lines kept around changes in the report"
        )

        parser.add_argument(
            "--format",
            choices=["text", "json"],
            default="text",
            help="Output format (default: text)"
        )

        parser.add_argument(
            "--validate-only",
            action="store_true",
            help="Only validate the diff structure and exit"
        )

        # Logging options
        parser.add_argument(
            "--log-level",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Override logging level"
        )

        parser.add_argument(
            "--log-format",
            choices=["text", "json"],
            help="Override log format"
        )

        parser.add_argument(
            "--log-file",
            type=str,
            help="Also write JSON logs to this file"
        )

        return parser

    def parse_args(self, argv: Optional[List[str]] = None) -> argparse.Namespace:
        """
        Parse command-line arguments.

        Args:
            argv: List of command-line arguments (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.create_parser().parse_args(argv)

    def validate_args(self, args: argparse.Namespace) -> None:
        """
        Validate parsed command-line arguments.

        Args:
            args: Parsed arguments

        Raises:
            ConfigurationError: If arguments are invalid
        """
        if args.max_files is not None and not 0 <= args.max_files <= MAX_FILES_LIMIT:
            raise ConfigurationError(
                f"max-files must be between 0 and {MAX_FILES_LIMIT}",
                config_key="max_files",
                config_value=str(args.max_files)
            )

        if args.context_lines is not None and args.context_lines < 0:
            raise ConfigurationError(
                "context-lines must be a non-negative integer",
                config_key="context_lines",
                config_value=str(args.context_lines)
            )

        if any(not pattern.strip() for pattern in args.exclude):
            raise ConfigurationError("exclude patterns cannot be empty", config_key="exclude")

    def build_settings(self, args: argparse.Namespace) -> Settings:
        """
        Merge command-line overrides into the base settings.

        Args:
            args: Validated arguments

        Returns:
            Settings for this run
        """
        base = self.settings or Settings.from_env()

        patterns = [] if args.no_default_excludes else list(base.exclude_patterns)

        return Settings(
            max_files=base.max_files if args.max_files is None else args.max_files,
            context_lines=base.context_lines if args.context_lines is None else args.context_lines,
            exclude_patterns=patterns + list(args.exclude),
            log_level=args.log_level or base.log_level,
            log_format=args.log_format or base.log_format,
            log_file=args.log_file or base.log_file
        )

    def setup_logging(self, settings: Settings) -> bool:
        """
        Setup logging from the effective settings.

        Returns:
            True if logging setup succeeded, False otherwise
        """
        try:
            setup_logging(
                level=settings.log_level,
                format_type=settings.log_format,
                log_file=settings.log_file
            )
            return True
        except (ValueError, OSError) as e:
            print(f"Failed to setup logging: {e}", file=sys.stderr)
            return False

    def read_diff(self, diff_file: str) -> str:
        """Read diff text from a file or from stdin for '-'."""
        if diff_file == "-":
            return sys.stdin.read()
        return Path(diff_file).read_text(encoding="utf-8")

    def run(self, argv: Optional[List[str]] = None) -> int:
        """
        Execute the command line.

        Args:
            argv: Command-line arguments (uses sys.argv if None)

        Returns:
            Process exit code
        """
        args = self.parse_args(argv)

        try:
            self.validate_args(args)
            settings = self.build_settings(args)
        except ConfigurationError as e:
            print(f"Configuration error: {e.message}", file=sys.stderr)
            return EXIT_USAGE

        if not self.setup_logging(settings):
            return EXIT_USAGE

        try:
            diff_text = self.read_diff(args.diff_file)
        except OSError as e:
            self.logger.error(f"Failed to read diff: {e}")
            print(f"Cannot read {args.diff_file}: {e}", file=sys.stderr)
            return EXIT_USAGE

        if args.validate_only:
            validation = validate_diff(diff_text)
            if validation.valid:
                print("Diff is valid", file=self.stdout)
                return EXIT_OK
            print(f"Invalid diff: {validation.error}", file=self.stdout)
            return EXIT_INVALID_DIFF

        handler = DiffHandler(settings)
        try:
            if args.format == "json":
                report = handler.build_report(diff_text)
                print(report.model_dump_json(indent=2), file=self.stdout)
            else:
                self.print_text_report(handler, diff_text)
        except DiffParsingError as e:
            self.logger.error(f"Diff parsing failed: {e.message}", extra={"details": e.details})
            print(f"Diff parsing failed: {e.message}", file=sys.stderr)
            return EXIT_INVALID_DIFF

        return EXIT_OK

    def print_text_report(self, handler: DiffHandler, diff_text: str) -> None:
        """Print a human-readable summary and each reviewed file."""
        processed = handler.process(diff_text)
        stats = processed.stats

        print(f"Files: {stats.total_files} reviewed, {processed.excluded_count} excluded", file=self.stdout)
        print(f"Changes: +{stats.total_additions} -{stats.total_deletions} in {stats.total_hunks} hunks", file=self.stdout)
        if stats.files_by_status:
            by_status = ", ".join(f"{status}={count}" for status, count in sorted(stats.files_by_status.items()))
            print(f"By status: {by_status}", file=self.stdout)
        print("", file=self.stdout)

        for file_diff in processed.files:
            view = replace(file_diff, hunks=handler.context_view(file_diff))
            print(format_file_diff(view), file=self.stdout)
