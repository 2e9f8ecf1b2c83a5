"""
Tests for CLI Handler component.
"""

import io
import json
from unittest.mock import patch

import pytest

from pr_pilot.cli_handler import CLIHandler, EXIT_INVALID_DIFF, EXIT_OK, EXIT_USAGE
from pr_pilot.config import DEFAULT_EXCLUDE_PATTERNS, Settings
from pr_pilot.utils.exceptions import ConfigurationError

from fixtures import BINARY_DIFF, MALFORMED_DIFF, PACKAGE_DIFF, SIMPLE_DIFF, join_diffs


class TestCLIHandler:
    """Test cases for CLI Handler."""

    def setup_method(self):
        """Set up test fixtures."""
        self.stdout = io.StringIO()
        self.cli_handler = CLIHandler(settings=Settings(), stdout=self.stdout)

    def write_diff(self, tmp_path, text):
        diff_file = tmp_path / "change.diff"
        diff_file.write_text(text, encoding="utf-8")
        return str(diff_file)

    def run_cli(self, *argv):
        return self.cli_handler.run([*argv, "--log-level", "ERROR"])

    def test_create_parser(self):
        """Test argument parser defaults and options."""
        parser = self.cli_handler.create_parser()

        args = parser.parse_args([])
        assert args.diff_file == "-"
        assert args.exclude == []
        assert args.max_files is None
        assert args.format == "text"
        assert args.validate_only is False

        args = parser.parse_args(["x.diff", "--exclude", "a/**", "--exclude", "b", "--format", "json"])
        assert args.diff_file == "x.diff"
        assert args.exclude == ["a/**", "b"]
        assert args.format == "json"

    def test_invalid_choice_exits(self):
        """Test argparse rejects unknown formats."""
        with pytest.raises(SystemExit) as exc_info:
            self.cli_handler.parse_args(["--format", "xml"])

        assert exc_info.value.code == 2

    @pytest.mark.parametrize("argv", [
        ["--max-files", "-1"],
        ["--max-files", "1001"],
        ["--context-lines", "-3"],
        ["--exclude", "  "],
    ])
    def test_validate_args_errors(self, argv):
        """Test invalid argument values."""
        args = self.cli_handler.parse_args(argv)

        with pytest.raises(ConfigurationError):
            self.cli_handler.validate_args(args)

    def test_build_settings_merges_overrides(self):
        """Test command-line flags override the base settings."""
        args = self.cli_handler.parse_args(["--max-files", "3", "--exclude", "docs/**", "--log-format", "json"])

        settings = self.cli_handler.build_settings(args)

        assert settings.max_files == 3
        assert settings.context_lines == 60
        assert settings.exclude_patterns == DEFAULT_EXCLUDE_PATTERNS + ["docs/**"]
        assert settings.log_format == "json"

    def test_build_settings_without_default_excludes(self):
        """Test --no-default-excludes keeps only explicit patterns."""
        args = self.cli_handler.parse_args(["--no-default-excludes", "--exclude", "docs/**"])

        assert self.cli_handler.build_settings(args).exclude_patterns == ["docs/**"]

    def test_text_report(self, tmp_path):
        """Test the human-readable summary."""
        diff_file = self.write_diff(tmp_path, join_diffs(SIMPLE_DIFF, PACKAGE_DIFF))

        exit_code = self.run_cli(diff_file, "--exclude", "package.json")

        output = self.stdout.getvalue()
        assert exit_code == EXIT_OK
        assert output.startswith("Files: 1 reviewed, 1 excluded\nChanges: +2 -0 in 1 hunks\nBy status: modified=1\n")
        assert "File: src/app.js\n" in output
        assert "package.json" not in output

    def test_json_report(self, tmp_path):
        """Test the JSON report."""
        diff_file = self.write_diff(tmp_path, join_diffs(SIMPLE_DIFF, PACKAGE_DIFF, BINARY_DIFF))

        exit_code = self.run_cli(diff_file, "--format", "json", "--max-files", "2")

        payload = json.loads(self.stdout.getvalue())
        assert exit_code == EXIT_OK
        assert payload["parsed_files"] == 3
        assert payload["excluded_files"] == 1
        assert [f["path"] for f in payload["files"]] == ["src/app.js", "package.json"]

    def test_reads_stdin(self, monkeypatch):
        """Test '-' reads the diff from stdin."""
        monkeypatch.setattr("sys.stdin", io.StringIO(SIMPLE_DIFF))

        exit_code = self.run_cli("-", "--format", "json")

        assert exit_code == EXIT_OK
        assert json.loads(self.stdout.getvalue())["files"][0]["path"] == "src/app.js"

    def test_validate_only_valid(self, tmp_path):
        """Test validation of a well-formed diff."""
        diff_file = self.write_diff(tmp_path, SIMPLE_DIFF)

        assert self.run_cli(diff_file, "--validate-only") == EXIT_OK
        assert self.stdout.getvalue() == "Diff is valid\n"

    def test_validate_only_invalid(self, tmp_path):
        """Test validation of a diff without hunks."""
        diff_file = self.write_diff(tmp_path, BINARY_DIFF)

        assert self.run_cli(diff_file, "--validate-only") == EXIT_INVALID_DIFF
        assert self.stdout.getvalue() == "Invalid diff: Diff does not contain hunk headers (@@)\n"

    def test_malformed_diff(self, tmp_path, capsys):
        """Test parse failures exit with the invalid-diff code."""
        diff_file = self.write_diff(tmp_path, MALFORMED_DIFF)

        assert self.run_cli(diff_file) == EXIT_INVALID_DIFF
        assert "Invalid hunk header at line 3" in capsys.readouterr().err

    def test_invalid_arguments(self, capsys):
        """Test configuration errors exit with the usage code."""
        assert self.run_cli("--max-files", "-1") == EXIT_USAGE
        assert "Configuration error" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        """Test unreadable input exits with the usage code."""
        assert self.run_cli(str(tmp_path / "missing.diff")) == EXIT_USAGE
        assert "Cannot read" in capsys.readouterr().err

    @patch("pr_pilot.cli_handler.setup_logging")
    def test_setup_logging_failure(self, mock_setup_logging, tmp_path):
        """Test logging setup errors exit with the usage code."""
        mock_setup_logging.side_effect = OSError("read-only file system")
        diff_file = self.write_diff(tmp_path, SIMPLE_DIFF)

        assert self.run_cli(diff_file) == EXIT_USAGE
        mock_setup_logging.assert_called_once_with(level="ERROR", format_type="text", log_file=None)
