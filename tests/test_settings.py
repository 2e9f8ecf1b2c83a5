"""
Tests for configuration loading and validation
"""
import pytest

from pr_pilot.config import DEFAULT_EXCLUDE_PATTERNS, Settings
from pr_pilot.config.settings import parse_pattern_list
from pr_pilot.utils.exceptions import ConfigurationError

ENV_VARS = [
    "PR_PILOT_MAX_FILES",
    "PR_PILOT_CONTEXT_LINES",
    "PR_PILOT_EXCLUDE_PATTERNS",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FILE",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every mapped environment variable."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    """Test cases for Settings defaults and validation"""

    def test_defaults(self):
        """Test default values"""
        settings = Settings()

        assert settings.max_files == 20
        assert settings.context_lines == 60
        assert settings.exclude_patterns == DEFAULT_EXCLUDE_PATTERNS
        assert settings.log_level == "INFO"
        assert settings.log_format == "text"
        assert settings.log_file is None

    def test_default_patterns_are_copied(self):
        """Test instances never share the default pattern list"""
        settings = Settings()
        settings.exclude_patterns.append("extra/**")

        assert "extra/**" not in DEFAULT_EXCLUDE_PATTERNS
        assert len(DEFAULT_EXCLUDE_PATTERNS) == 15

    def test_log_options_are_normalized(self):
        """Test case normalization of log options"""
        settings = Settings(log_level="debug", log_format="JSON")

        assert settings.log_level == "DEBUG"
        assert settings.log_format == "json"

    @pytest.mark.parametrize("kwargs, key", [
        ({"max_files": -1}, "max_files"),
        ({"max_files": 1001}, "max_files"),
        ({"context_lines": -1}, "context_lines"),
        ({"log_level": "LOUD"}, "log_level"),
        ({"log_format": "xml"}, "log_format"),
        ({"exclude_patterns": ["ok", 3]}, "exclude_patterns"),
    ])
    def test_invalid_values(self, kwargs, key):
        """Test out-of-range and unknown values"""
        with pytest.raises(ConfigurationError) as exc_info:
            Settings(**kwargs)

        assert exc_info.value.error_code == "CONFIG_ERROR"
        assert exc_info.value.details["config_key"] == key


class TestFromEnv:
    """Test cases for Settings.from_env"""

    def test_empty_environment(self, clean_env):
        """Test defaults when nothing is set"""
        assert Settings.from_env() == Settings()

    def test_values_from_environment(self, clean_env):
        """Test every mapped variable"""
        clean_env.setenv("PR_PILOT_MAX_FILES", "5")
        clean_env.setenv("PR_PILOT_CONTEXT_LINES", "10")
        clean_env.setenv("PR_PILOT_EXCLUDE_PATTERNS", "docs/**, *.lock ,,")
        clean_env.setenv("LOG_LEVEL", "warning")
        clean_env.setenv("LOG_FORMAT", "json")
        clean_env.setenv("LOG_FILE", "/tmp/pr-pilot.log")

        settings = Settings.from_env()

        assert settings.max_files == 5
        assert settings.context_lines == 10
        assert settings.exclude_patterns == ["docs/**", "*.lock"]
        assert settings.log_level == "WARNING"
        assert settings.log_format == "json"
        assert settings.log_file == "/tmp/pr-pilot.log"

    def test_overrides_win(self, clean_env):
        """Test keyword overrides take precedence over the environment"""
        clean_env.setenv("PR_PILOT_MAX_FILES", "5")

        assert Settings.from_env(max_files=7).max_files == 7

    def test_non_integer_value(self, clean_env):
        """Test a non-numeric limit"""
        clean_env.setenv("PR_PILOT_MAX_FILES", "many")

        with pytest.raises(ConfigurationError) as exc_info:
            Settings.from_env()

        assert exc_info.value.details == {"config_key": "max_files", "config_value": "many"}

    def test_out_of_range_value(self, clean_env):
        """Test environment values go through validation"""
        clean_env.setenv("PR_PILOT_CONTEXT_LINES", "5000")

        with pytest.raises(ConfigurationError):
            Settings.from_env()


def test_parse_pattern_list():
    """Test splitting comma-separated patterns"""
    assert parse_pattern_list("a, b/**,,  ") == ["a", "b/**"]
    assert parse_pattern_list("") == []
