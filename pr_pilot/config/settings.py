"""
Configuration management for PR-Pilot.

Settings are plain dataclass fields populated from environment
variables, with a ``.env`` file loaded through python-dotenv.
"""

import os
from typing import Optional, List, Dict, Any
from dataclasses import dataclass, field
from dotenv import load_dotenv

from ..utils.exceptions import ConfigurationError

# Load environment variables from .env file
load_dotenv()


MAX_FILES_LIMIT = 1000
MAX_CONTEXT_LINES_LIMIT = 1000

DEFAULT_EXCLUDE_PATTERNS: List[str] = [
    "**/*.env",
    "**/*.env.*",
    "**/secrets/**",
    "**/dist/**",
    "**/build/**",
    "**/node_modules/**",
    "**/*.min.js",
    "**/*.min.css",
    "**/package-lock.json",
    "**/yarn.lock",
    "**/.git/**",
    "**/coverage/**",
    "**/*.log",
    "**/tmp/**",
    "**/temp/**"
]


def parse_pattern_list(value: str) -> List[str]:
    """Split a comma-separated pattern list, dropping blank entries."""
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults and are validated on
    instantiation.
    """

    # Diff processing
    max_files: int = field(default=20)
    context_lines: int = field(default=60)
    exclude_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))

    # Logging Configuration
    log_level: str = field(default="INFO")
    log_format: str = field(default="text")
    log_file: Optional[str] = field(default=None)

    def __post_init__(self):
        """Validate settings after initialization."""
        if not 0 <= self.max_files <= MAX_FILES_LIMIT:
            raise ConfigurationError(
                f"max_files must be between 0 and {MAX_FILES_LIMIT}",
                config_key="max_files",
                config_value=str(self.max_files)
            )

        if not 0 <= self.context_lines <= MAX_CONTEXT_LINES_LIMIT:
            raise ConfigurationError(
                f"context_lines must be between 0 and {MAX_CONTEXT_LINES_LIMIT}",
                config_key="context_lines",
                config_value=str(self.context_lines)
            )

        if not all(isinstance(pattern, str) for pattern in self.exclude_patterns):
            raise ConfigurationError("exclude_patterns must be a list of strings", config_key="exclude_patterns")

        self.log_level = self.log_level.upper()
        if self.log_level not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            raise ConfigurationError(
                "log_level must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL",
                config_key="log_level",
                config_value=self.log_level
            )

        self.log_format = self.log_format.lower()
        if self.log_format not in ["text", "json"]:
            raise ConfigurationError(
                "log_format must be one of: text, json",
                config_key="log_format",
                config_value=self.log_format
            )

    @classmethod
    def from_env(cls, **kwargs: Any) -> "Settings":
        """Create Settings instance from environment variables with optional overrides."""
        env_vars: Dict[str, Any] = {}

        env_mapping = {
            "PR_PILOT_MAX_FILES": "max_files",
            "PR_PILOT_CONTEXT_LINES": "context_lines",
            "PR_PILOT_EXCLUDE_PATTERNS": "exclude_patterns",
            "LOG_LEVEL": "log_level",
            "LOG_FORMAT": "log_format",
            "LOG_FILE": "log_file"
        }

        for env_var, field_name in env_mapping.items():
            if env_var in os.environ:
                env_vars[field_name] = os.environ[env_var]

        for key, value in env_vars.items():
            if key in ["max_files", "context_lines"]:
                try:
                    env_vars[key] = int(value)
                except ValueError as e:
                    raise ConfigurationError(
                        f"{key} must be an integer",
                        config_key=key,
                        config_value=value
                    ) from e
            elif key == "exclude_patterns":
                env_vars[key] = parse_pattern_list(value)

        env_vars.update(kwargs)

        return cls(**env_vars)
