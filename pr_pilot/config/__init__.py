"""
Configuration module for PR-Pilot.
"""

from .settings import Settings, DEFAULT_EXCLUDE_PATTERNS

__all__ = ["Settings", "DEFAULT_EXCLUDE_PATTERNS"]
