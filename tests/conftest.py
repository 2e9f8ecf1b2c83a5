"""
Configuration and shared fixtures for the pytest test suite
"""
import logging
import sys
from pathlib import Path

import pytest

# Make the package importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(Path(__file__).parent))

from pr_pilot.utils.logger import JSONFormatter, TextFormatter  # noqa: E402

from fixtures import (  # noqa: E402
    BINARY_DIFF,
    NEW_FILE_DIFF,
    PACKAGE_DIFF,
    SIMPLE_DIFF,
    join_diffs,
)


@pytest.fixture
def simple_diff():
    """One modified file with a single hunk adding two lines"""
    return SIMPLE_DIFF


@pytest.fixture
def multi_file_diff():
    """src/app.js followed by package.json"""
    return join_diffs(SIMPLE_DIFF, PACKAGE_DIFF)


@pytest.fixture
def mixed_diff():
    """Modified, added and binary files in one diff"""
    return join_diffs(SIMPLE_DIFF, PACKAGE_DIFF, NEW_FILE_DIFF, BINARY_DIFF)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Drop handlers installed by setup_logging() during a test"""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, (JSONFormatter, TextFormatter)):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
