"""Root test configuration: runtime artifact cleanup and logging reset"""

import shutil
from pathlib import Path

import pytest
import structlog


_PROJECT_ROOT = Path(__file__).parent.parent

_CLEANUP_FILES = ["blockpress.db", "test.db"]
_CLEANUP_DIRS = ["dist"]


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove DB files and output directories created during the test session."""
    yield
    for name in _CLEANUP_FILES:
        p = _PROJECT_ROOT / name
        if p.exists():
            p.unlink()
    for name in _CLEANUP_DIRS:
        p = _PROJECT_ROOT / name
        if p.exists():
            shutil.rmtree(p)


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI commands and library imports configure structlog globally; start and end each test unconfigured."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()
