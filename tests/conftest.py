"""Shared fixtures for tasktrack tests."""

import os
import tempfile

# Keep the file log out of the real home directory; must run before tasktrack is imported
os.environ.setdefault("TASKTRACK_LOG_DIR", tempfile.mkdtemp(prefix="tasktrack-logs-"))

from datetime import date

import pytest

from tasktrack.data.store import ProjectStore
from tasktrack.engine import TaskGraphEngine


@pytest.fixture
def today():
    return date(2024, 5, 17)


@pytest.fixture
def store(tmp_path, today):
    """A store rooted in a temporary directory with a fixed clock."""
    return ProjectStore(tmp_path / "tasks", tmp_path / "plans", clock=lambda: today)


@pytest.fixture
def engine(store):
    return TaskGraphEngine(store)
