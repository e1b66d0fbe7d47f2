"""
tasktrack - persistent project and task tracking with blocking dependencies.

Projects are stored one JSON record per project. Tasks inside a project can
block each other; completing a task releases the tasks waiting on it.
"""

from .version import VERSION
from .models import (
    TaskStatus,
    ProjectStatus,
    Task,
    Project,
)
from .recovery import (
    TaskTrackError,
    NotFoundError,
    CorruptionError,
    FileOperationError,
)
from .data import ProjectStore
from .engine import TaskGraphEngine, StatusChange

__version__ = VERSION

__all__ = [
    "VERSION",
    "TaskStatus",
    "ProjectStatus",
    "Task",
    "Project",
    "TaskTrackError",
    "NotFoundError",
    "CorruptionError",
    "FileOperationError",
    "ProjectStore",
    "TaskGraphEngine",
    "StatusChange",
]
