class TaskTrackError(Exception):
    """Base exception for all tasktrack errors."""
    pass

class RecoverableError(TaskTrackError):
    """An error that can be recovered from without data loss."""
    pass

class FatalError(TaskTrackError):
    """An error that requires application termination or major intervention."""
    pass

class CorruptionError(FatalError):
    """Corrupted Data Error - from syntax errors in data formats, to records that fail validation"""
    pass

class ConfigError(FatalError):
    """The configuration file could not be read or is invalid."""
    pass

class FileOperationError(RecoverableError):
    """File operation failed but can be retried."""
    pass

class NotFoundError(RecoverableError):
    """A mutating call referenced a project or task that does not exist."""

    def __init__(self, message: str, project: str = None, task_id: str = None):
        super().__init__(message)
        self.project = project
        self.task_id = task_id
