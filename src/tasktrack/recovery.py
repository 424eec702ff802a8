class TaskError(Exception):
    """Base exception for all tasktrack errors.

    Every error carries a human readable ``description`` and a
    ``recovery_suggestion``. Both are meant for display only.
    """

    description = "Task operation failed"
    recovery_suggestion = "Please try again"

    def __init__(self, message: str = None):
        super().__init__(message or self.description)

class RecoverableError(TaskError):
    """An error that can be recovered from without data loss."""
    pass

class FatalError(TaskError):
    """An error that requires application termination or major intervention."""
    pass

class CorruptionError(FatalError):
    """Corrupted Data Error - from syntax errors in data formats, to just unknown data"""
    description = "Stored data is corrupted"
    recovery_suggestion = "Restore the data file or remove it to start over"

class FileOperationError(RecoverableError):
    """File operation failed but can be retried."""
    description = "File operation failed"
    recovery_suggestion = "Check file permissions and try again"

class EmptyTitleError(RecoverableError):
    """A task was added without a title."""
    description = "Task title cannot be empty"
    recovery_suggestion = "Please enter a valid title for your task"

class InvalidDataError(RecoverableError):
    """Task data does not fit the operation (wrong variant, duplicate id...)."""
    description = "Invalid task data provided"
    recovery_suggestion = "Please check your input and try again"

class TaskNotFoundError(RecoverableError):
    """No task with the requested identity exists."""
    description = "Task not found"
    recovery_suggestion = "The task may have been deleted or moved"

class SaveFailedError(RecoverableError):
    """The task collection could not be encoded or written."""
    description = "Failed to save task"
    recovery_suggestion = "Please try again or restart the app"

class LoadFailedError(RecoverableError):
    """The task collection could not be read back."""
    description = "Failed to load tasks"
    recovery_suggestion = "Please try again or restart the app"
