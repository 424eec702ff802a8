"""
tasktrack - a local task tracker for personal, work and shopping tasks.

This package provides the task model, a blob-backed task store and the
TaskManager that keeps the collection and its filtered view.
"""

from .version import VERSION
from .models import (
    TaskCategory,
    TaskPriority,
    ShoppingItem,
    PersonalTask,
    WorkTask,
    ShoppingTask,
    Task,
)
from .manager import TaskManager

__version__ = VERSION

__all__ = [
    "VERSION",
    "TaskCategory",
    "TaskPriority",
    "ShoppingItem",
    "PersonalTask",
    "WorkTask",
    "ShoppingTask",
    "Task",
    "TaskManager",
]
