"""Ports - interfaces/protocols for external dependencies."""

from .task_repo import TaskRepository, TaskRepositoryError, TaskNotFoundError

__all__ = [
    "TaskRepository",
    "TaskRepositoryError",
    "TaskNotFoundError",
]
