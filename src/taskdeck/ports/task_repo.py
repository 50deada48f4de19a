"""Task repository interface."""

from typing import Protocol

from taskdeck.core.filters import FetchRequest, TaskPage
from taskdeck.core.submission import TaskDraft
from taskdeck.core.tasks import Task


class TaskRepositoryError(Exception):
    """Raised when the task backend cannot fulfil a request."""

    pass


class TaskNotFoundError(TaskRepositoryError):
    """Raised when a task id is unknown to the backend."""

    pass


class TaskRepository(Protocol):
    """Interface for the remote task store."""

    def fetch_page(self, request: FetchRequest) -> TaskPage:
        """Fetch one page of tasks for a filter selection."""
        ...

    def create(self, draft: TaskDraft) -> Task:
        """Create a task and return it as stored."""
        ...

    def update(self, task_id: str, draft: TaskDraft) -> Task:
        """Replace a task's editable fields and return it as stored."""
        ...

    def set_completion(self, task_id: str, is_completed: bool) -> Task:
        """Toggle the completion flag and return the task as stored."""
        ...

    def delete(self, task_id: str) -> None:
        """Delete a task."""
        ...
