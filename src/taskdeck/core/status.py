"""Display status derivation - pure, no I/O."""

from datetime import datetime
from enum import Enum

from .tasks import Task


class Status(Enum):
    """Display status of a task. Derived at read time, never stored."""

    ACTIVE = "ACTIVE"
    OVERDUE = "OVERDUE"
    COMPLETED = "COMPLETED"
    LATE = "LATE"


def resolve(
    deadline: datetime | None,
    is_completed: bool,
    now: datetime,
    completed_at: datetime | None = None,
) -> Status:
    """
    Classify a task by deadline, completion and the current instant.

    Open tasks are ACTIVE until ``now`` passes the deadline (``now == deadline``
    is still ACTIVE), then OVERDUE. Completed tasks are LATE when
    ``completed_at`` falls after the deadline, otherwise COMPLETED.

    Without ``completed_at`` there is no way to tell LATE from COMPLETED, so
    LATE is never returned; ``now`` is not used as a stand-in.
    """
    if not is_completed:
        if deadline is None or now <= deadline:
            return Status.ACTIVE
        return Status.OVERDUE

    if deadline is None or completed_at is None:
        return Status.COMPLETED
    if completed_at <= deadline:
        return Status.COMPLETED
    return Status.LATE


class StatusResolver:
    """
    Resolves display status for tasks.

    ``completion_tracking`` says whether the task source records when
    completion happened. When it does not, the resolver runs degraded:
    ``completed_at`` is ignored and LATE is unreachable.
    """

    def __init__(self, completion_tracking: bool = True):
        self.completion_tracking = completion_tracking

    @property
    def degraded(self) -> bool:
        return not self.completion_tracking

    def resolve_task(self, task: Task, now: datetime) -> Status:
        completed_at = task.completed_at if self.completion_tracking else None
        return resolve(task.deadline, task.is_completed, now, completed_at)

    def resolve_all(self, tasks: list[Task], now: datetime) -> list[tuple[Task, Status]]:
        """Resolve every task against the same instant."""
        return [(t, self.resolve_task(t, now)) for t in tasks]
