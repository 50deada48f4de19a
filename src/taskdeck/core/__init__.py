"""Functional core - pure business logic with no I/O."""

from .tasks import Task, Priority
from .macros import ParseResult, MacroError, PriorityDirective, DeadlineDirective, parse
from .status import Status, StatusResolver, resolve
from .filters import FilterSelection, SortField, SortOrder, TaskPage, FetchRequest, TaskFilterState
from .submission import TaskForm, TaskDraft, Submission, prepare_submission

__all__ = [
    # Tasks
    "Task",
    "Priority",
    # Macros
    "ParseResult",
    "MacroError",
    "PriorityDirective",
    "DeadlineDirective",
    "parse",
    # Status
    "Status",
    "StatusResolver",
    "resolve",
    # Filters
    "FilterSelection",
    "SortField",
    "SortOrder",
    "TaskPage",
    "FetchRequest",
    "TaskFilterState",
    # Submission
    "TaskForm",
    "TaskDraft",
    "Submission",
    "prepare_submission",
]
