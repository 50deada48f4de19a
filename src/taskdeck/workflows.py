"""Workflow layer between the task core and whatever front end drives it.

``TaskEditor`` handles create/edit submissions; ``TaskListController`` owns
the filter state and the accumulated task list. Both talk to the backend only
through a ``TaskRepository``.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .config import Config, load_config
from .core.filters import FetchRequest, TaskFilterState
from .core.status import Status, StatusResolver
from .core.submission import Submission, TaskForm, prepare_submission
from .core.tasks import Task
from .ports.task_repo import TaskRepository, TaskRepositoryError

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SubmissionOutcome:
    """What happened to a create/edit attempt."""

    task: Task | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.task is not None


class TaskEditor:
    """Creates and edits tasks from form input."""

    def __init__(self, repo: TaskRepository, config: Config | None = None):
        self.repo = repo
        self.config = config or load_config()

    def _prepare(self, form: TaskForm, now: datetime | None) -> Submission:
        return prepare_submission(
            form,
            now or utcnow(),
            self.config.tz,
            self.config.default_priority,
        )

    def create(self, form: TaskForm, now: datetime | None = None) -> SubmissionOutcome:
        """Validate the form and create the task if nothing blocks it."""
        submission = self._prepare(form, now)
        if not submission.ok:
            logger.info(f"Create blocked: {submission.messages()}")
            return SubmissionOutcome(errors=submission.messages())
        try:
            task = self.repo.create(submission.draft)
        except TaskRepositoryError as e:
            logger.error(f"Failed to create task: {e}")
            return SubmissionOutcome(errors=[str(e)])
        return SubmissionOutcome(task=task)

    def update(
        self, task_id: str, form: TaskForm, now: datetime | None = None
    ) -> SubmissionOutcome:
        """Validate the form and update the task if nothing blocks it."""
        submission = self._prepare(form, now)
        if not submission.ok:
            logger.info(f"Update of {task_id} blocked: {submission.messages()}")
            return SubmissionOutcome(errors=submission.messages())
        try:
            task = self.repo.update(task_id, submission.draft)
        except TaskRepositoryError as e:
            logger.error(f"Failed to update task {task_id}: {e}")
            return SubmissionOutcome(errors=[str(e)])
        return SubmissionOutcome(task=task)


class TaskListController:
    """
    Drives the task list: filters, paging, completion toggles.

    Runs on a single logical thread. Fetches are tagged with the filter
    generation they were issued under, so a result arriving after the
    filters changed is dropped rather than shown.
    """

    def __init__(self, repo: TaskRepository, config: Config | None = None):
        self.repo = repo
        self.config = config or load_config()
        self.state = TaskFilterState(page_size=self.config.page_size)
        self.resolver = StatusResolver(self.config.completion_tracking)
        self.error: str | None = None
        self._missing_completion_reported = False

    @property
    def degraded(self) -> bool:
        return self.resolver.degraded

    @property
    def tasks(self) -> list[Task]:
        return self.state.tasks

    def start(self) -> None:
        """Report degraded status resolution once, then load the first page."""
        if self.degraded:
            logger.warning(
                "Task backend does not record completion time; "
                "LATE cannot be told apart from COMPLETED"
            )
        self.run(self.state.refresh())

    def run(self, request: FetchRequest | None) -> bool:
        """Fetch a page for ``request`` and apply it if still current."""
        if request is None:
            return False
        self.error = None
        try:
            page = self.repo.fetch_page(request)
        except TaskRepositoryError as e:
            logger.error(f"Failed to fetch page {request.page}: {e}")
            self.state.fail(request)
            if self.state.generation == request.generation:
                self.error = str(e)
            return False
        applied = self.state.receive(request, page)
        if not applied:
            logger.debug(f"Dropped stale page {request.page} (generation {request.generation})")
        else:
            self._check_completion_instants(page.items)
        return applied

    def _check_completion_instants(self, tasks: list[Task]) -> None:
        if self.degraded or self._missing_completion_reported:
            return
        missing = [t.id for t in tasks if t.is_completed and t.completed_at is None]
        if missing:
            logger.warning(
                f"Completed tasks without a completed_at instant (e.g. {missing[0]}); "
                "they are shown as COMPLETED, never LATE"
            )
            self._missing_completion_reported = True

    def apply_filter(self, **delta) -> bool:
        return self.run(self.state.apply(**delta))

    def clear_filters(self) -> bool:
        return self.run(self.state.reset())

    def refresh(self) -> bool:
        return self.run(self.state.refresh())

    def load_next_page(self) -> bool:
        return self.run(self.state.next_page())

    def set_completion(self, task_id: str, is_completed: bool) -> Task | None:
        """Toggle completion remotely and swap the stored copy into the list."""
        self.error = None
        try:
            task = self.repo.set_completion(task_id, is_completed)
        except TaskRepositoryError as e:
            logger.error(f"Failed to update completion of {task_id}: {e}")
            self.error = str(e)
            return None
        self.state.replace_task(task)
        return task

    def delete(self, task_id: str) -> bool:
        """Remove a task from the list at once; reload if the backend refuses."""
        self.error = None
        self.state.remove_task(task_id)
        try:
            self.repo.delete(task_id)
        except TaskRepositoryError as e:
            logger.error(f"Failed to delete {task_id}: {e}")
            self.refresh()
            self.error = str(e)
            return False
        return True

    def rows(self, now: datetime | None = None) -> list[tuple[Task, Status]]:
        """Tasks paired with display status, all resolved at one instant."""
        return self.resolver.resolve_all(self.state.tasks, now or utcnow())
