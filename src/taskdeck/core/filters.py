"""Filter selection and paged result accumulation - pure, no I/O."""

from dataclasses import dataclass, field, replace
from enum import Enum

from .status import Status
from .tasks import Priority, Task


class SortField(Enum):
    CREATED_AT = "created_at"
    DEADLINE = "deadline"
    PRIORITY = "priority"


class SortOrder(Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class FilterSelection:
    """What the user asked to see. Every field is optional."""

    status: Status | None = None
    priority: Priority | None = None
    sort_by: SortField | None = None
    sort_order: SortOrder | None = None

    @property
    def is_empty(self) -> bool:
        return self == FilterSelection()


@dataclass(frozen=True)
class TaskPage:
    """One page of tasks plus the server's pagination meta."""

    items: list[Task]
    page: int
    page_size: int
    total: int
    total_pages: int

    @classmethod
    def from_api(cls, data: dict) -> "TaskPage":
        meta = data.get("meta", {})
        items = [Task.from_api(t) for t in data.get("items") or []]
        return cls(
            items=items,
            page=meta.get("page", 1),
            page_size=meta.get("page_size", len(items)),
            total=meta.get("total", len(items)),
            total_pages=meta.get("total_pages", 1),
        )


@dataclass(frozen=True)
class FetchRequest:
    """A page fetch, tagged with the filter generation it was issued under."""

    generation: int
    selection: FilterSelection
    page: int
    page_size: int

    def to_query(self) -> dict[str, str]:
        """Query parameters for the remote task listing."""
        query = {}
        if self.selection.status:
            query["status"] = self.selection.status.value
        if self.selection.priority:
            query["priority"] = self.selection.priority.value
        if self.selection.sort_by:
            query["sort_by"] = self.selection.sort_by.value
        if self.selection.sort_order:
            query["sort_order"] = self.selection.sort_order.value
        query["page"] = str(self.page)
        query["page_size"] = str(self.page_size)
        return query


@dataclass
class TaskFilterState:
    """
    Current filter selection plus the tasks accumulated under it.

    Any change to the selection starts a new generation: the cursor goes back
    to page 1 and accumulated tasks are dropped at once. Results for requests
    from an older generation are discarded when they arrive. Within one
    generation pages are appended in arrival order, duplicates included.

    Not thread-safe; owned and driven by a single controller.
    """

    page_size: int = 10
    selection: FilterSelection = field(default_factory=FilterSelection)
    tasks: list[Task] = field(default_factory=list)
    generation: int = 0
    page: int = 0
    total_pages: int | None = None
    pending: FetchRequest | None = None

    def apply(self, **delta) -> FetchRequest:
        """Merge a partial selection change and start over from page 1."""
        return self._restart(replace(self.selection, **delta))

    def reset(self) -> FetchRequest:
        """Clear all filters and start over from page 1."""
        return self._restart(FilterSelection())

    def refresh(self) -> FetchRequest:
        """Reload from page 1 under the current selection."""
        return self._restart(self.selection)

    def _restart(self, selection: FilterSelection) -> FetchRequest:
        self.selection = selection
        self.generation += 1
        self.page = 0
        self.total_pages = None
        self.tasks = []
        return self._issue(1)

    def _issue(self, page: int) -> FetchRequest:
        self.pending = FetchRequest(
            generation=self.generation,
            selection=self.selection,
            page=page,
            page_size=self.page_size,
        )
        return self.pending

    @property
    def has_more(self) -> bool:
        return self.total_pages is None or self.page < self.total_pages

    def next_page(self) -> FetchRequest | None:
        """Request the following page, or None if busy or exhausted."""
        if self.pending is not None or not self.has_more:
            return None
        return self._issue(self.page + 1)

    def is_current(self, request: FetchRequest) -> bool:
        return request == self.pending

    def receive(self, request: FetchRequest, page: TaskPage) -> bool:
        """Apply a fetched page. Returns False if the request was superseded."""
        if not self.is_current(request):
            return False
        self.pending = None
        if request.page == 1:
            self.tasks = list(page.items)
        else:
            self.tasks.extend(page.items)
        self.page = request.page
        self.total_pages = page.total_pages
        return True

    def fail(self, request: FetchRequest) -> None:
        """Forget a failed request so it can be retried."""
        if self.is_current(request):
            self.pending = None

    def replace_task(self, task: Task) -> bool:
        for i, existing in enumerate(self.tasks):
            if existing.id == task.id:
                self.tasks[i] = task
                return True
        return False

    def remove_task(self, task_id: str) -> Task | None:
        for i, existing in enumerate(self.tasks):
            if existing.id == task_id:
                return self.tasks.pop(i)
        return None
