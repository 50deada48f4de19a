"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum


class Priority(Enum):
    """Task priority, ordered from least to most pressing."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    def __lt__(self, other: "Priority") -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: "Priority") -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: "Priority") -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: "Priority") -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def parse(cls, value: str) -> "Priority":
        """Look up a priority by wire value, case-insensitive."""
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown priority: {value!r}") from None


_PRIORITY_RANK = {
    Priority.LOW: 0,
    Priority.MEDIUM: 1,
    Priority.HIGH: 2,
    Priority.CRITICAL: 3,
}


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 API timestamp into an aware UTC datetime."""
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class Task:
    """A task as returned by the remote API.

    Display status is never stored here; see ``taskdeck.core.status``.
    ``remote_status`` keeps whatever the server sent, for reference only.
    """

    id: str
    title: str
    priority: Priority
    created_at: datetime
    deadline: datetime | None = None
    is_completed: bool = False
    description: str | None = None
    updated_at: datetime | None = None
    completed_at: datetime | None = None
    remote_status: str | None = None

    def with_completion(self, is_completed: bool, now: datetime) -> "Task":
        """Copy with the completion flag toggled at ``now``.

        Completing records ``now`` as the completion instant; un-completing
        clears it.
        """
        return replace(
            self,
            is_completed=is_completed,
            completed_at=now if is_completed else None,
            updated_at=now,
        )

    @classmethod
    def from_api(cls, data: dict) -> "Task":
        """Create Task from an API task record."""
        return cls(
            id=str(data["id"]),
            title=data["title"],
            description=data.get("description"),
            deadline=parse_timestamp(data.get("deadline")),
            is_completed=bool(data.get("is_completed", False)),
            priority=Priority.parse(data.get("priority") or Priority.MEDIUM.value),
            created_at=parse_timestamp(data["created_at"]),
            updated_at=parse_timestamp(data.get("updated_at")),
            completed_at=parse_timestamp(data.get("completed_at")),
            remote_status=data.get("status"),
        )

    def to_api(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "deadline": format_timestamp(self.deadline),
            "is_completed": self.is_completed,
            "priority": self.priority.value,
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
            "completed_at": format_timestamp(self.completed_at),
        }
