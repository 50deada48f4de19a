"""Task form submission - macro precedence and validation, no I/O."""

from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo

from .macros import MacroError, parse
from .tasks import Priority, format_timestamp

MIN_TITLE_LENGTH = 4


@dataclass
class TaskForm:
    """Values as entered through the task form, title possibly holding macros."""

    title: str
    description: str | None = None
    priority: Priority | None = None
    deadline: datetime | None = None


@dataclass(frozen=True)
class TaskDraft:
    """A validated create/update payload."""

    title: str
    priority: Priority
    description: str | None = None
    deadline: datetime | None = None

    def to_api(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "deadline": format_timestamp(self.deadline),
            "priority": self.priority.value,
        }


@dataclass
class Submission:
    """Result of preparing a form for submission."""

    draft: TaskDraft | None
    macro_errors: list[MacroError] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.draft is not None

    def messages(self) -> list[str]:
        return [str(e) for e in self.macro_errors] + self.errors


def prepare_submission(
    form: TaskForm,
    now: datetime,
    tz: tzinfo | None = None,
    default_priority: Priority = Priority.MEDIUM,
) -> Submission:
    """
    Turn form input into a draft, or report why it cannot be submitted.

    The title is parsed again here, against whatever it says right now.
    Macro values replace the form's priority and deadline without notice.
    Any macro error blocks the submission; the form itself is left as is.
    Naive ``now`` and form deadlines are taken to be local to ``tz``.
    """
    tz = tz or now.tzinfo or timezone.utc
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    parsed = parse(form.title, now, tz)
    if not parsed.ok:
        return Submission(draft=None, macro_errors=list(parsed.errors))

    errors = []
    if len(parsed.title.strip()) < MIN_TITLE_LENGTH:
        errors.append(f"title must be at least {MIN_TITLE_LENGTH} characters")

    deadline = parsed.deadline or form.deadline
    if deadline is not None and deadline.tzinfo is None:
        deadline = deadline.replace(tzinfo=tz)
    if parsed.deadline is None and deadline is not None and deadline < now:
        errors.append("deadline cannot be in the past")

    if errors:
        return Submission(draft=None, errors=errors)

    return Submission(
        draft=TaskDraft(
            title=parsed.title.strip(),
            priority=parsed.priority or form.priority or default_priority,
            description=form.description or None,
            deadline=deadline,
        )
    )
