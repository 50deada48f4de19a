"""Title macro parsing - pure, no I/O.

A title may embed inline directives that override task fields:

    Buy milk !2 !before 24.04.2026

``!<digit>`` sets the priority (1 = critical ... 4 = low) and
``!before <DD.MM.YYYY>`` sets the deadline to the start of that day in the
user's time zone. Valid directives are stripped from the title; invalid ones
stay put and are reported as errors. Only the first directive of each kind
counts; repeats are left alone as plain text.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone, tzinfo
from enum import Enum

from .tasks import Priority

PRIORITY_LEVELS = {
    "1": Priority.CRITICAL,
    "2": Priority.HIGH,
    "3": Priority.MEDIUM,
    "4": Priority.LOW,
}

UNRECOGNIZED_PRIORITY = "unrecognized priority level"
INVALID_DEADLINE = "invalid or past macro deadline"

# "!" then a lone digit, or the word "before" with an optional date.
DIRECTIVE_RE = re.compile(
    r"!(?:(?P<digit>\d)(?!\d)"
    r"|before(?=\s|$)(?:\s+(?P<date>\d{2}[.-]\d{2}[.-]\d{4})(?!\d))?)"
)
DATE_RE = re.compile(r"(\d{2})([.-])(\d{2})\2(\d{4})")
WHITESPACE_RE = re.compile(r"\s+")


class DirectiveKind(Enum):
    PRIORITY = "priority"
    DEADLINE = "deadline"


@dataclass(frozen=True)
class PriorityDirective:
    """A ``!<digit>`` directive that was honored."""

    level: Priority
    span: tuple[int, int]


@dataclass(frozen=True)
class DeadlineDirective:
    """A ``!before <date>`` directive that was honored."""

    deadline: datetime
    span: tuple[int, int]


MacroDirective = PriorityDirective | DeadlineDirective


@dataclass(frozen=True)
class MacroError:
    """A directive that could not be applied."""

    kind: DirectiveKind
    token: str
    reason: str
    span: tuple[int, int]

    def __str__(self) -> str:
        return f"{self.token}: {self.reason}"


@dataclass
class ParseResult:
    """Outcome of parsing a title."""

    title: str
    priority: Priority | None = None
    deadline: datetime | None = None
    directives: list[MacroDirective] = field(default_factory=list)
    errors: list[MacroError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def parse_macro_date(text: str | None, tz: tzinfo) -> datetime | None:
    """Local midnight of a DD.MM.YYYY (or DD-MM-YYYY) date, as a UTC instant."""
    if not text:
        return None
    match = DATE_RE.fullmatch(text)
    if not match:
        return None
    day, _, month, year = match.groups()
    try:
        day_date = date(int(year), int(month), int(day))
    except ValueError:
        return None
    return datetime.combine(day_date, time.min, tzinfo=tz).astimezone(timezone.utc)


def parse(raw_title: str, now: datetime, tz: tzinfo | None = None) -> ParseResult:
    """
    Extract priority and deadline directives from a raw title.

    ``tz`` is the user's zone for interpreting dates (defaults to ``now``'s);
    a naive ``now`` is taken to be in it. Deadlines at or before ``now`` are
    rejected.
    Never raises: problems come back in ``ParseResult.errors``.
    """
    tz = tz or now.tzinfo or timezone.utc
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    result = ParseResult(title=raw_title)
    seen: set[DirectiveKind] = set()
    strip: list[tuple[int, int]] = []

    for found in DIRECTIVE_RE.finditer(raw_title):
        kind = DirectiveKind.PRIORITY if found.group("digit") else DirectiveKind.DEADLINE
        if kind in seen:
            continue
        seen.add(kind)
        span = found.span()

        match kind:
            case DirectiveKind.PRIORITY:
                level = PRIORITY_LEVELS.get(found.group("digit"))
                if level is None:
                    result.errors.append(
                        MacroError(kind, found.group(0), UNRECOGNIZED_PRIORITY, span)
                    )
                    continue
                result.priority = level
                result.directives.append(PriorityDirective(level, span))
            case DirectiveKind.DEADLINE:
                deadline = parse_macro_date(found.group("date"), tz)
                if deadline is None or deadline <= now:
                    result.errors.append(
                        MacroError(kind, found.group(0), INVALID_DEADLINE, span)
                    )
                    continue
                result.deadline = deadline
                result.directives.append(DeadlineDirective(deadline, span))
        strip.append(span)

    if strip:
        result.title = strip_spans(raw_title, strip)
    return result


def strip_spans(text: str, spans: list[tuple[int, int]]) -> str:
    """Remove character ranges from text, then collapse leftover whitespace."""
    for start, end in sorted(spans, reverse=True):
        text = text[:start] + " " + text[end:]
    return WHITESPACE_RE.sub(" ", text).strip()
