"""taskdeck CLI - inspect title macros, task status and dumped task pages."""

import json
import logging
import sys
from datetime import datetime
from zoneinfo import ZoneInfo

import click

from .config import CONFIG_FILE, Config, ConfigError, load_config
from .core.filters import TaskPage
from .core.macros import parse
from .core.status import StatusResolver, resolve
from .workflows import utcnow


def _parse_instant(value: str | None, tz: ZoneInfo) -> datetime | None:
    """ISO-8601 date/time from the command line; naive values are local."""
    if value is None:
        return None
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"not an ISO-8601 date/time: {value}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz)
    return dt


def _load_config(tz_name: str | None) -> tuple[Config, ZoneInfo]:
    try:
        config = load_config()
        if tz_name:
            config.timezone = tz_name
        return config, config.tz
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(2)


@click.group()
@click.version_option(package_name="taskdeck")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """taskdeck - task title macros and status."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command("parse")
@click.argument("title")
@click.option("--now", "now_str", default=None, help="Current time (ISO-8601), defaults to now")
@click.option("--tz", "tz_name", default=None, help="Time zone for macro dates")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def parse_cmd(title: str, now_str: str | None, tz_name: str | None, as_json: bool):
    """Parse macros out of a task TITLE."""
    _, tz = _load_config(tz_name)
    now = _parse_instant(now_str, tz) or utcnow()

    result = parse(title, now, tz)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "title": result.title,
                    "priority": result.priority.value if result.priority else None,
                    "deadline": result.deadline.isoformat() if result.deadline else None,
                    "errors": [
                        {"kind": e.kind.value, "token": e.token, "reason": e.reason}
                        for e in result.errors
                    ],
                },
                indent=2,
                ensure_ascii=False,
            )
        )
    else:
        click.echo(f"Title:    {result.title}")
        if result.priority:
            click.echo(f"Priority: {result.priority.value}")
        if result.deadline:
            click.echo(f"Deadline: {result.deadline.astimezone(tz).isoformat()}")
        for error in result.errors:
            click.echo(f"Error: {error}", err=True)

    if not result.ok:
        sys.exit(1)


@main.command("status")
@click.option("--deadline", "deadline_str", default=None, help="Task deadline (ISO-8601)")
@click.option("--completed-at", "completed_at_str", default=None,
              help="When the task was completed (ISO-8601); implies completed")
@click.option("--completed", is_flag=True, help="Task is completed")
@click.option("--now", "now_str", default=None, help="Current time (ISO-8601), defaults to now")
@click.option("--tz", "tz_name", default=None, help="Time zone for naive times")
def status_cmd(
    deadline_str: str | None,
    completed_at_str: str | None,
    completed: bool,
    now_str: str | None,
    tz_name: str | None,
):
    """Show the display status of a task."""
    config, tz = _load_config(tz_name)
    deadline = _parse_instant(deadline_str, tz)
    completed_at = _parse_instant(completed_at_str, tz)
    now = _parse_instant(now_str, tz) or utcnow()

    is_completed = completed or completed_at is not None
    if not config.completion_tracking:
        completed_at = None

    click.echo(resolve(deadline, is_completed, now, completed_at).value)


@main.command("list")
@click.argument("source", type=click.File("r"), default="-")
@click.option("--now", "now_str", default=None, help="Current time (ISO-8601), defaults to now")
@click.option("--tz", "tz_name", default=None, help="Time zone for displayed deadlines")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_cmd(source, now_str: str | None, tz_name: str | None, as_json: bool):
    """Show display status for a task page dumped from the API (file or stdin)."""
    config, tz = _load_config(tz_name)
    now = _parse_instant(now_str, tz) or utcnow()

    try:
        page = TaskPage.from_api(json.load(source))
    except (KeyError, ValueError, AttributeError) as e:
        click.echo(f"Malformed task page: {e!r}", err=True)
        sys.exit(1)

    rows = StatusResolver(config.completion_tracking).resolve_all(page.items, now)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "items": [
                        {**task.to_api(), "display_status": status.value}
                        for task, status in rows
                    ],
                    "page": page.page,
                    "total_pages": page.total_pages,
                },
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    if not rows:
        click.echo("No tasks.")
        return
    for task, status in rows:
        due = f" (due {task.deadline.astimezone(tz):%Y-%m-%d %H:%M})" if task.deadline else ""
        click.echo(f"[{status.value}] {task.title}{due}")
    click.echo(f"Page {page.page} of {page.total_pages}")


@main.command("config")
def config_cmd():
    """Show the effective configuration."""
    try:
        config = load_config()
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(2)

    click.echo(f"Config file:         {CONFIG_FILE}{'' if CONFIG_FILE.exists() else ' (not found)'}")
    click.echo(f"Timezone:            {config.timezone}")
    click.echo(f"Page size:           {config.page_size}")
    click.echo(f"Completion tracking: {'on' if config.completion_tracking else 'off (LATE unavailable)'}")
    click.echo(f"Default priority:    {config.default_priority.value}")
