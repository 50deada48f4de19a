"""Tests for the command line interface."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from taskdeck.cli import main
from taskdeck.config import Config

NOW = "2026-04-01T12:00:00+03:00"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def config():
    config = Config(timezone="Europe/Moscow")
    with patch("taskdeck.cli.load_config", return_value=config):
        yield config


class TestParse:
    def test_clean_title(self, runner):
        result = runner.invoke(main, ["parse", "Задача !1 !before 24.04.2026", "--now", NOW])
        assert result.exit_code == 0
        assert "Title:    Задача" in result.output
        assert "Priority: CRITICAL" in result.output
        assert "Deadline: 2026-04-24T00:00:00+03:00" in result.output

    def test_json(self, runner):
        result = runner.invoke(main, ["parse", "Report !2", "--now", NOW, "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data == {"title": "Report", "priority": "HIGH", "deadline": None, "errors": []}

    def test_errors_exit_nonzero(self, runner):
        result = runner.invoke(main, ["parse", "Report !before 01.01.2000", "--now", NOW])
        assert result.exit_code == 1
        assert "!before 01.01.2000: invalid or past macro deadline" in result.output
        assert "Title:    Report !before 01.01.2000" in result.output

    def test_tz_override(self, runner):
        result = runner.invoke(
            main, ["parse", "Report !before 24.04.2026", "--now", NOW, "--tz", "UTC", "--json"]
        )
        assert json.loads(result.output)["deadline"] == "2026-04-24T00:00:00+00:00"

    def test_bad_tz(self, runner):
        result = runner.invoke(main, ["parse", "Report", "--tz", "Nowhere/Land"])
        assert result.exit_code == 2
        assert "Unknown timezone" in result.output

    def test_bad_now(self, runner):
        result = runner.invoke(main, ["parse", "Report", "--now", "yesterday"])
        assert result.exit_code != 0


class TestStatus:
    def test_active_without_deadline(self, runner):
        result = runner.invoke(main, ["status", "--now", NOW])
        assert result.output.strip() == "ACTIVE"

    def test_overdue(self, runner):
        result = runner.invoke(main, ["status", "--deadline", "2026-03-31T00:00", "--now", NOW])
        assert result.output.strip() == "OVERDUE"

    def test_late(self, runner):
        result = runner.invoke(
            main,
            ["status", "--deadline", "2026-03-31T00:00", "--completed-at", "2026-03-31T10:00", "--now", NOW],
        )
        assert result.output.strip() == "LATE"

    def test_completed_flag_without_time(self, runner):
        result = runner.invoke(
            main, ["status", "--deadline", "2026-03-31T00:00", "--completed", "--now", NOW]
        )
        assert result.output.strip() == "COMPLETED"

    def test_late_unavailable_without_tracking(self, runner, config):
        config.completion_tracking = False
        result = runner.invoke(
            main,
            ["status", "--deadline", "2026-03-31T00:00", "--completed-at", "2026-03-31T10:00", "--now", NOW],
        )
        assert result.output.strip() == "COMPLETED"


class TestConfigCommand:
    def test_shows_values(self, runner, tmp_path):
        with patch("taskdeck.cli.CONFIG_FILE", tmp_path / "taskdeck.conf"):
            result = runner.invoke(main, ["config"])
        assert result.exit_code == 0
        assert "(not found)" in result.output
        assert "Europe/Moscow" in result.output
        assert "Completion tracking: on" in result.output


PAGE = {
    "items": [
        {
            "id": "A",
            "title": "Write report",
            "deadline": "2026-04-05T21:00:00Z",
            "is_completed": False,
            "priority": "HIGH",
            "created_at": "2026-03-01T09:00:00Z",
        },
        {
            "id": "B",
            "title": "Pay rent",
            "deadline": "2026-03-30T21:00:00Z",
            "is_completed": True,
            "priority": "CRITICAL",
            "created_at": "2026-03-01T09:00:00Z",
            "completed_at": "2026-03-31T10:00:00Z",
        },
        {
            "id": "C",
            "title": "Call bank",
            "deadline": "2026-03-30T21:00:00Z",
            "is_completed": False,
            "priority": "LOW",
            "created_at": "2026-03-01T09:00:00Z",
        },
    ],
    "meta": {"page": 1, "page_size": 10, "total": 3, "total_pages": 1},
}


class TestList:
    def test_statuses(self, runner):
        result = runner.invoke(main, ["list", "--now", NOW], input=json.dumps(PAGE))
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "[ACTIVE] Write report (due 2026-04-06 00:00)",
            "[LATE] Pay rent (due 2026-03-31 00:00)",
            "[OVERDUE] Call bank (due 2026-03-31 00:00)",
            "Page 1 of 1",
        ]

    def test_json(self, runner):
        result = runner.invoke(main, ["list", "--now", NOW, "--json"], input=json.dumps(PAGE))
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [t["display_status"] for t in data["items"]] == ["ACTIVE", "LATE", "OVERDUE"]
        assert data["items"][1]["completed_at"] == "2026-03-31T10:00:00Z"
        assert data["items"][0]["priority"] == "HIGH"
        assert data["total_pages"] == 1

    def test_reads_file(self, runner, tmp_path):
        dump = tmp_path / "page.json"
        dump.write_text(json.dumps(PAGE))
        result = runner.invoke(main, ["list", str(dump), "--now", NOW])
        assert result.exit_code == 0
        assert "[OVERDUE] Call bank" in result.output

    def test_degraded_never_late(self, runner, config):
        config.completion_tracking = False
        result = runner.invoke(main, ["list", "--now", NOW], input=json.dumps(PAGE))
        assert "[COMPLETED] Pay rent (due 2026-03-31 00:00)" in result.output

    def test_empty_page(self, runner):
        result = runner.invoke(main, ["list", "--now", NOW], input="{}")
        assert result.exit_code == 0
        assert result.output.strip() == "No tasks."

    @pytest.mark.parametrize(
        "dump",
        ["{not json", '{"items": [{"id": 1}]}', "[]", '{"items": [{"id": 1, "title": "x", "created_at": "soon"}]}'],
    )
    def test_malformed_input(self, runner, dump):
        result = runner.invoke(main, ["list", "--now", NOW], input=dump)
        assert result.exit_code == 1
        assert "Malformed task page" in result.output
