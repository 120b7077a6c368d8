"""Tests for the command line interface."""

import json
from datetime import date
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from focusflow.adapters.json_task_store import JsonTaskStore
from focusflow.cli import main
from focusflow.config import Config
from focusflow.core.recurrence import Recurrence
from focusflow.core.tasks import Task


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config(tmp_path):
    return Config(tasks_file=str(tmp_path / "tasks.json"), preview_count=3)


@pytest.fixture
def store(config):
    return JsonTaskStore(config.tasks_path)


class TestNext:
    def test_daily(self, runner):
        result = runner.invoke(main, ["next", "2024-01-15", "--type", "daily", "--interval", "3"])
        assert result.exit_code == 0
        assert result.output.strip() == "Thu 2024-01-18"

    def test_weekly_days_by_name(self, runner):
        result = runner.invoke(
            main, ["next", "2024-01-17", "-t", "weekly", "-i", "2", "--days", "mon,wed", "--json"]
        )
        assert result.exit_code == 0
        assert json.loads(result.output) == {"status": "next", "date": "2024-01-29"}

    def test_series_ended(self, runner):
        result = runner.invoke(main, ["next", "2024-01-15", "-t", "daily", "--until", "2024-01-15"])
        assert result.exit_code == 0
        assert "Series ended." in result.output

    def test_invalid_anchor(self, runner):
        result = runner.invoke(main, ["next", "yesterday", "-t", "daily"])
        assert result.exit_code == 1
        assert "Invalid anchor date" in result.output

    def test_unknown_weekday(self, runner):
        result = runner.invoke(main, ["next", "2024-01-15", "-t", "weekly", "--days", "funday"])
        assert result.exit_code == 2

    def test_requires_rule(self, runner):
        result = runner.invoke(main, ["next", "2024-01-15"])
        assert result.exit_code == 2

    def test_rule_file(self, runner, tmp_path):
        rule_file = tmp_path / "rule.json"
        rule_file.write_text(json.dumps({"type": "monthly", "interval": 1, "dayOfMonth": 31}))
        result = runner.invoke(main, ["next", "2024-01-31", "--rule", str(rule_file)])
        assert result.exit_code == 0
        assert result.output.strip() == "Thu 2024-02-29"

    def test_rule_file_with_unknown_type(self, runner, tmp_path):
        rule_file = tmp_path / "rule.json"
        rule_file.write_text(json.dumps({"type": "hourly", "interval": 1}))
        result = runner.invoke(main, ["next", "2024-01-31", "--rule", str(rule_file)])
        assert result.exit_code == 1
        assert "Unrecognized recurrence type" in result.output

    def test_corrupt_rule_file(self, runner, tmp_path):
        rule_file = tmp_path / "rule.json"
        rule_file.write_text("[1, 2")
        result = runner.invoke(main, ["next", "2024-01-31", "--rule", str(rule_file)])
        assert result.exit_code == 1
        assert "Invalid rule file" in result.output


class TestDescribe:
    def test_short(self, runner, config):
        with patch("focusflow.cli.load_config", return_value=config):
            result = runner.invoke(main, ["describe", "-t", "weekly", "-i", "2"])
        assert result.output.strip() == "Every 2 weeks"

    def test_long(self, runner, config):
        with patch("focusflow.cli.load_config", return_value=config):
            result = runner.invoke(
                main, ["describe", "-t", "weekly", "--days", "fri,mon", "--count", "4", "--long"]
            )
        assert result.output.strip() == "Repeats weekly on Mon, Fri for 4 times"


class TestPreview:
    def test_uses_configured_count(self, runner, config):
        with patch("focusflow.cli.load_config", return_value=config):
            result = runner.invoke(main, ["preview", "2024-01-15", "-t", "daily", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == ["2024-01-16", "2024-01-17", "2024-01-18"]

    def test_respects_cap_and_completed(self, runner, config):
        with patch("focusflow.cli.load_config", return_value=config):
            result = runner.invoke(
                main,
                ["preview", "2024-01-15", "-t", "daily", "--count", "4", "--completed", "3", "-n", "10"],
            )
        assert result.exit_code == 0
        assert "4. Tue 2024-01-16" in result.output
        assert "2024-01-17" not in result.output

    def test_invalid_rule(self, runner, config):
        with patch("focusflow.cli.load_config", return_value=config):
            result = runner.invoke(main, ["preview", "2024-01-15", "-t", "daily", "-i", "0"])
        assert result.exit_code == 1
        assert "interval" in result.output


class TestTasks:
    def test_empty(self, runner, config):
        with patch("focusflow.cli.load_config", return_value=config):
            result = runner.invoke(main, ["tasks"])
        assert result.exit_code == 0
        assert "No tasks." in result.output

    def test_lists_open_tasks_with_labels(self, runner, config, store):
        store.save(Task(id="b", title="Later", due_date=date(2024, 2, 1)))
        store.save(
            Task(
                id="a",
                title="Sooner",
                due_date=date(2024, 1, 15),
                recurrence=Recurrence(type="daily", interval=2),
            )
        )
        store.save(Task(id="c", title="Done", status="completed"))

        with patch("focusflow.cli.load_config", return_value=config):
            result = runner.invoke(main, ["tasks"])

        lines = result.output.strip().splitlines()
        assert len(lines) == 2
        assert "Sooner (due 2024-01-15) [Every 2 days]" in lines[0]
        assert "Later" in lines[1]

    def test_corrupt_store(self, runner, config):
        config.tasks_path.write_text("oops")
        with patch("focusflow.cli.load_config", return_value=config):
            result = runner.invoke(main, ["tasks"])
        assert result.exit_code == 1
        assert "Corrupt task file" in result.output


class TestComplete:
    def test_schedules_next(self, runner, config, store):
        store.save(
            Task(
                id="1",
                title="Pay rent",
                due_date=date(2024, 1, 31),
                recurrence=Recurrence(type="monthly", interval=1, day_of_month=31),
            )
        )

        with patch("focusflow.cli.load_config", return_value=config):
            result = runner.invoke(main, ["complete", "1", "--on", "2024-01-31"])

        assert result.exit_code == 0
        assert "Completed: Pay rent" in result.output
        assert "Next: Thu 2024-02-29" in result.output
        assert len(store.fetch_all()) == 2

    def test_reports_series_end(self, runner, config, store):
        store.save(
            Task(
                id="1",
                title="Last one",
                due_date=date(2024, 1, 15),
                recurrence=Recurrence(type="daily", end_after_occurrences=1),
            )
        )

        with patch("focusflow.cli.load_config", return_value=config):
            result = runner.invoke(main, ["complete", "1"])

        assert result.exit_code == 0
        assert "Completed all 1 occurrences" in result.output

    def test_unknown_task(self, runner, config):
        with patch("focusflow.cli.load_config", return_value=config):
            result = runner.invoke(main, ["complete", "missing"])
        assert result.exit_code == 1
        assert "No task with id missing" in result.output
