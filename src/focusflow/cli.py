"""FocusFlow CLI - recurring task scheduling."""

import json
import logging
import sys
from datetime import date
from pathlib import Path

import click

from .adapters.json_task_store import TaskStoreError
from .config import load_config
from .core.recurrence import (
    Invalid,
    Next,
    Recurrence,
    RecurrenceError,
    RecurrenceType,
    SeriesEnded,
    describe,
    next_occurrence,
    parse_date,
    upcoming,
    validate_recurrence,
)
from .core.summary import summarize
from .core.tasks import filter_open, sort_by_due
from .workflows import TaskAlreadyCompletedError, TaskNotFoundError, complete_task, get_store

WEEKDAY_NAMES = {"sun": 0, "mon": 1, "tue": 2, "wed": 3, "thu": 4, "fri": 5, "sat": 6}


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """FocusFlow - recurring task scheduling CLI."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _parse_days(value: str | None) -> tuple[int, ...]:
    """Parse "mon,wed" or "1,3" into weekday indices (0=Sunday)."""
    if not value:
        return ()
    days = []
    for part in value.split(","):
        part = part.strip().lower()
        if not part:
            continue
        if part.isdigit():
            days.append(int(part))
        elif part[:3] in WEEKDAY_NAMES:
            days.append(WEEKDAY_NAMES[part[:3]])
        else:
            raise click.BadParameter(f"Unknown weekday: {part}", param_hint="--days")
    return tuple(sorted(set(days)))


def _parse_cli_date(value: str, hint: str) -> date:
    try:
        parsed = parse_date(value)
    except RecurrenceError:
        parsed = None
    if parsed is None:
        raise click.BadParameter(f"Invalid date: {value} (expected YYYY-MM-DD)", param_hint=hint)
    return parsed


def rule_options(f):
    """Attach the recurrence rule options to a command."""
    options = [
        click.option("--rule", "rule_file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
                     help="JSON file holding a recurrence rule"),
        click.option("--type", "-t", "rule_type",
                     type=click.Choice([t.value for t in RecurrenceType]),
                     help="Recurrence unit"),
        click.option("--interval", "-i", type=int, default=1, show_default=True,
                     help="Repeat every N units"),
        click.option("--days", help="Weekdays for weekly rules, e.g. mon,wed,fri"),
        click.option("--day-of-month", type=int, help="Day of month (1-31)"),
        click.option("--month", "month_of_year", type=int, help="Month of year (1-12)"),
        click.option("--until", "end_date", help="Last allowed date (YYYY-MM-DD)"),
        click.option("--count", "end_after", type=int, help="Stop after N occurrences"),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def _build_rule(
    rule_file: Path | None,
    rule_type: str | None,
    interval: int,
    days: str | None,
    day_of_month: int | None,
    month_of_year: int | None,
    end_date: str | None,
    end_after: int | None,
) -> Recurrence:
    """Build a rule from --rule JSON or from the individual options."""
    if rule_file:
        try:
            data = json.loads(rule_file.read_text())
            if not isinstance(data, dict):
                raise RecurrenceError("rule file must hold a JSON object")
            return Recurrence.from_dict(data)
        except (json.JSONDecodeError, RecurrenceError) as e:
            _fail(f"Invalid rule file {rule_file}: {e}")

    if not rule_type:
        raise click.UsageError("Provide --type or --rule")

    return Recurrence(
        type=rule_type,
        interval=interval,
        days_of_week=_parse_days(days),
        day_of_month=day_of_month,
        month_of_year=month_of_year,
        end_date=_parse_cli_date(end_date, "--until") if end_date else None,
        end_after_occurrences=end_after,
    )


@main.command("next")
@click.argument("current")
@rule_options
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def next_cmd(current: str, as_json: bool, **rule_args):
    """Show the occurrence after CURRENT (YYYY-MM-DD)."""
    rule = _build_rule(**rule_args)
    result = next_occurrence(current, rule)

    match result:
        case Next(date=next_day):
            if as_json:
                click.echo(json.dumps({"status": "next", "date": next_day.isoformat()}))
            else:
                click.echo(next_day.strftime("%a %Y-%m-%d"))
        case SeriesEnded():
            if as_json:
                click.echo(json.dumps({"status": "ended", "date": None}))
            else:
                click.echo("Series ended.")
        case Invalid(reason=reason):
            _fail(reason)


@main.command("describe")
@rule_options
@click.option("--long", "long_form", is_flag=True, help="Show the full summary")
def describe_cmd(long_form: bool, **rule_args):
    """Describe a recurrence rule."""
    config = load_config()
    rule = _build_rule(**rule_args)
    if long_form:
        click.echo(summarize(rule, config.date_format))
    else:
        click.echo(describe(rule))


@main.command()
@click.argument("anchor")
@rule_options
@click.option("-n", "limit", type=int, default=None, help="Number of dates (default from config)")
@click.option("--completed", type=int, default=0, show_default=True,
              help="Occurrences already completed")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def preview(anchor: str, limit: int | None, completed: int, as_json: bool, **rule_args):
    """List upcoming occurrences after ANCHOR (YYYY-MM-DD)."""
    config = load_config()
    rule = _build_rule(**rule_args)

    errors = validate_recurrence(rule)
    if errors:
        _fail("; ".join(errors))
    anchor_date = _parse_cli_date(anchor, "ANCHOR")

    dates = upcoming(anchor_date, rule, limit if limit is not None else config.preview_count, completed)

    if as_json:
        click.echo(json.dumps([d.isoformat() for d in dates], indent=2))
        return

    click.echo(f"{summarize(rule, config.date_format)}\n")
    if not dates:
        click.echo("No upcoming occurrences.")
        return
    for i, d in enumerate(dates, start=completed + 1):
        click.echo(f"  {i:3}. {d.strftime('%a %Y-%m-%d')}")


@main.command()
@click.option("--all", "show_all", is_flag=True, help="Include completed tasks")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def tasks(show_all: bool, as_json: bool):
    """List stored tasks, soonest first."""
    config = load_config()
    try:
        all_tasks = get_store(config).fetch_all()
    except TaskStoreError as e:
        _fail(str(e))

    if not show_all:
        all_tasks = filter_open(all_tasks)
    all_tasks = sort_by_due(all_tasks)

    if as_json:
        click.echo(json.dumps([t.to_dict() for t in all_tasks], indent=2))
        return

    if not all_tasks:
        click.echo("No tasks.")
        return

    for task in all_tasks:
        mark = "x" if task.is_completed else " "
        due = f" (due {task.due_date})" if task.due_date else ""
        repeat = f" [{describe(task.recurrence)}]" if task.recurrence else ""
        click.echo(f"[{mark}] {task.title}{due}{repeat}  {task.id}")


@main.command()
@click.argument("task_id")
@click.option("--on", "completed_on", default=None,
              help="Completion date (YYYY-MM-DD), defaults to today")
def complete(task_id: str, completed_on: str | None):
    """Complete a task and schedule its next occurrence."""
    config = load_config()
    on = _parse_cli_date(completed_on, "--on") if completed_on else None

    try:
        result = complete_task(get_store(config), task_id, on)
    except (TaskNotFoundError, TaskAlreadyCompletedError, TaskStoreError) as e:
        _fail(str(e))

    click.echo(f"✓ Completed: {result.task.title}")
    if result.next_task:
        click.echo(f"Next: {result.next_task.due_date.strftime('%a %Y-%m-%d')} ({result.next_task.id})")
    elif result.ended_reason:
        click.echo(result.ended_reason)


if __name__ == "__main__":
    main()
