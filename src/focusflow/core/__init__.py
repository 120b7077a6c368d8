"""Functional core - pure business logic with no I/O."""

from .recurrence import (
    Invalid,
    Next,
    Recurrence,
    RecurrenceError,
    RecurrenceType,
    SeriesEnded,
    describe,
    iter_occurrences,
    next_date,
    next_occurrence,
    parse_date,
    should_continue,
    upcoming,
    validate_recurrence,
    weekday_index,
)
from .summary import summarize
from .tasks import Task, filter_open, spawn_next_instance, sort_by_due

__all__ = [
    # Recurrence
    "Recurrence",
    "RecurrenceError",
    "RecurrenceType",
    "Next",
    "SeriesEnded",
    "Invalid",
    "next_occurrence",
    "next_date",
    "should_continue",
    "iter_occurrences",
    "upcoming",
    "describe",
    "validate_recurrence",
    "parse_date",
    "weekday_index",
    # Summary
    "summarize",
    # Tasks
    "Task",
    "spawn_next_instance",
    "sort_by_due",
    "filter_open",
]
