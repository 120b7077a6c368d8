"""Shared workflow layer between the CLI and the task store.

complete_task is the scheduling caller of the recurrence engine: it supplies
the anchor date, checks the occurrence cap and persists the counter.
"""

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date

from .adapters.json_task_store import JsonTaskStore
from .config import Config
from .core.recurrence import Invalid, SeriesEnded, next_occurrence, should_continue
from .core.tasks import STATUS_COMPLETED, Task, spawn_next_instance
from .ports.task_repo import TaskRepository

logger = logging.getLogger(__name__)


class TaskNotFoundError(Exception):
    """Raised when a task id is not in the store."""

    pass


class TaskAlreadyCompletedError(Exception):
    """Raised when completing a task that is already done."""

    pass


@dataclass
class CompletionResult:
    """Outcome of completing a task."""

    task: Task
    next_task: Task | None = None
    ended_reason: str | None = None


def get_store(config: Config) -> JsonTaskStore:
    """Resolve the task store from config."""
    return JsonTaskStore(config.tasks_path)


def _ended_reason(task: Task, completed_count: int) -> str:
    """Why a recurring task produced no next instance."""
    rule = task.recurrence
    if task.anchor_date is None:
        return "Task has no due date to recur from"
    if not should_continue(rule, completed_count):
        return f"Completed all {rule.end_after_occurrences} occurrences"
    result = next_occurrence(task.anchor_date, rule)
    if isinstance(result, SeriesEnded):
        return f"Series ended on {rule.end_date.isoformat()}"
    if isinstance(result, Invalid):
        return f"Invalid recurrence: {result.reason}"
    return "Series ended"


def complete_task(
    repo: TaskRepository,
    task_id: str,
    completed_on: date | None = None,
) -> CompletionResult:
    """
    Mark a task completed and schedule the next instance of its series.

    The next instance is stored in the same repository. Raises
    TaskNotFoundError or TaskAlreadyCompletedError.
    """
    task = repo.get(task_id)
    if task is None:
        raise TaskNotFoundError(f"No task with id {task_id}")
    if task.is_completed:
        raise TaskAlreadyCompletedError(f"Task {task_id} is already completed")

    done = replace(task, status=STATUS_COMPLETED, completed_at=completed_on or date.today())
    repo.save(done)
    logger.info(f"Completed task {task_id}: {task.title}")

    if not task.is_recurring:
        return CompletionResult(task=done)

    completed_count = task.completed_count + 1
    next_task = spawn_next_instance(done, uuid.uuid4().hex, completed_count)
    if next_task is None:
        reason = _ended_reason(done, completed_count)
        logger.info(f"No next instance for task {task_id}: {reason}")
        return CompletionResult(task=done, ended_reason=reason)

    repo.save(next_task)
    logger.info(f"Scheduled next instance {next_task.id} of {task_id} on {next_task.due_date}")
    return CompletionResult(task=done, next_task=next_task)
