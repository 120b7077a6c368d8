"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass, field, replace
from datetime import date

from .recurrence import Next, Recurrence, parse_date, next_occurrence, should_continue

STATUS_TODO = "todo"
STATUS_COMPLETED = "completed"


@dataclass
class Task:
    """A task, optionally one instance of a recurring series."""

    id: str
    title: str
    status: str = STATUS_TODO
    due_date: date | None = None
    recurrence: Recurrence | None = None
    parent_recurring_task_id: str | None = None
    recurring_instance_date: date | None = None
    # Occurrences of the series completed before this instance
    completed_count: int = 0
    completed_at: date | None = None
    tags: list[str] = field(default_factory=list)

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None

    @property
    def is_completed(self) -> bool:
        return self.status == STATUS_COMPLETED

    @property
    def anchor_date(self) -> date | None:
        """Date the next occurrence is computed from."""
        return self.recurring_instance_date or self.due_date

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create Task from its stored camelCase JSON form."""
        recurrence = data.get("recurrence")
        return cls(
            id=data["id"],
            title=data["title"],
            status=data.get("status", STATUS_TODO) or STATUS_TODO,
            due_date=parse_date(data.get("dueDate")),
            recurrence=Recurrence.from_dict(recurrence) if recurrence else None,
            parent_recurring_task_id=data.get("parentRecurringTaskId"),
            recurring_instance_date=parse_date(data.get("recurringInstanceDate")),
            completed_count=data.get("completedCount", 0) or 0,
            completed_at=parse_date(data.get("completedAt")),
            tags=list(data.get("tags", [])),
        )

    def to_dict(self) -> dict:
        data: dict = {
            "id": self.id,
            "title": self.title,
            "status": self.status,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "tags": list(self.tags),
        }
        if self.recurrence is not None:
            data["recurrence"] = self.recurrence.to_dict()
            data["completedCount"] = self.completed_count
        if self.parent_recurring_task_id:
            data["parentRecurringTaskId"] = self.parent_recurring_task_id
        if self.recurring_instance_date:
            data["recurringInstanceDate"] = self.recurring_instance_date.isoformat()
        if self.completed_at:
            data["completedAt"] = self.completed_at.isoformat()
        return data


def spawn_next_instance(task: Task, new_id: str, completed_count: int) -> Task | None:
    """
    Build the next instance of a recurring task.

    ``completed_count`` includes the instance being completed. Returns None
    when the task does not recur, has no anchor date, or the series is over.

    Pure function - no I/O.
    """
    if task.recurrence is None or task.anchor_date is None:
        return None
    if not should_continue(task.recurrence, completed_count):
        return None

    result = next_occurrence(task.anchor_date, task.recurrence)
    if not isinstance(result, Next):
        return None

    return replace(
        task,
        id=new_id,
        status=STATUS_TODO,
        due_date=result.date,
        parent_recurring_task_id=task.parent_recurring_task_id or task.id,
        recurring_instance_date=result.date,
        completed_count=completed_count,
        completed_at=None,
        tags=list(task.tags),
    )


def sort_by_due(tasks: list[Task]) -> list[Task]:
    """
    Sort tasks by due date (ascending), undated tasks last.

    Pure function - no I/O.
    """

    def sort_key(t: Task) -> tuple[int, date]:
        if t.due_date is None:
            return (1, date.max)
        return (0, t.due_date)

    return sorted(tasks, key=sort_key)


def filter_open(tasks: list[Task]) -> list[Task]:
    """Filter out completed tasks."""
    return [t for t in tasks if not t.is_completed]
