"""Task repository interface."""

from typing import Protocol

from focusflow.core.tasks import Task


class TaskRepository(Protocol):
    """Interface for loading and storing tasks in any backend."""

    def fetch_all(self) -> list[Task]:
        """Fetch all tasks."""
        ...

    def get(self, task_id: str) -> Task | None:
        """Fetch one task by id. Returns None if not found."""
        ...

    def save(self, task: Task) -> None:
        """Insert or replace a task."""
        ...
