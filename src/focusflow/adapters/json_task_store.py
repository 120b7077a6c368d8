"""File-based task storage adapter."""

import json
import logging
from pathlib import Path

from focusflow.core.recurrence import RecurrenceError
from focusflow.core.tasks import Task

logger = logging.getLogger(__name__)


class TaskStoreError(Exception):
    """Raised when the task file cannot be read or parsed."""

    pass


class JsonTaskStore:
    """
    JSON file task storage.

    Implements TaskRepository protocol. The whole store is one JSON array of
    task objects, rewritten on every save.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def _load_raw(self) -> list[dict]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as e:
            raise TaskStoreError(f"Corrupt task file {self.path}: {e}") from e
        if not isinstance(data, list):
            raise TaskStoreError(f"Task file {self.path} must contain a JSON array")
        return data

    def _write_raw(self, data: list[dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2))

    def fetch_all(self) -> list[Task]:
        """Fetch all tasks."""
        tasks = []
        for item in self._load_raw():
            try:
                tasks.append(Task.from_dict(item))
            except (KeyError, TypeError, RecurrenceError) as e:
                raise TaskStoreError(f"Invalid task entry in {self.path}: {e}") from e
        logger.debug(f"Loaded {len(tasks)} tasks from {self.path}")
        return tasks

    def get(self, task_id: str) -> Task | None:
        """Fetch one task by id. Returns None if not found."""
        for task in self.fetch_all():
            if task.id == task_id:
                return task
        return None

    def save(self, task: Task) -> None:
        """Insert or replace a task."""
        data = self._load_raw()
        entry = task.to_dict()
        for i, item in enumerate(data):
            if item.get("id") == task.id:
                data[i] = entry
                break
        else:
            data.append(entry)
        self._write_raw(data)
        logger.debug(f"Saved task {task.id} to {self.path}")
