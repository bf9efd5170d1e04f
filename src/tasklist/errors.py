"""Error types for tasklist.

None of these escape the public TaskStore operations: the store turns them
into no-ops or falsy results.
"""

from __future__ import annotations


class TaskListError(Exception):
    """Base class for tasklist errors."""


class ValidationError(TaskListError):
    """A task was submitted with a blank name or description."""


class TaskNotFound(TaskListError):
    """No task with the given id exists in the collection."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class PersistenceUnavailable(TaskListError):
    """The storage slot could not be read or written."""
