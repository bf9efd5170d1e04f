"""Data models for tasklist."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

TaskFilter = Literal["all", "pending", "completed"]
FILTERS: tuple[TaskFilter, ...] = ("all", "pending", "completed")
DEFAULT_FILTER: TaskFilter = "all"

TASK_TYPES: tuple[str, ...] = ("personal", "work", "study", "shopping", "other")
DEFAULT_TASK_TYPE = "other"


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class Task(BaseModel):
    """A single tracked task.

    Instances are immutable snapshots. The store replaces a task with an
    updated copy when its completion state changes, so ``id`` and
    ``created_at`` never change once assigned.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, description="Opaque unique identifier")
    name: str
    description: str
    type: str = DEFAULT_TASK_TYPE
    completed: bool = False
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")

    @property
    def status_label(self) -> str:
        return "Completed" if self.completed else "Pending"

    def to_record(self) -> dict[str, Any]:
        """Convert to the persisted JSON record (camelCase ``createdAt``)."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> Task:
        """Create from a persisted record.

        Accepts both ``createdAt`` and ``created_at`` keys.
        """
        return cls.model_validate(data)


class TaskSummary(BaseModel):
    """Counts shown alongside the task list."""

    model_config = ConfigDict(frozen=True)

    total: int = 0
    pending: int = 0
    completed: int = 0


def coerce_filter(value: str | None) -> TaskFilter | None:
    """Return ``value`` as a TaskFilter, or None if it is not a known filter."""
    if value is None:
        return None
    normalized = value.strip().lower()
    for name in FILTERS:
        if name == normalized:
            return name
    return None


def matches_filter(task: Task, task_filter: TaskFilter) -> bool:
    """Check whether a task passes the given filter."""
    if task_filter == "pending":
        return not task.completed
    if task_filter == "completed":
        return task.completed
    return True
