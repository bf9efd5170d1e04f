"""Task store - the single owner of the task collection.

All mutations go through TaskStore. Each successful mutation is followed by
a full-collection save and a change notification, in that order. Invalid
input and unknown ids are no-ops: no public operation raises.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal
from uuid import uuid4

from tasklist.errors import TaskNotFound, ValidationError
from tasklist.models import (
    DEFAULT_FILTER,
    DEFAULT_TASK_TYPE,
    Task,
    TaskFilter,
    TaskSummary,
    coerce_filter,
    matches_filter,
    utc_now,
)
from tasklist.storage import TaskPersistence

logger = logging.getLogger(__name__)

ChangeKind = Literal["added", "toggled", "deleted", "filter"]


@dataclass(frozen=True)
class StoreChange:
    """Notification sent to listeners after a state change."""

    kind: ChangeKind
    task: Task | None = None


Listener = Callable[[StoreChange], None]


class TaskStore:
    """Owns the task collection and mediates mutation and persistence."""

    def __init__(self, persistence: TaskPersistence | None = None) -> None:
        self._persistence = persistence if persistence is not None else TaskPersistence()
        self._tasks: list[Task] = self._persistence.load()
        self._issued_ids: set[str] = {task.id for task in self._tasks}
        self._filter: TaskFilter = DEFAULT_FILTER
        self._listeners: list[Listener] = []

    # ---- internals ----

    def _new_id(self) -> str:
        task_id = str(uuid4())
        while task_id in self._issued_ids:
            task_id = str(uuid4())
        self._issued_ids.add(task_id)
        return task_id

    def _index_of(self, task_id: str) -> int:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        raise TaskNotFound(task_id)

    def _commit(self, change: StoreChange) -> None:
        self._persistence.save(self._tasks)
        self._notify(change)

    def _notify(self, change: StoreChange) -> None:
        for listener in list(self._listeners):
            listener(change)

    @staticmethod
    def _draft(name: str, description: str, task_type: str) -> tuple[str, str, str]:
        name = (name or "").strip()
        description = (description or "").strip()
        if not name:
            raise ValidationError("Task name is required")
        if not description:
            raise ValidationError("Task description is required")
        return name, description, (task_type or "").strip() or DEFAULT_TASK_TYPE

    # ---- observers ----

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---- mutations ----

    def add_task(self, name: str, description: str, type: str = DEFAULT_TASK_TYPE) -> Task | None:
        """Create a task and append it to the collection.

        Returns None (and changes nothing) when the name or description is
        blank after trimming.
        """
        try:
            name, description, task_type = self._draft(name, description, type)
        except ValidationError as e:
            logger.debug("Rejected task: %s", e)
            return None

        task = Task(
            id=self._new_id(),
            name=name,
            description=description,
            type=task_type,
            created_at=utc_now(),
        )
        self._tasks.append(task)
        logger.debug("Task added id=%s type=%s", task.id, task.type)
        self._commit(StoreChange("added", task))
        return task

    def delete_task(self, task_id: str) -> bool:
        """Remove a task permanently. Returns False if the id is unknown."""
        try:
            index = self._index_of(task_id)
        except TaskNotFound:
            return False

        task = self._tasks.pop(index)
        logger.debug("Task deleted id=%s", task.id)
        self._commit(StoreChange("deleted", task))
        return True

    def toggle_task_status(self, task_id: str) -> Task | None:
        """Flip a task's completed flag in place. Returns None if the id is unknown."""
        try:
            index = self._index_of(task_id)
        except TaskNotFound:
            return None

        task = self._tasks[index].model_copy(update={"completed": not self._tasks[index].completed})
        self._tasks[index] = task
        logger.debug("Task toggled id=%s completed=%s", task.id, task.completed)
        self._commit(StoreChange("toggled", task))
        return task

    # ---- queries ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        """All tasks in insertion order."""
        return tuple(self._tasks)

    def get_task(self, task_id: str) -> Task | None:
        try:
            return self._tasks[self._index_of(task_id)]
        except TaskNotFound:
            return None

    def list_tasks(self, task_filter: str | None = None) -> tuple[Task, ...]:
        """List tasks passing the filter, pending before completed.

        ``None`` uses the current filter; an unknown filter name lists all
        tasks. The sort is stable, so each group keeps insertion order.
        """
        if task_filter is None:
            active: TaskFilter = self._filter
        else:
            active = coerce_filter(task_filter) or "all"

        selected = [task for task in self._tasks if matches_filter(task, active)]
        selected.sort(key=lambda t: t.completed)
        return tuple(selected)

    def summary(self) -> TaskSummary:
        total = len(self._tasks)
        completed = sum(1 for task in self._tasks if task.completed)
        return TaskSummary(total=total, pending=total - completed, completed=completed)

    # ---- view-facing contract ----

    @property
    def filter(self) -> TaskFilter:
        return self._filter

    def set_filter(self, task_filter: str) -> TaskFilter:
        """Select the filter used by get_tasks(). Unknown names are ignored."""
        selected = coerce_filter(task_filter)
        if selected is not None:
            self._filter = selected
            self._notify(StoreChange("filter"))
        return self._filter

    def get_tasks(self, task_filter: str | None = None) -> tuple[Task, ...]:
        return self.list_tasks(task_filter)

    def get_summary(self) -> TaskSummary:
        return self.summary()
