"""Task persistence.

Tasks are stored the way a browser keeps them in localStorage: one string
value under a fixed key, holding the whole collection as a JSON array.
Every save overwrites the previous value.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from tasklist.errors import PersistenceUnavailable
from tasklist.models import Task

logger = logging.getLogger(__name__)

STORAGE_KEY = "myTasks"


class TaskSlot(Protocol):
    """A durable key-value slot holding string values."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemorySlot:
    """Dict-backed slot. Contents live as long as the object does."""

    def __init__(self, items: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileSlot:
    """Slot backed by a JSON object file mapping keys to string values.

    A missing file reads as an empty slot. A file that cannot be read or
    does not hold a JSON object raises PersistenceUnavailable.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
            raise PersistenceUnavailable(f"Cannot read {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise PersistenceUnavailable(f"Unexpected content in {self.path}")

        return data

    def _write(self, items: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(items, f, indent=2)
        except OSError as e:
            raise PersistenceUnavailable(f"Cannot write {self.path}: {e}") from e

    def get_item(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        # Another key may hold unreadable data; start from an empty slot then.
        try:
            items = self._read()
        except PersistenceUnavailable:
            items = {}
        items[key] = value
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read()
        if key in items:
            del items[key]
            self._write(items)


class TaskPersistence:
    """Saves and loads the full task collection under a fixed key."""

    def __init__(self, slot: TaskSlot | None = None, key: str = STORAGE_KEY) -> None:
        self.slot: TaskSlot = slot if slot is not None else MemorySlot()
        self.key = key

    def save(self, tasks: Iterable[Task]) -> bool:
        """Overwrite the slot with the whole collection.

        Returns False if the write failed. The failure is logged, not raised.
        """
        records = [task.to_record() for task in tasks]
        try:
            self.slot.set_item(self.key, json.dumps(records))
        except PersistenceUnavailable as e:
            logger.warning("Failed to save %d tasks: %s", len(records), e)
            return False

        logger.debug("Saved %d tasks under %r", len(records), self.key)
        return True

    def load(self) -> list[Task]:
        """Read the collection back.

        Absent, unreadable or malformed data yields an empty list.
        """
        try:
            raw = self.slot.get_item(self.key)
        except PersistenceUnavailable as e:
            logger.warning("Task storage unavailable, starting empty: %s", e)
            return []

        if not raw:
            return []

        try:
            tasks = parse_tasks(raw)
        except (ValueError, RecursionError) as e:
            logger.warning("Discarding malformed task data under %r: %s", self.key, e)
            return []

        logger.debug("Loaded %d tasks from %r", len(tasks), self.key)
        return tasks


def parse_tasks(raw: str) -> list[Task]:
    """Parse a stored JSON array into tasks.

    Raises ValueError on invalid JSON, a non-array payload, an invalid
    record, or duplicate ids. Pathologically nested input raises
    RecursionError.
    """
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("expected a JSON array of tasks")

    tasks: list[Task] = []
    seen: set[str] = set()
    for item in data:
        if not isinstance(item, dict):
            raise ValueError("task record is not an object")
        try:
            task = Task.from_record(item)
        except PydanticValidationError as e:
            raise ValueError(f"invalid task record: {e.error_count()} error(s)") from e
        if task.id in seen:
            raise ValueError(f"duplicate task id {task.id!r}")
        seen.add(task.id)
        tasks.append(task)

    return tasks
