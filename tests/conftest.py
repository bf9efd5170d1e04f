"""Shared fixtures for tasklist tests."""

from __future__ import annotations

import json
import os
from collections.abc import Generator
from pathlib import Path

import pytest

from tasklist.storage import STORAGE_KEY, MemorySlot, TaskPersistence
from tasklist.store import TaskStore


@pytest.fixture
def temp_project(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary project directory and change to it."""
    original_dir = os.getcwd()
    os.chdir(tmp_path)
    try:
        yield tmp_path
    finally:
        os.chdir(original_dir)


@pytest.fixture
def temp_tasklist_dir(temp_project: Path) -> Path:
    """Create a temporary .tasklist directory."""
    tasklist_dir = temp_project / ".tasklist"
    tasklist_dir.mkdir()
    return tasklist_dir


@pytest.fixture
def sample_task_records() -> list[dict]:
    """Task records as the original browser app stored them."""
    return [
        {
            "id": "1736503200000",
            "name": "Buy milk",
            "description": "2%",
            "type": "shopping",
            "completed": True,
            "createdAt": "2025-01-10T10:00:00.000Z",
        },
        {
            "id": "1736503260000",
            "name": "Write report",
            "description": "Quarterly numbers",
            "type": "work",
            "completed": False,
            "createdAt": "2025-01-10T10:01:00.000Z",
        },
        {
            "id": "1736503320000",
            "name": "Read chapter 3",
            "description": "Linear algebra",
            "type": "study",
            "completed": False,
            "createdAt": "2025-01-10T10:02:00.000Z",
        },
    ]


@pytest.fixture
def memory_slot() -> MemorySlot:
    """An empty in-memory storage slot."""
    return MemorySlot()


@pytest.fixture
def store(memory_slot: MemorySlot) -> TaskStore:
    """A task store backed by an empty in-memory slot."""
    return TaskStore(TaskPersistence(memory_slot))


@pytest.fixture
def seeded_slot(sample_task_records: list[dict]) -> MemorySlot:
    """An in-memory slot already holding the sample records."""
    return MemorySlot({STORAGE_KEY: json.dumps(sample_task_records)})


@pytest.fixture
def tasks_file(temp_tasklist_dir: Path, sample_task_records: list[dict]) -> Path:
    """Write the sample records to the default task file."""
    path = temp_tasklist_dir / "tasks.json"
    path.write_text(json.dumps({STORAGE_KEY: json.dumps(sample_task_records)}))
    return path
