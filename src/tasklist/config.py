"""Configuration models for tasklist."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field

from tasklist.models import DEFAULT_FILTER, TaskFilter
from tasklist.storage import STORAGE_KEY

# Default config directory
TASKLIST_DIR = Path(".tasklist")
CONFIG_FILE = TASKLIST_DIR / "config.json"
DATA_FILE = TASKLIST_DIR / "tasks.json"


class StorageConfig(BaseModel):
    """Where the task collection is stored."""

    path: str = str(DATA_FILE)
    key: str = STORAGE_KEY


class ViewConfig(BaseModel):
    """Configuration for the terminal view."""

    default_filter: TaskFilter = DEFAULT_FILTER
    confirm_delete: bool = True


class TasklistConfig(BaseModel):
    """Main configuration for tasklist."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    view: ViewConfig = Field(default_factory=ViewConfig)

    @classmethod
    def load(cls, path: Path | None = None) -> TasklistConfig:
        """Load configuration from file or return defaults."""
        if path is None:
            path = CONFIG_FILE

        if not path.exists():
            return cls()

        with open(path) as f:
            data = json.load(f)

        return cls.model_validate(data)

    def save(self, path: Path | None = None) -> None:
        """Save configuration to file."""
        if path is None:
            path = CONFIG_FILE

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(exclude_none=True), f, indent=2)
