from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

SYNCABLE_FIELDS = ("title", "description", "completed", "is_deleted")


@dataclass(frozen=True, slots=True)
class Task:
    id: UUID
    title: str
    description: str
    completed: bool
    created_at: datetime
    updated_at: datetime
    is_deleted: bool
    sync_status: str
    server_id: str | None
    last_synced_at: datetime | None


@dataclass(frozen=True, slots=True)
class TaskVersion:
    """The syncable state of a task as seen by one side of a sync."""

    fields: dict[str, Any]
    updated_at: datetime
    server_id: str | None = None

    @classmethod
    def from_task(cls, task: Task) -> TaskVersion:
        return cls(
            fields={name: getattr(task, name) for name in SYNCABLE_FIELDS},
            updated_at=task.updated_at,
            server_id=task.server_id,
        )

    def differs_from(self, payload: dict[str, Any]) -> bool:
        return any(
            name in self.fields and self.fields[name] != payload.get(name)
            for name in SYNCABLE_FIELDS
        )
