from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from task_sync.domain.entities.task import Task


class TaskReader(Protocol):
    async def get(self, task_id: UUID, *, include_deleted: bool = False) -> Task | None: ...

    async def list_active(self) -> list[Task]: ...


class TaskWriter(Protocol):
    async def create(self, task: Task) -> Task: ...

    async def update(
        self, task_id: UUID, fields: dict[str, Any], updated_at: datetime,
    ) -> Task | None:
        """Apply a local edit and flag the task as pending sync."""
        ...

    async def soft_delete(self, task_id: UUID, updated_at: datetime) -> bool: ...

    async def mark_synced(
        self, task_id: UUID, server_id: str | None, synced_at: datetime,
    ) -> None:
        """Keep the existing server_id when server_id is None."""
        ...

    async def mark_error(self, task_id: UUID) -> None: ...

    async def apply_remote(
        self,
        task_id: UUID,
        fields: dict[str, Any],
        updated_at: datetime,
        server_id: str | None,
        synced_at: datetime,
    ) -> None: ...
