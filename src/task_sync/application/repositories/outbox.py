from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from task_sync.domain.entities.queue_item import QueueItem
from task_sync.domain.value_objects.enums import Operation, QueueStatus


class OutboxStore(Protocol):
    async def enqueue(
        self,
        task_id: UUID,
        operation: Operation,
        payload: dict[str, Any],
        created_at: datetime,
    ) -> UUID: ...

    async def pending_items(self) -> list[QueueItem]:
        """Pending items ordered by (created_at, id), read in one statement."""
        ...

    async def mark_synced(self, item_id: UUID, synced_at: datetime) -> None: ...

    async def record_failure(
        self, item_id: UUID, error: str, *, max_retries: int,
    ) -> tuple[int, bool]:
        """Count a processing error. Return (retry_count, is_permanent)."""
        ...

    async def count_by_status(self) -> dict[QueueStatus, int]: ...

    async def list_failed(self, limit: int = 100) -> list[QueueItem]: ...
