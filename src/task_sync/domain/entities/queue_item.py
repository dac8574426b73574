from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID


@dataclass(frozen=True, slots=True)
class QueueItem:
    """One pending mutation of a task, replayed against the remote authority."""

    id: UUID
    task_id: UUID
    operation: str
    payload: dict[str, Any]
    created_at: datetime
    status: str
    retry_count: int
    error_message: str | None
    synced_at: datetime | None
