from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from task_sync.application.dto.sync import SyncResult


class SyncErrorResponse(BaseModel):
    kind: str
    task_id: UUID | None
    operation: str
    error: str
    timestamp: datetime
    queue_item_id: UUID | None
    permanent: bool

    model_config = {"from_attributes": True}


class SyncResultResponse(BaseModel):
    success: int
    synced_items: int
    failed_items: int
    errors: list[SyncErrorResponse]

    @classmethod
    def from_result(cls, result: SyncResult) -> SyncResultResponse:
        return cls(
            success=int(result.success),
            synced_items=result.synced_items,
            failed_items=result.failed_items,
            errors=[
                SyncErrorResponse.model_validate(e, from_attributes=True)
                for e in result.errors
            ],
        )


class SyncStatusResponse(BaseModel):
    pending: int
    synced: int
    failed: int
    worker_running: bool
    last_result: SyncResultResponse | None = None


class QueueItemResponse(BaseModel):
    id: UUID
    task_id: UUID
    operation: str
    payload: dict[str, Any]
    created_at: datetime
    status: str
    retry_count: int
    error_message: str | None
    synced_at: datetime | None

    model_config = {"from_attributes": True}
