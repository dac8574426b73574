from __future__ import annotations

from fastapi import APIRouter, Query

from task_sync.api.deps import SyncWorkerDep, UoWDep
from task_sync.api.v1.schemas.sync import (
    QueueItemResponse,
    SyncResultResponse,
    SyncStatusResponse,
)
from task_sync.domain.value_objects.enums import QueueStatus
from task_sync.services import sync_service

router = APIRouter(prefix="/api/v1/sync", tags=["sync"])


@router.post("", response_model=SyncResultResponse)
async def trigger_sync(worker: SyncWorkerDep) -> SyncResultResponse:
    result = await worker.run_once()
    return SyncResultResponse.from_result(result)


@router.get("/status", response_model=SyncStatusResponse)
async def sync_status(worker: SyncWorkerDep, uow: UoWDep) -> SyncStatusResponse:
    counts = await sync_service.outbox_counts(uow)
    last = worker.last_result
    return SyncStatusResponse(
        pending=counts[QueueStatus.PENDING],
        synced=counts[QueueStatus.SYNCED],
        failed=counts[QueueStatus.FAILED],
        worker_running=worker.running,
        last_result=SyncResultResponse.from_result(last) if last else None,
    )


@router.get("/failed", response_model=list[QueueItemResponse])
async def failed_items(
    uow: UoWDep,
    limit: int = Query(100, ge=1, le=1000),
) -> list[QueueItemResponse]:
    items = await sync_service.list_failed_items(uow, limit)
    return [QueueItemResponse.model_validate(i, from_attributes=True) for i in items]
