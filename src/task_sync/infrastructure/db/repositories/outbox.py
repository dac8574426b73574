from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from task_sync.application.exceptions import NotFoundError
from task_sync.domain.entities.queue_item import QueueItem
from task_sync.domain.value_objects.enums import Operation, QueueStatus
from task_sync.infrastructure.db.mappers import queue_item as mapper
from task_sync.infrastructure.db.models.queue_item import QueueItemModel

MAX_ERROR_LENGTH = 1000


class OutboxRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def enqueue(
        self,
        task_id: uuid.UUID,
        operation: Operation,
        payload: dict[str, Any],
        created_at: datetime,
    ) -> uuid.UUID:
        model = QueueItemModel(
            id=uuid.uuid4(),
            task_id=task_id,
            operation=operation.value,
            payload=payload,
            status=QueueStatus.PENDING.value,
            retry_count=0,
            created_at=created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return model.id

    async def pending_items(self) -> list[QueueItem]:
        stmt = (
            select(QueueItemModel)
            .where(QueueItemModel.status == QueueStatus.PENDING)
            .order_by(QueueItemModel.created_at.asc(), QueueItemModel.id.asc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def mark_synced(self, item_id: uuid.UUID, synced_at: datetime) -> None:
        # Guarded on status so a repeat call leaves synced_at untouched.
        stmt = (
            update(QueueItemModel)
            .where(
                QueueItemModel.id == item_id,
                QueueItemModel.status == QueueStatus.PENDING,
            )
            .values(status=QueueStatus.SYNCED.value, synced_at=synced_at)
        )
        await self._session.execute(stmt)

    async def record_failure(
        self, item_id: uuid.UUID, error: str, *, max_retries: int,
    ) -> tuple[int, bool]:
        model = await self._session.get(QueueItemModel, item_id, populate_existing=True)
        if model is None:
            raise NotFoundError(f"Queue item {item_id} not found")
        if model.status != QueueStatus.PENDING:
            return model.retry_count, model.status == QueueStatus.FAILED

        model.retry_count += 1
        model.error_message = error[:MAX_ERROR_LENGTH]
        if model.retry_count >= max_retries:
            model.status = QueueStatus.FAILED.value
        await self._session.flush()
        return model.retry_count, model.status == QueueStatus.FAILED

    async def count_by_status(self) -> dict[QueueStatus, int]:
        stmt = (
            select(QueueItemModel.status, func.count())
            .group_by(QueueItemModel.status)
        )
        result = await self._session.execute(stmt)
        counts = {status: 0 for status in QueueStatus}
        for status, count in result.all():
            counts[QueueStatus(status)] = count
        return counts

    async def list_failed(self, limit: int = 100) -> list[QueueItem]:
        stmt = (
            select(QueueItemModel)
            .where(QueueItemModel.status == QueueStatus.FAILED)
            .order_by(QueueItemModel.created_at.asc(), QueueItemModel.id.asc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]
