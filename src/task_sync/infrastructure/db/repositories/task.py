from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from task_sync.domain.entities.task import SYNCABLE_FIELDS, Task
from task_sync.domain.value_objects.enums import SyncStatus
from task_sync.infrastructure.db.mappers import task as mapper
from task_sync.infrastructure.db.models.task import TaskModel


class TaskReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, task_id: UUID, *, include_deleted: bool = False) -> Task | None:
        stmt = select(TaskModel).where(TaskModel.id == task_id)
        if not include_deleted:
            stmt = stmt.where(TaskModel.is_deleted.is_(False))
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def list_active(self) -> list[Task]:
        stmt = (
            select(TaskModel)
            .where(TaskModel.is_deleted.is_(False))
            .order_by(TaskModel.created_at.asc(), TaskModel.id.asc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class TaskWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _get_active(self, task_id: UUID) -> TaskModel | None:
        model = await self._session.get(TaskModel, task_id)
        if model is None or model.is_deleted:
            return None
        return model

    async def create(self, task: Task) -> Task:
        model = mapper.entity_to_model(task)
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def update(
        self, task_id: UUID, fields: dict[str, Any], updated_at: datetime,
    ) -> Task | None:
        model = await self._get_active(task_id)
        if model is None:
            return None
        for name, value in fields.items():
            setattr(model, name, value)
        model.updated_at = updated_at
        model.sync_status = SyncStatus.PENDING.value
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def soft_delete(self, task_id: UUID, updated_at: datetime) -> bool:
        model = await self._get_active(task_id)
        if model is None:
            return False
        model.is_deleted = True
        model.updated_at = updated_at
        model.sync_status = SyncStatus.PENDING.value
        await self._session.flush()
        return True

    async def mark_synced(
        self, task_id: UUID, server_id: str | None, synced_at: datetime,
    ) -> None:
        model = await self._session.get(TaskModel, task_id)
        if model is None:
            return
        model.sync_status = SyncStatus.SYNCED.value
        if server_id is not None:
            model.server_id = server_id
        model.last_synced_at = synced_at
        await self._session.flush()

    async def mark_error(self, task_id: UUID) -> None:
        stmt = (
            update(TaskModel)
            .where(TaskModel.id == task_id)
            .values(sync_status=SyncStatus.ERROR.value)
        )
        await self._session.execute(stmt)

    async def apply_remote(
        self,
        task_id: UUID,
        fields: dict[str, Any],
        updated_at: datetime,
        server_id: str | None,
        synced_at: datetime,
    ) -> None:
        model = await self._session.get(TaskModel, task_id)
        if model is None:
            return
        for name in SYNCABLE_FIELDS:
            if name in fields:
                setattr(model, name, fields[name])
        model.updated_at = updated_at
        model.sync_status = SyncStatus.SYNCED.value
        if server_id is not None:
            model.server_id = server_id
        model.last_synced_at = synced_at
        await self._session.flush()
