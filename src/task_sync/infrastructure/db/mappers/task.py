from __future__ import annotations

from task_sync.domain.entities.task import Task
from task_sync.infrastructure.db.models.task import TaskModel


def model_to_entity(model: TaskModel) -> Task:
    return Task(
        id=model.id,
        title=model.title,
        description=model.description,
        completed=model.completed,
        created_at=model.created_at,
        updated_at=model.updated_at,
        is_deleted=model.is_deleted,
        sync_status=model.sync_status,
        server_id=model.server_id,
        last_synced_at=model.last_synced_at,
    )


def entity_to_model(entity: Task) -> TaskModel:
    return TaskModel(
        id=entity.id,
        title=entity.title,
        description=entity.description,
        completed=entity.completed,
        created_at=entity.created_at,
        updated_at=entity.updated_at,
        is_deleted=entity.is_deleted,
        sync_status=entity.sync_status,
        server_id=entity.server_id,
        last_synced_at=entity.last_synced_at,
    )
