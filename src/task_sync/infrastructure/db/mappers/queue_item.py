from __future__ import annotations

from task_sync.domain.entities.queue_item import QueueItem
from task_sync.infrastructure.db.models.queue_item import QueueItemModel


def model_to_entity(model: QueueItemModel) -> QueueItem:
    return QueueItem(
        id=model.id,
        task_id=model.task_id,
        operation=model.operation,
        payload=dict(model.payload),
        created_at=model.created_at,
        status=model.status,
        retry_count=model.retry_count,
        error_message=model.error_message,
        synced_at=model.synced_at,
    )
