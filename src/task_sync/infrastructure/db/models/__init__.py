"""Import all models so Base.metadata sees every table."""
from task_sync.infrastructure.db.models.queue_item import QueueItemModel
from task_sync.infrastructure.db.models.task import TaskModel

__all__ = [
    "QueueItemModel",
    "TaskModel",
]
