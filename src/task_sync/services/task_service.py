from __future__ import annotations

import uuid
from typing import Any

from task_sync.application.exceptions import NotFoundError, ValidationError
from task_sync.application.ports.clock import Clock, system_clock
from task_sync.application.uow import UnitOfWork
from task_sync.domain.entities.task import SYNCABLE_FIELDS, Task
from task_sync.domain.value_objects.enums import Operation, SyncStatus
from task_sync.services.sync_service import enqueue_mutation

EDITABLE_FIELDS = ("title", "description", "completed")


def snapshot(task: Task) -> dict[str, Any]:
    """JSON-safe copy of a task, frozen into the outbox at enqueue time."""
    data: dict[str, Any] = {name: getattr(task, name) for name in SYNCABLE_FIELDS}
    data.update(
        id=str(task.id),
        created_at=task.created_at.isoformat(),
        updated_at=task.updated_at.isoformat(),
        server_id=task.server_id,
    )
    return data


async def list_tasks(uow: UnitOfWork) -> list[Task]:
    return await uow.tasks.list_active()


async def get_task(task_id: uuid.UUID, uow: UnitOfWork) -> Task:
    task = await uow.tasks.get(task_id)
    if task is None:
        raise NotFoundError(f"Task {task_id} not found")
    return task


async def create_task(
    title: str,
    description: str,
    completed: bool,
    uow: UnitOfWork,
    clock: Clock = system_clock,
) -> Task:
    """Create a task locally and queue its `create` for the remote."""
    if not title.strip():
        raise ValidationError("Title is required")

    now = clock.now()
    task = Task(
        id=uuid.uuid4(),
        title=title,
        description=description,
        completed=completed,
        created_at=now,
        updated_at=now,
        is_deleted=False,
        sync_status=SyncStatus.PENDING,
        server_id=None,
        last_synced_at=None,
    )
    task = await uow.tasks_w.create(task)
    await enqueue_mutation(task.id, Operation.CREATE, snapshot(task), uow, clock)
    await uow.commit()
    return task


async def update_task(
    task_id: uuid.UUID,
    updates: dict[str, Any],
    uow: UnitOfWork,
    clock: Clock = system_clock,
) -> Task:
    fields = {k: v for k, v in updates.items() if k in EDITABLE_FIELDS and v is not None}
    if not fields:
        raise ValidationError("No update fields provided")
    if "title" in fields and not fields["title"].strip():
        raise ValidationError("Title must not be empty")

    task = await uow.tasks_w.update(task_id, fields, clock.now())
    if task is None:
        raise NotFoundError(f"Task {task_id} not found")
    await enqueue_mutation(task.id, Operation.UPDATE, snapshot(task), uow, clock)
    await uow.commit()
    return task


async def delete_task(
    task_id: uuid.UUID,
    uow: UnitOfWork,
    clock: Clock = system_clock,
) -> None:
    deleted = await uow.tasks_w.soft_delete(task_id, clock.now())
    if not deleted:
        raise NotFoundError(f"Task {task_id} not found")
    task = await uow.tasks.get(task_id, include_deleted=True)
    assert task is not None
    await enqueue_mutation(task.id, Operation.DELETE, snapshot(task), uow, clock)
    await uow.commit()
