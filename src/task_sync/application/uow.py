from __future__ import annotations

from typing import AsyncContextManager, Callable, Protocol

from task_sync.application.repositories.outbox import OutboxStore
from task_sync.application.repositories.task import TaskReader, TaskWriter


class UnitOfWork(Protocol):
    tasks: TaskReader
    tasks_w: TaskWriter
    outbox: OutboxStore

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...


UoWFactory = Callable[[], AsyncContextManager[UnitOfWork]]
