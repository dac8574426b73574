"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends, Request

from task_sync.infrastructure.db.session import AsyncSessionLocal
from task_sync.infrastructure.db.uow import SqlAlchemyUoW
from task_sync.workers.sync_worker import SyncWorker


async def get_uow() -> AsyncIterator[SqlAlchemyUoW]:
    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)
        try:
            yield uow
        finally:
            await session.close()


UoWDep = Annotated[SqlAlchemyUoW, Depends(get_uow)]


def get_sync_worker(request: Request) -> SyncWorker:
    return request.app.state.sync_worker


SyncWorkerDep = Annotated[SyncWorker, Depends(get_sync_worker)]
