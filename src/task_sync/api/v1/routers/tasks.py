from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter

from task_sync.api.deps import UoWDep
from task_sync.api.v1.schemas.task import CreateTaskRequest, TaskResponse, UpdateTaskRequest
from task_sync.services import task_service

router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskResponse])
async def list_tasks(uow: UoWDep) -> list[TaskResponse]:
    tasks = await task_service.list_tasks(uow)
    return [TaskResponse.model_validate(t, from_attributes=True) for t in tasks]


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: UUID, uow: UoWDep) -> TaskResponse:
    task = await task_service.get_task(task_id, uow)
    return TaskResponse.model_validate(task, from_attributes=True)


@router.post("", response_model=TaskResponse, status_code=201)
async def create_task(body: CreateTaskRequest, uow: UoWDep) -> TaskResponse:
    task = await task_service.create_task(
        body.title, body.description, body.completed, uow,
    )
    return TaskResponse.model_validate(task, from_attributes=True)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(task_id: UUID, body: UpdateTaskRequest, uow: UoWDep) -> TaskResponse:
    task = await task_service.update_task(
        task_id, body.model_dump(exclude_unset=True), uow,
    )
    return TaskResponse.model_validate(task, from_attributes=True)


@router.delete("/{task_id}", status_code=204)
async def delete_task(task_id: UUID, uow: UoWDep) -> None:
    await task_service.delete_task(task_id, uow)
