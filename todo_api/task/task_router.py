# todo_api/task/task_router.py

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from todo_api.schemas.task_schema import TaskCreate, TaskRead, TaskStatsRead, TaskUpdate
from todo_api.task.task_service import TaskFilters, TaskPatch, TaskService
from todo_api.task.task_store import TaskStore


def get_task_service(request: Request) -> TaskService:
    return TaskService(TaskStore(request.app.state.database))


# ==========================
#  ROUTER
# ==========================
router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
)


@router.get("", response_model=list[TaskRead])
def get_all_tasks(
    completed: Optional[bool] = None,
    priority: Optional[str] = None,
    search: Optional[str] = None,
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("DESC", alias="sortOrder"),
    service: TaskService = Depends(get_task_service),
):
    filters = TaskFilters(
        completed=completed,
        priority=priority,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return service.get_all_tasks(filters)


@router.get("/stats", response_model=TaskStatsRead)
def get_task_stats(service: TaskService = Depends(get_task_service)):
    return service.get_task_stats()


@router.get("/{task_id}", response_model=TaskRead)
def get_task(task_id: int, service: TaskService = Depends(get_task_service)):
    task = service.get_task_by_id(task_id)
    if not task:
        raise HTTPException(404, "Task not found")
    return task


@router.post("", response_model=TaskRead, status_code=201)
def create_task(data: TaskCreate, service: TaskService = Depends(get_task_service)):
    # ValidationError -> 400, see the handlers in todo_api.main
    return service.create_task(data.model_dump(exclude_unset=True))


@router.put("/{task_id}", response_model=TaskRead)
def update_task(task_id: int, data: TaskUpdate, service: TaskService = Depends(get_task_service)):
    patch = TaskPatch.from_mapping(data.model_dump(exclude_unset=True))
    return service.update_task(task_id, patch)


@router.patch("/{task_id}/toggle", response_model=TaskRead)
def toggle_task(task_id: int, service: TaskService = Depends(get_task_service)):
    return service.toggle_task_completion(task_id)


@router.delete("/{task_id}", status_code=204)
def delete_task(task_id: int, service: TaskService = Depends(get_task_service)):
    if not service.delete_task(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return Response(status_code=204)
