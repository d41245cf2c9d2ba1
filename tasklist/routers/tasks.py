from fastapi import APIRouter, Response, status

from tasklist.dependencies import TaskServiceDep
from tasklist.models import TaskCreate, TaskResponse, TaskUpdate

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskResponse])
async def get_tasks(service: TaskServiceDep):
    """List all tasks, served from the cached listing when present"""
    snapshot = await service.list_snapshot()
    return Response(
        content=snapshot.payload,
        media_type="application/json",
        headers={"X-Cache": "HIT" if snapshot.hit else "MISS"},
    )


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(task_data: TaskCreate, service: TaskServiceDep):
    """Create a new task"""
    return await service.create_task(task_data.description)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: int, service: TaskServiceDep):
    """Get a specific task by ID"""
    return await service.get_task(task_id)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(task_id: int, task_data: TaskUpdate, service: TaskServiceDep):
    return await service.update_task(
        task_id,
        description=task_data.description,
        completed=task_data.completed,
    )


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: int, service: TaskServiceDep):
    """Delete a task"""
    await service.delete_task(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{task_id}/complete", response_model=TaskResponse)
async def mark_task_complete(task_id: int, service: TaskServiceDep):
    """Mark a task as completed"""
    return await service.complete_task(task_id)
