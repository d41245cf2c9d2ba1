from fastapi import Depends
from sqlmodel.ext.asyncio.session import AsyncSession
from typing_extensions import Annotated

from tasklist.cache.base import SnapshotCache
from tasklist.cache.layer import cache_layer
from tasklist.core.config import SettingsDep
from tasklist.database import get_db
from tasklist.repositories.task_repository import TaskRepository
from tasklist.services.task_service import TaskService


def get_cache() -> SnapshotCache:
    return cache_layer


def get_task_service(
    settings: SettingsDep,
    db: AsyncSession = Depends(get_db),
    cache: SnapshotCache = Depends(get_cache),
) -> TaskService:
    return TaskService(TaskRepository(db), cache, settings)


TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]
