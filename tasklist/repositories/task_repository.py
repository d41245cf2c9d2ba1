import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from tasklist.exceptions import BackingStoreError
from tasklist.models import Task

logger = logging.getLogger(__name__)

# drivers such as asyncpg raise ConnectionRefusedError unwrapped
_STORE_ERRORS = (SQLAlchemyError, OSError)


class TaskRepository:
    """
    Source of truth for task records.

    Every mutation commits its own transaction before returning, so callers
    can rely on the write being durable once the coroutine completes.
    SQLAlchemy and connection-level (OSError) failures are re-raised as
    BackingStoreError.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _fail(self, operation: str, e: Exception):
        logger.error(f"Task store {operation} failed: {e}")
        await self.session.rollback()
        raise BackingStoreError(operation) from e

    async def find_all(self) -> list[Task]:
        try:
            result = await self.session.exec(select(Task).order_by(Task.id))
            return list(result.all())
        except _STORE_ERRORS as e:
            await self._fail("find_all", e)

    async def find_by_id(self, task_id: int) -> Task | None:
        try:
            return await self.session.get(Task, task_id)
        except _STORE_ERRORS as e:
            await self._fail("find_by_id", e)

    async def insert(self, fields: dict[str, Any]) -> Task:
        task = Task.model_validate(fields)
        try:
            self.session.add(task)
            await self.session.commit()
            await self.session.refresh(task)
            return task
        except _STORE_ERRORS as e:
            await self._fail("insert", e)

    async def update_by_id(self, task_id: int, fields: dict[str, Any]) -> Task | None:
        """Apply ``fields`` to the task; returns None when it does not exist."""
        try:
            task = await self.session.get(Task, task_id)
            if not task:
                return None
            task.sqlmodel_update(fields)
            task.updated_at = datetime.now(timezone.utc)
            await self.session.commit()
            await self.session.refresh(task)
            return task
        except _STORE_ERRORS as e:
            await self._fail("update_by_id", e)

    async def delete_by_id(self, task_id: int) -> int:
        """Delete the task and return the number of rows removed."""
        try:
            task = await self.session.get(Task, task_id)
            if not task:
                return 0
            await self.session.delete(task)
            await self.session.commit()
            return 1
        except _STORE_ERRORS as e:
            await self._fail("delete_by_id", e)
