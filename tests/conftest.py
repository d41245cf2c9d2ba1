"""Shared fixtures: an in-memory task store, a clock-driven cache, and an HTTP client.

The task store fake records every call so tests can assert whether a
request reached the source of truth or was answered from the cache.
"""

from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from tasklist.cache.layer import MemoryCache
from tasklist.core.config import Settings
from tasklist.dependencies import get_cache, get_task_service
from tasklist.main import app
from tasklist.models import Task
from tasklist.services.task_service import TaskService, cache_stats

SNAPSHOT_KEY = "tasks:all"


class FakeTaskRepository:
    """Dict-backed stand-in for TaskRepository."""

    def __init__(self):
        self.tasks: dict[int, Task] = {}
        self.calls: list[str] = []
        self._next_id = 1

    def seed(self, *descriptions: str) -> list[Task]:
        return [self._add({"description": d, "completed": False}) for d in descriptions]

    def _add(self, fields: dict[str, Any]) -> Task:
        task = Task(id=self._next_id, **fields)
        self.tasks[task.id] = task
        self._next_id += 1
        return task

    async def find_all(self) -> list[Task]:
        self.calls.append("find_all")
        return [self.tasks[k] for k in sorted(self.tasks)]

    async def find_by_id(self, task_id: int) -> Task | None:
        self.calls.append("find_by_id")
        return self.tasks.get(task_id)

    async def insert(self, fields: dict[str, Any]) -> Task:
        self.calls.append("insert")
        return self._add(fields)

    async def update_by_id(self, task_id: int, fields: dict[str, Any]) -> Task | None:
        self.calls.append("update_by_id")
        task = self.tasks.get(task_id)
        if task is None:
            return None
        for name, value in fields.items():
            setattr(task, name, value)
        return task

    async def delete_by_id(self, task_id: int) -> int:
        self.calls.append("delete_by_id")
        return 1 if self.tasks.pop(task_id, None) else 0


class Clock:
    """Manually advanced time source for cache expiry tests."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_cache_stats():
    cache_stats.reset()
    yield
    cache_stats.reset()


@pytest.fixture
def settings() -> Settings:
    return Settings(cache_backend="memory", tasks_cache_key=SNAPSHOT_KEY, tasks_cache_ttl_seconds=3600)


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def cache(clock: Clock) -> MemoryCache:
    return MemoryCache(maxsize=16, timer=clock)


@pytest.fixture
def repository() -> FakeTaskRepository:
    return FakeTaskRepository()


@pytest.fixture
def service(repository: FakeTaskRepository, cache: MemoryCache, settings: Settings) -> TaskService:
    return TaskService(repository, cache, settings)


@pytest.fixture
async def client(service: TaskService, cache: MemoryCache) -> AsyncClient:
    """Async HTTP client with the task service wired to the fakes above."""
    app.dependency_overrides[get_task_service] = lambda: service
    app.dependency_overrides[get_cache] = lambda: cache
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
