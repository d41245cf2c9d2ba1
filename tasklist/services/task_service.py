import logging

from tasklist.cache.base import SnapshotCache
from tasklist.cache.decorators import invalidates
from tasklist.cache.snapshot import Snapshot, encode_snapshot
from tasklist.core.config import Settings, get_settings
from tasklist.exceptions import CacheError, InvalidInputError, TaskNotFoundError
from tasklist.models import TaskResponse
from tasklist.repositories.task_repository import TaskRepository

logger = logging.getLogger(__name__)


def _require_description(description: str | None):
    if description is None or not description.strip():
        raise InvalidInputError("Description is required", field="description")


class TaskService:
    """
    Cache-aside coordinator for the task collection.

    The full listing is memoized under a single key; single-task reads go
    straight to the repository. Every successful mutation evicts the listing
    after the repository has committed, and the listing is never patched in
    place. Cache failures are not downgraded to misses: they abort the
    operation with CacheError, including an eviction that follows a
    committed write.

    Concurrent callers are not serialized. Two simultaneous misses both fill
    the key, and a fill racing a mutation may store a listing that predates
    it; such an entry lives until the next mutation or until it expires.
    """

    def __init__(
        self,
        repository: TaskRepository,
        cache: SnapshotCache,
        settings: Settings | None = None,
    ):
        settings = settings or get_settings()
        self.repository = repository
        self.cache = cache
        self.snapshot_key = settings.tasks_cache_key
        self.snapshot_ttl = settings.tasks_cache_ttl_seconds

    async def list_snapshot(self) -> Snapshot:
        """Serialized listing, from the cache when present, else from the store."""
        try:
            cached = await self.cache.get(self.snapshot_key)
        except CacheError:
            cache_stats.record("errors")
            raise

        if cached is not None:
            cache_stats.record("hits")
            logger.debug(f"Cache HIT for {self.snapshot_key}")
            return Snapshot(key=self.snapshot_key, payload=cached, hit=True)

        cache_stats.record("misses")
        logger.debug(f"Cache MISS for {self.snapshot_key}")
        tasks = await self.repository.find_all()
        payload = encode_snapshot(tasks)

        try:
            await self.cache.set_with_expiry(self.snapshot_key, payload, self.snapshot_ttl)
        except CacheError:
            cache_stats.record("errors")
            raise

        return Snapshot(key=self.snapshot_key, payload=payload, hit=False)

    async def list_tasks(self) -> list[TaskResponse]:
        snapshot = await self.list_snapshot()
        return snapshot.tasks()

    async def evict(self, key: str):
        try:
            await self.cache.delete(key)
        except CacheError:
            cache_stats.record("errors")
            logger.error(f"Eviction of {key} failed after a committed write")
            raise
        cache_stats.record("evictions")
        logger.debug(f"Evicted {key}")

    @invalidates()
    async def create_task(self, description: str | None) -> TaskResponse:
        _require_description(description)
        task = await self.repository.insert(
            {"description": description, "completed": False}
        )
        logger.info(f"Created task {task.id}")
        return TaskResponse.model_validate(task)

    async def get_task(self, task_id: int) -> TaskResponse:
        task = await self.repository.find_by_id(task_id)
        if not task:
            raise TaskNotFoundError(task_id)
        return TaskResponse.model_validate(task)

    @invalidates()
    async def update_task(
        self,
        task_id: int,
        description: str | None = None,
        completed: bool | None = None,
    ) -> TaskResponse:
        fields = {}
        if description is not None:
            _require_description(description)
            fields["description"] = description
        if completed is not None:
            fields["completed"] = completed

        task = await self.repository.update_by_id(task_id, fields)
        if not task:
            raise TaskNotFoundError(task_id)
        logger.info(f"Updated task {task_id}")
        return TaskResponse.model_validate(task)

    async def complete_task(self, task_id: int) -> TaskResponse:
        return await self.update_task(task_id, completed=True)

    @invalidates()
    async def delete_task(self, task_id: int):
        deleted = await self.repository.delete_by_id(task_id)
        if not deleted:
            raise TaskNotFoundError(task_id)
        logger.info(f"Deleted task {task_id}")


class CacheStats:
    """Per-process counters for the listing cache."""

    def __init__(self):
        self.stats = {"hits": 0, "misses": 0, "evictions": 0, "errors": 0}

    def record(self, name: str):
        self.stats[name] += 1

    def reset(self):
        for name in self.stats:
            self.stats[name] = 0

    def get_stats(self) -> dict:
        lookups = self.stats["hits"] + self.stats["misses"]
        return {
            **self.stats,
            "hit_rate": self.stats["hits"] / lookups if lookups > 0 else 0,
        }


cache_stats = CacheStats()
