from functools import wraps
from typing import Callable


def invalidates(key_attr: str = "snapshot_key"):
    """
    Decorator for async methods that mutate the source of truth.

    Runs the wrapped method first and, only if it returns normally, evicts the
    cache key named by ``getattr(self, key_attr)`` through ``self.evict``.
    Exceptions from the method propagate without touching the cache.
    Example:
      @invalidates()
      async def delete_task(self, task_id): ...
    """

    def decorator(fn: Callable):
        @wraps(fn)
        async def wrapper(self, *args, **kwargs):
            result = await fn(self, *args, **kwargs)
            await self.evict(getattr(self, key_attr))
            return result

        return wrapper

    return decorator
