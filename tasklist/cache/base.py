from typing import Protocol


class SnapshotCache(Protocol):
    """
    Key-value store with per-entry expiry, as the task service needs it.

    Implementations raise CacheError for any backend failure and treat
    deleting an absent key as success.
    """

    async def init_cache(self) -> None: ...

    async def get(self, key: str) -> bytes | None: ...

    async def set_with_expiry(self, key: str, value: bytes, ttl_seconds: int) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def ping(self) -> None: ...

    async def close(self) -> None: ...
