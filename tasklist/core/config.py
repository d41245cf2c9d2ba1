from functools import lru_cache
from typing import Literal

from fastapi import Depends
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Annotated


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite+aiosqlite:///./tasks.db"
    database_echo: bool = False

    redis_dsn: str = "redis://localhost:6379/0"
    redis_pool_size: int = 5
    redis_connect_timeout: int = 5

    cache_backend: Literal["redis", "memory"] = "redis"
    cache_namespace: str = ""  # prefix applied to every cache key
    tasks_cache_key: str = "tasks:all"
    tasks_cache_ttl_seconds: int = 3600
    memory_cache_maxsize: int = 128

    cors_origins: list[str] = ["*"]

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()


SettingsDep = Annotated[Settings, Depends(get_settings)]
