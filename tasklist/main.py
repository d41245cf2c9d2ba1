import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from tasklist.cache.base import SnapshotCache
from tasklist.cache.layer import cache_layer
from tasklist.core.config import get_settings
from tasklist.core.exception_handlers import register_exception_handlers
from tasklist.core.logging import setup_logging
from tasklist.database import create_db_and_tables, engine, ping_db
from tasklist.dependencies import get_cache
from tasklist.exceptions import CacheError
from tasklist.routers import tasks
from tasklist.services.task_service import cache_stats

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    await create_db_and_tables()
    await cache_layer.init_cache()
    logger.info("Task list service started")
    yield
    await cache_layer.close()
    await engine.dispose()


app = FastAPI(
    title="Task List API",
    description="Task CRUD over a relational store with a cache-aside listing",
    swagger_ui_parameters={"displayRequestDuration": True},
    version="1.0.0",
    lifespan=lifespan,
)

settings = get_settings()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Cache"],
)

register_exception_handlers(app)

# Include routers
app.include_router(tasks.router)


@app.get("/")
async def root():
    return {
        "message": "Welcome to Task List API",
        "docs": "/docs",
        "version": "1.0.0",
    }


@app.get("/health")
async def health_check(cache: SnapshotCache = Depends(get_cache)):
    checks = {"database": "ok", "cache": "ok"}
    try:
        await ping_db()
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database health check failed: {e}")
        checks["database"] = "unavailable"
    try:
        await cache.ping()
    except CacheError:
        checks["cache"] = "unavailable"

    healthy = all(value == "ok" for value in checks.values())
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "healthy" if healthy else "degraded", **checks},
    )


@app.get("/cache/stats")
async def get_cache_stats():
    return cache_stats.get_stats()
