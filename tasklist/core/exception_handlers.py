"""Map service errors and request validation failures to JSON responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from tasklist.exceptions import TaskListError

logger = logging.getLogger(__name__)

_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "TASK_NOT_FOUND": 404,
    "BACKING_STORE_ERROR": 500,
    "CACHE_ERROR": 500,
}


def _task_list_exception_handler(request: Request, exc: TaskListError) -> JSONResponse:
    status = _ERROR_CODE_STATUS.get(exc.error_code, 500)
    if status >= 500:
        logger.error(
            f"{request.method} {request.url.path} failed: {exc.error_code} {exc.details}",
            exc_info=exc,
        )
    else:
        logger.warning(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=status, content=exc.to_dict())


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies are client errors (400), like blank descriptions."""
    return JSONResponse(
        status_code=400,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": jsonable_encoder(exc.errors()),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskListError, _task_list_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
