"""
Exception handlers. Every error leaves the API in the same `ApiError`
envelope: `{"error": ..., "details": ...}`.
"""

import traceback

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from structlog import get_logger

from gridmon.core.models import ApiError
from gridmon.service.groups import GroupNotFound


def error_response(
    status_code: int, error: str, details: dict | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiError(error=error, details=details).model_dump(
            by_alias=True, exclude_none=True
        ),
    )


def group_not_found_handler(request: Request, exc: GroupNotFound) -> JSONResponse:
    return error_response(
        status_code=status.HTTP_404_NOT_FOUND,
        error=str(exc),
        details={"groupName": exc.group_name},
    )


def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    response = error_response(status_code=exc.status_code, error=str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Anything not handled elsewhere is a 500. The traceback is only returned
    outside of production.
    """
    log = get_logger()
    log.exception("api.unhandled_exception", url=str(request.url))

    details = None
    if not request.app.settings.production:
        details = {"stack": traceback.format_exception(exc)}

    return error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error="Internal server error",
        details=details,
    )


def add_exception_handlers(app: FastAPI) -> FastAPI:
    app.add_exception_handler(GroupNotFound, group_not_found_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    return app
