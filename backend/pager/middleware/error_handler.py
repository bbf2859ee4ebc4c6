"""
FastAPI error handlers for services exposing paged endpoints.

Translates pagination errors into consistent JSON error responses.
Never exposes SQL or driver messages to clients.
"""
import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..errors import ExecutionError, PagerError

logger = structlog.get_logger("pager.api.errors")


def register_error_handlers(app: FastAPI) -> None:
    """Register pagination exception handlers on the FastAPI app."""

    @app.exception_handler(ExecutionError)
    async def execution_error_handler(request: Request, exc: ExecutionError) -> JSONResponse:
        logger.error(
            "database_error",
            error_code=exc.error_code,
            error=exc.message,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "code": exc.error_code,
                    "message": "Database temporarily unavailable. Please retry.",
                }
            },
        )

    @app.exception_handler(PagerError)
    async def pager_error_handler(request: Request, exc: PagerError) -> JSONResponse:
        logger.error(
            "pagination_error",
            error_code=exc.error_code,
            error=exc.message,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "code": exc.error_code,
                    "message": exc.message,
                }
            },
        )
