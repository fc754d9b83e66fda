"""Error envelope and handlers.

Every failure leaves the API as ``{"error": "<message>"}``. Not-found and
missing-parameter errors keep their status; everything else, request
validation included, is reported as a 500 with a generic message while the
underlying error is logged.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import CLIENT_ERRORS, FlowBoardError

logger = logging.getLogger(__name__)


@contextmanager
def failure_message(message: str) -> Iterator[None]:
    try:
        yield
    except (HTTPException, *CLIENT_ERRORS):
        raise
    except Exception as exc:
        extra = exc.log_context() if isinstance(exc, FlowBoardError) else {}
        logger.error("%s: %s", message, exc, exc_info=True, extra=extra)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message) from exc


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(FlowBoardError)
    async def flowboard_error_handler(request: Request, exc: FlowBoardError):
        logger.warning(
            "%s on %s: %s",
            type(exc).__name__,
            request.url.path,
            exc.message,
            extra={"path": request.url.path, **exc.log_context()},
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning("Validation error on %s: %s", request.url.path, exc.errors(), extra={"path": request.url.path})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Invalid request data"},
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )
