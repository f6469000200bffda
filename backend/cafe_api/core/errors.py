"""
Exception handlers.

Every failure leaves the API as the error envelope
``{"success": false, "message": ..., "details": ...}``.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cafe_shared.config.logging import api_logger as logger
from cafe_shared.config.settings import get_settings
from cafe_shared.infrastructure.correlation import REQUEST_ID_HEADER, request_id_of
from cafe_shared.utils.responses import error_body, flatten_validation_errors


def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """AppException subclasses and framework errors such as 404/405 routing."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), getattr(exc, "details", None)),
        headers=getattr(exc, "headers", None),
    )


def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body, query or path validation failures are a 400, not FastAPI's 422."""
    logger.warning("Request validation failed", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(
        status_code=400,
        content=error_body("Invalid request body.", flatten_validation_errors(exc.errors())),
    )


def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    request_id = request_id_of(request)
    details = {"request_id": request_id} if request_id else {}
    if get_settings().debug:
        details["error"] = str(exc)
    return JSONResponse(
        status_code=500,
        content=error_body("Internal Server Error", details or None),
        headers={REQUEST_ID_HEADER: request_id} if request_id else None,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
