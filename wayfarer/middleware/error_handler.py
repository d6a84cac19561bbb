"""
Wayfarer - Error Handler Middleware
Formats exceptions raised by route handlers into structured JSON responses.
"""
import logging
import traceback
import uuid
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from wayfarer.core.errors import ErrorCode, GameError

logger = logging.getLogger("wayfarer.errors")

HTTP_STATUS_CODES = {
    400: ErrorCode.VALIDATION_ERROR,
    404: ErrorCode.NOT_FOUND,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION_ERROR,
    500: ErrorCode.UNKNOWN,
}


def _error_id() -> str:
    return str(uuid.uuid4())[:8]


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _error_body(error_id: str, code: ErrorCode, message: str, details=None,
                recoverable: bool = True, recovery_hint=None) -> dict:
    return {
        "success": False,
        "error": {
            "code": code.value,
            "message": message,
            "details": details or {},
            "recoverable": recoverable,
            "recovery_hint": recovery_hint,
            "error_id": error_id,
            "timestamp": _timestamp(),
        }
    }


def setup_error_handlers(app: FastAPI, debug: bool = False):
    """
    Register exception handlers on the FastAPI application.

    GameError subclasses keep their own status and code; request
    validation and plain HTTP errors are mapped onto ErrorCode values;
    anything else becomes a 500 with a traceback attached in debug mode.
    """

    @app.exception_handler(GameError)
    async def game_error_handler(request: Request, exc: GameError):
        error_id = _error_id()
        logger.warning(
            f"[{error_id}] GameError: {exc.code.value} - {exc.message}",
            extra={"error_id": error_id, "error_code": exc.code.value, "path": str(request.url.path)}
        )

        response_data = exc.to_dict()
        response_data["error"]["error_id"] = error_id
        response_data["error"]["timestamp"] = _timestamp()
        return JSONResponse(status_code=exc.http_status, content=response_data)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = []
        for error in exc.errors():
            field = " -> ".join(str(loc) for loc in error.get("loc", []))
            errors.append({
                "field": field,
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type", "validation_error")
            })

        return JSONResponse(
            status_code=422,
            content=_error_body(
                _error_id(),
                ErrorCode.VALIDATION_ERROR,
                "Request validation failed",
                details={"errors": errors},
                recovery_hint="Check the request data and correct any invalid fields",
            )
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        code = HTTP_STATUS_CODES.get(exc.status_code, ErrorCode.UNKNOWN)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                _error_id(),
                code,
                str(exc.detail) if exc.detail else "An error occurred",
                recoverable=exc.status_code < 500,
            )
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        error_id = _error_id()
        logger.error(
            f"[{error_id}] Unhandled exception on {request.method} {request.url.path}: "
            f"{type(exc).__name__}: {exc}",
            extra={"error_id": error_id, "path": str(request.url.path), "method": request.method},
            exc_info=True
        )

        content = _error_body(
            error_id,
            ErrorCode.UNKNOWN,
            "An unexpected error occurred",
            recoverable=False,
            recovery_hint="Please try again or contact support",
        )
        if debug:
            content["error"]["debug"] = {
                "exception_type": type(exc).__name__,
                "exception_message": str(exc),
                "traceback": traceback.format_exc().split("\n")
            }
        return JSONResponse(status_code=500, content=content)

    return app
