"""
app/core/errors.py

Purpose: HTTP error surface

- Renders every error as an ErrorResponse
- Dispatch failures use their FailureReason as the error code
- Form validation errors are flattened to field/message pairs
- Server-side details (configuration, provider payloads) are hidden in production
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Any, Dict, Iterable, List, Optional

from app.core.config import settings
from app.core.exceptions import DispatchError, InvalidInputError, TxnAlertError
from app.core.logging import get_logger
from app.schemas.response import ErrorResponse

logger = get_logger(__name__)

_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}
_VALUE_ERROR_PREFIX = "Value error, "


def _error_response(status_code: int, error: str, code: str, details: Optional[Any] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=error,
            code=code,
            details=jsonable_encoder(details)
        ).model_dump()
    )


def _public_details(status_code: int, details: Any) -> Any:
    # 5xx details describe our own config or the provider's raw reply
    if settings.is_production and status_code >= 500:
        return None
    return details


def field_errors(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, str]]:
    """
    Flattens pydantic/FastAPI validation errors for the transaction form.

    Example:
        {"loc": ("body", "accountNumber"), "msg": "Value error, ..."}
        -> {"field": "accountNumber", "message": "..."}
    """
    flattened = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in _REQUEST_LOCATIONS]
        message = str(error.get("msg", "Invalid value"))
        if message.startswith(_VALUE_ERROR_PREFIX):
            message = message[len(_VALUE_ERROR_PREFIX):]
        flattened.append({"field": ".".join(loc) or "form", "message": message})
    return flattened


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    """
    @app.exception_handler(DispatchError)
    async def dispatch_exception_handler(request: Request, exc: DispatchError):
        """
        SMS dispatch failures raised outside the dispatcher (scripts, ad-hoc routes).
        Bad caller input is a 400; everything else is an upstream failure.
        """
        status_code = 400 if isinstance(exc, InvalidInputError) else exc.status_code
        logger.warning(
            f"⚠️ SMS dispatch failed on {request.url.path}: {exc.message}",
            extra={"reason": exc.reason.value}
        )
        return _error_response(
            status_code,
            exc.message,
            exc.code,
            _public_details(status_code, exc.details)
        )

    @app.exception_handler(TxnAlertError)
    async def app_exception_handler(request: Request, exc: TxnAlertError):
        if exc.status_code >= 500:
            logger.error(f"❌ {exc.code} on {request.url.path}: {exc.message}")
        return _error_response(
            exc.status_code,
            exc.message,
            exc.code,
            _public_details(exc.status_code, exc.details)
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Handles standard HTTP exceptions (404, etc.)
        """
        return _error_response(exc.status_code, str(exc.detail), "HTTP_ERROR")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = field_errors(exc.errors())
        logger.info(
            f"Rejected input on {request.url.path}: "
            + ", ".join(error["field"] for error in errors)
        )
        return _error_response(422, "Input validation failed", "VALIDATION_ERROR", errors)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all for unhandled exceptions.
        """
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "method": request.method,
                "url": str(request.url),
                "client": request.client.host if request.client else "unknown"
            },
            exc_info=True
        )

        message = "An internal error occurred. Please try again later." if settings.is_production else str(exc)

        return _error_response(500, message, "INTERNAL_ERROR")
