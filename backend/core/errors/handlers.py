"""FastAPI Exception Handlers

Integrates the monadic error handling system and the schema validation
system with FastAPI's exception handling. Converts AppErrors, schema
ValidationErrors, coercion configuration errors and standard exceptions to
proper HTTP responses.
"""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging import get_logger

from .types import AppError, ErrorCode, ErrorContext

log = get_logger("errors.handlers")


class AppErrorException(Exception):
    """Exception wrapper for AppError.

    Use this when you need to raise an AppError in code that
    doesn't use the Result monad (e.g., FastAPI dependencies).
    """

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(str(error))


def result_to_response(error: AppError) -> JSONResponse:
    """Convert AppError to FastAPI JSONResponse."""
    status_code = error.code.http_status

    log_method = log.warning if status_code < 500 else log.error
    log_method(
        "error_response",
        error_code=error.code.name,
        error_code_num=error.code.value,
        message=error.message,
        category=error.code.category,
        correlation_id=error.context.correlation_id,
        origin=error.context.origin,
        metadata=error.metadata,
    )

    return JSONResponse(
        status_code=status_code,
        content=error.to_dict(),
    )


def _request_context(request: Request) -> dict:
    return {
        "correlation_id": request.headers.get("X-Correlation-ID", ""),
        "request_id": request.headers.get("X-Request-ID"),
    }


async def app_error_handler(request: Request, exc: AppErrorException) -> JSONResponse:
    """Handle AppErrorException raised in route handlers."""
    return result_to_response(exc.error.with_context(**_request_context(request)))


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Handle standard HTTP exceptions with structured error response."""
    status_code = exc.status_code
    code = ErrorCode.E2000_VALIDATION_GENERIC if 400 <= status_code < 500 else ErrorCode.E9001_UNEXPECTED_ERROR

    error = AppError(
        code=code,
        message=str(exc.detail) if exc.detail else f"HTTP {status_code}",
        context=ErrorContext(
            correlation_id=request.headers.get("X-Correlation-ID", ""),
            origin="http",
        ),
    )
    response = result_to_response(error)
    response.status_code = status_code
    return response


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle FastAPI's own pydantic validation errors (non-schema parameters)."""
    from core.validation.errors import ValidationError, ValidationErrorDetail

    validation_error = ValidationError(
        message="Request validation failed",
        details=[ValidationErrorDetail.from_pydantic_error(err) for err in exc.errors()],
    )
    error = validation_error.to_app_error().with_context(
        origin="request_validation", **_request_context(request)
    )
    return result_to_response(error)


async def validation_error_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Handle schema ValidationErrors raised while validating route slots."""
    from core.validation.errors import ValidationError

    if not isinstance(exc, ValidationError):
        raise exc

    error = exc.to_app_error().with_context(origin="validation", **_request_context(request))
    return result_to_response(error)


async def coercion_error_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Handle schema configuration errors that surfaced outside registration."""
    from core.validation.errors import QueryCoercionError

    if not isinstance(exc, QueryCoercionError):
        raise exc

    error = exc.to_app_error().with_context(origin="query_coercion", **_request_context(request))
    return result_to_response(error)


async def unhandled_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Catch-all handler for unhandled exceptions.

    Converts to internal error and logs full traceback.
    """
    error = AppError(
        code=ErrorCode.E9001_UNEXPECTED_ERROR,
        message="An unexpected error occurred",
        context=ErrorContext(
            correlation_id=request.headers.get("X-Correlation-ID", ""),
            origin="unhandled",
        ),
        cause=exc,
    )

    log.exception(
        "unhandled_exception",
        error_type=type(exc).__name__,
        error_message=str(exc),
        correlation_id=error.context.correlation_id,
    )

    return result_to_response(error)


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers on FastAPI app.

    Usage in main.py:
        from core.errors.handlers import register_error_handlers

        app = FastAPI(...)
        register_error_handlers(app)
    """
    from core.validation.errors import QueryCoercionError, ValidationError

    app.add_exception_handler(AppErrorException, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(QueryCoercionError, coercion_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
