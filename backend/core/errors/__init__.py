"""Monadic Error Handling System

Type-safe error handling inspired by Haskell's Either monad and Rust's
Result type.

Key components:
- Result[T, E]: Monadic container for success/failure
- AppError: Base error type with full context
- ErrorCode: Hierarchical error code taxonomy
- FastAPI handlers that turn errors into structured JSON responses

Usage:
    from core.errors import Ok, Err, Result

    match schema.safe_parse(raw):
        case Ok(value):
            handle(value)
        case Err(error):
            log.warning("invalid_input", errors=error.summary())
"""
from .types import (
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
)

from .handlers import (
    AppErrorException,
    register_error_handlers,
    result_to_response,
)

__all__ = [
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    "AppErrorException",
    "register_error_handlers",
    "result_to_response",
]
