"""Validation Error System

Structured errors with paths, constraints and actual values, plus the two
errors raised while preparing schemas for text input.

Error Format:
{
    "error": {
        "type": "validation_error",
        "message": "Validation failed",
        "mode": "collect_all",
        "errors": [
            {
                "field": "numberArray[0]",
                "constraint": "number_type",
                "value": "notANumber",
                "message": "Input should be a valid number"
            }
        ]
    }
}
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

from pydantic_core import PydanticUndefined
from pydantic_core import ValidationError as CoreValidationError

from core.errors import AppError, ErrorCode

ROOT_PATH = "$"


class ValidationMode(str, Enum):
    """Validation accumulation strategy."""
    FAIL_FAST = "fail_fast"
    COLLECT_ALL = "collect_all"


@dataclass(frozen=True, slots=True)
class ValidationErrorDetail:
    """Detailed validation error for a single field.

    - field_path: path to offending value (e.g., "tags[0]", "filter.limit")
    - constraint: type of constraint violated (e.g., "int_type", "missing")
    - actual_value: the value that failed
    - message: human-readable error message
    """
    field_path: str
    constraint: str
    actual_value: Any = None
    message: str = ""
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for API responses."""
        result = {"field": self.field_path, "constraint": self.constraint, "message": self.message}
        if self.actual_value is not None:
            result["value"] = _jsonable(self.actual_value)
        return result

    def describe(self) -> str:
        if self.field_path == ROOT_PATH:
            return self.message
        return f'{self.message} at "{self.field_path}"'

    @classmethod
    def from_pydantic_error(cls, error: dict[str, Any]) -> ValidationErrorDetail:
        """Create from Pydantic validation error dict."""
        context = error.get("ctx") or {}
        code = ErrorCode(context["code"]) if isinstance(context.get("code"), int) else _code_for(error.get("type", ""))
        actual = error.get("input")
        return cls(field_path=format_path(error.get("loc", ())), constraint=error.get("type", "validation_error"),
            actual_value=None if actual is PydanticUndefined else actual,
            message=error.get("msg", "Validation failed"), code=code)


def _code_for(error_type: str) -> ErrorCode:
    if error_type == "missing": return ErrorCode.E2001_REQUIRED_FIELD_MISSING
    if error_type == "literal_error": return ErrorCode.E2006_INVALID_LITERAL
    if error_type.startswith("union_tag"): return ErrorCode.E2007_INVALID_UNION
    if error_type.endswith("_type") or error_type == "none_required": return ErrorCode.E2004_INVALID_TYPE
    if error_type in ("too_short", "too_long"): return ErrorCode.E2003_OUT_OF_RANGE
    return ErrorCode.E2000_VALIDATION_GENERIC


def format_path(loc: Sequence[str | int]) -> str:
    """Format a location tuple as a path: ("tags", 0) -> "tags[0]"."""
    if not loc: return ROOT_PATH
    parts = []
    for segment in loc:
        if isinstance(segment, int): parts.append(f"[{segment}]")
        elif parts: parts.append(f".{segment}")
        else: parts.append(str(segment))
    return "".join(parts)


def _jsonable(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    return repr(value)


@dataclass(eq=False)
class ValidationError(Exception):
    """Validation error with structured details."""
    message: str
    details: list[ValidationErrorDetail]
    mode: ValidationMode = ValidationMode.COLLECT_ALL

    def __post_init__(self):
        super().__init__(self.message)

    def __str__(self) -> str:
        if not self.details: return self.message
        return self.summary()

    def summary(self) -> str:
        """One-line rendering: 'Input should be a valid number at "n"; Field required at "m"'."""
        return "; ".join(d.describe() for d in self.details)

    @classmethod
    def from_pydantic(cls, error: CoreValidationError,
                      mode: ValidationMode = ValidationMode.COLLECT_ALL) -> ValidationError:
        """Build from a pydantic-core failure, keeping as many issues as `mode` allows."""
        accumulator = create_accumulator(mode)
        for issue in error.errors(include_url=False):
            if not accumulator.add_error(ValidationErrorDetail.from_pydantic_error(issue)):
                break
        return accumulator.to_validation_error()

    @property
    def first_error(self) -> ValidationErrorDetail | None: return self.details[0] if self.details else None

    def to_app_error(self) -> AppError:
        """Convert to AppError for error handling system."""
        if len(self.details) == 1:
            d = self.details[0]
            return AppError(code=ErrorCode.E2000_VALIDATION_GENERIC, message=d.describe(),
                metadata={"field": d.field_path, "constraint": d.constraint, "value": _jsonable(d.actual_value)})

        return AppError(code=ErrorCode.E2000_VALIDATION_GENERIC, message=self.summary() or self.message,
            metadata={"validation_mode": self.mode.value, "error_count": len(self.details),
                "errors": [d.to_dict() for d in self.details]})

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for API responses."""
        return {"error": {"type": "validation_error", "message": self.message, "mode": self.mode.value,
            "error_count": len(self.details), "errors": [d.to_dict() for d in self.details]}}


class ValidationErrorAccumulator(ABC):
    """Abstract base for error accumulation strategies."""

    @abstractmethod
    def add_error(self, detail: ValidationErrorDetail) -> bool:
        """Add error detail. Returns True if should continue, False if should stop."""

    @abstractmethod
    def get_errors(self) -> list[ValidationErrorDetail]:
        """Get accumulated errors."""

    @abstractmethod
    def has_errors(self) -> bool:
        """Check if any errors accumulated."""

    @property
    @abstractmethod
    def mode(self) -> ValidationMode:
        """Get the accumulation mode."""

    def to_validation_error(self, message: str = "Validation failed") -> ValidationError | None:
        """Convert to ValidationError if errors exist."""
        if not self.has_errors(): return None
        return ValidationError(message=message, details=self.get_errors(), mode=self.mode)


@dataclass
class FailFastAccumulator(ValidationErrorAccumulator):
    """Fail-fast accumulator: keeps the first error only."""
    _error: ValidationErrorDetail | None = None

    @property
    def mode(self) -> ValidationMode: return ValidationMode.FAIL_FAST

    def add_error(self, detail: ValidationErrorDetail) -> bool:
        if self._error is None: self._error = detail
        return False

    def get_errors(self) -> list[ValidationErrorDetail]: return [self._error] if self._error else []

    def has_errors(self) -> bool: return self._error is not None


@dataclass
class CollectAllAccumulator(ValidationErrorAccumulator):
    """Collect-all accumulator: gathers all errors up to max_errors."""
    _errors: list[ValidationErrorDetail] = field(default_factory=list)
    max_errors: int = 50

    @property
    def mode(self) -> ValidationMode: return ValidationMode.COLLECT_ALL

    def add_error(self, detail: ValidationErrorDetail) -> bool:
        if len(self._errors) < self.max_errors: self._errors.append(detail)
        return len(self._errors) < self.max_errors

    def get_errors(self) -> list[ValidationErrorDetail]: return self._errors.copy()

    def has_errors(self) -> bool: return len(self._errors) > 0


def create_accumulator(mode: ValidationMode, max_errors: int = 50) -> ValidationErrorAccumulator:
    """Factory for creating accumulators based on mode."""
    return FailFastAccumulator() if mode == ValidationMode.FAIL_FAST else CollectAllAccumulator(max_errors=max_errors)


# ============================================================================
# Schema preparation errors
# ============================================================================

class UnsupportedSchemaType(Exception):
    """A schema node whose kind cannot accept text input.

    Raised while rewriting a schema, never while validating a request.
    """

    def __init__(self, kind_name: str):
        self.kind_name = kind_name
        super().__init__(f"Unsupported schema type for query coercion: {kind_name}")

    @property
    def message(self) -> str:
        return self.args[0]


class QueryCoercionError(Exception):
    """Route registration failed because a field schema cannot be coerced.

    The text is '<underlying message> at "<field key>"'.
    """

    code = ErrorCode.E9004_SCHEMA_CONFIGURATION

    def __init__(self, message: str, field_key: str, kind_name: str | None = None):
        self.field_key = field_key
        self.kind_name = kind_name
        super().__init__(f'{message} at "{field_key}"')

    @classmethod
    def from_unsupported(cls, error: UnsupportedSchemaType, field_key: str) -> QueryCoercionError:
        return cls(error.message, field_key, error.kind_name)

    @property
    def message(self) -> str:
        return self.args[0]

    def to_app_error(self) -> AppError:
        return AppError(code=self.code, message=self.message, cause=self,
            metadata={"field": self.field_key, "kind": self.kind_name})
