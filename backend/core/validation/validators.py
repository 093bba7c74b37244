"""Constraint Validators

Atomic validators attached to string, number and array schema nodes as
constraint checks (`string().min(3)`, `number().max(100)`, ...). Each runs
after the node's own type check and reports a rich ValidationResult.

Features:
- Frozen dataclass validators for immutability
- Compiled regex held on the validator
- Rich validation metadata for error context
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable
import re

from core.errors import ErrorCode


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Result of a validation check with rich context."""
    is_valid: bool
    error_message: str | None = None
    error_code: ErrorCode | None = None
    constraint: str | None = None
    expected: Any = None
    actual: Any = None

    @classmethod
    def valid(cls) -> ValidationResult: return cls(is_valid=True)

    @classmethod
    def invalid(cls, message: str, code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC, *,
                constraint: str | None = None, expected: Any = None, actual: Any = None) -> ValidationResult:
        return cls(is_valid=False, error_message=message, error_code=code, constraint=constraint,
            expected=expected, actual=actual)


class AtomicValidator(ABC):
    """Base class for atomic validators."""

    @abstractmethod
    def validate(self, value: Any) -> ValidationResult:
        """Validate a value. Returns ValidationResult."""

    @property
    @abstractmethod
    def constraint_name(self) -> str:
        """Human-readable constraint name for error messages."""

    def __call__(self, value: Any) -> ValidationResult: return self.validate(value)


# ============================================================================
# String Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class StringLength(AtomicValidator):
    """Validate string length constraints."""
    min_length: int | None = None
    max_length: int | None = None

    @property
    def constraint_name(self) -> str:
        if self.min_length is not None and self.max_length is not None:
            return f"length[{self.min_length},{self.max_length}]"
        if self.min_length is not None:
            return f"min_length[{self.min_length}]"
        if self.max_length is not None:
            return f"max_length[{self.max_length}]"
        return "string_length"

    def validate(self, value: Any) -> ValidationResult:
        length = len(value)

        if self.min_length is not None and length < self.min_length:
            return ValidationResult.invalid(
                f"String must contain at least {self.min_length} character(s)",
                ErrorCode.E2003_OUT_OF_RANGE,
                constraint=self.constraint_name,
                expected=f">= {self.min_length} characters",
                actual=f"{length} characters",
            )

        if self.max_length is not None and length > self.max_length:
            return ValidationResult.invalid(
                f"String must contain at most {self.max_length} character(s)",
                ErrorCode.E2003_OUT_OF_RANGE,
                constraint=self.constraint_name,
                expected=f"<= {self.max_length} characters",
                actual=f"{length} characters",
            )

        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class RegexPattern(AtomicValidator):
    """Validate string against regex pattern."""
    pattern: str
    flags: int = 0
    description: str | None = None
    _compiled: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_compiled", re.compile(self.pattern, self.flags))

    @property
    def constraint_name(self) -> str:
        return self.description or f"pattern[{self.pattern}]"

    def validate(self, value: Any) -> ValidationResult:
        if not self._compiled.search(value):
            return ValidationResult.invalid(
                "Invalid",
                ErrorCode.E2002_INVALID_FORMAT,
                constraint=self.constraint_name,
                expected=f"match pattern '{self.pattern}'",
                actual=value[:50] + ("..." if len(value) > 50 else ""),
            )

        return ValidationResult.valid()


# ============================================================================
# Numeric Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class NumericRange(AtomicValidator):
    """Validate numeric range constraints."""
    min_value: float | int | None = None
    max_value: float | int | None = None
    exclusive_min: bool = False
    exclusive_max: bool = False

    @property
    def constraint_name(self) -> str:
        parts = []
        if self.min_value is not None:
            op = ">" if self.exclusive_min else ">="
            parts.append(f"{op}{self.min_value}")
        if self.max_value is not None:
            op = "<" if self.exclusive_max else "<="
            parts.append(f"{op}{self.max_value}")
        return f"range[{', '.join(parts)}]" if parts else "numeric"

    def validate(self, value: Any) -> ValidationResult:
        if self.min_value is not None:
            if self.exclusive_min and value <= self.min_value:
                return ValidationResult.invalid(
                    f"Number must be greater than {self.min_value}",
                    ErrorCode.E2003_OUT_OF_RANGE,
                    constraint=self.constraint_name,
                    expected=f"> {self.min_value}",
                    actual=value,
                )
            elif not self.exclusive_min and value < self.min_value:
                return ValidationResult.invalid(
                    f"Number must be greater than or equal to {self.min_value}",
                    ErrorCode.E2003_OUT_OF_RANGE,
                    constraint=self.constraint_name,
                    expected=f">= {self.min_value}",
                    actual=value,
                )

        if self.max_value is not None:
            if self.exclusive_max and value >= self.max_value:
                return ValidationResult.invalid(
                    f"Number must be less than {self.max_value}",
                    ErrorCode.E2003_OUT_OF_RANGE,
                    constraint=self.constraint_name,
                    expected=f"< {self.max_value}",
                    actual=value,
                )
            elif not self.exclusive_max and value > self.max_value:
                return ValidationResult.invalid(
                    f"Number must be less than or equal to {self.max_value}",
                    ErrorCode.E2003_OUT_OF_RANGE,
                    constraint=self.constraint_name,
                    expected=f"<= {self.max_value}",
                    actual=value,
                )

        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class MultipleOf(AtomicValidator):
    """Validate number is multiple of value."""
    factor: float | int

    @property
    def constraint_name(self) -> str:
        return f"multiple_of[{self.factor}]"

    def validate(self, value: Any) -> ValidationResult:
        if isinstance(value, int) and isinstance(self.factor, int):
            remainder = value % self.factor
        else:
            remainder = float(Decimal(str(value)) % Decimal(str(self.factor)))
        if remainder != 0:
            return ValidationResult.invalid(
                f"Number must be a multiple of {self.factor}",
                ErrorCode.E2005_CONSTRAINT_VIOLATION,
                constraint=self.constraint_name,
                expected=f"multiple of {self.factor}",
                actual=value,
            )

        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class WholeNumber(AtomicValidator):
    """Validate number has no fractional part."""

    @property
    def constraint_name(self) -> str:
        return "integer"

    def validate(self, value: Any) -> ValidationResult:
        if isinstance(value, float) and not value.is_integer():
            return ValidationResult.invalid(
                "Expected integer, received float",
                ErrorCode.E2004_INVALID_TYPE,
                constraint=self.constraint_name,
                expected="integer",
                actual=value,
            )
        return ValidationResult.valid()


# ============================================================================
# Collection Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class ListLength(AtomicValidator):
    """Validate list length constraints."""
    min_length: int | None = None
    max_length: int | None = None

    @property
    def constraint_name(self) -> str:
        parts = []
        if self.min_length is not None:
            parts.append(f"min={self.min_length}")
        if self.max_length is not None:
            parts.append(f"max={self.max_length}")
        return f"list_length[{', '.join(parts)}]" if parts else "list"

    def validate(self, value: Any) -> ValidationResult:
        length = len(value)

        if self.min_length is not None and length < self.min_length:
            return ValidationResult.invalid(
                f"Array must contain at least {self.min_length} element(s)",
                ErrorCode.E2003_OUT_OF_RANGE,
                constraint=self.constraint_name,
                expected=f">= {self.min_length} items",
                actual=f"{length} items",
            )

        if self.max_length is not None and length > self.max_length:
            return ValidationResult.invalid(
                f"Array must contain at most {self.max_length} element(s)",
                ErrorCode.E2003_OUT_OF_RANGE,
                constraint=self.constraint_name,
                expected=f"<= {self.max_length} items",
                actual=f"{length} items",
            )

        return ValidationResult.valid()


# ============================================================================
# Custom Validator
# ============================================================================

@dataclass(frozen=True, slots=True)
class CustomValidator(AtomicValidator):
    """Predicate-backed validator used by `Schema.refine`."""
    name: str
    check: Callable[[Any], bool]
    message: str = "Invalid input"

    @property
    def constraint_name(self) -> str:
        return self.name

    def validate(self, value: Any) -> ValidationResult:
        if self.check(value):
            return ValidationResult.valid()
        return ValidationResult.invalid(self.message, ErrorCode.E2005_CONSTRAINT_VIOLATION,
            constraint=self.constraint_name, actual=value)
