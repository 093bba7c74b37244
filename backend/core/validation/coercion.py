"""Text Coercion Rules

Rules that turn the textual form of a query parameter into the native value
a schema node validates. A rule never fails a request: when no safe
conversion applies, calling the rule returns its input unchanged and the
schema's own type check reports the problem.

Features:
- Frozen dataclass rules with a Result-returning `coerce`
- `__call__` suitable for use as a `Preprocess` step
- Normalizers turning a bare value into a list or set
"""
from __future__ import annotations

import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Generic, TypeVar

from core.errors import AppError, Err, ErrorCode, Ok, Result

from .errors import UnsupportedSchemaType
from .schema import UNDEFINED, describe_type

T = TypeVar("T")

# Matched with fullmatch; ASCII digits only
NUMBER_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)
INTEGER_PATTERN = re.compile(r"[+-]?\d+", re.ASCII)
BIGINT_PATTERN = re.compile(r"[+-]?\d+|0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+", re.ASCII)
ISO_DATETIME_PATTERN = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d{0,3}))?Z", re.ASCII
)
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _cannot(value: Any, target: str, code: ErrorCode = ErrorCode.E2002_INVALID_FORMAT) -> Err[AppError]:
    return Err(AppError(code=code, message=f"Cannot coerce {value!r} to {target}",
        metadata={"value": value if isinstance(value, str) else describe_type(value), "target": target}))


@dataclass(frozen=True, slots=True)
class CoercionRule(ABC, Generic[T]):
    """Base class for text coercion rules.

    Each rule defines:
    - The target type it coerces to
    - Whether a raw value can be coerced safely
    - The coercion itself, as a Result
    """

    @property
    @abstractmethod
    def target_type(self) -> type:
        """Type this rule coerces to."""

    @abstractmethod
    def can_coerce(self, value: Any) -> bool:
        """Check if value can be coerced to target type."""

    @abstractmethod
    def coerce(self, value: Any) -> Result[T, AppError]:
        """Coerce value to target type. Returns Result."""

    def __call__(self, value: Any) -> Any:
        """Coerced value, or `value` itself when the rule does not apply."""
        return self.coerce(value).unwrap_or(value)


@dataclass(frozen=True, slots=True)
class StringToBool(CoercionRule[bool]):
    """Coerce "true" / "false" (exact, case-sensitive)."""

    @property
    def target_type(self) -> type:
        return bool

    def can_coerce(self, value: Any) -> bool:
        return value == "true" or value == "false"

    def coerce(self, value: Any) -> Result[bool, AppError]:
        if not self.can_coerce(value):
            return _cannot(value, "bool")
        return Ok(value == "true")


@dataclass(frozen=True, slots=True)
class StringToNumber(CoercionRule[float]):
    """Coerce decimal number text to int (integral text) or float.

    Empty text and non-finite values ("inf", "nan", "1e999") are left alone.
    """

    @property
    def target_type(self) -> type:
        return float

    def can_coerce(self, value: Any) -> bool:
        return isinstance(value, str) and NUMBER_PATTERN.fullmatch(value) is not None \
            and math.isfinite(float(value))

    def coerce(self, value: Any) -> Result[int | float, AppError]:
        if not self.can_coerce(value):
            return _cannot(value, "number")
        if INTEGER_PATTERN.fullmatch(value):
            # int(str) caps text at 4300 digits, Decimal does not
            return Ok(int(Decimal(value)))
        return Ok(float(value))


@dataclass(frozen=True, slots=True)
class StringToBigInt(CoercionRule[int]):
    """Coerce integer text to an arbitrary-precision int.

    Surrounding whitespace is ignored and blank text is 0. Decimal text may
    carry a sign; 0x / 0o / 0b prefixed text may not. Digit separators
    ("1_000") and non-ASCII digits are left alone.
    """

    @property
    def target_type(self) -> type:
        return int

    def can_coerce(self, value: Any) -> bool:
        return self.coerce(value).is_ok()

    def coerce(self, value: Any) -> Result[int, AppError]:
        if not isinstance(value, str):
            return _cannot(value, "bigint", ErrorCode.E2004_INVALID_TYPE)
        text = value.strip()
        if not text:
            return Ok(0)
        if not BIGINT_PATTERN.fullmatch(text):
            return _cannot(value, "bigint")
        if text[:2].lower() in ("0x", "0o", "0b"):
            return Ok(int(text, 0))
        return Ok(int(Decimal(text)))


@dataclass(frozen=True, slots=True)
class StringToDate(CoercionRule[datetime]):
    """Coerce to a UTC datetime.

    Accepts milliseconds since the Unix epoch as number text, or
    `YYYY-MM-DDTHH:MM:SS[.fff]Z`.
    """

    @property
    def target_type(self) -> type:
        return datetime

    def can_coerce(self, value: Any) -> bool:
        return self.coerce(value).is_ok()

    def _parse(self, value: str) -> datetime:
        if StringToNumber().can_coerce(value):
            return EPOCH + timedelta(milliseconds=float(value))
        match = ISO_DATETIME_PATTERN.fullmatch(value)
        if match is None:
            raise ValueError(f"Not a timestamp: {value}")
        year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
        fraction = match.group(7) or ""
        millis = int(fraction.ljust(3, "0")) if fraction else 0
        return datetime(year, month, day, hour, minute, second, millis * 1000, tzinfo=timezone.utc)

    def coerce(self, value: Any) -> Result[datetime, AppError]:
        if not isinstance(value, str):
            return _cannot(value, "datetime", ErrorCode.E2004_INVALID_TYPE)
        try:
            return Ok(self._parse(value))
        except (ValueError, OverflowError):
            return _cannot(value, "datetime", ErrorCode.E2012_INVALID_DATE)


@dataclass(frozen=True, slots=True)
class StringToNull(CoercionRule[None]):
    """Coerce the text "null" to None."""

    @property
    def target_type(self) -> type:
        return type(None)

    def can_coerce(self, value: Any) -> bool:
        return value == "null"

    def coerce(self, value: Any) -> Result[None, AppError]:
        if not self.can_coerce(value):
            return _cannot(value, "null")
        return Ok(None)


def _number_text(value: float) -> str:
    """Shortest round-trip text of a float in JavaScript's number format.

    1e21 -> "1e+21", 1e-7 -> "1e-7", 2.0 -> "2", nan -> "NaN", inf -> "Infinity".
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(map(str, digit_tuple))
    point = exponent + len(digits)
    if len(digits) <= point <= 21:
        return sign + digits + "0" * (point - len(digits))
    if 0 < point <= 21:
        return f"{sign}{digits[:point]}.{digits[point:]}"
    if -6 < point <= 0:
        return f"{sign}0.{'0' * -point}{digits}"
    mantissa = digits[0] + (f".{digits[1:]}" if len(digits) > 1 else "")
    return f"{sign}{mantissa}e{point - 1:+d}"


def render_literal(value: Any) -> str | None:
    """Textual form of a literal value, as it would appear in a URL.

    Returns None for the absent-value literal, which has no text form but
    needs no coercion either. Raises UnsupportedSchemaType for values that
    cannot be written as text at all.
    """
    if value is UNDEFINED:
        return None
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _number_text(value)
    if isinstance(value, str):
        return value
    raise UnsupportedSchemaType(f"LiteralSchema with {describe_type(value)}")


@dataclass(frozen=True, slots=True)
class StringToLiteral(CoercionRule[Any]):
    """Coerce the exact textual rendering of a literal to the literal itself."""
    literal: Any

    def __post_init__(self):
        render_literal(self.literal)

    @property
    def target_type(self) -> type:
        return type(self.literal)

    def can_coerce(self, value: Any) -> bool:
        text = render_literal(self.literal)
        return text is not None and isinstance(value, str) and value == text

    def coerce(self, value: Any) -> Result[Any, AppError]:
        if not self.can_coerce(value):
            return _cannot(value, f"literal {render_literal(self.literal)}", ErrorCode.E2006_INVALID_LITERAL)
        return Ok(self.literal)


# ============================================================================
# Normalizers
# ============================================================================

@dataclass(frozen=True, slots=True)
class ToList:
    """A single query value becomes a one-element list."""

    def __call__(self, value: Any) -> Any:
        if value is UNDEFINED:
            return value
        if isinstance(value, (list, tuple)):
            return list(value)
        return [value]


@dataclass(frozen=True, slots=True)
class ToSet:
    """A single query value, or repeated values, become a set."""

    def __call__(self, value: Any) -> Any:
        if value is UNDEFINED or isinstance(value, (set, frozenset)):
            return value
        try:
            if isinstance(value, (list, tuple)):
                return set(value)
            return {value}
        except TypeError:
            return value


__all__ = [
    "CoercionRule",
    "StringToBool",
    "StringToNumber",
    "StringToBigInt",
    "StringToDate",
    "StringToNull",
    "StringToLiteral",
    "ToList",
    "ToSet",
    "render_literal",
]
