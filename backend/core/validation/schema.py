"""Declarative Schema Nodes

A schema is an immutable tree of nodes, each tagged with a `SchemaKind`.
Every node compiles itself to a pydantic-core `CoreSchema` (`node.core`),
and parsing runs through a `SchemaValidator` built once per node. Leaf
types are strict: text is never turned into numbers, booleans or dates
here, that is the job of the coercion rules the transformer inserts.

Usage:
    from core.validation import builders as s

    Filters = s.object_({
        "active": s.boolean(),
        "limit": s.number().int_().max(100).optional(),
        "tags": s.array(s.string()),
    })
    Filters.parse({"active": True, "tags": ["a", "b"]})

Nodes are frozen dataclasses compared by identity; every builder method
returns a new node and never touches the receiver.
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Mapping
from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from functools import cached_property, partial
from types import MappingProxyType
from typing import Any, Callable, ClassVar

from pydantic_core import (
    CoreSchema,
    PydanticCustomError,
    PydanticUndefined,
    PydanticUndefinedType,
    SchemaValidator,
    core_schema,
)
from pydantic_core import ValidationError as CoreValidationError

from core.errors import Err, Ok, Result

from .errors import ValidationError, ValidationMode
from .validators import (
    AtomicValidator,
    CustomValidator,
    ListLength,
    MultipleOf,
    NumericRange,
    RegexPattern,
    StringLength,
    WholeNumber,
)


class SchemaKind(str, Enum):
    """Closed set of schema node kinds."""
    # Wrappers
    OPTIONAL = "optional"
    NULLABLE = "nullable"
    DEFAULT = "default"
    CATCH = "catch"
    PIPELINE = "pipeline"
    EFFECTS = "effects"
    # Composites
    ARRAY = "array"
    TUPLE = "tuple"
    UNION = "union"
    INTERSECTION = "intersection"
    SET = "set"
    OBJECT = "object"
    # Scalars
    BOOLEAN = "boolean"
    NUMBER = "number"
    BIGINT = "bigint"
    DATE = "date"
    STRING = "string"
    ENUM = "enum"
    NULL = "null"
    LITERAL = "literal"
    UNDEFINED = "undefined"
    VOID = "void"
    ANY = "any"
    UNKNOWN = "unknown"
    NEVER = "never"
    # Kinds with no text form
    BRANDED = "branded"
    DISCRIMINATED_UNION = "discriminated_union"
    FUNCTION = "function"
    LAZY = "lazy"
    MAP = "map"
    NAN = "nan"
    NATIVE_ENUM = "native_enum"
    PROMISE = "promise"
    READONLY = "readonly"
    RECORD = "record"
    SYMBOL = "symbol"


# An absent value (a key missing from the input). pydantic-core's own marker,
# so `with_default_schema` substitutes defaults for it.
UNDEFINED = PydanticUndefined


@dataclass(frozen=True, slots=True)
class Symbol:
    """A unique, name-tagged token with no textual value."""
    name: str = ""

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)


def describe_type(value: Any) -> str:
    """Name of a value's type as it appears in messages."""
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, float) and math.isnan(value):
        return "nan"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (datetime, date)):
        return "date"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, (set, frozenset)):
        return "set"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, Symbol):
        return "symbol"
    if callable(value):
        return "function"
    return type(value).__name__


# ============================================================================
# Validator functions shared by the core schemas
# ============================================================================

def _single_issue(error: CoreValidationError) -> PydanticCustomError:
    """Collapse a nested validator's failure into one issue at the current path."""
    issues = error.errors(include_url=False)
    messages = dict.fromkeys(issue["msg"] for issue in issues)
    return PydanticCustomError(issues[0]["type"], "; ".join(messages))


def _delegate(schema: Schema, value: Any) -> Any:
    try:
        return schema.validator.validate_python(value)
    except CoreValidationError as e:
        raise _single_issue(e) from None


def _run_checks(checks: tuple[AtomicValidator, ...], value: Any) -> Any:
    if value is UNDEFINED:
        return value
    for check in checks:
        result = check.validate(value)
        if not result.is_valid:
            context = {"code": result.error_code.value} if result.error_code else None
            raise PydanticCustomError(result.constraint or check.constraint_name,
                result.error_message or "Invalid input", context)
    return value


def _with_checks(schema: CoreSchema, checks: tuple[AtomicValidator, ...]) -> CoreSchema:
    if not checks:
        return schema
    return core_schema.no_info_after_validator_function(partial(_run_checks, checks), schema)


def _skip_undefined(value: Any, handler: core_schema.ValidatorFunctionWrapHandler) -> Any:
    return value if value is UNDEFINED else handler(value)


def _apply_defined(fn: Callable[[Any], Any], value: Any) -> Any:
    return value if value is UNDEFINED else fn(value)


def _fill_absent(optional_keys: frozenset[str], value: Any) -> Any:
    """Give absent optional keys an UNDEFINED value so their schemas still run."""
    if not isinstance(value, Mapping) or not (missing := optional_keys - value.keys()):
        return value
    return {**value, **dict.fromkeys(missing, UNDEFINED)}


def _drop_undefined(value: dict[str, Any]) -> dict[str, Any]:
    return {key: item for key, item in value.items() if item is not UNDEFINED}


def _reject(value: Any) -> Any:
    raise PydanticCustomError("never", "Input is not allowed")


def _require_nan(value: float) -> float:
    if not math.isnan(value):
        raise PydanticCustomError("nan_type", "Input should be NaN")
    return value


def _freeze(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(value)
    if isinstance(value, set):
        return frozenset(value)
    if isinstance(value, dict):
        return MappingProxyType(value)
    return value


_NOT_MERGEABLE = object()


def _merge(left: Any, right: Any) -> Any:
    if left is right or (type(left) is type(right) and left == right):
        return left
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        merged = dict(left)
        for key, value in right.items():
            if key in merged:
                merged[key] = _merge(merged[key], value)
                if merged[key] is _NOT_MERGEABLE:
                    return _NOT_MERGEABLE
            else:
                merged[key] = value
        return merged
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)) and len(left) == len(right):
        items = [_merge(a, b) for a, b in zip(left, right)]
        if any(item is _NOT_MERGEABLE for item in items):
            return _NOT_MERGEABLE
        return type(left)(items)
    return _NOT_MERGEABLE


# ============================================================================
# Base node
# ============================================================================

@dataclass(frozen=True, eq=False)
class Schema(ABC):
    """Base class for every schema node."""

    kind: ClassVar[SchemaKind]

    @abstractmethod
    def build(self) -> CoreSchema:
        """pydantic-core schema for this node, children included."""

    @cached_property
    def core(self) -> CoreSchema:
        return self.build()

    @cached_property
    def validator(self) -> SchemaValidator:
        return SchemaValidator(self.core)

    @property
    def is_optional(self) -> bool:
        """Whether the node accepts an absent value."""
        return False

    def parse(self, value: Any = UNDEFINED, *, mode: ValidationMode = ValidationMode.COLLECT_ALL) -> Any:
        """Validate `value` and return the parsed output, raising ValidationError."""
        try:
            return self.validator.validate_python(value)
        except CoreValidationError as e:
            raise ValidationError.from_pydantic(e, mode) from None

    def safe_parse(self, value: Any = UNDEFINED, *,
                   mode: ValidationMode = ValidationMode.COLLECT_ALL) -> Result[Any, ValidationError]:
        try:
            return Ok(self.parse(value, mode=mode))
        except ValidationError as e:
            return Err(e)

    # -- wrappers -----------------------------------------------------------

    def optional(self) -> OptionalSchema:
        return OptionalSchema(self)

    def nullable(self) -> NullableSchema:
        return NullableSchema(self)

    def default(self, value: Any = UNDEFINED, *, factory: Callable[[], Any] | None = None) -> DefaultSchema:
        if value is UNDEFINED and factory is None:
            raise ValueError("default() needs a value or a factory")
        return DefaultSchema(self, value, factory)

    def catch(self, value: Any = UNDEFINED, *, factory: Callable[[], Any] | None = None) -> CatchSchema:
        if value is UNDEFINED and factory is None:
            raise ValueError("catch() needs a value or a factory")
        return CatchSchema(self, value, factory)

    def pipe(self, target: Schema) -> PipelineSchema:
        return PipelineSchema(self, target)

    def transform(self, fn: Callable[[Any], Any]) -> EffectsSchema:
        return EffectsSchema(self, Transform(fn))

    def refine(self, check: Callable[[Any], bool], message: str = "Invalid input") -> EffectsSchema:
        return EffectsSchema(self, Refinement(CustomValidator("refinement", check, message)))

    def array(self) -> ArraySchema:
        return ArraySchema(self)

    def or_(self, other: Schema) -> UnionSchema:
        return UnionSchema((self, other))

    def and_(self, other: Schema) -> IntersectionSchema:
        return IntersectionSchema(self, other)

    def brand(self, name: str) -> BrandedSchema:
        return BrandedSchema(self, name)

    def readonly(self) -> ReadonlySchema:
        return ReadonlySchema(self)


# ============================================================================
# Wrapper kinds
# ============================================================================

@dataclass(frozen=True, eq=False)
class OptionalSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.OPTIONAL
    inner: Schema

    @property
    def is_optional(self) -> bool:
        return True

    def build(self):
        return core_schema.no_info_wrap_validator_function(_skip_undefined, self.inner.core)


@dataclass(frozen=True, eq=False)
class NullableSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.NULLABLE
    inner: Schema

    @property
    def is_optional(self) -> bool:
        return self.inner.is_optional

    def build(self):
        return core_schema.nullable_schema(self.inner.core)


@dataclass(frozen=True, eq=False)
class DefaultSchema(Schema):
    """Substitutes a default for an absent value."""
    kind: ClassVar[SchemaKind] = SchemaKind.DEFAULT
    inner: Schema
    default_value: Any = UNDEFINED
    default_factory: Callable[[], Any] | None = None

    @property
    def is_optional(self) -> bool:
        return True

    def build(self):
        if self.default_factory is not None:
            return core_schema.with_default_schema(self.inner.core, default_factory=self.default_factory)
        return core_schema.with_default_schema(self.inner.core, default=self.default_value)


@dataclass(frozen=True, eq=False)
class CatchSchema(Schema):
    """Returns a fallback instead of failing."""
    kind: ClassVar[SchemaKind] = SchemaKind.CATCH
    inner: Schema
    fallback_value: Any = UNDEFINED
    fallback_factory: Callable[[], Any] | None = None

    @property
    def is_optional(self) -> bool:
        return True

    def build(self):
        if self.fallback_factory is not None:
            return core_schema.with_default_schema(self.inner.core, default_factory=self.fallback_factory,
                on_error="default")
        return core_schema.with_default_schema(self.inner.core, default=self.fallback_value, on_error="default")


@dataclass(frozen=True, eq=False)
class PipelineSchema(Schema):
    """Two stages: the output of `input_schema` is validated by `output_schema`."""
    kind: ClassVar[SchemaKind] = SchemaKind.PIPELINE
    input_schema: Schema
    output_schema: Schema

    @property
    def is_optional(self) -> bool:
        return self.input_schema.is_optional

    def build(self):
        return core_schema.chain_schema([self.input_schema.core, self.output_schema.core])


@dataclass(frozen=True, slots=True)
class Preprocess:
    """Raw-value step run before the inner schema sees the value."""
    fn: Callable[[Any], Any]


@dataclass(frozen=True, slots=True)
class Refinement:
    """Extra check on the inner schema's output."""
    validator: AtomicValidator


@dataclass(frozen=True, slots=True)
class Transform:
    """Maps the inner schema's output; raise ValueError to reject."""
    fn: Callable[[Any], Any]


Effect = Preprocess | Refinement | Transform


@dataclass(frozen=True, eq=False)
class EffectsSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.EFFECTS
    schema: Schema
    effect: Effect

    @property
    def is_preprocess(self) -> bool:
        return isinstance(self.effect, Preprocess)

    @property
    def is_optional(self) -> bool:
        return self.schema.is_optional

    def build(self):
        inner = self.schema.core
        match self.effect:
            case Preprocess(fn):
                return core_schema.no_info_before_validator_function(fn, inner)
            case Refinement(validator):
                return _with_checks(inner, (validator,))
            case Transform(fn):
                return core_schema.no_info_after_validator_function(partial(_apply_defined, fn), inner)


# ============================================================================
# Composite kinds
# ============================================================================

@dataclass(frozen=True, eq=False)
class ArraySchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.ARRAY
    element: Schema
    checks: tuple[AtomicValidator, ...] = ()

    def min(self, size: int) -> ArraySchema:
        return replace(self, checks=(*self.checks, ListLength(min_length=size)))

    def max(self, size: int) -> ArraySchema:
        return replace(self, checks=(*self.checks, ListLength(max_length=size)))

    def length(self, size: int) -> ArraySchema:
        return replace(self, checks=(*self.checks, ListLength(min_length=size, max_length=size)))

    def nonempty(self) -> ArraySchema:
        return self.min(1)

    def build(self):
        return _with_checks(core_schema.list_schema(self.element.core, strict=True), self.checks)


@dataclass(frozen=True, eq=False)
class TupleSchema(Schema):
    """Fixed positional items with an optional schema for trailing items."""
    kind: ClassVar[SchemaKind] = SchemaKind.TUPLE
    items: tuple[Schema, ...]
    rest: Schema | None = None

    def with_rest(self, rest: Schema) -> TupleSchema:
        return replace(self, rest=rest)

    def build(self):
        items = [item.core for item in self.items]
        if self.rest is None:
            return core_schema.tuple_schema(items)
        # Lists are accepted as well as tuples; output is always a tuple
        return core_schema.tuple_schema([*items, self.rest.core], variadic_item_index=len(items))


@dataclass(frozen=True, eq=False)
class UnionSchema(Schema):
    """Options are tried in declared order; the first success wins."""
    kind: ClassVar[SchemaKind] = SchemaKind.UNION
    options: tuple[Schema, ...]

    @property
    def is_optional(self) -> bool:
        return any(option.is_optional for option in self.options)

    def build(self):
        return core_schema.union_schema([(option.core, option.kind.value) for option in self.options],
            mode="left_to_right")


@dataclass(frozen=True, eq=False)
class IntersectionSchema(Schema):
    """Both sides must accept the value; their outputs are merged."""
    kind: ClassVar[SchemaKind] = SchemaKind.INTERSECTION
    left: Schema
    right: Schema

    @property
    def is_optional(self) -> bool:
        return self.left.is_optional and self.right.is_optional

    def _intersect(self, value: Any) -> Any:
        merged = _merge(_delegate(self.left, value), _delegate(self.right, value))
        if merged is _NOT_MERGEABLE:
            raise PydanticCustomError("invalid_intersection_types", "Intersection results could not be merged")
        return merged

    def build(self):
        return core_schema.no_info_plain_validator_function(self._intersect)


def _issue_at_set(value: Any, handler: core_schema.ValidatorFunctionWrapHandler) -> Any:
    # Set elements have no stable position, so element issues belong to the set
    try:
        return handler(value)
    except CoreValidationError as e:
        raise _single_issue(e) from None


@dataclass(frozen=True, eq=False)
class SetSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.SET
    element: Schema

    def build(self):
        return core_schema.no_info_wrap_validator_function(_issue_at_set,
            core_schema.set_schema(self.element.core, strict=True))


@dataclass(frozen=True, eq=False)
class ObjectSchema(Schema):
    """Keyed fields; unknown keys are stripped, absent optional keys omitted."""
    kind: ClassVar[SchemaKind] = SchemaKind.OBJECT
    fields: Mapping[str, Schema]

    def __post_init__(self):
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @property
    def shape(self) -> Mapping[str, Schema]:
        return self.fields

    def extend(self, fields: Mapping[str, Schema]) -> ObjectSchema:
        return ObjectSchema({**self.fields, **fields})

    def build(self):
        fields = {key: core_schema.typed_dict_field(schema.core, required=not schema.is_optional)
                  for key, schema in self.fields.items()}
        optional_keys = frozenset(key for key, schema in self.fields.items() if schema.is_optional)
        typed = core_schema.typed_dict_schema(fields, extra_behavior="ignore")
        return core_schema.no_info_after_validator_function(_drop_undefined,
            core_schema.no_info_before_validator_function(partial(_fill_absent, optional_keys), typed))


# ============================================================================
# Scalar kinds
# ============================================================================

@dataclass(frozen=True, eq=False)
class BooleanSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.BOOLEAN

    def build(self):
        return core_schema.bool_schema(strict=True)


@dataclass(frozen=True, eq=False)
class NumberSchema(Schema):
    """int or float (never bool); NaN and infinities are rejected."""
    kind: ClassVar[SchemaKind] = SchemaKind.NUMBER
    checks: tuple[AtomicValidator, ...] = ()

    def _with(self, check: AtomicValidator) -> NumberSchema:
        return replace(self, checks=(*self.checks, check))

    def min(self, value: float) -> NumberSchema: return self._with(NumericRange(min_value=value))

    def max(self, value: float) -> NumberSchema: return self._with(NumericRange(max_value=value))

    def gt(self, value: float) -> NumberSchema: return self._with(NumericRange(min_value=value, exclusive_min=True))

    def lt(self, value: float) -> NumberSchema: return self._with(NumericRange(max_value=value, exclusive_max=True))

    def positive(self) -> NumberSchema: return self.gt(0)

    def nonnegative(self) -> NumberSchema: return self.min(0)

    def multiple_of(self, factor: float) -> NumberSchema: return self._with(MultipleOf(factor))

    def int_(self) -> NumberSchema: return self._with(WholeNumber())

    def build(self):
        number = core_schema.union_schema(
            [core_schema.int_schema(strict=True), core_schema.float_schema(strict=True, allow_inf_nan=False)],
            mode="left_to_right",
            custom_error_type="number_type",
            custom_error_message="Input should be a valid number",
        )
        return _with_checks(number, self.checks)


@dataclass(frozen=True, eq=False)
class BigIntSchema(Schema):
    """Arbitrary-precision integer."""
    kind: ClassVar[SchemaKind] = SchemaKind.BIGINT
    checks: tuple[AtomicValidator, ...] = ()

    def min(self, value: int) -> BigIntSchema:
        return replace(self, checks=(*self.checks, NumericRange(min_value=value)))

    def max(self, value: int) -> BigIntSchema:
        return replace(self, checks=(*self.checks, NumericRange(max_value=value)))

    def build(self):
        return _with_checks(core_schema.int_schema(strict=True), self.checks)


@dataclass(frozen=True, eq=False)
class DateSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.DATE

    def build(self):
        return core_schema.datetime_schema(strict=True)


@dataclass(frozen=True, eq=False)
class StringSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.STRING
    checks: tuple[AtomicValidator, ...] = ()

    def min(self, length: int) -> StringSchema:
        return replace(self, checks=(*self.checks, StringLength(min_length=length)))

    def max(self, length: int) -> StringSchema:
        return replace(self, checks=(*self.checks, StringLength(max_length=length)))

    def length(self, length: int) -> StringSchema:
        return replace(self, checks=(*self.checks, StringLength(min_length=length, max_length=length)))

    def regex(self, pattern: str, description: str | None = None) -> StringSchema:
        return replace(self, checks=(*self.checks, RegexPattern(pattern, description=description)))

    def build(self):
        return _with_checks(core_schema.str_schema(strict=True), self.checks)


@dataclass(frozen=True, eq=False)
class EnumSchema(Schema):
    """One of a fixed set of strings."""
    kind: ClassVar[SchemaKind] = SchemaKind.ENUM
    values: tuple[str, ...]

    def build(self):
        return core_schema.literal_schema(list(self.values))


@dataclass(frozen=True, eq=False)
class NullSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.NULL

    def build(self):
        return core_schema.none_schema()


@dataclass(frozen=True, eq=False)
class LiteralSchema(Schema):
    """Exactly one allowed value (str, bool, int, float, None or a Symbol)."""
    kind: ClassVar[SchemaKind] = SchemaKind.LITERAL
    value: Any

    def build(self):
        return core_schema.literal_schema([self.value])


@dataclass(frozen=True, eq=False)
class UndefinedSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.UNDEFINED

    @property
    def is_optional(self) -> bool:
        return True

    def build(self):
        return core_schema.is_instance_schema(PydanticUndefinedType, cls_repr="undefined")


@dataclass(frozen=True, eq=False)
class VoidSchema(Schema):
    """Absent or None."""
    kind: ClassVar[SchemaKind] = SchemaKind.VOID

    @property
    def is_optional(self) -> bool:
        return True

    def build(self):
        return core_schema.nullable_schema(core_schema.is_instance_schema(PydanticUndefinedType, cls_repr="void"))


@dataclass(frozen=True, eq=False)
class AnySchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.ANY

    @property
    def is_optional(self) -> bool:
        return True

    def build(self):
        return core_schema.any_schema()


@dataclass(frozen=True, eq=False)
class UnknownSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.UNKNOWN

    @property
    def is_optional(self) -> bool:
        return True

    def build(self):
        return core_schema.any_schema()


@dataclass(frozen=True, eq=False)
class NeverSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.NEVER

    def build(self):
        return core_schema.no_info_plain_validator_function(_reject)


# ============================================================================
# Kinds with no text form
# ============================================================================

@dataclass(frozen=True, eq=False)
class BrandedSchema(Schema):
    """Nominal tag over an inner schema; parsing is the inner schema's."""
    kind: ClassVar[SchemaKind] = SchemaKind.BRANDED
    inner: Schema
    brand_name: str

    @property
    def is_optional(self) -> bool:
        return self.inner.is_optional

    def build(self):
        return self.inner.core


@dataclass(frozen=True, eq=False)
class DiscriminatedUnionSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.DISCRIMINATED_UNION
    discriminator: str
    options: tuple[ObjectSchema, ...]

    def build(self):
        choices = {}
        for option in self.options:
            tag = option.fields.get(self.discriminator)
            if not isinstance(tag, LiteralSchema):
                raise ValueError(f"Every option needs a literal {self.discriminator!r} field")
            choices[tag.value] = option.core
        return core_schema.tagged_union_schema(choices, self.discriminator)


@dataclass(frozen=True, eq=False)
class FunctionSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.FUNCTION

    def build(self):
        return core_schema.callable_schema()


@dataclass(frozen=True, eq=False)
class LazySchema(Schema):
    """Defers construction of the inner schema (self-referential trees)."""
    kind: ClassVar[SchemaKind] = SchemaKind.LAZY
    getter: Callable[[], Schema]

    def _resolve(self, value: Any) -> Any:
        return _delegate(self.getter(), value)

    def build(self):
        return core_schema.no_info_plain_validator_function(self._resolve)


@dataclass(frozen=True, eq=False)
class MapSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.MAP
    key_schema: Schema
    value_schema: Schema

    def build(self):
        return core_schema.dict_schema(self.key_schema.core, self.value_schema.core)


@dataclass(frozen=True, eq=False)
class NaNSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.NAN

    def build(self):
        return core_schema.no_info_after_validator_function(_require_nan,
            core_schema.float_schema(strict=True, allow_inf_nan=True))


@dataclass(frozen=True, eq=False)
class NativeEnumSchema(Schema):
    """Members of a Python Enum, accepted as members or by value."""
    kind: ClassVar[SchemaKind] = SchemaKind.NATIVE_ENUM
    enum: type[Enum]

    def build(self):
        return core_schema.enum_schema(self.enum, list(self.enum.__members__.values()))


@dataclass(frozen=True, eq=False)
class PromiseSchema(Schema):
    """Accepts an awaitable; the awaited value is not inspected."""
    kind: ClassVar[SchemaKind] = SchemaKind.PROMISE
    inner: Schema

    def build(self):
        return core_schema.is_instance_schema(Awaitable, cls_repr="promise")


@dataclass(frozen=True, eq=False)
class ReadonlySchema(Schema):
    """Parses with the inner schema, then freezes containers."""
    kind: ClassVar[SchemaKind] = SchemaKind.READONLY
    inner: Schema

    @property
    def is_optional(self) -> bool:
        return self.inner.is_optional

    def build(self):
        return core_schema.no_info_after_validator_function(_freeze, self.inner.core)


@dataclass(frozen=True, eq=False)
class RecordSchema(Schema):
    """Mapping of arbitrary keys to values of one schema."""
    kind: ClassVar[SchemaKind] = SchemaKind.RECORD
    key_schema: Schema
    value_schema: Schema

    def build(self):
        return core_schema.dict_schema(self.key_schema.core, self.value_schema.core)


@dataclass(frozen=True, eq=False)
class SymbolSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.SYMBOL

    def build(self):
        return core_schema.is_instance_schema(Symbol, cls_repr="symbol")
