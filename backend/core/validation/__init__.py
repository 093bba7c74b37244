"""Declarative Validation System

Schemas are immutable trees of nodes compiled to pydantic-core validators.
Validation occurs at system boundaries with parse-don't-validate semantics;
route schemas declared on FastAPI endpoints are rewritten at registration so
query strings (and optionally path parameters, headers and bodies) can be
parsed from their textual form.

Key Features:
- Schema nodes with parse / safe_parse and fluent wrappers
- Constraint validators for strings, numbers and arrays
- Text coercion rules attached ahead of scalar nodes
- Structured error accumulation (fail-fast or collect-all)
- FastAPI route class applying declared route schemas

Usage:
    from fastapi import APIRouter
    from core.validation import CoercingRoute, Validated, builders as s, route_schema

    router = APIRouter(route_class=CoercingRoute)

    @router.get("/search")
    @route_schema(query=s.object_({"q": s.string(), "limit": s.number().int_().optional()}))
    async def search(query: dict = Validated("query")):
        return query
"""

# Schema nodes
from .schema import (
    SchemaKind,
    Schema,
    UNDEFINED,
    Symbol,
    describe_type,
    OptionalSchema,
    NullableSchema,
    DefaultSchema,
    CatchSchema,
    PipelineSchema,
    EffectsSchema,
    Preprocess,
    Refinement,
    Transform,
    ArraySchema,
    TupleSchema,
    UnionSchema,
    IntersectionSchema,
    SetSchema,
    ObjectSchema,
    BooleanSchema,
    NumberSchema,
    BigIntSchema,
    DateSchema,
    StringSchema,
    EnumSchema,
    NullSchema,
    LiteralSchema,
    UndefinedSchema,
    VoidSchema,
    AnySchema,
    UnknownSchema,
    NeverSchema,
    BrandedSchema,
    DiscriminatedUnionSchema,
    FunctionSchema,
    LazySchema,
    MapSchema,
    NaNSchema,
    NativeEnumSchema,
    PromiseSchema,
    ReadonlySchema,
    RecordSchema,
    SymbolSchema,
)

from . import builders

# Constraint validators
from .validators import (
    ValidationResult,
    AtomicValidator,
    StringLength,
    RegexPattern,
    NumericRange,
    MultipleOf,
    WholeNumber,
    ListLength,
    CustomValidator,
)

# Validation errors
from .errors import (
    ValidationMode,
    ValidationError,
    ValidationErrorDetail,
    ValidationErrorAccumulator,
    FailFastAccumulator,
    CollectAllAccumulator,
    create_accumulator,
    UnsupportedSchemaType,
    QueryCoercionError,
)

# Coercion
from .coercion import (
    CoercionRule,
    StringToBool,
    StringToNumber,
    StringToBigInt,
    StringToDate,
    StringToNull,
    StringToLiteral,
    ToList,
    ToSet,
    render_literal,
)

# HTTP boundary
from .boundaries import (
    SLOTS,
    RouteSchema,
    route_schema,
    get_route_schema,
    is_processed,
    QueryCoercionHook,
    CoercingRoute,
    coercing_route_class,
    collect_raw,
    validate_request,
    Validated,
)

__all__ = [
    # Schema nodes
    "SchemaKind",
    "Schema",
    "UNDEFINED",
    "Symbol",
    "describe_type",
    "OptionalSchema",
    "NullableSchema",
    "DefaultSchema",
    "CatchSchema",
    "PipelineSchema",
    "EffectsSchema",
    "Preprocess",
    "Refinement",
    "Transform",
    "ArraySchema",
    "TupleSchema",
    "UnionSchema",
    "IntersectionSchema",
    "SetSchema",
    "ObjectSchema",
    "BooleanSchema",
    "NumberSchema",
    "BigIntSchema",
    "DateSchema",
    "StringSchema",
    "EnumSchema",
    "NullSchema",
    "LiteralSchema",
    "UndefinedSchema",
    "VoidSchema",
    "AnySchema",
    "UnknownSchema",
    "NeverSchema",
    "BrandedSchema",
    "DiscriminatedUnionSchema",
    "FunctionSchema",
    "LazySchema",
    "MapSchema",
    "NaNSchema",
    "NativeEnumSchema",
    "PromiseSchema",
    "ReadonlySchema",
    "RecordSchema",
    "SymbolSchema",
    "builders",
    # Constraint validators
    "ValidationResult",
    "AtomicValidator",
    "StringLength",
    "RegexPattern",
    "NumericRange",
    "MultipleOf",
    "WholeNumber",
    "ListLength",
    "CustomValidator",
    # Errors
    "ValidationMode",
    "ValidationError",
    "ValidationErrorDetail",
    "ValidationErrorAccumulator",
    "FailFastAccumulator",
    "CollectAllAccumulator",
    "create_accumulator",
    "UnsupportedSchemaType",
    "QueryCoercionError",
    # Coercion
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
    # Boundaries
    "SLOTS",
    "RouteSchema",
    "route_schema",
    "get_route_schema",
    "is_processed",
    "QueryCoercionHook",
    "CoercingRoute",
    "coercing_route_class",
    "collect_raw",
    "validate_request",
    "Validated",
]
