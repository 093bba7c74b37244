"""Schema Builders

Short constructors for schema nodes, meant to be imported as a namespace:

    from core.validation import builders as s

    Query = s.object_({
        "q": s.string().min(1),
        "page": s.number().int_().positive().default(1),
        "sort": s.enum_(["asc", "desc"]).optional(),
        "since": s.date().optional(),
    })

Names that would shadow a builtin carry a trailing underscore.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Iterable, Mapping

from .schema import (
    AnySchema,
    ArraySchema,
    BigIntSchema,
    BooleanSchema,
    DateSchema,
    DiscriminatedUnionSchema,
    EffectsSchema,
    EnumSchema,
    FunctionSchema,
    IntersectionSchema,
    LazySchema,
    LiteralSchema,
    MapSchema,
    NaNSchema,
    NativeEnumSchema,
    NeverSchema,
    NullSchema,
    NumberSchema,
    ObjectSchema,
    Preprocess,
    PromiseSchema,
    RecordSchema,
    Schema,
    SetSchema,
    StringSchema,
    SymbolSchema,
    TupleSchema,
    UndefinedSchema,
    UnionSchema,
    UnknownSchema,
    VoidSchema,
)


def string() -> StringSchema: return StringSchema()
def number() -> NumberSchema: return NumberSchema()
def bigint() -> BigIntSchema: return BigIntSchema()
def boolean() -> BooleanSchema: return BooleanSchema()
def date() -> DateSchema: return DateSchema()
def null() -> NullSchema: return NullSchema()
def undefined() -> UndefinedSchema: return UndefinedSchema()
def void() -> VoidSchema: return VoidSchema()
def any_() -> AnySchema: return AnySchema()
def unknown() -> UnknownSchema: return UnknownSchema()
def never() -> NeverSchema: return NeverSchema()
def nan() -> NaNSchema: return NaNSchema()
def symbol() -> SymbolSchema: return SymbolSchema()
def function() -> FunctionSchema: return FunctionSchema()


def literal(value: Any) -> LiteralSchema:
    return LiteralSchema(value)


def enum_(values: Iterable[str]) -> EnumSchema:
    values = tuple(values)
    if not values:
        raise ValueError("enum_() needs at least one value")
    return EnumSchema(values)


def native_enum(enum: type[Enum]) -> NativeEnumSchema:
    return NativeEnumSchema(enum)


def array(element: Schema) -> ArraySchema:
    return ArraySchema(element)


def tuple_(items: Iterable[Schema], rest: Schema | None = None) -> TupleSchema:
    return TupleSchema(tuple(items), rest)


def union(options: Iterable[Schema]) -> UnionSchema:
    options = tuple(options)
    if len(options) < 2:
        raise ValueError("union() needs at least two options")
    return UnionSchema(options)


def discriminated_union(discriminator: str, options: Iterable[ObjectSchema]) -> DiscriminatedUnionSchema:
    return DiscriminatedUnionSchema(discriminator, tuple(options))


def intersection(left: Schema, right: Schema) -> IntersectionSchema:
    return IntersectionSchema(left, right)


def set_(element: Schema) -> SetSchema:
    return SetSchema(element)


def object_(fields: Mapping[str, Schema]) -> ObjectSchema:
    return ObjectSchema(fields)


def record(value_schema: Schema, key_schema: Schema | None = None) -> RecordSchema:
    return RecordSchema(key_schema or StringSchema(), value_schema)


def map_(key_schema: Schema, value_schema: Schema) -> MapSchema:
    return MapSchema(key_schema, value_schema)


def lazy(getter: Callable[[], Schema]) -> LazySchema:
    return LazySchema(getter)


def promise(inner: Schema) -> PromiseSchema:
    return PromiseSchema(inner)


def preprocess(fn: Callable[[Any], Any], schema: Schema) -> EffectsSchema:
    """Run `fn` on the raw value before `schema` parses it."""
    return EffectsSchema(schema, Preprocess(fn))
