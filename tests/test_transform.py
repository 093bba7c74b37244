from datetime import datetime, timezone
from enum import Enum

import pytest

from core.validation import (
    UNDEFINED,
    ArraySchema,
    EffectsSchema,
    NumberSchema,
    OptionalSchema,
    Preprocess,
    QueryCoercionError,
    Symbol,
    UnsupportedSchemaType,
    ValidationError,
    builders as s,
)
from core.validation.coercion import StringToBool, ToList
from engines.transform import SchemaTransformer, coerce_object, transform, transform_fields


class Color(Enum):
    RED = "red"


def first_message(schema, raw) -> str:
    return schema.safe_parse(raw).unwrap_err().first_error.message


def first_constraint(schema, raw) -> str:
    return schema.safe_parse(raw).unwrap_err().first_error.constraint


class TestScalarRules:
    def test_boolean(self):
        original = s.boolean()
        rewritten = transform(original)
        assert isinstance(rewritten, EffectsSchema)
        assert rewritten.effect == Preprocess(StringToBool())
        assert rewritten.schema is original
        assert rewritten.parse("true") is True
        assert rewritten.parse("false") is False
        assert first_message(rewritten, "1") == "Input should be a valid boolean"
        # the original still rejects text
        assert original.safe_parse("true").is_err()

    def test_number(self):
        rewritten = transform(s.number())
        assert rewritten.parse("123") == 123
        assert rewritten.parse("-456") == -456
        assert rewritten.parse("3.14") == 3.14
        assert first_message(rewritten, "abc") == "Input should be a valid number"

    def test_number_checks_still_apply(self):
        rewritten = transform(s.number().int_().max(10))
        assert rewritten.parse("7") == 7
        assert first_message(rewritten, "11") == "Number must be less than or equal to 10"
        assert first_message(rewritten, "1.5") == "Expected integer, received float"

    def test_number_edge_text(self):
        rewritten = transform(s.number())
        assert rewritten.parse("0" * 4300 + "1") == 1
        assert rewritten.parse("007") == 7
        assert rewritten.parse(".5") == 0.5
        assert rewritten.parse("1e3") == 1000
        for raw in ["", " 1", "1 ", "12\n", "\u0661\u0662", "1_000", "0x10", "inf", "NaN", "1e999"]:
            assert first_message(rewritten, raw) == "Input should be a valid number"

    def test_bigint(self):
        assert transform(s.bigint()).parse("12345678901234567890") == 12345678901234567890

    def test_bigint_edge_text(self):
        rewritten = transform(s.bigint())
        assert rewritten.parse(" 42 ") == 42
        assert rewritten.parse("") == 0
        assert rewritten.parse("+17") == 17
        assert rewritten.parse("0x1f") == 31
        assert rewritten.parse("0b101") == 5
        assert rewritten.parse("0" * 4300 + "1") == 1
        assert rewritten.parse("9" * 5000) > 10 ** 4999
        for raw in ["1_000", "\u0661\u0662", "1.5", "-0x1f", "1e3", "abc"]:
            assert first_constraint(rewritten, raw) == "int_type"

    def test_date(self):
        rewritten = transform(s.date())
        assert rewritten.parse("2024-01-15T10:30:00Z") == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        assert rewritten.parse("0") == datetime(1970, 1, 1, tzinfo=timezone.utc)
        assert first_message(rewritten, "garbage") == "Input should be a valid datetime"

    def test_null(self):
        rewritten = transform(s.null())
        assert rewritten.parse("null") is None
        assert first_message(rewritten, "notnull") == "Input should be None"

    @pytest.mark.parametrize("literal, raw", [(42, "42"), (True, "true"), (None, "null"), ("x", "x")])
    def test_literal(self, literal, raw):
        assert transform(s.literal(literal)).parse(raw) == literal

    def test_literal_without_text_form_is_left_alone(self):
        node = s.literal(UNDEFINED)
        assert transform(node) is node

    def test_symbol_literal_fails_at_transform_time(self):
        with pytest.raises(UnsupportedSchemaType) as exc_info:
            transform(s.literal(Symbol("token")))
        assert str(exc_info.value) == "Unsupported schema type for query coercion: LiteralSchema with symbol"

    @pytest.mark.parametrize("node", [
        s.string(),
        s.enum_(["a", "b"]),
        s.undefined(),
        s.void(),
        s.any_(),
        s.unknown(),
        s.never(),
    ])
    def test_kinds_without_coercion_are_returned_as_is(self, node):
        assert transform(node) is node


class TestWrapperRules:
    def test_optional(self):
        original = s.number().optional()
        rewritten = transform(original)
        assert isinstance(rewritten, OptionalSchema)
        assert rewritten is not original
        assert isinstance(original.inner, NumberSchema)
        assert rewritten.parse() is UNDEFINED
        assert rewritten.parse("5") == 5

    def test_nullable(self):
        rewritten = transform(s.number().nullable())
        assert rewritten.parse("null") is None
        assert rewritten.parse("3") == 3
        assert transform(s.string().nullable()).parse("x") == "x"

    def test_default(self):
        rewritten = transform(s.number().default(5))
        assert rewritten.parse() == 5
        assert rewritten.parse("7") == 7

    def test_catch(self):
        rewritten = transform(s.number().catch(-1))
        assert rewritten.parse("3") == 3
        assert rewritten.parse("x") == -1

    def test_refinement_keeps_effect(self):
        original = s.number().refine(lambda v: v % 2 == 0, "Must be even")
        rewritten = transform(original)
        assert rewritten.effect is original.effect
        assert rewritten.parse("4") == 4
        assert first_message(rewritten, "3") == "Must be even"

    def test_caller_preprocess_is_not_rewrapped(self):
        original = s.preprocess(lambda v: v, s.array(s.number()))
        assert transform(original) is original

    def test_pipeline_transforms_input_stage_only(self):
        original = s.number().pipe(s.number().max(10))
        rewritten = transform(original)
        assert rewritten.output_schema is original.output_schema
        assert rewritten.input_schema is not original.input_schema
        assert rewritten.parse("5") == 5
        assert first_message(rewritten, "50") == "Number must be less than or equal to 10"


class TestContainerRules:
    def test_array_bare_value_becomes_list(self):
        rewritten = transform(s.array(s.number()))
        assert rewritten.parse("1") == [1]
        assert rewritten.parse(["1", "2"]) == [1, 2]

    def test_array_keeps_received_order(self):
        assert transform(s.array(s.string())).parse(["a", "b"]) == ["a", "b"]

    def test_array_structure(self):
        original = s.array(s.number())
        rewritten = transform(original)
        assert rewritten.effect == Preprocess(ToList())
        assert isinstance(rewritten.schema, ArraySchema)
        assert rewritten.schema is not original
        assert isinstance(original.element, NumberSchema)

    def test_missing_array_reports_required(self):
        schema = coerce_object(s.object_({"c": s.array(s.string())}))
        error = schema.safe_parse({}).unwrap_err()
        assert str(error) == 'Field required at "c"'

    def test_tuple(self):
        rewritten = transform(s.tuple_([s.string(), s.number(), s.boolean()]))
        assert rewritten.parse(["hello", "42", "true"]) == ("hello", 42, True)

    def test_tuple_with_rest(self):
        rewritten = transform(s.tuple_([s.string(), s.number()], rest=s.boolean()))
        assert rewritten.parse(["baz", "456", "true", "false"]) == ("baz", 456, True, False)
        assert rewritten.parse(["baz", "456"]) == ("baz", 456)

    def test_single_item_tuple(self):
        rewritten = transform(s.tuple_([s.number()]))
        assert rewritten.parse("7") == (7,)
        assert first_constraint(rewritten, ["1", "2"]) == "too_long"

    def test_single_item_tuple_with_rest(self):
        rewritten = transform(s.tuple_([s.number()], rest=s.string()))
        assert rewritten.parse("7") == (7,)
        assert rewritten.parse(["7", "a", "b"]) == (7, "a", "b")

    def test_union_keeps_option_order(self):
        assert transform(s.union([s.string(), s.number()])).parse("42") == "42"
        rewritten = transform(s.union([s.number(), s.boolean()]))
        assert rewritten.parse("42") == 42
        assert rewritten.parse("true") is True
        assert rewritten.safe_parse("x").is_err()

    def test_intersection(self):
        rewritten = transform(s.intersection(s.number().min(0), s.number().max(10)))
        assert rewritten.parse("5") == 5
        assert rewritten.safe_parse("50").is_err()

    def test_set(self):
        rewritten = transform(s.set_(s.number()))
        assert rewritten.parse(["1", "2", "2"]) == {1, 2}
        assert rewritten.parse("3") == {3}


class TestUnsupportedKinds:
    @pytest.mark.parametrize("node, name", [
        (s.record(s.string()), "RecordSchema"),
        (s.map_(s.string(), s.number()), "MapSchema"),
        (s.object_({"a": s.string()}), "ObjectSchema"),
        (s.string().brand("Id"), "BrandedSchema"),
        (s.discriminated_union("t", [s.object_({"t": s.literal("a")})]), "DiscriminatedUnionSchema"),
        (s.function(), "FunctionSchema"),
        (s.lazy(lambda: s.string()), "LazySchema"),
        (s.nan(), "NaNSchema"),
        (s.native_enum(Color), "NativeEnumSchema"),
        (s.promise(s.string()), "PromiseSchema"),
        (s.string().readonly(), "ReadonlySchema"),
        (s.symbol(), "SymbolSchema"),
    ])
    def test_rejected(self, node, name):
        with pytest.raises(UnsupportedSchemaType) as exc_info:
            transform(node)
        assert exc_info.value.kind_name == name
        assert str(exc_info.value) == f"Unsupported schema type for query coercion: {name}"

    def test_rejected_at_depth(self):
        with pytest.raises(UnsupportedSchemaType) as exc_info:
            transform(s.array(s.record(s.string())).optional())
        assert exc_info.value.kind_name == "RecordSchema"

    def test_non_schema_value(self):
        with pytest.raises(UnsupportedSchemaType) as exc_info:
            transform("nope")
        assert exc_info.value.kind_name == "str"


class TestFields:
    def test_failure_names_the_field(self):
        with pytest.raises(QueryCoercionError) as exc_info:
            transform_fields({"ok": s.string(), "filters": s.record(s.string())})
        error = exc_info.value
        assert str(error) == 'Unsupported schema type for query coercion: RecordSchema at "filters"'
        assert error.field_key == "filters"
        assert error.kind_name == "RecordSchema"
        assert isinstance(error.__cause__, UnsupportedSchemaType)

    def test_other_errors_propagate_unchanged(self):
        class Exploding(SchemaTransformer):
            def transform(self, node):
                raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            Exploding().transform_fields({"a": s.string()})


class TestInvariants:
    def test_object_is_not_mutated(self):
        original = s.object_({"a": s.boolean(), "b": s.number().optional(), "c": s.array(s.string())})
        snapshot = dict(original.fields)
        rewritten = coerce_object(original)
        assert rewritten is not original
        assert dict(original.fields) == snapshot
        assert all(original.fields[k] is snapshot[k] for k in snapshot)
        assert all(rewritten.fields[k] is not original.fields[k] for k in snapshot)

    def test_nested_nodes_are_not_mutated(self):
        element = s.number()
        array = s.array(element)
        wrapper = array.optional()
        rewritten = transform(wrapper)
        assert rewritten is not wrapper
        assert rewritten.inner is not array
        assert wrapper.inner is array
        assert array.element is element

    def test_transforming_twice_adds_no_coercion(self):
        first = coerce_object(s.object_({
            "a": s.boolean(),
            "b": s.number().optional(),
            "c": s.array(s.string()),
            "d": s.string().nullable(),
        }))
        second = coerce_object(first)
        assert second.fields["a"] is first.fields["a"]
        assert second.fields["b"].inner is first.fields["b"].inner
        assert second.fields["c"] is first.fields["c"]
        assert second.fields["d"] is first.fields["d"]
        assert second.parse({"a": "true", "b": "2", "c": "x", "d": "null"}) == {
            "a": True, "b": 2, "c": ["x"], "d": None,
        }

    def test_transforming_rest_tuple_twice(self):
        first = transform(s.tuple_([s.string(), s.number()], rest=s.boolean()))
        second = transform(first)
        assert second is first
        assert second.parse(["a", "1", "true", "false"]) == ("a", 1, True, False)

    def test_coercing_object_with_rest_tuple_twice(self):
        first = coerce_object(s.object_({"r": s.tuple_([s.number()], rest=s.boolean()).optional()}))
        second = coerce_object(first)
        assert second.fields["r"].inner is first.fields["r"].inner
        assert second.parse({"r": ["1", "true"]}) == {"r": (1, True)}
        assert second.parse({"r": "1"}) == {"r": (1,)}
        assert second.parse({}) == {}

    def test_end_to_end_object(self):
        schema = coerce_object(s.object_({
            "a": s.boolean(),
            "b": s.number().optional(),
            "c": s.array(s.string()),
        }))
        assert schema.parse({"a": "true", "c": ["x", "y"]}) == {"a": True, "c": ["x", "y"]}

    def test_end_to_end_null(self):
        schema = coerce_object(s.object_({"n": s.null()}))
        assert schema.parse({"n": "null"}) == {"n": None}
        with pytest.raises(ValidationError) as exc_info:
            schema.parse({"n": "notnull"})
        assert str(exc_info.value) == 'Input should be None at "n"'
