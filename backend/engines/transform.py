"""Schema Transformer

Rewrites a schema tree so it also accepts the textual form of its values,
as found in URL query strings. Coercion steps are attached ahead of scalar
nodes as `Preprocess` effects; containers get a normalizer that turns a
single query value into a one-element list or set.

The input tree is never modified: every node on the path to a rewritten
node is rebuilt, everything else is shared. Transforming an already
transformed tree adds nothing, because `Preprocess` effects are returned
as they are.
"""
from collections.abc import Mapping
from dataclasses import replace

from core.validation.coercion import (
    StringToBigInt,
    StringToBool,
    StringToDate,
    StringToLiteral,
    StringToNull,
    StringToNumber,
    ToList,
    ToSet,
    render_literal,
)
from core.validation.errors import QueryCoercionError, UnsupportedSchemaType
from core.validation.schema import (
    EffectsSchema,
    ObjectSchema,
    Preprocess,
    Schema,
    SchemaKind,
)
from engines.dispatch import Unrecognized, classify, kind_name


def _prefixed(rule, schema: Schema) -> EffectsSchema:
    return EffectsSchema(schema, Preprocess(rule))


class SchemaTransformer:
    """Rewrites schema trees for text input."""

    __slots__ = ()

    def transform(self, node: Schema) -> Schema:
        """Return an equivalent schema that also accepts text input.

        Raises:
            UnsupportedSchemaType: a node (at any depth) has no textual form.
        """
        kind = classify(node)
        if isinstance(kind, Unrecognized):
            raise UnsupportedSchemaType(kind.type_name)

        match kind:
            case SchemaKind.OPTIONAL | SchemaKind.DEFAULT | SchemaKind.CATCH:
                return replace(node, inner=self.transform(node.inner))
            case SchemaKind.NULLABLE:
                return _prefixed(StringToNull(), replace(node, inner=self.transform(node.inner)))
            case SchemaKind.EFFECTS:
                if node.is_preprocess:
                    return node
                return replace(node, schema=self.transform(node.schema))
            case SchemaKind.PIPELINE:
                return replace(node, input_schema=self.transform(node.input_schema))
            case SchemaKind.ARRAY:
                return _prefixed(ToList(), replace(node, element=self.transform(node.element)))
            case SchemaKind.TUPLE:
                rest = self.transform(node.rest) if node.rest is not None else None
                items = tuple(self.transform(item) for item in node.items)
                return _prefixed(ToList(), replace(node, items=items, rest=rest))
            case SchemaKind.UNION:
                return replace(node, options=tuple(self.transform(option) for option in node.options))
            case SchemaKind.INTERSECTION:
                return replace(node, left=self.transform(node.left), right=self.transform(node.right))
            case SchemaKind.SET:
                return _prefixed(ToSet(), replace(node, element=self.transform(node.element)))
            case SchemaKind.BOOLEAN:
                return _prefixed(StringToBool(), node)
            case SchemaKind.NUMBER:
                return _prefixed(StringToNumber(), node)
            case SchemaKind.BIGINT:
                return _prefixed(StringToBigInt(), node)
            case SchemaKind.DATE:
                return _prefixed(StringToDate(), node)
            case SchemaKind.NULL:
                return _prefixed(StringToNull(), node)
            case SchemaKind.LITERAL:
                if render_literal(node.value) is None:
                    return node
                return _prefixed(StringToLiteral(node.value), node)
            case (SchemaKind.STRING | SchemaKind.ENUM | SchemaKind.UNDEFINED | SchemaKind.VOID
                  | SchemaKind.ANY | SchemaKind.UNKNOWN | SchemaKind.NEVER):
                return node
            case _:
                raise UnsupportedSchemaType(kind_name(node))

    def transform_fields(self, fields: Mapping[str, Schema]) -> dict[str, Schema]:
        """Transform each field of an object shape.

        Raises:
            QueryCoercionError: naming the first field that cannot be coerced.
        """
        transformed: dict[str, Schema] = {}
        for key, value in fields.items():
            try:
                transformed[key] = self.transform(value)
            except UnsupportedSchemaType as e:
                raise QueryCoercionError.from_unsupported(e, key) from e
        return transformed

    def coerce_object(self, schema: ObjectSchema) -> ObjectSchema:
        """New object schema whose fields accept text input."""
        return ObjectSchema(self.transform_fields(schema.fields))


DEFAULT_TRANSFORMER = SchemaTransformer()


def transform(node: Schema) -> Schema:
    """Convenience function using the default transformer."""
    return DEFAULT_TRANSFORMER.transform(node)


def transform_fields(fields: Mapping[str, Schema]) -> dict[str, Schema]:
    return DEFAULT_TRANSFORMER.transform_fields(fields)


def coerce_object(schema: ObjectSchema) -> ObjectSchema:
    return DEFAULT_TRANSFORMER.coerce_object(schema)
