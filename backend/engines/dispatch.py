"""Schema Kind Dispatcher

Classifies schema nodes into the closed set of kinds the transformer
understands. Classification has no side effects.
"""
from dataclasses import dataclass
from typing import Any

from core.validation.schema import Schema, SchemaKind


@dataclass(frozen=True, slots=True)
class Unrecognized:
    """Classification of a value that is not a schema node."""
    type_name: str


SUPPORTED_KINDS = frozenset({
    SchemaKind.OPTIONAL,
    SchemaKind.NULLABLE,
    SchemaKind.DEFAULT,
    SchemaKind.CATCH,
    SchemaKind.PIPELINE,
    SchemaKind.EFFECTS,
    SchemaKind.ARRAY,
    SchemaKind.TUPLE,
    SchemaKind.UNION,
    SchemaKind.INTERSECTION,
    SchemaKind.SET,
    SchemaKind.BOOLEAN,
    SchemaKind.NUMBER,
    SchemaKind.BIGINT,
    SchemaKind.DATE,
    SchemaKind.STRING,
    SchemaKind.ENUM,
    SchemaKind.NULL,
    SchemaKind.LITERAL,
    SchemaKind.UNDEFINED,
    SchemaKind.VOID,
    SchemaKind.ANY,
    SchemaKind.UNKNOWN,
    SchemaKind.NEVER,
})

# Recognized kinds with no textual form; OBJECT is only accepted as the root
REJECTED_KINDS = frozenset(SchemaKind) - SUPPORTED_KINDS


def classify(node: Any) -> SchemaKind | Unrecognized:
    """Kind of a schema node, or Unrecognized for anything else."""
    if isinstance(node, Schema):
        return node.kind
    return Unrecognized(type(node).__name__)


def is_supported(kind: SchemaKind | Unrecognized) -> bool:
    return kind in SUPPORTED_KINDS


def kind_name(node: Any) -> str:
    """Name used for a node in unsupported-kind messages, e.g. "RecordSchema"."""
    return type(node).__name__
