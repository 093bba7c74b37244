from engines.dispatch import (
    Unrecognized,
    SUPPORTED_KINDS,
    REJECTED_KINDS,
    classify,
    is_supported,
    kind_name,
)
from engines.transform import (
    SchemaTransformer,
    DEFAULT_TRANSFORMER,
    transform,
    transform_fields,
    coerce_object,
)

__all__ = [
    "Unrecognized",
    "SUPPORTED_KINDS",
    "REJECTED_KINDS",
    "classify",
    "is_supported",
    "kind_name",
    "SchemaTransformer",
    "DEFAULT_TRANSFORMER",
    "transform",
    "transform_fields",
    "coerce_object",
]
