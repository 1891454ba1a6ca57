"""
typed-transform — type-directed conversion between JSON-shaped data and typed objects.

Purpose
- ``from_json`` builds a typed instance from plain mappings, inferring each
  field's shape from the target's default values (optionally overridden by a
  ``types`` schema on the class).
- ``to_json`` flattens an instance back into plain dicts, lists and scalars.

Import boundary
- Must not have side effects at import time (no config loading, no logging init).
"""

from typed_transform.config import TransformConfig, load_config
from typed_transform.decode import Decoder, from_json
from typed_transform.encode import Encoder, JSONValue, to_json
from typed_transform.errors import (
    CyclicSchema,
    CyclicSchemaError,
    InvalidSource,
    InvalidSourceError,
    InvalidTarget,
    InvalidTargetError,
    InvalidType,
    InvalidTypeError,
    TransformError,
)
from typed_transform.schema import (
    FieldDescriptor,
    FieldKind,
    FieldPlan,
    Schema,
    effective_strict,
    plan_field,
    resolve,
    schema,
)
from typed_transform.transformer import Transformable, Transformer, dumps, loads

__version__ = "0.1.0"

# camelCase spellings of the two public operations
fromJSON = from_json
toJSON = to_json

__all__ = [
    "CyclicSchema",
    "CyclicSchemaError",
    "Decoder",
    "Encoder",
    "FieldDescriptor",
    "FieldKind",
    "FieldPlan",
    "InvalidSource",
    "InvalidSourceError",
    "InvalidTarget",
    "InvalidTargetError",
    "InvalidType",
    "InvalidTypeError",
    "JSONValue",
    "Schema",
    "TransformConfig",
    "TransformError",
    "Transformable",
    "Transformer",
    "__version__",
    "dumps",
    "effective_strict",
    "fromJSON",
    "from_json",
    "load_config",
    "loads",
    "plan_field",
    "resolve",
    "schema",
    "toJSON",
    "to_json",
]
