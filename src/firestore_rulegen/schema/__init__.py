"""Schema models, encodings and checks.

Provides the schema models (``Schema``, ``ModelSchema``, ``FieldSchema``),
JSON encodings (``load_schema``, ``parse_schema``, ``dump_schema``), and the
schema checker (``check_schema``).

Usage:
    from firestore_rulegen.schema import Schema, ModelSchema, FieldSchema
    from firestore_rulegen.schema import load_schema, dumps_schema
    from firestore_rulegen.schema import check_schema
"""

from firestore_rulegen.schema.models import (
    ConstraintIssue,
    ConstraintKind,
    FieldSchema,
    ModelSchema,
    PrimitiveType,
    ReferenceIssue,
    Schema,
    SchemaCheckResult,
)
from firestore_rulegen.schema.loader import (
    SchemaParseError,
    dump_schema,
    dumps_schema,
    load_schema,
    loads_schema,
    parse_schema,
)
from firestore_rulegen.schema.checker import check_schema

__all__ = [
    "Schema",
    "ModelSchema",
    "FieldSchema",
    "ConstraintKind",
    "PrimitiveType",
    "SchemaCheckResult",
    "ReferenceIssue",
    "ConstraintIssue",
    "SchemaParseError",
    "parse_schema",
    "loads_schema",
    "load_schema",
    "dump_schema",
    "dumps_schema",
    "check_schema",
]
