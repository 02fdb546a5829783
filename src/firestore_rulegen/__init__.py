"""firestore-rulegen: compile data model schemas into Firestore security rules.

Turns a declarative schema of models (fields, constraints, access flags,
owner field) into a rules document with one validation function and one
``match`` block per model. Also provides schema JSON encodings, a schema
checker, TOML configuration, and a CLI.

Usage:
    from firestore_rulegen import compile_rules, load_schema
    from firestore_rulegen import Schema, ModelSchema, FieldSchema
    from firestore_rulegen import check_schema, load_rulegen_config
"""

__version__ = "0.1.0"

# Compiler
from firestore_rulegen.compiler import (
    compile_rules,
    emit_access_block,
    emit_validator,
    expand_indent,
)

# Config
from firestore_rulegen.config.loader import load_rulegen_config
from firestore_rulegen.config.models import RulegenConfig

# Schema
from firestore_rulegen.schema.checker import check_schema
from firestore_rulegen.schema.loader import (
    SchemaParseError,
    dump_schema,
    load_schema,
    parse_schema,
)
from firestore_rulegen.schema.models import (
    FieldSchema,
    ModelSchema,
    Schema,
    SchemaCheckResult,
)

__all__ = [
    # Compiler
    "compile_rules",
    "emit_validator",
    "emit_access_block",
    "expand_indent",
    # Config
    "load_rulegen_config",
    "RulegenConfig",
    # Schema
    "Schema",
    "ModelSchema",
    "FieldSchema",
    "SchemaCheckResult",
    "SchemaParseError",
    "parse_schema",
    "load_schema",
    "dump_schema",
    "check_schema",
]
