"""Ruleset compiler: schema in, Firestore security rules text out.

Emits the rules document in a fixed order:

1. Header (rules version, service and database match scope)
2. The shared ``ownedByCaller(ownerId)`` helper
3. One validation function per model, in schema order
4. One access block per model, in schema order
5. Closing braces

Pure and deterministic -- compiling the same schema twice yields
byte-identical text. The compiler does not detect dangling model
references or duplicate names; see ``firestore_rulegen.schema.checker``.

Usage:
    from firestore_rulegen.compiler import compile_rules, expand_indent
    from firestore_rulegen.schema.loader import load_schema

    rules = compile_rules(load_schema("schema.json"))
    print(expand_indent(rules))
"""

import logging
from collections.abc import Sequence

from firestore_rulegen.compiler.access import OWNERSHIP_HELPER, emit_access_block
from firestore_rulegen.compiler.validator import emit_validator
from firestore_rulegen.schema.models import ModelSchema, Schema

logger = logging.getLogger(__name__)

HEADER = (
    "rules_version = '2'\n"
    "service cloud.firestore {\n"
    "\tmatch /databases/{database}/documents {\n"
)

OWNERSHIP_FUNCTION = (
    f"\t\tfunction {OWNERSHIP_HELPER}(ownerId) {{\n"
    "\t\t\treturn\n"
    "\t\t\t\trequest.auth.uid == ownerId;\n"
    "\t\t}\n"
)

FOOTER = "\t}\n}"

DEFAULT_INDENT = "  "


def compile_rules(schema: Schema | Sequence[ModelSchema]) -> str:
    """Compile a schema into a complete rules document.

    Args:
        schema: A ``Schema`` or a plain sequence of ``ModelSchema``.
            Never mutated.

    Returns:
        Rules text. Indentation uses tabs; no trailing newline.

    Example:
        >>> compile_rules([]).splitlines()[0]
        "rules_version = '2'"
    """
    models = schema.models if isinstance(schema, Schema) else list(schema)

    rules = HEADER
    rules += OWNERSHIP_FUNCTION

    for model in models:
        rules += emit_validator(model) + "\n"

    for model in models:
        rules += emit_access_block(model)

    rules += FOOTER

    logger.debug(f"Compiled {len(models)} models into {len(rules)} characters")
    return rules


def expand_indent(rules: str, indent: str = DEFAULT_INDENT) -> str:
    """Replace tab indentation with *indent* for display or copy.

    Example:
        >>> expand_indent("\\tmatch", "  ")
        '  match'
    """
    return rules.replace("\t", indent)
