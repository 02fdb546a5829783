"""Schema-to-rules compiler.

Provides the public entry point ``compile_rules`` and the per-model
emitters it is built from (``emit_validator``, ``emit_access_block``).

Usage:
    from firestore_rulegen.compiler import compile_rules, expand_indent
    from firestore_rulegen.compiler import emit_validator, emit_access_block
"""

from firestore_rulegen.compiler.access import AUTH_CHECK, emit_access_block, owner_condition
from firestore_rulegen.compiler.identifiers import capitalize
from firestore_rulegen.compiler.ruleset import compile_rules, expand_indent
from firestore_rulegen.compiler.templates import (
    render_clause,
    render_empty_or_match,
    render_nested_call,
    validator_name,
)
from firestore_rulegen.compiler.validator import collect_clauses, emit_validator

__all__ = [
    "compile_rules",
    "expand_indent",
    "emit_validator",
    "collect_clauses",
    "emit_access_block",
    "owner_condition",
    "AUTH_CHECK",
    "capitalize",
    "render_clause",
    "render_empty_or_match",
    "render_nested_call",
    "validator_name",
]
