"""Model validator emitter.

Builds the ``validate<Name>Model(data)`` function for one model by
conjoining the clauses of every field's constraints. Pure logic -- no I/O.

Usage:
    from firestore_rulegen.compiler.validator import emit_validator
    from firestore_rulegen.schema.models import FieldSchema, ModelSchema

    model = ModelSchema(name="user", fields=[
        FieldSchema(name="age", rules={"type": "number"}),
    ])
    print(emit_validator(model))
"""

import logging

from firestore_rulegen.compiler.templates import (
    render_clause,
    render_empty_or_match,
    render_nested_call,
    validator_name,
)
from firestore_rulegen.schema.models import ConstraintKind, ModelSchema, is_primitive_type

logger = logging.getLogger(__name__)

# Indentation inside the database match scope
_FUNCTION_INDENT = "\t\t"
_RETURN_INDENT = "\t\t\t"
_CLAUSE_INDENT = "\t\t\t\t"

# Body used when a model contributes no clauses
EMPTY_CONJUNCTION = "true"


def collect_clauses(model: ModelSchema) -> list[str]:
    """Collect the validation clauses of a model in field/constraint order.

    Clause selection per constraint:

    - ``type`` naming a model: nested ``validate<Type>Model(data.<field>)`` call
    - ``regex`` with a truthy ``canBeEmpty``: empty-string-or-match disjunction
    - ``canBeEmpty``: nothing (only modifies ``regex``)
    - anything else: the template clause, if the value is truthy

    Args:
        model: Model to collect clauses for.

    Returns:
        Clause strings, in the order they appear in the generated function.

    Examples:
        >>> from firestore_rulegen.schema.models import FieldSchema
        >>> model = ModelSchema(name="user", fields=[
        ...     FieldSchema(name="address", rules={"type": "address"}),
        ... ])
        >>> collect_clauses(model)
        ['validateAddressModel(data.address)']
    """
    clauses: list[str] = []

    for field in model.fields:
        for kind, value in field.constraints():
            # Empty strings, zero, false and None all count as absent
            if not value:
                continue

            if kind is ConstraintKind.TYPE and not is_primitive_type(value):
                clauses.append(render_nested_call(value, field.name))
            elif kind is ConstraintKind.REGEX and field.can_be_empty:
                clauses.append(render_empty_or_match(field.name, value))
            else:
                clause = render_clause(kind, field.name, value)
                if clause is not None:
                    clauses.append(clause)

    return clauses


def emit_validator(model: ModelSchema) -> str:
    """Emit the validation function for one model.

    The body is a single ``return`` of all clauses joined with ``&&``, one
    clause per line. A model without clauses returns ``true``.

    Args:
        model: Model to emit a validator for.

    Returns:
        Function text, without a trailing newline.
    """
    clauses = collect_clauses(model)
    if not clauses:
        logger.debug(f"Model '{model.name}' has no clauses, validator returns true")
        clauses = [EMPTY_CONJUNCTION]

    body = " &&\n".join(f"{_CLAUSE_INDENT}{clause}" for clause in clauses)

    return (
        f"{_FUNCTION_INDENT}function {validator_name(model.name)}(data) {{\n"
        f"{_RETURN_INDENT}return\n"
        f"{body};\n"
        f"{_FUNCTION_INDENT}}}"
    )
