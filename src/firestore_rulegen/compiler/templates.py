"""Rule-clause templates: one boolean clause per constraint kind.

Each renderer takes a field name and a constraint value and returns the
clause text. Values are interpolated verbatim; a single quote inside a
``regex`` pattern is not escaped and will break the generated rule.

Usage:
    from firestore_rulegen.compiler.templates import render_clause
    from firestore_rulegen.schema.models import ConstraintKind

    render_clause(ConstraintKind.MAX_LENGTH, "title", 80)
    # 'data.title.length <= 80'
"""

from typing import Any

from firestore_rulegen.compiler.identifiers import capitalize
from firestore_rulegen.schema.models import ConstraintKind


def render_clause(kind: ConstraintKind, field_name: str, value: Any) -> str | None:
    """Render a single constraint as a clause over ``data``.

    Args:
        kind: Constraint kind.
        field_name: Field the constraint applies to.
        value: Constraint value. Callers filter out absent values.

    Returns:
        Clause text, or ``None`` for ``canBeEmpty`` which has no clause of
        its own (it only modifies ``regex``).
    """
    match kind:
        case ConstraintKind.TYPE:
            return f"data.{field_name} is {value}"
        case ConstraintKind.REGEX:
            return f"data.{field_name}.matches('{value}')"
        case ConstraintKind.MAX_LENGTH:
            return f"data.{field_name}.length <= {value}"
        case ConstraintKind.MIN_LENGTH:
            return f"data.{field_name}.length >= {value}"
        case ConstraintKind.CAN_BE_EMPTY:
            return None


def render_empty_or_match(field_name: str, pattern: str) -> str:
    """Regex clause that also accepts the empty string."""
    empty = f"data.{field_name} == ''"
    return f"({empty} || {render_clause(ConstraintKind.REGEX, field_name, pattern)})"


def validator_name(model_name: str) -> str:
    """Name of the generated validation function for a model.

    Example:
        >>> validator_name("address")
        'validateAddressModel'
    """
    return f"validate{capitalize(model_name)}Model"


def render_nested_call(type_name: str, field_name: str) -> str:
    """Clause validating a field as an instance of another model."""
    return f"{validator_name(type_name)}(data.{field_name})"
