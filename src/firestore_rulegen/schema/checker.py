"""Schema checks for gaps the compiler passes through silently.

The compiler emits text for any well-typed schema. Some schemas still
produce rules the target engine rejects or that do less than intended.
This module reports them. Pure logic -- no I/O.

Errors (``valid`` is False):
- Dangling references: a field ``type`` names no model in the schema, even
  after capitalization, so the generated validator calls an undefined function.
- Duplicate model names: two models emit the same validator function,
  compared after capitalization (``user`` and ``User`` collide).

Warnings:
- Owner issues: update/delete require auth but the owner field is unset or
  is not one of the model's fields, so no ownership check is emitted.
- Unknown constraints: rule keys the compiler ignores.
- Empty models: no clauses, the validator returns ``true``.

Usage:
    from firestore_rulegen.schema.checker import check_schema

    result = check_schema(schema)
    if not result.valid:
        print(result.format_report())
"""

from collections import defaultdict

from firestore_rulegen.schema.models import (
    ConstraintIssue,
    ConstraintKind,
    ReferenceIssue,
    Schema,
    SchemaCheckResult,
    is_primitive_type,
)


def check_schema(schema: Schema) -> SchemaCheckResult:
    """Check a schema for dangling references, collisions and ignored settings.

    Args:
        schema: Schema to check.

    Returns:
        ``SchemaCheckResult`` with errors and warnings in schema order.

    Examples:
        >>> from firestore_rulegen.schema.loader import parse_schema
        >>> result = check_schema(parse_schema({"user": {"home": {"type": "address"}}}))
        >>> result.valid
        False
        >>> result.dangling_references[0].target
        'address'
    """
    from firestore_rulegen.compiler.templates import validator_name
    from firestore_rulegen.compiler.validator import collect_clauses

    # Generated code links models by validator name, not by raw model name
    defined: set[str] = {validator_name(name) for name in schema.model_names}

    names_by_validator: dict[str, list[str]] = defaultdict(list)
    for name in schema.model_names:
        names_by_validator[validator_name(name)].append(name)

    duplicate_models: list[str] = []
    for names in names_by_validator.values():
        if len(names) > 1:
            duplicate_models.extend(dict.fromkeys(names))

    dangling_references: list[ReferenceIssue] = []
    unknown_constraints: list[ConstraintIssue] = []
    owner_issues: list[str] = []
    empty_models: list[str] = []

    for model in schema.models:
        for field in model.fields:
            type_name = field.rules.get(ConstraintKind.TYPE.value)
            if (
                type_name
                and not is_primitive_type(type_name)
                and validator_name(type_name) not in defined
            ):
                dangling_references.append(
                    ReferenceIssue(
                        model=model.name,
                        field=field.name,
                        target=type_name,
                        message=(
                            f"Field '{model.name}.{field.name}' references "
                            f"unknown model '{type_name}'"
                        ),
                    )
                )

            for kind in field.unknown_constraints():
                unknown_constraints.append(
                    ConstraintIssue(model=model.name, field=field.name, kind=kind)
                )

        if model.requires_owner and model.effective_owner_field is None:
            owner_issues.append(model.name)

        if not collect_clauses(model):
            empty_models.append(model.name)

    is_valid: bool = len(dangling_references) == 0 and len(duplicate_models) == 0

    return SchemaCheckResult(
        valid=is_valid,
        dangling_references=dangling_references,
        duplicate_models=duplicate_models,
        owner_issues=owner_issues,
        unknown_constraints=unknown_constraints,
        empty_models=empty_models,
    )
