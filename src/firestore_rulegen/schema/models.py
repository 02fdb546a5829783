"""Pydantic models for rule-generation schemas and schema checks.

This module contains schema-domain models:
- Constraint vocabulary: ConstraintKind, PrimitiveType
- Schema models: FieldSchema, ModelSchema, Schema
- Check models: ReferenceIssue, ConstraintIssue, SchemaCheckResult

Field and alias names follow the editor's persisted JSON (``ownerField``,
``createAuthRequired``, ...). Python attribute names are snake_case and are
accepted on input as well.
"""

from collections.abc import Iterator
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ============================================================================
# Constraint Vocabulary
# ============================================================================


class ConstraintKind(StrEnum):
    """Closed set of constraint kinds a field may carry."""

    TYPE = "type"
    REGEX = "regex"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    CAN_BE_EMPTY = "canBeEmpty"


class PrimitiveType(StrEnum):
    """Built-in value types. Any other ``type`` names a model."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"


PRIMITIVE_TYPES: frozenset[str] = frozenset(t.value for t in PrimitiveType)

_KNOWN_KINDS: frozenset[str] = frozenset(k.value for k in ConstraintKind)

_LENGTH_KINDS = (ConstraintKind.MIN_LENGTH.value, ConstraintKind.MAX_LENGTH.value)

_EXPECTED_TYPES: dict[str, type] = {
    ConstraintKind.TYPE.value: str,
    ConstraintKind.REGEX.value: str,
    ConstraintKind.MIN_LENGTH.value: int,
    ConstraintKind.MAX_LENGTH.value: int,
    ConstraintKind.CAN_BE_EMPTY.value: bool,
}


def is_primitive_type(type_name: str) -> bool:
    """True if *type_name* is a built-in type rather than a model reference."""
    return type_name in PRIMITIVE_TYPES


# ============================================================================
# Schema Models
# ============================================================================


class FieldSchema(BaseModel):
    """One named, constrained attribute of a model.

    ``rules`` keeps insertion order; that order is the clause order in the
    generated validator.

    Example:
        >>> field = FieldSchema(name="age", rules={"type": "number", "minLength": "2"})
        >>> list(field.constraints())
        [(<ConstraintKind.TYPE: 'type'>, 'number'), (<ConstraintKind.MIN_LENGTH: 'minLength'>, 2)]
    """

    name: str = ""
    rules: dict[str, Any] = Field(default_factory=dict)

    @field_validator("name", mode="before")
    @classmethod
    def _none_name_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("rules")
    @classmethod
    def _normalize_rules(cls, rules: dict[str, Any]) -> dict[str, Any]:
        """Coerce editor text-input values without reordering keys.

        Values of recognized kinds must have the kind's type once coerced:
        ``type`` and ``regex`` are strings, lengths are integers and
        ``canBeEmpty`` is a boolean. ``None`` always means absent.

        Raises:
            ValueError: If a recognized kind holds a value of another type.
        """
        normalized: dict[str, Any] = {}
        for kind, value in rules.items():
            if value == "":
                value = None
            elif kind in _LENGTH_KINDS and isinstance(value, str):
                value = int(value.strip())

            if value is not None and kind in _EXPECTED_TYPES:
                expected = _EXPECTED_TYPES[kind]
                # bool is a subclass of int
                if not isinstance(value, expected) or (
                    expected is int and isinstance(value, bool)
                ):
                    raise ValueError(
                        f"Rule '{kind}' must be {expected.__name__}, "
                        f"got {type(value).__name__}: {value!r}"
                    )
            normalized[kind] = value
        return normalized

    def constraints(self) -> Iterator[tuple[ConstraintKind, Any]]:
        """Yield recognized ``(kind, value)`` pairs in insertion order."""
        for kind, value in self.rules.items():
            if kind in _KNOWN_KINDS:
                yield ConstraintKind(kind), value

    def unknown_constraints(self) -> list[str]:
        """Rule keys that are not a recognized constraint kind."""
        return [kind for kind in self.rules if kind not in _KNOWN_KINDS]

    @property
    def can_be_empty(self) -> bool:
        return bool(self.rules.get(ConstraintKind.CAN_BE_EMPTY.value))


class ModelSchema(BaseModel):
    """One data collection: its fields, access flags and owner field.

    Example:
        >>> model = ModelSchema(name="post", ownerField="authorId",
        ...                     fields=[FieldSchema(name="authorId")])
        >>> model.effective_owner_field
        'authorId'
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = ""
    owner_field: str = ""
    read_all_auth_required: bool = False
    read_one_auth_required: bool | None = None  # None keeps a single read rule
    create_auth_required: bool = False
    update_auth_required: bool = False
    delete_auth_required: bool = False
    fields: list[FieldSchema] = Field(default_factory=list)

    @field_validator("name", "owner_field", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    @property
    def effective_owner_field(self) -> str | None:
        """Owner field if it names one of this model's fields, else None."""
        if self.owner_field and self.owner_field in self.field_names:
            return self.owner_field
        return None

    @property
    def requires_owner(self) -> bool:
        """True if update or delete asks for an ownership check."""
        return self.update_auth_required or self.delete_auth_required


class Schema(BaseModel):
    """Complete rule-generation schema. Model order is output order."""

    models: list[ModelSchema] = Field(default_factory=list)

    @property
    def model_names(self) -> list[str]:
        return [m.name for m in self.models]

    def get_model(self, name: str) -> ModelSchema | None:
        """First model with the given name, or None."""
        for model in self.models:
            if model.name == name:
                return model
        return None


# ============================================================================
# Check Result Models
# ============================================================================


class ReferenceIssue(BaseModel):
    """A field whose ``type`` names a model absent from the schema."""

    model: str
    field: str
    target: str
    message: str = ""


class ConstraintIssue(BaseModel):
    """A rule key the compiler does not recognize (ignored on output)."""

    model: str
    field: str
    kind: str


class SchemaCheckResult(BaseModel):
    """Result of checking a schema for gaps the compiler does not detect.

    Example:
        >>> result = SchemaCheckResult(valid=True)
        >>> result.error_count
        0
        >>> result.format_report()
        'Schema OK'
    """

    valid: bool
    dangling_references: list[ReferenceIssue] = Field(default_factory=list)
    duplicate_models: list[str] = Field(default_factory=list)
    owner_issues: list[str] = Field(default_factory=list)  # Warning only
    unknown_constraints: list[ConstraintIssue] = Field(default_factory=list)  # Warning only
    empty_models: list[str] = Field(default_factory=list)  # Warning only

    @property
    def error_count(self) -> int:
        """Count of errors (dangling references + duplicate model names)."""
        return len(self.dangling_references) + len(self.duplicate_models)

    @property
    def warning_count(self) -> int:
        return len(self.owner_issues) + len(self.unknown_constraints) + len(self.empty_models)

    def format_report(self) -> str:
        """Format check result as human-readable report."""
        if self.valid and not self.warning_count:
            return "Schema OK"

        lines = ["Schema OK (with warnings):" if self.valid else "Schema check failed:"]

        if self.dangling_references:
            lines.append(f"\n  Dangling references ({len(self.dangling_references)}):")
            for issue in self.dangling_references:
                lines.append(f"    - {issue.model}.{issue.field} -> {issue.target}")

        if self.duplicate_models:
            lines.append(f"\n  Duplicate model names ({len(self.duplicate_models)}):")
            for name in self.duplicate_models:
                lines.append(f"    - {name}")

        if self.owner_issues:
            lines.append(
                f"\n  No usable owner field (warning): {', '.join(self.owner_issues)}"
            )

        if self.unknown_constraints:
            lines.append("\n  Ignored constraints (warning):")
            for issue in self.unknown_constraints:
                lines.append(f"    - {issue.model}.{issue.field}: {issue.kind}")

        if self.empty_models:
            lines.append(
                f"\n  Models without clauses (warning): {', '.join(self.empty_models)}"
            )

        return "\n".join(lines)
