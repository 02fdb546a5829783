"""Schema encodings: JSON in, ``Schema`` out, and back.

Two encodings are accepted:

- Persisted form: a JSON array of model objects using the editor's camelCase
  keys (``name``, ``ownerField``, ``createAuthRequired``, ``fields``, ...).
- Flattened form: a JSON object mapping model name to a mapping of field
  name to constraint rules. Models from this form carry no access flags and
  no owner field.

Only the persisted form is written back out.

Usage:
    from firestore_rulegen.schema.loader import load_schema, dumps_schema

    schema = load_schema("schema.json")
    text = dumps_schema(schema)
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from firestore_rulegen.schema.models import FieldSchema, ModelSchema, Schema

logger = logging.getLogger(__name__)


class SchemaParseError(ValueError):
    """Raised when a schema payload is not a valid schema encoding."""

    pass


def _parse_flattened(data: dict[str, Any]) -> Schema:
    models: list[ModelSchema] = []
    for model_name, fields in data.items():
        if not isinstance(fields, dict):
            raise SchemaParseError(
                f"Invalid schema encoding: model '{model_name}' must map field names to rules"
            )
        model_fields = []
        for field_name, rules in fields.items():
            if not isinstance(rules, dict):
                raise SchemaParseError(
                    f"Invalid schema encoding: rules for '{model_name}.{field_name}' "
                    f"must be an object"
                )
            model_fields.append(FieldSchema(name=field_name, rules=rules))
        models.append(ModelSchema(name=model_name, fields=model_fields))
    return Schema(models=models)


def parse_schema(data: Any) -> Schema:
    """Build a ``Schema`` from decoded JSON in either encoding.

    Args:
        data: A list of model objects (persisted form) or a mapping of model
            name to field rules (flattened form).

    Returns:
        The parsed ``Schema``.

    Raises:
        SchemaParseError: If *data* has neither shape or fails validation.

    Examples:
        >>> schema = parse_schema({"user": {"age": {"type": "number"}}})
        >>> schema.models[0].fields[0].rules
        {'type': 'number'}

        >>> parse_schema([{"name": "user", "createAuthRequired": True}]).models[0].create_auth_required
        True
    """
    try:
        if isinstance(data, list):
            schema = Schema(models=[ModelSchema.model_validate(item) for item in data])
        elif isinstance(data, dict):
            schema = _parse_flattened(data)
        else:
            raise SchemaParseError(
                f"Invalid schema encoding: expected a list or object, got {type(data).__name__}"
            )
    except ValidationError as e:
        raise SchemaParseError(f"Invalid schema encoding: {e}") from e

    logger.debug(f"Parsed schema with {len(schema.models)} models")
    return schema


def loads_schema(text: str) -> Schema:
    """Parse a schema from JSON text.

    Raises:
        SchemaParseError: If *text* is not valid JSON or not a schema.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaParseError(f"Invalid schema encoding: {e}") from e
    return parse_schema(data)


def load_schema(schema_path: str | Path) -> Schema:
    """Load a schema from a JSON file.

    Args:
        schema_path: Path to a JSON file in either encoding.

    Returns:
        The parsed ``Schema``.

    Raises:
        FileNotFoundError: If the file does not exist.
        SchemaParseError: If the file content is not a valid schema.
    """
    path = Path(schema_path)
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")

    return loads_schema(path.read_text())


def dump_schema(schema: Schema) -> list[dict[str, Any]]:
    """Serialize a schema to the persisted form (list of model objects).

    Unset ``readOneAuthRequired`` is left out so files written by the
    editor round-trip unchanged.
    """
    dumped = []
    for model in schema.models:
        data = model.model_dump(by_alias=True)
        if data["readOneAuthRequired"] is None:
            del data["readOneAuthRequired"]
        dumped.append(data)
    return dumped


def dumps_schema(schema: Schema, indent: int | None = 2) -> str:
    """Serialize a schema to persisted-form JSON text."""
    return json.dumps(dump_schema(schema), indent=indent)
