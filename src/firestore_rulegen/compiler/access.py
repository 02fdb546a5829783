"""Access rule emitter: the ``match``/``allow`` block for one model."""

from firestore_rulegen.compiler.templates import validator_name
from firestore_rulegen.schema.models import ModelSchema

# The requester is authenticated
AUTH_CHECK = "request.auth != null"

OWNERSHIP_HELPER = "ownedByCaller"

_BLOCK_INDENT = "\t\t"
_ALLOW_INDENT = "\t\t\t"


def _condition(auth_required: bool | None, predicate: str = AUTH_CHECK) -> str:
    return predicate if auth_required else "true"


def owner_condition(model: ModelSchema) -> str:
    """Authentication predicate for update/delete, with ownership when configured.

    Example:
        >>> from firestore_rulegen.schema.models import FieldSchema
        >>> model = ModelSchema(name="post", ownerField="authorId",
        ...                     fields=[FieldSchema(name="authorId")])
        >>> owner_condition(model)
        'request.auth != null && ownedByCaller(resource.data.authorId)'
    """
    owner = model.effective_owner_field
    if owner is None:
        return AUTH_CHECK
    return f"{AUTH_CHECK} && {OWNERSHIP_HELPER}(resource.data.{owner})"


def emit_access_block(model: ModelSchema) -> str:
    """Emit the ``match /<name>/{<name>Document}`` block for one model.

    ``create`` and ``update`` also call the model's validator on
    ``request.resource.data``; ``read`` and ``delete`` never do. When
    ``read_one_auth_required`` is set, ``read`` is split into ``get``
    (single document) and ``list`` (queries).

    Args:
        model: Model to emit the access block for.

    Returns:
        Block text ending with a newline.
    """
    name = model.name
    validate_call = f"{validator_name(name)}(request.resource.data)"
    owned = owner_condition(model)

    if model.read_one_auth_required is None:
        read_lines = [f"allow read: if {_condition(model.read_all_auth_required)};"]
    else:
        read_lines = [
            f"allow get: if {_condition(model.read_one_auth_required)};",
            f"allow list: if {_condition(model.read_all_auth_required)};",
        ]

    allow_lines = [
        *read_lines,
        f"allow create: if {_condition(model.create_auth_required)} && {validate_call};",
        f"allow update: if {_condition(model.update_auth_required, owned)} && {validate_call};",
        f"allow delete: if {_condition(model.delete_auth_required, owned)};",
    ]

    block = f"{_BLOCK_INDENT}match /{name}/{{{name}Document}} {{\n"
    for line in allow_lines:
        block += f"{_ALLOW_INDENT}{line}\n"
    block += f"{_BLOCK_INDENT}}}\n"

    return block
