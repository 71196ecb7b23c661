"""
Load a definition set from its JSON document form.

The document is produced by the schema parser, which lives outside this
package::

    {
      "enums": [{"name": "Role", "values": ["USER", "ADMIN"]}],
      "types": [
        {
          "name": "UserWhereInput",
          "kind": "input",
          "sourceEntity": "User",
          "fields": [
            {"name": "id", "type": {"union": [{"type": "IntFilter"}, {"scalar": "Int"}]}},
            {"name": "role", "type": {"enum": "Role"}, "nullable": true}
          ]
        }
      ]
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..errors import DefinitionFormatError
from .nodes import (
    DefinitionSet,
    EnumDefinition,
    EnumRef,
    Field,
    NamedRef,
    ScalarRef,
    TypeDefinition,
    TypeKind,
    TypeRef,
    make_union,
)


def parse_type_ref(data: Any, context: str = "") -> TypeRef:
    """Parse one ``type`` object of a field."""
    if not isinstance(data, dict) or len(data) != 1:
        raise DefinitionFormatError(f"{context}: a type must be an object with exactly one key, got {data!r}")
    ((tag, value),) = data.items()
    if tag == "scalar":
        return ScalarRef(str(value))
    if tag == "enum":
        return EnumRef(str(value))
    if tag == "type":
        return NamedRef(str(value))
    if tag == "union":
        if not isinstance(value, list) or not value:
            raise DefinitionFormatError(f"{context}: a union needs a non-empty list of members")
        return make_union(parse_type_ref(member, context) for member in value)
    raise DefinitionFormatError(f"{context}: unknown type tag '{tag}'")


def parse_kind(value: Any, context: str = "") -> TypeKind:
    try:
        return TypeKind(str(value).lower())
    except ValueError:
        raise DefinitionFormatError(f"{context}: unknown kind {value!r}") from None


def _require_list(data: dict, key: str, context: str) -> list:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise DefinitionFormatError(f"{context}: '{key}' must be a list, got {value!r}")
    return value


def parse_type_definition(data: Any) -> TypeDefinition:
    if not isinstance(data, dict):
        raise DefinitionFormatError(f"A type must be an object, got {data!r}")
    name = data.get("name")
    if not name:
        raise DefinitionFormatError(f"Type without a name: {data!r}")

    fields = []
    for field_data in _require_list(data, "fields", name):
        if not isinstance(field_data, dict):
            raise DefinitionFormatError(f"{name}: a field must be an object, got {field_data!r}")
        field_name = field_data.get("name")
        if not field_name:
            raise DefinitionFormatError(f"{name}: field without a name")
        if "type" not in field_data:
            raise DefinitionFormatError(f"{name}.{field_name}: field without a type")
        fields.append(
            Field(
                name=field_name,
                type_ref=parse_type_ref(field_data["type"], f"{name}.{field_name}"),
                nullable=bool(field_data.get("nullable", False)),
                is_list=bool(field_data.get("isList", False)),
            )
        )

    kind = parse_kind(data.get("kind"), name)
    source_entity = data.get("sourceEntity")
    # A model is its own entity, so renaming it later does not move its file
    if source_entity is None and kind is TypeKind.MODEL:
        source_entity = name
    return TypeDefinition(name=name, kind=kind, fields=tuple(fields), source_entity=source_entity)


def parse_enum_definition(data: Any) -> EnumDefinition:
    if not isinstance(data, dict):
        raise DefinitionFormatError(f"An enum must be an object, got {data!r}")
    name = data.get("name")
    if not name:
        raise DefinitionFormatError(f"Enum without a name: {data!r}")
    return EnumDefinition(
        name=name,
        values=tuple(str(v) for v in _require_list(data, "values", name)),
        source_entity=data.get("sourceEntity"),
    )


def load_definitions(document: dict) -> DefinitionSet:
    """
    Build a definition set from a parsed JSON document.

    Args:
        document: The decoded document

    Returns:
        The definition set, in document order

    Raises:
        DefinitionFormatError: If the document is malformed
        NamingCollisionError: If a name is defined twice
    """
    if not isinstance(document, dict):
        raise DefinitionFormatError("The definition document must be a JSON object")
    enums = [parse_enum_definition(e) for e in _require_list(document, "enums", "document")]
    types = [parse_type_definition(t) for t in _require_list(document, "types", "document")]
    return DefinitionSet.from_definitions(types, enums)


def load_definitions_file(path: str | Path) -> DefinitionSet:
    """Read and load a definition document from disk."""
    with open(path, encoding="utf-8") as f:
        try:
            document = json.load(f)
        except json.JSONDecodeError as e:
            raise DefinitionFormatError(f"{path}: invalid JSON: {e}") from e
    return load_definitions(document)
