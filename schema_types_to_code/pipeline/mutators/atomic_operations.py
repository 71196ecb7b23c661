"""
Strip atomic number operation types.

``IntFieldUpdateOperationsInput`` and friends wrap a value in an operation
object (``{set}``, ``{increment}``, ...). Without atomic operations the
update inputs take the bare value instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from ..definitions.nodes import DefinitionSet, Field, NamedRef, TypeDefinition, TypeKind, TypeRef, iter_refs, map_refs
from ..errors import DanglingReferenceError

logger = logging.getLogger(__name__)

OPERATION_FIELDS = frozenset({"set", "increment", "decrement", "multiply", "divide", "unset"})
OPERATIONS_SUFFIX = "FieldUpdateOperationsInput"


@dataclass(frozen=True)
class _Replacement:
    type_ref: TypeRef
    nullable: bool


def is_update_operations_type(type_def: TypeDefinition) -> bool:
    """Whether ``type_def`` is a field update operations input."""
    if type_def.kind is not TypeKind.INPUT or not type_def.name.endswith(OPERATIONS_SUFFIX):
        return False
    names = {f.name for f in type_def.fields}
    return "set" in names and names <= OPERATION_FIELDS


def _strip_field(f: Field, replacements: dict[str, _Replacement]) -> Field:
    touched = [replacements[ref.name] for ref in iter_refs(f.type_ref) if isinstance(ref, NamedRef) and ref.name in replacements]
    if not touched:
        return f

    def _replace(ref):
        if isinstance(ref, NamedRef) and ref.name in replacements:
            return replacements[ref.name].type_ref
        return ref

    return replace(
        f,
        type_ref=map_refs(f.type_ref, _replace),
        nullable=f.nullable or any(r.nullable for r in touched),
    )


def strip_atomic_operations(definitions: DefinitionSet) -> DefinitionSet:
    """
    Remove update operation types and type their users with the bare value.

    The bare value is the type of the operation type's ``set`` field. Within
    a union only the operation member is replaced.

    Args:
        definitions: The definition set

    Returns:
        A new set without update operation types

    Raises:
        DanglingReferenceError: If a surviving type still references a removed one
    """
    replacements = {}
    for type_def in definitions:
        if is_update_operations_type(type_def):
            set_field = type_def.get_field("set")
            replacements[type_def.name] = _Replacement(set_field.type_ref, set_field.nullable)
    if not replacements:
        return definitions

    stripped = []
    for type_def in definitions:
        if type_def.name in replacements:
            continue
        fields = tuple(_strip_field(f, replacements) for f in type_def.fields)
        stripped.append(type_def if fields == type_def.fields else replace(type_def, fields=fields))

    # Only delete what nothing references any more
    removed = set(replacements)
    for type_def in stripped:
        for f in type_def.fields:
            for ref in iter_refs(f.type_ref):
                if isinstance(ref, NamedRef) and ref.name in removed:
                    raise DanglingReferenceError(type_def.name, f.name, ref.name, "strip atomic operations")

    result = definitions.with_types(stripped)

    logger.debug("Removed %d update operation types: %s", len(removed), ", ".join(sorted(removed)))
    return result
