"""
Post-condition checks shared by every pass.
"""

from __future__ import annotations

from ..errors import DanglingReferenceError, NamingCollisionError
from .nodes import DefinitionSet, EnumRef, NamedRef, iter_refs


def check_integrity(definitions: DefinitionSet, stage: str = "") -> None:
    """Verify name uniqueness and that every reference resolves.

    Args:
        definitions: The set to check
        stage: Name of the pass that produced the set, for error messages

    Raises:
        NamingCollisionError: If a definition is keyed under another name,
            or a type and an enum share a name
        DanglingReferenceError: If a field references a missing definition
    """
    for key, type_def in definitions.types.items():
        if key != type_def.name:
            raise NamingCollisionError(key, type_def.name, f"type keyed under a different name after {stage or 'input'}")
        if key in definitions.enums:
            raise NamingCollisionError(key, key, "type shadows an enum")
    for key, enum_def in definitions.enums.items():
        if key != enum_def.name:
            raise NamingCollisionError(key, enum_def.name, f"enum keyed under a different name after {stage or 'input'}")

    for type_def in definitions:
        for f in type_def.fields:
            for ref in iter_refs(f.type_ref):
                if isinstance(ref, NamedRef) and ref.name not in definitions.types:
                    raise DanglingReferenceError(type_def.name, f.name, ref.name, stage)
                if isinstance(ref, EnumRef) and ref.name not in definitions.enums:
                    raise DanglingReferenceError(type_def.name, f.name, ref.name, stage)

