"""
Rename "zoo" types, whose names collide with platform or library built-ins.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace

from ..definitions.nodes import DefinitionSet, TypeKind
from ..errors import NamingCollisionError

logger = logging.getLogger(__name__)


def rename_types(definitions: DefinitionSet, table: Mapping[str, str]) -> DefinitionSet:
    """
    Apply a rename table to type and enum names and to every reference.

    Entries whose source is absent are skipped, so applying the same table
    twice gives the same result as applying it once. The table is applied
    atomically: a renamed name is never renamed again in the same call.

    Args:
        definitions: The definition set
        table: Mapping from old name to new name

    Returns:
        A new set with the renames applied

    Raises:
        NamingCollisionError: If a new name is already used by another definition
    """
    renames = {old: new for old, new in table.items() if old in definitions and old != new}
    if not renames:
        return definitions

    for old, new in renames.items():
        if new in definitions and new not in renames:
            raise NamingCollisionError(old, new, f"cannot rename '{old}' to '{new}', '{new}' already exists")
    targets = list(renames.values())
    for new in targets:
        if targets.count(new) > 1:
            sources = sorted(old for old, target in renames.items() if target == new)
            raise NamingCollisionError(sources[0], sources[1], f"both renamed to '{new}'")

    types = []
    for type_def in definitions:
        type_def = type_def.rename_references(renames)
        if type_def.name in renames:
            entity = type_def.source_entity
            # Keep a model grouped with its inputs under the old entity name
            if entity is None and type_def.kind is TypeKind.MODEL:
                entity = type_def.name
            type_def = replace(type_def, name=renames[type_def.name], source_entity=entity)
        types.append(type_def)
    enums = [replace(e, name=renames[e.name]) if e.name in renames else e for e in definitions.enums.values()]

    for old, new in renames.items():
        logger.info("Renamed %s to %s", old, new)
    return DefinitionSet.from_definitions(types, enums)
