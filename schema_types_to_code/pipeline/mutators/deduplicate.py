"""
Structural deduplication of type definitions.

Two types are duplicates when they have the same kind and the same ordered
fields, each matching on name, nullability, list cardinality and type,
where references to other types match when those types are duplicates
themselves. Because types reference each other cyclically (``UserWhereInput``
and ``PostWhereInput``), equivalence is computed by partition refinement
rather than by recursive comparison:

1. Split the types into blocks by everything that can be compared directly:
   kind, field names, nullability, list flags, scalar kinds and enum names.
2. Split each block again by the blocks its field references point into.
3. Repeat until a round leaves the number of blocks unchanged.

The surviving name of each block is the shortest one, ties broken
lexically, so the result does not depend on the input order.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable

from ..config import RemoveDuplicate
from ..definitions.nodes import DefinitionSet, EnumRef, NamedRef, ScalarRef, TypeDefinition, TypeKind, TypeRef, UnionRef, iter_refs

logger = logging.getLogger(__name__)

_SCOPES = {
    RemoveDuplicate.NONE: frozenset(),
    RemoveDuplicate.MODEL: frozenset({TypeKind.MODEL, TypeKind.OUTPUT}),
    RemoveDuplicate.INPUT: frozenset({TypeKind.INPUT, TypeKind.ARGS}),
    RemoveDuplicate.ALL: frozenset(TypeKind),
}


def canonical_order(name: str) -> tuple[int, str]:
    """Sort key deciding which duplicate survives: shortest, then lexical."""
    return (len(name), name)


def _shape(type_ref: TypeRef) -> Hashable:
    if isinstance(type_ref, ScalarRef):
        return ("scalar", type_ref.kind)
    if isinstance(type_ref, EnumRef):
        return ("enum", type_ref.name)
    if isinstance(type_ref, UnionRef):
        return ("union", tuple(_shape(m) for m in type_ref.members))
    return ("ref",)


def _initial_key(type_def: TypeDefinition, eligible: bool) -> Hashable:
    if not eligible:
        return ("fixed", type_def.name)
    return (
        type_def.kind.value,
        tuple((f.name, f.nullable, f.is_list, _shape(f.type_ref)) for f in type_def.fields),
    )


def _number_blocks(keys: dict[str, Hashable], order: list[str]) -> dict[str, int]:
    """Give each distinct key a block id, numbered in ``order``."""
    ids: dict[Hashable, int] = {}
    blocks = {}
    for name in order:
        blocks[name] = ids.setdefault(keys[name], len(ids))
    return blocks


def partition_types(definitions: DefinitionSet, kinds: frozenset[TypeKind]) -> list[list[str]]:
    """
    Partition the types into classes of structurally identical types.

    Args:
        definitions: The definition set
        kinds: Kinds eligible for folding; other types stay in singleton classes

    Returns:
        The classes, each sorted in canonical order with the survivor first,
        and the list sorted by survivor
    """
    order = sorted(definitions.names(), key=canonical_order)
    types = definitions.types
    blocks = _number_blocks({name: _initial_key(types[name], types[name].kind in kinds) for name in order}, order)

    block_count = len(set(blocks.values()))
    rounds = 0
    while True:
        rounds += 1
        keys = {
            name: (
                blocks[name],
                tuple(
                    tuple(blocks[ref.name] for ref in iter_refs(f.type_ref) if isinstance(ref, NamedRef))
                    for f in types[name].fields
                ),
            )
            for name in order
        }
        blocks = _number_blocks(keys, order)
        new_count = len(set(blocks.values()))
        if new_count == block_count:
            break
        block_count = new_count
    logger.debug("Partition of %d types stable after %d rounds: %d classes", len(order), rounds, block_count)

    classes: dict[int, list[str]] = {}
    for name in order:
        classes.setdefault(blocks[name], []).append(name)
    return list(classes.values())


def deduplicate_types(definitions: DefinitionSet, scope: RemoveDuplicate) -> DefinitionSet:
    """
    Fold structurally identical types into one survivor per class.

    Args:
        definitions: The definition set
        scope: Which kinds of types may be folded

    Returns:
        A new set where no two eligible types are structurally identical
        and every reference to a dropped duplicate points at its survivor
    """
    kinds = _SCOPES[scope]
    if not kinds:
        return definitions

    removed = 0
    # Folding can collapse unions (A | B with A == B), which may expose new
    # duplicates, so fold until nothing changes
    while True:
        renames: dict[str, str] = {}
        for members in partition_types(definitions, kinds):
            survivor, *duplicates = members
            for duplicate in duplicates:
                renames[duplicate] = survivor
            if duplicates:
                logger.debug("Folding %s into %s", ", ".join(duplicates), survivor)
        if not renames:
            break
        types = [type_def.rename_references(renames) for type_def in definitions if type_def.name not in renames]
        definitions = definitions.with_types(types)
        removed += len(renames)

    if removed:
        logger.info("Removed %d duplicate types", removed)
    return definitions

