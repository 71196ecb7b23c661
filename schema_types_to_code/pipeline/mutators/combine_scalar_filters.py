"""
Combine nullable and nested scalar filter variants.

The schema derives up to four filters per scalar (``StringFilter``,
``StringNullableFilter``, ``NestedStringFilter``,
``NestedStringNullableFilter``, and the same again for
``...WithAggregatesFilter``). This pass folds each family into its plain
name, e.g. everything above into ``StringFilter``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace

from ..definitions.nodes import DefinitionSet, Field, TypeDefinition, TypeKind, describe_ref
from ..errors import SchemaIncompatibilityError

logger = logging.getLogger(__name__)

_FILTER_NAME = re.compile(
    r"^(?P<nested>Nested)?(?P<leading_nullable>Nullable)?"
    r"(?P<base>[A-Z][A-Za-z0-9]*?)"
    r"(?P<nullable>Nullable)?"
    r"(?P<suffix>(?:List)?(?:WithAggregates)?Filter)$"
)


def canonical_filter_name(name: str) -> str | None:
    """Return the combined name of a scalar filter, or None for other types.

    >>> canonical_filter_name("NestedIntNullableWithAggregatesFilter")
    'IntWithAggregatesFilter'
    """
    match = _FILTER_NAME.match(name)
    if not match:
        return None
    base = match.group("base")
    # Relation filters are not scalar filters
    if base.endswith("Relation"):
        return None
    return f"{base}{match.group('suffix')}"


def _collect_groups(definitions: DefinitionSet) -> dict[str, list[TypeDefinition]]:
    """Group filter inputs by combined name, keeping groups that need work."""
    groups: dict[str, list[TypeDefinition]] = {}
    for type_def in definitions:
        if type_def.kind is not TypeKind.INPUT:
            continue
        canonical = canonical_filter_name(type_def.name)
        if canonical is not None:
            groups.setdefault(canonical, []).append(type_def)

    result = {}
    for canonical, variants in groups.items():
        if len(variants) == 1 and variants[0].name == canonical:
            continue
        # The plainly named variant leads, so its field order wins
        variants.sort(key=lambda v: v.name != canonical)
        result[canonical] = variants
    return result


def _merge_variants(canonical: str, variants: list[TypeDefinition], renames: dict[str, str]) -> TypeDefinition:
    merged: dict[str, Field] = {}
    owners: dict[str, str] = {}
    for variant in variants:
        for f in variant.rename_references(renames).fields:
            existing = merged.get(f.name)
            if existing is None:
                merged[f.name] = f
                owners[f.name] = variant.name
                continue
            if existing.type_ref != f.type_ref:
                raise SchemaIncompatibilityError(
                    owners[f.name],
                    variant.name,
                    f.name,
                    f"{describe_ref(existing.type_ref)} vs {describe_ref(f.type_ref)}",
                )
            if existing.is_list != f.is_list:
                raise SchemaIncompatibilityError(owners[f.name], variant.name, f.name, "list and non-list")
            if f.nullable and not existing.nullable:
                merged[f.name] = replace(existing, nullable=True)

    return TypeDefinition(
        name=canonical,
        kind=TypeKind.INPUT,
        fields=tuple(merged.values()),
        source_entity=variants[0].source_entity,
    )


def combine_scalar_filters(definitions: DefinitionSet) -> DefinitionSet:
    """
    Fold every scalar filter family into a single filter type.

    Args:
        definitions: The definition set

    Returns:
        A new set without nullable/nested filter variants

    Raises:
        SchemaIncompatibilityError: If two variants disagree on a shared field
    """
    groups = _collect_groups(definitions)
    if not groups:
        return definitions

    renames = {v.name: canonical for canonical, variants in groups.items() for v in variants if v.name != canonical}
    merged = {canonical: _merge_variants(canonical, variants, renames) for canonical, variants in groups.items()}
    group_of = {v.name: canonical for canonical, variants in groups.items() for v in variants}

    types: list[TypeDefinition] = []
    emitted: set[str] = set()
    for type_def in definitions:
        canonical = group_of.get(type_def.name)
        if canonical is None:
            types.append(type_def.rename_references(renames))
        elif canonical not in emitted:
            # The combined filter takes the place of the first variant seen
            types.append(merged[canonical])
            emitted.add(canonical)

    logger.debug("Combined %d filter variants into %d filters", len(group_of), len(groups))
    for old, new in renames.items():
        logger.debug("  %s -> %s", old, new)
    return definitions.with_types(types)
