"""
Mutators module.

Each mutator is a pure ``DefinitionSet -> DefinitionSet`` function.
``mutate_definitions`` runs them in their fixed order:

1. Combine scalar filters (``combine_scalar_filters``)
2. Strip atomic operations (unless ``atomic_number_operations``)
3. Rename zoo types (``rename_zoo_types``)
4. Deduplicate types (``remove_duplicate_types``)
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..config import CodeGeneratorConfig, RemoveDuplicate
from ..definitions.integrity import check_integrity
from ..definitions.nodes import DefinitionSet
from .atomic_operations import is_update_operations_type, strip_atomic_operations
from .combine_scalar_filters import canonical_filter_name, combine_scalar_filters
from .deduplicate import canonical_order, deduplicate_types, partition_types
from .rename_types import rename_types

logger = logging.getLogger(__name__)

Stage = Callable[[DefinitionSet], DefinitionSet]


def build_stages(config: CodeGeneratorConfig) -> list[tuple[str, bool, Stage]]:
    """The pipeline stages as (name, enabled, function), in run order."""
    return [
        ("combine scalar filters", config.combine_scalar_filters, combine_scalar_filters),
        ("strip atomic operations", not config.atomic_number_operations, strip_atomic_operations),
        ("rename zoo types", config.rename_zoo_types, lambda d: rename_types(d, config.rename_table())),
        (
            "deduplicate types",
            config.remove_duplicate_types is not RemoveDuplicate.NONE,
            lambda d: deduplicate_types(d, config.remove_duplicate_types),
        ),
    ]


def mutate_definitions(definitions: DefinitionSet, config: CodeGeneratorConfig) -> DefinitionSet:
    """
    Run every enabled mutator over the definition set.

    Args:
        definitions: The definition set produced by the schema parser
        config: Code generation configuration

    Returns:
        The final definition set

    Raises:
        ConfigurationConflictError: If the configuration is inconsistent
        GeneratorError: If a stage fails or breaks an integrity post-condition
    """
    config.validate()
    check_integrity(definitions, "input")

    for name, enabled, stage in build_stages(config):
        if not enabled:
            logger.debug("Skipping %s", name)
            continue
        before = len(definitions)
        definitions = stage(definitions)
        check_integrity(definitions, name)
        logger.info("%s: %d -> %d types", name, before, len(definitions))

    return definitions


__all__ = [
    "build_stages",
    "canonical_filter_name",
    "canonical_order",
    "combine_scalar_filters",
    "deduplicate_types",
    "is_update_operations_type",
    "mutate_definitions",
    "partition_types",
    "rename_types",
    "strip_atomic_operations",
]
