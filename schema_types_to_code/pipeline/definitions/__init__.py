"""
Definitions module.

Contains the type definition nodes, the integrity checks run after every
pass and the JSON loader.
"""

from __future__ import annotations

from .integrity import check_integrity
from .loader import load_definitions, load_definitions_file
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
    UnionRef,
    make_union,
)

__all__ = [
    "DefinitionSet",
    "EnumDefinition",
    "EnumRef",
    "Field",
    "NamedRef",
    "ScalarRef",
    "TypeDefinition",
    "TypeKind",
    "TypeRef",
    "UnionRef",
    "make_union",
    "check_integrity",
    "load_definitions",
    "load_definitions_file",
]
