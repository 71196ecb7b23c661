"""
Type definition nodes.

These nodes describe the derived types flowing through the pipeline.
Definitions reference each other by name only, so rewriting a reference
is a key substitution rather than a graph mutation. All nodes are frozen;
passes build new nodes with ``dataclasses.replace``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum

from ..errors import NamingCollisionError


class TypeKind(str, Enum):
    """Kind of a generated declaration.

    The value doubles as the ``{type}`` token of the output file pattern.
    """

    MODEL = "model"
    INPUT = "input"
    OUTPUT = "output"
    ARGS = "args"


@dataclass(frozen=True)
class ScalarRef:
    """A built-in scalar such as ``String`` or ``Int``."""

    kind: str


@dataclass(frozen=True)
class EnumRef:
    """A reference to an enum definition."""

    name: str


@dataclass(frozen=True)
class NamedRef:
    """A reference to another type definition."""

    name: str


@dataclass(frozen=True)
class UnionRef:
    """A field accepting any of several shapes.

    Build with ``make_union`` so members stay flat and unique.
    """

    members: tuple[ScalarRef | EnumRef | NamedRef, ...]


TypeRef = ScalarRef | EnumRef | NamedRef | UnionRef


def make_union(members: Iterable[TypeRef]) -> TypeRef:
    """Build a normalized union.

    Nested unions are flattened, duplicates dropped (first occurrence
    wins) and a single remaining member is returned as is.
    """
    flat: list[ScalarRef | EnumRef | NamedRef] = []
    for member in members:
        candidates = member.members if isinstance(member, UnionRef) else (member,)
        for candidate in candidates:
            if candidate not in flat:
                flat.append(candidate)
    if not flat:
        raise ValueError("A union needs at least one member")
    if len(flat) == 1:
        return flat[0]
    return UnionRef(tuple(flat))


def iter_refs(type_ref: TypeRef) -> Iterator[ScalarRef | EnumRef | NamedRef]:
    """Yield the leaf references of a type reference."""
    if isinstance(type_ref, UnionRef):
        yield from type_ref.members
    else:
        yield type_ref


def map_refs(type_ref: TypeRef, func: Callable[[ScalarRef | EnumRef | NamedRef], TypeRef]) -> TypeRef:
    """Apply ``func`` to every leaf reference and re-normalize unions."""
    if isinstance(type_ref, UnionRef):
        return make_union(func(member) for member in type_ref.members)
    return func(type_ref)


def rename_refs(type_ref: TypeRef, renames: Mapping[str, str]) -> TypeRef:
    """Rewrite named and enum references through a rename table."""

    def _rename(ref: ScalarRef | EnumRef | NamedRef) -> TypeRef:
        if isinstance(ref, NamedRef) and ref.name in renames:
            return NamedRef(renames[ref.name])
        if isinstance(ref, EnumRef) and ref.name in renames:
            return EnumRef(renames[ref.name])
        return ref

    return map_refs(type_ref, _rename)


def describe_ref(type_ref: TypeRef) -> str:
    """Human readable form, used in error messages and logs."""
    if isinstance(type_ref, ScalarRef):
        return type_ref.kind
    if isinstance(type_ref, UnionRef):
        return " | ".join(describe_ref(member) for member in type_ref.members)
    return type_ref.name


@dataclass(frozen=True)
class Field:
    """A field of a type definition."""

    name: str
    type_ref: TypeRef
    nullable: bool = False
    is_list: bool = False


@dataclass(frozen=True)
class TypeDefinition:
    """A generated model, input, output or args type."""

    name: str
    kind: TypeKind
    fields: tuple[Field, ...] = ()
    # Originating model, used to group output files
    source_entity: str | None = None

    def get_field(self, name: str) -> Field | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def rename_references(self, renames: Mapping[str, str]) -> TypeDefinition:
        """Return a copy with every field reference rewritten through ``renames``."""
        if not renames:
            return self
        fields = tuple(replace(f, type_ref=rename_refs(f.type_ref, renames)) for f in self.fields)
        if fields == self.fields:
            return self
        return replace(self, fields=fields)


@dataclass(frozen=True)
class EnumDefinition:
    """An enum declaration."""

    name: str
    values: tuple[str, ...] = ()
    source_entity: str | None = None


@dataclass(frozen=True)
class DefinitionSet:
    """The complete, name-keyed collection of definitions at one point in time.

    Passes never mutate a set; they return a new one. Iteration follows
    insertion order, which is the order definitions were produced upstream.
    """

    types: Mapping[str, TypeDefinition] = field(default_factory=dict)
    enums: Mapping[str, EnumDefinition] = field(default_factory=dict)

    @staticmethod
    def from_definitions(
        types: Iterable[TypeDefinition],
        enums: Iterable[EnumDefinition] = (),
    ) -> DefinitionSet:
        """Build a set, rejecting names used twice."""
        enum_map: dict[str, EnumDefinition] = {}
        for enum_def in enums:
            if enum_def.name in enum_map:
                raise NamingCollisionError(enum_def.name, enum_def.name, "enum defined twice")
            enum_map[enum_def.name] = enum_def

        type_map: dict[str, TypeDefinition] = {}
        for type_def in types:
            if type_def.name in type_map:
                raise NamingCollisionError(type_def.name, type_def.name, "type defined twice")
            if type_def.name in enum_map:
                raise NamingCollisionError(type_def.name, type_def.name, "type shadows an enum")
            type_map[type_def.name] = type_def

        return DefinitionSet(types=type_map, enums=enum_map)

    def with_types(self, types: Iterable[TypeDefinition]) -> DefinitionSet:
        """Return a new set with the given types and the same enums."""
        return DefinitionSet.from_definitions(types, self.enums.values())

    def __len__(self) -> int:
        return len(self.types)

    def __iter__(self) -> Iterator[TypeDefinition]:
        return iter(self.types.values())

    def __contains__(self, name: object) -> bool:
        return name in self.types or name in self.enums

    def get(self, name: str) -> TypeDefinition | None:
        return self.types.get(name)

    def names(self) -> list[str]:
        return list(self.types)
