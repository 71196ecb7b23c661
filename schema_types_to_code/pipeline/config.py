"""
Configuration for the type generation pipeline.

A single ``CodeGeneratorConfig`` is built once per run and passed to every
component.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from .errors import ConfigurationConflictError


class RemoveDuplicate(str, Enum):
    """Which kinds of types the structural deduplicator may fold."""

    NONE = "None"
    MODEL = "Model"  # Model and Output types
    INPUT = "Input"  # Input and Args types
    ALL = "All"


class ReExport(str, Enum):
    """Which index files the re-export step creates."""

    NONE = "None"
    DIRECTORIES = "Directories"  # One index per output directory
    ALL = "All"  # Directory indexes plus the root index


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when an output file already exists.
    """

    ERROR_IF_EXISTS = "error"  # Default: raise error if file exists
    FORCE = "force"  # Overwrite


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        mode: How to handle existing output files
        atomic_write: Whether to use atomic file writes
    """

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS
    atomic_write: bool = True


# Names that shadow GraphQL or TypeScript built-ins when used as type names
DEFAULT_RESERVED_TYPE_NAMES = [
    "Query",
    "Mutation",
    "Subscription",
    "String",
    "Int",
    "Float",
    "Boolean",
    "ID",
    "Date",
    "Object",
    "Error",
    "Promise",
    "Record",
    "Symbol",
    "JSON",
]

PATTERN_TOKENS = ("model", "name", "type")
_TOKEN_PATTERN = re.compile(r"\{([^{}]*)\}")

# camelCase option names, as written in generator option blocks -> attribute names
_OPTION_ALIASES = {
    "combineScalarFilters": "combine_scalar_filters",
    "atomicNumberOperations": "atomic_number_operations",
    "renameZooTypes": "rename_zoo_types",
    "removeDuplicateTypes": "remove_duplicate_types",
    "outputFilePattern": "output_file_pattern",
    "sharedDirectory": "shared_directory",
    "reExport": "reexport",
    "reservedTypeNames": "reserved_type_names",
    "renameTypes": "rename_types",
    "renameSuffix": "rename_suffix",
    "addGenerationComment": "add_generation_comment",
}

_BOOL_OPTIONS = frozenset({"combine_scalar_filters", "atomic_number_operations", "rename_zoo_types", "add_generation_comment"})


@dataclass
class CodeGeneratorConfig:
    """Configuration options for type generation."""

    # Merge nullable/nested scalar filter variants into one filter per scalar
    combine_scalar_filters: bool = False

    # Keep *FieldUpdateOperationsInput types (increment, decrement, ...)
    atomic_number_operations: bool = True

    # Rename types whose names collide with platform built-ins
    rename_zoo_types: bool = False

    # Fold structurally identical types
    remove_duplicate_types: RemoveDuplicate = RemoveDuplicate.NONE

    # Output path template, tokens: {model}, {name}, {type}
    output_file_pattern: str = "{model}/{name}.{type}.ts"

    # {model} value for types that belong to no model
    shared_directory: str = "prisma"

    # Index files to generate
    reexport: ReExport = ReExport.ALL

    # Names renamed to name + rename_suffix when rename_zoo_types is set
    reserved_type_names: list[str] = field(default_factory=lambda: list(DEFAULT_RESERVED_TYPE_NAMES))

    # Explicit renames, applied when rename_zoo_types is set; win over reserved names
    rename_types: dict[str, str] = field(default_factory=dict)

    rename_suffix: str = "Type"

    # Add generation comment at top of each file
    add_generation_comment: bool = True

    output: OutputConfig = field(default_factory=OutputConfig)

    def rename_table(self) -> dict[str, str]:
        """Build the rename table applied by the zoo type renamer."""
        table = {name: f"{name}{self.rename_suffix}" for name in self.reserved_type_names}
        table.update(self.rename_types)
        return table

    def pattern_tokens(self) -> set[str]:
        return set(_TOKEN_PATTERN.findall(self.output_file_pattern))

    def validate(self) -> None:
        """
        Check that the options can be reconciled.

        Raises:
            ConfigurationConflictError: On the first conflict found
        """
        pattern = self.output_file_pattern
        if not pattern or not pattern.strip():
            raise ConfigurationConflictError("output_file_pattern must not be empty")

        unknown = self.pattern_tokens() - set(PATTERN_TOKENS)
        if unknown:
            raise ConfigurationConflictError(
                f"output_file_pattern '{pattern}' uses unknown token(s) {sorted(unknown)}, expected {list(PATTERN_TOKENS)}"
            )
        if "{" in _TOKEN_PATTERN.sub("", pattern) or "}" in _TOKEN_PATTERN.sub("", pattern):
            raise ConfigurationConflictError(f"output_file_pattern '{pattern}' has unbalanced braces")
        if pattern.startswith("/") or pattern.endswith("/") or ".." in pattern.split("/"):
            raise ConfigurationConflictError(f"output_file_pattern '{pattern}' must be a relative path ending in a file name")
        if self.reexport is not ReExport.NONE and pattern.rsplit("/", 1)[-1] == "index.ts":
            raise ConfigurationConflictError(
                f"output_file_pattern '{pattern}' writes index.ts, which is reserved for re-exports (set reexport to None)"
            )

        if not self.shared_directory or "/" in self.shared_directory:
            raise ConfigurationConflictError(f"shared_directory '{self.shared_directory}' must be a single path segment")

        if self.rename_zoo_types:
            self._validate_rename_table()

    def _validate_rename_table(self) -> None:
        table = self.rename_table()
        targets: dict[str, str] = {}
        for old, new in table.items():
            if not new or old == new:
                raise ConfigurationConflictError(f"Rename of '{old}' must give a different, non-empty name")
            if new in table:
                raise ConfigurationConflictError(f"Rename '{old}' -> '{new}' chains into rename '{new}' -> '{table[new]}'")
            if new in targets:
                raise ConfigurationConflictError(f"Both '{targets[new]}' and '{old}' are renamed to '{new}'")
            targets[new] = old

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary.

        Accepts both the snake_case attribute names and the camelCase option
        names used in generator option blocks.
        """
        config = CodeGeneratorConfig()
        for k, v in d.items():
            k = _OPTION_ALIASES.get(k, k)
            if k == "output" and isinstance(v, dict):
                config.output = OutputConfig(
                    mode=_parse_choice(OutputMode, v.get("mode", OutputMode.ERROR_IF_EXISTS), "output.mode"),
                    atomic_write=_parse_bool(v.get("atomic_write", True), "output.atomic_write"),
                )
            elif k == "remove_duplicate_types":
                config.remove_duplicate_types = _parse_choice(RemoveDuplicate, v, k)
            elif k == "reexport":
                config.reexport = _parse_choice(ReExport, v, k)
            elif k in _BOOL_OPTIONS:
                setattr(config, k, _parse_bool(v, k))
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "combine_scalar_filters": self.combine_scalar_filters,
            "atomic_number_operations": self.atomic_number_operations,
            "rename_zoo_types": self.rename_zoo_types,
            "remove_duplicate_types": self.remove_duplicate_types.value,
            "output_file_pattern": self.output_file_pattern,
            "shared_directory": self.shared_directory,
            "reexport": self.reexport.value,
            "reserved_type_names": self.reserved_type_names,
            "rename_types": self.rename_types,
            "rename_suffix": self.rename_suffix,
            "add_generation_comment": self.add_generation_comment,
            "output": {
                "mode": self.output.mode.value,
                "atomic_write": self.output.atomic_write,
            },
        }


def _parse_bool(value, option: str) -> bool:
    if isinstance(value, bool):
        return value
    # Generator option blocks write `atomicNumberOperations = false`
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ConfigurationConflictError(f"Invalid value {value!r} for {option}, expected true or false")


def _parse_choice(enum_cls: type[Enum], value, option: str):
    if isinstance(value, enum_cls):
        return value
    # Accept "all", "ALL" and "All" alike
    for member in enum_cls:
        if str(value).lower() == member.value.lower():
            return member
    choices = [m.value for m in enum_cls]
    raise ConfigurationConflictError(f"Invalid value {value!r} for {option}, expected one of {choices}")
