"""
Pipeline - definition set to TypeScript declarations.

This module provides a multi-phase architecture for generating typed
declaration files from a set of derived type definitions:

1. Phase 1 (Mutators): Combine scalar filters, strip atomic operations,
   rename zoo types and fold structural duplicates
2. Phase 2 (Assembly): Group declarations into virtual files, resolve
   cross-file imports and build re-export indexes
3. Phase 3 (Backend): Render virtual files to TypeScript
4. Phase 4 (Writer): Write the files atomically
"""

from __future__ import annotations

from .assembly import FileTree, IndexFile, VirtualFile, assemble_files
from .config import CodeGeneratorConfig, OutputConfig, OutputMode, ReExport, RemoveDuplicate
from .definitions import DefinitionSet, load_definitions, load_definitions_file
from .errors import (
    ConfigurationConflictError,
    DanglingReferenceError,
    DefinitionFormatError,
    GeneratorError,
    NamingCollisionError,
    SchemaIncompatibilityError,
)
from .generator import PipelineGenerator
from .mutators import mutate_definitions
from .writer import AtomicWriter

__all__ = [
    "PipelineGenerator",
    "CodeGeneratorConfig",
    "OutputConfig",
    "OutputMode",
    "ReExport",
    "RemoveDuplicate",
    "DefinitionSet",
    "FileTree",
    "IndexFile",
    "VirtualFile",
    "AtomicWriter",
    "assemble_files",
    "load_definitions",
    "load_definitions_file",
    "mutate_definitions",
    "GeneratorError",
    "ConfigurationConflictError",
    "DanglingReferenceError",
    "DefinitionFormatError",
    "NamingCollisionError",
    "SchemaIncompatibilityError",
]
