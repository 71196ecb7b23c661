"""Schema Types to Code Generator

A Python package that turns the derived type definitions of a data model
(entity types, filter, create/update and aggregate inputs, outputs) into
a coherent, deduplicated set of TypeScript declaration files.
"""

__version__ = "1.0.0"

from .pipeline import (
    AtomicWriter,
    CodeGeneratorConfig,
    DefinitionSet,
    GeneratorError,
    OutputConfig,
    OutputMode,
    PipelineGenerator,
    ReExport,
    RemoveDuplicate,
    load_definitions,
    load_definitions_file,
)

__all__ = [
    "PipelineGenerator",
    "CodeGeneratorConfig",
    "OutputConfig",
    "OutputMode",
    "ReExport",
    "RemoveDuplicate",
    "DefinitionSet",
    "GeneratorError",
    "AtomicWriter",
    "load_definitions",
    "load_definitions_file",
]
