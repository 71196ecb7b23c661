"""
Errors raised by the generation pipeline.

Every error here is fatal: the run aborts and no file is written.
"""

from __future__ import annotations


class GeneratorError(Exception):
    """Base class for all generation failures."""


class DefinitionFormatError(GeneratorError):
    """Raised when a definition document cannot be loaded."""


class ConfigurationConflictError(GeneratorError):
    """Raised when configuration options cannot be reconciled.

    Reported before any pass runs.
    """


class SchemaIncompatibilityError(GeneratorError):
    """Raised when two filter variants disagree on a shared field."""

    def __init__(self, type_name: str, other_type_name: str, field_name: str, detail: str = ""):
        self.type_name = type_name
        self.other_type_name = other_type_name
        self.field_name = field_name
        message = f"Cannot combine {type_name} with {other_type_name}: field '{field_name}' is incompatible"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class DanglingReferenceError(GeneratorError):
    """Raised when a reference points at a definition missing from the set.

    This always indicates a bug in a pass or in pass ordering.
    """

    def __init__(self, referrer: str, field_name: str, missing: str, stage: str = ""):
        self.referrer = referrer
        self.field_name = field_name
        self.missing = missing
        self.stage = stage
        where = f" after {stage}" if stage else ""
        super().__init__(f"{referrer}.{field_name} references unknown definition '{missing}'{where}")


class NamingCollisionError(GeneratorError):
    """Raised when two distinct declarations claim the same name or path."""

    def __init__(self, name: str, other_name: str, detail: str = ""):
        self.name = name
        self.other_name = other_name
        message = f"Naming collision between '{name}' and '{other_name}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
