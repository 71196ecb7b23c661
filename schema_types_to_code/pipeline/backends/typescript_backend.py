"""
TypeScript backend.

Renders virtual files and index files to TypeScript source using Jinja2
templates. Declarations are plain classes and enums; framework decorators
are added by other tooling.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import jinja2

from ..assembly.nodes import FileTree, IndexFile, VirtualFile, relative_module
from ..config import CodeGeneratorConfig
from ..definitions.nodes import EnumDefinition, Field, ScalarRef, TypeDefinition, TypeKind, TypeRef, iter_refs

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


class TypeScriptBackend:
    """Renders the virtual file tree as TypeScript."""

    # Type mapping from schema scalars to TypeScript types
    TYPE_MAP: dict[str, str] = {
        "String": "string",
        "Int": "number",
        "Float": "number",
        "Decimal": "number | string",
        "BigInt": "bigint",
        "Boolean": "boolean",
        "DateTime": "Date | string",
        "Json": "any",
        "Bytes": "Buffer",
    }

    TEMPLATE_LANG: str = "typescript"

    FILE_EXTENSION: str = "ts"

    def __init__(self, config: CodeGeneratorConfig, generation_comment: str = ""):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
            generation_comment: Comment line heading every file, if enabled
        """
        self.config = config
        self.generation_comment = generation_comment if config.add_generation_comment else ""
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )
        self.prefix_template = self.jinja_env.get_template(f"prefix.{self.FILE_EXTENSION}.jinja2")
        self.class_template = self.jinja_env.get_template(f"class.{self.FILE_EXTENSION}.jinja2")
        self.enum_template = self.jinja_env.get_template(f"enum.{self.FILE_EXTENSION}.jinja2")
        self.index_template = self.jinja_env.get_template(f"index.{self.FILE_EXTENSION}.jinja2")

    def translate_type(self, type_ref: TypeRef) -> str:
        """
        Translate a type reference to a TypeScript type string.

        Args:
            type_ref: The type reference

        Returns:
            TypeScript type string
        """
        parts = []
        for ref in iter_refs(type_ref):
            if isinstance(ref, ScalarRef):
                translated = self.TYPE_MAP.get(ref.kind, "any")
            else:
                translated = ref.name
            for part in translated.split(" | "):
                if part not in parts:
                    parts.append(part)
        return " | ".join(parts)

    def translate_field(self, f: Field, kind: TypeKind) -> dict[str, str]:
        """Build the template context of one property."""
        type_str = self.translate_type(f.type_ref)
        if f.is_list:
            type_str = f"Array<{type_str}>"

        if kind in (TypeKind.INPUT, TypeKind.ARGS):
            marker = "?" if f.nullable else "!"
        else:
            marker = "!"
            if f.nullable:
                type_str = f"{type_str} | null"

        name = f.name if _IDENTIFIER.match(f.name) else f"'{f.name}'"
        return {"name": name, "marker": marker, "type": type_str}

    def _prepare_class_context(self, type_def: TypeDefinition) -> dict[str, Any]:
        return {
            "name": type_def.name,
            "properties": [self.translate_field(f, type_def.kind) for f in type_def.fields],
        }

    def render_file(self, virtual_file: VirtualFile) -> str:
        """
        Render one declaration file.

        Args:
            virtual_file: The virtual file

        Returns:
            TypeScript source
        """
        imports = sorted(
            (relative_module(virtual_file.path, target), sorted(names)) for target, names in virtual_file.required_imports.items()
        )
        output = self.prefix_template.render(generation_comment=self.generation_comment, imports=imports)

        for declaration in virtual_file.declarations:
            if isinstance(declaration, EnumDefinition):
                output += self.enum_template.render(name=declaration.name, values=declaration.values)
            else:
                output += self.class_template.render(**self._prepare_class_context(declaration))
        return output

    def render_index(self, index: IndexFile) -> str:
        """Render one index file, names sorted per module."""
        exports = sorted((relative_module(index.path, target), sorted(names)) for target, names in index.reexports.items() if names)
        return self.index_template.render(generation_comment=self.generation_comment, exports=exports)

    def render_tree(self, tree: FileTree) -> dict[str, str]:
        """
        Render every file of the tree.

        Returns:
            Mapping from relative path to source text
        """
        rendered = {path: self.render_file(virtual_file) for path, virtual_file in tree.files.items()}
        for path, index in tree.indexes.items():
            rendered[path] = self.render_index(index)
        logger.debug("Rendered %d files", len(rendered))
        return rendered

